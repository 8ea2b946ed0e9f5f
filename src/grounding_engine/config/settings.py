"""Central configuration via Pydantic Settings. All values driven by env vars."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # API Keys
    openai_api_key: str = ""
    google_api_key: str = ""

    # Embedding
    embedding_provider: Literal["openai", "gemini"] = "openai"
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    embedding_cache_enabled: bool = True

    # Chunking
    chunk_size: int = 400
    chunk_overlap: int = 50
    min_chunk_chars: int = 50
    min_content_chars: int = 100

    # Indexing (external rate limit)
    index_batch_size: int = 10
    index_batch_delay_ms: int = 500

    # Retrieval
    similarity_threshold: float = 0.3
    search_top_k: int = 5

    # Evaluation classification
    pass_threshold: int = 28
    rating_excellent_min: int = 32
    rating_good_min: int = 28
    rating_acceptable_min: int = 21
    rating_needs_work_min: int = 14

    # Multi-judge aggregation
    variance_threshold: float = 1.0
    attention_threshold: float = 4.0
    primary_judge_id: str = "arlea"
    concern_placeholder: str = "List any specific concerns"
    low_score_threshold: float = 3.0
    max_insight_suggestions: int = 5

    # Drift monitoring
    drift_drop_threshold: float = 1.0
    drift_min_history: int = 3
    safety_dimensions: str = "boundaryAwareness,ageAppropriateness"  # comma-separated
    safety_min_score: float = 4.0

    # Regression against golden conversations
    regression_tolerance: float = 0.5

    # Storage paths
    sqlite_db_path: str = "data/grounding.db"
    embedding_cache_db_path: str = "data/embedding_cache.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    log_json: bool = False

    # Auth / JWT
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expiry_minutes: int = 60
    api_keys: str = ""  # comma-separated "api_key=author_id" pairs

    # Rate limiting
    rate_limit_requests_per_minute: int = 60
    index_rate_limit_per_minute: int = 6

    model_config = {"env_file": ".env", "env_prefix": "GROUNDING_"}

    @property
    def safety_dimension_set(self) -> frozenset[str]:
        return frozenset(d.strip() for d in self.safety_dimensions.split(",") if d.strip())

    @property
    def api_key_authors(self) -> dict[str, str]:
        """Map each configured API key to the author id it authenticates as."""
        mapping: dict[str, str] = {}
        for pair in self.api_keys.split(","):
            key, sep, author_id = pair.strip().partition("=")
            if key and sep and author_id:
                mapping[key.strip()] = author_id.strip()
        return mapping
