"""Deterministic fingerprint of the behavior-relevant fields of a character."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping

from grounding_engine.config.constants import DEFINITION_HASH_LENGTH
from grounding_engine.models.domain import CharacterDefinition


def serialize_definition(definition: CharacterDefinition) -> str:
    """Compact JSON with lexicographically sorted keys."""
    return json.dumps(
        definition.to_dict(),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def definition_hash(record: Mapping | CharacterDefinition) -> str:
    """First 12 hex chars of SHA-256 over the serialized definition.

    Fields other than name, role, personality, instructions, knowledge and
    voice (ids, timestamps, stats) do not affect the result.
    """
    definition = (
        record
        if isinstance(record, CharacterDefinition)
        else CharacterDefinition.from_record(record)
    )
    digest = hashlib.sha256(serialize_definition(definition).encode("utf-8")).hexdigest()
    return digest[:DEFINITION_HASH_LENGTH]
