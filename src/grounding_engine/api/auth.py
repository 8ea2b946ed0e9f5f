"""JWT authentication: API keys identify authors, tokens carry the author id."""

from __future__ import annotations

import time

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from grounding_engine.api.dependencies import get_settings
from grounding_engine.config.settings import Settings
from grounding_engine.observability.logger import get_logger

logger = get_logger("auth")

router = APIRouter(prefix="/auth", tags=["auth"])
security = HTTPBearer(auto_error=False)


class TokenRequest(BaseModel):
    api_key: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def issue_token(author_id: str, settings: Settings) -> str:
    now = int(time.time())
    payload = {
        "sub": author_id,
        "iat": now,
        "exp": now + settings.jwt_expiry_minutes * 60,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


@router.post("/token", response_model=TokenResponse)
async def create_token(
    body: TokenRequest,
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    """Exchange an API key for a JWT whose subject is the key's author id."""
    authors = settings.api_key_authors
    if not authors:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication not configured",
        )

    author_id = authors.get(body.api_key)
    if author_id is None:
        logger.warning("invalid_api_key_attempt")
        raise _unauthenticated("Invalid API key")

    logger.info("token_issued", author_id=author_id, expiry_minutes=settings.jwt_expiry_minutes)
    return TokenResponse(
        access_token=issue_token(author_id, settings),
        expires_in=settings.jwt_expiry_minutes * 60,
    )


async def verify_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> dict:
    """FastAPI dependency: validate the bearer JWT and return its payload."""
    if credentials is None:
        raise _unauthenticated("Authentication required")
    settings: Settings = request.app.state.settings

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise _unauthenticated("Token has expired")
    except jwt.InvalidTokenError:
        raise _unauthenticated("Invalid token")

    if not payload.get("sub"):
        raise _unauthenticated("Token has no subject")
    return payload


def current_author(payload: dict) -> str:
    return payload["sub"]
