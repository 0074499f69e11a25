from fastapi import Depends, Request

from ...domain.errors import TokenMissing
from ...infrastructure.security import TokenService
from .dependencies import get_token_service


def extract_bearer_token(header: str | None) -> str | None:
    if not header:
        return None
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_identity(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> dict:
    """Проверяет Bearer-токен и кладёт claims в request.state.identity."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise TokenMissing()
    claims = tokens.verify(token)
    request.state.identity = claims
    return claims


def get_user_id(claims: dict = Depends(require_identity)) -> str:
    return claims["sub"]
