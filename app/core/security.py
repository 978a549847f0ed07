"""
Controle de acesso do proxy: origem (CORS) e token do cliente.

A origem é verificada antes do token; o preflight não exige token.
Falhas de token respondem sempre "Unauthorized".
"""

import hmac
import json
import logging
from typing import Iterable, Optional, Tuple

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Proxy-Token"
PREFLIGHT_MAX_AGE = "86400"


class TokenSet:
    """Conjunto de tokens aceitos pelo proxy (um ou vários)."""

    def __init__(self, tokens: Iterable[str] = ()):
        self._tokens: Tuple[str, ...] = tuple(tokens)

    @classmethod
    def parse(cls, raw: Optional[str]) -> "TokenSet":
        """
        Interpreta PROXY_TOKEN: lista JSON de strings ou um token único.
        Valor inválido gera um conjunto vazio (ninguém passa).
        """
        if not raw or not raw.strip():
            return cls()

        value = raw.strip()
        if not value.startswith("["):
            return cls([value])

        try:
            parsed = json.loads(value)
        except ValueError as e:
            logger.warning(f"PROXY_TOKEN não é uma lista JSON válida: {e}")
            return cls()

        if not isinstance(parsed, list):
            logger.warning("PROXY_TOKEN deve ser uma lista JSON de strings")
            return cls()

        return cls(t for t in parsed if isinstance(t, str) and t)

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, token: object) -> bool:
        if not isinstance(token, str) or not token:
            return False
        # Comparação em tempo constante
        matched = False
        for expected in self._tokens:
            if hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
                matched = True
        return matched


def cors_headers(origin: str) -> dict:
    return {"Access-Control-Allow-Origin": origin}


def preflight_response(origin: str) -> Response:
    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": "POST, OPTIONS",
            "Access-Control-Allow-Headers": f"Content-Type, {TOKEN_HEADER}",
            "Access-Control-Max-Age": PREFLIGHT_MAX_AGE,
        },
    )


def check_origin(request: Request, allowed_origin: str) -> Optional[Response]:
    """
    Verifica o header Origin e responde ao preflight.
    Retorna uma resposta final ou None para seguir adiante.
    """
    origin = request.headers.get("Origin")

    if not origin:
        return PlainTextResponse("Unauthorized: Origin header required", status_code=401)

    if not allowed_origin or origin != allowed_origin:
        return PlainTextResponse("Unauthorized: Invalid origin", status_code=401)

    if request.method == "OPTIONS":
        return preflight_response(allowed_origin)

    return None


def check_token(request: Request, tokens: TokenSet, allowed_origin: str) -> Optional[Response]:
    """Valida o X-Proxy-Token contra os tokens configurados."""
    token = request.headers.get(TOKEN_HEADER)

    if token not in tokens:
        return PlainTextResponse(
            "Unauthorized",
            status_code=401,
            headers=cors_headers(allowed_origin),
        )

    return None
