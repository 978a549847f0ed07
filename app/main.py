"""
Proxy autenticado de TTS.

Run: uvicorn app.main:app --host 0.0.0.0 --port 8000
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import tts
from app.core.config import settings
from app.core.request_log import log_request
from app.core.security import TokenSet, check_origin, check_token

# Configurar logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="TTS Proxy", docs_url=None, redoc_url=None, openapi_url=None)

app.include_router(tts.router, prefix="/api", tags=["TTS"])

HTTP_ERROR_TEXT = {
    404: "Not Found",
    405: "Method not allowed",
}


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(
        HTTP_ERROR_TEXT.get(exc.status_code, str(exc.detail)),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.middleware("http")
async def access_gate(request: Request, call_next):
    """Valida origem e token antes de qualquer rota."""
    allowed_origin = settings.CORS_ORIGIN

    rejection = check_origin(request, allowed_origin)
    if rejection is not None:
        return rejection

    rejection = check_token(request, TokenSet.parse(settings.PROXY_TOKEN), allowed_origin)
    if rejection is not None:
        return rejection

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        request.state.log_error = str(e)
        response = PlainTextResponse("Internal server error", status_code=500)

    response.headers["Access-Control-Allow-Origin"] = allowed_origin
    return response


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    start = time.monotonic()
    response = await call_next(request)
    duration_ms = int((time.monotonic() - start) * 1000)
    log_request(
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        getattr(request.state, "log_error", None),
    )
    return response
