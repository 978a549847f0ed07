import asyncio
import aiohttp
import json
import logging
from typing import AsyncIterator, Dict, Optional
from fastapi.responses import Response, StreamingResponse
from app.core.config import settings
from app.schemas.tts import TTSRequest
from app.services.tts_response import (
    AudioUrl,
    BusinessError,
    HexAudio,
    HexDecodeError,
    classify_payload,
    decode_hex_audio,
)

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------
# Configurações fixas
DEFAULT_VOICE = "Boyan_new_platform"
DEFAULT_SPEED = 1
DEFAULT_PITCH = 0
DEFAULT_VOL = 1
DEFAULT_SAMPLE_RATE = 32000
BITRATE = 128000
DEFAULT_FORMAT = "mp3"
DEFAULT_LANGUAGE = "auto"

AUDIO_CACHE_CONTROL = "no-cache, no-store, must-revalidate"
DEFAULT_CACHE_CONTROL = "no-cache"
CHUNK_SIZE = 64 * 1024
# -------------------------------------------------------------------


class UpstreamError(Exception):
    """Falha do provedor; o detalhe fica só no log."""
    pass


def _default(value, fallback):
    return fallback if value is None else value


def build_payload(request: TTSRequest, model: Optional[str] = None) -> Dict:
    """
    Monta o corpo enviado ao provedor a partir do pedido do cliente.
    """
    voice_id = request.voice or DEFAULT_VOICE

    return {
        "model": model or settings.TTS_MODEL,
        "text": request.text,
        "timber_weights": [{"voice_id": voice_id, "weight": 100}],
        "voice_setting": {
            "voice_id": voice_id,
            "speed": _default(request.speed, DEFAULT_SPEED),
            "pitch": _default(request.pitch, DEFAULT_PITCH),
            "vol": _default(request.vol, DEFAULT_VOL),
            "latex_read": False,
        },
        "audio_setting": {
            "sample_rate": _default(request.sample_rate, DEFAULT_SAMPLE_RATE),
            "bitrate": BITRATE,
            "format": _default(request.format, DEFAULT_FORMAT),
        },
        "language_boost": _default(request.language, DEFAULT_LANGUAGE),
    }


def is_success(status: int) -> bool:
    return 200 <= status < 300


class UpstreamClient:
    """
    Cliente HTTP do provedor. Uma sessão por requisição, fechada
    depois que a resposta (ou o stream) termina.
    """

    def __init__(self):
        self.url = settings.THIRD_PARTY_TTS_URL
        self.group_id = settings.THIRD_PARTY_GROUP_ID
        self.api_key = settings.THIRD_PARTY_TTS_KEY
        self._session: Optional[aiohttp.ClientSession] = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=settings.UPSTREAM_TIMEOUT_SECONDS)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def synthesize(self, payload: Dict) -> aiohttp.ClientResponse:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "User-Agent": settings.TTS_USER_AGENT,
        }
        params = {"GroupId": self.group_id}
        logger.info(f"Gerando áudio com: Modelo={payload.get('model')}, Voice={payload['voice_setting']['voice_id']}")
        return await self._get_session().post(self.url, headers=headers, params=params, json=payload)

    async def fetch(self, url: str) -> aiohttp.ClientResponse:
        return await self._get_session().get(url)

    async def close(self):
        if self._session is not None and not self._session.closed:
            await self._session.close()


def get_upstream_client() -> UpstreamClient:
    return UpstreamClient()


async def iter_body(response, client: UpstreamClient) -> AsyncIterator[bytes]:
    """Repassa o corpo do provedor em blocos, sem bufferizar tudo."""
    try:
        async for chunk in response.content.iter_chunked(CHUNK_SIZE):
            yield chunk
    finally:
        response.close()
        await client.close()


def stream_response(response, client: UpstreamClient, content_type: str, cache_control: str) -> StreamingResponse:
    return StreamingResponse(
        iter_body(response, client),
        status_code=200,
        headers={"Content-Type": content_type, "Cache-Control": cache_control},
    )


async def relay_tts(request: TTSRequest, client: UpstreamClient) -> Response:
    """
    Chama o provedor e normaliza a resposta em áudio para o cliente.
    Levanta UpstreamError para qualquer falha do provedor.
    """
    response = await client.synthesize(build_payload(request))

    if not is_success(response.status):
        error_text = (await response.read()).decode("utf-8", errors="replace")
        logger.error(f"Erro do provedor de TTS: status={response.status}, body={error_text}")
        raise UpstreamError(f"upstream status {response.status}")

    content_type = response.headers.get("Content-Type")
    normalized = (content_type or "").lower()

    if normalized.startswith("audio/"):
        return stream_response(response, client, content_type, AUDIO_CACHE_CONTROL)

    if "application/json" in normalized:
        raw = await response.read()
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Resposta JSON do provedor não pôde ser interpretada; repassando corpo bruto")
            return Response(
                content=raw,
                status_code=200,
                headers={"Content-Type": content_type, "Cache-Control": DEFAULT_CACHE_CONTROL},
            )
        return await _relay_json(data, client)

    return stream_response(
        response,
        client,
        content_type or "application/octet-stream",
        DEFAULT_CACHE_CONTROL,
    )


async def _relay_json(data, client: UpstreamClient) -> Response:
    payload = classify_payload(data)

    if isinstance(payload, BusinessError):
        logger.error(f"Erro de negócio do provedor: code={payload.code}, msg={payload.message}")
        raise UpstreamError(f"business error {payload.code}")

    if isinstance(payload, AudioUrl):
        logger.info(f"Buscando áudio em {payload.field}")
        try:
            content = await client.fetch(payload.url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Falha ao buscar áudio em {payload.url}: {e}")
            raise UpstreamError("audio url unreachable") from e

        if not is_success(content.status):
            content.close()
            logger.error(f"Falha ao buscar áudio em {payload.url}: status={content.status}")
            raise UpstreamError(f"audio url status {content.status}")

        audio_type = content.headers.get("Content-Type") or "audio/mpeg"
        return stream_response(content, client, audio_type, AUDIO_CACHE_CONTROL)

    if isinstance(payload, HexAudio):
        try:
            audio = decode_hex_audio(payload.hex)
        except HexDecodeError as e:
            logger.error(f"Áudio hexadecimal inválido ({len(payload.hex)} caracteres)")
            raise UpstreamError("invalid hex audio") from e

        return Response(
            content=audio,
            status_code=200,
            media_type="audio/mpeg",
            headers={"Cache-Control": AUDIO_CACHE_CONTROL},
        )

    logger.error(f"Formato de resposta desconhecido, chaves: {payload.keys}")
    raise UpstreamError(f"unrecognized payload keys {payload.keys}")
