from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from starlette.background import BackgroundTask
from app.schemas.tts import TTSRequest
from app.services.tts_service import UpstreamClient, UpstreamError, get_upstream_client, relay_tts
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/tts")
async def synthesize(request: Request, client: UpstreamClient = Depends(get_upstream_client)):
    """
    Gera áudio a partir de texto via provedor de TTS
    """
    try:
        body = TTSRequest.model_validate(await request.json())
        response = await relay_tts(body, client)
    except UpstreamError as e:
        await client.close()
        request.state.log_error = str(e)
        return PlainTextResponse("TTS service error", status_code=502)
    except Exception as e:
        await client.close()
        logger.error(f"Erro ao gerar áudio: {str(e)}", exc_info=True)
        request.state.log_error = str(e)
        return PlainTextResponse("TTS service error", status_code=500)

    # Fecha a sessão do provedor depois que o corpo foi enviado
    response.background = BackgroundTask(client.close)
    return response
