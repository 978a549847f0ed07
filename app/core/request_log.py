import json
import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger("app.access")

def log_request(method: str, url: str, status: int, duration_ms: int, error: Optional[str] = None):
    """
    Registra uma linha JSON por requisição.
    Falha de log nunca interrompe a resposta.
    """
    log_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "method": method,
        "url": url,
        "status": status,
        "duration": f"{duration_ms}ms",
    }
    if error:
        log_data["error"] = error

    try:
        logger.info(json.dumps(log_data, ensure_ascii=False))
    except (TypeError, ValueError) as e:
        logger.warning(f"Falha ao registrar requisição {method} {url}: {e}")
