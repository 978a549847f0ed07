from pydantic import BaseModel
from typing import Any, Optional

class TTSRequest(BaseModel):
    # Valores repassados como vieram; o provedor valida
    text: Optional[Any] = None
    voice: Optional[Any] = None
    speed: Optional[Any] = None
    pitch: Optional[Any] = None
    vol: Optional[Any] = None
    sample_rate: Optional[Any] = None
    format: Optional[Any] = None
    language: Optional[Any] = None
