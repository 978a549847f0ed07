"""
Classificação das respostas JSON do provedor de TTS.

O provedor pode devolver, com HTTP 200:
  - um erro de negócio em base_resp.status_code
  - uma URL para o áudio (audio_url, file_url ou download_url)
  - o áudio em hexadecimal em data.audio
A ordem de verificação é fixa e a primeira variante encontrada vale.
"""

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Union

# Campos de URL aceitos, em ordem de prioridade
AUDIO_URL_FIELDS = ("audio_url", "file_url", "download_url")

_HEX_RE = re.compile(r"\A(?:[0-9a-fA-F]{2})*\Z")


class HexDecodeError(ValueError):
    """O campo de áudio não é uma string hexadecimal válida."""
    pass


@dataclass(frozen=True)
class BusinessError:
    code: Any
    message: Optional[str] = None


@dataclass(frozen=True)
class AudioUrl:
    url: str
    field: str


@dataclass(frozen=True)
class HexAudio:
    hex: str


@dataclass(frozen=True)
class Unrecognized:
    keys: List[str]


UpstreamPayload = Union[BusinessError, AudioUrl, HexAudio, Unrecognized]


def classify_payload(data: Any) -> UpstreamPayload:
    if not isinstance(data, dict):
        return Unrecognized(keys=[])

    base_resp = data.get("base_resp")
    if isinstance(base_resp, dict):
        code = base_resp.get("status_code")
        if code not in (None, 0):
            return BusinessError(code=code, message=base_resp.get("status_msg"))

    for field in AUDIO_URL_FIELDS:
        url = data.get(field)
        if url:
            return AudioUrl(url=str(url), field=field)

    inner = data.get("data")
    if isinstance(inner, dict):
        audio = inner.get("audio")
        if isinstance(audio, str) and audio:
            return HexAudio(hex=audio)

    return Unrecognized(keys=list(data.keys()))


def decode_hex_audio(text: str) -> bytes:
    """Converte cada par de dígitos hexadecimais em um byte."""
    if not isinstance(text, str) or not _HEX_RE.match(text):
        raise HexDecodeError("áudio hexadecimal inválido")
    return bytes.fromhex(text)
