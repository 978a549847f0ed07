import os
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    THIRD_PARTY_TTS_URL: str = os.getenv("THIRD_PARTY_TTS_URL", "https://api.minimax.chat/v1/t2a_v2")
    THIRD_PARTY_GROUP_ID: str = os.getenv("THIRD_PARTY_GROUP_ID", "")
    THIRD_PARTY_TTS_KEY: str = os.getenv("THIRD_PARTY_TTS_KEY", "")
    TTS_MODEL: str = os.getenv("TTS_MODEL", "speech-2.5-hd-preview")
    TTS_USER_AGENT: str = os.getenv("TTS_USER_AGENT", "TTS-Proxy-Service/1.0")
    UPSTREAM_TIMEOUT_SECONDS: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", 300))
    CORS_ORIGIN: str = os.getenv("CORS_ORIGIN", "")
    # Token único ou lista JSON: ["token-a", "token-b"]
    PROXY_TOKEN: str = os.getenv("PROXY_TOKEN", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"

settings = Settings()
