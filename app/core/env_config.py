"""
Environment variables configuration template.
Copy this file to .env and replace the values with your actual credentials.
"""

ENV_TEMPLATE = """
# Provedor de TTS
THIRD_PARTY_TTS_URL=https://api.minimax.chat/v1/t2a_v2
THIRD_PARTY_GROUP_ID=your_group_id
THIRD_PARTY_TTS_KEY=your_tts_api_key
TTS_MODEL=speech-2.5-hd-preview
UPSTREAM_TIMEOUT_SECONDS=300

# Acesso ao proxy
CORS_ORIGIN=https://your-frontend.example.com
# Token único ou lista JSON: ["token-a","token-b"]
PROXY_TOKEN=your_proxy_token

# Logging
LOG_LEVEL=INFO
"""

def create_env_file(path: str = ".env"):
    """Create a new .env file with template values."""
    with open(path, 'w') as f:
        f.write(ENV_TEMPLATE.strip() + "\n")

if __name__ == '__main__':
    create_env_file()
