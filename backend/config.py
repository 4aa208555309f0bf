import dotenv
import os

dotenv.load_dotenv()

PORT = int(os.getenv("PORT", "3001"))
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() in ("1", "true", "yes")

if not PORT:
    raise ValueError("PORT is not set")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
# Set to e.g. https://openrouter.ai/api/v1 to route through an OpenAI-compatible provider
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL") or None
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.7"))
OPENAI_MAX_TOKENS = int(os.getenv("OPENAI_MAX_TOKENS", "2000"))

if not OPENAI_API_KEY:
    print("Warning: OPENAI_API_KEY is not set. Website generation will fail.")
