import os
from dotenv import load_dotenv

load_dotenv()

APP_VERSION = os.getenv("APP_VERSION", "0.3.0")

LOG_LEVEL_FROM_ENV = os.getenv("LOG_LEVEL", "INFO").upper()

# API endpoint
GEMINI_API_BASE_URL = os.getenv("GEMINI_API_BASE_URL", "https://generativelanguage.googleapis.com")
GEMINI_API_VERSION = os.getenv("GEMINI_API_VERSION", "v1beta")

# Models
DEFAULT_MODEL = os.getenv("GEMINI_MODEL", "models/gemini-2.0-flash")
PRO_MODEL = os.getenv("GEMINI_PRO_MODEL", "models/gemini-2.0-pro")

# API key (GOOGLE_API_KEY is accepted for AI Studio setups)
GEMINI_API_KEY_ENV = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")

# Timeouts and limits
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "300"))
READ_TIMEOUT = float(os.getenv("READ_TIMEOUT", "60.0"))
MAX_CONNECTIONS = int(os.getenv("MAX_CONNECTIONS", "100"))
MAX_KEEPALIVE_CONNECTIONS = int(os.getenv("MAX_KEEPALIVE_CONNECTIONS", "20"))

# Streaming
SSE_DATA_PREFIX = "data:"
SSE_DONE_MARKER = "[DONE]"
