import os
from dotenv import load_dotenv
import logging

_PACKAGE_ROOT = os.path.join(os.path.dirname(__file__), "..")

# Load .env file if it exists (for local development)
env_path = os.path.join(_PACKAGE_ROOT, ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

if os.path.exists(env_path):
    logger.info("Loaded .env file for local development")
else:
    logger.info("No .env file found, using environment variables")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
REPLICATE_API_TOKEN = os.getenv("REPLICATE_API_TOKEN", "")
REPLICATE_MODEL_VERSION = os.getenv("REPLICATE_MODEL_VERSION", "")
ELEVENLABS_API_KEY = os.getenv("ELEVENLABS_API_KEY", "")
ELEVENLABS_VOICE_ID = os.getenv("ELEVENLABS_VOICE_ID", "")

OPENAI_STORY_MODEL = os.getenv("OPENAI_STORY_MODEL", "gpt-3.5-turbo")
OPENAI_TRANSCRIBE_MODEL = os.getenv("OPENAI_TRANSCRIBE_MODEL", "whisper-1")

STORY_MAX_TOKENS = int(os.getenv("STORY_MAX_TOKENS", "500"))
CONTINUATION_MAX_TOKENS = int(os.getenv("CONTINUATION_MAX_TOKENS", "300"))
CHOICES_MAX_TOKENS = int(os.getenv("CHOICES_MAX_TOKENS", "100"))

# Number of user decisions after which the next continuation concludes the story
STORY_MAX_DECISIONS = int(os.getenv("STORY_MAX_DECISIONS", "2"))
CHOICE_MAX_WORDS = int(os.getenv("CHOICE_MAX_WORDS", "20"))

REPLICATE_POLL_INTERVAL_MS = int(os.getenv("REPLICATE_POLL_INTERVAL_MS", "1500"))
REPLICATE_POLL_TIMEOUT_S = int(os.getenv("REPLICATE_POLL_TIMEOUT_S", "120"))

STATIC_DIR = os.path.abspath(os.getenv("STATIC_DIR", os.path.join(_PACKAGE_ROOT, "public")))
GENERATED_SUBDIR = "generated"
GENERATED_DIR = os.path.join(STATIC_DIR, GENERATED_SUBDIR)
UPLOAD_DIR = os.path.abspath(os.getenv("UPLOAD_DIR", os.path.join(_PACKAGE_ROOT, "uploads")))

# Comma-separated list of allowed origins for CORS (e.g., "https://app.example.com,http://localhost:3000").
_allowed_origins_env = os.getenv("ALLOWED_ORIGINS", "").strip()
if _allowed_origins_env:
    ALLOWED_ORIGINS = [o.strip() for o in _allowed_origins_env.split(",") if o.strip()]
else:
    ALLOWED_ORIGINS = ["*"]

def has_all_keys() -> bool:
    keys_present = all([OPENAI_API_KEY, REPLICATE_API_TOKEN, ELEVENLABS_API_KEY, ELEVENLABS_VOICE_ID])
    if not keys_present:
        missing = []
        if not OPENAI_API_KEY: missing.append("OPENAI_API_KEY")
        if not REPLICATE_API_TOKEN: missing.append("REPLICATE_API_TOKEN")
        if not ELEVENLABS_API_KEY: missing.append("ELEVENLABS_API_KEY")
        if not ELEVENLABS_VOICE_ID: missing.append("ELEVENLABS_VOICE_ID")
        logger.warning(f"Missing API keys: {', '.join(missing)}")
    return keys_present
