from dotenv import load_dotenv
import os

# Load .env from project root
load_dotenv()

# Expose config via simple attributes
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
LLM_MODEL = os.getenv("LLM_MODEL", "gemini-2.5-flash")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Context budget: kept below Gemini's ~250k input-token quota
CONTEXT_TOKEN_LIMIT = int(os.getenv("CONTEXT_TOKEN_LIMIT", "240000"))
CHARS_PER_TOKEN = 4
HISTORY_WINDOW = 10

# Generation defaults and slider bounds
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_OUTPUT_TOKENS = 2048
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 1.0
MIN_OUTPUT_TOKENS = 100
MAX_OUTPUT_TOKENS = 8000

# Upload
ALLOWED_EXTENSIONS = ["txt", "md", "json", "csv", "js", "ts", "py", "html", "css", "pdf"]
