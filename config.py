import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Database ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./travelbuddy.db")

# --- Auth ---
JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", "7"))
AUTH_COOKIE_NAME = "auth-token"
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

# Paths that always need a signed token (gateway allowlist)
PROTECTED_PREFIXES = [
    p.strip()
    for p in os.getenv(
        "PROTECTED_PREFIXES",
        "/profile,/wishlist,/buddies,/chats,/chat-buddies,/todos,/reviews,/groups,/admin",
    ).split(",")
    if p.strip()
]

# Browser origins allowed to call the API. With explicit origins the
# auth-token cookie is accepted cross-origin; with "*" clients send a Bearer header.
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
CORS_ALLOW_CREDENTIALS = "*" not in CORS_ORIGINS

# --- Mail (trip creation notice) ---
GMAIL_USER = os.getenv("GMAIL_USER")
GMAIL_PASS = os.getenv("GMAIL_PASS")
MAIL_FROM = os.getenv("MAIL_FROM", GMAIL_USER or "noreply@travelbuddy.local")
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "465"))

# --- Third party APIs ---
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
RAPIDAPI_KEY = os.getenv("RAPIDAPI_KEY")
RAPIDAPI_HOST = os.getenv("RAPIDAPI_HOST", "tripadvisor16.p.rapidapi.com")

# --- Push notifications ---
FIREBASE_CREDENTIALS_PATH = os.getenv(
    "FIREBASE_CREDENTIALS_PATH",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "serviceAccountKey.json"),
)
GOOGLE_APPLICATION_CREDENTIALS = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

# --- Logging ---
API_LOG_PATH = os.getenv("API_LOG_PATH")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
