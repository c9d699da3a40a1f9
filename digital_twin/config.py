"""
Application settings, read from the environment (and a .env file if present).
"""

import os
from dotenv import load_dotenv

from .scheduling.core.constants import DEFAULT_START_HOUR, DEFAULT_END_HOUR, DEFAULT_WORK_DAYS
from .scheduling.core.working_hours import WorkingHours

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./digital_twin.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Working hours
WORK_START_HOUR = int(os.getenv("WORK_START_HOUR", DEFAULT_START_HOUR))
WORK_END_HOUR = int(os.getenv("WORK_END_HOUR", DEFAULT_END_HOUR))
WORK_DAYS = [
    int(day) for day in os.getenv("WORK_DAYS", ",".join(str(d) for d in DEFAULT_WORK_DAYS)).split(",")
    if day.strip()
]

# Time zone name sent to Google with inserted events
CALENDAR_TIMEZONE = os.getenv("CALENDAR_TIMEZONE", "UTC")

# LLM providers, tried in this order
OLLAMA_URL = os.getenv("OLLAMA_URL", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo-0125")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))

# Google OAuth / Calendar
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET")
GOOGLE_REDIRECT_URI = os.getenv("GOOGLE_REDIRECT_URI", "http://localhost:8000/auth/google/callback")
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


def default_working_hours() -> WorkingHours:
    """Working hours from the environment. Validated when a run starts, not here."""
    return WorkingHours(start_hour=WORK_START_HOUR, end_hour=WORK_END_HOUR, work_days=WORK_DAYS)
