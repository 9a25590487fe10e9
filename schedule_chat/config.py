from __future__ import annotations

import os
import pathlib
import re

LLM_DEBUG = os.getenv("LLM_DEBUG", "0") == "1"

TIME_HHMM_RE = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")
EPISODE_COUNT_RE = re.compile(r"(\d+)\s*episodes?", re.IGNORECASE)

# -------------------------
# LLM 설정
# -------------------------
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "ollama").strip().lower() or "ollama"
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434").rstrip("/")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama2")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "").strip() or None
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

_timeout_raw = os.getenv("LLM_REQUEST_TIMEOUT", "").strip()
LLM_REQUEST_TIMEOUT = float(_timeout_raw) if _timeout_raw else None

# -------------------------
# 서버/프론트엔드
# -------------------------
BASE_DIR = pathlib.Path(__file__).resolve().parent.parent
FRONTEND_DIR = pathlib.Path(os.getenv("FRONTEND_DIR", str(BASE_DIR / "frontend")))
API_BASE = os.getenv("API_BASE", "/api")

CORS_ALLOW_ORIGINS = os.getenv("CORS_ALLOW_ORIGINS", "")
cors_origins: list[str] = [
    origin.strip() for origin in CORS_ALLOW_ORIGINS.split(",") if origin.strip()
]

# -------------------------
# 런타임 제한/기본값
# -------------------------
DEFAULT_RECURRENCE_COUNT = 30
MAX_EPISODE_COUNT = 366
MAX_CHAT_MESSAGES = 200

CONNECTION_REFUSED_MESSAGE = (
    "Could not connect to Ollama. Please ensure the Ollama server is running.")
