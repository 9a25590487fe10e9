from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import LLM_PROVIDER, OLLAMA_BASE_URL, OLLAMA_MODEL, cors_origins
from .routes import router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="AI Calendar")
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.include_router(router)
    logger.info("LLM provider=%s ollama=%s model=%s",
                LLM_PROVIDER, OLLAMA_BASE_URL, OLLAMA_MODEL)
    return app


app = create_app()
