"""
FAQLens - Application Entry Point
==================================
FastAPI application factory.  Registers the route handlers from
``faqlens/src/api/routes.py``; ``main()`` serves the app with uvicorn on
``settings.HOST``/``settings.PORT``.

Usage:
    python -m faqlens.src.main
    uvicorn faqlens.src.main:app --port 3000
"""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from faqlens.config.settings import settings
from faqlens.src.api.routes import router
from faqlens.src.utils.logger import get_logger

logger = get_logger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="FAQLens", description="FAQ-augmented question answering on Gemini.")
    app.include_router(router)
    return app


app = create_app()


def main() -> None:
    logger.info("Server is running on port %d in %s mode", settings.PORT, settings.ENV)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
