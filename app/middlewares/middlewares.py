import logging

from fastapi.middleware.cors import CORSMiddleware

from app.config import config

logger = logging.getLogger(__name__)


def setup_middlewares(app):
    allow_origins = config.allowed_origins
    logger.info(f"Allowed CORS origins: {allow_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials="*" not in allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
