"""FastAPI application entrypoint for pagekit."""

import logging

from fastapi import FastAPI

from pagekit.api.labels import router as labels_router
from pagekit.core.config import get_pagination_settings
from pagekit.core.errors import register_error_handlers
from pagekit.db import models as _models  # noqa: F401

logger = logging.getLogger(__name__)

app = FastAPI(title="pagekit")
register_error_handlers(app)
app.include_router(labels_router)

logger.info("pagekit configured with settings=%s", get_pagination_settings().safe_for_logging())


@app.get("/health")
def health() -> dict[str, str]:
    """Health check stub endpoint for service readiness."""
    return {"status": "ok"}
