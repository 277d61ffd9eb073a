"""Entrypoint: python -m discussion_service"""
from __future__ import annotations

import uvicorn

from discussion_service.config import settings
from discussion_service.log_config import build_log_config


def main() -> None:
    uvicorn.run(
        "discussion_service.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL,
        log_config=build_log_config(settings.LOG_LEVEL),
    )


if __name__ == "__main__":
    main()
