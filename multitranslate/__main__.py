"""Allow running the application with `python -m multitranslate`."""

from __future__ import annotations

import logging

import uvicorn

from .core.settings import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "multitranslate.main:app",
        host="0.0.0.0",
        port=8080,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":
    main()
