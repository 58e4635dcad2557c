"""Bee Bright backend entrypoint.

Run with:
  python -m beebright
"""

import logging

import uvicorn

from beebright.config import Settings


def main() -> None:
    settings = Settings()
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "beebright.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
    )

if __name__ == "__main__":
    main()
