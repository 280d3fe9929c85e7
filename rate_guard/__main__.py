"""Run the API with uvicorn: ``python -m rate_guard``."""

import uvicorn

from rate_guard.core.config import settings


def main() -> None:
    uvicorn.run(
        "rate_guard.main:app",
        host=settings.app.host,
        port=settings.app.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
