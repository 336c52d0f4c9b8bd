"""
Main module entry point.

This allows running the HTTP service as: python -m homegraph.main
"""

import uvicorn

from homegraph.main.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "homegraph.main.app:app",
        host=settings.service.host,
        port=settings.service.port,
        reload=settings.service.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
