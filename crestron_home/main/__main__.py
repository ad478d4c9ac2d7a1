"""
Main module entry point.

This allows running the API as: python -m crestron_home.main
"""

import uvicorn

from crestron_home.main.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "crestron_home.main.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
