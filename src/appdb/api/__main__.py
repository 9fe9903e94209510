"""
appdb.api.__main__

Entrypoint for `python -m appdb.api`.
"""

from __future__ import annotations

import uvicorn

from appdb.api.app import create_app
from appdb.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# Configuration comes entirely from `NEXT_*` env vars; a missing
# NEXT_DATABASE_URL stops the process before uvicorn binds.
