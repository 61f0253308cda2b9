"""Entrypoint: run the audit query server."""

import uvicorn

from audit_rag.api.app import create_app
from audit_rag.config.settings import Settings


def main() -> None:
    settings = Settings()
    app = create_app()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
