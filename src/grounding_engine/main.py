"""Entrypoint: run the Grounding Engine server."""

import uvicorn

from grounding_engine.api.app import create_app
from grounding_engine.config.settings import Settings


def main() -> None:
    settings = Settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
