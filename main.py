"""
ThreadNotes server entry point.

Run with: python main.py

Bind address, port and reload come from THREADNOTES_SERVER_* settings
(environment, .env). Logging and the database are configured by the app
lifespan from the same Config.
"""

import uvicorn

from threadnotes.config import Config


def main() -> None:
    config = Config.from_env()
    uvicorn.run(
        "app:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.reload,
        log_level=config.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
