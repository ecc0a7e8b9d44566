"""Task Lifecycle Service - Entry Point.

Запускает FastAPI приложение через uvicorn.
"""

import uvicorn

from task_lifecycle.core.config import get_settings


def main() -> None:
    """Запустить Task Lifecycle Service."""
    settings = get_settings()
    uvicorn.run(
        "task_lifecycle.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_level=settings.log.level.lower(),
        access_log=settings.debug,
    )


if __name__ == "__main__":
    main()
