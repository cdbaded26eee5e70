import uvicorn

from l10nbot.core.app import create_app
from l10nbot.core.config import get_settings

app = create_app()


def run() -> None:
    """Entrypoint for `l10nbot-api` script."""
    settings = get_settings()
    uvicorn.run(
        "l10nbot.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        factory=False,
    )


if __name__ == "__main__":
    run()
