import uvicorn

from products_api.core.app_factory import create_app
from products_api.core.config import settings

app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(app, host=settings.app.host, port=settings.app.port, log_config=None)


if __name__ == "__main__":
    run()
