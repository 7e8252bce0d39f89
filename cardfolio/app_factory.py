"""Entry point for uvicorn/gunicorn: ``uvicorn cardfolio.app_factory:app``."""
from cardfolio.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
