"""Message service package exports the ASGI `app` for convenience.

This lets you run: `uvicorn message_service:app`

The app is built on first access, so importing the package (as the CLI does)
does not read configuration.
"""
from message_service.main import create_app

__all__ = ["app", "create_app"]

_app = None


def __getattr__(name):
    global _app
    if name == "app":
        if _app is None:
            _app = create_app()
        return _app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
