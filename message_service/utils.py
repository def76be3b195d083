from typing import Any, Optional


def env_key_for(key: str) -> str:
    """Return the environment variable name bound to a property key.

    Relaxed binding: ``message`` -> ``MESSAGE``, ``app.greeting-text`` ->
    ``APP_GREETINGTEXT``.
    """
    return key.replace("-", "").replace(".", "_").upper()


def key_for_env(name: str) -> Optional[str]:
    """Inverse of :func:`env_key_for`, or None if the name does not bind back."""
    key = name.lower().replace("_", ".")
    if env_key_for(key) != name:
        return None
    return key


def model_to_dict(m: Any) -> dict:
    """Return a JSON-ready dict for a Pydantic model."""
    return m.model_dump(mode="json")
