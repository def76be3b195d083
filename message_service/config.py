"""Layered configuration with runtime refresh.

Sources, highest precedence first: command-line overrides, the OS environment
(relaxed binding, see :func:`message_service.utils.env_key_for`), and a
dotenv-style properties file. The provider keeps one immutable snapshot of the
layers and swaps it whole on :meth:`ConfigProvider.refresh`, so readers always
see either the old or the new snapshot.
"""
import logging
import os
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, NamedTuple, Optional, Set

from dotenv import dotenv_values

from message_service.utils import env_key_for, key_for_env

logger = logging.getLogger("message-service")

CONFIG_FILE_ENV = "MESSAGE_SERVICE_CONFIG_FILE"
DEFAULT_CONFIG_FILE = "application.env"


class ConfigSnapshot(NamedTuple):
    overrides: Mapping[str, Optional[str]]
    environ: Mapping[str, str]
    file_values: Mapping[str, Optional[str]]

    def resolve(self, key: str) -> Optional[str]:
        for value in (
            self.overrides.get(key),
            self.environ.get(env_key_for(key)),
            self.file_values.get(key),
        ):
            if value is not None:
                return value
        return None

    def keys(self) -> Set[str]:
        keys = set(self.overrides) | set(self.file_values)
        for name in self.environ:
            key = key_for_env(name)
            if key is not None:
                keys.add(key)
        return keys


def resolve_config_file(
    environ: Optional[Mapping[str, str]] = None, config_file: Optional[str] = None
) -> Path:
    if config_file:
        return Path(config_file)
    environ = os.environ if environ is None else environ
    candidate = environ.get(CONFIG_FILE_ENV)
    if candidate:
        return Path(candidate)
    return Path.cwd() / DEFAULT_CONFIG_FILE


class ConfigProvider:
    """Supplies the current value of a named setting."""

    def __init__(
        self,
        config_file: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        overrides: Optional[Mapping[str, str]] = None,
    ) -> None:
        # environ is kept by reference so refresh() sees later changes
        self._environ = os.environ if environ is None else environ
        self._config_file = (
            Path(config_file) if config_file else resolve_config_file(self._environ)
        )
        self._overrides = MappingProxyType(dict(overrides or {}))
        self._lock = threading.Lock()
        self._missing_logged = False

        try:
            file_values = self._read_file()
        except OSError:
            logger.exception("Could not read config file %s", self._config_file)
            file_values = {}
        self._snapshot = self._build(file_values)

    @property
    def config_file(self) -> Path:
        return self._config_file

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._snapshot.resolve(key)
        return default if value is None else value

    def keys(self) -> Set[str]:
        return self._snapshot.keys()

    def refresh(self) -> List[str]:
        """Reload the environment and file layers; return the keys that changed."""
        with self._lock:
            try:
                file_values = self._read_file()
            except OSError:
                logger.exception(
                    "Refresh failed reading %s; keeping previous configuration",
                    self._config_file,
                )
                return []
            old = self._snapshot
            new = self._build(file_values)
            self._snapshot = new

        changed = sorted(
            key for key in old.keys() | new.keys() if old.resolve(key) != new.resolve(key)
        )
        logger.info("Configuration refreshed, changed keys: %s", changed)
        return changed

    def _build(self, file_values: Dict[str, Optional[str]]) -> ConfigSnapshot:
        return ConfigSnapshot(
            overrides=self._overrides,
            environ=MappingProxyType(dict(self._environ)),
            file_values=MappingProxyType(file_values),
        )

    def _read_file(self) -> Dict[str, Optional[str]]:
        if not self._config_file.is_file():
            if not self._missing_logged:
                logger.warning(
                    "Config file not found; using environment only (looked for %s)",
                    self._config_file,
                )
                self._missing_logged = True
            return {}
        self._missing_logged = False
        # no ${VAR} expansion: the environment is its own layer
        return dict(dotenv_values(self._config_file, interpolate=False))
