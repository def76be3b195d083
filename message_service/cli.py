"""Process entry point: `python -m message_service`."""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from typing import List, Optional

import uvicorn

from message_service.config import ConfigProvider, resolve_config_file
from message_service.handler import MESSAGE_KEY
from message_service.main import create_app

logger = logging.getLogger("message-service")

REFRESH_THREAD_NAME = "config-refresh"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Serve the configured message over HTTP.",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address.")
    parser.add_argument("--port", type=int, default=8080, help="Bind port.")
    parser.add_argument(
        "--config-file",
        help="Properties file to read (default: $MESSAGE_SERVICE_CONFIG_FILE or ./application.env).",
    )
    parser.add_argument(
        "--message",
        help="Override the `message` setting for the life of the process.",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
    )
    return parser


def build_provider(args: argparse.Namespace) -> ConfigProvider:
    overrides = {}
    if args.message is not None:
        overrides[MESSAGE_KEY] = args.message
    return ConfigProvider(
        config_file=resolve_config_file(config_file=args.config_file),
        overrides=overrides,
    )


def install_reload_signal(config: ConfigProvider) -> bool:
    """Refresh configuration on SIGHUP. Returns False where SIGHUP does not exist.

    The handler runs on the main thread, possibly while that thread is inside
    ``refresh()``, so the refresh itself runs on a worker thread.
    """
    if not hasattr(signal, "SIGHUP"):
        return False

    def _on_hup(signum, frame) -> None:
        logger.info("SIGHUP received, refreshing configuration")
        threading.Thread(
            target=config.refresh, name=REFRESH_THREAD_NAME, daemon=True
        ).start()

    signal.signal(signal.SIGHUP, _on_hup)
    return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.getLogger().setLevel(args.log_level.upper())
    config = build_provider(args)
    install_reload_signal(config)

    uvicorn.run(create_app(config), host=args.host, port=args.port, log_level=args.log_level)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
