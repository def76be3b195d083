import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from message_service.config import ConfigProvider
from message_service.handler import render_message
from message_service.models import HealthStatus, RefreshResult
from message_service.utils import model_to_dict

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("message-service")


def get_config(request: Request) -> ConfigProvider:
    return request.app.state.config


def create_app(config: Optional[ConfigProvider] = None) -> FastAPI:
    """Wire the message handler and operational routes onto a new app.

    The provider is looked up per request, never captured as a value, so a
    refresh is visible on the next request.
    """
    application = FastAPI(title="Message Service")
    application.state.config = config or ConfigProvider()

    @application.get("/", response_class=PlainTextResponse)
    async def message(config: ConfigProvider = Depends(get_config)):
        return PlainTextResponse(render_message(config))

    # plain def: runs in the threadpool, off the event loop
    @application.post("/actuator/refresh")
    def refresh(config: ConfigProvider = Depends(get_config)):
        """Reload configuration sources and report which keys changed."""
        result = RefreshResult(changed=config.refresh())
        return JSONResponse(model_to_dict(result))

    @application.get("/health")
    async def health():
        return JSONResponse(model_to_dict(HealthStatus()))

    logger.info("Serving config from %s", application.state.config.config_file)
    return application
