from message_service.config import ConfigProvider

MESSAGE_KEY = "message"
DEFAULT_MESSAGE = "n/a"


def render_message(config: ConfigProvider) -> str:
    """Build the response body from the value current at call time."""
    return "message:" + config.get(MESSAGE_KEY, DEFAULT_MESSAGE)
