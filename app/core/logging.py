import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def setup_logging() -> None:
    """Configure the root logger once per process."""
    global _configured
    if _configured:
        return
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    # httpx logs every OpenAI request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True
