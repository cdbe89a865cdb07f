"""
Structlog logging configuration.

Gateway request URLs are logged as-is except for the paying client's
address, which is masked by ``mask_client_ip``.
"""
import json
import logging
import re
from typing import Any, List

import structlog
from structlog.contextvars import merge_contextvars
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer, TimeStamper, add_log_level
from structlog.stdlib import ProcessorFormatter

from core.config import settings


URL_KEYS = ("url", "request_url")

_USERIP = re.compile(r"(userip=)[^&\s]+")


def mask_client_ip(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Replace the ``userip`` query value in logged URLs."""
    for key in URL_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str):
            event_dict[key] = _USERIP.sub(r"\1***", value)
    return event_dict


def get_renderer() -> Any:
    """Console renderer in DEBUG, JSON lines otherwise.

    structlog passes ``default``/``sort_keys`` to the serializer, so the
    wrapper has to accept them.
    """
    if settings.DEBUG:
        return ConsoleRenderer(colors=True)

    def _dumps(obj, default=None, **kwargs):
        return json.dumps(obj, ensure_ascii=False, default=default, **kwargs)
    return JSONRenderer(serializer=_dumps)


def configure_logging() -> None:
    """Configure structlog and route stdlib logging (httpx included) through it."""
    shared_pre_chain: List[Any] = [
        merge_contextvars,
        add_log_level,
        TimeStamper(fmt="iso"),
        mask_client_ip,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *shared_pre_chain,
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = ProcessorFormatter(
        foreign_pre_chain=shared_pre_chain,
        processors=[
            ProcessorFormatter.remove_processors_meta,
            get_renderer(),
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    level = logging.DEBUG if settings.DEBUG else logging.getLevelName(settings.LOG_LEVEL.upper())
    root.setLevel(level if isinstance(level, int) else logging.INFO)
    # httpx logs every request URL at INFO, unmasked
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
