"""
todo_authz.observability.logging

Structured logging configuration for the service.

Responsibilities:
- Configure `structlog` for JSON logs on stdout.
- Scrub credential-bearing fields (tokens, secrets, auth headers) from every event.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from typing import Any

import structlog

REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({"authorization", "token", "access_token", "jwt_secret", "password"})


def configure_logging(
    *, service_name: str, level: str, sensitive_keys: Iterable[str] = SENSITIVE_KEYS
) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            redact_sensitive(sensitive_keys),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def redact_sensitive(keys: Iterable[str]):
    lowered = frozenset(k.lower() for k in keys)

    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for key in event_dict:
            if key.lower() in lowered:
                event_dict[key] = REDACTED
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Request-scoped metadata (request id, path, method, principal) is bound via
# contextvars in `observability.middleware` and `api.auth.get_principal`.
