"""Client session id for log correlation.

Each console or app session gets an id like ``SES-1a2b3c4d``. It lives in a
ContextVar and is stamped onto records by a handler-level filter, so every
line written while a booking is processed carries it::

    2025-03-10 09:00:00 [barbershop.tools.booking] INFO SES-1a2b3c4d: Appointment created ...
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

NO_SESSION = "-"

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s %(session_id)s: %(message)s"

_session_id: ContextVar[str] = ContextVar("session_id", default=NO_SESSION)


def new_session_id() -> str:
    return f"SES-{uuid.uuid4().hex[:8]}"


def set_session_id(session_id: str) -> None:
    _session_id.set(session_id)


def get_session_id() -> str:
    return _session_id.get()


@contextmanager
def session_scope(session_id: Optional[str] = None) -> Iterator[str]:
    """Bind a session id for the duration of the block, then restore the previous one."""
    token = _session_id.set(session_id or new_session_id())
    try:
        yield _session_id.get()
    finally:
        _session_id.reset(token)


class SessionIdFilter(logging.Filter):
    """Adds ``session_id`` to records that do not already carry one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def install_session_filter(target: Optional[logging.Logger] = None) -> None:
    """Attach the filter to every handler of ``target`` (the root logger by default).

    Handler filters also see records propagated from child loggers, which
    logger filters do not.
    """
    target = target or logging.getLogger()
    for handler in target.handlers:
        if not any(isinstance(f, SessionIdFilter) for f in handler.filters):
            handler.addFilter(SessionIdFilter())
