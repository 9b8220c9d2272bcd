"""Logging middleware for Route Groups.

Wraps handler calls with start/end log records including timing.

Configuration
-------------
Accepted keyword options, validated with pydantic:
    - ``logger``: target logger (default ``logging.getLogger("route_groups")``)
    - ``before``: log "start" message (default True)
    - ``after``: log "end" message with timing (default True)
    - ``level``: level name used for both records (default ``"INFO"``)
    - ``label``: name used in messages (default: the wrapped handler name)

Example::

    from route_groups import Group, logging_middleware

    api = Group("api").attach_middleware(logging_middleware(after=False))

    @api.route("/hello")
    def hello(request):
        return "Hello!"
"""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Literal

from pydantic import ConfigDict, validate_call

from route_groups.core.unit import Handler, Middleware

__all__ = ["logging_middleware"]

LevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@validate_call(config=ConfigDict(arbitrary_types_allowed=True))
def logging_middleware(
    logger: logging.Logger | None = None,
    *,
    before: bool = True,
    after: bool = True,
    level: LevelName = "INFO",
    label: str | None = None,
) -> Middleware:
    """Build a middleware logging each call of the handlers it wraps.

    Args:
        logger: Logger receiving the records.
        before: Log "{handler} start" before execution.
        after: Log "{handler} end (X ms)" after execution.
        level: Level name for the records.
        label: Fixed name used in messages instead of the handler name.

    Returns:
        A middleware, usable with ``Group.attach_middleware``.
    """
    target = logger or logging.getLogger("route_groups")
    levelno = logging.getLevelName(level)

    def logging_layer(call_next: Handler) -> Handler:
        name = label or getattr(call_next, "__name__", None) or "handler"

        @wraps(call_next)
        def logged(*args: Any, **kwargs: Any) -> Any:
            if before:
                target.log(levelno, "%s start", name)
            t0 = time.perf_counter()
            result = call_next(*args, **kwargs)
            elapsed = (time.perf_counter() - t0) * 1000
            if after:
                target.log(levelno, "%s end (%.2f ms)", name, elapsed)
            return result

        return logged

    logging_layer.__name__ = "logging"
    return logging_layer
