"""JSON log output and event sampling for the storefront loggers.

Services log an event name as the message and pass ids through ``extra``
(``logger.info("order.created", extra={"event": "order.created", ...})``).
The formatter flattens those extras into one JSON object per line; the
filter thins out chatty INFO events while keeping audit events intact.
"""

import json
import logging
import random
from datetime import datetime, timezone
from typing import Iterable, Optional

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime", "taskName"}


def _jsonable(value):
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


def record_event(record: logging.LogRecord) -> str:
    """The event name of a record: its ``event`` extra, else its raw message."""

    event = getattr(record, "event", None)
    return event if isinstance(event, str) and event else str(record.msg)


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Base keys are ``time`` (ISO-8601 UTC with a ``Z`` suffix), ``level``,
    ``name`` and ``message``; ``extra`` values are merged in without
    overriding them. Values that cannot be serialized are stringified, and
    exceptions are rendered under ``exc_info``.
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload = {
            "time": stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in payload:
                payload[key] = _jsonable(value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class SamplingFilter(logging.Filter):
    """Keep a ``rate`` fraction of records at the sampled ``levels``.

    Events listed in ``allow_events`` (e.g. ``order.status_changed``) always
    pass, as does every record at a level outside ``levels``. A rate that is
    not a number keeps everything.
    """

    def __init__(
        self,
        rate: float = 1.0,
        levels: Optional[Iterable[str]] = None,
        allow_events: Optional[Iterable[str]] = None,
    ):
        super().__init__()
        try:
            self.rate = min(max(float(rate), 0.0), 1.0)
        except (TypeError, ValueError):
            self.rate = 1.0
        self.levels = frozenset(levels or ("INFO",))
        self.allow_events = frozenset(allow_events or ())

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if record.levelname not in self.levels or record_event(record) in self.allow_events:
            return True
        if self.rate >= 1.0:
            return True
        return self.rate > 0.0 and random.random() < self.rate
