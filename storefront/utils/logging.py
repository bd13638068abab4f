# storefront/utils/logging.py
import datetime
import json
import logging

from storefront.utils.settings import LOG_FORMAT, LOG_LEVEL

_configured = False

# extra={"order_number": ...} trafia do JSONa
_CONTEXT_FIELDS = ("order_number", "session_id")


class JSONFormatter(logging.Formatter):
    """Jedna linia JSON na rekord logu."""

    def format(self, record):
        log_record = {
            "ts": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "lvl": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }

        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_record[field] = getattr(record, field)

        if record.exc_info:
            log_record["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False)


def _configure_root():
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler()
    if LOG_FORMAT == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )

    root = logging.getLogger("storefront")
    root.addHandler(handler)
    root.setLevel(LOG_LEVEL.upper())
    _configured = True


def get_logger(name: str) -> logging.Logger:
    _configure_root()
    return logging.getLogger(name)
