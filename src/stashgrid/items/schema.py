import logging
from typing import Any, Dict, List

from ..data import make_validator

logger = logging.getLogger(__name__)


def item_schema_errors(data: Dict[str, Any]) -> List[str]:
    """
    Return human-readable schema violations for a single item record.

    Each entry reads ``path: message``; ``<root>`` stands for the record
    itself. An empty list means the record is valid.
    """
    validator = make_validator("item")
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    messages = []
    for err in errors:
        path = "/".join(str(p) for p in err.path) or "<root>"
        logger.debug("Item %s schema violation at %s: %s", data.get("id", "?"), path, err.message)
        messages.append(f"{path}: {err.message}")
    return messages


__all__ = ["item_schema_errors"]
