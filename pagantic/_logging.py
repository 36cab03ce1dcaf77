import hashlib
import json
import logging
from typing import Any

# Create the library logger
logger = logging.getLogger("pagantic")

# Add NullHandler to prevent "No handlers could be found" warnings
# if the application doesn't configure logging.
logger.addHandler(logging.NullHandler())


def redact_where(where: list[Any] | None) -> str:
    """
    Redacts filter criteria for logging.
    Criteria often carry user-entered values, so only a short hash is logged.
    Equal criteria lists hash equally, which still allows correlating requests.
    """
    if not where:
        return "<empty>"
    try:
        # sort_keys keeps the digest stable across dict insertion orders
        payload = json.dumps(where, sort_keys=True, default=str).encode("utf-8")
        return f"{len(where)}:{hashlib.sha256(payload).hexdigest()[:8]}"
    except Exception:
        return "<redaction_failed>"
