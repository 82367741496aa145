"""
Turns raw gateway error payloads into short, user-facing messages.
"""
from __future__ import annotations

import json
from typing import Any, Optional


MAX_RAW_MESSAGE_LENGTH = 200


class ErrorTranslator:
    """Pick the most specific human-readable field of a gateway error body.

    Order of preference: ``details[0].description``, ``message``,
    ``"Gateway: " + name``. Anything unparseable falls back to the raw body,
    truncated to 200 characters.
    """

    prefix = "Gateway"

    def translate(self, raw_body: Optional[str], status_code: Optional[int], operation: str = "Capture") -> str:
        if not raw_body or not raw_body.strip():
            status = status_code if status_code is not None else "unavailable"
            return f"{operation} failed: {status}"

        message = self._from_structured(raw_body)
        if message:
            return message
        if len(raw_body) > MAX_RAW_MESSAGE_LENGTH:
            return raw_body[:MAX_RAW_MESSAGE_LENGTH] + "..."
        return raw_body

    def _from_structured(self, raw_body: str) -> Optional[str]:
        try:
            root: Any = json.loads(raw_body)
        except ValueError:
            return None
        if not isinstance(root, dict):
            return None

        details = root.get("details")
        if isinstance(details, list) and details and isinstance(details[0], dict):
            description = details[0].get("description")
            if description is not None:
                return str(description)
        if root.get("message") is not None:
            return str(root["message"])
        if root.get("name") is not None:
            return f"{self.prefix}: {root['name']}"
        return None
