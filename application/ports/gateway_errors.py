"""
Adapter-level gateway failures.

Gateway adapters raise these; the order lifecycle service translates them
into user-safe domain exceptions, so neither raw bodies nor parse details
cross the application boundary.
"""
from __future__ import annotations

from typing import Optional


class GatewayCallError(Exception):
    """A remote gateway call failed (non-2xx status or transport error)."""

    def __init__(
        self,
        operation: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.operation = operation
        self.status_code = status_code
        self.body = body or ""
        status = status_code if status_code is not None else "unavailable"
        super().__init__(message or f"{operation} failed: {status}")

    @property
    def message(self) -> str:
        return str(self)


class GatewayResponseError(GatewayCallError):
    """Gateway answered 2xx but the payload lacks a required field.

    `kind` is "missing_field" or "invalid_value"; `field` is a dotted path
    such as "purchase_units[0].payments.captures".
    """

    def __init__(self, kind: str, field: str, *, operation: str = "Parse order response") -> None:
        self.kind = kind
        self.field = field
        label = "missing" if kind == "missing_field" else "invalid"
        super().__init__(operation, message=f"Invalid gateway order response: {label} {field}")
