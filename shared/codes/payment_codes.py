"""
Payment specific codes and gateway status mapping.
"""
from __future__ import annotations

from enum import IntEnum


class PaymentCode(IntEnum):
    # Gateway/Network errors (6xxxx)
    GATEWAY_ERROR = 60000
    GATEWAY_UNAVAILABLE = 60001
    GATEWAY_BAD_RESPONSE = 60002


# Gateway order status that completes a local order; everything else fails it.
GATEWAY_COMPLETED_STATUS = "COMPLETED"

# Error token the gateway puts in a 422 body when the order was captured before.
ORDER_ALREADY_CAPTURED_ISSUE = "ORDER_ALREADY_CAPTURED"
