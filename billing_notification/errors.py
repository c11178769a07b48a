"""Error types raised by the billing notification job."""
from typing import Optional


class BillingNotificationError(Exception):
    exit_code = 1


class ConfigurationError(BillingNotificationError):
    """Bad or missing setting (timezone, webhook URL, metric). Fatal at startup."""

    exit_code = 2


class UpstreamQueryError(BillingNotificationError):
    """Cost Explorer was unreachable, rejected the request or returned no data."""

    exit_code = 3


class DeliveryError(BillingNotificationError):
    """The Slack webhook POST failed or answered with a non-2xx status."""

    exit_code = 4

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
