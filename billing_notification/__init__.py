"""Daily AWS cost notification to Slack."""

from .errors import BillingNotificationError, ConfigurationError, DeliveryError, UpstreamQueryError
from .periods import BillingPeriod, ReferenceClock, billing_window

__version__ = "0.1.0"

__all__ = [
    "BillingNotificationError",
    "BillingPeriod",
    "ConfigurationError",
    "DeliveryError",
    "ReferenceClock",
    "UpstreamQueryError",
    "billing_window",
]
