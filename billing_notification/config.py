"""
config.py

Settings for the billing notification job. Values come from environment variables
(Lambda configuration or the shell) and can be overridden by CLI flags.

  BILLING_REGION     region for the Cost Explorer client (default: ap-northeast-1)
  BILLING_TIMEZONE   reporting timezone (default: Asia/Tokyo)
  SLACK_WEBHOOK_URL  incoming webhook URL (required unless dry-run)
  BILLING_METRIC     Cost Explorer metric (default: AmortizedCost)
  AWS_PROFILE        named profile for boto3
  SLACK_TIMEOUT      webhook POST timeout in seconds (default: 10)
"""
from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from .errors import ConfigurationError
from .periods import load_timezone


DEFAULT_REGION = "ap-northeast-1"
DEFAULT_TIMEZONE = "Asia/Tokyo"
DEFAULT_METRIC = "AmortizedCost"
DEFAULT_TIMEOUT = 10.0

COST_METRICS = (
    "AmortizedCost",
    "BlendedCost",
    "NetAmortizedCost",
    "NetUnblendedCost",
    "UnblendedCost",
)


@dataclass(frozen=True)
class Settings:
    region: str = DEFAULT_REGION
    timezone: str = DEFAULT_TIMEZONE
    webhook_url: Optional[str] = None
    metric: str = DEFAULT_METRIC
    profile: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    dry_run: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "Settings":
        env = os.environ if environ is None else environ
        settings = cls(
            region=env.get("BILLING_REGION") or DEFAULT_REGION,
            timezone=env.get("BILLING_TIMEZONE") or DEFAULT_TIMEZONE,
            webhook_url=env.get("SLACK_WEBHOOK_URL") or None,
            metric=env.get("BILLING_METRIC") or DEFAULT_METRIC,
            profile=env.get("AWS_PROFILE") or None,
            timeout=_parse_timeout(env.get("SLACK_TIMEOUT")),
        )
        # flags left unset on the command line arrive as None
        given = {k: v for k, v in overrides.items() if v is not None}
        if given:
            settings = replace(settings, **given)
        return settings.validate()

    def validate(self) -> "Settings":
        load_timezone(self.timezone)
        if not self.region:
            raise ConfigurationError("region must not be empty")
        if self.metric not in COST_METRICS:
            raise ConfigurationError(
                f"unsupported metric {self.metric!r} (choose from {', '.join(COST_METRICS)})"
            )
        if not math.isfinite(self.timeout) or self.timeout <= 0:
            raise ConfigurationError(f"timeout must be a positive number, got {self.timeout}")
        if not self.dry_run and not self.webhook_url:
            raise ConfigurationError("SLACK_WEBHOOK_URL (or --webhook-url) is required unless --dry-run")
        return self


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"SLACK_TIMEOUT must be a number, got {raw!r}") from e
