"""
cost_explorer.py

Query AWS Cost Explorer (GetCostAndUsage) for the total cost of a billing window.

Permissions:
  - ce:GetCostAndUsage
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError, ProfileNotFound

from .config import DEFAULT_METRIC, Settings
from .errors import ConfigurationError, UpstreamQueryError
from .periods import BillingPeriod


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostInfo:
    start: str
    end: str
    amount: str
    unit: str
    metric: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def session(profile: Optional[str]):
    if profile:
        return boto3.Session(profile_name=profile)
    return boto3.Session()


def cost_explorer_client(settings: Settings):
    try:
        return session(settings.profile).client("ce", region_name=settings.region)
    except ProfileNotFound as e:
        raise ConfigurationError(str(e)) from e
    except (BotoCoreError, ClientError) as e:
        raise UpstreamQueryError(f"cannot create Cost Explorer client: {e}") from e


def total_amount(results: List[Dict[str, Any]], metric: str) -> Tuple[str, str]:
    """Return (amount, unit) for the metric across ResultsByTime entries."""
    if not results:
        raise UpstreamQueryError("Cost Explorer returned no ResultsByTime")
    totals = []
    for r in results:
        total = (r.get("Total") or {}).get(metric)
        if not total or total.get("Amount") is None:
            raise UpstreamQueryError(f"metric {metric} missing from Cost Explorer result")
        totals.append(total)
    unit = totals[0].get("Unit") or "USD"
    if len(totals) == 1:
        return totals[0]["Amount"], unit
    try:
        amount = sum((Decimal(t["Amount"]) for t in totals), Decimal("0"))
    except InvalidOperation as e:
        raise UpstreamQueryError(f"unparseable amount in Cost Explorer result: {e}") from e
    return str(amount), unit


def fetch_cost(ce, period: BillingPeriod, metric: str = DEFAULT_METRIC) -> CostInfo:
    time_period = period.query_range()
    logger.info("querying %s for %s..%s", metric, time_period["Start"], time_period["End"])
    try:
        resp = ce.get_cost_and_usage(
            TimePeriod=time_period,
            Granularity="MONTHLY",
            Metrics=[metric],
        )
    except (BotoCoreError, ClientError) as e:
        raise UpstreamQueryError(f"GetCostAndUsage failed: {e}") from e

    amount, unit = total_amount(resp.get("ResultsByTime", []), metric)
    return CostInfo(
        start=time_period["Start"],
        end=time_period["End"],
        amount=amount,
        unit=unit,
        metric=metric,
    )
