"""Slack incoming-webhook message layout and delivery."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict

import requests

from .cost_explorer import CostInfo
from .errors import DeliveryError
from .periods import BillingPeriod, format_date


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlackMessage:
    text: str
    mrkdwn: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "mrkdwn": self.mrkdwn}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


def make_slack_message(cost: CostInfo, period: BillingPeriod) -> SlackMessage:
    # line 1: period, line 2: amount. Layout must stay stable for channel readers.
    text = "*期間*: `{} ~ {}`\n*料金*: `${}`".format(
        format_date(period.start),
        format_date(period.end),
        cost.amount,
    )
    return SlackMessage(text=text, mrkdwn=True)


def post_to_slack(webhook_url: str, message: SlackMessage, timeout: float = 10.0) -> int:
    try:
        resp = requests.post(webhook_url, json=message.to_dict(), timeout=timeout)
    except requests.RequestException as e:
        raise DeliveryError(f"Slack webhook request failed: {e}") from e

    logger.info("Slack response: %s %s", resp.status_code, resp.text)
    if not 200 <= resp.status_code < 300:
        raise DeliveryError(
            f"Slack webhook returned HTTP {resp.status_code}: {resp.text}",
            status=resp.status_code,
        )
    return resp.status_code
