"""
job.py

The daily billing notification: compute the billing window, ask Cost Explorer for
the total, post a two-line summary to Slack.

Deployed as an AWS Lambda function (handler: billing_notification.job.lambda_handler)
triggered by a scheduled EventBridge rule, or run from cron through the CLI.
"""
from __future__ import annotations

import datetime as dt
import json
import logging
from typing import Any, Dict, Optional

from . import periods
from .config import Settings
from .cost_explorer import cost_explorer_client, fetch_cost
from .errors import ConfigurationError
from .periods import ReferenceClock
from .slack import make_slack_message, post_to_slack


logger = logging.getLogger(__name__)


def parse_instant(raw: str) -> dt.datetime:
    try:
        return dt.datetime.fromisoformat(raw)
    except ValueError as e:
        raise ConfigurationError(f"invalid reference instant {raw!r} (expected ISO 8601)") from e


def run(settings: Settings, clock: Optional[ReferenceClock] = None, client=None) -> Dict[str, Any]:
    if clock is None:
        clock = ReferenceClock.now(settings.timezone)
    logger.info("reference instant %s (%s)", clock.timestamp(), settings.timezone)

    period = periods.billing_window(clock)
    if client is None:
        client = cost_explorer_client(settings)
    cost = fetch_cost(client, period, settings.metric)

    message = make_slack_message(cost, period)
    logger.info("message %s", message.to_json())

    status = None
    if settings.dry_run:
        logger.info("dry-run: not posting to Slack")
    else:
        status = post_to_slack(settings.webhook_url, message, timeout=settings.timeout)

    return {
        "reference": clock.timestamp(),
        "timezone": settings.timezone,
        "period": period.to_dict(),
        "cost": cost.to_dict(),
        "message": message.to_dict(),
        "delivered": status is not None,
        "status": status,
    }


def lambda_handler(event, context):
    """Return {"message": <Slack payload as a JSON string>}.

    The payload is a plain string, not the base64 encoded bytes a []byte field
    would produce.
    """
    # the Lambda runtime installs the root handler at WARNING
    logging.getLogger().setLevel(logging.INFO)
    event = event or {}
    settings = Settings.from_env(dry_run=bool(event.get("dry_run")) or None)
    clock = None
    if event.get("at"):
        clock = ReferenceClock.at(parse_instant(event["at"]), settings.timezone)
    try:
        result = run(settings, clock)
    except Exception:
        logger.exception("billing notification failed")
        raise
    return {"message": json.dumps(result["message"], ensure_ascii=False)}
