#!/usr/bin/env python3
"""
billing-notification

Purpose:
  Post the month-to-date AWS cost (Cost Explorer, AmortizedCost by default) to a
  Slack incoming webhook. On the 1st of the month the previous month's final
  total is reported instead.

Configuration:
  Flags default to BILLING_REGION, BILLING_TIMEZONE, SLACK_WEBHOOK_URL,
  BILLING_METRIC, AWS_PROFILE and SLACK_TIMEOUT.

Permissions:
  - ce:GetCostAndUsage

Examples:
  billing-notification --dry-run
  billing-notification --webhook-url https://hooks.slack.com/services/... --timezone Asia/Tokyo
  billing-notification --at 2024-06-01T00:00:00 --dry-run --json

Exit Codes:
  0 success
  1 unexpected error
  2 configuration error
  3 Cost Explorer query failed
  4 Slack delivery failed
"""
import argparse
import json
import logging
import sys

from .config import COST_METRICS, Settings
from .errors import BillingNotificationError
from .job import parse_instant, run
from .periods import ReferenceClock


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Notify Slack of month-to-date AWS cost")
    p.add_argument("--region", help="Region for the Cost Explorer client (env BILLING_REGION, default: ap-northeast-1)")
    p.add_argument("--timezone", help="Reporting timezone (env BILLING_TIMEZONE, default: Asia/Tokyo)")
    p.add_argument("--webhook-url", help="Slack incoming webhook URL (env SLACK_WEBHOOK_URL)")
    p.add_argument("--metric", choices=COST_METRICS, help="Cost Explorer metric (env BILLING_METRIC, default: AmortizedCost)")
    p.add_argument("--profile", help="AWS profile name (env AWS_PROFILE)")
    p.add_argument("--timeout", type=float, help="Slack POST timeout seconds (env SLACK_TIMEOUT, default: 10)")
    p.add_argument("--at", help="Reference instant in ISO 8601 instead of now (naive values use --timezone)")
    p.add_argument("--dry-run", action="store_true", help="Query and print the message without posting it")
    p.add_argument("--json", action="store_true", help="JSON output")
    p.add_argument("--verbose", "-v", action="store_true", help="Log progress to stderr")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings.from_env(
            region=args.region,
            timezone=args.timezone,
            webhook_url=args.webhook_url,
            metric=args.metric,
            profile=args.profile,
            timeout=args.timeout,
            dry_run=args.dry_run or None,
        )
        clock = None
        if args.at:
            clock = ReferenceClock.at(parse_instant(args.at), settings.timezone)
        result = run(settings, clock)
    except BillingNotificationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return e.exit_code

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return 0

    print(f"Period: {result['period']['start']} ~ {result['period']['end']}")
    print(f"Amount: {result['cost']['amount']} {result['cost']['unit']} ({result['cost']['metric']})")
    print()
    print(result["message"]["text"])
    if settings.dry_run:
        print("\nDry-run. Message not posted to Slack.")
    return 0


def entrypoint():
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    entrypoint()
