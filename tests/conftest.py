import datetime as dt
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.stub import Stubber

from billing_notification.periods import ReferenceClock


@pytest.fixture
def ce_client():
    return boto3.client(
        "ce",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def ce_stub(ce_client):
    with Stubber(ce_client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


@pytest.fixture
def tokyo():
    def _clock(*args):
        return ReferenceClock.at(dt.datetime(*args), "Asia/Tokyo")
    return _clock


def cost_response(start, end, amount="123.45", metric="AmortizedCost", unit="USD"):
    return {
        "ResultsByTime": [
            {
                "TimePeriod": {"Start": start, "End": end},
                "Total": {metric: {"Amount": amount, "Unit": unit}},
                "Groups": [],
                "Estimated": True,
            }
        ]
    }


def slack_response(status=200, text="ok"):
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    return resp
