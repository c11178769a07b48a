import datetime as dt
import json
from unittest.mock import patch

import pytest
import requests

from billing_notification.cost_explorer import CostInfo
from billing_notification.errors import DeliveryError
from billing_notification.periods import BillingPeriod
from billing_notification.slack import SlackMessage, make_slack_message, post_to_slack
from conftest import slack_response


WEBHOOK = "https://hooks.slack.com/services/T000/B000/XXXX"


def test_message_layout():
    cost = CostInfo(start="2024-05-01", end="2024-06-01", amount="123.45", unit="USD", metric="AmortizedCost")
    period = BillingPeriod(start=dt.date(2024, 5, 1), end=dt.date(2024, 5, 31))
    message = make_slack_message(cost, period)
    assert message.text == "*期間*: `2024-05-01 ~ 2024-05-31`\n*料金*: `$123.45`"
    assert message.text.splitlines()[0] == "*期間*: `2024-05-01 ~ 2024-05-31`"
    assert message.mrkdwn is True
    assert json.loads(message.to_json()) == {"text": message.text, "mrkdwn": True}


def test_post_sends_json_body():
    message = SlackMessage(text="hello")
    with patch("billing_notification.slack.requests.post", return_value=slack_response()) as post:
        assert post_to_slack(WEBHOOK, message, timeout=3) == 200
    post.assert_called_once_with(WEBHOOK, json={"text": "hello", "mrkdwn": True}, timeout=3)


def test_non_2xx_is_delivery_error():
    with patch("billing_notification.slack.requests.post", return_value=slack_response(404, "no_service")):
        with pytest.raises(DeliveryError) as exc:
            post_to_slack(WEBHOOK, SlackMessage(text="hello"))
    assert exc.value.status == 404
    assert "no_service" in str(exc.value)


def test_transport_failure_is_delivery_error():
    with patch("billing_notification.slack.requests.post", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(DeliveryError) as exc:
            post_to_slack(WEBHOOK, SlackMessage(text="hello"))
    assert exc.value.status is None
