# tests/test_payment_status_client.py

from __future__ import annotations

import pytest
import requests

from pharmacy_pos.constants import BATCH_PAYMENT_STATUS_PATH
from pharmacy_pos.modules.purchase.api_client import PaymentStatusClient, PaymentStatusUnavailable


class _FakeResponse:
    def __init__(self, body=None, status=200, bad_json=False):
        self._body = body
        self.status_code = status
        self._bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._body


class _FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.posts = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _client(session, token="tok-123"):
    return PaymentStatusClient(base_url="http://pos.local/", token=token, timeout=3, session=session)


# ---------------------------
# Suite S: batch payment status endpoint
# ---------------------------

def test_s1_batch_request_shape_and_parsing():
    """
    S1. One POST with {"purchaseOrderIds": [...]}:
    - auth headers when a token is configured
    - response data mapped to {id: hasPaidAmount}
    """
    session = _FakeSession(_FakeResponse({
        "success": True,
        "data": [
            {"purchaseOrderId": "po-1", "hasPaidAmount": True},
            {"purchaseOrderId": "po-2", "hasPaidAmount": False},
            {"hasPaidAmount": True},
        ],
    }))
    out = _client(session).fetch_statuses(["po-1", "po-2"])
    assert out == {"po-1": True, "po-2": False}

    (call,) = session.posts
    assert call["url"] == "http://pos.local" + BATCH_PAYMENT_STATUS_PATH
    assert call["json"] == {"purchaseOrderIds": ["po-1", "po-2"]}
    assert call["headers"]["Authorization"] == "Bearer tok-123"
    assert call["headers"]["x-auth-token"] == "tok-123"
    assert call["timeout"] == 3


def test_s2_no_ids_no_request():
    """S2. Nothing to ask for -> no HTTP call."""
    session = _FakeSession()
    assert _client(session).fetch_statuses([]) == {}
    assert session.posts == []


def test_s3_no_token_no_auth_headers():
    """S3. Anonymous client sends no auth headers."""
    session = _FakeSession(_FakeResponse({"success": True, "data": []}))
    _client(session, token=None).fetch_statuses(["po-1"])
    assert session.posts[0]["headers"] == {}


@pytest.mark.parametrize(
    "session",
    [
        _FakeSession(error=requests.ConnectionError("refused")),
        _FakeSession(error=requests.Timeout("slow")),
        _FakeSession(_FakeResponse({}, status=503)),
        _FakeSession(_FakeResponse(bad_json=True)),
        _FakeSession(_FakeResponse({"success": False, "message": "denied"})),
        _FakeSession(_FakeResponse(["not", "an", "object"])),
    ],
)
def test_s4_failures_raise_payment_status_unavailable(session):
    """S4. Transport errors, HTTP errors, bad JSON and success=false all surface as one error type."""
    with pytest.raises(PaymentStatusUnavailable):
        _client(session).fetch_statuses(["po-1"])
