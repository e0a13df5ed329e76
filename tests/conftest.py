"""Shared fixtures: a client wired to a mocked requests session."""

import json
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlencode

import pytest

from xverify.client import VerificationClient

API_KEY = "123456"
DOMAIN = "domain.tld"
BASE_URL = "http://mock.xverify.test/services"
VALID_EMAIL = "valid@email.com"

VALID_PAYLOAD = {
    "wrappernode": {
        "address": "address",
        "syntax": "syntax",
        "handle": "handle",
        "domain": "domain",
        "error": 0,
        "status": "valid",
        "auto_correct": {"corrected": "corrected", "address": "address"},
        "message": "message",
        "duration": 0.0,
        "catch_all": "catch_all",
        "responsecode": 200,
        "transaction_number": "123-456-abcd",
    }
}

INVALID_PAYLOAD = {
    "wrappernode": {
        "status": "invalid",
        "message": "error occurred",
        "error": "error occurred",
        "responsecode": 503,
    }
}


def make_response(status_code: int = 200, content: bytes = b"") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content
    return resp


def json_response(payload, status_code: int = 200) -> MagicMock:
    return make_response(status_code, json.dumps(payload).encode())


def sent_params(session: MagicMock) -> dict:
    """Query parameters of the last request, as the server would decode them."""
    params = session.get.call_args.kwargs["params"]
    return {k: v[0] for k, v in parse_qs(urlencode(params)).items()}


def mock_server(request_url, params=None, timeout=None):
    """Mimics xverify: valid only for signed requests about VALID_EMAIL."""
    params = params or {}
    signed = (
        params.get("apikey") == API_KEY
        and params.get("domain") == DOMAIN
        and params.get("type") == "json"
    )
    if signed and params.get("email") == VALID_EMAIL:
        return json_response(VALID_PAYLOAD)
    return json_response(INVALID_PAYLOAD, status_code=500)


@pytest.fixture
def session():
    s = MagicMock()
    s.get.return_value = json_response(VALID_PAYLOAD)
    return s


@pytest.fixture
def client(session):
    return VerificationClient(API_KEY, DOMAIN, base_url=BASE_URL, session=session)
