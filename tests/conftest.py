"""
Pytest configuration
Fixtures für Session und gefälschte HTTP-Antworten (kein Netzwerk nötig)
"""
import json
from unittest.mock import Mock, patch

import pytest

from twitchlist.session_user import Credentials, Session


def fake_response(status=200, payload=None, body=None):
    response = Mock()
    response.status_code = status
    if body is None:
        body = b"" if payload is None else json.dumps(payload).encode("utf-8")
    response.content = body
    return response


@pytest.fixture
def session():
    return Session(Credentials(client_id="cid123", client_secret="geheim", token="tok456", username="foo"))


@pytest.fixture
def anon_session():
    return Session(Credentials(client_id="cid123"))


@pytest.fixture
def http():
    """Patcht requests.request; Antworten über http.side_effect / http.return_value setzen."""
    with patch("twitchlist.fremdsys.helix.requests.request") as mock_request:
        mock_request.return_value = fake_response(200, {"data": []})
        yield mock_request


@pytest.fixture
def make_response():
    return fake_response
