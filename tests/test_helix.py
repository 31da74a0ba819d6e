"""
Tests für die gemeinsame Anfrage-Funktion (fremdsys/helix.py)
"""
import json

import pytest
import requests

from twitchlist.fremdsys import helix
from twitchlist.fremdsys.errors import APIError, DecodeError, TransportError
from twitchlist.session_user import Credentials, Session


class TestBuildQuery:

    def test_encodes_keys_and_values(self):
        query = helix.build_query({"query": "dark souls & co", "a/b": "ä=1"})
        assert query == "query=dark%20souls%20%26%20co&a%2Fb=%C3%A4%3D1"

    def test_keeps_every_parameter_in_order(self):
        params = {"z": "1", "a": "2", "m": "3"}
        assert helix.build_query(params) == "z=1&a=2&m=3"

    def test_list_values_repeat_key(self):
        assert helix.build_query({"user_login": ["foo", "bar"]}) == "user_login=foo&user_login=bar"

    def test_bool_and_int_values(self):
        assert helix.build_query({"live_only": True, "first": 5}) == "live_only=true&first=5"

    def test_empty(self):
        assert helix.build_query({}) == ""
        assert helix.build_query(None) == ""


class TestBuildUrl:

    def test_scheme_is_always_https(self):
        assert helix.build_url("api.twitch.tv/helix/streams", {"first": 10}) == \
            "https://api.twitch.tv/helix/streams?first=10"

    def test_without_params(self):
        assert helix.build_url("id.twitch.tv/oauth2/validate") == "https://id.twitch.tv/oauth2/validate"


class TestHeader:

    def test_with_auth_and_client_id(self, session):
        headers = helix.header(session, requires_auth=True)
        assert headers["Authorization"] == "Bearer tok456"
        assert headers["Client-ID"] == "cid123"
        assert headers["Accept"] == "application/vnd.twitchtv.v5+json"
        assert headers["User-Agent"].startswith("twitchlist/")
        assert "Python/" in headers["User-Agent"]

    def test_no_authorization_without_requires_auth(self, session):
        assert "Authorization" not in helix.header(session, requires_auth=False)

    def test_no_authorization_without_token(self, anon_session):
        headers = helix.header(anon_session, requires_auth=True)
        assert "Authorization" not in headers
        assert headers["Client-ID"] == "cid123"

    def test_no_client_id_header_when_unset(self):
        headers = helix.header(Session(Credentials(token="t")), requires_auth=True)
        assert "Client-ID" not in headers


class TestParseResponse:

    def test_204_returns_none_without_parsing(self):
        assert helix.parse_response(204, b"kein json") is None

    def test_json_object(self):
        assert helix.parse_response(200, b'{"data": [1]}') == {"data": [1]}

    def test_error_field_raises_api_error(self):
        body = json.dumps({"status": 401, "error": "Unauthorized", "message": "Invalid OAuth token"}).encode()
        with pytest.raises(APIError) as exc:
            helix.parse_response(200, body)
        assert exc.value.status == 401
        assert exc.value.error == "Unauthorized"
        assert exc.value.message == "Invalid OAuth token"
        assert "401 Unauthorized: Invalid OAuth token" in str(exc.value)

    def test_error_without_message(self):
        with pytest.raises(APIError) as exc:
            helix.parse_response(400, b'{"error": "Bad Request", "status": 400}')
        assert exc.value.message is None
        assert str(exc.value).endswith("400 Bad Request")

    def test_non_2xx_without_error_field(self):
        with pytest.raises(APIError) as exc:
            helix.parse_response(401, b'{"status": 401, "message": "invalid access token"}')
        assert exc.value.status == 401
        assert exc.value.message == "invalid access token"

    def test_malformed_body_raises_decode_error(self):
        with pytest.raises(DecodeError):
            helix.parse_response(200, b"<html>oops</html>")

    def test_decode_error_is_transport_error(self):
        with pytest.raises(TransportError):
            helix.parse_response(200, b"\xff\xfe")

    def test_json_array_is_rejected(self):
        with pytest.raises(DecodeError):
            helix.parse_response(200, b"[1, 2]")

    def test_empty_2xx_body(self):
        assert helix.parse_response(200, b"") == {}

    def test_empty_error_body(self):
        with pytest.raises(APIError) as exc:
            helix.parse_response(503, b"")
        assert exc.value.status == 503


class TestRequest:

    def test_request_arguments(self, session, http, make_response):
        http.return_value = make_response(200, {"data": []})

        result = helix.request(session, "api.twitch.tv/helix/streams", requires_auth=True, params={"first": 3})

        assert result == {"data": []}
        args, kwargs = http.call_args
        assert args == ("GET", "https://api.twitch.tv/helix/streams?first=3")
        assert kwargs["headers"]["Authorization"] == "Bearer tok456"
        assert kwargs["allow_redirects"] is True
        assert kwargs["timeout"] == session.timeout

    def test_request_204(self, session, http, make_response):
        http.return_value = make_response(204, body=b"")
        assert helix.request(session, "api.twitch.tv/helix/x") is None

    def test_transport_failure(self, session, http):
        http.side_effect = requests.ConnectionError("kein Netz")
        with pytest.raises(TransportError) as exc:
            helix.request(session, "api.twitch.tv/helix/streams")
        assert isinstance(exc.value.__cause__, requests.ConnectionError)

    def test_timeout_is_transport_error(self, session, http):
        http.side_effect = requests.Timeout()
        with pytest.raises(TransportError):
            helix.request(session, "api.twitch.tv/helix/streams")

    def test_post_method(self, session, http, make_response):
        http.return_value = make_response(200, {"access_token": "x"})
        helix.request(session, "id.twitch.tv/oauth2/token", params={"grant_type": "client_credentials"}, method="POST")
        assert http.call_args[0][0] == "POST"
