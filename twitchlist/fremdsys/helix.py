"""
Gemeinsame Anfrage-Funktion für alle Twitch-Endpunkte.

Jeder Aufruf ist genau ein synchroner Roundtrip:
Query bauen -> Request -> Status prüfen -> JSON lesen -> dict zurück (oder Fehler).
Kein Cache, kein Retry.
"""
import json
import logging
import platform
from urllib.parse import quote

import requests

from twitchlist import __version__
from twitchlist.fremdsys.errors import APIError, DecodeError, TransportError

LOGGER = logging.getLogger(__name__)

HELIX = "api.twitch.tv/helix"
OAUTH = "id.twitch.tv/oauth2"

# API-Version wird über den Accept-Header festgenagelt
ACCEPT = "application/vnd.twitchtv.v5+json"


def user_agent():
    return (
        f"twitchlist/{__version__} "
        f"(HTTP/1.1; requests/{requests.__version__}; Python/{platform.python_version()})"
    )


def _text(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _pairs(params):
    if not params:
        return []
    if hasattr(params, "items"):
        params = params.items()
    pairs = []
    for key, value in params:
        # Listen -> Key mehrfach, so wie Helix es bei user_id/user_login erwartet
        if isinstance(value, (list, tuple)):
            pairs.extend((key, v) for v in value)
        else:
            pairs.append((key, value))
    return pairs


def build_query(params):
    """Jeden Key und Value percent-encoden und mit '&' verbinden (Reihenfolge bleibt)."""
    return "&".join(
        f"{quote(_text(key), safe='')}={quote(_text(value), safe='')}"
        for key, value in _pairs(params)
    )


def build_url(endpoint, params=None):
    # Schema ist immer https
    query = build_query(params)
    url = f"https://{endpoint}"
    if query:
        url += f"?{query}"
    return url


def header(session, requires_auth=False):
    headers = {
        "User-Agent": user_agent(),
        "Accept": ACCEPT,
    }
    if requires_auth and session.token:
        headers["Authorization"] = f"Bearer {session.token}"
    if session.client_id:
        headers["Client-ID"] = session.client_id
    return headers


def parse_response(status, body):
    """Status + rohe Antwort (bytes) -> dict, None bei 204, sonst Fehler."""
    if status == 204:
        return None

    if not body or not body.strip():
        if 200 <= status < 300:
            # z.B. oauth2/revoke antwortet mit 200 und leerem Body
            return {}
        raise APIError(status, f"HTTP {status}")

    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError(f"Antwort mit Status {status} ist kein gültiges JSON") from e

    if not isinstance(payload, dict):
        raise DecodeError(f"Antwort mit Status {status} ist kein JSON-Objekt: {type(payload).__name__}")

    if "error" in payload:
        raise APIError(payload.get("status", status), payload["error"], payload.get("message"))

    # oauth2/validate liefert bei 401 nur status + message
    if not 200 <= status < 300:
        raise APIError(payload.get("status", status), f"HTTP {status}", payload.get("message"))

    return payload


def request(session, endpoint, requires_auth=False, params=None, method="GET"):
    url = build_url(endpoint, params)
    headers = header(session, requires_auth)

    # Nur die Keys loggen, Values können Secrets/Tokens sein
    LOGGER.debug("%s https://%s %s (auth=%s)", method, endpoint,
                 [k for k, _ in _pairs(params)], "Authorization" in headers)
    try:
        response = requests.request(
            method,
            url,
            headers=headers,
            timeout=session.timeout,
            allow_redirects=True,
        )
    except requests.RequestException as e:
        raise TransportError(f"Anfrage an {endpoint} fehlgeschlagen: {e}") from e

    LOGGER.debug("%s -> %s", endpoint, response.status_code)
    return parse_response(response.status_code, response.content)
