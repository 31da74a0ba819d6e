import logging
import webbrowser
from dataclasses import dataclass
from typing import List, Optional

from twitchlist.fremdsys import helix
from twitchlist.fremdsys.errors import PreconditionError

LOGGER = logging.getLogger(__name__)

REDIRECT_URI = "http://localhost:8080"

SCOPES = [
    "chat:read",
    "chat:edit",
    "user:read:follows",
]


@dataclass(frozen=True)
class TokenValidationInfo:
    """Antwort von id.twitch.tv/oauth2/validate"""
    client_id: str
    login: Optional[str]  # fehlt bei App-Tokens
    scopes: List[str]
    user_id: Optional[str]
    expires_in: int

    @property
    def is_user_token(self):
        return self.user_id is not None

    @classmethod
    def from_json(cls, data):
        return cls(
            client_id=data["client_id"],
            login=data.get("login"),
            scopes=list(data.get("scopes") or []),
            user_id=data.get("user_id"),
            expires_in=int(data.get("expires_in") or 0),
        )


def validate(session):
    """Prüft den Token und merkt sich den User in der Session."""
    session.require_token()

    data = helix.request(session, f"{helix.OAUTH}/validate", requires_auth=True)
    info = TokenValidationInfo.from_json(data)
    session.set_user_info(info)

    if not info.is_user_token:
        LOGGER.info("✅ App-Token gültig (Client-ID %s), läuft ab in %ss", info.client_id, info.expires_in)
        return info

    if session.username and session.username.lower() != info.login.lower():
        LOGGER.warning("Token gehört zu '%s', konfiguriert ist aber '%s'", info.login, session.username)

    LOGGER.info("✅ Token gültig für %s (ID: %s), läuft ab in %ss", info.login, info.user_id, info.expires_in)
    LOGGER.debug("Scopes: %s", info.scopes)
    return info


def authorize_url(session, scopes=None, redirect_uri=REDIRECT_URI, force_verify=False):
    # Implicit Grant: Twitch hängt den Token als #access_token=... an die Redirect-URI
    params = {
        "client_id": session.require_client_id(),
        "redirect_uri": redirect_uri,
        "response_type": "token",
        "scope": " ".join(SCOPES if scopes is None else scopes),
    }
    if force_verify:
        params["force_verify"] = True
    return helix.build_url(f"{helix.OAUTH}/authorize", params)


def authenticate(session, scopes=None, redirect_uri=REDIRECT_URI, open_browser=webbrowser.open):
    """
    Öffnet die Twitch-Anmeldung im Browser. Den Token aus der Redirect-URI übernimmt
    der Aufrufer danach mit session.set_token().
    """
    url = authorize_url(session, scopes, redirect_uri)
    LOGGER.info("Öffne Browser zur Anmeldung ...")
    open_browser(url)
    return url


def app_token(session):
    """
    App Access Token (client_credentials). Wird nur dann als Bearer-Token übernommen,
    wenn noch kein User-Token konfiguriert ist.
    """
    params = {
        "client_id": session.require_client_id(),
        "client_secret": session.require_client_secret(),
        "grant_type": "client_credentials",
    }
    data = helix.request(session, f"{helix.OAUTH}/token", params=params, method="POST")
    token = data["access_token"]

    if not session.token:
        session.set_token(token)
        LOGGER.info("App-Token übernommen (gültig %ss)", data.get("expires_in"))
    return token


def refresh(session, refresh_token):
    """Tauscht den Refresh-Token gegen einen neuen Access-Token und gibt den neuen Refresh-Token zurück."""
    params = {
        "client_id": session.require_client_id(),
        "client_secret": session.require_client_secret(),
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
    }
    data = helix.request(session, f"{helix.OAUTH}/token", params=params, method="POST")
    session.set_token(data["access_token"])
    return data.get("refresh_token")


def revoke(session):
    params = {
        "client_id": session.require_client_id(),
        "token": session.require_token(),
    }
    helix.request(session, f"{helix.OAUTH}/revoke", params=params, method="POST")
    session.clear_token()
    LOGGER.info("Token widerrufen")


def user_info(session):
    """Validierter User der Session; App-Tokens haben keinen User."""
    session.require_token()
    info = session.user_info or validate(session)
    if not info.is_user_token:
        raise PreconditionError(
            "User-Token nötig: der konfigurierte Token ist ein App-Token ohne Twitch-User. "
            "Bitte 'twitchlist auth' ausführen."
        )
    return info
