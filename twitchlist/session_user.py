import logging
from dataclasses import dataclass, replace
from typing import Optional

from twitchlist.fremdsys.errors import PreconditionError

LOGGER = logging.getLogger(__name__)


def strip_oauth_prefix(token):
    # IRC-Tokens kommen oft als "oauth:abc123"
    if token and token.startswith("oauth:"):
        return token[len("oauth:"):]
    return token


@dataclass(frozen=True)
class Credentials:
    client_id: str = ""
    client_secret: str = ""
    token: Optional[str] = None
    username: str = ""


class Session:
    """
    Repräsentiert die aktuelle Sitzung: Zugangsdaten + zuletzt validierter Twitch-User.
    Dieses Objekt wird an alle Funktionen in fremdsys/ weitergegeben, statt globale
    Variablen zu benutzen.
    """

    def __init__(self, credentials=None, timeout=10.0):
        self.credentials = credentials or Credentials()
        self.timeout = timeout
        self._user_info = None  # TokenValidationInfo nach oauth.validate()

    # Zugangsdaten
    @property
    def client_id(self):
        return self.credentials.client_id

    @property
    def client_secret(self):
        return self.credentials.client_secret

    @property
    def token(self):
        return self.credentials.token

    @property
    def username(self):
        return self.credentials.username

    def set_token(self, token):
        """Neuen Bearer-Token übernehmen. Die alte User-Info gilt dann nicht mehr."""
        self.credentials = replace(self.credentials, token=strip_oauth_prefix(token) or None)
        self._user_info = None
        LOGGER.info("Token gesetzt, Validierung zurückgesetzt")

    def clear_token(self):
        self.credentials = replace(self.credentials, token=None)
        self._user_info = None
        LOGGER.info("Token entfernt")

    # Validierter User
    @property
    def user_info(self):
        return self._user_info

    def set_user_info(self, info):
        self._user_info = info

    @property
    def display_name(self):
        if self._user_info and self._user_info.login:
            return self._user_info.login
        return self.username

    # Vorbedingungen - werden VOR jedem Netzwerkzugriff geprüft
    def require_token(self):
        if not self.token:
            raise PreconditionError(
                "Kein OAuth-Token konfiguriert. Bitte zuerst 'twitchlist auth' ausführen "
                "oder TWITCHLIST_TOKEN setzen."
            )
        return self.token

    def require_client_id(self):
        if not self.client_id:
            raise PreconditionError("Keine Client-ID konfiguriert (TWITCHLIST_CLIENT_ID).")
        return self.client_id

    def require_client_secret(self):
        if not self.client_secret:
            raise PreconditionError("Kein Client-Secret konfiguriert (TWITCHLIST_CLIENT_SECRET).")
        return self.client_secret

    def __repr__(self):
        login = self._user_info.login if self._user_info else None
        return f"<Session user={self.username or login!r} token={'ja' if self.token else 'nein'}>"
