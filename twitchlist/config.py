import os
import json
import logging
from pathlib import Path

from twitchlist.fremdsys.errors import PreconditionError
from twitchlist.session_user import Credentials, strip_oauth_prefix

LOGGER = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Konfiguration
# -----------------------------------------------------------------------------
# Priorität: ENV > config_local.json > default
#
# - Client-ID / Client-Secret kommen aus der Twitch Developer Console.
# - Der OAuth-Token ist optional. Ohne Token gehen nur Aufrufe, die keinen
#   User brauchen (bzw. mit App-Token, siehe oauth.app_token()).
# - TWITCHLIST_CONFIG_PATH zeigt auf eine andere JSON-Datei.
# -----------------------------------------------------------------------------

DEFAULT_CONFIG_FILE = Path.home() / ".config" / "twitchlist" / "config_local.json"


def config_file(environ=None):
    environ = os.environ if environ is None else environ
    return Path(environ.get("TWITCHLIST_CONFIG_PATH") or DEFAULT_CONFIG_FILE)


def _load_file_config(path) -> dict:
    path = Path(path)
    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                return data
            LOGGER.warning("%s enthält kein JSON-Objekt, wird ignoriert", path)
        except (OSError, ValueError) as e:
            # validate() gibt eine klare Fehlermeldung aus
            LOGGER.warning("%s konnte nicht gelesen werden: %s", path, e)
    return {}


class Config:
    def __init__(self, environ=None, path=None):
        self.environ = os.environ if environ is None else environ
        self.path = Path(path) if path else config_file(self.environ)
        self.file_cfg = _load_file_config(self.path)

        # Twitch
        self.CLIENT_ID = self._cfg("TWITCHLIST_CLIENT_ID", "")
        self.CLIENT_SECRET = self._cfg("TWITCHLIST_CLIENT_SECRET", "")
        self.TOKEN = strip_oauth_prefix(self._cfg("TWITCHLIST_TOKEN", ""))
        self.USERNAME = self._cfg("TWITCHLIST_USERNAME", "")
        self.REDIRECT_URI = self._cfg("TWITCHLIST_REDIRECT_URI", "http://localhost:8080")

        # HTTP
        timeout = self._cfg("TWITCHLIST_TIMEOUT", "10")
        try:
            self.TIMEOUT = float(timeout)
        except ValueError:
            raise PreconditionError(f"TWITCHLIST_TIMEOUT muss eine Zahl (Sekunden) sein, nicht {timeout!r}") from None

    def _cfg(self, name: str, default: str = "") -> str:
        v = self.environ.get(name)
        if v is not None and v != "":
            return v
        # JSON-Key = gleicher Name wie die ENV-Variable
        if name in self.file_cfg and self.file_cfg[name] not in (None, ""):
            return str(self.file_cfg[name])
        return default

    def credentials(self) -> Credentials:
        return Credentials(
            client_id=self.CLIENT_ID,
            client_secret=self.CLIENT_SECRET,
            token=self.TOKEN or None,
            username=self.USERNAME,
        )

    def validate(self, require_secret=False):
        missing = []
        if not self.CLIENT_ID: missing.append("TWITCHLIST_CLIENT_ID")
        if require_secret and not self.CLIENT_SECRET: missing.append("TWITCHLIST_CLIENT_SECRET")

        if missing:
            hint = (
                "Konfiguration unvollständig. Bitte setzen: " + ", ".join(missing) + "\n\n"
                "Option A: Datei 'config_local.json' anlegen.\n"
                f"Pfad: {self.path}\n\n"
                "Beispielinhalt:\n"
                "{\n"
                "  \"TWITCHLIST_CLIENT_ID\": \"<client-id>\",\n"
                "  \"TWITCHLIST_CLIENT_SECRET\": \"<client-secret>\",\n"
                "  \"TWITCHLIST_TOKEN\": \"<oauth-token>\",\n"
                "  \"TWITCHLIST_USERNAME\": \"<twitch-login>\"\n"
                "}\n\n"
                "Option B: ENV Variablen setzen."
            )
            raise PreconditionError(hint)


def load_credentials(environ=None, path=None) -> Credentials:
    return Config(environ=environ, path=path).credentials()
