class TwitchError(Exception):
    """Basisklasse für alle Fehler rund um die Twitch-API."""


class TransportError(TwitchError):
    """Anfrage konnte nicht durchgeführt werden (Netzwerk, TLS, Timeout)."""


class DecodeError(TransportError):
    """Antwort kam an, ist aber kein gültiges JSON-Objekt."""


class PreconditionError(TwitchError):
    """Es fehlt Konfiguration (Token, Client-ID, ...) - es wurde nichts gesendet."""


class APIError(TwitchError):
    """Twitch hat mit einem ``error``-Feld geantwortet."""

    def __init__(self, status, error, message=None):
        self.status = status
        self.error = error
        self.message = message
        super().__init__(str(self))

    def __str__(self):
        text = f"Twitch API Fehler {self.status} {self.error}"
        if self.message:
            text += f": {self.message}"
        return text
