"""twitchlist - Twitch Streams/Kanäle suchen und im Terminal auflisten."""

__version__ = "0.3.0"
