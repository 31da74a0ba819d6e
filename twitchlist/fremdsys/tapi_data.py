import logging
from dataclasses import dataclass

from twitchlist.fremdsys import helix, oauth

LOGGER = logging.getLogger(__name__)

TWITCH_URL = "https://twitch.tv"
DEFAULT_LIMIT = 100  # Helix erlaubt maximal 100 pro Seite


@dataclass(frozen=True)
class Stream:
    user_id: str
    name: str
    viewers: int
    status: str
    game: str
    url: str

    @classmethod
    def from_json(cls, entry):
        name = entry["user_name"]
        return cls(
            user_id=entry["user_id"],
            name=name,
            viewers=int(entry.get("viewer_count") or 0),
            status=(entry.get("type") or "").replace("\r", "").replace("\n", ""),
            game=entry.get("game_name") or "",
            url=f"{TWITCH_URL}/{name}",
        )


@dataclass(frozen=True)
class Channel:
    user_id: str
    name: str
    status: bool  # live bzw. gefolgt
    game: str

    @classmethod
    def from_json(cls, entry):
        # search/channels liefert die User-ID als "id"
        user_id = entry["user_id"] if "user_id" in entry else entry["id"]
        return cls(
            user_id=user_id,
            name=entry["display_name"],
            status=bool(entry.get("is_live")),
            game=entry.get("game_name") or "",
        )


def _entries(response):
    if response is None:
        return []
    return response.get("data") or []


def sort_by_viewers(streams):
    """Für die Listenansicht: meiste Zuschauer zuerst."""
    return sorted(streams, key=lambda s: s.viewers, reverse=True)


def search_streams(session, query, limit=None):
    """
    Sucht laufende Streams. Helix hat keine Stream-Suche, daher zuerst Live-Kanäle
    zum Suchbegriff suchen und dann deren Streams über die User-IDs holen.
    """
    channels = search_channels(session, query, limit=limit or DEFAULT_LIMIT, live_only=True)
    if not channels:
        return []

    params = {"user_id": [c.user_id for c in channels], "first": len(channels)}
    response = helix.request(session, f"{helix.HELIX}/streams", requires_auth=True, params=params)
    streams = [Stream.from_json(e) for e in _entries(response)]
    LOGGER.info("%d Streams für '%s' gefunden", len(streams), query)
    return sort_by_viewers(streams)


def search_channels(session, query, limit=None, live_only=False):
    params = {"query": query}
    if limit:
        params["first"] = limit
    if live_only:
        params["live_only"] = True

    response = helix.request(session, f"{helix.HELIX}/search/channels", requires_auth=True, params=params)
    channels = [Channel.from_json(e) for e in _entries(response)]
    LOGGER.info("%d Kanäle für '%s' gefunden", len(channels), query)
    return channels


def followed_streams(session, limit=None):
    """Live-Streams der Kanäle, denen der eingeloggte User folgt."""
    # user_id gibt es nur über eine erfolgreiche Validierung mit User-Token
    info = oauth.user_info(session)

    params = {"user_id": info.user_id}
    if limit:
        params["first"] = limit

    response = helix.request(session, f"{helix.HELIX}/streams/followed", requires_auth=True, params=params)
    streams = [Stream.from_json(e) for e in _entries(response)]
    LOGGER.info("%d gefolgte Streams live", len(streams))
    return sort_by_viewers(streams)
