import argparse
import logging
import sys

from twitchlist import __version__
from twitchlist.config import Config
from twitchlist.fremdsys import oauth, tapi_data, tapi_mod
from twitchlist.fremdsys.errors import TwitchError
from twitchlist.session_user import Session

LOGGER = logging.getLogger(__name__)

MAX_WIDTH = 30


def format_table(columns, rows):
    """Tabelle mit festen Spaltenbreiten, zu lange Werte werden gekürzt."""
    rows = [["" if v is None else str(v) for v in row] for row in rows]

    col_widths = []
    for i, col_name in enumerate(columns):
        max_width = len(col_name)
        for row in rows:
            max_width = max(max_width, len(row[i]))
        col_widths.append(min(max_width, MAX_WIDTH))

    def line(values):
        cells = []
        for i, value in enumerate(values):
            if len(value) > col_widths[i]:
                value = value[:col_widths[i] - 3] + "..."
            cells.append(f"{value:<{col_widths[i]}}")
        return " | ".join(cells).rstrip()

    header = line(list(columns))
    out = [header, "-" * len(header)]
    out.extend(line(row) for row in rows)
    return "\n".join(out)


def cmd_streams(session, args):
    streams = tapi_data.search_streams(session, args.query, limit=args.limit)
    print(format_table(
        ("Name", "Zuschauer", "Spiel", "Status", "URL"),
        [(s.name, s.viewers, s.game, s.status, s.url) for s in streams],
    ))


def cmd_followed(session, args):
    streams = tapi_data.followed_streams(session, limit=args.limit)
    print(format_table(
        ("Name", "Zuschauer", "Spiel", "Status", "URL"),
        [(s.name, s.viewers, s.game, s.status, s.url) for s in streams],
    ))


def cmd_channels(session, args):
    channels = tapi_data.search_channels(session, args.query, limit=args.limit, live_only=args.live)
    print(format_table(
        ("Name", "Live", "Spiel"),
        [(c.name, "ja" if c.status else "nein", c.game) for c in channels],
    ))


def cmd_validate(session, args):
    info = oauth.validate(session)
    if info.is_user_token:
        print(f"Login:      {info.login}")
        print(f"User-ID:    {info.user_id}")
    else:
        print("App-Token (kein Twitch-User)")
    print(f"Client-ID:  {info.client_id}")
    print(f"Scopes:     {', '.join(info.scopes)}")
    print(f"Läuft ab in {info.expires_in}s")


def cmd_auth(session, args):
    if args.no_browser:
        url = oauth.authorize_url(session, redirect_uri=args.redirect_uri)
    else:
        url = oauth.authenticate(session, redirect_uri=args.redirect_uri)
    print("Anmelde-URL:")
    print(url)
    print("\nDen access_token aus der Redirect-URI als TWITCHLIST_TOKEN eintragen.")


def cmd_chat(session, args):
    sock = tapi_mod.connect(session, args.channel)
    try:
        for message in tapi_mod.read_messages(sock, duration=args.duration):
            print(f"{message['user']}: {message['message']}")
    finally:
        sock.close()


def build_parser():
    parser = argparse.ArgumentParser(prog="twitchlist", description="Twitch Streams und Kanäle im Terminal")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug-Ausgaben")
    parser.add_argument("--config", help="Pfad zur config_local.json")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("streams", help="Laufende Streams suchen")
    p.add_argument("query")
    p.add_argument("--limit", type=int)
    p.set_defaults(func=cmd_streams)

    p = sub.add_parser("channels", help="Kanäle suchen")
    p.add_argument("query")
    p.add_argument("--limit", type=int)
    p.add_argument("--live", action="store_true", help="nur Kanäle, die gerade live sind")
    p.set_defaults(func=cmd_channels)

    p = sub.add_parser("followed", help="Gefolgte Kanäle, die live sind")
    p.add_argument("--limit", type=int)
    p.set_defaults(func=cmd_followed)

    p = sub.add_parser("validate", help="OAuth-Token prüfen")
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("auth", help="Twitch-Anmeldung im Browser öffnen")
    p.add_argument("--no-browser", action="store_true", help="nur die URL ausgeben")
    p.add_argument("--redirect-uri", default=None)
    p.set_defaults(func=cmd_auth)

    p = sub.add_parser("chat", help="Chat eines Kanals mitlesen")
    p.add_argument("channel")
    p.add_argument("--duration", type=float, default=10.0)
    p.set_defaults(func=cmd_chat)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = Config(path=args.config)
        if args.command == "auth":
            # ohne Client-ID gibt es keine Anmelde-URL
            config.validate()
            if args.redirect_uri is None:
                args.redirect_uri = config.REDIRECT_URI
        session = Session(config.credentials(), timeout=config.TIMEOUT)
        args.func(session, args)
    except TwitchError as e:
        LOGGER.debug("Befehl %s fehlgeschlagen", args.command, exc_info=True)
        print(f"❌ {e}", file=sys.stderr)
        return 1
    return 0
