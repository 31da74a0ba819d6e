"""
Übergabe an den Chat: Twitch-Chat ist IRC über TLS.
Hier wird nur eingeloggt und gelesen - einen richtigen Chat-Client ersetzt das nicht.
"""
import logging
import socket
import ssl
import time
from dataclasses import dataclass

from twitchlist.fremdsys import oauth
from twitchlist.fremdsys.errors import TransportError

LOGGER = logging.getLogger(__name__)

SERVER = "irc.chat.twitch.tv"
PORT = 6697  # TLS


@dataclass(frozen=True)
class ChatLogin:
    server: str
    port: int
    nick: str
    password: str

    def __repr__(self):
        return f"ChatLogin(server={self.server!r}, port={self.port}, nick={self.nick!r}, password='oauth:***')"


def chat_login(session):
    """Validierter Username + Token für den IRC-Login."""
    token = session.require_token()
    info = oauth.user_info(session)
    return ChatLogin(SERVER, PORT, info.login.lower(), f"oauth:{token}")


def connect(session, channel, timeout=1.0):
    login = chat_login(session)

    try:
        raw = socket.create_connection((login.server, login.port))
    except OSError as e:
        raise TransportError(f"Chat-Server {login.server}:{login.port} nicht erreichbar: {e}") from e

    try:
        context = ssl.create_default_context()
        sock = context.wrap_socket(raw, server_hostname=login.server)
        sock.settimeout(timeout)  # verhindert Blockieren in read_messages()

        sock.sendall(f"PASS {login.password}\r\n".encode("utf-8"))
        sock.sendall(f"NICK {login.nick}\r\n".encode("utf-8"))
        sock.sendall(f"JOIN #{channel.lower().lstrip('#')}\r\n".encode("utf-8"))
    except OSError as e:
        # ssl.SSLError ist ein OSError
        raw.close()
        raise TransportError(f"Chat-Login bei {login.server} fehlgeschlagen: {e}") from e

    LOGGER.info("Chat verbunden: #%s als %s", channel, login.nick)
    return sock


def parse_privmsg(line):
    # :user!user@user.tmi.twitch.tv PRIVMSG #kanal :text
    if " PRIVMSG " not in line:
        return None
    prefix, msg = line.split(" PRIVMSG ", 1)
    if " :" not in msg:
        return None
    user = prefix.split("!", 1)[0].lstrip(":")
    _, text = msg.split(" :", 1)
    return {"user": user, "message": text.strip()}


def read_messages(sock, duration=10.0, clock=time.monotonic):
    messages = []
    buffer = b""
    start_time = clock()

    while clock() - start_time < duration:
        try:
            chunk = sock.recv(2048)
        except socket.timeout:
            # Nach Timeout einfach nächste Runde
            continue
        except OSError as e:
            raise TransportError(f"Chat-Verbindung abgebrochen: {e}") from e
        if not chunk:
            LOGGER.warning("Chat-Verbindung vom Server geschlossen")
            break

        # erst an Zeilenenden trennen, dann decodieren
        buffer += chunk
        *lines, buffer = buffer.split(b"\r\n")

        for raw_line in lines:
            line = raw_line.decode("utf-8", errors="replace")
            if line.startswith("PING"):
                sock.sendall("PONG :tmi.twitch.tv\r\n".encode("utf-8"))
                continue
            message = parse_privmsg(line)
            if message:
                messages.append(message)

    return messages
