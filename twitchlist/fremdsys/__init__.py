# Fremdsysteme: alles, was mit der Twitch-API spricht.
