"""The authoritative game server: player movement, the world tick loop and websocket connections."""