"""A multiplayer top-down game: websocket server, pygame client and binary wire protocol."""

__version__ = "1.0.0"