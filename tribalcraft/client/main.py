"""Game client entry point: socket connection, keyboard input and the frame loop."""

from __future__ import annotations

import argparse
import copy
import logging
import queue
import sys
import threading
from typing import Any, List, Optional, Sequence, Tuple

import pygame
import websocket

from tribalcraft.client.game import Game, move_direction
from tribalcraft.packets import (
    MovePacket,
    SpawnPacket,
    decode_server_packet,
    encode_client_packet,
)
from tribalcraft.wire import DecodeError

log = logging.getLogger(__name__)

DEFAULT_URL = "ws://localhost:8089/"
DEFAULT_NAME = "test"
INITIAL_MOVE_DIR = 3.14
OUTBOX_CAPACITY = 1024
FRAME_RATE = 60

_DIRECTION_KEYS: Tuple[Tuple[int, Tuple[float, float]], ...] = (
    (pygame.K_w, (0.0, -1.0)),
    (pygame.K_a, (-1.0, 0.0)),
    (pygame.K_s, (0.0, 1.0)),
    (pygame.K_d, (1.0, 0.0)),
    (pygame.K_UP, (0.0, -1.0)),
    (pygame.K_LEFT, (-1.0, 0.0)),
    (pygame.K_DOWN, (0.0, 1.0)),
    (pygame.K_RIGHT, (1.0, 0.0)),
)

_STOP = object()


def pressed_directions(keys: Any) -> List[Tuple[float, float]]:
    """Direction vectors of the movement keys held down in a key-state lookup."""
    return [vector for code, vector in _DIRECTION_KEYS if keys[code]]


class Connection:
    """A websocket link to the game server feeding a shared Game."""

    def __init__(self, url: str, game: Game) -> None:
        self.url = url
        self.game = game
        self.lock = threading.Lock()
        self.outbox: "queue.Queue[Any]" = queue.Queue(maxsize=OUTBOX_CAPACITY)
        self._ws: Optional[Any] = None
        self._threads: List[threading.Thread] = []

    def start(self) -> bool:
        """Open the socket, start the reader and writer, and ask to spawn."""
        try:
            self._ws = websocket.create_connection(self.url)
        except (websocket.WebSocketException, OSError) as exc:
            log.error("WebSocket failed to open: %s", exc)
            return False

        self._threads = [
            threading.Thread(target=self._write_loop, name="ws-writer", daemon=True),
            threading.Thread(target=self._read_loop, name="ws-reader", daemon=True),
        ]
        for thread in self._threads:
            thread.start()

        self.send(SpawnPacket(name=DEFAULT_NAME))
        self.send(MovePacket(dir=INITIAL_MOVE_DIR))
        return True

    def send(self, packet: Any) -> bool:
        """Queue a packet for the server; returns False if it could not be queued."""
        try:
            encoded = encode_client_packet(packet)
        except (TypeError, ValueError) as exc:
            log.error("error serializing data %r: %s", packet, exc)
            return False
        try:
            self.outbox.put_nowait(encoded)
        except queue.Full:
            log.error("error queuing serialized content: outbox full")
            return False
        return True

    def handle_bytes(self, data: bytes) -> Optional[Any]:
        """Decode one server message and apply it; returns the packet, or None if bad."""
        try:
            packet = decode_server_packet(data)
        except DecodeError as exc:
            log.error("failed to decode msg: %s", exc)
            return None

        with self.lock:
            reply = self.game.apply_packet(packet)
        if reply is not None:
            self.send(reply)
        return packet

    def close(self) -> None:
        """Stop the writer after queued packets are sent, then close the socket."""
        try:
            self.outbox.put(_STOP, timeout=1.0)
        except queue.Full:
            log.error("outbox full while closing")
        writer = self._threads[0] if self._threads else None
        if writer is not None:
            writer.join(timeout=2.0)
        if self._ws is not None:
            try:
                self._ws.close()
            except (websocket.WebSocketException, OSError) as exc:
                log.error("error closing socket: %s", exc)
        for thread in self._threads[1:]:
            thread.join(timeout=2.0)
        self._threads = []

    def _write_loop(self) -> None:
        while True:
            item = self.outbox.get()
            if item is _STOP:
                break
            try:
                self._ws.send_binary(item)
            except (websocket.WebSocketException, OSError) as exc:
                log.error("error sending to server: %s", exc)

    def _read_loop(self) -> None:
        while True:
            try:
                message = self._ws.recv()
            except (websocket.WebSocketException, OSError):
                break
            if isinstance(message, (bytes, bytearray)):
                if not message:
                    break
                self.handle_bytes(bytes(message))
        log.info("WebSocket connection closed")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="tribalcraft-client", description="Play the game.")
    parser.add_argument("--url", default=DEFAULT_URL)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    pygame.init()
    try:
        surface = pygame.display.set_mode((0, 0), pygame.RESIZABLE)
        clock = pygame.time.Clock()
        game = Game()
        connection = Connection(args.url, game)
        connection.start()
        try:
            running = True
            while running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                keys = pygame.key.get_pressed()
                delta = clock.tick(FRAME_RATE) / 1000.0
                with connection.lock:
                    game.move_dir = move_direction(pressed_directions(keys))
                    players = [copy.copy(p) for p in game.all_players]
                    my_id = game.my_player_id if game.my_player_id is not None else 0
                game.render.draw(surface, my_id, players, delta)
                pygame.display.flip()
        finally:
            connection.close()
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())