import collections
import queue
import threading
from unittest import mock

import pygame
import pytest
import websocket

from tribalcraft.client.game import Game
from tribalcraft.client.main import (
    OUTBOX_CAPACITY,
    Connection,
    pressed_directions,
)
from tribalcraft.packets import (
    MovePacket,
    SetInitPacket,
    SpawnPacket,
    UpdatePlayersPacket,
    decode_client_packet,
    encode_server_packet,
)


def _keys(*codes):
    state = collections.defaultdict(bool)
    for code in codes:
        state[code] = True
    return state


class FakeSocket:
    def __init__(self, incoming):
        self._incoming = queue.Queue()
        for item in incoming:
            self._incoming.put(item)
        self.sent = []
        self.closed = threading.Event()

    def recv(self):
        try:
            return self._incoming.get_nowait()
        except queue.Empty:
            raise websocket.WebSocketConnectionClosedException("closed")

    def send_binary(self, data):
        self.sent.append(data)

    def close(self):
        self.closed.set()


def test_pressed_directions_none_pressed():
    assert pressed_directions(_keys()) == []


def test_pressed_directions_single_key():
    assert pressed_directions(_keys(pygame.K_w)) == [(0.0, -1.0)]


def test_pressed_directions_combined_keys():
    result = pressed_directions(_keys(pygame.K_d, pygame.K_DOWN))
    assert sorted(result) == sorted([(1.0, 0.0), (0.0, 1.0)])


def test_pressed_directions_arrow_matches_letter():
    assert pressed_directions(_keys(pygame.K_LEFT)) == pressed_directions(_keys(pygame.K_a))


def test_handle_set_init_creates_own_player():
    game = Game()
    conn = Connection("ws://localhost:8089/", game)
    data = encode_server_packet(SetInitPacket(is_mine=True, id=5, x=10.0, y=20.0, name="a"))
    packet = conn.handle_bytes(data)
    assert packet == SetInitPacket(is_mine=True, id=5, x=10.0, y=20.0, name="a")
    assert game.my_player_id == 5
    assert conn.outbox.empty()


def test_handle_update_moves_player_and_replies():
    game = Game()
    conn = Connection("ws://localhost:8089/", game)
    conn.handle_bytes(encode_server_packet(SetInitPacket(is_mine=False, id=2, x=1.0, y=2.0, name="b")))
    game.move_dir = 1.5
    conn.handle_bytes(encode_server_packet(UpdatePlayersPacket(data=[(2, 50.0, 60.0)])))
    player = game.get_player_by_id(2)
    assert (player.x, player.y) == (50.0, 60.0)
    assert (player.last_x, player.last_y) == (1.0, 2.0)
    assert decode_client_packet(conn.outbox.get_nowait()) == MovePacket(dir=1.5)


def test_handle_bad_bytes_is_ignored():
    game = Game()
    conn = Connection("ws://localhost:8089/", game)
    assert conn.handle_bytes(b"\xff") is None
    assert game.all_players == []
    assert conn.outbox.empty()


def test_send_rejects_server_packet():
    conn = Connection("ws://localhost:8089/", Game())
    assert conn.send(SetInitPacket(is_mine=True, id=1, x=0.0, y=0.0, name="x")) is False
    assert conn.outbox.empty()


def test_send_fails_when_outbox_full():
    conn = Connection("ws://localhost:8089/", Game())
    for _ in range(OUTBOX_CAPACITY):
        assert conn.send(MovePacket(dir=None)) is True
    assert conn.send(MovePacket(dir=None)) is False
    assert conn.outbox.qsize() == OUTBOX_CAPACITY


def test_start_failure_returns_false():
    conn = Connection("ws://localhost:8089/", Game())
    with mock.patch("websocket.create_connection", side_effect=OSError("refused")):
        assert conn.start() is False


def test_start_spawns_and_reads():
    game = Game()
    incoming = [encode_server_packet(SetInitPacket(is_mine=True, id=9, x=3.0, y=4.0, name="me"))]
    fake = FakeSocket(incoming)
    conn = Connection("ws://localhost:8089/", game)
    with mock.patch("websocket.create_connection", return_value=fake):
        assert conn.start() is True
    conn.close()

    assert fake.closed.is_set()
    assert len(fake.sent) >= 2
    assert decode_client_packet(fake.sent[0]) == SpawnPacket(name="test")
    move = decode_client_packet(fake.sent[1])
    assert move.dir == pytest.approx(3.14, rel=1e-6)
    assert game.my_player_id == 9
    assert [p.name for p in game.all_players] == ["me"]