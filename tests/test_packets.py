import pytest

from tribalcraft.packets import (
    AddPlayerPacket,
    AimPacket,
    ClientSignal,
    MovePacket,
    PlacePacket,
    RemovePlayerPacket,
    ServerSignal,
    SetInitPacket,
    SpawnPacket,
    UpdatePlayersPacket,
    decode_client_packet,
    decode_server_packet,
    encode_client_packet,
    encode_server_packet,
)
from tribalcraft.wire import DecodeError


def test_spawn_packet_wire_bytes():
    assert encode_client_packet(SpawnPacket(name="test")) == bytes([0, 4]) + b"test"


def test_move_packet_none_wire_bytes():
    assert encode_client_packet(MovePacket(dir=None)) == bytes([1, 0])


@pytest.mark.parametrize(
    "packet",
    [
        SpawnPacket(name="test"),
        SpawnPacket(name=""),
        MovePacket(dir=None),
        MovePacket(dir=1.5),
        MovePacket(dir=-0.25),
        ClientSignal.AIM,
        ClientSignal.HIT,
        ClientSignal.PLACE,
    ],
)
def test_client_packet_round_trip(packet):
    assert decode_client_packet(encode_client_packet(packet)) == packet


def test_move_packet_direction_precision():
    decoded = decode_client_packet(encode_client_packet(MovePacket(dir=3.14)))
    assert decoded.dir == pytest.approx(3.14, rel=1e-6)


@pytest.mark.parametrize(
    "packet",
    [
        AddPlayerPacket(id=7, name="bob", x=10.5, y=20.25),
        SetInitPacket(is_mine=True, id=2**64 - 1, x=0.0, y=14400.0, name="me"),
        SetInitPacket(is_mine=False, id=300, x=35.0, y=14365.0, name="other"),
        RemovePlayerPacket(id=99),
        UpdatePlayersPacket(data=[]),
        UpdatePlayersPacket(data=[(1, 2.5, 3.5), (70000, 100.0, 200.0)]),
        ServerSignal.ADD_BUILDING,
        ServerSignal.UPDATE_ANIMALS,
    ],
)
def test_server_packet_round_trip(packet):
    assert decode_server_packet(encode_server_packet(packet)) == packet


@pytest.mark.parametrize("signal", list(ServerSignal))
def test_server_signal_is_bare_index(signal):
    assert encode_server_packet(signal) == bytes([signal.value])


@pytest.mark.parametrize("signal", list(ClientSignal))
def test_client_signal_is_bare_index(signal):
    assert encode_client_packet(signal) == bytes([signal.value])


def test_packet_starts_with_variant_index():
    data = encode_server_packet(RemovePlayerPacket(id=5))
    assert data[0] == RemovePlayerPacket.TAG
    data = encode_server_packet(UpdatePlayersPacket(data=[(1, 1.0, 1.0)]))
    assert data[0] == UpdatePlayersPacket.TAG


def test_trailing_bytes_ignored():
    data = encode_client_packet(SpawnPacket(name="abc")) + b"\x00\x01"
    assert decode_client_packet(data) == SpawnPacket(name="abc")


def test_unknown_client_variant():
    with pytest.raises(DecodeError):
        decode_client_packet(bytes([5]))


def test_unknown_server_variant():
    with pytest.raises(DecodeError):
        decode_server_packet(bytes([10]))


def test_empty_packet():
    with pytest.raises(DecodeError):
        decode_client_packet(b"")
    with pytest.raises(DecodeError):
        decode_server_packet(b"")


def test_truncated_server_packet():
    data = encode_server_packet(SetInitPacket(is_mine=True, id=1, x=1.0, y=2.0, name="abc"))
    with pytest.raises(DecodeError):
        decode_server_packet(data[:-2])


def test_oversized_id_in_stream_rejected():
    data = bytes([RemovePlayerPacket.TAG, 254]) + (2**64).to_bytes(16, "little")
    with pytest.raises(DecodeError):
        decode_server_packet(data)


def test_encoding_id_out_of_range():
    with pytest.raises(ValueError):
        encode_server_packet(RemovePlayerPacket(id=2**64))
    with pytest.raises(ValueError):
        encode_server_packet(RemovePlayerPacket(id=-1))


def test_wrong_direction_rejected():
    with pytest.raises(TypeError):
        encode_client_packet(RemovePlayerPacket(id=1))
    with pytest.raises(TypeError):
        encode_server_packet(SpawnPacket(name="x"))
    with pytest.raises(TypeError):
        encode_server_packet(ClientSignal.AIM)


def test_aim_packet_range():
    assert AimPacket(direction=-128).direction == -128
    with pytest.raises(ValueError):
        AimPacket(direction=128)


def test_place_packet_range():
    assert PlacePacket(item=255).item == 255
    with pytest.raises(ValueError):
        PlacePacket(item=256)