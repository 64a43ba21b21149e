"""Packets exchanged between game clients and the server.

Client packets travel from a client to the server; server packets travel
the other way. Each packet is encoded as a variant index followed by the
packet's fields in declaration order.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Tuple, Union

from tribalcraft.wire import DecodeError, Decoder, Encoder

_U8_MAX = 0xFF
_U32_MAX = 0xFFFF_FFFF
_U64_MAX = 0xFFFF_FFFF_FFFF_FFFF


def _write_u64(enc: Encoder, value: int) -> None:
    if not 0 <= value <= _U64_MAX:
        raise ValueError(f"{value} does not fit in an unsigned 64-bit integer")
    enc.write_varint(value)


def _read_u64(dec: Decoder) -> int:
    value = dec.read_varint()
    if value > _U64_MAX:
        raise DecodeError(f"{value} does not fit in an unsigned 64-bit integer")
    return value


def _read_tag(dec: Decoder) -> int:
    tag = dec.read_varint()
    if tag > _U32_MAX:
        raise DecodeError(f"variant index {tag} out of range")
    return tag


class ClientSignal(enum.IntEnum):
    """Client packets that carry no data, by variant index."""

    AIM = 2
    HIT = 3
    PLACE = 4


class ServerSignal(enum.IntEnum):
    """Server packets that carry no data, by variant index."""

    ADD_BUILDING = 4
    REMOVE_BUILDING = 5
    UPDATE_BUILDING = 6
    ADD_ANIMAL = 7
    REMOVE_ANIMAL = 8
    UPDATE_ANIMALS = 9


@dataclass
class SpawnPacket:
    """Request to join the game under a name."""

    TAG: ClassVar[int] = 0
    name: str

    def _encode(self, enc: Encoder) -> None:
        enc.write_str(self.name)

    @classmethod
    def _decode(cls, dec: Decoder) -> "SpawnPacket":
        return cls(name=dec.read_str())


@dataclass
class MovePacket:
    """Movement direction in radians, or None to stop."""

    TAG: ClassVar[int] = 1
    dir: Optional[float] = None

    def _encode(self, enc: Encoder) -> None:
        enc.write_option(self.dir, enc.write_f32)

    @classmethod
    def _decode(cls, dec: Decoder) -> "MovePacket":
        return cls(dir=dec.read_option(dec.read_f32))


@dataclass
class AimPacket:
    """Aim direction as a signed byte."""

    direction: int

    def __post_init__(self) -> None:
        if not -128 <= self.direction <= 127:
            raise ValueError(f"direction {self.direction} does not fit in a signed byte")


@dataclass
class HitPacket:
    """Request to attack."""


@dataclass
class PlacePacket:
    """Request to place an item."""

    item: int

    def __post_init__(self) -> None:
        if not 0 <= self.item <= _U8_MAX:
            raise ValueError(f"item {self.item} does not fit in an unsigned byte")


@dataclass
class AddPlayerPacket:
    """Announces a player to a client."""

    TAG: ClassVar[int] = 0
    id: int
    name: str
    x: float
    y: float

    def _encode(self, enc: Encoder) -> None:
        _write_u64(enc, self.id)
        enc.write_str(self.name)
        enc.write_f32(self.x)
        enc.write_f32(self.y)

    @classmethod
    def _decode(cls, dec: Decoder) -> "AddPlayerPacket":
        return cls(id=_read_u64(dec), name=dec.read_str(), x=dec.read_f32(), y=dec.read_f32())


@dataclass
class SetInitPacket:
    """Initial state of a player; is_mine marks the receiving client's own."""

    TAG: ClassVar[int] = 1
    is_mine: bool
    id: int
    x: float
    y: float
    name: str

    def _encode(self, enc: Encoder) -> None:
        enc.write_bool(self.is_mine)
        _write_u64(enc, self.id)
        enc.write_f32(self.x)
        enc.write_f32(self.y)
        enc.write_str(self.name)

    @classmethod
    def _decode(cls, dec: Decoder) -> "SetInitPacket":
        return cls(
            is_mine=dec.read_bool(),
            id=_read_u64(dec),
            x=dec.read_f32(),
            y=dec.read_f32(),
            name=dec.read_str(),
        )


@dataclass
class RemovePlayerPacket:
    """Removes a player from a client's view."""

    TAG: ClassVar[int] = 2
    id: int

    def _encode(self, enc: Encoder) -> None:
        _write_u64(enc, self.id)

    @classmethod
    def _decode(cls, dec: Decoder) -> "RemovePlayerPacket":
        return cls(id=_read_u64(dec))


@dataclass
class UpdatePlayersPacket:
    """Positions of all players as (id, x, y) triples."""

    TAG: ClassVar[int] = 3
    data: List[Tuple[int, float, float]] = field(default_factory=list)

    def _encode(self, enc: Encoder) -> None:
        enc.write_varint(len(self.data))
        for player_id, x, y in self.data:
            _write_u64(enc, player_id)
            enc.write_f32(x)
            enc.write_f32(y)

    @classmethod
    def _decode(cls, dec: Decoder) -> "UpdatePlayersPacket":
        count = dec.read_varint()
        return cls(data=[(_read_u64(dec), dec.read_f32(), dec.read_f32()) for _ in range(count)])


ClientPacket = Union[SpawnPacket, MovePacket, ClientSignal]
ServerPacket = Union[
    AddPlayerPacket, SetInitPacket, RemovePlayerPacket, UpdatePlayersPacket, ServerSignal
]

_CLIENT_TYPES = {cls.TAG: cls for cls in (SpawnPacket, MovePacket)}
_SERVER_TYPES = {
    cls.TAG: cls
    for cls in (AddPlayerPacket, SetInitPacket, RemovePlayerPacket, UpdatePlayersPacket)
}


def _encode(packet, types: dict, signal_type: type) -> bytes:
    enc = Encoder()
    if isinstance(packet, signal_type):
        enc.write_varint(int(packet))
    elif type(packet) in types.values():
        enc.write_varint(packet.TAG)
        packet._encode(enc)
    else:
        raise TypeError(f"{type(packet).__name__} cannot be sent in this direction")
    return enc.getvalue()


def _decode(data: bytes, types: dict, signal_type: type):
    dec = Decoder(data)
    tag = _read_tag(dec)
    packet_type = types.get(tag)
    if packet_type is not None:
        return packet_type._decode(dec)
    try:
        return signal_type(tag)
    except ValueError:
        raise DecodeError(f"unknown packet variant {tag}") from None


def encode_client_packet(packet: ClientPacket) -> bytes:
    """Encode a packet sent from a client to the server."""
    return _encode(packet, _CLIENT_TYPES, ClientSignal)


def decode_client_packet(data: bytes) -> ClientPacket:
    """Decode a packet sent by a client; trailing bytes are ignored."""
    return _decode(data, _CLIENT_TYPES, ClientSignal)


def encode_server_packet(packet: ServerPacket) -> bytes:
    """Encode a packet sent from the server to a client."""
    return _encode(packet, _SERVER_TYPES, ServerSignal)


def decode_server_packet(data: bytes) -> ServerPacket:
    """Decode a packet sent by the server; trailing bytes are ignored."""
    return _decode(data, _SERVER_TYPES, ServerSignal)