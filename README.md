# tribalcraft

A small multiplayer top-down game. One process runs the authoritative game
server; players connect to it with the graphical client and walk around a
14400 × 14400 map drawn as a snow band, a grassland and a desert band.

## Installing

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Running the server

```
tribalcraft-server [--host HOST] [--port PORT]
```

By default the server listens for websocket connections on `0.0.0.0`, port
8089. It clears the terminal on start and logs to the console.

The world advances about every 103 ms. Each player moves at a fixed speed in
the direction their client last reported, loses 60 % of their speed per tick
when no direction is set, and is kept at least 35 units (the player radius)
inside the map edges. After every tick the id and position of every player is
sent to every client that has spawned. The IP address of each connecting
client is appended to `ips.log` in the working directory.

When a client sends a spawn request, the server places a new player at a
random spot, sends that client its own player (marked as its own) and tells
every other spawned client about the newcomer.

## Running the client

```
tribalcraft-client [--url URL]
```

The default URL is `ws://localhost:8089/`. The client opens a resizable
window, connects, spawns a player named `test` and centres the view on it.
Move with `W`, `A`, `S`, `D` or the arrow keys; the direction held is sent to
the server each time the server reports new positions. Every known player is
drawn as a red circle over the map and its grid.

## Using the protocol from Python

Messages are compact binary frames: a variant index followed by the packet's
fields, using variable-length integers, little-endian 32-bit floats,
length-prefixed UTF-8 strings and one-byte option tags. The
`tribalcraft.packets` module builds and reads them:

```python
from tribalcraft.packets import (
    MovePacket,
    SpawnPacket,
    decode_client_packet,
    encode_client_packet,
)

frame = encode_client_packet(SpawnPacket(name="test"))
packet = decode_client_packet(frame)          # SpawnPacket(name='test')
encode_client_packet(MovePacket(dir=None))    # stop moving
```

`encode_server_packet` and `decode_server_packet` do the same for the
messages the server sends: `AddPlayerPacket`, `SetInitPacket`,
`RemovePlayerPacket`, `UpdatePlayersPacket` and the data-less
`ServerSignal` values. Data-less client messages are the `ClientSignal`
values. Decoding raises `tribalcraft.wire.DecodeError` on truncated or
malformed input; encoding a packet in the wrong direction raises `TypeError`.

The lower-level `Encoder` and `Decoder` in `tribalcraft.wire` write and read
the individual values.

The world can also be driven without a network: `tribalcraft.server.world.Server`
accepts any object with an async `send(bytes)` method as a client's writer,
and `Server.update()` runs one tick.

## What it does not do

- The player's name cannot be chosen; the client always spawns as `test`.
- A client that joins is told only about its own player, not about players
  who spawned before it, so it does not draw them.
- Players stay in the world after their connection closes; no removal is
  sent.
- Aiming, hitting and placing requests are understood on the wire but the
  server ignores them, and there are no buildings or animals.
- There is no persistent storage apart from the `ips.log` connection record.