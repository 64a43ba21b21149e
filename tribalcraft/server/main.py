"""Game server entry point: accepts websocket clients and runs the tick loop."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Any, Optional

import websockets
from websockets.exceptions import ConnectionClosed

from tribalcraft.packets import MovePacket, SpawnPacket, decode_client_packet
from tribalcraft.server.world import Server
from tribalcraft.wire import DecodeError

log = logging.getLogger(__name__)

TICK_INTERVAL = 0.103
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8089
IP_LOG = "ips.log"


@dataclass
class Session:
    """One connected client: its socket until it spawns, then its player id."""

    writer: Optional[Any]
    address: Optional[str] = None
    player_id: Optional[int] = None


async def handle_message(server: Server, session: Session, data: bytes) -> None:
    """Apply one binary message from a client to the world."""
    try:
        packet = decode_client_packet(data)
    except DecodeError as exc:
        log.warning("bad packet from %s: %s", session.address, exc)
        return

    log.debug("%r", packet)

    if isinstance(packet, SpawnPacket):
        if session.writer is None:
            log.warning("%s tried to spawn twice", session.address)
            return
        async with server.lock:
            log.info("adding player for %s, id: %d", session.address, server.instance_id)
            session.player_id = await server.add(session.writer, packet.name)
        session.writer = None
    elif isinstance(packet, MovePacket):
        if session.player_id is None:
            return
        async with server.lock:
            player = server.get_player_by_id(session.player_id)
            if player is not None:
                player.move_dir = packet.dir
    else:
        log.info("unhandled packet %r", packet)


async def handle_conn(server: Server, websocket: Any) -> None:
    """Serve one client until its connection closes."""
    address = websocket.remote_address
    session = Session(writer=websocket, address=str(address[0]) if address else None)
    try:
        async for message in websocket:
            if isinstance(message, (bytes, bytearray)):
                await handle_message(server, session, bytes(message))
            else:
                log.info("ignoring non-binary message %r", message)
    except ConnectionClosed as exc:
        log.info("connection from %s closed: %s", session.address, exc)


def log_ip_to_file(ip: str, path: str = IP_LOG) -> None:
    """Append a connection record for ip to path."""
    with open(path, "a", encoding="utf-8") as file:
        file.write(f"Client connected: {ip}\n")


async def game_loop(server: Server, interval: float = TICK_INTERVAL) -> None:
    """Tick the world forever, pausing between ticks without holding the lock."""
    while True:
        async with server.lock:
            await server.update()
        await asyncio.sleep(interval)


async def serve(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """Run the game server until cancelled."""
    server = Server()
    log.info("%s Server started.", server.region)

    async def handler(websocket: Any, *_: Any) -> None:
        address = websocket.remote_address
        ip = str(address[0]) if address else "unknown"
        log.info("New Player connected from %s", ip)
        try:
            log_ip_to_file(ip)
        except OSError as exc:
            print(f"failed to write IP to file: {exc}", file=sys.stderr)
        await handle_conn(server, websocket)

    loop_task = asyncio.create_task(game_loop(server))
    print("\x1b[2J\x1b[1;1H", end="", flush=True)
    try:
        async with websockets.serve(handler, host, port):
            await asyncio.Future()
    finally:
        loop_task.cancel()


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(prog="tribalcraft-server", description="Run the game server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        asyncio.run(serve(args.host, args.port))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())