#!/usr/bin/env python3
"""GyroLaser headless controller

Joins an existing room as a controller and streams a synthetic pointer path,
standing in for the handheld client during demos and smoke tests.

The server sends nothing back on a successful controller join, so the client
waits a short grace period for an ``error`` before it starts streaming.
"""
import sys
import math
import asyncio
import logging
import argparse
from typing import Optional, Tuple

import socketio

from gyrolaser_utils.config_loader import ConfigManager
from gyrolaser_utils.event_utils import EventType
from gyrolaser_utils.logging_utils import setup_logging
from gyrolaser_utils.message_utils import (
    MessageType, Role, create_join_message, create_laser_move_message
)

logger = logging.getLogger(__name__)


def circle_path(step: int, steps: int = 120, radius: float = 0.3,
                center: Tuple[float, float] = (0.5, 0.5)) -> Tuple[float, float]:
    """Point ``step`` of ``steps`` on a circle in normalized screen coordinates."""
    angle = 2 * math.pi * (step % steps) / steps
    return center[0] + radius * math.cos(angle), center[1] + radius * math.sin(angle)


class LaserControllerClient:
    def __init__(self, server_url: str, room_id: str, rate: float = 60.0,
                 join_grace: float = 0.5):
        self.server_url = server_url
        self.room_id = room_id
        self.rate = rate
        self.join_grace = join_grace
        self.sent = 0
        self.last_error: Optional[dict] = None

        self._stop = asyncio.Event()
        self._error = asyncio.Event()

        self.sio = socketio.AsyncClient(logger=False, engineio_logger=False)
        self.register_handlers()

    # --- Socket.IO Event Handlers ---

    def register_handlers(self):
        self.sio.on('connect', self.on_connect)
        self.sio.on('disconnect', self.on_disconnect)
        self.sio.on(MessageType.ERROR.value, self.on_error)
        self.sio.on(EventType.VIEWER_LEFT.value, self.on_viewer_left)

    async def on_connect(self):
        logger.info(f"Connected to {self.server_url}")

    async def on_disconnect(self, *args):
        logger.warning("Disconnected from server.")
        self._stop.set()

    async def on_error(self, data=None):
        self.last_error = data if isinstance(data, dict) else {"message": str(data)}
        logger.error(f"Server error: {self.last_error.get('message')}")
        self._error.set()
        self._stop.set()

    async def on_viewer_left(self, *args):
        logger.info(f"Viewer left room {self.room_id}, stopping")
        self._stop.set()

    # --- Controller Actions ---

    async def join(self) -> bool:
        """Connect and join the room. Returns False if the server refused."""
        await self.sio.connect(self.server_url)
        await self.sio.emit(MessageType.JOIN_ROOM.value,
                            create_join_message(Role.CONTROLLER, self.room_id))
        try:
            await asyncio.wait_for(self._error.wait(), timeout=self.join_grace)
        except asyncio.TimeoutError:
            logger.info(f"Joined room {self.room_id} as controller")
            return True
        return False

    async def stream(self, duration: Optional[float] = None, steps: int = 120) -> int:
        """Send ``laser-move`` updates at ``rate`` per second until stopped.

        Returns the number of updates sent.
        """
        interval = 1.0 / self.rate
        loop = asyncio.get_running_loop()
        deadline = loop.time() + duration if duration is not None else None
        step = 0
        while not self._stop.is_set():
            if deadline is not None and loop.time() >= deadline:
                break
            x, y = circle_path(step, steps)
            await self.sio.emit(MessageType.LASER_MOVE.value, create_laser_move_message(x, y))
            self.sent += 1
            step += 1
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
        return self.sent

    def stop(self):
        self._stop.set()

    async def disconnect(self):
        if self.sio.connected:
            await self.sio.disconnect()


async def run_controller(server_url: str, room_id: str, rate: float,
                         duration: Optional[float]) -> int:
    client = LaserControllerClient(server_url, room_id, rate=rate)
    try:
        if not await client.join():
            return 1
        sent = await client.stream(duration)
        logger.info(f"Sent {sent} laser updates")
        return 0
    finally:
        await client.disconnect()


def main(argv=None) -> int:
    """Main entry point."""
    config_manager = ConfigManager()
    host = config_manager.get('server', 'public_host') or config_manager.get('server', 'host')
    default_url = f"http://{host}:{config_manager.get('server', 'port')}"

    parser = argparse.ArgumentParser(description='GyroLaser headless controller')
    parser.add_argument('--url', default=default_url, help='Server URL')
    parser.add_argument('--room', required=True, help='Room code shown by the viewer')
    parser.add_argument('--rate', type=float, default=60.0, help='Updates per second')
    parser.add_argument('--duration', type=float, default=None,
                        help='Seconds to stream (default: until the viewer leaves)')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    setup_logging('DEBUG' if args.debug else config_manager.get('logging', 'level'),
                  config_manager.get('logging', 'format'))
    try:
        return asyncio.run(run_controller(args.url, args.room, args.rate, args.duration))
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user")
        return 0
    except socketio.exceptions.ConnectionError as e:
        logger.error(f"Failed to connect to {args.url}: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
