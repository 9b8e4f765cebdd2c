#!/usr/bin/env python3
"""GyroLaser Socket.IO Server

This module implements the relay server that pairs a presentation viewer with a
handheld controller and forwards pointer positions between them. Connections
are handled by a python-socketio ``AsyncServer`` attached to an aiohttp
application, which also serves the QR code, static client and health routes.

Key Features:
- Room creation for viewers and room joining for controllers
- Real-time laser position relay, no server-side throttling
- Notification of the remaining member when a peer disconnects
- Periodic status logging of live rooms and connections
"""
import sys
import asyncio
import logging
import argparse
from typing import Any, Dict, Optional, Tuple

import socketio
from aiohttp import web

from gyrolaser_core.pairing import handle_join_room
from gyrolaser_core.reconciler import handle_disconnect
from gyrolaser_core.registry import ConnectionRegistry
from gyrolaser_core.relay import handle_laser_move
from gyrolaser_utils.config_loader import ConfigManager
from gyrolaser_utils.logging_utils import setup_logging
from gyrolaser_utils.message_utils import MessageType

from .http_routes import CONFIG_KEY, REGISTRY_KEY, setup_routes

logger = logging.getLogger(__name__)


def register_socket_handlers(sio: socketio.AsyncServer, registry: ConnectionRegistry) -> None:
    """Wire the Socket.IO events to the relay core."""

    @sio.event
    async def connect(sid: str, environ: Dict, auth: Optional[Dict] = None):
        """Handle new client connections."""
        request = environ.get('aiohttp.request')
        address = request.remote if request is not None else environ.get('REMOTE_ADDR')
        registry.connect(sid, address)
        logger.info(f"Client connected: {sid} ({address or 'Unknown IP'})")

    @sio.event
    async def disconnect(sid: str, reason: Any = None):
        """Handle client disconnections, whatever the cause."""
        await handle_disconnect(sio, registry, sid, reason)

    @sio.on(MessageType.JOIN_ROOM.value)
    async def on_join_room(sid: str, data: Any = None):
        await handle_join_room(sio, registry, sid, data)

    @sio.on(MessageType.LASER_MOVE.value)
    async def on_laser_move(sid: str, data: Any = None):
        await handle_laser_move(sio, registry, sid, data)


def create_app(config: Dict[str, Any]) -> Tuple[web.Application, socketio.AsyncServer]:
    """Build the aiohttp application and its attached Socket.IO server."""
    registry = ConnectionRegistry()
    sio = socketio.AsyncServer(
        async_mode='aiohttp',
        cors_allowed_origins=config['server'].get('cors_origins', '*'),
        async_handlers=False,
        logger=False,
        engineio_logger=False
    )
    app = web.Application()
    app[CONFIG_KEY] = config
    app[REGISTRY_KEY] = registry
    sio.attach(app)

    register_socket_handlers(sio, registry)
    setup_routes(app, config)
    return app, sio


# --- Health Check / Periodic Tasks ---
async def periodic_status(registry: ConnectionRegistry, interval: float):
    """Log the number of live rooms and connections every ``interval`` seconds."""
    while True:
        await asyncio.sleep(interval)
        logger.info(f"Periodic check: {registry.room_count} room(s), "
                    f"{registry.connection_count} connection(s)")
        logger.debug(f"Rooms: {registry.snapshot()}")


# --- Argument Parsing ---
def parse_args(config_manager: ConfigManager, argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="GyroLaser Socket.IO relay server")
    parser.add_argument('--host', type=str, default=config_manager.get('server', 'host'),
                        help='Host IP address to bind the server to.')
    parser.add_argument('--port', type=int, default=config_manager.get('server', 'port'),
                        help='Port number to bind the server to.')
    parser.add_argument('--log-level', type=str, default=config_manager.get('logging', 'level'),
                        help='Logging level (DEBUG, INFO, WARNING, ...).')
    return parser.parse_args(argv)


# --- Server Lifecycle ---
async def run_server(app: web.Application, host: str, port: int):
    """Start the server and serve until cancelled."""
    config = app[CONFIG_KEY]
    registry = app[REGISTRY_KEY]
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)

    logger.info(f"Starting Socket.IO server on {host}:{port}")
    await site.start()
    logger.info(f"GyroLaser server running at http://{host}:{port}")
    logger.info("  /                   -> redirects to /desktop")
    logger.info("  /desktop            -> viewer (slides + laser)")
    logger.info("  /mobile             -> controller (gyro laser)")
    logger.info("  /api/qrcode/:roomId -> QR code PNG")

    status_task: Optional[asyncio.Task] = None
    health_check = config.get('health_check', {})
    if health_check.get('enabled'):
        interval = health_check.get('interval', 60)
        status_task = asyncio.create_task(periodic_status(registry, interval))
        logger.info(f"Periodic status logging every {interval}s")

    try:
        await asyncio.Event().wait()
    finally:
        logger.info("Stopping Socket.IO server...")
        if status_task and not status_task.done():
            status_task.cancel()
            try:
                await status_task
            except asyncio.CancelledError:
                pass
        await runner.cleanup()


# --- Main Execution ---
def main(argv=None) -> int:
    config_manager = ConfigManager()
    args = parse_args(config_manager, argv)
    config_manager.set('server', 'host', args.host)
    config_manager.set('server', 'port', args.port)
    config_manager.set('logging', 'level', args.log_level)

    setup_logging(args.log_level,
                  config_manager.get('logging', 'format'),
                  config_manager.get('logging', 'file'))

    app, _ = create_app(config_manager.config)
    try:
        asyncio.run(run_server(app, args.host, args.port))
    except KeyboardInterrupt:
        logger.info("Server stopped by user (KeyboardInterrupt).")
    except OSError as e:
        logger.critical(f"Server could not start on {args.host}:{args.port}: {e}")
        return 1
    logger.info("Server shutdown complete.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
