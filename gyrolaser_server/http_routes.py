"""HTTP routes served next to the Socket.IO endpoint.

- ``GET /``                    redirect to the desktop viewer
- ``GET /desktop``, ``/mobile`` static viewer and controller clients
- ``GET /api/qrcode/{room_id}`` PNG QR code of the mobile join URL
- ``GET /api/health``          room and connection counts
- ``GET /api/sessions``        live rooms (only when ``sessions.enabled``)
"""
import io
import os
import asyncio
import logging
import functools
from typing import Any, Dict

import qrcode
from aiohttp import web

from gyrolaser_core.registry import ConnectionRegistry
from gyrolaser_core.rooms import normalize_room_id
from gyrolaser_utils.path_config import get_static_dirs

logger = logging.getLogger(__name__)

CONFIG_KEY = web.AppKey("config", dict)
REGISTRY_KEY = web.AppKey("registry", ConnectionRegistry)


def build_join_url(host: str, port: int, room_id: str) -> str:
    """URL the controller opens after scanning the viewer's QR code."""
    return f"http://{host}:{port}/mobile?room={room_id}"


def build_qr_png(data: str, box_size: int = 8, border: int = 2) -> bytes:
    """Render ``data`` as a PNG-encoded QR code."""
    qr = qrcode.QRCode(box_size=box_size, border=border)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image()
    buffer = io.BytesIO()
    img.save(buffer)
    return buffer.getvalue()


async def index(request: web.Request) -> web.Response:
    raise web.HTTPFound('/desktop')


async def qrcode_image(request: web.Request) -> web.Response:
    room_id = normalize_room_id(request.match_info.get('room_id', ''))
    if room_id is None:
        return web.Response(status=400, text='Invalid room ID')

    config = request.app[CONFIG_KEY]
    server = config['server']
    qr_config = config.get('qrcode', {})
    join_url = build_join_url(server.get('public_host') or server['host'], server['port'], room_id)

    render = functools.partial(
        build_qr_png, join_url,
        box_size=qr_config.get('box_size', 8),
        border=qr_config.get('border', 2)
    )
    try:
        png = await asyncio.get_running_loop().run_in_executor(None, render)
    except Exception as e:
        logger.error(f"QR generation error for room {room_id}: {e}", exc_info=True)
        return web.Response(status=500, text='Failed to generate QR code')

    return web.Response(body=png, content_type='image/png')


async def health(request: web.Request) -> web.Response:
    registry = request.app[REGISTRY_KEY]
    return web.json_response({
        "status": "ok",
        "rooms": registry.room_count,
        "connections": registry.connection_count
    })


async def sessions(request: web.Request) -> web.Response:
    """List live rooms with their creation time and member roles."""
    snapshot = request.app[REGISTRY_KEY].snapshot()
    return web.json_response([
        {"roomId": room_id, "createdAt": info["created"], "members": info["members"]}
        for room_id, info in sorted(snapshot.items(), key=lambda item: (item[1]["created"] or "", item[0]))
    ])


def _index_file_handler(path: str):
    async def handler(request: web.Request) -> web.StreamResponse:
        if not os.path.isfile(path):
            raise web.HTTPNotFound()
        return web.FileResponse(path)
    return handler


def setup_static_routes(app: web.Application, static_root: str = None) -> Dict[str, str]:
    """Serve the viewer at /desktop and the controller at /mobile.

    Returns the directories that were mounted, keyed by prefix name.
    """
    mounted = {}
    for name, directory in get_static_dirs(static_root).items():
        if not os.path.isdir(directory):
            logger.warning(f"Static directory for /{name} not found at {directory}, skipping")
            continue
        index_handler = _index_file_handler(os.path.join(directory, 'index.html'))
        app.router.add_get(f'/{name}', index_handler)
        app.router.add_get(f'/{name}/', index_handler)
        app.router.add_static(f'/{name}', directory)
        mounted[name] = directory
        logger.info(f"Serving /{name} from {directory}")
    return mounted


def setup_routes(app: web.Application, config: Dict[str, Any]) -> None:
    app.router.add_get('/', index)
    app.router.add_get('/api/qrcode/{room_id}', qrcode_image)
    app.router.add_get('/api/health', health)
    if config.get('sessions', {}).get('enabled'):
        app.router.add_get('/api/sessions', sessions)
    setup_static_routes(app, config['server'].get('static_root'))
