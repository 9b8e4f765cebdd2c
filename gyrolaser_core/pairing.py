"""Viewer/controller join protocol.

A connection moves ``unjoined -> joined(role, room) -> terminated``. The only
transition driven here is the ``join-room`` request:

- ``viewer``: a fresh room code is generated, the viewer becomes its first
  member and receives ``room-created`` with the code.
- ``controller``: the supplied code is normalized and must name a room with at
  least one live member. The controller joins and every other member is told
  ``controller-joined``.

Client mistakes are answered with an ``error`` event to the sender only; the
connection stays open. A second join on a joined connection is refused with
``already-joined``.
"""
import logging
from typing import Any

from gyrolaser_utils.event_utils import EventType, create_room_created_message
from gyrolaser_utils.message_utils import ErrorCode, MessageType, Role, create_error_message

from .broadcast import emit_to_room
from .registry import ConnectionRegistry
from .rooms import generate_room_id, normalize_room_id

logger = logging.getLogger(__name__)


async def send_error(sio, sid: str, code: ErrorCode) -> None:
    """Report a client-input error to the offending connection."""
    logger.warning(f"Rejected join from {sid}: {code.value}")
    await sio.emit(MessageType.ERROR.value, create_error_message(code), to=sid)


async def handle_join_room(sio, registry: ConnectionRegistry, sid: str, payload: Any) -> bool:
    """Process a ``join-room`` request. Returns True if the connection joined a room."""
    if not isinstance(payload, dict):
        payload = {}
    role = payload.get("role")

    connection = registry.get(sid)
    if connection is None:
        # connect handler never ran for this sid
        connection = registry.connect(sid)
    if connection.joined:
        await send_error(sio, sid, ErrorCode.ALREADY_JOINED)
        return False

    if role == Role.VIEWER.value:
        return await _join_as_viewer(sio, registry, sid)
    if role == Role.CONTROLLER.value:
        return await _join_as_controller(sio, registry, sid, payload.get("roomId"))

    await send_error(sio, sid, ErrorCode.INVALID_ROLE)
    return False


async def _join_as_viewer(sio, registry: ConnectionRegistry, sid: str) -> bool:
    room_code = generate_room_id()
    registry.join(sid, room_code, Role.VIEWER)
    logger.info(f"Viewer {sid} created room {room_code}")
    await sio.emit(EventType.ROOM_CREATED.value, create_room_created_message(room_code), to=sid)
    return True


async def _join_as_controller(sio, registry: ConnectionRegistry, sid: str, room_id: Any) -> bool:
    room_code = normalize_room_id(room_id)
    if room_code is None:
        await send_error(sio, sid, ErrorCode.INVALID_ROOM_ID)
        return False

    if registry.room_size(room_code) == 0:
        await send_error(sio, sid, ErrorCode.ROOM_NOT_FOUND)
        return False

    registry.join(sid, room_code, Role.CONTROLLER)
    logger.info(f"Controller {sid} joined room {room_code}")
    await emit_to_room(sio, registry, room_code, EventType.CONTROLLER_JOINED.value, skip_sid=sid)
    return True
