"""Pointer position relay from a room's controller to the other members.

Every ``laser-move`` from a joined controller is forwarded as-is. There is no
throttling or coalescing: controllers typically send 30-60 updates a second
and each one goes straight through.
"""
import logging
import math
from numbers import Real
from typing import Any

from gyrolaser_utils.message_utils import MessageType, Role, create_laser_move_message

from .broadcast import emit_to_room
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


def coerce_coordinate(value: Any) -> float:
    """Return ``value`` if it is a finite real number, otherwise 0.

    Out-of-range values are not clamped; that is left to the clients.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        return 0
    if not math.isfinite(value):
        return 0
    return value


async def handle_laser_move(sio, registry: ConnectionRegistry, sid: str, payload: Any) -> bool:
    """Forward a position update. Returns False when the sender may not relay."""
    connection = registry.get(sid)
    if connection is None or not connection.joined or connection.role is not Role.CONTROLLER:
        logger.debug(f"Dropping laser-move from {sid}: not a joined controller")
        return False

    if not isinstance(payload, dict):
        payload = {}
    x = coerce_coordinate(payload.get("x"))
    y = coerce_coordinate(payload.get("y"))

    room_code = connection.room_code
    await emit_to_room(sio, registry, room_code, MessageType.LASER_MOVE.value,
                       create_laser_move_message(x, y), skip_sid=sid)
    logger.debug(f"Forwarded laser-move ({x}, {y}) in room {room_code}")
    return True
