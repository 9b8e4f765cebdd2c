"""Core components of the GyroLaser relay.

Room codes, the connection registry and the three protocol handlers
(pairing, position relay, disconnect reconciliation). Handlers take the
Socket.IO server as their first argument and only ever call its ``emit``.
"""
from .rooms import (
    ROOM_ID_ALPHABET,
    ROOM_ID_LENGTH,
    generate_room_id,
    normalize_room_id,
    is_valid_room_id
)
from .registry import (
    Connection,
    ConnectionRegistry,
    RegistryError,
    AlreadyJoinedError,
    UnknownConnectionError
)
from .broadcast import emit_to_room
from .pairing import handle_join_room
from .relay import handle_laser_move, coerce_coordinate
from .reconciler import handle_disconnect

__all__ = [
    'ROOM_ID_ALPHABET',
    'ROOM_ID_LENGTH',
    'generate_room_id',
    'normalize_room_id',
    'is_valid_room_id',
    'Connection',
    'ConnectionRegistry',
    'RegistryError',
    'AlreadyJoinedError',
    'UnknownConnectionError',
    'emit_to_room',
    'handle_join_room',
    'handle_laser_move',
    'coerce_coordinate',
    'handle_disconnect'
]
