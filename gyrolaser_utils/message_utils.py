"""Utilities for creating and handling the relay's Socket.IO messages."""

import enum
from typing import Any, Dict, Optional


class MessageType(enum.Enum):
    """
    Enumerates the Socket.IO event names carrying requests or data payloads.
    """
    # Client -> Server
    JOIN_ROOM = "join-room"  # Payload: {"role": str, "roomId": Optional[str]}

    # Both directions: controller -> server -> viewer(s)
    LASER_MOVE = "laser-move"  # Payload: {"x": float, "y": float}

    # Server -> offending client
    ERROR = "error"  # Payload: {"message": str, "code": str}


class Role(enum.Enum):
    """Roles a connection can take when joining a room."""
    VIEWER = "viewer"
    CONTROLLER = "controller"


class ErrorCode(enum.Enum):
    """Client-input error conditions reported through the ``error`` event."""
    INVALID_ROLE = "invalid-role"
    INVALID_ROOM_ID = "invalid-room-id"
    ROOM_NOT_FOUND = "room-not-found"
    ALREADY_JOINED = "already-joined"


ERROR_MESSAGES = {
    ErrorCode.INVALID_ROLE: 'Invalid role. Use "viewer" or "controller".',
    ErrorCode.INVALID_ROOM_ID: "Invalid or missing room ID",
    ErrorCode.ROOM_NOT_FOUND: "Room not found. Open the desktop viewer first.",
    ErrorCode.ALREADY_JOINED: "This connection has already joined a room.",
}


def create_error_message(code: ErrorCode) -> Dict[str, Any]:
    """Creates the payload of an ``error`` event for the given condition."""
    return {
        "message": ERROR_MESSAGES[code],
        "code": code.value
    }


def create_laser_move_message(x: float, y: float) -> Dict[str, Any]:
    """Creates a ``laser-move`` payload."""
    return {"x": x, "y": y}


def create_join_message(role: Role, room_id: Optional[str] = None) -> Dict[str, Any]:
    """Creates a ``join-room`` request payload (used by the Python client)."""
    message = {"role": role.value}
    if room_id is not None:
        message["roomId"] = room_id
    return message
