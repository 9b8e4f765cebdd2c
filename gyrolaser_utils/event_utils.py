import enum


class EventType(enum.Enum):
    """
    Enumerates the notifications emitted by the relay server.
    Events signify that something *has happened* in a room.
    """
    ROOM_CREATED = "room-created"  # Payload: {"roomId": str}, to the joining viewer only
    CONTROLLER_JOINED = "controller-joined"  # No payload, to the other room members
    CONTROLLER_LEFT = "controller-left"  # No payload, to the other room members
    VIEWER_LEFT = "viewer-left"  # No payload, to the other room members


def create_room_created_message(room_id: str) -> dict:
    """Creates the ``room-created`` acknowledgment payload."""
    return {"roomId": room_id}
