"""Cleanup when a connection closes, whatever the reason."""
import logging
from typing import Any, Optional

from gyrolaser_utils.event_utils import EventType
from gyrolaser_utils.message_utils import Role

from .broadcast import emit_to_room
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)

LEFT_EVENTS = {
    Role.CONTROLLER: EventType.CONTROLLER_LEFT,
    Role.VIEWER: EventType.VIEWER_LEFT,
}


async def handle_disconnect(sio, registry: ConnectionRegistry, sid: str,
                            reason: Optional[Any] = None) -> Optional[EventType]:
    """Evict ``sid`` and tell the remaining room members who left.

    Returns the event that was broadcast, or None if the connection had not
    joined a room.
    """
    connection = registry.disconnect(sid)
    if connection is None:
        logger.warning(f"Disconnect event received for unknown SID: {sid}")
        return None

    logger.info(f"Client disconnected: {sid} ({connection.address or 'Unknown IP'}) reason={reason}")
    if not connection.joined:
        return None

    event = LEFT_EVENTS[connection.role]
    # the departed sid is already out of the member set
    recipients = await emit_to_room(sio, registry, connection.room_code, event.value)
    logger.info(f"{connection.role.value.capitalize()} left room {connection.room_code}, "
                f"notified {recipients} remaining member(s)")
    return event
