"""Fan-out of events to the members of a room."""
import logging
from typing import Any, Optional

from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


async def emit_to_room(sio, registry: ConnectionRegistry, room_code: str, event: str,
                       data: Any = None, skip_sid: Optional[str] = None) -> int:
    """Emit ``event`` to every member of ``room_code`` except ``skip_sid``.

    Membership is read once, before the first emit. Delivery is
    fire-and-forget. Returns the number of recipients.
    """
    recipients = sorted(registry.members_of(room_code) - {skip_sid})
    for sid in recipients:
        await sio.emit(event, data, to=sid)
    return len(recipients)
