"""Connection registry for the relay server.

Tracks every live Socket.IO connection together with the role and room it was
assigned at join time, and the membership of each room. A room exists exactly
as long as its member set is non-empty; the entry is deleted when the last
member disconnects.

The registry is owned by the event loop. Handlers must read and mutate it
before their first ``await`` so no two handlers observe a half-applied change.
"""
import logging
from datetime import datetime
from typing import Dict, FrozenSet, Optional, Set

from gyrolaser_utils.message_utils import Role

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Base class for registry misuse."""


class UnknownConnectionError(RegistryError):
    """Raised when an operation names a sid that was never registered."""


class AlreadyJoinedError(RegistryError):
    """Raised when a connection that already has a room tries to join again."""


class Connection:
    """One client session as seen by the relay."""

    def __init__(self, sid: str, address: Optional[str] = None):
        self.sid = sid
        self.address = address
        self.connect_time = datetime.now().isoformat()
        self.role: Optional[Role] = None
        self.room_code: Optional[str] = None

    @property
    def joined(self) -> bool:
        return self.role is not None and bool(self.room_code)

    def __repr__(self):
        role = self.role.value if self.role else None
        return f"Connection(sid={self.sid!r}, role={role!r}, room={self.room_code!r})"


class ConnectionRegistry:
    def __init__(self):
        self._connections: Dict[str, Connection] = {}
        self._rooms: Dict[str, Set[str]] = {}
        self._room_created: Dict[str, str] = {}

    def connect(self, sid: str, address: Optional[str] = None) -> Connection:
        """Register a newly opened, unjoined connection."""
        if sid in self._connections:
            logger.warning(f"Connection {sid} registered twice, keeping the existing record")
            return self._connections[sid]
        connection = Connection(sid, address)
        self._connections[sid] = connection
        return connection

    def get(self, sid: str) -> Optional[Connection]:
        return self._connections.get(sid)

    def join(self, sid: str, room_code: str, role: Role) -> Connection:
        """Add a connection to a room and assign its role. Allowed once per connection."""
        connection = self._connections.get(sid)
        if connection is None:
            raise UnknownConnectionError(sid)
        if connection.joined:
            raise AlreadyJoinedError(f"{sid} is already in room {connection.room_code}")

        members = self._rooms.setdefault(room_code, set())
        if not members:
            self._room_created[room_code] = datetime.now().isoformat()
        members.add(sid)
        connection.role = role
        connection.room_code = room_code
        return connection

    def members_of(self, room_code: str) -> FrozenSet[str]:
        return frozenset(self._rooms.get(room_code, ()))

    def room_size(self, room_code: str) -> int:
        return len(self._rooms.get(room_code, ()))

    def disconnect(self, sid: str) -> Optional[Connection]:
        """Forget a connection and evict it from its room.

        Returns the removed connection, or ``None`` for an unknown sid. The room
        entry is deleted once its last member is gone.
        """
        connection = self._connections.pop(sid, None)
        if connection is None:
            return None

        room_code = connection.room_code
        if room_code and room_code in self._rooms:
            members = self._rooms[room_code]
            members.discard(sid)
            if not members:
                del self._rooms[room_code]
                self._room_created.pop(room_code, None)
                logger.debug(f"Room {room_code} is now empty and was released")
        return connection

    @property
    def room_count(self) -> int:
        return len(self._rooms)

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def snapshot(self) -> Dict[str, Dict]:
        """Per-room member roles and creation time, for status logging."""
        rooms = {}
        for room_code, members in self._rooms.items():
            roles = sorted(
                self._connections[sid].role.value
                for sid in members
                if sid in self._connections and self._connections[sid].role
            )
            rooms[room_code] = {
                "created": self._room_created.get(room_code),
                "members": roles
            }
        return rooms
