import logging
import time
from dataclasses import asdict, dataclass

from utilities.errors import InvalidHandleError, StorageError

logger = logging.getLogger(__name__)

DEMO_HANDLE = "demo"
DEMO_DISPLAY_NAME = "Demo User"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Identity:
    """A cosmetic user label. Nothing about it is verified."""

    handle: str
    display_name: str
    created_at: int

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Identity":
        return cls(
            handle=str(data["handle"]),
            display_name=str(data.get("display_name") or data["handle"]),
            created_at=int(data.get("created_at", 0)),
        )


class IdentityProvider:
    """Loads, saves and clears the current identity record in a key-value store."""

    def __init__(self, store, key: str = "minilogic_user"):
        self._store = store
        self._key = key

    def load(self) -> Identity | None:
        """Returns the saved identity, or None. Never raises."""
        try:
            data = self._store.get_json(self._key)
            if data is None:
                return None
            identity = Identity.from_dict(data)
        except (StorageError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.debug("Ignoring unreadable identity record: %s", e)
            return None
        if not identity.handle:
            return None
        return identity

    def save(self, identity: Identity) -> None:
        # Full replacement, no merge with the previous record
        self._store.set_json(self._key, identity.to_dict())

    def clear(self) -> None:
        self._store.delete(self._key)

    @property
    def is_logged_in(self) -> bool:
        return self.load() is not None

    def login(self, handle: str, password: str | None = None) -> Identity:
        """
        Signs in under any non-empty handle. The password is accepted and ignored:
        this is a label for progress namespacing, not authentication.
        """
        handle = (handle or "").strip()
        if not handle:
            raise InvalidHandleError("Please enter a username")
        identity = Identity(handle=handle, display_name=handle, created_at=_now_ms())
        self.save(identity)
        logger.info("Signed in as '%s'", handle)
        return identity

    def demo_login(self) -> Identity:
        identity = Identity(handle=DEMO_HANDLE, display_name=DEMO_DISPLAY_NAME, created_at=_now_ms())
        self.save(identity)
        return identity
