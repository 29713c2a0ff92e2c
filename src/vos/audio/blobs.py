"""Registry of rendered audio buffers addressed by opaque references."""

import logging
import uuid
from typing import Dict

logger = logging.getLogger(__name__)


class AudioBlobRegistry:
    """Holds audio buffers for as long as a project references them.

    Each registered buffer gets a ``blob:`` reference. Owners must call
    :meth:`release` once a reference is superseded or its project is
    deleted, otherwise the buffer stays alive for the process lifetime.
    """

    SCHEME = "blob:"

    def __init__(self) -> None:
        self._blobs: Dict[str, bytes] = {}

    def register(self, data: bytes) -> str:
        ref = f"{self.SCHEME}{uuid.uuid4().hex}"
        self._blobs[ref] = data
        logger.debug(f"Registered {ref} ({len(data)} bytes)")
        return ref

    def resolve(self, ref: str) -> bytes:
        try:
            return self._blobs[ref]
        except KeyError:
            raise KeyError(f"Unknown or released audio reference: {ref}") from None

    def release(self, ref: str) -> bool:
        """Drop a buffer. Returns False if the reference was not registered."""
        data = self._blobs.pop(ref, None)
        if data is None:
            return False
        logger.debug(f"Released {ref}")
        return True

    def __contains__(self, ref: object) -> bool:
        return ref in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)
