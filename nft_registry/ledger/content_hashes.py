"""Write-once index from token id to content digest.

Every successful mint records exactly one SHA-256 digest for the new token
id. Entries are never updated or removed. An external certifier binds the
index ``commitment()`` into the registry's certified state and serves
per-token proofs from it.

Usage:
    index = ContentHashIndex()
    index.record(0, sha256(b"content").digest())
    index.get(0)                     # 32-byte digest
    index.verify(0, digest)          # True
    index.commitment()               # digest over all entries
"""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Iterable


DIGEST_SIZE = 32


class DuplicateHashError(Exception):
    """Raised when a token id already has a recorded digest."""

    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(f"Content hash for token {token_id} already recorded")


def content_digest(content: bytes) -> bytes:
    """SHA-256 of raw token content."""
    return hashlib.sha256(content).digest()


class ContentHashIndex:
    """Append-only ``token_id -> digest`` map.

    Thread-safety: NOT thread-safe. The registry serializes all entry points.
    """

    _hashes: dict[int, bytes]

    def __init__(self) -> None:
        self._hashes = {}

    def record(self, token_id: int, digest: bytes) -> None:
        """Record the digest for a freshly minted token.

        Raises:
            DuplicateHashError: If ``token_id`` already has an entry
            ValueError: If ``digest`` is not a 32-byte SHA-256 digest
        """
        if token_id in self._hashes:
            raise DuplicateHashError(token_id)
        if len(digest) != DIGEST_SIZE:
            raise ValueError(f"Expected {DIGEST_SIZE}-byte digest, got {len(digest)}")
        self._hashes[token_id] = bytes(digest)

    def get(self, token_id: int) -> bytes | None:
        return self._hashes.get(token_id)

    def verify(self, token_id: int, digest: bytes) -> bool:
        """True if ``digest`` is the one recorded for ``token_id``."""
        recorded = self._hashes.get(token_id)
        if recorded is None:
            return False
        return hmac.compare_digest(recorded, digest)

    def commitment(self) -> bytes:
        """SHA-256 over all entries in token id order.

        Each entry contributes the 8-byte big-endian token id followed by its
        digest. An empty index commits to the hash of the empty string.
        """
        hasher = hashlib.sha256()
        for token_id in sorted(self._hashes):
            hasher.update(token_id.to_bytes(8, "big"))
            hasher.update(self._hashes[token_id])
        return hasher.digest()

    def entries(self) -> list[tuple[int, bytes]]:
        """All entries in token id order (for snapshots)."""
        return sorted(self._hashes.items())

    @classmethod
    def from_entries(cls, entries: Iterable[tuple[int, bytes]]) -> ContentHashIndex:
        """Rebuild an index from snapshot entries. Duplicates are rejected."""
        index = cls()
        for token_id, digest in entries:
            index.record(int(token_id), digest)
        return index

    def __len__(self) -> int:
        return len(self._hashes)

    def __contains__(self, token_id: object) -> bool:
        return token_id in self._hashes
