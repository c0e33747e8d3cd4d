"""Token ledger - ownership, approval and minting of numbered tokens

Tokens live in one list; a token's id is its index. Tokens are never
removed: burn hands ownership to ZERO_PRINCIPAL.

Every mutation runs all of its checks before touching state, then mutates,
then takes a txid. A failed operation raises and leaves state (including
the txid counter) untouched.

Authorization quirks kept for compatibility:
- transfer authorizes against the caller-supplied ``from_`` and only then
  checks that ``from_`` really owns the token (OwnershipMismatch)
- approve authorizes against the delegate, not the real owner
- burn is owner-only and leaves ``approved`` in place
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING

from .access import AccessControl
from ..constants import ZERO_PRINCIPAL
from .content_hashes import ContentHashIndex, DuplicateHashError, content_digest
from .errors import InvalidTokenId, OwnershipMismatch, Unauthorized, ZeroAddress
from .notifier import TransferNotification, TransferNotifier
from .tokens import MetadataDesc, Token
from .txid import TxidSequencer

if TYPE_CHECKING:
    from .logger import EventLogger

logger = logging.getLogger(__name__)


class TokenLedger:
    """Registry of tokens.

    Orchestrates AccessControl, ContentHashIndex and TxidSequencer to
    implement mint, transfer, approve and burn.

    Thread-safety: NOT thread-safe. The registry serializes all entry points.
    """

    tokens: list[Token]
    access: AccessControl
    hashes: ContentHashIndex
    txids: TxidSequencer
    notifier: TransferNotifier
    event_logger: "EventLogger | None"

    def __init__(
        self,
        access: AccessControl,
        hashes: ContentHashIndex | None = None,
        txids: TxidSequencer | None = None,
        tokens: list[Token] | None = None,
        notifier: TransferNotifier | None = None,
        event_logger: "EventLogger | None" = None,
    ) -> None:
        self.tokens = list(tokens or [])
        for index, token in enumerate(self.tokens):
            if token.id != index:
                raise ValueError(f"Token ids must be dense: position {index} holds id {token.id}")
        self.access = access
        self.hashes = hashes if hashes is not None else ContentHashIndex()
        self.txids = txids if txids is not None else TxidSequencer()
        self.notifier = notifier if notifier is not None else TransferNotifier()
        self.event_logger = event_logger

    def _token(self, token_id: int) -> Token:
        if isinstance(token_id, bool) or not isinstance(token_id, int):
            raise InvalidTokenId(token_id)
        if token_id < 0 or token_id >= len(self.tokens):
            raise InvalidTokenId(token_id)
        return self.tokens[token_id]

    def _commit(self, event_type: str, **data: object) -> int:
        """Allocate the txid for a mutation that has already been applied."""
        txid = self.txids.next()
        logger.debug("%s txid=%d %s", event_type, txid, data)
        if self.event_logger is not None:
            try:
                self.event_logger.log(event_type, {"txid": txid, **data})
            except OSError as e:
                # The mutation is already applied; the audit log is best effort
                logger.warning("Failed to log %s event for txid %d: %s", event_type, txid, e)
        return txid

    # ===== QUERIES =====

    def balance_of(self, owner: str) -> int:
        return sum(1 for token in self.tokens if token.owner == owner)

    def owner_of(self, token_id: int) -> str:
        return self._token(token_id).owner

    def get_approved(self, token_id: int) -> str | None:
        return self._token(token_id).approved

    def total_supply(self) -> int:
        return len(self.tokens)

    def get_metadata(self, token_id: int) -> MetadataDesc:
        return copy.deepcopy(self._token(token_id).metadata)

    def get_metadata_for_user(self, owner: str) -> list[tuple[int, MetadataDesc]]:
        """``(token_id, metadata)`` for every token ``owner`` holds."""
        return [(t.id, copy.deepcopy(t.metadata)) for t in self.tokens if t.owner == owner]

    def is_approved_for_all(self, caller: str, operator: str) -> bool:
        return self.access.is_operator(caller, operator)

    # ===== MINT =====

    def mint(self, to: str, metadata: MetadataDesc, content: bytes = b"") -> tuple[int, int]:
        """Append a new token owned by ``to``.

        Open to any caller. Records SHA-256 of ``content`` in the hash index.

        Returns:
            (txid, token_id)
        """
        new_id = len(self.tokens)
        if new_id in self.hashes:
            raise DuplicateHashError(new_id)
        content = bytes(content)
        digest = content_digest(content)
        self.tokens.append(
            Token(
                id=new_id,
                owner=to,
                approved=None,
                metadata=copy.deepcopy(list(metadata)),
                content=content,
            )
        )
        self.hashes.record(new_id, digest)
        txid = self._commit("mint", to=to, token_id=new_id, content_hash=digest.hex())
        logger.info("Minted token %d to %s", new_id, to)
        return txid, new_id

    # ===== TRANSFER =====

    def transfer(self, caller: str, from_: str, to: str, token_id: int) -> int:
        """Move ``token_id`` from ``from_`` to ``to``. Clears ``approved``.

        Raises:
            InvalidTokenId: Token id out of range
            Unauthorized: Caller fails AccessControl with ``from_`` as subject
            OwnershipMismatch: ``from_`` is not the token's current owner
        """
        token = self._token(token_id)
        self.access.authorize(caller, from_, token)
        if token.owner != from_:
            raise OwnershipMismatch(
                f"Token {token_id} is not owned by {from_}",
                token_id=token_id,
                from_=from_,
            )
        token.approved = None
        token.owner = to
        return self._commit("transfer", caller=caller, from_=from_, to=to, token_id=token_id)

    def safe_transfer(self, caller: str, from_: str, to: str, token_id: int) -> int:
        """``transfer`` that refuses to send to ZERO_PRINCIPAL."""
        _reject_zero_address(to)
        return self.transfer(caller, from_, to, token_id)

    def transfer_notify(
        self, caller: str, from_: str, to: str, token_id: int, data: bytes = b""
    ) -> int:
        """``transfer``, then tell ``to`` about it without waiting.

        The notification is dispatched only after the transfer is fully
        applied and its outcome never affects the returned txid.
        """
        txid = self.transfer(caller, from_, to, token_id)
        self.notifier.dispatch(
            to,
            TransferNotification(caller=caller, from_=from_, token_id=token_id, data=bytes(data)),
        )
        return txid

    def safe_transfer_notify(
        self, caller: str, from_: str, to: str, token_id: int, data: bytes = b""
    ) -> int:
        _reject_zero_address(to)
        return self.transfer_notify(caller, from_, to, token_id, data)

    # ===== APPROVAL =====

    def approve(self, caller: str, delegate: str, token_id: int) -> int:
        """Make ``delegate`` the approved identity for ``token_id``.

        Authorization uses ``delegate`` as the subject for the operator check.
        """
        token = self._token(token_id)
        self.access.authorize(caller, delegate, token)
        token.approved = delegate
        return self._commit("approve", caller=caller, delegate=delegate, token_id=token_id)

    def set_approval_for_all(self, caller: str, operator: str, is_approved: bool) -> int:
        """Grant or revoke operator rights. Always takes a txid."""
        self.access.set_approval_for_all(caller, operator, is_approved)
        return self._commit(
            "set_approval_for_all", caller=caller, operator=operator, is_approved=is_approved
        )

    # ===== BURN =====

    def burn(self, caller: str, token_id: int) -> int:
        """Hand ``token_id`` to ZERO_PRINCIPAL. Only the current owner may burn.

        ``approved`` is intentionally left as it was.
        """
        token = self._token(token_id)
        if token.owner != caller:
            raise Unauthorized(
                f"Only the owner can burn token {token_id}",
                caller=caller,
                token_id=token_id,
            )
        token.owner = ZERO_PRINCIPAL
        return self._commit("burn", caller=caller, token_id=token_id)


def _reject_zero_address(to: str) -> None:
    if to == ZERO_PRINCIPAL:
        raise ZeroAddress(f"Cannot transfer to {ZERO_PRINCIPAL}", to=to)
