"""NftRegistry - the single owner of registry state and its entry points.

Every operation a host can route to the registry is a method here. The
host passes the authenticated caller explicitly. Operations run to
completion one at a time; the host serializes entry-point invocations.

Usage:
    registry = NftRegistry(RegistryConfig(
        name="Cats", symbol="CAT",
        whitelist=["bob"],
        begin_date="2026-01-01 00:00:00",
        end_date="2026-12-31 23:59:59",
    ), caller="alice")

    txid, token_id = registry.mint("alice", to="carol", metadata=[], content=b"...")
    registry.transfer_from("carol", "carol", "dave", token_id)

    snapshot = registry.snapshot()          # before restart
    registry = NftRegistry.restore(snapshot) # after restart
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Callable

from ..config_schema import AppConfig, RegistryConfig
from ..persistence.types import RegistryStateData, StableState
from .access import AccessControl
from .content_hashes import ContentHashIndex
from .mint_window import MintWindowPolicy, build_uri_metadata, utc_now
from .notifier import Deliver, TransferNotifier
from .token_ledger import TokenLedger
from .tokens import DEFAULT_LOGO, LogoResult, MetadataDesc, Token
from .txid import TxidSequencer

if TYPE_CHECKING:
    from .logger import EventLogger

logger = logging.getLogger(__name__)

# Snapshot format version
STATE_VERSION = 1


class InterfaceId(str, Enum):
    """Optional interfaces a registry can advertise."""

    APPROVAL = "Approval"
    TRANSACTION_HISTORY = "TransactionHistory"
    MINT = "Mint"
    BURN = "Burn"
    TRANSFER_NOTIFICATION = "TransferNotification"


SUPPORTED_INTERFACES: tuple[InterfaceId, ...] = (
    InterfaceId.TRANSFER_NOTIFICATION,
    InterfaceId.APPROVAL,
    InterfaceId.BURN,
    InterfaceId.MINT,
)


class NftRegistry:
    """Non-fungible-token registry.

    Components:
        ledger: TokenLedger (tokens, AccessControl, ContentHashIndex, TxidSequencer)
        mint_window: MintWindowPolicy gating ``simple_mint``

    Failures raise ``LedgerError`` or ``ConstrainedError`` subclasses (see
    errors.py) before any state changes.
    """

    ledger: TokenLedger
    mint_window: MintWindowPolicy
    _name: str
    _symbol: str
    _logo: LogoResult | None

    def __init__(
        self,
        args: RegistryConfig,
        caller: str,
        *,
        clock: Callable[[], datetime] = utc_now,
        notifier: TransferNotifier | None = None,
        event_logger: "EventLogger | None" = None,
    ) -> None:
        """Initialize a fresh registry.

        Args:
            args: Initialization arguments
            caller: The initializing principal; becomes the sole custodian
                when ``args.custodians`` is None
            clock: Source of "now" for the mint window (UTC-aware datetimes)
            notifier: Dispatcher for transfer notifications
            event_logger: Optional JSONL audit log

        Raises:
            InitError: If begin_date or end_date has the wrong format
        """
        custodians = args.custodians if args.custodians is not None else [caller]
        self.mint_window = MintWindowPolicy(
            begin_date=args.begin_date,
            end_date=args.end_date,
            whitelist=args.whitelist,
            total_limit=args.total_limit,
            clock=clock,
        )
        self.ledger = TokenLedger(
            access=AccessControl(custodians),
            notifier=notifier,
            event_logger=event_logger,
        )
        self._name = args.name
        self._symbol = args.symbol
        self._logo = (
            LogoResult(logo_type=args.logo.logo_type, data=args.logo.data) if args.logo else None
        )
        logger.info(
            "Registry %r initialized by %s with %d custodian(s), mint window %s",
            self._name, caller, len(custodians), self.mint_window.mint_date(),
        )

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        caller: str,
        *,
        deliver: Deliver | None = None,
        clock: Callable[[], datetime] = utc_now,
        event_logger: "EventLogger | None" = None,
    ) -> NftRegistry:
        """Create a registry from validated application config."""
        notifier = TransferNotifier(
            deliver=deliver,
            method=config.notification.method,
            enabled=config.notification.enabled,
        )
        return cls(
            config.registry,
            caller,
            clock=clock,
            notifier=notifier,
            event_logger=event_logger,
        )

    # ===== BASE INTERFACE =====

    def balance_of(self, owner: str) -> int:
        return self.ledger.balance_of(owner)

    def owner_of(self, token_id: int) -> str:
        return self.ledger.owner_of(token_id)

    def transfer_from(self, caller: str, from_: str, to: str, token_id: int) -> int:
        return self.ledger.transfer(caller, from_, to, token_id)

    def safe_transfer_from(self, caller: str, from_: str, to: str, token_id: int) -> int:
        return self.ledger.safe_transfer(caller, from_, to, token_id)

    def supported_interfaces(self) -> list[InterfaceId]:
        return list(SUPPORTED_INTERFACES)

    def logo(self) -> LogoResult:
        return self._logo or DEFAULT_LOGO

    def name(self) -> str:
        return self._name

    def symbol(self) -> str:
        return self._symbol

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def get_metadata(self, token_id: int) -> MetadataDesc:
        return self.ledger.get_metadata(token_id)

    def get_metadata_for_user(self, owner: str) -> list[tuple[int, MetadataDesc]]:
        return self.ledger.get_metadata_for_user(owner)

    # ===== NOTIFICATION INTERFACE =====

    def transfer_from_notify(
        self, caller: str, from_: str, to: str, token_id: int, data: bytes = b""
    ) -> int:
        return self.ledger.transfer_notify(caller, from_, to, token_id, data)

    def safe_transfer_from_notify(
        self, caller: str, from_: str, to: str, token_id: int, data: bytes = b""
    ) -> int:
        return self.ledger.safe_transfer_notify(caller, from_, to, token_id, data)

    # ===== APPROVAL INTERFACE =====

    def approve(self, caller: str, delegate: str, token_id: int) -> int:
        return self.ledger.approve(caller, delegate, token_id)

    def set_approval_for_all(self, caller: str, operator: str, is_approved: bool) -> int:
        return self.ledger.set_approval_for_all(caller, operator, is_approved)

    def is_approved_for_all(self, caller: str, operator: str) -> bool:
        """Whether ``operator`` holds blanket authority over ``caller``'s tokens."""
        return self.ledger.is_approved_for_all(caller, operator)

    def get_approved(self, token_id: int) -> str | None:
        return self.ledger.get_approved(token_id)

    # ===== MINT INTERFACE =====

    def mint(
        self, caller: str, to: str, metadata: MetadataDesc, content: bytes = b""
    ) -> tuple[int, int]:
        """Administrative mint. Any caller may use it.

        Returns:
            (txid, token_id)
        """
        logger.debug("mint requested by %s for %s", caller, to)
        return self.ledger.mint(to, metadata, content)

    def simple_mint(
        self,
        caller: str,
        to: str,
        uri: str,
        mime_type: str,
        name: str,
        origin: str,
    ) -> tuple[int, int]:
        """Public self-mint of a URI-located token, gated by the mint window.

        Raises:
            MintUnauthorized: Invalid URI or ``to`` not whitelisted
            TimeError: Outside the mint window
        """
        self.mint_window.check(to, uri)
        metadata = build_uri_metadata(uri, mime_type, name, origin)
        logger.debug("simple_mint by %s for %s: %s", caller, to, uri)
        return self.ledger.mint(to, [metadata], b"")

    def white_list(self) -> list[str]:
        return list(self.mint_window.whitelist)

    def nft_mint_date(self) -> str:
        return self.mint_window.mint_date()

    def total_limit(self) -> str:
        return self.mint_window.total_limit

    # ===== BURN INTERFACE =====

    def burn(self, caller: str, token_id: int) -> int:
        return self.ledger.burn(caller, token_id)

    # ===== CUSTODIAN INTERFACE =====

    def set_name(self, caller: str, name: str) -> None:
        self.ledger.access.require_custodian(caller)
        self._name = name

    def set_symbol(self, caller: str, symbol: str) -> None:
        self.ledger.access.require_custodian(caller)
        self._symbol = symbol

    def set_logo(self, caller: str, logo: LogoResult | None) -> None:
        """Replace the logo. ``None`` falls back to the default logo."""
        self.ledger.access.require_custodian(caller)
        self._logo = logo

    def set_custodian(self, caller: str, user: str, custodian: bool) -> None:
        self.ledger.access.set_custodian(caller, user, custodian)

    def is_custodian(self, principal: str) -> bool:
        return self.ledger.access.is_custodian(principal)

    # ===== CONTENT HASHES =====

    def content_hash(self, token_id: int) -> bytes | None:
        return self.ledger.hashes.get(token_id)

    def hash_commitment(self) -> bytes:
        return self.ledger.hashes.commitment()

    # ===== SNAPSHOT / RESTORE =====

    def snapshot(self) -> StableState:
        """Registry state and hash index as one JSON-compatible unit."""
        access = self.ledger.access
        state: RegistryStateData = {
            "tokens": [token.to_dict() for token in self.ledger.tokens],
            "custodians": sorted(access.custodians),
            "operators": {
                owner: sorted(ops) for owner, ops in sorted(access.operators.items())
            },
            "logo": self._logo.to_dict() if self._logo else None,
            "name": self._name,
            "symbol": self._symbol,
            "txid": self.ledger.txids.current,
            "white_list": list(self.mint_window.whitelist),
            "begin_date": self.mint_window.begin_date,
            "end_date": self.mint_window.end_date,
            "total_limit": self.mint_window.total_limit,
        }
        return {
            "version": STATE_VERSION,
            "state": state,
            "hashes": [[token_id, digest.hex()] for token_id, digest in self.ledger.hashes.entries()],
        }

    @classmethod
    def restore(
        cls,
        snapshot: StableState,
        *,
        clock: Callable[[], datetime] = utc_now,
        notifier: TransferNotifier | None = None,
        event_logger: "EventLogger | None" = None,
    ) -> NftRegistry:
        """Rebuild a registry from ``snapshot()`` output.

        Raises:
            ValueError: Unknown version, or a hash index that does not have
                exactly one entry per token
        """
        version = snapshot.get("version")
        if version != STATE_VERSION:
            raise ValueError(f"Unsupported registry snapshot version: {version}")
        state = snapshot["state"]

        tokens = [Token.from_dict(t) for t in state["tokens"]]
        hashes = ContentHashIndex.from_entries(
            (int(token_id), bytes.fromhex(digest)) for token_id, digest in snapshot["hashes"]
        )
        if len(hashes) != len(tokens) or any(t.id not in hashes for t in tokens):
            raise ValueError(
                f"Hash index does not match tokens: {len(hashes)} hashes for {len(tokens)} tokens"
            )

        args = RegistryConfig(
            name=state["name"],
            symbol=state["symbol"],
            logo=state["logo"],
            custodians=list(state["custodians"]),
            whitelist=list(state["white_list"]),
            begin_date=state["begin_date"],
            end_date=state["end_date"],
            total_limit=state["total_limit"],
        )
        registry = cls(args, caller="", clock=clock, notifier=notifier, event_logger=event_logger)
        registry.ledger = TokenLedger(
            access=AccessControl(
                state["custodians"],
                {owner: set(ops) for owner, ops in state["operators"].items()},
            ),
            hashes=hashes,
            txids=TxidSequencer(int(state["txid"])),
            tokens=tokens,
            notifier=registry.ledger.notifier,
            event_logger=event_logger,
        )
        logger.info(
            "Registry %r restored: %d tokens, next txid %d",
            registry.name(), len(tokens), registry.ledger.txids.current,
        )
        return registry
