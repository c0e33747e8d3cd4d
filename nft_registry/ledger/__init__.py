# Token ledger package
from .registry import NftRegistry, InterfaceId, SUPPORTED_INTERFACES
from .token_ledger import TokenLedger
from .access import AccessControl
from .mint_window import MintWindowPolicy, build_uri_metadata, is_valid_uri, parse_mint_date
from .content_hashes import ContentHashIndex, DuplicateHashError, content_digest
from .txid import TxidSequencer
from .notifier import TransferNotifier, TransferNotification
from .logger import EventLogger
from .tokens import (
    Token, MetadataPart, MetadataPurpose, MetadataVal, MetadataValKind, MetadataDesc,
    LogoResult, DEFAULT_LOGO,
)
from .errors import (
    ErrorCategory, ErrorCode, ErrorResponse,
    RegistryError, LedgerError, ConstrainedError,
    Unauthorized, InvalidTokenId, ZeroAddress, OwnershipMismatch,
    MintUnauthorized, TimeError, InitError,
)
from ..constants import ZERO_PRINCIPAL

__all__ = [
    "NftRegistry", "InterfaceId", "SUPPORTED_INTERFACES",
    "TokenLedger",
    "AccessControl",
    "MintWindowPolicy", "build_uri_metadata", "is_valid_uri", "parse_mint_date",
    "ContentHashIndex", "DuplicateHashError", "content_digest",
    "TxidSequencer",
    "TransferNotifier", "TransferNotification",
    "EventLogger",
    "Token", "MetadataPart", "MetadataPurpose", "MetadataVal", "MetadataValKind", "MetadataDesc",
    "LogoResult", "DEFAULT_LOGO",
    # Errors
    "ErrorCategory", "ErrorCode", "ErrorResponse",
    "RegistryError", "LedgerError", "ConstrainedError",
    "Unauthorized", "InvalidTokenId", "ZeroAddress", "OwnershipMismatch",
    "MintUnauthorized", "TimeError", "InitError",
    "ZERO_PRINCIPAL",
]
