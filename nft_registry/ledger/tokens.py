"""Token data model.

A Token is created by mint and never removed. Burn is a soft delete that
hands ownership to the sentinel identity.

All types serialize to plain JSON-compatible dicts (``to_dict``/``from_dict``).
Byte fields are stored as base64 text.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..constants import DEFAULT_LOGO_DATA, DEFAULT_LOGO_TYPE


def _b64encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def _b64decode(text: str) -> bytes:
    return base64.b64decode(text.encode("ascii"), validate=True)


class MetadataPurpose(str, Enum):
    """What a metadata part is for."""

    PREVIEW = "Preview"
    RENDERED = "Rendered"


class MetadataValKind(str, Enum):
    """Tags for typed metadata values."""

    TEXT = "TextContent"
    BLOB = "BlobContent"
    NAT = "NatContent"
    NAT8 = "Nat8Content"
    NAT16 = "Nat16Content"
    NAT32 = "Nat32Content"
    NAT64 = "Nat64Content"


# Bit width per fixed-size natural kind (NAT is unbounded)
_NAT_BITS: dict[MetadataValKind, int] = {
    MetadataValKind.NAT8: 8,
    MetadataValKind.NAT16: 16,
    MetadataValKind.NAT32: 32,
    MetadataValKind.NAT64: 64,
}


@dataclass(frozen=True)
class MetadataVal:
    """A typed metadata value.

    Prefer the constructors (``MetadataVal.text("x")``, ``MetadataVal.nat8(3)``)
    over building instances by hand. Values are range-checked on creation.
    """

    kind: MetadataValKind
    value: str | bytes | int

    def __post_init__(self) -> None:
        kind = MetadataValKind(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind == MetadataValKind.TEXT:
            if not isinstance(self.value, str):
                raise TypeError(f"{kind.value} requires str, got {type(self.value).__name__}")
        elif kind == MetadataValKind.BLOB:
            if not isinstance(self.value, (bytes, bytearray)):
                raise TypeError(f"{kind.value} requires bytes, got {type(self.value).__name__}")
            object.__setattr__(self, "value", bytes(self.value))
        else:
            if isinstance(self.value, bool) or not isinstance(self.value, int):
                raise TypeError(f"{kind.value} requires int, got {type(self.value).__name__}")
            if self.value < 0:
                raise ValueError(f"{kind.value} cannot be negative: {self.value}")
            bits = _NAT_BITS.get(kind)
            if bits is not None and self.value >= 1 << bits:
                raise ValueError(f"{kind.value} out of range: {self.value}")

    @classmethod
    def text(cls, value: str) -> MetadataVal:
        return cls(MetadataValKind.TEXT, value)

    @classmethod
    def blob(cls, value: bytes) -> MetadataVal:
        return cls(MetadataValKind.BLOB, value)

    @classmethod
    def nat(cls, value: int) -> MetadataVal:
        return cls(MetadataValKind.NAT, value)

    @classmethod
    def nat8(cls, value: int) -> MetadataVal:
        return cls(MetadataValKind.NAT8, value)

    @classmethod
    def nat16(cls, value: int) -> MetadataVal:
        return cls(MetadataValKind.NAT16, value)

    @classmethod
    def nat32(cls, value: int) -> MetadataVal:
        return cls(MetadataValKind.NAT32, value)

    @classmethod
    def nat64(cls, value: int) -> MetadataVal:
        return cls(MetadataValKind.NAT64, value)

    def to_dict(self) -> dict[str, Any]:
        value: Any = self.value
        if isinstance(value, bytes):
            value = _b64encode(value)
        return {"kind": self.kind.value, "value": value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MetadataVal:
        kind = MetadataValKind(data["kind"])
        value = data["value"]
        if kind == MetadataValKind.BLOB:
            value = _b64decode(value)
        return cls(kind, value)


@dataclass
class MetadataPart:
    """One part of a token's metadata description."""

    purpose: MetadataPurpose
    key_val_data: dict[str, MetadataVal] = field(default_factory=dict)
    data: bytes = b""

    def to_dict(self) -> dict[str, Any]:
        return {
            "purpose": MetadataPurpose(self.purpose).value,
            "key_val_data": {k: v.to_dict() for k, v in self.key_val_data.items()},
            "data": _b64encode(self.data),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MetadataPart:
        return cls(
            purpose=MetadataPurpose(data["purpose"]),
            key_val_data={
                k: MetadataVal.from_dict(v)
                for k, v in data.get("key_val_data", {}).items()
            },
            data=_b64decode(data.get("data", "")),
        )


MetadataDesc = list[MetadataPart]


@dataclass
class Token:
    """A registry entry. ``id`` equals its index in the token sequence."""

    id: int
    owner: str
    approved: str | None
    metadata: MetadataDesc
    content: bytes

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner,
            "approved": self.approved,
            "metadata": [part.to_dict() for part in self.metadata],
            "content": _b64encode(self.content),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Token:
        return cls(
            id=int(data["id"]),
            owner=data["owner"],
            approved=data.get("approved"),
            metadata=[MetadataPart.from_dict(p) for p in data.get("metadata", [])],
            content=_b64decode(data.get("content", "")),
        )


@dataclass(frozen=True)
class LogoResult:
    """Collection logo: MIME type plus base64 image data."""

    logo_type: str
    data: str

    def to_dict(self) -> dict[str, str]:
        return {"logo_type": self.logo_type, "data": self.data}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogoResult:
        return cls(logo_type=data["logo_type"], data=data["data"])


DEFAULT_LOGO = LogoResult(logo_type=DEFAULT_LOGO_TYPE, data=DEFAULT_LOGO_DATA)
