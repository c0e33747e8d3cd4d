"""Mint window gate for the public self-mint path.

The administrative ``mint`` is always open. ``simple_mint`` goes through
this policy first. Checks run in this order:

1. ``uri`` is non-empty and parses as an absolute URI  -> MintUnauthorized
2. now is within ``[begin_date, end_date]`` (inclusive) -> TimeError
3. recipient is whitelisted                              -> MintUnauthorized

Dates use the fixed ``%Y-%m-%d %H:%M:%S`` format and are read as UTC. A bad
date is fatal when the policy is built.
"""

from __future__ import annotations

import hashlib
import re
from datetime import datetime, timezone
from typing import Callable
from urllib.parse import urlsplit

from ..constants import LOCATION_TYPE_URI, MINT_DATE_FORMAT
from .errors import InitError, MintUnauthorized, TimeError
from .tokens import MetadataPart, MetadataPurpose, MetadataVal

# RFC 3986 section 3.1
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
# Characters never allowed unescaped anywhere in a URI
_FORBIDDEN_RE = re.compile(r"[\s\"<>\\^`{|}\x00-\x1f\x7f]")
# "%" must start a two-hex-digit escape
_BAD_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
# Bracketed host: IPv6 address or IPvFuture, optional port
_IP_LITERAL_RE = re.compile(r"^\[(?:[0-9A-Fa-f:.]+|v[0-9A-Fa-f]+\.[\w.~!$&'()*+,;=:-]+)\](?::[0-9]*)?$")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_mint_date(value: str) -> datetime:
    """Parse a mint window bound as an aware UTC datetime.

    Raises:
        InitError: If ``value`` does not match ``MINT_DATE_FORMAT``
    """
    try:
        parsed = datetime.strptime(value, MINT_DATE_FORMAT)
    except (TypeError, ValueError) as e:
        raise InitError(
            f"Invalid mint date {value!r}: expected format {MINT_DATE_FORMAT}",
            value=value,
        ) from e
    return parsed.replace(tzinfo=timezone.utc)


def is_valid_uri(uri: str) -> bool:
    """Syntactic check for an absolute RFC 3986 URI (``scheme:rest``).

    Percent escapes must carry two hex digits. Square brackets may only
    enclose an IP-literal host.
    """
    if not uri or _FORBIDDEN_RE.search(uri) or _BAD_PERCENT_RE.search(uri):
        return False
    scheme, sep, rest = uri.partition(":")
    if not sep or not rest or not _SCHEME_RE.match(scheme):
        return False
    try:
        parts = urlsplit(uri)
        # Accessing port validates it
        parts.port
    except ValueError:
        return False
    if any(c in uri.replace(parts.netloc, "", 1) for c in "[]"):
        return False
    userinfo, _, hostport = parts.netloc.rpartition("@")
    if "[" in userinfo or "]" in userinfo:
        return False
    if ("[" in hostport or "]" in hostport) and not _IP_LITERAL_RE.match(hostport):
        return False
    return True


def build_uri_metadata(uri: str, mime_type: str, name: str, origin: str) -> MetadataPart:
    """The fixed six-field metadata record for a URI-located token.

    ``contentHash`` is the SHA-256 of the UTF-8 URI string. No binary content
    is supplied on this path.
    """
    return MetadataPart(
        purpose=MetadataPurpose.RENDERED,
        key_val_data={
            "locationType": MetadataVal.nat8(LOCATION_TYPE_URI),
            "location": MetadataVal.text(uri),
            "contentHash": MetadataVal.blob(hashlib.sha256(uri.encode("utf-8")).digest()),
            "contentType": MetadataVal.text(mime_type),
            "name": MetadataVal.text(name),
            "origin": MetadataVal.text(origin),
        },
        data=b"",
    )


class MintWindowPolicy:
    """Time window plus whitelist in front of ``simple_mint``.

    ``total_limit`` is carried for reporting only. Nothing enforces it.
    """

    begin_date: str
    end_date: str
    whitelist: list[str]
    total_limit: str

    def __init__(
        self,
        begin_date: str,
        end_date: str,
        whitelist: list[str] | None = None,
        total_limit: str = "",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._begin = parse_mint_date(begin_date)
        self._end = parse_mint_date(end_date)
        self.begin_date = begin_date
        self.end_date = end_date
        self.whitelist = list(whitelist or [])
        self.total_limit = total_limit
        self._clock = clock

    @property
    def begins_at(self) -> datetime:
        return self._begin

    @property
    def ends_at(self) -> datetime:
        return self._end

    def is_open(self, now: datetime | None = None) -> bool:
        now = now if now is not None else self._clock()
        return self._begin <= now <= self._end

    def is_whitelisted(self, principal: str) -> bool:
        # Linear scan; whitelists are expected to be small
        return principal in self.whitelist

    def check(self, to: str, uri: str) -> None:
        """Raise unless a public mint of ``uri`` to ``to`` is allowed now."""
        if not is_valid_uri(uri):
            raise MintUnauthorized(f"Invalid URI: {uri!r}", reason="invalid_uri", uri=uri)
        now = self._clock()
        if not self.is_open(now):
            raise TimeError(
                f"Mint window is {self.begin_date} to {self.end_date} UTC",
                begin_date=self.begin_date,
                end_date=self.end_date,
                now=now.strftime(MINT_DATE_FORMAT),
            )
        if not self.is_whitelisted(to):
            raise MintUnauthorized(
                f"{to} is not on the mint whitelist", reason="not_whitelisted", to=to
            )

    def mint_date(self) -> str:
        """``"<begin>,<end>"`` as configured."""
        return f"{self.begin_date},{self.end_date}"
