"""Unit tests for MintWindowPolicy and URI metadata."""

import hashlib
from datetime import datetime, timezone

import pytest

from nft_registry.ledger.errors import InitError, MintUnauthorized, TimeError
from nft_registry.ledger.mint_window import (
    MintWindowPolicy,
    build_uri_metadata,
    is_valid_uri,
    parse_mint_date,
)
from nft_registry.ledger.tokens import MetadataPurpose, MetadataVal


def _at(text: str) -> datetime:
    return datetime.strptime(text, "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc)


def _policy(now: str, whitelist: list[str] | None = None) -> MintWindowPolicy:
    return MintWindowPolicy(
        begin_date="2026-03-01 00:00:00",
        end_date="2026-03-31 23:59:59",
        whitelist=whitelist if whitelist is not None else ["bob"],
        clock=lambda: _at(now),
    )


class TestParseMintDate:
    def test_parses_as_utc(self) -> None:
        parsed = parse_mint_date("2026-03-01 12:30:00")

        assert parsed == datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["2026-03-01", "2026/03/01 00:00:00", "", "soon"])
    def test_rejects_bad_format(self, value: str) -> None:
        with pytest.raises(InitError):
            parse_mint_date(value)

    def test_bad_date_is_fatal_at_init(self) -> None:
        with pytest.raises(InitError):
            MintWindowPolicy(begin_date="tomorrow", end_date="2026-03-31 23:59:59")


class TestIsValidUri:
    @pytest.mark.parametrize(
        "uri",
        [
            "https://example.com/nft/1.png",
            "ipfs://bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi",
            "ar://abc123",
            "mailto:someone@example.com",
            "urn:isbn:0451450523",
            "https://example.com/a%20b",
            "http://[::1]:8080/x",
        ],
    )
    def test_valid(self, uri: str) -> None:
        assert is_valid_uri(uri)

    @pytest.mark.parametrize(
        "uri",
        [
            "",
            "not a uri",
            "example.com/no-scheme",
            "1http://bad-scheme",
            "http://exa mple.com",
            "https:",
            "http://example.com:notaport/",
            "https://example.com/%zz",
            "https://example.com/a%",
            "https://example.com/%4",
            "http://example.com/a[b]",
            "http://exa[mple.com/",
            "http://[zz]/",
        ],
    )
    def test_invalid(self, uri: str) -> None:
        assert not is_valid_uri(uri)


class TestCheck:
    def test_allows_whitelisted_inside_window(self) -> None:
        _policy("2026-03-15 12:00:00").check("bob", "https://example.com/a")

    def test_bounds_are_inclusive(self) -> None:
        _policy("2026-03-01 00:00:00").check("bob", "https://example.com/a")
        _policy("2026-03-31 23:59:59").check("bob", "https://example.com/a")

    def test_after_window(self) -> None:
        with pytest.raises(TimeError):
            _policy("2026-04-01 00:00:00").check("bob", "https://example.com/a")

    def test_before_window(self) -> None:
        with pytest.raises(TimeError):
            _policy("2026-02-28 23:59:59").check("bob", "https://example.com/a")

    def test_not_whitelisted(self) -> None:
        with pytest.raises(MintUnauthorized) as exc_info:
            _policy("2026-03-15 12:00:00").check("carol", "https://example.com/a")
        assert exc_info.value.reason == "not_whitelisted"

    def test_bad_uri(self) -> None:
        with pytest.raises(MintUnauthorized) as exc_info:
            _policy("2026-03-15 12:00:00").check("bob", "")
        assert exc_info.value.reason == "invalid_uri"

    def test_uri_checked_before_time(self) -> None:
        with pytest.raises(MintUnauthorized):
            _policy("2027-01-01 00:00:00").check("bob", "no scheme")

    def test_time_checked_before_whitelist(self) -> None:
        with pytest.raises(TimeError):
            _policy("2027-01-01 00:00:00").check("carol", "https://example.com/a")

    def test_shared_error_code(self) -> None:
        """Bad URI and not whitelisted share one code, distinct reasons."""
        policy = _policy("2026-03-15 12:00:00")
        with pytest.raises(MintUnauthorized) as bad_uri:
            policy.check("bob", "")
        with pytest.raises(MintUnauthorized) as not_listed:
            policy.check("carol", "https://example.com/a")

        assert bad_uri.value.code == not_listed.value.code
        assert bad_uri.value.details["reason"] != not_listed.value.details["reason"]


class TestReporting:
    def test_mint_date(self) -> None:
        assert _policy("2026-03-15 12:00:00").mint_date() == (
            "2026-03-01 00:00:00,2026-03-31 23:59:59"
        )

    def test_total_limit_carried(self) -> None:
        policy = MintWindowPolicy(
            begin_date="2026-03-01 00:00:00",
            end_date="2026-03-31 23:59:59",
            total_limit="5",
        )
        assert policy.total_limit == "5"


class TestBuildUriMetadata:
    def test_six_fields(self) -> None:
        uri = "https://example.com/cat.png"
        part = build_uri_metadata(uri, "image/png", "Cat", "web")

        assert part.purpose == MetadataPurpose.RENDERED
        assert part.data == b""
        assert part.key_val_data == {
            "locationType": MetadataVal.nat8(3),
            "location": MetadataVal.text(uri),
            "contentHash": MetadataVal.blob(hashlib.sha256(uri.encode("utf-8")).digest()),
            "contentType": MetadataVal.text("image/png"),
            "name": MetadataVal.text("Cat"),
            "origin": MetadataVal.text("web"),
        }
