"""Unit tests for registry error conventions."""

from nft_registry.ledger.errors import (
    ConstrainedError,
    ErrorCategory,
    ErrorCode,
    ErrorResponse,
    InitError,
    InvalidTokenId,
    LedgerError,
    MintUnauthorized,
    OwnershipMismatch,
    RegistryError,
    TimeError,
    Unauthorized,
    ZeroAddress,
)


class TestErrorEnums:
    def test_error_code_values(self) -> None:
        assert ErrorCode.UNAUTHORIZED.value == "unauthorized"
        assert ErrorCode.INVALID_TOKEN_ID.value == "invalid_token_id"
        assert ErrorCode.ZERO_ADDRESS.value == "zero_address"
        assert ErrorCode.OWNERSHIP_MISMATCH.value == "ownership_mismatch"
        assert ErrorCode.TIME_ERROR.value == "time_error"

    def test_error_category_values(self) -> None:
        assert ErrorCategory.PERMISSION.value == "permission"
        assert ErrorCategory.TEMPORAL.value == "temporal"


class TestErrorResponse:
    def test_error_to_dict(self) -> None:
        response = ErrorResponse(error="nope", code="unauthorized", category="permission")

        assert response.to_dict() == {
            "success": False,
            "error": "nope",
            "code": "unauthorized",
            "category": "permission",
            "retriable": False,
        }

    def test_details_included_when_present(self) -> None:
        response = ErrorResponse(error="x", details={"token_id": 3})

        assert response.to_dict()["details"] == {"token_id": 3}


class TestExceptionHierarchy:
    def test_ledger_errors(self) -> None:
        for cls in (Unauthorized, ZeroAddress, OwnershipMismatch):
            assert issubclass(cls, LedgerError)
        assert issubclass(InvalidTokenId, LedgerError)

    def test_public_mint_errors(self) -> None:
        assert issubclass(MintUnauthorized, ConstrainedError)
        assert issubclass(TimeError, ConstrainedError)
        assert not issubclass(MintUnauthorized, LedgerError)

    def test_all_are_registry_errors(self) -> None:
        for cls in (LedgerError, ConstrainedError, InitError):
            assert issubclass(cls, RegistryError)


class TestTaggedOutcome:
    def test_invalid_token_id_dict(self) -> None:
        result = InvalidTokenId(9).to_dict()

        assert result["success"] is False
        assert result["code"] == "invalid_token_id"
        assert result["category"] == "resource"
        assert result["details"] == {"token_id": 9}

    def test_mint_unauthorized_carries_reason(self) -> None:
        result = MintUnauthorized("bad", reason="invalid_uri", uri="").to_dict()

        assert result["code"] == "unauthorized"
        assert result["details"] == {"reason": "invalid_uri", "uri": ""}

    def test_no_details_omitted(self) -> None:
        result = ZeroAddress("zero").to_dict()

        assert "details" not in result
        assert result["code"] == "zero_address"
