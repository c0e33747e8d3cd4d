"""Pytest fixtures for NFT registry tests.

Common fixtures for building registries with a controllable clock.
"""

from __future__ import annotations

# Load environment variables from .env before any tests run
from dotenv import load_dotenv

load_dotenv()

from datetime import datetime, timezone
from typing import Any

import pytest

from nft_registry.config_schema import RegistryConfig
from nft_registry.ledger import MetadataPart, MetadataPurpose, MetadataVal, NftRegistry
from nft_registry.ledger.notifier import TransferNotification, TransferNotifier


WINDOW_BEGIN = "2026-03-01 00:00:00"
WINDOW_END = "2026-03-31 23:59:59"

CUSTODIAN = "custodian"
DEPLOYER = "deployer"
WHITELISTED = "bob"


class FakeClock:
    """Callable clock whose time tests can move."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, text: str) -> None:
        self.now = datetime.strptime(text, "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc)


class RecordingDeliver:
    """Async deliver hook that records every notification it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, TransferNotification]] = []

    async def __call__(self, target: str, method: str, notification: TransferNotification) -> Any:
        self.calls.append((target, method, notification))
        return None


@pytest.fixture
def clock() -> FakeClock:
    """Clock sitting in the middle of the mint window."""
    return FakeClock(datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def registry_args() -> RegistryConfig:
    return RegistryConfig(
        name="Test Collection",
        symbol="TST",
        custodians=[CUSTODIAN],
        whitelist=[WHITELISTED],
        begin_date=WINDOW_BEGIN,
        end_date=WINDOW_END,
        total_limit="100",
    )


@pytest.fixture
def deliver() -> RecordingDeliver:
    return RecordingDeliver()


@pytest.fixture
def registry(registry_args: RegistryConfig, clock: FakeClock, deliver: RecordingDeliver) -> NftRegistry:
    """Fresh registry with one custodian and 'bob' whitelisted."""
    return NftRegistry(
        registry_args,
        caller=DEPLOYER,
        clock=clock,
        notifier=TransferNotifier(deliver=deliver),
    )


@pytest.fixture
def sample_metadata() -> list[MetadataPart]:
    return [
        MetadataPart(
            purpose=MetadataPurpose.PREVIEW,
            key_val_data={"name": MetadataVal.text("sample"), "size": MetadataVal.nat32(1024)},
            data=b"\x89PNG",
        )
    ]
