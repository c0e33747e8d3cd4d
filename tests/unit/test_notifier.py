"""Tests for fire-and-forget transfer notifications."""

import asyncio

import pytest

from nft_registry.constants import ZERO_PRINCIPAL
from nft_registry.ledger import NftRegistry, Unauthorized, ZeroAddress
from nft_registry.ledger.notifier import TransferNotification, TransferNotifier


class TestTransferFromNotify:
    @pytest.mark.asyncio
    async def test_returns_before_delivery(self, registry: NftRegistry, deliver) -> None:
        registry.mint("x", "alice", [], b"")

        txid = registry.transfer_from_notify("alice", "alice", "carol", 0, b"hi")

        assert txid == 1
        assert deliver.calls == []
        assert registry.ledger.notifier.pending == 1

        await registry.ledger.notifier.drain()

        assert deliver.calls == [
            (
                "carol",
                "onDIP721Received",
                TransferNotification(caller="alice", from_="alice", token_id=0, data=b"hi"),
            )
        ]
        assert registry.ledger.notifier.pending == 0

    @pytest.mark.asyncio
    async def test_failing_recipient_does_not_change_result(self, registry_args, clock) -> None:
        async def broken(target: str, method: str, notification: TransferNotification) -> None:
            raise RuntimeError("recipient trapped")

        notifier = TransferNotifier(deliver=broken)
        registry = NftRegistry(registry_args, caller="deployer", clock=clock, notifier=notifier)
        registry.mint("x", "alice", [], b"")

        txid = registry.transfer_from_notify("alice", "alice", "carol", 0)
        await notifier.drain()

        assert txid == 1
        assert registry.owner_of(0) == "carol"

    @pytest.mark.asyncio
    async def test_reentrant_recipient_sees_new_state(self, registry_args, clock) -> None:
        seen: list[str] = []
        holder: dict[str, NftRegistry] = {}

        async def reentrant(target: str, method: str, notification: TransferNotification) -> None:
            registry = holder["registry"]
            seen.append(registry.owner_of(notification.token_id))
            # Recipient immediately passes the token on
            registry.transfer_from(target, target, "dave", notification.token_id)

        notifier = TransferNotifier(deliver=reentrant)
        registry = NftRegistry(registry_args, caller="deployer", clock=clock, notifier=notifier)
        holder["registry"] = registry
        registry.mint("x", "alice", [], b"")

        registry.transfer_from_notify("alice", "alice", "carol", 0)
        await notifier.drain()

        assert seen == ["carol"]
        assert registry.owner_of(0) == "dave"

    @pytest.mark.asyncio
    async def test_failed_transfer_sends_nothing(self, registry: NftRegistry, deliver) -> None:
        registry.mint("x", "alice", [], b"")

        with pytest.raises(Unauthorized):
            registry.transfer_from_notify("mallory", "alice", "mallory", 0)
        await registry.ledger.notifier.drain()

        assert deliver.calls == []

    def test_no_running_loop_drops_notification(self, registry: NftRegistry, deliver) -> None:
        registry.mint("x", "alice", [], b"")

        txid = registry.transfer_from_notify("alice", "alice", "carol", 0)

        assert txid == 1
        assert registry.owner_of(0) == "carol"
        assert registry.ledger.notifier.pending == 0
        assert deliver.calls == []


class TestSafeTransferFromNotify:
    @pytest.mark.asyncio
    async def test_rejects_sentinel(self, registry: NftRegistry, deliver) -> None:
        registry.mint("x", "alice", [], b"")

        with pytest.raises(ZeroAddress):
            registry.safe_transfer_from_notify("alice", "alice", ZERO_PRINCIPAL, 0)
        await registry.ledger.notifier.drain()

        assert registry.owner_of(0) == "alice"
        assert deliver.calls == []

    @pytest.mark.asyncio
    async def test_delivers(self, registry: NftRegistry, deliver) -> None:
        registry.mint("x", "alice", [], b"")

        registry.safe_transfer_from_notify("alice", "alice", "carol", 0)
        await registry.ledger.notifier.drain()

        assert [target for target, _, _ in deliver.calls] == ["carol"]


class TestTransferNotifier:
    @pytest.mark.asyncio
    async def test_disabled(self, deliver) -> None:
        notifier = TransferNotifier(deliver=deliver, enabled=False)

        task = notifier.dispatch("carol", TransferNotification("a", "a", 0, b""))

        assert task is None
        assert notifier.pending == 0

    @pytest.mark.asyncio
    async def test_without_deliver_hook(self) -> None:
        notifier = TransferNotifier()

        assert notifier.dispatch("carol", TransferNotification("a", "a", 0, b"")) is None

    @pytest.mark.asyncio
    async def test_custom_method(self, deliver) -> None:
        notifier = TransferNotifier(deliver=deliver, method="onReceived")

        notifier.dispatch("carol", TransferNotification("a", "a", 0, b""))
        await notifier.drain()

        assert deliver.calls[0][1] == "onReceived"

    @pytest.mark.asyncio
    async def test_slow_recipient_does_not_block(self) -> None:
        release = asyncio.Event()

        async def slow(target: str, method: str, notification: TransferNotification) -> None:
            await release.wait()

        notifier = TransferNotifier(deliver=slow)
        notifier.dispatch("carol", TransferNotification("a", "a", 0, b""))
        await asyncio.sleep(0)

        assert notifier.pending == 1
        release.set()
        await notifier.drain()
        assert notifier.pending == 0
