"""Type definitions for registry snapshots."""

from __future__ import annotations

from typing import Any, TypedDict


class RegistryStateData(TypedDict):
    """Serialized registry state (everything but the hash index)."""

    tokens: list[dict[str, Any]]
    custodians: list[str]
    operators: dict[str, list[str]]
    logo: dict[str, str] | None
    name: str
    symbol: str
    txid: int
    white_list: list[str]
    begin_date: str
    end_date: str
    total_limit: str


class StableState(TypedDict):
    """Registry state and content-hash index, saved and restored as one unit.

    ``hashes`` holds ``[token_id, hex_digest]`` pairs in token id order.
    """

    version: int
    state: RegistryStateData
    hashes: list[list[Any]]
