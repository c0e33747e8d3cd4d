"""Checkpoint save/load for registry state.

The registry state and the content-hash index are written together as a
single JSON document and always restored together, so the index can never
drift from the tokens it describes.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from ..config import get
from ..ledger.mint_window import utc_now
from ..ledger.registry import STATE_VERSION, NftRegistry
from .types import StableState

logger = logging.getLogger(__name__)


def _resolve_path(checkpoint_file: str | Path | None) -> Path:
    resolved = checkpoint_file or get("checkpoint.checkpoint_file") or "registry_checkpoint.json"
    return Path(resolved)


def save_checkpoint(registry: NftRegistry, checkpoint_file: str | Path | None = None) -> Path:
    """Save registry state to a checkpoint file before a restart.

    Uses atomic write (temp file + rename) so an interrupted save leaves the
    previous checkpoint intact.

    Returns:
        Path to the saved checkpoint file
    """
    path = _resolve_path(checkpoint_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    document: dict[str, Any] = dict(registry.snapshot())
    document["saved_at"] = datetime.now(timezone.utc).isoformat()

    temp_file = path.with_name(path.name + ".tmp")
    with open(temp_file, "w") as f:
        json.dump(document, f, indent=2)

    # Atomic rename - if interrupted here, original checkpoint remains valid
    os.replace(temp_file, path)

    logger.info("Saved registry checkpoint to %s (%d tokens)", path, registry.total_supply())
    return path


def load_checkpoint(checkpoint_file: str | Path | None = None) -> StableState | None:
    """Load a snapshot from a checkpoint file.

    Returns:
        StableState if the file exists, None otherwise.

    Raises:
        ValueError: If the file holds an unsupported snapshot version
    """
    path = _resolve_path(checkpoint_file)
    if not path.exists():
        return None

    with open(path) as f:
        data: dict[str, Any] = json.load(f)

    version = data.get("version")
    if version != STATE_VERSION:
        raise ValueError(f"Unsupported checkpoint version {version} in {path}")

    return {
        "version": int(version),
        "state": data["state"],
        "hashes": [list(entry) for entry in data["hashes"]],
    }


def restore_registry(
    checkpoint_file: str | Path | None = None,
    *,
    clock: Callable[[], datetime] = utc_now,
    **kwargs: Any,
) -> NftRegistry | None:
    """Load a checkpoint and rebuild the registry from it.

    Extra keyword arguments are passed to ``NftRegistry.restore``.

    Returns:
        The restored registry, or None when no checkpoint exists.
    """
    snapshot = load_checkpoint(checkpoint_file)
    if snapshot is None:
        return None
    return NftRegistry.restore(snapshot, clock=clock, **kwargs)
