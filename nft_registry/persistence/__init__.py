# Snapshot types. Import save/load helpers from .checkpoint.
from .types import RegistryStateData, StableState

__all__ = ["RegistryStateData", "StableState"]
