"""Classify inventoried assets as used or unused."""

from __future__ import annotations

from typing import Iterable, List

from .models import AssetRecord, Reconciliation


def reconcile(
    inventory: Iterable[AssetRecord],
    referenced_paths: Iterable[str],
) -> Reconciliation:
    """Partition ``inventory`` by membership of each absolute path.

    Both sides must already be canonical; no normalisation happens here.
    """
    referenced = frozenset(referenced_paths)
    used: List[AssetRecord] = []
    unused: List[AssetRecord] = []
    for record in inventory:
        if record.absolute_path in referenced:
            used.append(record)
        else:
            unused.append(record)
    return Reconciliation(used=tuple(used), unused=tuple(unused))
