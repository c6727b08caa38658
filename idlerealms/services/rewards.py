"""Reward tables for AFK settlement.

A reward table is anything with ``roll(realm, hour, rng)`` returning the drops
for one elapsed hour. The engine calls it once per hour with an injected
``random.Random`` so results are reproducible under a fixed seed.

    table = ChanceRewardTable(chance=0.3, item_id="iron_ore")
    drops = table.roll("mars", 0, random.Random(42))
"""
from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Mapping, Protocol, Sequence

from ..config import DEFAULT_AFK_REWARD_CHANCE, DEFAULT_AFK_REWARD_ITEM_ID


@dataclass(frozen=True)
class RewardDrop:
    item_id: str
    quantity: int = 1

    def as_dict(self) -> dict:
        return {"item_id": self.item_id, "quantity": self.quantity}


class RewardTable(Protocol):
    def roll(self, realm: str, hour: int, rng: random.Random) -> list[RewardDrop]:
        ...


class ChanceRewardTable:
    """Flat table: each hour finds ``quantity`` of one item with probability ``chance``."""

    def __init__(self, chance: float, item_id: str, quantity: int = 1):
        if not (0.0 <= chance <= 1.0):
            raise ValueError("chance must be in [0,1]")
        self.chance = chance
        self.item_id = item_id
        self.quantity = quantity

    def roll(self, realm: str, hour: int, rng: random.Random) -> list[RewardDrop]:
        if rng.random() < self.chance:
            return [RewardDrop(self.item_id, self.quantity)]
        return []


class RealmLootTable:
    """Per-realm threshold table.

    Each realm maps to ``(threshold, item_id, (min_qty, max_qty))`` rows with
    thresholds ascending in 1..100; a d100 roll picks the first row whose
    threshold it does not exceed. Rolls above the last threshold find nothing.
    Realms with no rows fall back to ``default``.
    """

    def __init__(
        self,
        tables: Mapping[str, Sequence[tuple[int, str, tuple[int, int]]]],
        default: RewardTable | None = None,
    ):
        self.tables = {realm: list(rows) for realm, rows in tables.items()}
        self.default = default

    def roll(self, realm: str, hour: int, rng: random.Random) -> list[RewardDrop]:
        rows = self.tables.get(realm)
        if not rows:
            return self.default.roll(realm, hour, rng) if self.default else []
        roll = rng.randint(1, 100)
        for threshold, item_id, (lo, hi) in rows:
            if roll <= threshold:
                return [RewardDrop(item_id, rng.randint(lo, hi))]
        return []


def merge_drops(drops: Iterable[RewardDrop]) -> dict[str, int]:
    """Total quantity per item, in first-seen order."""
    totals: Counter[str] = Counter()
    for drop in drops:
        totals[drop.item_id] += drop.quantity
    return dict(totals)


def table_from_config(config: Mapping) -> RewardTable:
    """Build the settlement table from app config.

    ``AFK_REWARD_TABLES`` maps realm -> ``[[threshold, item_id, [min, max]], ...]``.
    When set, those realms use a ``RealmLootTable`` and the flat chance table
    covers the rest.
    """
    flat = ChanceRewardTable(
        chance=float(config.get("AFK_REWARD_CHANCE", DEFAULT_AFK_REWARD_CHANCE)),
        item_id=config.get("AFK_REWARD_ITEM_ID", DEFAULT_AFK_REWARD_ITEM_ID),
    )
    tables = config.get("AFK_REWARD_TABLES")
    if not tables:
        return flat
    return RealmLootTable(tables, default=flat)


DEFAULT_REWARD_TABLE = ChanceRewardTable(DEFAULT_AFK_REWARD_CHANCE, DEFAULT_AFK_REWARD_ITEM_ID)
