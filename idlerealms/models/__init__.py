from .base import db, Model, metadata

# Import model modules so tables register with metadata
from .users import User                              # noqa: F401
from .characters import Character, AfkState          # noqa: F401
from .items import Item                              # noqa: F401
from .inventory import InventoryEntry                # noqa: F401
from .afk import AfkSession                          # noqa: F401
from .market import MarketListing                    # noqa: F401
from .world import Realm, Monster, Profession, ChatMessage  # noqa: F401

__all__ = [
    "db", "Model", "metadata",
    "User", "Character", "AfkState",
    "Item", "InventoryEntry",
    "AfkSession", "MarketListing",
    "Realm", "Monster", "Profession", "ChatMessage",
]
