"""Shared game constants."""

MEMBERSHIP_TYPES = ("free", "premium")
REALMS = ("earth", "moon", "mars")
MONSTER_TYPES = ("normal", "elite", "boss")
PROFESSION_TYPES = ("mining", "chopping")
ITEM_TYPES = ("weapon", "armor", "material", "potion", "other")
EQUIPMENT_SLOTS = ("weapon", "helmet", "chest", "legs", "boots", "gloves")
RARITIES = ("common", "uncommon", "rare", "epic", "legendary")

# AFK limits, in whole hours
MIN_AFK_HOURS = 1
MAX_AFK_HOURS = 12
TIER_DURATION_CAPS = {"free": 6, "premium": MAX_AFK_HOURS}

REALM_XP_PER_HOUR = {"earth": 50, "moon": 75, "mars": 100}

# Largest stack a single inventory entry holds (signed 32-bit column)
MAX_STACK = 2**31 - 1

# Defaults for app.config; overridable through the environment
DEFAULT_AFK_REWARD_CHANCE = 0.3
DEFAULT_AFK_REWARD_ITEM_ID = "iron_ore"
DEFAULT_CHAT_HISTORY_LIMIT = 50

# New characters start with these stats
STARTING_STATS = {
    "level": 1,
    "experience": 0,
    "health": 100,
    "max_health": 100,
    "attack": 10,
    "defense": 5,
    "current_realm": "earth",
}
