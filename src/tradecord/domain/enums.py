"""Enumerations shared by the TradeCord domain."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class CommandTag(StrEnum):
    """Closed set of commands understood by the dispatcher."""

    CATCH = "catch"
    TRADE = "trade"
    LIST = "list"
    INFO = "info"
    MASS_RELEASE = "mass-release"
    RELEASE = "release"
    DAYCARE_INFO = "daycare-info"
    DAYCARE = "daycare"
    GIFT = "gift"
    SET_TRAINER_INFO = "set-trainer-info"
    GET_TRAINER_INFO = "get-trainer-info"
    FAVORITES_INFO = "favorites-info"
    FAVORITES = "favorites"
    DEX = "dex"
    PERKS = "perks"
    SPECIES_BOOST = "species-boost"
    BUDDY = "buddy"
    NICKNAME = "nickname"
    EVOLVE = "evolve"
    GIVE_ITEM = "give-item"
    GIFT_ITEM = "gift-item"
    TAKE_ITEM = "take-item"
    ITEM_LIST = "item-list"
    ITEM_DROP = "item-drop"
    SET_TIMEZONE = "set-timezone"
    DELETE_PLAYER = "delete-player"


TWO_PARTY_COMMANDS: frozenset[CommandTag] = frozenset({CommandTag.GIFT, CommandTag.GIFT_ITEM})


class Ball(StrEnum):
    """Capture balls. Values double as display names."""

    POKE = "Poke"
    GREAT = "Great"
    ULTRA = "Ultra"
    MASTER = "Master"
    SAFARI = "Safari"
    FAST = "Fast"
    LEVEL = "Level"
    LURE = "Lure"
    HEAVY = "Heavy"
    LOVE = "Love"
    FRIEND = "Friend"
    MOON = "Moon"
    SPORT = "Sport"
    NET = "Net"
    DIVE = "Dive"
    NEST = "Nest"
    REPEAT = "Repeat"
    TIMER = "Timer"
    LUXURY = "Luxury"
    PREMIER = "Premier"
    DUSK = "Dusk"
    HEAL = "Heal"
    QUICK = "Quick"
    DREAM = "Dream"
    BEAST = "Beast"
    CHERISH = "Cherish"

    @classmethod
    def parse(cls, raw: str) -> Ball | None:
        """Case-insensitive lookup, tolerating a trailing ``Ball``."""

        key = raw.strip().lower().removesuffix("ball").strip()
        for ball in cls:
            if ball.value.lower() == key:
                return ball
        return None


WILD_BALLS: tuple[Ball, ...] = tuple(b for b in Ball if b is not Ball.CHERISH)


class Perk(StrEnum):
    """Perks purchasable with dex completion points."""

    CATCH_BOOST = "CatchBoost"
    ITEM_BOOST = "ItemBoost"
    SPECIES_BOOST = "SpeciesBoost"
    GMAX_BOOST = "GmaxBoost"
    CHERISH_BOOST = "CherishBoost"

    @classmethod
    def parse(cls, raw: str) -> Perk | None:
        key = raw.strip().lower()
        for perk in cls:
            if perk.value.lower() == key:
                return perk
        return None


class ShinyTier(StrEnum):
    """Shiny variants; square is rarer than star."""

    NONE = "none"
    STAR = "star"
    SQUARE = "square"


class TimeOfDay(StrEnum):
    """Local time-of-day buckets used by evolution rules."""

    DAWN = "dawn"
    MORNING = "morning"
    DAY = "day"
    EVENING = "evening"
    NIGHT = "night"


class ItemKind(IntEnum):
    """Items that can be held, dropped, or stored in a player's bag."""

    SUN_STONE = 80
    MOON_STONE = 81
    FIRE_STONE = 82
    THUNDER_STONE = 83
    WATER_STONE = 84
    LEAF_STONE = 85
    SHINY_STONE = 107
    DUSK_STONE = 108
    DAWN_STONE = 109
    GRISEOUS_ORB = 112
    SOOTHE_BELL = 218
    EVERSTONE = 229
    LUCKY_EGG = 231
    KINGS_ROCK = 221
    METAL_COAT = 233
    SHINY_CHARM = 632
    ICE_STONE = 849
    FIRE_MEMORY = 904
    WATER_MEMORY = 905
    ELECTRIC_MEMORY = 906
    GRASS_MEMORY = 907
    ICE_MEMORY = 908
    FIGHTING_MEMORY = 909
    POISON_MEMORY = 910
    GROUND_MEMORY = 911
    FLYING_MEMORY = 912
    PSYCHIC_MEMORY = 913
    BUG_MEMORY = 914
    ROCK_MEMORY = 915
    GHOST_MEMORY = 916
    DRAGON_MEMORY = 917
    DARK_MEMORY = 918
    STEEL_MEMORY = 919
    FAIRY_MEMORY = 920
    STRAWBERRY_SWEET = 1109
    LOVE_SWEET = 1110
    BERRY_SWEET = 1111
    CLOVER_SWEET = 1112
    FLOWER_SWEET = 1113
    STAR_SWEET = 1114
    RIBBON_SWEET = 1115

    @property
    def display_name(self) -> str:
        if self is ItemKind.KINGS_ROCK:
            return "King's Rock"
        return self.name.replace("_", " ").title()

    @classmethod
    def parse(cls, raw: str) -> ItemKind | None:
        """Resolve a user-entered item name such as ``soothe bell`` or ``SootheBell``."""

        key = "".join(ch for ch in raw.lower() if ch.isalnum())
        if not key:
            return None
        for item in cls:
            if item.name.replace("_", "").lower() == key:
                return item
        return None


MEMORY_ITEMS: frozenset[ItemKind] = frozenset(
    item for item in ItemKind if ItemKind.FIRE_MEMORY <= item <= ItemKind.FAIRY_MEMORY
)
