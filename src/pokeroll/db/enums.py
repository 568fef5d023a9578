"""Closed value sets stored in enum columns.

Member values are the literal strings persisted in the database.
"""

from __future__ import annotations

import enum


class Role(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class PokemonType(str, enum.Enum):
    NORMAL = "Normal"
    FIRE = "Fire"
    WATER = "Water"
    GRASS = "Grass"
    FLYING = "Flying"
    FIGHTING = "Fighting"
    POISON = "Poison"
    ELECTRIC = "Electric"
    GROUND = "Ground"
    ROCK = "Rock"
    PSYCHIC = "Psychic"
    ICE = "Ice"
    BUG = "Bug"
    GHOST = "Ghost"
    STEEL = "Steel"
    DRAGON = "Dragon"
    DARK = "Dark"
    FAIRY = "Fairy"


class Rarity(str, enum.Enum):
    """Rarity tiers, declared from most to least common."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"

    @property
    def tier(self) -> int:
        """Zero-based position in the rarity ladder."""
        return list(Rarity).index(self)


class AccountType(str, enum.Enum):
    """Kinds of linked identity an auth provider can hand back."""

    OAUTH = "oauth"
    OIDC = "oidc"
    EMAIL = "email"
    WEBAUTHN = "webauthn"
