"""ORM models for the game schema.

Table and column names are the persisted contract shared with the web
front end, so they stay camelCase; Python attributes are snake_case and
map onto them explicitly.

Every foreign key is declared ON DELETE CASCADE and the matching
relationships use ``passive_deletes=True`` so removal is left to the
database.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Double,
    Enum,
    ForeignKey,
    Integer,
    PrimaryKeyConstraint,
    String,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pokeroll.db.base import Base
from pokeroll.db.enums import PokemonType, Rarity, Role


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum_column(enum_cls: type[enum.Enum], name: str) -> Enum:
    """Enum column storing member values (not names), rejecting unknown strings on bind."""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


def _cascade_fk(target: str) -> ForeignKey:
    return ForeignKey(target, ondelete="CASCADE")


# ---------------------------------------------------------------------------
# Identity & auth
# ---------------------------------------------------------------------------


class User(Base):
    """Maps to the 'user' table. Root of all per-player data."""

    __tablename__ = "user"

    id: Mapped[str] = mapped_column("id", String(255), primary_key=True, default=_uuid)
    name: Mapped[str | None] = mapped_column("name", String(255), nullable=True)
    email: Mapped[str] = mapped_column("email", String(255), nullable=False)
    email_verified: Mapped[datetime | None] = mapped_column(
        "emailVerified", DateTime(timezone=True), nullable=True, default=_utcnow, server_default=func.now()
    )
    image: Mapped[str | None] = mapped_column("image", String(255), nullable=True)
    role: Mapped[Role | None] = mapped_column(
        "role", _enum_column(Role, "user_role"), nullable=True, default=Role.USER, server_default=Role.USER.value
    )

    # --- Relationships ---
    accounts: Mapped[list[Account]] = relationship(
        "Account", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    sessions: Mapped[list[Session]] = relationship(
        "Session", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    currency: Mapped[Currency | None] = relationship(
        "Currency", back_populates="user", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )
    inventory: Mapped[list[InventoryPokemon]] = relationship(
        "InventoryPokemon", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    expeditions: Mapped[list[Expedition]] = relationship(
        "Expedition", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    roulette_logs: Mapped[list[RouletteLog]] = relationship(
        "RouletteLog", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )


class Account(Base):
    """A linked external-auth identity. Unique per (provider, providerAccountId)."""

    __tablename__ = "account"
    __table_args__ = (PrimaryKeyConstraint("provider", "providerAccountId", name="pk_account"),)

    user_id: Mapped[str] = mapped_column("userId", String(255), _cascade_fk("user.id"), nullable=False)
    type: Mapped[str] = mapped_column("type", String(255), nullable=False)
    provider: Mapped[str] = mapped_column("provider", String(255), nullable=False)
    provider_account_id: Mapped[str] = mapped_column("providerAccountId", String(255), nullable=False)
    refresh_token: Mapped[str | None] = mapped_column("refresh_token", String(255), nullable=True)
    access_token: Mapped[str | None] = mapped_column("access_token", String(255), nullable=True)
    expires_at: Mapped[int | None] = mapped_column("expires_at", Integer, nullable=True)
    token_type: Mapped[str | None] = mapped_column("token_type", String(255), nullable=True)
    scope: Mapped[str | None] = mapped_column("scope", String(255), nullable=True)
    id_token: Mapped[str | None] = mapped_column("id_token", String(2048), nullable=True)
    session_state: Mapped[str | None] = mapped_column("session_state", String(255), nullable=True)

    user: Mapped[User] = relationship("User", back_populates="accounts")


class Session(Base):
    """An active login session token."""

    __tablename__ = "session"

    session_token: Mapped[str] = mapped_column("sessionToken", String(255), primary_key=True)
    user_id: Mapped[str] = mapped_column("userId", String(255), _cascade_fk("user.id"), nullable=False)
    expires: Mapped[datetime] = mapped_column("expires", DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship("User", back_populates="sessions")


class VerificationToken(Base):
    """Short-lived passwordless / e-mail verification token."""

    __tablename__ = "verificationToken"
    __table_args__ = (PrimaryKeyConstraint("identifier", "token", name="pk_verificationToken"),)

    identifier: Mapped[str] = mapped_column("identifier", String(255), nullable=False)
    token: Mapped[str] = mapped_column("token", String(255), nullable=False)
    expires: Mapped[datetime] = mapped_column("expires", DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# Economy
# ---------------------------------------------------------------------------


class Currency(Base):
    """One balance row per user."""

    __tablename__ = "currency"

    user_id: Mapped[str] = mapped_column("userId", String(255), _cascade_fk("user.id"), primary_key=True)
    cash: Mapped[float | None] = mapped_column("cash", Double, default=0, server_default="0")
    dust: Mapped[float | None] = mapped_column("dust", Double, default=0, server_default="0")
    num_expeditions_remaining: Mapped[int | None] = mapped_column(
        "numExpeditionsRemaining", Integer, default=3, server_default="3"
    )

    user: Mapped[User] = relationship("User", back_populates="currency")


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class PokemonToAbility(Base):
    """Join table: which abilities a species can have."""

    __tablename__ = "pokemonToAbility"
    __table_args__ = (PrimaryKeyConstraint("pokemonEntry", "abilityId", name="pk_pokemonToAbility"),)

    pokemon_entry: Mapped[int] = mapped_column("pokemonEntry", Integer, _cascade_fk("pokemon.entry"), nullable=False)
    ability_id: Mapped[int] = mapped_column("abilityId", Integer, _cascade_fk("ability.id"), nullable=False)


class PokemonToEvolution(Base):
    """Join table: which species take part in which evolution edge."""

    __tablename__ = "pokemonToEvolution"
    __table_args__ = (PrimaryKeyConstraint("pokemonEntry", "evolutionId", name="pk_pokemonToEvolution"),)

    pokemon_entry: Mapped[int] = mapped_column("pokemonEntry", Integer, _cascade_fk("pokemon.entry"), nullable=False)
    # Primary-key membership makes this NOT NULL even though the reference itself is optional.
    evolution_id: Mapped[int] = mapped_column("evolutionId", Integer, _cascade_fk("evolution.id"))


class Pokemon(Base):
    """Catalog species keyed by its dex entry number."""

    __tablename__ = "pokemon"

    entry: Mapped[int] = mapped_column("entry", Integer, primary_key=True, autoincrement=False)
    # Unique because rouletteLogs.pokemonName references it.
    name: Mapped[str] = mapped_column("name", String(50), nullable=False, unique=True)
    type: Mapped[PokemonType] = mapped_column("type", _enum_column(PokemonType, "pokemon_type"), nullable=False)
    icon: Mapped[str] = mapped_column("icon", String(1000), nullable=False)
    rarity: Mapped[Rarity] = mapped_column("rarity", _enum_column(Rarity, "pokemon_rarity"), nullable=False)

    abilities: Mapped[list[Ability]] = relationship(
        "Ability",
        secondary=PokemonToAbility.__table__,
        back_populates="pokemons",
        passive_deletes=True,
    )
    evolution_chains: Mapped[list[Evolution]] = relationship(
        "Evolution",
        secondary=PokemonToEvolution.__table__,
        back_populates="participants",
        passive_deletes=True,
    )
    # Edges go with either endpoint; loaded ones are deleted here, the rest by the database.
    evolves_into: Mapped[list[Evolution]] = relationship(
        "Evolution",
        foreign_keys="Evolution.pokemon_from",
        back_populates="from_pokemon",
        cascade="all",
        passive_deletes=True,
    )
    evolves_from: Mapped[list[Evolution]] = relationship(
        "Evolution",
        foreign_keys="Evolution.pokemon_to",
        back_populates="to_pokemon",
        cascade="all",
        passive_deletes=True,
    )
    stats: Mapped[PokemonStats | None] = relationship(
        "PokemonStats", back_populates="pokemon", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )


class Ability(Base):
    """Maps to the 'ability' table."""

    __tablename__ = "ability"

    id: Mapped[int] = mapped_column("id", Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column("name", String(255), nullable=False)

    pokemons: Mapped[list[Pokemon]] = relationship(
        "Pokemon",
        secondary=PokemonToAbility.__table__,
        back_populates="abilities",
        passive_deletes=True,
    )


class Evolution(Base):
    """Directed edge between two species. A null target marks a terminal stage."""

    __tablename__ = "evolution"

    id: Mapped[int] = mapped_column("id", Integer, primary_key=True, autoincrement=True)
    pokemon_from: Mapped[int] = mapped_column("pokemonFrom", Integer, _cascade_fk("pokemon.entry"), nullable=False)
    pokemon_to: Mapped[int | None] = mapped_column("pokemonTo", Integer, _cascade_fk("pokemon.entry"), nullable=True)

    from_pokemon: Mapped[Pokemon] = relationship(
        "Pokemon", foreign_keys=[pokemon_from], back_populates="evolves_into"
    )
    to_pokemon: Mapped[Pokemon | None] = relationship(
        "Pokemon", foreign_keys=[pokemon_to], back_populates="evolves_from"
    )
    participants: Mapped[list[Pokemon]] = relationship(
        "Pokemon",
        secondary=PokemonToEvolution.__table__,
        back_populates="evolution_chains",
        passive_deletes=True,
    )


class PokemonStats(Base):
    """Base stat block, one per species."""

    __tablename__ = "pokemonStatus"

    pokemon_entry: Mapped[int] = mapped_column(
        "pokemonEntry", Integer, _cascade_fk("pokemon.entry"), primary_key=True, autoincrement=False
    )
    hp: Mapped[int] = mapped_column("hp", Integer, nullable=False)
    attack: Mapped[int] = mapped_column("attack", Integer, nullable=False)
    defense: Mapped[int] = mapped_column("defense", Integer, nullable=False)
    special_attack: Mapped[int] = mapped_column("specialAttack", Integer, nullable=False)
    special_defense: Mapped[int] = mapped_column("specialDefense", Integer, nullable=False)
    speed: Mapped[int] = mapped_column("speed", Integer, nullable=False)

    pokemon: Mapped[Pokemon] = relationship("Pokemon", back_populates="stats")

    @property
    def total(self) -> int:
        return (
            self.hp + self.attack + self.defense + self.special_attack + self.special_defense + self.speed
        )


# ---------------------------------------------------------------------------
# Player state
# ---------------------------------------------------------------------------


class RouletteLog(Base):
    """Append-only record of a roulette draw."""

    __tablename__ = "rouletteLogs"
    __table_args__ = (PrimaryKeyConstraint("userId", "pokemonName", "timeRolled", name="pk_rouletteLogs"),)

    user_id: Mapped[str] = mapped_column("userId", String(255), _cascade_fk("user.id"), nullable=False)
    pokemon_name: Mapped[str] = mapped_column("pokemonName", String(50), _cascade_fk("pokemon.name"), nullable=False)
    time_rolled: Mapped[datetime] = mapped_column(
        "timeRolled", DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    user: Mapped[User] = relationship("User", back_populates="roulette_logs")
    pokemon: Mapped[Pokemon] = relationship("Pokemon")


class InventoryPokemon(Base):
    """A player's owned instance of a catalog species."""

    __tablename__ = "inventoryPokemon"

    id: Mapped[str] = mapped_column("id", String(255), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column("userId", String(255), _cascade_fk("user.id"), nullable=False, index=True)
    pokemon_entry: Mapped[int] = mapped_column("pokemonEntry", Integer, _cascade_fk("pokemon.entry"), nullable=False)
    shiny: Mapped[bool] = mapped_column("shiny", Boolean, nullable=False)
    level: Mapped[int | None] = mapped_column("level", Integer, default=5, server_default="5")
    exp: Mapped[int | None] = mapped_column("exp", Integer, default=0, server_default="0")
    # Advisory: set while the instance sits in an expedition slot; no constraint enforces it.
    busy: Mapped[bool | None] = mapped_column("busy", Boolean, default=False, server_default=false())

    user: Mapped[User] = relationship("User", back_populates="inventory")
    pokemon: Mapped[Pokemon] = relationship("Pokemon")


class Expedition(Base):
    """An in-progress expedition occupying three inventory slots."""

    __tablename__ = "expedition"
    __table_args__ = (
        PrimaryKeyConstraint("userId", "slotOne", "slotTwo", "slotThree", name="pk_expedition"),
    )

    user_id: Mapped[str] = mapped_column("userId", String(255), _cascade_fk("user.id"), nullable=False)
    slot_one: Mapped[str] = mapped_column("slotOne", String(255), _cascade_fk("inventoryPokemon.id"), nullable=False)
    slot_two: Mapped[str] = mapped_column("slotTwo", String(255), _cascade_fk("inventoryPokemon.id"), nullable=False)
    slot_three: Mapped[str] = mapped_column(
        "slotThree", String(255), _cascade_fk("inventoryPokemon.id"), nullable=False
    )
    location: Mapped[int] = mapped_column("location", Integer, nullable=False)
    duration: Mapped[int] = mapped_column("duration", Integer, nullable=False)
    time_started: Mapped[datetime | None] = mapped_column(
        "timeStarted", DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    user: Mapped[User] = relationship("User", back_populates="expeditions")
    slot_one_pokemon: Mapped[InventoryPokemon] = relationship("InventoryPokemon", foreign_keys=[slot_one])
    slot_two_pokemon: Mapped[InventoryPokemon] = relationship("InventoryPokemon", foreign_keys=[slot_two])
    slot_three_pokemon: Mapped[InventoryPokemon] = relationship("InventoryPokemon", foreign_keys=[slot_three])

    @property
    def slots(self) -> tuple[str, str, str]:
        return (self.slot_one, self.slot_two, self.slot_three)
