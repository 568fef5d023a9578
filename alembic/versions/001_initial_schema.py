"""Initial schema: auth adapter, currency, catalog and player state tables.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

USER_ROLE = sa.Enum("user", "admin", name="user_role")
POKEMON_TYPE = sa.Enum(
    "Normal", "Fire", "Water", "Grass", "Flying", "Fighting", "Poison", "Electric", "Ground",
    "Rock", "Psychic", "Ice", "Bug", "Ghost", "Steel", "Dragon", "Dark", "Fairy",
    name="pokemon_type",
)
POKEMON_RARITY = sa.Enum("common", "uncommon", "rare", "epic", "legendary", "mythic", name="pokemon_rarity")


def _fk(table: str, column: str, target: str) -> sa.ForeignKey:
    """Cascading foreign key named the way the model metadata names it."""
    referred = target.split(".")[0]
    return sa.ForeignKey(target, name=f"fk_{table}_{column}_{referred}", ondelete="CASCADE")


def upgrade() -> None:
    """Create all tables."""
    # --- Identity & auth ---
    op.create_table(
        "user",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("emailVerified", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("image", sa.String(255), nullable=True),
        sa.Column("role", USER_ROLE, server_default="user", nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_user"),
    )
    op.create_table(
        "account",
        sa.Column("userId", sa.String(255), _fk("account", "userId", "user.id"), nullable=False),
        sa.Column("type", sa.String(255), nullable=False),
        sa.Column("provider", sa.String(255), nullable=False),
        sa.Column("providerAccountId", sa.String(255), nullable=False),
        sa.Column("refresh_token", sa.String(255), nullable=True),
        sa.Column("access_token", sa.String(255), nullable=True),
        sa.Column("expires_at", sa.Integer(), nullable=True),
        sa.Column("token_type", sa.String(255), nullable=True),
        sa.Column("scope", sa.String(255), nullable=True),
        sa.Column("id_token", sa.String(2048), nullable=True),
        sa.Column("session_state", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("provider", "providerAccountId", name="pk_account"),
    )
    op.create_table(
        "session",
        sa.Column("sessionToken", sa.String(255), nullable=False),
        sa.Column("userId", sa.String(255), _fk("session", "userId", "user.id"), nullable=False),
        sa.Column("expires", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("sessionToken", name="pk_session"),
    )
    op.create_table(
        "verificationToken",
        sa.Column("identifier", sa.String(255), nullable=False),
        sa.Column("token", sa.String(255), nullable=False),
        sa.Column("expires", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("identifier", "token", name="pk_verificationToken"),
    )

    # --- Economy ---
    op.create_table(
        "currency",
        sa.Column("userId", sa.String(255), _fk("currency", "userId", "user.id"), nullable=False),
        sa.Column("cash", sa.Double(), server_default="0", nullable=True),
        sa.Column("dust", sa.Double(), server_default="0", nullable=True),
        sa.Column("numExpeditionsRemaining", sa.Integer(), server_default="3", nullable=True),
        sa.PrimaryKeyConstraint("userId", name="pk_currency"),
    )

    # --- Catalog ---
    op.create_table(
        "pokemon",
        sa.Column("entry", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("type", POKEMON_TYPE, nullable=False),
        sa.Column("icon", sa.String(1000), nullable=False),
        sa.Column("rarity", POKEMON_RARITY, nullable=False),
        sa.PrimaryKeyConstraint("entry", name="pk_pokemon"),
        sa.UniqueConstraint("name", name="uq_pokemon_name"),
    )
    op.create_table(
        "ability",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_ability"),
    )
    op.create_table(
        "pokemonToAbility",
        sa.Column(
            "pokemonEntry",
            sa.Integer(),
            _fk("pokemonToAbility", "pokemonEntry", "pokemon.entry"),
            nullable=False,
        ),
        sa.Column("abilityId", sa.Integer(), _fk("pokemonToAbility", "abilityId", "ability.id"), nullable=False),
        sa.PrimaryKeyConstraint("pokemonEntry", "abilityId", name="pk_pokemonToAbility"),
    )
    op.create_table(
        "evolution",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("pokemonFrom", sa.Integer(), _fk("evolution", "pokemonFrom", "pokemon.entry"), nullable=False),
        sa.Column("pokemonTo", sa.Integer(), _fk("evolution", "pokemonTo", "pokemon.entry"), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_evolution"),
    )
    op.create_table(
        "pokemonToEvolution",
        sa.Column(
            "pokemonEntry",
            sa.Integer(),
            _fk("pokemonToEvolution", "pokemonEntry", "pokemon.entry"),
            nullable=False,
        ),
        sa.Column(
            "evolutionId",
            sa.Integer(),
            _fk("pokemonToEvolution", "evolutionId", "evolution.id"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("pokemonEntry", "evolutionId", name="pk_pokemonToEvolution"),
    )
    op.create_table(
        "pokemonStatus",
        sa.Column(
            "pokemonEntry",
            sa.Integer(),
            _fk("pokemonStatus", "pokemonEntry", "pokemon.entry"),
            autoincrement=False,
            nullable=False,
        ),
        sa.Column("hp", sa.Integer(), nullable=False),
        sa.Column("attack", sa.Integer(), nullable=False),
        sa.Column("defense", sa.Integer(), nullable=False),
        sa.Column("specialAttack", sa.Integer(), nullable=False),
        sa.Column("specialDefense", sa.Integer(), nullable=False),
        sa.Column("speed", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("pokemonEntry", name="pk_pokemonStatus"),
    )

    # --- Player state ---
    op.create_table(
        "rouletteLogs",
        sa.Column("userId", sa.String(255), _fk("rouletteLogs", "userId", "user.id"), nullable=False),
        sa.Column("pokemonName", sa.String(50), _fk("rouletteLogs", "pokemonName", "pokemon.name"), nullable=False),
        sa.Column("timeRolled", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("userId", "pokemonName", "timeRolled", name="pk_rouletteLogs"),
    )
    op.create_table(
        "inventoryPokemon",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("userId", sa.String(255), _fk("inventoryPokemon", "userId", "user.id"), nullable=False),
        sa.Column(
            "pokemonEntry",
            sa.Integer(),
            _fk("inventoryPokemon", "pokemonEntry", "pokemon.entry"),
            nullable=False,
        ),
        sa.Column("shiny", sa.Boolean(), nullable=False),
        sa.Column("level", sa.Integer(), server_default="5", nullable=True),
        sa.Column("exp", sa.Integer(), server_default="0", nullable=True),
        sa.Column("busy", sa.Boolean(), server_default=sa.false(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_inventoryPokemon"),
    )
    op.create_index("ix_inventoryPokemon_userId", "inventoryPokemon", ["userId"])
    op.create_table(
        "expedition",
        sa.Column("userId", sa.String(255), _fk("expedition", "userId", "user.id"), nullable=False),
        sa.Column("slotOne", sa.String(255), _fk("expedition", "slotOne", "inventoryPokemon.id"), nullable=False),
        sa.Column("slotTwo", sa.String(255), _fk("expedition", "slotTwo", "inventoryPokemon.id"), nullable=False),
        sa.Column("slotThree", sa.String(255), _fk("expedition", "slotThree", "inventoryPokemon.id"), nullable=False),
        sa.Column("location", sa.Integer(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("timeStarted", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("userId", "slotOne", "slotTwo", "slotThree", name="pk_expedition"),
    )


def downgrade() -> None:
    """Drop all tables (children first) and the enum types."""
    op.drop_table("expedition")
    op.drop_index("ix_inventoryPokemon_userId", table_name="inventoryPokemon")
    op.drop_table("inventoryPokemon")
    op.drop_table("rouletteLogs")
    op.drop_table("pokemonStatus")
    op.drop_table("pokemonToEvolution")
    op.drop_table("evolution")
    op.drop_table("pokemonToAbility")
    op.drop_table("ability")
    op.drop_table("pokemon")
    op.drop_table("currency")
    op.drop_table("verificationToken")
    op.drop_table("session")
    op.drop_table("account")
    op.drop_table("user")

    bind = op.get_bind()
    POKEMON_RARITY.drop(bind, checkfirst=True)
    POKEMON_TYPE.drop(bind, checkfirst=True)
    USER_ROLE.drop(bind, checkfirst=True)
