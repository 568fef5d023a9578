"""Starter catalog seed data: Kanto starters, Pikachu line and the two psychic legends."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pokeroll.catalog.service import add_evolution, add_pokemon
from pokeroll.db.models import Evolution, Pokemon

logger = logging.getLogger(__name__)

ICON_URL = "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/{entry}.png"


def _stats(hp: int, attack: int, defense: int, sp_atk: int, sp_def: int, speed: int) -> dict[str, int]:
    return {
        "hp": hp,
        "attack": attack,
        "defense": defense,
        "special_attack": sp_atk,
        "special_defense": sp_def,
        "speed": speed,
    }


POKEMON_SEED_DATA: list[dict] = [
    # Grass starter line
    {"entry": 1, "name": "Bulbasaur", "type": "Grass", "rarity": "uncommon",
     "stats": _stats(45, 49, 49, 65, 65, 45), "abilities": ["Overgrow", "Chlorophyll"]},
    {"entry": 2, "name": "Ivysaur", "type": "Grass", "rarity": "rare",
     "stats": _stats(60, 62, 63, 80, 80, 60), "abilities": ["Overgrow", "Chlorophyll"]},
    {"entry": 3, "name": "Venusaur", "type": "Grass", "rarity": "epic",
     "stats": _stats(80, 82, 83, 100, 100, 80), "abilities": ["Overgrow", "Chlorophyll"]},
    # Fire starter line
    {"entry": 4, "name": "Charmander", "type": "Fire", "rarity": "uncommon",
     "stats": _stats(39, 52, 43, 60, 50, 65), "abilities": ["Blaze", "Solar Power"]},
    {"entry": 5, "name": "Charmeleon", "type": "Fire", "rarity": "rare",
     "stats": _stats(58, 64, 58, 80, 65, 80), "abilities": ["Blaze", "Solar Power"]},
    {"entry": 6, "name": "Charizard", "type": "Fire", "rarity": "epic",
     "stats": _stats(78, 84, 78, 109, 85, 100), "abilities": ["Blaze", "Solar Power"]},
    # Water starter line
    {"entry": 7, "name": "Squirtle", "type": "Water", "rarity": "uncommon",
     "stats": _stats(44, 48, 65, 50, 64, 43), "abilities": ["Torrent", "Rain Dish"]},
    {"entry": 8, "name": "Wartortle", "type": "Water", "rarity": "rare",
     "stats": _stats(59, 63, 80, 65, 80, 58), "abilities": ["Torrent", "Rain Dish"]},
    {"entry": 9, "name": "Blastoise", "type": "Water", "rarity": "epic",
     "stats": _stats(79, 83, 100, 85, 105, 78), "abilities": ["Torrent", "Rain Dish"]},
    # Common fodder
    {"entry": 16, "name": "Pidgey", "type": "Flying", "rarity": "common",
     "stats": _stats(40, 45, 40, 35, 35, 56), "abilities": ["Keen Eye", "Tangled Feet"]},
    {"entry": 19, "name": "Rattata", "type": "Normal", "rarity": "common",
     "stats": _stats(30, 56, 35, 25, 35, 72), "abilities": ["Run Away", "Guts"]},
    # Electric line
    {"entry": 25, "name": "Pikachu", "type": "Electric", "rarity": "rare",
     "stats": _stats(35, 55, 40, 50, 50, 90), "abilities": ["Static", "Lightning Rod"]},
    {"entry": 26, "name": "Raichu", "type": "Electric", "rarity": "epic",
     "stats": _stats(60, 90, 55, 90, 80, 110), "abilities": ["Static", "Lightning Rod"]},
    # Legends
    {"entry": 150, "name": "Mewtwo", "type": "Psychic", "rarity": "legendary",
     "stats": _stats(106, 110, 90, 154, 90, 130), "abilities": ["Pressure", "Unnerve"]},
    {"entry": 151, "name": "Mew", "type": "Psychic", "rarity": "mythic",
     "stats": _stats(100, 100, 100, 100, 100, 100), "abilities": ["Synchronize"]},
]

# (from, to); a None target marks the last stage of a line.
EVOLUTION_SEED_DATA: list[tuple[int, int | None]] = [
    (1, 2), (2, 3), (3, None),
    (4, 5), (5, 6), (6, None),
    (7, 8), (8, 9), (9, None),
    (25, 26), (26, None),
]


async def seed_catalog(db: AsyncSession) -> int:
    """Insert any missing starter species and evolution edges. Returns species added."""
    result = await db.execute(select(Pokemon.entry))
    existing = set(result.scalars().all())

    added = 0
    for data in POKEMON_SEED_DATA:
        if data["entry"] in existing:
            continue
        await add_pokemon(db, icon=ICON_URL.format(entry=data["entry"]), **data)
        added += 1

    result = await db.execute(select(Evolution.pokemon_from, Evolution.pokemon_to))
    existing_edges = {(row[0], row[1]) for row in result.all()}
    for pokemon_from, pokemon_to in EVOLUTION_SEED_DATA:
        if (pokemon_from, pokemon_to) not in existing_edges:
            await add_evolution(db, pokemon_from, pokemon_to)

    await db.commit()
    logger.info("Seeded %d catalog species (%d already present)", added, len(existing))
    return added
