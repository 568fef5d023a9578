"""Pydantic schemas for catalog API responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from pokeroll.db.enums import PokemonType, Rarity


class AbilityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class StatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    hp: int
    attack: int
    defense: int
    special_attack: int
    special_defense: int
    speed: int
    total: int


class PokemonResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    entry: int
    name: str
    type: PokemonType
    icon: str
    rarity: Rarity
    abilities: list[AbilityResponse]
    stats: StatsResponse | None = None


class PokemonListResponse(BaseModel):
    pokemon: list[PokemonResponse]
    total: int


class EvolutionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    pokemon_from: int
    pokemon_to: int | None  # None: final stage
