"""Pokemon roulette and expedition game: persistence layer and catalog API."""

__version__ = "0.1.0"
