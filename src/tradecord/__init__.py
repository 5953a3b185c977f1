"""TradeCord: stateful engine for a persistent catch, breed, and level game."""

__version__ = "0.1.0"
