"""
Dota 2 cosmetic item icon sync.

Keeps an object store of "{item id}.jpg" icons in sync with the game's
items_game.vdf schema, and keeps the stored schema itself up to date.
"""

__version__ = "1.0.0"
