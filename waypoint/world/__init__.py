"""Immutable world catalog: locations, characters and the player record."""
