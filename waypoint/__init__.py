"""Waypoint: grid exploration and NPC dialogue controller."""

__version__ = "0.1.0"
