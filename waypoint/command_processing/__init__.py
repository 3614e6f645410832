"""Command validation + dispatch.

Keyboard input and on-screen buttons flow through the same pipeline so an
ignored command looks the same in the logs regardless of where it came from.
"""
