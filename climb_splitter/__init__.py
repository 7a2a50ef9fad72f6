"""
climb-splitter — autosplitter for A Difficult Game About Climbing.

Reads the running game's memory, locates the player objects through
candidate pointer chains, and drives a run timer with start / split /
reset decisions.
"""

__version__ = "0.1.0"
