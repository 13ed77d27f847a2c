"""Sokoban solver building blocks: boards, levels, holes, assignments, push graphs, hotspots, parking plans and heuristics."""

__version__ = "0.1.0"

__all__ = [
    "board",
    "levels",
    "holes",
    "hungarian",
    "match_distance",
    "graph",
    "hotspot",
    "park_order",
    "heuristics",
]