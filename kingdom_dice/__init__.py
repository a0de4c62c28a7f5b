"""
Kingdom Dice.

Rules engine for a Farkle-style dice game: scoring, turn flow and AI
opponents.
"""

__version__ = "0.1.0"
