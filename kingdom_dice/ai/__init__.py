"""
Kingdom Dice AI.

Decision policy for computer-controlled players.
"""

from kingdom_dice.ai.policy import AIAction, AIDecision, AIPolicy

__all__ = ["AIAction", "AIDecision", "AIPolicy"]
