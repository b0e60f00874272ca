"""
Model enums.
"""
from enum import Enum


class PracticeMode(str, Enum):
    """Practice modes, fixed for the duration of a session."""
    FLASHCARD = "flashcard"
    MULTIPLE_CHOICE = "multipleChoice"
    CHAIN_REACTION = "chainReaction"
