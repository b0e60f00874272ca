"""
Models package - imports all models so they are registered with SQLModel.
"""
# Import enums first
from app.models.enums import PracticeMode

# Import all models
from app.models.language import Language
from app.models.card_set import CardSet
from app.models.card import Card
from app.models.translation import Translation
from app.models.example import Example
from app.models.practice import PracticeStat

__all__ = [
    'PracticeMode',
    'Language',
    'CardSet',
    'Card',
    'Translation',
    'Example',
    'PracticeStat',
]
