"""
Practice session schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from app.models.enums import PracticeMode


class StartPracticeRequest(BaseModel):
    """Setup choices: practice language, card sets and mode."""
    language_id: int = Field(..., description="Language the translations are practiced in")
    card_set_ids: List[int] = Field(..., description="Card sets to draw cards from")
    practice_mode: PracticeMode = PracticeMode.FLASHCARD


class FlashcardResultRequest(BaseModel):
    knew_it: bool


class SelectAnswerRequest(BaseModel):
    answer: str


class ChainAnswerRequest(BaseModel):
    answer: str


class PracticeCardView(BaseModel):
    card_id: int
    text: str
    translation: Optional[str] = None  # Only present once the card is flipped


class ChainLinkView(BaseModel):
    question: str
    answer: Optional[str] = None  # Hidden until the link is answered
    user_answer: str = ""
    is_correct: Optional[bool] = None


class PracticeSessionResponse(BaseModel):
    """Snapshot of a practice session's state."""
    session_id: str
    practice_mode: PracticeMode
    language_id: int
    card_count: int
    current_index: int
    current_card: Optional[PracticeCardView] = None
    is_flipped: bool = False
    is_answer_revealed: bool = False
    options: List[str] = []
    selected_answer: Optional[str] = None
    is_answer_checked: bool = False
    chain: List[ChainLinkView] = []
    chain_index: int = 0
    is_chain_complete: bool = False
    correct_count: Optional[int] = None


class AnswerResultResponse(BaseModel):
    """Outcome of one answer submission."""
    correct: bool
    correct_answer: str
    submitted_answer: Optional[str] = None
    event_saved: bool
    session: PracticeSessionResponse
