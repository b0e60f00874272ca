"""
Practice session endpoints.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session
from dataclasses import asdict
import random
import logging

from app.core.database import get_session
from app.core.exceptions import ValidationError
from app.models.enums import PracticeMode
from app.schemas.practice import (
    StartPracticeRequest,
    FlashcardResultRequest,
    SelectAnswerRequest,
    ChainAnswerRequest,
    PracticeCardView,
    ChainLinkView,
    PracticeSessionResponse,
    AnswerResultResponse,
)
from app.services import card_service
from app.services.practice_service import (
    PracticeCard,
    PracticeEngine,
    PracticeSession,
    AnswerOutcome,
    session_store,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/practice", tags=["practice"])

_rng = random.Random()


def get_rng() -> random.Random:
    """Dependency for the random source used to draw options and chains."""
    return _rng


def get_engine(
    session: Session = Depends(get_session),
    rng: random.Random = Depends(get_rng)
) -> PracticeEngine:
    """Dependency for a practice engine that writes events through the request's session."""
    def recorder(event):
        card_service.record_practice_event(session, **asdict(event))

    return PracticeEngine(recorder=recorder, rng=rng)


def build_session_response(practice_session: PracticeSession) -> PracticeSessionResponse:
    card = practice_session.current_card
    current_card = None
    if card is not None and practice_session.practice_mode != PracticeMode.CHAIN_REACTION:
        current_card = PracticeCardView(
            card_id=card.card_id,
            text=card.text,
            translation=card.translation_text if practice_session.is_flipped else None,
        )

    chain = [
        ChainLinkView(
            question=link.question,
            answer=link.answer if link.answered else None,
            user_answer=link.user_answer,
            is_correct=link.is_correct if link.answered else None,
        )
        for link in practice_session.chain
    ]

    return PracticeSessionResponse(
        session_id=practice_session.session_id,
        practice_mode=practice_session.practice_mode,
        language_id=practice_session.language_id,
        card_count=len(practice_session.cards),
        current_index=practice_session.current_index,
        current_card=current_card,
        is_flipped=practice_session.is_flipped,
        is_answer_revealed=practice_session.is_answer_revealed,
        options=practice_session.options,
        selected_answer=practice_session.selected_answer,
        is_answer_checked=practice_session.is_answer_checked,
        chain=chain,
        chain_index=practice_session.chain_index,
        is_chain_complete=practice_session.is_chain_complete,
        correct_count=practice_session.correct_count if practice_session.is_chain_complete else None,
    )


def _answer_response(outcome: AnswerOutcome, practice_session: PracticeSession) -> AnswerResultResponse:
    return AnswerResultResponse(
        correct=outcome.correct,
        correct_answer=outcome.correct_answer,
        submitted_answer=outcome.submitted_answer,
        event_saved=outcome.event_saved,
        session=build_session_response(practice_session),
    )


@router.post("/sessions", response_model=PracticeSessionResponse, status_code=status.HTTP_201_CREATED)
async def start_practice(
    request: StartPracticeRequest,
    session: Session = Depends(get_session),
    engine: PracticeEngine = Depends(get_engine)
):
    """
    Start a practice session.

    Cards come from the selected card sets and must have a translation in the
    selected language. Multiple Choice needs at least 4 cards, Chain Reaction
    at least 5. Nothing is persisted when the session cannot start.
    """
    if not request.card_set_ids:
        raise ValidationError("Select at least one card set")

    rows = card_service.fetch_practice_cards(session, request.language_id, request.card_set_ids)
    cards = [
        PracticeCard(
            card_id=card.id,
            text=card.text,
            translation_id=translations[0].id,
            translation_text=translations[0].text,
            language_id=translations[0].language_id,
        )
        for card, translations in rows
    ]

    practice_session = engine.start(request.practice_mode, request.language_id, cards)
    session_store.add(practice_session)
    return build_session_response(practice_session)


@router.get("/sessions/{session_id}", response_model=PracticeSessionResponse)
async def get_practice_session(session_id: str):
    """Get the current state of a practice session."""
    return build_session_response(session_store.get(session_id))


@router.post("/sessions/{session_id}/flip", response_model=PracticeSessionResponse)
async def flip_card(
    session_id: str,
    engine: PracticeEngine = Depends(get_engine)
):
    """Flashcard: turn the current card over."""
    practice_session = engine.flip(session_store.get(session_id))
    return build_session_response(practice_session)


@router.post("/sessions/{session_id}/flashcard-result", response_model=AnswerResultResponse)
async def flashcard_result(
    session_id: str,
    request: FlashcardResultRequest,
    engine: PracticeEngine = Depends(get_engine)
):
    """Flashcard: record whether the user knew the card and move to the next one."""
    practice_session = session_store.get(session_id)
    outcome = engine.record_flashcard_result(practice_session, request.knew_it)
    return _answer_response(outcome, practice_session)


@router.post("/sessions/{session_id}/select", response_model=PracticeSessionResponse)
async def select_answer(
    session_id: str,
    request: SelectAnswerRequest,
    engine: PracticeEngine = Depends(get_engine)
):
    """Multiple choice: select an option."""
    practice_session = engine.select_answer(session_store.get(session_id), request.answer)
    return build_session_response(practice_session)


@router.post("/sessions/{session_id}/check", response_model=AnswerResultResponse)
async def check_answer(
    session_id: str,
    engine: PracticeEngine = Depends(get_engine)
):
    """Multiple choice: lock the selected option and record whether it is correct."""
    practice_session = session_store.get(session_id)
    outcome = engine.check_answer(practice_session)
    return _answer_response(outcome, practice_session)


@router.post("/sessions/{session_id}/next", response_model=PracticeSessionResponse)
async def next_card(
    session_id: str,
    engine: PracticeEngine = Depends(get_engine)
):
    """Flashcard / multiple choice: move to the next card."""
    practice_session = engine.next_card(session_store.get(session_id))
    return build_session_response(practice_session)


@router.post("/sessions/{session_id}/chain-answer", response_model=AnswerResultResponse)
async def chain_answer(
    session_id: str,
    request: ChainAnswerRequest,
    engine: PracticeEngine = Depends(get_engine)
):
    """Chain reaction: submit the answer for the current link."""
    practice_session = session_store.get(session_id)
    outcome = engine.submit_chain_answer(practice_session, request.answer)
    return _answer_response(outcome, practice_session)


@router.post("/sessions/{session_id}/chain-restart", response_model=PracticeSessionResponse)
async def chain_restart(
    session_id: str,
    engine: PracticeEngine = Depends(get_engine)
):
    """Chain reaction: draw a brand-new chain."""
    practice_session = engine.start_chain(session_store.get(session_id))
    return build_session_response(practice_session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def end_practice(session_id: str):
    """End a practice session. Unsaved chain progress is discarded."""
    session_store.remove(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
