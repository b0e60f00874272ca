"""
Practice session engine.

A session is created from a language and a selection of card sets and keeps
its whole state in memory. Three modes are supported, fixed for the session:

- flashcard: flip to reveal the first translation, then self-report
  "knew it" / "didn't know it"; cards cycle forever.
- multipleChoice: the correct translation plus three distractors taken from
  other cards, shuffled; checking is case-sensitive; cards cycle forever.
- chainReaction: five cards drawn at random; the first link is answered for
  the user, the other four are typed; comparison ignores case and
  surrounding whitespace; the session ends after the fifth link.

Every answer is written to the practice log through a recorder callback.
"""
import logging
import random
import threading
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from app.core.exceptions import ValidationError, ConflictError, NotFoundError
from app.models.enums import PracticeMode

logger = logging.getLogger(__name__)


MIN_CARDS = {
    PracticeMode.FLASHCARD: 1,
    PracticeMode.MULTIPLE_CHOICE: 4,
    PracticeMode.CHAIN_REACTION: 5,
}
MODE_LABELS = {
    PracticeMode.FLASHCARD: "Flashcard",
    PracticeMode.MULTIPLE_CHOICE: "Multiple Choice",
    PracticeMode.CHAIN_REACTION: "Chain Reaction",
}
CHAIN_LENGTH = 5
DISTRACTOR_COUNT = 3


@dataclass(frozen=True)
class PracticeCard:
    """A card as practiced: its text and the first translation in the practice language."""
    card_id: int
    text: str
    translation_id: int
    translation_text: str
    language_id: int


@dataclass
class ChainLink:
    card: PracticeCard
    question: str
    answer: str
    user_answer: str = ""
    answered: bool = False

    @property
    def is_correct(self) -> bool:
        return answers_match(self.user_answer, self.answer)


@dataclass
class PracticeEvent:
    """An answer outcome handed to the recorder."""
    card_id: int
    translation_id: int
    language_id: int
    result: bool
    practice_mode: str


@dataclass
class PracticeSession:
    """All state of one practice session. Mutated only through PracticeEngine."""
    session_id: str
    practice_mode: PracticeMode
    language_id: int
    cards: List[PracticeCard]
    current_index: int = 0
    is_flipped: bool = False
    is_answer_revealed: bool = False
    options: List[str] = field(default_factory=list)
    selected_answer: Optional[str] = None
    is_answer_checked: bool = False
    chain: List[ChainLink] = field(default_factory=list)
    chain_index: int = 0
    is_chain_complete: bool = False

    @property
    def current_card(self) -> Optional[PracticeCard]:
        if not self.cards:
            return None
        return self.cards[self.current_index]

    @property
    def correct_count(self) -> int:
        return sum(1 for link in self.chain if link.is_correct)


@dataclass
class AnswerOutcome:
    correct: bool
    correct_answer: str
    submitted_answer: Optional[str]
    event_saved: bool


EventRecorder = Callable[[PracticeEvent], None]


def answers_match(user_answer: str, expected: str) -> bool:
    """Free-text comparison used by chain reaction: trimmed and case-insensitive."""
    return user_answer.strip().lower() == expected.strip().lower()


def validate_card_count(practice_mode: PracticeMode, card_count: int) -> None:
    """
    Check that enough cards are available for the mode.

    Raises:
        ValidationError: If there are no cards or fewer than the mode requires
    """
    if card_count == 0:
        raise ValidationError("No cards available for the selected sets.")
    minimum = MIN_CARDS[practice_mode]
    if card_count < minimum:
        raise ValidationError(
            f"At least {minimum} cards are needed for {MODE_LABELS[practice_mode]} mode."
        )


class PracticeEngine:
    """Drives practice sessions. All randomness comes from the injected rng."""

    def __init__(self, recorder: EventRecorder, rng: Optional[random.Random] = None):
        self.recorder = recorder
        self.rng = rng or random.Random()

    # -- setup --------------------------------------------------------------

    def start(
        self,
        practice_mode: PracticeMode,
        language_id: int,
        cards: Sequence[PracticeCard],
        session_id: Optional[str] = None
    ) -> PracticeSession:
        validate_card_count(practice_mode, len(cards))

        session = PracticeSession(
            session_id=session_id or str(uuid.uuid4()),
            practice_mode=practice_mode,
            language_id=language_id,
            cards=list(cards),
        )
        if practice_mode == PracticeMode.MULTIPLE_CHOICE:
            self.generate_options(session)
        elif practice_mode == PracticeMode.CHAIN_REACTION:
            self.start_chain(session)

        logger.info(
            f"Started {practice_mode.value} session {session.session_id} "
            f"with {len(session.cards)} card(s) in language {language_id}"
        )
        return session

    # -- shared -------------------------------------------------------------

    def _require_mode(self, session: PracticeSession, practice_mode: PracticeMode) -> None:
        if session.practice_mode != practice_mode:
            raise ConflictError(
                f"Action not available in {session.practice_mode.value} mode"
            )

    def _record(self, session: PracticeSession, card: PracticeCard, result: bool) -> bool:
        event = PracticeEvent(
            card_id=card.card_id,
            translation_id=card.translation_id,
            language_id=card.language_id,
            result=result,
            practice_mode=session.practice_mode.value,
        )
        try:
            self.recorder(event)
        except Exception as e:
            # The answer still counts for the session; only the log write is lost
            logger.error(f"Error saving practice result for card {card.card_id}: {str(e)}")
            return False
        return True

    def next_card(self, session: PracticeSession) -> PracticeSession:
        """Advance to the next card (wrapping around) and reset per-card state."""
        if session.practice_mode == PracticeMode.CHAIN_REACTION:
            raise ConflictError("Chain reaction advances by answering")

        session.current_index = (session.current_index + 1) % len(session.cards)
        session.is_flipped = False
        session.is_answer_revealed = False
        session.selected_answer = None
        session.is_answer_checked = False
        if session.practice_mode == PracticeMode.MULTIPLE_CHOICE:
            self.generate_options(session)
        return session

    # -- flashcard ----------------------------------------------------------

    def flip(self, session: PracticeSession) -> PracticeSession:
        self._require_mode(session, PracticeMode.FLASHCARD)
        session.is_flipped = not session.is_flipped
        if session.is_flipped:
            session.is_answer_revealed = True
        return session

    def record_flashcard_result(self, session: PracticeSession, knew_it: bool) -> AnswerOutcome:
        self._require_mode(session, PracticeMode.FLASHCARD)
        if not session.is_answer_revealed:
            raise ConflictError("Flip the card before reporting the result")

        card = session.current_card
        saved = self._record(session, card, knew_it)
        self.next_card(session)
        return AnswerOutcome(
            correct=knew_it,
            correct_answer=card.translation_text,
            submitted_answer=None,
            event_saved=saved,
        )

    # -- multiple choice ----------------------------------------------------

    def generate_options(self, session: PracticeSession) -> List[str]:
        """
        Build the option list for the current card: its translation plus the
        translations of three other randomly chosen cards, shuffled.
        """
        if len(session.cards) < MIN_CARDS[PracticeMode.MULTIPLE_CHOICE]:
            raise ValidationError(
                f"At least {MIN_CARDS[PracticeMode.MULTIPLE_CHOICE]} cards are needed for Multiple Choice mode."
            )

        current = session.current_card
        others = [card for index, card in enumerate(session.cards) if index != session.current_index]
        distractors = [card.translation_text for card in self.rng.sample(others, DISTRACTOR_COUNT)]

        options = [current.translation_text] + distractors
        self.rng.shuffle(options)
        session.options = options
        return options

    def select_answer(self, session: PracticeSession, answer: str) -> PracticeSession:
        self._require_mode(session, PracticeMode.MULTIPLE_CHOICE)
        if session.is_answer_checked:
            raise ConflictError("Answer already checked")
        if answer not in session.options:
            raise ValidationError(f"'{answer}' is not one of the options")
        session.selected_answer = answer
        return session

    def check_answer(self, session: PracticeSession) -> AnswerOutcome:
        self._require_mode(session, PracticeMode.MULTIPLE_CHOICE)
        if session.is_answer_checked:
            raise ConflictError("Answer already checked")
        if session.selected_answer is None:
            raise ValidationError("Select an answer before checking")

        card = session.current_card
        session.is_answer_checked = True
        correct = session.selected_answer == card.translation_text
        saved = self._record(session, card, correct)
        return AnswerOutcome(
            correct=correct,
            correct_answer=card.translation_text,
            submitted_answer=session.selected_answer,
            event_saved=saved,
        )

    # -- chain reaction -----------------------------------------------------

    def start_chain(self, session: PracticeSession) -> PracticeSession:
        """Draw a new chain of five distinct cards; the first link comes pre-answered."""
        self._require_mode(session, PracticeMode.CHAIN_REACTION)
        validate_card_count(PracticeMode.CHAIN_REACTION, len(session.cards))

        drawn = self.rng.sample(session.cards, CHAIN_LENGTH)
        session.chain = [
            ChainLink(
                card=card,
                question=card.text,
                answer=card.translation_text,
                user_answer=card.translation_text if index == 0 else "",
                answered=index == 0,
            )
            for index, card in enumerate(drawn)
        ]
        session.chain_index = 1
        session.is_chain_complete = False
        return session

    def submit_chain_answer(self, session: PracticeSession, answer: str) -> AnswerOutcome:
        self._require_mode(session, PracticeMode.CHAIN_REACTION)
        if session.is_chain_complete or session.chain_index >= len(session.chain):
            raise ConflictError("Chain is complete; restart to play again")

        link = session.chain[session.chain_index]
        link.user_answer = answer
        link.answered = True
        correct = answers_match(answer, link.answer)
        saved = self._record(session, link.card, correct)

        if session.chain_index == len(session.chain) - 1:
            session.is_chain_complete = True
            logger.info(
                f"Chain complete in session {session.session_id}: "
                f"{session.correct_count}/{len(session.chain)} correct"
            )
        else:
            session.chain_index += 1

        return AnswerOutcome(
            correct=correct,
            correct_answer=link.answer,
            submitted_answer=answer,
            event_saved=saved,
        )


class PracticeSessionStore:
    """Process-local registry of active practice sessions."""

    def __init__(self):
        self._sessions: Dict[str, PracticeSession] = {}
        self._lock = threading.Lock()

    def add(self, session: PracticeSession) -> None:
        with self._lock:
            self._sessions[session.session_id] = session

    def get(self, session_id: str) -> PracticeSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"Practice session {session_id} not found")
        return session

    def remove(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise NotFoundError(f"Practice session {session_id} not found")

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


# Create a singleton instance
session_store = PracticeSessionStore()
