"""
Card repository service.

CRUD over card sets, cards, translations and examples, plus the append-only
practice event log. Every multi-row write runs in a single transaction: child
ids come from session.flush(), one commit ends the operation and any failure
rolls the whole operation back.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
import logging
from typing import Dict, List, Optional, Sequence, Tuple
from sqlmodel import Session, select
from sqlalchemy import func

from app.core.exceptions import (
    ValidationError,
    NotFoundError,
    PersistenceError,
)
from app.models.models import CardSet, Card, Translation, Example, Language, PracticeStat
from app.schemas.card import TranslationPayload, ExamplePayload, CardResponse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Languages
# ---------------------------------------------------------------------------

def list_languages(session: Session) -> List[Language]:
    """Get all languages sorted by name."""
    return list(session.exec(select(Language).order_by(Language.name)).all())


def _validate_language_ids(session: Session, language_ids: Sequence[int]) -> None:
    if not language_ids:
        return
    found = session.exec(
        select(Language.id).where(Language.id.in_(set(language_ids)))
    ).all()
    missing = set(language_ids) - set(found)
    if missing:
        raise ValidationError(
            f"Invalid language ids: {', '.join(str(i) for i in sorted(missing))}"
        )


def _validate_translations(session: Session, translations: Sequence[TranslationPayload]) -> None:
    for translation in translations:
        if not translation.text or not translation.text.strip():
            raise ValidationError("Translation text cannot be empty")
    _validate_language_ids(session, [t.language_id for t in translations])


def _clean_examples(examples: Sequence[ExamplePayload]) -> List[ExamplePayload]:
    # Half-filled example rows are dropped, not rejected
    return [ex for ex in examples if ex.text.strip() and ex.translation.strip()]


# ---------------------------------------------------------------------------
# Card sets
# ---------------------------------------------------------------------------

def get_card_set(session: Session, card_set_id: int) -> CardSet:
    card_set = session.get(CardSet, card_set_id)
    if not card_set:
        raise NotFoundError(f"Card set with id {card_set_id} not found")
    return card_set


def count_cards_by_set(session: Session) -> Dict[int, int]:
    rows = session.exec(
        select(Card.card_set_id, func.count(Card.id)).group_by(Card.card_set_id)
    ).all()
    return {card_set_id: count for card_set_id, count in rows}


def list_card_sets(session: Session, language_id: Optional[int] = None) -> List[Tuple[CardSet, int]]:
    """
    Get card sets with their card counts.

    Args:
        session: Database session
        language_id: If given, only card sets containing at least one card
                     with a translation in this language are returned

    Returns:
        List of (card_set, cards_count) tuples sorted by name
    """
    query = select(CardSet)
    if language_id is not None:
        sets_with_language = (
            select(Card.card_set_id)
            .join(Translation, Translation.card_id == Card.id)
            .where(Translation.language_id == language_id)
        )
        query = query.where(CardSet.id.in_(sets_with_language))
    card_sets = session.exec(query.order_by(CardSet.name)).all()

    counts = count_cards_by_set(session)
    return [(card_set, counts.get(card_set.id, 0)) for card_set in card_sets]


def create_card_set(session: Session, name: str, description: Optional[str] = None) -> CardSet:
    if not name or not name.strip():
        raise ValidationError("Card set name cannot be empty")

    card_set = CardSet(
        name=name.strip(),
        description=description.strip() if description and description.strip() else None
    )
    session.add(card_set)
    try:
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Error creating card set '{name}': {str(e)}")
        raise PersistenceError(f"Failed to create card set: {str(e)}") from e
    session.refresh(card_set)
    logger.info(f"Created card set {card_set.id} '{card_set.name}'")
    return card_set


def update_card_set(
    session: Session,
    card_set_id: int,
    name: Optional[str] = None,
    description: Optional[str] = None
) -> CardSet:
    card_set = get_card_set(session, card_set_id)

    if name is not None:
        if not name.strip():
            raise ValidationError("Card set name cannot be empty")
        card_set.name = name.strip()
    if description is not None:
        card_set.description = description.strip() if description.strip() else None

    session.add(card_set)
    try:
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Error updating card set {card_set_id}: {str(e)}")
        raise PersistenceError(f"Failed to update card set: {str(e)}") from e
    session.refresh(card_set)
    return card_set


def delete_card_set(session: Session, card_set_id: int) -> int:
    """
    Delete a card set and all of its cards in one transaction.

    Returns:
        Number of cards deleted
    """
    card_set = get_card_set(session, card_set_id)
    cards = session.exec(select(Card).where(Card.card_set_id == card_set_id)).all()

    try:
        for card in cards:
            _delete_card_rows(session, card)
        session.delete(card_set)
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Error deleting card set {card_set_id}: {str(e)}")
        raise PersistenceError(f"Failed to delete card set: {str(e)}") from e

    logger.info(f"Deleted card set {card_set_id} with {len(cards)} card(s)")
    return len(cards)


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------

def build_card_response(card: Card) -> CardResponse:
    """Card with nested translations and examples, loaded through the relationships."""
    return CardResponse.model_validate(card)


def list_cards(session: Session, card_set_id: int) -> List[Card]:
    """Get all cards of a card set, newest first."""
    get_card_set(session, card_set_id)
    return list(session.exec(
        select(Card)
        .where(Card.card_set_id == card_set_id)
        .order_by(Card.created_at.desc(), Card.id.desc())
    ).all())


def get_card(session: Session, card_id: int) -> Card:
    card = session.get(Card, card_id)
    if not card:
        raise NotFoundError(f"Card with id {card_id} not found")
    return card


def _insert_examples(
    session: Session,
    translation: Translation,
    examples: Sequence[ExamplePayload]
) -> int:
    count = 0
    for example_data in _clean_examples(examples):
        session.add(Example(
            text=example_data.text.strip(),
            translation=example_data.translation.strip(),
            translation_id=translation.id,
            card_id=translation.card_id,
        ))
        count += 1
    return count


def _insert_translation(session: Session, card: Card, payload: TranslationPayload) -> Translation:
    translation = Translation(
        text=payload.text.strip(),
        language_id=payload.language_id,
        card_id=card.id,
    )
    session.add(translation)
    session.flush()  # Flush to get the translation ID for its examples
    _insert_examples(session, translation, payload.examples)
    return translation


def _delete_translation_rows(session: Session, translation: Translation) -> None:
    for example in session.exec(select(Example).where(Example.translation_id == translation.id)).all():
        session.delete(example)
    session.flush()
    session.delete(translation)


def _delete_card_rows(session: Session, card: Card) -> None:
    # Examples, then translations, then the card itself
    for example in session.exec(select(Example).where(Example.card_id == card.id)).all():
        session.delete(example)
    session.flush()
    for translation in session.exec(select(Translation).where(Translation.card_id == card.id)).all():
        session.delete(translation)
    session.flush()
    session.delete(card)
    session.flush()


def add_card(
    session: Session,
    card_set_id: int,
    text: str,
    language_id: Optional[int],
    translations: Sequence[TranslationPayload]
) -> Card:
    """
    Stage a card with its translations and examples without committing.

    The caller owns the transaction.
    """
    card = Card(text=text.strip(), language_id=language_id, card_set_id=card_set_id)
    session.add(card)
    session.flush()  # Flush to get the card ID
    for payload in translations:
        _insert_translation(session, card, payload)
    return card


def create_card(
    session: Session,
    card_set_id: int,
    text: str,
    language_id: Optional[int] = None,
    translations: Sequence[TranslationPayload] = ()
) -> Card:
    """
    Create one card plus its translations plus their examples.

    Args:
        session: Database session
        card_set_id: Card set the card belongs to
        text: Card text in the source language
        language_id: Source language ID (optional)
        translations: Translations, each with optional examples

    Returns:
        The created card

    Raises:
        NotFoundError: If the card set does not exist
        ValidationError: If text is blank or a language id is unknown
        PersistenceError: If a write fails (nothing is kept)
    """
    get_card_set(session, card_set_id)
    if not text or not text.strip():
        raise ValidationError("Card text cannot be empty")
    _validate_translations(session, translations)
    if language_id is not None:
        _validate_language_ids(session, [language_id])

    try:
        card = add_card(session, card_set_id, text, language_id, translations)
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Error adding card '{text}' to card set {card_set_id}: {str(e)}")
        raise PersistenceError(f"Failed to add card: {str(e)}") from e

    session.refresh(card)
    logger.info(
        f"Created card {card.id} in card set {card_set_id} with {len(translations)} translation(s)"
    )
    return card


def update_card(
    session: Session,
    card_id: int,
    text: str,
    translations: Sequence[TranslationPayload]
) -> Card:
    """
    Update a card and sync its translations against the submitted list.

    Incoming translations are matched to existing ones by language_id:
    - matched with different text: text updated in place, examples replaced
    - matched with the same text: left untouched
    - unmatched: inserted with its examples
    Existing translations with no incoming match are deleted with their examples.
    Applying the same input twice leaves the card unchanged the second time.

    Raises:
        NotFoundError: If the card does not exist
        ValidationError: If text is blank or a language id is unknown
        PersistenceError: If a write fails (nothing is kept)
    """
    card = get_card(session, card_id)
    if not text or not text.strip():
        raise ValidationError("Card text cannot be empty")
    _validate_translations(session, translations)

    existing = list(session.exec(
        select(Translation).where(Translation.card_id == card_id).order_by(Translation.id)
    ).all())

    updated_count = 0
    inserted_count = 0
    try:
        card.text = text.strip()
        session.add(card)

        unmatched = list(existing)
        for payload in translations:
            match = next((t for t in unmatched if t.language_id == payload.language_id), None)
            if match is None:
                _insert_translation(session, card, payload)
                inserted_count += 1
                continue

            unmatched.remove(match)
            if match.text != payload.text.strip():
                match.text = payload.text.strip()
                session.add(match)
                for example in session.exec(select(Example).where(Example.translation_id == match.id)).all():
                    session.delete(example)
                session.flush()
                _insert_examples(session, match, payload.examples)
                updated_count += 1

        for stale in unmatched:
            _delete_translation_rows(session, stale)

        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Error updating card {card_id}: {str(e)}")
        raise PersistenceError(f"Failed to update card: {str(e)}") from e

    session.refresh(card)
    logger.info(
        f"Updated card {card_id}: {updated_count} translation(s) updated, "
        f"{inserted_count} inserted, {len(unmatched)} deleted"
    )
    return card


def delete_card(session: Session, card_id: int) -> None:
    """
    Delete a card: its examples first, then its translations, then the card.

    Practice events referencing the card are kept.
    """
    card = get_card(session, card_id)
    try:
        _delete_card_rows(session, card)
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Error deleting card {card_id}: {str(e)}")
        raise PersistenceError(f"Failed to delete card: {str(e)}") from e
    logger.info(f"Deleted card {card_id}")


# ---------------------------------------------------------------------------
# Practice events
# ---------------------------------------------------------------------------

def fetch_practice_cards(
    session: Session,
    language_id: int,
    card_set_ids: Sequence[int]
) -> List[Tuple[Card, List[Translation]]]:
    """
    Get the cards of the selected card sets that have a translation in the given language.

    Returns:
        List of (card, translations in that language) tuples, newest card first
    """
    if not card_set_ids:
        return []

    rows = session.exec(
        select(Card, Translation)
        .join(Translation, Translation.card_id == Card.id)
        .where(
            Card.card_set_id.in_(list(card_set_ids)),
            Translation.language_id == language_id
        )
        .order_by(Card.created_at.desc(), Card.id.desc(), Translation.id)
    ).all()

    grouped: Dict[int, Tuple[Card, List[Translation]]] = {}
    for card, translation in rows:
        if card.id not in grouped:
            grouped[card.id] = (card, [])
        grouped[card.id][1].append(translation)
    return list(grouped.values())


def record_practice_event(
    session: Session,
    card_id: int,
    translation_id: int,
    language_id: int,
    result: bool,
    practice_mode: str
) -> PracticeStat:
    """Append one answer outcome to the practice log."""
    event = PracticeStat(
        card_id=card_id,
        translation_id=translation_id,
        language_id=language_id,
        result=result,
        practice_mode=practice_mode,
    )
    session.add(event)
    try:
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Error saving practice result for card {card_id}: {str(e)}")
        raise PersistenceError(f"Failed to save practice result: {str(e)}") from e
    session.refresh(event)
    return event


def list_practice_events(session: Session) -> List[PracticeStat]:
    return list(session.exec(select(PracticeStat).order_by(PracticeStat.practice_date)).all())
