"""
Card set endpoints.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session
from typing import Optional
import logging

from app.core.database import get_session
from app.models.models import CardSet
from app.schemas.card_set import (
    CardSetResponse,
    CardSetsResponse,
    CreateCardSetRequest,
    UpdateCardSetRequest,
)
from app.schemas.card import CardResponse, CardsResponse, CreateCardRequest
from app.schemas.bulk_import import BulkImportRequest, BulkImportResponse, ImportFailure
from app.services import card_service, import_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/card-sets", tags=["card-sets"])


def _card_set_response(card_set: CardSet, cards_count: int) -> CardSetResponse:
    return CardSetResponse(
        id=card_set.id,
        name=card_set.name,
        description=card_set.description,
        created_at=card_set.created_at,
        cards_count=cards_count,
    )


@router.get("", response_model=CardSetsResponse)
async def get_card_sets(
    language_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """
    Get all card sets with their card counts.

    Args:
        language_id: Optional filter; only card sets with at least one card
                     translated into this language are returned (practice setup)
    """
    card_sets = card_service.list_card_sets(session, language_id=language_id)
    return CardSetsResponse(
        card_sets=[_card_set_response(card_set, count) for card_set, count in card_sets]
    )


@router.post("", response_model=CardSetResponse, status_code=status.HTTP_201_CREATED)
async def create_card_set(
    request: CreateCardSetRequest,
    session: Session = Depends(get_session)
):
    """Create a new card set."""
    card_set = card_service.create_card_set(session, request.name, request.description)
    return _card_set_response(card_set, 0)


@router.get("/{card_set_id}", response_model=CardSetResponse)
async def get_card_set(
    card_set_id: int,
    session: Session = Depends(get_session)
):
    """Get a card set by ID."""
    card_set = card_service.get_card_set(session, card_set_id)
    counts = card_service.count_cards_by_set(session)
    return _card_set_response(card_set, counts.get(card_set.id, 0))


@router.put("/{card_set_id}", response_model=CardSetResponse)
async def update_card_set(
    card_set_id: int,
    request: UpdateCardSetRequest,
    session: Session = Depends(get_session)
):
    """Update a card set's name and/or description."""
    card_set = card_service.update_card_set(
        session, card_set_id, name=request.name, description=request.description
    )
    counts = card_service.count_cards_by_set(session)
    return _card_set_response(card_set, counts.get(card_set.id, 0))


@router.delete("/{card_set_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card_set(
    card_set_id: int,
    session: Session = Depends(get_session)
):
    """Delete a card set together with its cards, translations and examples."""
    card_service.delete_card_set(session, card_set_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{card_set_id}/cards", response_model=CardsResponse)
async def get_cards(
    card_set_id: int,
    session: Session = Depends(get_session)
):
    """Get all cards of a card set with their translations and examples, newest first."""
    cards = card_service.list_cards(session, card_set_id)
    return CardsResponse(cards=[card_service.build_card_response(card) for card in cards])


@router.post("/{card_set_id}/cards", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def create_card(
    card_set_id: int,
    request: CreateCardRequest,
    session: Session = Depends(get_session)
):
    """
    Add a card with its translations and examples to a card set.

    All rows are written in one transaction.
    """
    card = card_service.create_card(
        session,
        card_set_id=card_set_id,
        text=request.text,
        language_id=request.language_id,
        translations=request.translations,
    )
    return card_service.build_card_response(card)


@router.post("/{card_set_id}/import", response_model=BulkImportResponse)
async def import_cards(
    card_set_id: int,
    request: BulkImportRequest,
    session: Session = Depends(get_session)
):
    """
    Import cards from pasted tab-separated text.

    Rows that fail are listed in the response; the other rows are still imported.
    """
    result = import_service.import_cards(session, card_set_id, request.data)
    return BulkImportResponse(
        imported_count=len(result.card_ids),
        card_ids=result.card_ids,
        failed=[ImportFailure(**failure) for failure in result.failed],
    )
