"""
Card CRUD endpoints.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session
from dataclasses import asdict
import logging

from app.core.database import get_session
from app.schemas.card import CardResponse, UpdateCardRequest
from app.schemas.bulk_import import BulkImportRequest, ImportPreviewResponse, ImportRecordResponse
from app.services import card_service, import_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cards", tags=["cards"])


@router.post("/import/preview", response_model=ImportPreviewResponse)
async def preview_import(
    request: BulkImportRequest,
    session: Session = Depends(get_session)
):
    """Parse pasted tab-separated text without writing anything."""
    languages = card_service.list_languages(session)
    records = import_service.parse_import(request.data, languages)
    return ImportPreviewResponse(
        records=[ImportRecordResponse(**asdict(record)) for record in records]
    )


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(
    card_id: int,
    session: Session = Depends(get_session)
):
    """Get a card with its translations and examples."""
    card = card_service.get_card(session, card_id)
    return card_service.build_card_response(card)


@router.put("/{card_id}", response_model=CardResponse)
async def update_card(
    card_id: int,
    request: UpdateCardRequest,
    session: Session = Depends(get_session)
):
    """
    Update a card's text and sync its translations.

    The submitted translations replace the existing set: translations are
    matched by language, changed ones are updated (with their examples
    replaced), new ones inserted, missing ones deleted.
    """
    card = card_service.update_card(
        session,
        card_id=card_id,
        text=request.text,
        translations=request.translations,
    )
    return card_service.build_card_response(card)


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(
    card_id: int,
    session: Session = Depends(get_session)
):
    """Delete a card with its translations and examples."""
    card_service.delete_card(session, card_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
