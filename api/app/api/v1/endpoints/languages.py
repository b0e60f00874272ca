from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.core.database import get_session
from app.schemas.language import LanguagesResponse, LanguageResponse
from app.services import card_service

router = APIRouter(prefix="/languages", tags=["languages"])


@router.get("", response_model=LanguagesResponse)
async def get_languages(
    session: Session = Depends(get_session)
):
    """Get all available languages."""
    languages = card_service.list_languages(session)
    return LanguagesResponse(
        languages=[LanguageResponse.model_validate(lang) for lang in languages]
    )
