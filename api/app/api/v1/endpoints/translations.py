"""
Translation suggestion endpoint.
"""
from fastapi import APIRouter

from app.schemas.external import TranslationSuggestionRequest, TranslationSuggestionResponse
from app.services.translation_service import translation_service

router = APIRouter(prefix="/translations", tags=["translations"])


@router.post("/suggest", response_model=TranslationSuggestionResponse)
def suggest_translation(request: TranslationSuggestionRequest):
    """
    Suggest a translation of a card text.

    A failure here only means no suggestion: the user can still type the
    translation by hand.
    """
    translation = translation_service.suggest_translation(request.text, request.target_language)
    return TranslationSuggestionResponse(translation=translation)
