"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from app.api.v1.endpoints import (
    languages, card_sets, cards, practice, statistics, translations, extraction
)

api_router = APIRouter()

# Include all endpoint routers
# Note: Each router already defines its own prefix, so we don't add another one here
api_router.include_router(languages.router)
api_router.include_router(card_sets.router)
api_router.include_router(cards.router)
api_router.include_router(practice.router)
api_router.include_router(statistics.router)
api_router.include_router(translations.router)
api_router.include_router(extraction.router)
