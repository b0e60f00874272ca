"""
Bulk import schemas.
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class BulkImportRequest(BaseModel):
    """Pasted tab-separated text; first row is the header."""
    data: str = Field(..., description="Tab-separated rows, header first (text, text_language, <iso_2>...)")

    class Config:
        json_schema_extra = {
            "example": {
                "data": "text\ttext_language\ten\nciao\tit\thello"
            }
        }


class ImportRecordResponse(BaseModel):
    primary_text: str
    primary_language_code: Optional[str] = None
    translations_by_language_code: Dict[str, str] = {}


class ImportPreviewResponse(BaseModel):
    records: List[ImportRecordResponse]


class ImportFailure(BaseModel):
    row: int = Field(..., description="1-based position among the parsed records (header and skipped rows excluded)")
    text: str
    error: str


class BulkImportResponse(BaseModel):
    imported_count: int
    card_ids: List[int]
    failed: List[ImportFailure] = []
