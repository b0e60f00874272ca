"""
Bulk import service.

Turns pasted tab-separated text into cards. The first row is the header; its
columns are 'text', 'text_language' or a language ISO-2 code.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
from sqlmodel import Session

from app.core.exceptions import ValidationError
from app.models.models import Language
from app.schemas.card import TranslationPayload
from app.services import card_service

logger = logging.getLogger(__name__)

TEXT_COLUMN = "text"
TEXT_LANGUAGE_COLUMN = "text_language"


@dataclass
class ImportRecord:
    """One parsed row: the card text, its language code and translations keyed by ISO-2 code."""
    primary_text: str
    primary_language_code: Optional[str] = None
    translations_by_language_code: Dict[str, str] = field(default_factory=dict)


@dataclass
class CardPayload:
    """An import record resolved against the languages table, ready to insert."""
    text: str
    language_id: Optional[int]
    translations: List[TranslationPayload]


@dataclass
class ImportResult:
    card_ids: List[int] = field(default_factory=list)
    failed: List[Dict[str, object]] = field(default_factory=list)


def parse_rows(raw_text: str) -> List[Dict[str, str]]:
    """
    Split pasted text into header-keyed rows.

    Blank lines are dropped. Cells missing at the end of a row are empty
    strings; cells beyond the header are ignored.
    """
    lines = [line.rstrip("\r") for line in raw_text.split("\n")]
    lines = [line for line in lines if line.strip() != ""]
    if not lines:
        raise ValidationError("No data to import")

    headers = [header.strip() for header in lines[0].split("\t")]
    rows = []
    for line in lines[1:]:
        values = line.split("\t")
        rows.append({
            header: (values[index].strip() if index < len(values) else "")
            for index, header in enumerate(headers)
        })
    return rows


def parse_import(raw_text: str, languages: Sequence[Language]) -> List[ImportRecord]:
    """
    Parse pasted text into typed import records.

    Columns whose header is not 'text', 'text_language' or a known ISO-2 code
    are ignored.
    """
    first_line = next((line for line in raw_text.split("\n") if line.strip()), "")
    header = [h.strip() for h in first_line.rstrip("\r").split("\t")]
    if TEXT_COLUMN not in header:
        raise ValidationError("Header row must contain a 'text' column")

    known_codes = {lang.iso_2.lower() for lang in languages}
    records = []
    for row in parse_rows(raw_text):
        text = row.get(TEXT_COLUMN, "")
        if not text:
            continue

        translations = {}
        for key, value in row.items():
            if key in (TEXT_COLUMN, TEXT_LANGUAGE_COLUMN) or not value:
                continue
            code = key.lower()
            if code in known_codes:
                translations[code] = value

        language_code = row.get(TEXT_LANGUAGE_COLUMN) or None
        records.append(ImportRecord(
            primary_text=text,
            primary_language_code=language_code.lower() if language_code else None,
            translations_by_language_code=translations,
        ))
    return records


def to_card_payloads(records: Sequence[ImportRecord], languages: Sequence[Language]) -> List[CardPayload]:
    """Resolve ISO-2 codes to language ids. An unknown source language code leaves the card without one."""
    ids_by_code = {lang.iso_2.lower(): lang.id for lang in languages}
    payloads = []
    for record in records:
        payloads.append(CardPayload(
            text=record.primary_text,
            language_id=ids_by_code.get(record.primary_language_code) if record.primary_language_code else None,
            translations=[
                TranslationPayload(text=text, language_id=ids_by_code[code])
                for code, text in record.translations_by_language_code.items()
            ],
        ))
    return payloads


def import_cards(session: Session, card_set_id: int, raw_text: str) -> ImportResult:
    """
    Import pasted cards into a card set, one card at a time.

    Each card is written in its own transaction; a failing row is reported and
    the remaining rows are still imported.
    """
    card_service.get_card_set(session, card_set_id)
    languages = card_service.list_languages(session)
    payloads = to_card_payloads(parse_import(raw_text, languages), languages)

    result = ImportResult()
    for row_number, payload in enumerate(payloads, 1):
        try:
            card = card_service.create_card(
                session,
                card_set_id=card_set_id,
                text=payload.text,
                language_id=payload.language_id,
                translations=payload.translations,
            )
            result.card_ids.append(card.id)
        except Exception as e:
            logger.warning(f"Bulk import: error adding card '{payload.text}' (row {row_number}): {str(e)}")
            result.failed.append({"row": row_number, "text": payload.text, "error": str(e)})

    logger.info(
        f"Bulk import into card set {card_set_id}: {len(result.card_ids)} imported, "
        f"{len(result.failed)} failed"
    )
    return result
