import pytest
from sqlmodel import select

from app.core.exceptions import ValidationError
from app.models.models import Card, Language
from app.services import card_service, import_service

API = "/api/v1"


@pytest.fixture
def all_languages(db):
    return list(db.exec(select(Language)).all())


def test_parse_basic_row(all_languages):
    records = import_service.parse_import("text\ttext_language\tEN\nciao\tit\thello", all_languages)

    assert len(records) == 1
    record = records[0]
    assert record.primary_text == "ciao"
    assert record.primary_language_code == "it"
    assert record.translations_by_language_code == {"en": "hello"}


def test_parse_ignores_unknown_columns_and_blank_cells(all_languages):
    raw = "text\tnotes\ten\tes\r\npane\tbread roll\tbread\t\r\n\r\nacqua\t\twater\tagua\r\n"
    records = import_service.parse_import(raw, all_languages)

    assert [r.primary_text for r in records] == ["pane", "acqua"]
    assert records[0].translations_by_language_code == {"en": "bread"}
    assert records[1].translations_by_language_code == {"en": "water", "es": "agua"}
    assert records[0].primary_language_code is None


def test_parse_skips_rows_without_text(all_languages):
    records = import_service.parse_import("text\ten\n\thello\nciao\thi", all_languages)
    assert [r.primary_text for r in records] == ["ciao"]


def test_parse_short_row(all_languages):
    records = import_service.parse_import("text\ttext_language\ten\nciao", all_languages)
    assert records[0].primary_language_code is None
    assert records[0].translations_by_language_code == {}


def test_parse_requires_text_column(all_languages):
    with pytest.raises(ValidationError):
        import_service.parse_import("word\ten\nciao\thello", all_languages)


def test_parse_empty_input(all_languages):
    with pytest.raises(ValidationError):
        import_service.parse_import("\n  \n", all_languages)


def test_unknown_source_language_leaves_card_without_one(all_languages):
    records = import_service.parse_import("text\ttext_language\nciao\txx", all_languages)
    payloads = import_service.to_card_payloads(records, all_languages)
    assert payloads[0].language_id is None


def test_import_cards(db, card_set, languages):
    result = import_service.import_cards(
        db, card_set.id, "text\ttext_language\ten\tes\nciao\tit\thello\thola\ngrazie\tit\tthanks\t"
    )

    assert result.failed == []
    assert len(result.card_ids) == 2

    cards = card_service.list_cards(db, card_set.id)
    by_text = {card.text: card for card in cards}
    assert by_text["ciao"].language_id == languages["it"]
    assert sorted(t.text for t in by_text["ciao"].translations) == ["hello", "hola"]
    assert [t.text for t in by_text["grazie"].translations] == ["thanks"]


def test_import_continues_after_failure(db, card_set, monkeypatch):
    original_create = card_service.create_card

    def flaky_create(session, card_set_id, text, **kwargs):
        if text == "rotto":
            raise RuntimeError("write failed")
        return original_create(session, card_set_id, text, **kwargs)

    monkeypatch.setattr(card_service, "create_card", flaky_create)

    result = import_service.import_cards(db, card_set.id, "text\ten\nuno\tone\nrotto\tbroken\ntre\tthree")

    assert len(result.card_ids) == 2
    assert result.failed == [{"row": 2, "text": "rotto", "error": "write failed"}]
    assert sorted(c.text for c in db.exec(select(Card)).all()) == ["tre", "uno"]


def test_import_endpoint(client, card_set):
    response = client.post(
        f"{API}/card-sets/{card_set.id}/import",
        json={"data": "text\ttext_language\ten\nciao\tit\thello"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["imported_count"] == 1
    assert body["failed"] == []


def test_import_endpoint_missing_set(client):
    response = client.post(f"{API}/card-sets/999/import", json={"data": "text\nciao"})
    assert response.status_code == 404


def test_preview_endpoint(client):
    response = client.post(
        f"{API}/cards/import/preview",
        json={"data": "text\ttext_language\tEN\nciao\tit\thello"},
    )
    assert response.status_code == 200
    assert response.json()["records"] == [
        {
            "primary_text": "ciao",
            "primary_language_code": "it",
            "translations_by_language_code": {"en": "hello"},
        }
    ]
