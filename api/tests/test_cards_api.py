API = "/api/v1"


def _create_set(client, name="Travel", description=None):
    response = client.post(f"{API}/card-sets", json={"name": name, "description": description})
    assert response.status_code == 201
    return response.json()


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"
    assert client.get("/health").json() == {"status": "healthy"}


def test_list_languages(client):
    response = client.get(f"{API}/languages")
    assert response.status_code == 200

    languages = response.json()["languages"]
    assert len(languages) == 8
    assert [lang["name"] for lang in languages] == sorted(lang["name"] for lang in languages)
    english = next(lang for lang in languages if lang["iso_2"] == "en")
    assert english["flag_emoji"] == "🇬🇧"


def test_card_set_crud(client):
    created = _create_set(client, "Travel", "Airport words")
    assert created["cards_count"] == 0

    response = client.put(f"{API}/card-sets/{created['id']}", json={"name": "Travelling"})
    assert response.status_code == 200
    assert response.json()["name"] == "Travelling"
    assert response.json()["description"] == "Airport words"

    listed = client.get(f"{API}/card-sets").json()["card_sets"]
    assert [s["name"] for s in listed] == ["Travelling"]

    assert client.delete(f"{API}/card-sets/{created['id']}").status_code == 204
    assert client.get(f"{API}/card-sets/{created['id']}").status_code == 404


def test_create_card_set_blank_name(client):
    response = client.post(f"{API}/card-sets", json={"name": " "})
    assert response.status_code == 400
    assert response.json()["type"] == "ValidationError"


def test_card_crud(client, languages):
    card_set = _create_set(client)

    response = client.post(
        f"{API}/card-sets/{card_set['id']}/cards",
        json={
            "text": "ciao",
            "language_id": languages["it"],
            "translations": [
                {
                    "text": "hello",
                    "language_id": languages["en"],
                    "examples": [{"text": "Ciao a tutti", "translation": "Hello everyone"}],
                }
            ],
        },
    )
    assert response.status_code == 201
    card = response.json()
    assert card["card_set_id"] == card_set["id"]
    assert card["translations"][0]["examples"][0]["translation"] == "Hello everyone"

    cards = client.get(f"{API}/card-sets/{card_set['id']}/cards").json()["cards"]
    assert [c["id"] for c in cards] == [card["id"]]
    assert client.get(f"{API}/card-sets/{card_set['id']}").json()["cards_count"] == 1

    response = client.put(
        f"{API}/cards/{card['id']}",
        json={"text": "ciao", "translations": [{"text": "hi", "language_id": languages["en"]}]},
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["translations"][0]["id"] == card["translations"][0]["id"]
    assert updated["translations"][0]["text"] == "hi"
    assert updated["translations"][0]["examples"] == []

    assert client.delete(f"{API}/cards/{card['id']}").status_code == 204
    assert client.get(f"{API}/cards/{card['id']}").status_code == 404


def test_create_card_unknown_language(client):
    card_set = _create_set(client)
    response = client.post(
        f"{API}/card-sets/{card_set['id']}/cards",
        json={"text": "ciao", "translations": [{"text": "hello", "language_id": 999}]},
    )
    assert response.status_code == 400
    assert client.get(f"{API}/card-sets/{card_set['id']}/cards").json()["cards"] == []


def test_create_card_missing_field(client):
    card_set = _create_set(client)
    response = client.post(f"{API}/card-sets/{card_set['id']}/cards", json={"translations": []})
    assert response.status_code == 422


def test_card_sets_filtered_by_language(client, languages):
    with_english = _create_set(client, "A")
    _create_set(client, "B")
    client.post(
        f"{API}/card-sets/{with_english['id']}/cards",
        json={"text": "ciao", "translations": [{"text": "hello", "language_id": languages["en"]}]},
    )

    response = client.get(f"{API}/card-sets", params={"language_id": languages["en"]})
    assert [s["name"] for s in response.json()["card_sets"]] == ["A"]
