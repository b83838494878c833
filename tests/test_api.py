from __future__ import annotations


def _capture(client, *labels):
    ids = []
    for label in labels:
        resp = client.post(
            "/api/fridge/items",
            json={"label_en": label, "native_definition": f"{label.lower()}-def", "emoji": "🥬"},
        )
        assert resp.status_code == 200
        ids.append(resp.json()["item"]["word_id"])
    return ids


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_capture_list_and_get(client):
    apple, banana = _capture(client, "Apple", "Banana")

    dup = client.post("/api/fridge/items", json={"label_en": "apple"})
    assert dup.status_code == 200
    assert dup.json()["created"] is False
    assert dup.json()["item"]["word_id"] == apple

    spaced = client.post("/api/fridge/items", json={"label_en": "Green Apple"})
    spaced_again = client.post("/api/fridge/items", json={"label_en": "Green  Apple"})
    assert spaced_again.status_code == 200
    assert spaced_again.json()["created"] is False
    assert spaced_again.json()["item"]["word_id"] == spaced.json()["item"]["word_id"]

    listing = client.get("/api/fridge/items").json()
    assert listing["total"] == 3
    assert {item["label_en"] for item in listing["items"]} == {"Apple", "Banana", "Green Apple"}
    assert all(item["freshness"] == "FRESH" for item in listing["items"])

    single = client.get(f"/api/fridge/items/{banana}")
    assert single.status_code == 200
    assert single.json()["item"]["days_since_review"] == 0

    assert client.get("/api/fridge/items/999").status_code == 404


def test_capture_validation(client):
    assert client.post("/api/fridge/items", json={"label_en": ""}).status_code == 422
    assert client.post("/api/fridge/items", json={"label_en": "   "}).status_code == 400


def test_quiz_flow_wrong_then_correct(client):
    ids = _capture(client, "Apple", "Banana", "Cabbage", "Daikon")
    target = ids[0]

    quiz = client.get(f"/api/fridge/quiz-by-word/{target}")
    assert quiz.status_code == 200
    data = quiz.json()
    assert data["question"] == "🥬 Apple"
    assert sorted(option["word_id"] for option in data["options"]) == sorted(ids)
    assert "correct_id" not in data and "target_word_id" not in data

    wrong = client.post(f"/api/fridge/quiz/{data['quiz_id']}/answer", json={"selected_word_id": ids[1]})
    assert wrong.status_code == 200
    assert wrong.json() == {"ok": True, "correct": False, "xp_delta": 0, "item": None}
    assert client.get(f"/api/fridge/items/{target}").json()["item"]["proficiency_level"] == 0

    retry = client.post(f"/api/fridge/quiz/{data['quiz_id']}/answer", json={"selected_word_id": target})
    assert retry.status_code == 404
    assert client.get(f"/api/fridge/items/{target}").json()["item"]["proficiency_level"] == 0

    data = client.get(f"/api/fridge/quiz-by-word/{target}").json()
    right = client.post(f"/api/fridge/quiz/{data['quiz_id']}/answer", json={"selected_word_id": target})
    assert right.status_code == 200
    body = right.json()
    assert body["correct"] is True
    assert body["xp_delta"] == 20
    assert body["item"]["proficiency_level"] == 1
    assert body["item"]["freshness"] == "FRESH"

    again = client.post(f"/api/fridge/quiz/{data['quiz_id']}/answer", json={"selected_word_id": target})
    assert again.status_code == 404


def test_stale_quiz_is_rejected(client):
    ids = _capture(client, "Apple", "Banana", "Cabbage", "Daikon")
    first = client.get(f"/api/fridge/quiz-by-word/{ids[2]}").json()
    second = client.get(f"/api/fridge/quiz-by-word/{ids[2]}").json()

    ok = client.post(f"/api/fridge/quiz/{second['quiz_id']}/answer", json={"selected_word_id": ids[2]})
    assert ok.json()["correct"] is True

    stale = client.post(f"/api/fridge/quiz/{first['quiz_id']}/answer", json={"selected_word_id": ids[2]})
    assert stale.status_code == 409
    assert client.get(f"/api/fridge/items/{ids[2]}").json()["item"]["proficiency_level"] == 1


def test_guessing_every_option_on_one_quiz_is_not_credited(client):
    ids = _capture(client, "Apple", "Banana", "Cabbage", "Daikon")
    quiz = client.get(f"/api/fridge/quiz-by-word/{ids[0]}").json()

    attempts = [
        client.post(f"/api/fridge/quiz/{quiz['quiz_id']}/answer", json={"selected_word_id": option["word_id"]})
        for option in quiz["options"]
    ]

    assert attempts[0].status_code == 200
    assert all(resp.status_code == 404 for resp in attempts[1:])
    credited = sum(1 for resp in attempts if resp.status_code == 200 and resp.json()["correct"])
    level = client.get(f"/api/fridge/items/{ids[0]}").json()["item"]["proficiency_level"]
    assert level == credited


def test_quiz_needs_enough_items(client):
    ids = _capture(client, "Apple", "Banana", "Cabbage")

    resp = client.get(f"/api/fridge/quiz-by-word/{ids[0]}")
    assert resp.status_code == 409
    detail = resp.json()["detail"]
    assert detail["required"] == 4
    assert detail["available"] == 3

    smaller = client.get(f"/api/fridge/quiz-by-word/{ids[0]}", params={"k": 3})
    assert smaller.status_code == 200
    assert len(smaller.json()["options"]) == 3

    assert client.get("/api/fridge/quiz-by-word/999").status_code == 404
    assert client.post("/api/fridge/quiz/nope/answer", json={"selected_word_id": 1}).status_code == 404


def test_stats_profile(client):
    empty = client.get("/api/stats").json()
    assert empty["total_items"] == 0
    assert empty["percentages"] == {"FRESH": 0.0, "WARNING": 0.0, "ROTTEN": 0.0}
    assert empty["current_title"] == "🥚 Dorm Student"

    ids = _capture(client, "Apple", "Banana", "Cabbage", "Daikon")
    quiz = client.get(f"/api/fridge/quiz-by-word/{ids[3]}").json()
    client.post(f"/api/fridge/quiz/{quiz['quiz_id']}/answer", json={"selected_word_id": ids[3]})

    stats = client.get("/api/stats").json()
    assert stats["total_items"] == 4
    assert stats["fresh_count"] == 4
    assert stats["fresh_percentage"] == 100.0
    assert stats["total_xp"] == 4 * 50 + 20
    assert stats["current_title"] == "🍳 Home Cook"
    assert stats["next_title"] == "👨‍🍳 Master Chef"
    assert stats["progress_percentage"] == 2.5

    rank = client.get("/api/stats/rank").json()
    assert rank["total_xp"] == 220
