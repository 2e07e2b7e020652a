def create_meal(client, headers, name="Poha", meal_type="breakfast", meal_date="2026-10-01"):
    return client.post(
        "/api/meals", json={"meal_name": name, "type": meal_type, "meal_date": meal_date}, headers=headers
    )


def test_admin_creates_and_lists_meals(client, admin_headers):
    resp = create_meal(client, admin_headers)
    assert resp.status_code == 201
    meal = resp.json()
    assert meal["meal_name"] == "Poha"
    assert meal["meal_type"] == "breakfast"
    assert meal["meal_date"] == "2026-10-01"

    listed = client.get("/api/meals", headers=admin_headers).json()
    assert [m["meal_id"] for m in listed] == [meal["meal_id"]]


def test_non_admin_cannot_create_meal(client, student, admin_headers):
    resp = create_meal(client, student["headers"])
    assert resp.status_code == 403
    assert resp.json() == {"error": "Admin access required"}
    assert client.get("/api/meals", headers=admin_headers).json() == []


def test_students_can_read_meals(client, student, admin_headers):
    create_meal(client, admin_headers)
    resp = client.get("/api/meals", headers=student["headers"])
    assert resp.status_code == 200
    assert len(resp.json()) == 1


def test_list_filters_by_type_and_date(client, admin_headers):
    create_meal(client, admin_headers, "Poha", "breakfast", "2026-10-01")
    create_meal(client, admin_headers, "Rajma", "lunch", "2026-10-01")
    create_meal(client, admin_headers, "Idli", "breakfast", "2026-10-02")

    by_type = client.get("/api/meals", params={"type": "breakfast"}, headers=admin_headers).json()
    assert {m["meal_name"] for m in by_type} == {"Poha", "Idli"}

    by_date = client.get("/api/meals", params={"date": "2026-10-01"}, headers=admin_headers).json()
    assert {m["meal_name"] for m in by_date} == {"Poha", "Rajma"}

    both = client.get(
        "/api/meals", params={"type": "breakfast", "date": "2026-10-02"}, headers=admin_headers
    ).json()
    assert [m["meal_name"] for m in both] == ["Idli"]


def test_update_meal(client, admin_headers):
    meal_id = create_meal(client, admin_headers).json()["meal_id"]
    resp = client.put(
        f"/api/meals/{meal_id}",
        json={"meal_name": "Upma", "type": "breakfast", "meal_date": "2026-10-03"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {"meal_id": meal_id, "meal_name": "Upma", "meal_type": "breakfast", "meal_date": "2026-10-03"}


def test_update_and_delete_missing_meal_is_404(client, admin_headers):
    body = {"meal_name": "Upma", "type": "breakfast", "meal_date": "2026-10-03"}
    assert client.put("/api/meals/999", json=body, headers=admin_headers).status_code == 404
    resp = client.delete("/api/meals/999", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Meal not found"}


def test_delete_meal(client, admin_headers):
    meal_id = create_meal(client, admin_headers).json()["meal_id"]
    resp = client.delete(f"/api/meals/{meal_id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Meal deleted successfully"
    assert client.get("/api/meals", headers=admin_headers).json() == []


def test_invalid_meal_payloads_are_400(client, admin_headers):
    assert create_meal(client, admin_headers, meal_date="01/10/2026").status_code == 400
    assert create_meal(client, admin_headers, meal_type="brunch").status_code == 400
    assert create_meal(client, admin_headers, name="").status_code == 400
    resp = client.post("/api/meals", json={"meal_name": "Poha"}, headers=admin_headers)
    assert resp.status_code == 400
    assert client.get("/api/meals", headers=admin_headers).json() == []
