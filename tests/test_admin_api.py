from conftest import ADMIN_TEST_PASSWORD


def test_login_logout_and_session_status(client):
    assert client.get("/api/auth/session").json() == {"authenticated": False}

    res = client.post("/api/auth/login", json={"password": ADMIN_TEST_PASSWORD})
    headers = {"Authorization": f"Bearer {res.json()['token']}"}
    assert client.get("/api/auth/session", headers=headers).json() == {"authenticated": True}

    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    assert client.get("/api/auth/session", headers=headers).json() == {"authenticated": False}


def test_wrong_password_is_rejected(client):
    res = client.post("/api/auth/login", json={"password": "guess"})

    assert res.status_code == 401
    assert res.json() == {"error": "Invalid password"}


def test_admin_routes_require_a_session(client, sample_portfolio):
    assert client.get("/api/admin/draft").status_code == 401
    assert client.put("/api/portfolio", json=sample_portfolio).json() == {"error": "Not authenticated"}
    assert client.get("/api/admin/draft", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_portfolio_starts_as_the_empty_default(client):
    data = client.get("/api/portfolio").json()

    assert data["personalDetails"]["name"] == ""
    assert data["certifications"] == []


def test_replace_portfolio(client, auth_headers, sample_portfolio):
    res = client.put("/api/portfolio", json=sample_portfolio, headers=auth_headers)

    assert res.status_code == 200
    assert client.get("/api/portfolio").json()["personalDetails"]["name"] == "Jane Doe"


def test_replace_portfolio_rejects_out_of_range_levels(client, auth_headers, sample_portfolio):
    sample_portfolio["skills"][0]["level"] = 150

    res = client.put("/api/portfolio", json=sample_portfolio, headers=auth_headers)

    assert res.status_code == 400
    assert "skills.0.level" in res.json()["error"]


def test_draft_edits_do_not_touch_store_until_saved(client, auth_headers, sample_portfolio, store):
    """
    Scenario: an admin edits the working copy, then saves.
    Expected: the public document changes only after the save call.
    """
    store.set(sample_portfolio)

    res = client.post("/api/admin/draft/edits", headers=auth_headers, json={
        "op": "set_field", "section": "personalDetails", "field": "title", "value": "Staff Engineer",
    })
    assert res.status_code == 200
    assert res.json()["personalDetails"]["title"] == "Staff Engineer"
    assert client.get("/api/portfolio").json()["personalDetails"]["title"] == "Software Engineer"

    client.post("/api/admin/draft/edits", headers=auth_headers, json={"op": "add_item", "section": "certifications"})
    client.post("/api/admin/draft/edits", headers=auth_headers, json={
        "op": "set_field", "section": "certifications", "index": 0, "field": "name", "value": "CKA",
    })

    res = client.post("/api/admin/draft/save", headers=auth_headers)
    assert res.status_code == 200
    saved = client.get("/api/portfolio").json()
    assert saved["personalDetails"]["title"] == "Staff Engineer"
    assert saved["certifications"][0]["name"] == "CKA"


def test_discarded_draft_starts_over_from_store(client, auth_headers, sample_portfolio, store):
    store.set(sample_portfolio)
    client.post("/api/admin/draft/edits", headers=auth_headers, json={"op": "remove_item", "section": "skills", "index": 0})

    assert client.delete("/api/admin/draft", headers=auth_headers).status_code == 204
    assert len(client.get("/api/admin/draft", headers=auth_headers).json()["skills"]) == 2


def test_bad_edit_returns_error_body(client, auth_headers):
    res = client.post("/api/admin/draft/edits", headers=auth_headers, json={"op": "remove_item", "section": "skills", "index": 3})

    assert res.status_code == 404
    assert "error" in res.json()


def test_edit_body_validation_is_bad_request(client, auth_headers):
    res = client.post("/api/admin/draft/edits", headers=auth_headers, json={"section": "skills"})

    assert res.status_code == 400
    assert res.json()["error"].startswith("Invalid request body")


def test_save_requires_skill_level(client, auth_headers, sample_portfolio):
    del sample_portfolio["skills"][0]["level"]

    res = client.put("/api/portfolio", json=sample_portfolio, headers=auth_headers)

    assert res.status_code == 400
    assert "skills.0.level" in res.json()["error"]


def test_save_rejects_null_skill_level(client, auth_headers, sample_portfolio):
    sample_portfolio["skills"][1]["level"] = None

    res = client.put("/api/portfolio", json=sample_portfolio, headers=auth_headers)

    assert res.status_code == 400
    assert "skills.1.level" in res.json()["error"]


def test_draft_save_rejects_skill_without_level(client, auth_headers, sample_portfolio, store):
    store.set(sample_portfolio)
    client.post("/api/admin/draft/edits", headers=auth_headers, json={"op": "add_item", "section": "skills"})
    client.post("/api/admin/draft/edits", headers=auth_headers, json={
        "op": "set_field", "section": "skills", "index": 2, "field": "level", "value": None,
    })

    res = client.post("/api/admin/draft/save", headers=auth_headers)

    assert res.status_code == 400
    assert len(client.get("/api/portfolio").json()["skills"]) == 2


def test_set_field_without_field_is_bad_request(client, auth_headers):
    res = client.post("/api/admin/draft/edits", headers=auth_headers, json={
        "op": "set_field", "section": "seo", "value": "x",
    })

    assert res.status_code == 400
    assert "field" in res.json()["error"]
    assert None not in client.get("/api/admin/draft", headers=auth_headers).json()["seo"]
