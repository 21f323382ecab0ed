"""
Tests for the category registry.
"""
from sqlalchemy.orm import Session

from conftest import auth_headers
from jobboard.db.models.category import Category
from jobboard.services import category_service


def test_create_category(client, make_company):
    company = make_company()

    response = client.post("/api/categories", json={"type": "Engineering"}, headers=company["headers"])

    assert response.status_code == 201
    data = response.json()["categoryData"]
    assert data["type"] == "Engineering"
    assert data["usageCount"] == 0
    assert data["isVisible"] is True


def test_create_category_validation_and_duplicates(client, make_company):
    company = make_company()

    response = client.post("/api/categories", json={}, headers=company["headers"])
    assert response.status_code == 400
    assert response.json()["message"] == "Type is required"

    assert client.post("/api/categories", json={"type": "Design"}, headers=company["headers"]).status_code == 201
    response = client.post("/api/categories", json={"type": "Design"}, headers=company["headers"])
    assert response.status_code == 409

    # Matching is exact
    response = client.post("/api/categories", json={"type": "design"}, headers=company["headers"])
    assert response.status_code == 201


def test_duplicate_category_rejected_by_constraint_when_lookup_misses(client, make_company, monkeypatch):
    company = make_company()
    assert client.post("/api/categories", json={"type": "Design"}, headers=company["headers"]).status_code == 201
    monkeypatch.setattr(category_service, "find_by_type", lambda db, category_type: None)

    response = client.post("/api/categories", json={"type": "Design"}, headers=company["headers"])

    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "Category already exists"}


def test_category_management_requires_company_or_admin(client, make_user):
    user = make_user()

    assert client.get("/api/categories").status_code == 401
    assert client.get("/api/categories", headers=user["headers"]).status_code == 401

    response = client.post(
        "/api/admin/signup",
        data={"name": "Ops", "email": "ops@example.com", "password": "secret1"},
    )
    admin_headers = auth_headers(response.json()["token"])

    response = client.post("/api/categories", json={"type": "Finance"}, headers=admin_headers)
    assert response.status_code == 201


def test_update_category(client, make_company, make_category):
    company = make_company()
    engineering = make_category(company["headers"], "Engineering")
    make_category(company["headers"], "Design")

    response = client.put(
        f"/api/categories/{engineering}",
        json={"type": "Design"},
        headers=company["headers"],
    )
    assert response.status_code == 409

    response = client.put(
        f"/api/categories/{engineering}",
        json={"type": "Software", "isVisible": False},
        headers=company["headers"],
    )
    assert response.status_code == 200
    assert response.json()["categoryData"]["isVisible"] is False

    # isVisible omitted makes it visible again
    response = client.put(
        f"/api/categories/{engineering}",
        json={"type": "Software"},
        headers=company["headers"],
    )
    assert response.status_code == 200
    assert response.json()["categoryData"]["type"] == "Software"
    assert response.json()["categoryData"]["isVisible"] is True

    response = client.put("/api/categories/999", json={"type": "Nope"}, headers=company["headers"])
    assert response.status_code == 404


def test_toggle_and_list_categories(client, make_company, make_category):
    company = make_company()
    make_category(company["headers"], "Sales")
    hidden = make_category(company["headers"], "Accounting")
    make_category(company["headers"], "Marketing")

    response = client.post(f"/api/categories/{hidden}/visibility", headers=company["headers"])
    assert response.status_code == 200
    assert response.json()["categoryData"]["isVisible"] is False

    visible = client.get("/api/categories", headers=company["headers"]).json()["categories"]
    assert [c["type"] for c in visible] == ["Marketing", "Sales"]

    every = client.get("/api/categories/all", headers=company["headers"]).json()["categories"]
    assert [c["type"] for c in every] == ["Accounting", "Marketing", "Sales"]

    response = client.post("/api/categories/999/visibility", headers=company["headers"])
    assert response.status_code == 404


def test_get_category(client, make_company, make_category):
    company = make_company()
    category_id = make_category(company["headers"], "Support")

    response = client.get(f"/api/categories/{category_id}", headers=company["headers"])
    assert response.status_code == 200
    assert response.json()["categoryData"]["_id"] == category_id

    assert client.get("/api/categories/999", headers=company["headers"]).status_code == 404


def test_delete_category_blocked_while_jobs_reference_it(client, make_company, make_category, make_job, db_session: Session):
    company = make_company()
    category_id = make_category(company["headers"])
    job_id = make_job(company["headers"], category_id)

    response = client.delete(f"/api/categories/{category_id}", headers=company["headers"])
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete category because it is used in existing jobs"

    assert client.delete(f"/api/company/jobs/{job_id}", headers=company["headers"]).status_code == 200

    response = client.delete(f"/api/categories/{category_id}", headers=company["headers"])
    assert response.status_code == 200
    assert db_session.query(Category).filter(Category.id == category_id).first() is None

    assert client.delete(f"/api/categories/{category_id}", headers=company["headers"]).status_code == 404
