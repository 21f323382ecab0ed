"""
Tests for the job catalog: posting, ownership rules, category usage and listings.
"""
from sqlalchemy.orm import Session

from conftest import job_payload
from jobboard.core import config
from jobboard.db.models.category import Category
from jobboard.db.models.job import Job


def usage_of(db_session: Session, category_id: int) -> int:
    db_session.expire_all()
    return db_session.query(Category).filter(Category.id == category_id).first().usage_count


def test_post_job_increments_category_usage(client, make_company, make_category, db_session: Session):
    company = make_company()
    category_id = make_category(company["headers"])

    response = client.post("/api/company/jobs", json=job_payload(category_id), headers=company["headers"])

    assert response.status_code == 201
    data = response.json()["jobData"]
    assert data["visible"] is True
    assert data["companyId"] == company["id"]
    assert data["categoryId"] == category_id
    assert data["location"]["city"] == "Pune"
    assert data["experienceLevel"] == "entry"
    assert data["employmentType"] == "permanent"
    assert data["remoteOption"] == "on-site"
    assert usage_of(db_session, category_id) == 1


def test_post_job_validation(client, make_company, make_category, db_session: Session):
    company = make_company()
    category_id = make_category(company["headers"])
    headers = company["headers"]

    response = client.post("/api/company/jobs", json=job_payload(category_id, title=None), headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Required fields (title, description, location, category, jobType) are missing"

    response = client.post(
        "/api/company/jobs",
        json=job_payload(category_id, location={"city": "Pune", "country": "India"}),
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "City, state, and country are required in location"

    response = client.post("/api/company/jobs", json=job_payload(999), headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Category not found"

    response = client.post("/api/company/jobs", json=job_payload(category_id, jobType="gig"), headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"
    assert response.json()["errors"]

    response = client.post(
        "/api/company/jobs",
        json=job_payload(category_id, salaryMin=90000, salaryMax=50000),
        headers=headers,
    )
    assert response.status_code == 400
    assert any("Salary max" in e for e in response.json()["errors"])

    response = client.post(
        "/api/company/jobs",
        json=job_payload(category_id, location={"city": "Pune", "state": "MH", "country": "India", "pincode": "41100"}),
        headers=headers,
    )
    assert response.status_code == 400

    assert db_session.query(Job).count() == 0
    assert usage_of(db_session, category_id) == 0


def test_non_owner_cannot_update_or_delete(client, make_company, make_category, make_job, db_session: Session):
    owner = make_company()
    intruder = make_company(email="intruder@example.com", name="Intruder")
    category_id = make_category(owner["headers"])
    job_id = make_job(owner["headers"], category_id)

    response = client.put(
        f"/api/company/jobs/{job_id}",
        json=job_payload(category_id, title="Hijacked"),
        headers=intruder["headers"],
    )
    assert response.status_code == 403
    assert response.json()["message"] == "Unauthorized to update this job"

    response = client.delete(f"/api/company/jobs/{job_id}", headers=intruder["headers"])
    assert response.status_code == 403
    assert response.json()["message"] == "Unauthorized to delete this job"

    db_session.expire_all()
    assert db_session.query(Job).filter(Job.id == job_id).first().title == "Backend Engineer"


def test_non_owner_visibility_toggle_is_a_silent_no_op(client, make_company, make_category, make_job, db_session: Session):
    owner = make_company()
    intruder = make_company(email="intruder@example.com", name="Intruder")
    category_id = make_category(owner["headers"])
    job_id = make_job(owner["headers"], category_id)

    response = client.post(f"/api/company/jobs/{job_id}/visibility", headers=intruder["headers"])

    assert response.status_code == 200
    assert response.json()["success"] is True
    db_session.expire_all()
    assert db_session.query(Job).filter(Job.id == job_id).first().visible is True


def test_strict_visibility_ownership(client, make_company, make_category, make_job, monkeypatch):
    monkeypatch.setattr(config, "STRICT_JOB_VISIBILITY_OWNERSHIP", True)
    owner = make_company()
    intruder = make_company(email="intruder@example.com", name="Intruder")
    category_id = make_category(owner["headers"])
    job_id = make_job(owner["headers"], category_id)

    response = client.post(f"/api/company/jobs/{job_id}/visibility", headers=intruder["headers"])

    assert response.status_code == 403


def test_owner_toggles_visibility(client, make_company, make_category, make_job):
    company = make_company()
    category_id = make_category(company["headers"])
    job_id = make_job(company["headers"], category_id)

    response = client.post(f"/api/company/jobs/{job_id}/visibility", headers=company["headers"])
    assert response.status_code == 200
    assert response.json()["jobData"]["visible"] is False

    assert client.get(f"/api/jobs/{job_id}").status_code == 404

    response = client.post("/api/company/jobs/999/visibility", headers=company["headers"])
    assert response.status_code == 404


def test_update_job_moves_category_usage(client, make_company, make_category, make_job, db_session: Session):
    company = make_company()
    category_a = make_category(company["headers"], "Engineering")
    category_b = make_category(company["headers"], "Design")
    job_id = make_job(company["headers"], category_a)
    make_job(company["headers"], category_a, title="Second")
    assert usage_of(db_session, category_a) == 2

    response = client.put(
        f"/api/company/jobs/{job_id}",
        json=job_payload(category_b, title="Product Designer", visible=False),
        headers=company["headers"],
    )

    assert response.status_code == 200
    data = response.json()["jobData"]
    assert data["title"] == "Product Designer"
    assert data["categoryId"] == category_b
    assert data["visible"] is False
    assert usage_of(db_session, category_a) == 1
    assert usage_of(db_session, category_b) == 1

    # visible omitted on update makes the job visible again
    response = client.put(f"/api/company/jobs/{job_id}", json=job_payload(category_b), headers=company["headers"])
    assert response.json()["jobData"]["visible"] is True
    assert usage_of(db_session, category_b) == 1


def test_update_job_not_found_and_bad_category(client, make_company, make_category, make_job, db_session: Session):
    company = make_company()
    category_id = make_category(company["headers"])
    job_id = make_job(company["headers"], category_id)

    response = client.put("/api/company/jobs/999", json=job_payload(category_id), headers=company["headers"])
    assert response.status_code == 404

    response = client.put(f"/api/company/jobs/{job_id}", json=job_payload(999), headers=company["headers"])
    assert response.status_code == 400
    assert usage_of(db_session, category_id) == 1


def test_delete_job(client, make_company, make_category, make_job, db_session: Session):
    company = make_company()
    category_id = make_category(company["headers"])
    job_id = make_job(company["headers"], category_id)

    response = client.delete(f"/api/company/jobs/{job_id}", headers=company["headers"])

    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.query(Job).filter(Job.id == job_id).first() is None
    assert usage_of(db_session, category_id) == 0
    assert client.delete(f"/api/company/jobs/{job_id}", headers=company["headers"]).status_code == 404


def test_delete_job_with_applications_is_refused(client, make_company, make_user, make_category, make_job, db_session: Session):
    company = make_company()
    user = make_user()
    category_id = make_category(company["headers"])
    job_id = make_job(company["headers"], category_id)
    client.post("/api/user/apply-job", json={"jobId": job_id}, headers=user["headers"])

    response = client.delete(f"/api/company/jobs/{job_id}", headers=company["headers"])

    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete job because it has existing applications"
    assert usage_of(db_session, category_id) == 1


def test_company_job_listing(client, make_company, make_user, make_category, make_job):
    company = make_company()
    other = make_company(email="other@example.com", name="Other")
    user = make_user()
    engineering = make_category(company["headers"], "Engineering")
    design = make_category(company["headers"], "Design")

    backend = make_job(company["headers"], engineering, title="Backend Engineer", skills=["python", "postgres"])
    make_job(company["headers"], engineering, title="Frontend Engineer", skills=["react"],
             location={"city": "Bengaluru", "state": "KA", "country": "India"})
    hidden = make_job(company["headers"], design, title="Illustrator", skills=["figma"])
    client.post(f"/api/company/jobs/{hidden}/visibility", headers=company["headers"])
    make_job(other["headers"], engineering, title="Not mine")

    client.post("/api/user/apply-job", json={"jobId": backend}, headers=user["headers"])

    response = client.get("/api/company/jobs", headers=company["headers"])
    body = response.json()
    assert response.status_code == 200
    assert body["pagination"] == {"total": 3, "page": 1, "limit": 10, "totalPages": 1}
    applicants = {job["_id"]: job["applicants"] for job in body["jobData"]}
    assert applicants[backend] == 1
    assert applicants[hidden] == 0

    def titles(**params):
        response = client.get("/api/company/jobs", params=params, headers=company["headers"])
        return sorted(job["title"] for job in response.json()["jobData"])

    assert titles(search="BACKEND") == ["Backend Engineer"]
    assert titles(search="postgres") == ["Backend Engineer"]
    assert titles(search="bengaluru") == ["Frontend Engineer"]
    assert titles(search="%") == []
    assert titles(search="[") == []
    assert titles(search='"') == []
    assert titles(search='", "') == []
    assert titles(category=design) == ["Illustrator"]
    assert titles(isVisible="false") == ["Illustrator"]
    assert titles(isVisible="true") == ["Backend Engineer", "Frontend Engineer"]

    response = client.get("/api/company/jobs", params={"page": 2, "limit": 2}, headers=company["headers"])
    body = response.json()
    assert len(body["jobData"]) == 1
    assert body["pagination"] == {"total": 3, "page": 2, "limit": 2, "totalPages": 2}


def test_company_job_search_matches_non_ascii_skill(client, make_company, make_category, make_job):
    company = make_company()
    category_id = make_category(company["headers"])
    make_job(company["headers"], category_id, title="Pastry Chef", skills=["pâtisserie", "Crème brûlée"])
    make_job(company["headers"], category_id, title="Line Cook", skills=["grill"])

    def titles(search):
        response = client.get("/api/company/jobs", params={"search": search}, headers=company["headers"])
        return [job["title"] for job in response.json()["jobData"]]

    assert titles("pâtisserie") == ["Pastry Chef"]
    assert titles("brûlée") == ["Pastry Chef"]
    assert titles("GRILL") == ["Line Cook"]


def test_public_job_listing(client, make_company, make_category, make_job):
    company = make_company()
    category_id = make_category(company["headers"])
    visible = make_job(company["headers"], category_id, title="Open role")
    hidden = make_job(company["headers"], category_id, title="Closed role")
    client.post(f"/api/company/jobs/{hidden}/visibility", headers=company["headers"])

    response = client.get("/api/jobs")

    assert response.status_code == 200
    jobs = response.json()["jobData"]
    assert [job["_id"] for job in jobs] == [visible]
    assert jobs[0]["company"]["name"] == "Acme"
    assert "passwordHash" not in jobs[0]["company"]
    assert jobs[0]["category"]["type"] == "Engineering"

    response = client.get(f"/api/jobs/{visible}")
    assert response.status_code == 200
    assert response.json()["jobData"]["title"] == "Open role"
