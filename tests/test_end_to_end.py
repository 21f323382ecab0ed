"""
Full hiring flow through the HTTP API.
"""
from sqlalchemy.orm import Session

from conftest import PNG_BYTES, auth_headers, job_payload
from jobboard.db.models.category import Category


def test_company_posts_job_and_user_applies(client, db_session: Session, mailer, make_user):
    # Company registers and is not verified yet
    response = client.post(
        "/api/company/register",
        data={"name": "Acme", "email": "hr@acme.example", "password": "secret1"},
        files={"image": ("logo.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 201
    assert "token" not in response.json()

    response = client.post("/api/company/login", json={"email": "hr@acme.example", "password": "secret1"})
    assert response.json()["isEmailVerified"] is False

    # Verify with the last mailed code
    otp = mailer.last_code_for("hr@acme.example")
    response = client.post("/api/company/verify-otp", json={"email": "hr@acme.example", "otp": otp})
    assert response.status_code == 200
    company_headers = auth_headers(response.json()["token"])

    response = client.post("/api/categories", json={"type": "Engineering"}, headers=company_headers)
    category_id = response.json()["categoryData"]["_id"]

    response = client.post("/api/company/jobs", json=job_payload(category_id), headers=company_headers)
    assert response.status_code == 201
    job_id = response.json()["jobData"]["_id"]

    db_session.expire_all()
    assert db_session.query(Category).filter(Category.id == category_id).first().usage_count == 1

    # The job is on the public board
    public = client.get("/api/jobs").json()["jobData"]
    assert [job["_id"] for job in public] == [job_id]

    user = make_user()
    response = client.post("/api/user/apply-job", json={"jobId": job_id}, headers=user["headers"])
    assert response.status_code == 201

    response = client.post("/api/user/apply-job", json={"jobId": job_id}, headers=user["headers"])
    assert response.status_code == 409

    # The company sees exactly one applicant and moves them along
    response = client.get("/api/company/applications", headers=company_headers)
    applications = response.json()["viewApplicationData"]
    assert len(applications) == 1
    assert applications[0]["user"]["_id"] == user["id"]

    response = client.patch(
        f"/api/company/applications/{applications[0]['_id']}/status",
        json={"status": "accepted"},
        headers=company_headers,
    )
    assert response.status_code == 200

    mine = client.get("/api/user/applications", headers=user["headers"]).json()["jobApplications"]
    assert mine[0]["status"] == "accepted"

    # With an application on file neither the job nor its category can go
    assert client.delete(f"/api/company/jobs/{job_id}", headers=company_headers).status_code == 400
    assert client.delete(f"/api/categories/{category_id}", headers=company_headers).status_code == 400


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["database"] == "connected"
