"""Tests for job listing, detail, recommendations and admin routes."""

import pytest

from applytrack.models import JobPreferences


@pytest.fixture
def candidate(client, register):
    """A signed-in user with Python/Django skills looking for remote backend work in Berlin."""
    user = register()
    client.post("/api/profile/skills", json={"name": "python"})
    client.post("/api/profile/skills", json={"name": "django"})
    client.put("/api/profile/preferences", json={
        "desiredRoles": ["Backend"],
        "desiredLocations": ["Berlin"],
        "remotePreference": "remote",
        "minMatchScore": 50,
    })
    return user


@pytest.fixture
def jobs(make_job):
    return {
        "frontend": make_job(title="Frontend Developer", company="Pixel", location="Paris",
                             remote_type="onsite", skills_required=["React"]),
        "backend": make_job(title="Backend Engineer", company="Acme", location="Berlin",
                            remote_type="remote", skills_required=["Python", "Django"],
                            salary_min=60000, salary_max=80000),
        "partial": make_job(title="Backend Developer", company="Acme", location="Munich",
                            remote_type="hybrid", skills_required=["Python", "Kotlin"]),
    }


class TestListJobs:
    def test_anonymous_has_no_scores(self, client, jobs):
        resp = client.get("/api/jobs")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["pagination"] == {"page": 1, "limit": 20, "total": 3, "pages": 1}
        assert all("matchScore" not in job for job in data["jobs"])

    def test_signed_in_gets_scores(self, client, candidate, jobs):
        data = client.get("/api/jobs").json()["data"]
        scores = {job["id"]: job["matchScore"] for job in data["jobs"]}
        assert scores == {jobs["frontend"]: 0, jobs["backend"]: 100, jobs["partial"]: 45}

    def test_sort_by_match(self, client, candidate, jobs):
        data = client.get("/api/jobs", params={"sortByMatch": "true"}).json()["data"]
        assert [job["id"] for job in data["jobs"]] == [jobs["backend"], jobs["partial"], jobs["frontend"]]
        assert data["jobs"][0]["recommended"] is True
        assert data["jobs"][0]["matchingSkills"] == ["python", "django"]

    def test_filters(self, client, jobs):
        def ids(**params):
            return {job["id"] for job in client.get("/api/jobs", params=params).json()["data"]["jobs"]}

        assert ids(search="backend") == {jobs["backend"], jobs["partial"]}
        assert ids(location="berl") == {jobs["backend"]}
        assert ids(remote="hybrid") == {jobs["partial"]}
        assert ids(minSalary=70000) == {jobs["backend"]}

    def test_pagination(self, client, jobs):
        data = client.get("/api/jobs", params={"limit": 2, "page": 2}).json()["data"]
        assert len(data["jobs"]) == 1
        assert data["pagination"]["pages"] == 2

    def test_invalid_limit(self, client):
        assert client.get("/api/jobs", params={"limit": 500}).status_code == 400

    def test_inactive_jobs_hidden(self, client, make_job):
        make_job(title="Old", is_active=False)
        assert client.get("/api/jobs").json()["data"]["jobs"] == []


class TestJobDetail:
    def test_not_found(self, client):
        resp = client.get("/api/jobs/999")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "Job not found"}

    def test_anonymous(self, client, jobs):
        data = client.get(f"/api/jobs/{jobs['backend']}").json()["data"]
        assert data["job"]["matchScore"] is None
        assert data["hasApplied"] is False

    def test_signed_in_with_reasons(self, client, candidate, jobs):
        data = client.get(f"/api/jobs/{jobs['partial']}").json()["data"]
        assert data["job"]["matchScore"] == 45
        assert data["job"]["matchReasons"] == ["1 skill matches", "Matches desired role"]

    def test_has_applied(self, client, candidate, jobs):
        client.post("/api/applications", json={"jobId": jobs["backend"]})
        data = client.get(f"/api/jobs/{jobs['backend']}").json()["data"]
        assert data["hasApplied"] is True
        assert data["application"]["matchScore"] == 100


class TestRecommendations:
    def test_requires_login(self, client):
        assert client.get("/api/jobs/recommendations/personalized").status_code == 401

    def test_filters_by_threshold(self, client, candidate, jobs):
        data = client.get("/api/jobs/recommendations/personalized").json()["data"]
        assert [job["id"] for job in data["jobs"]] == [jobs["backend"]]
        assert data["total"] == 1
        assert data["jobs"][0]["matchReasons"] == [
            "2 skill matches",
            "Matches desired role",
            "Preferred location",
            "Matches work preference",
        ]

    def test_lower_threshold(self, client, candidate, jobs):
        client.put("/api/profile/preferences", json={"minMatchScore": 40})
        data = client.get("/api/jobs/recommendations/personalized").json()["data"]
        assert [job["id"] for job in data["jobs"]] == [jobs["backend"], jobs["partial"]]

    def test_excludes_applied_jobs(self, client, candidate, jobs):
        client.put("/api/profile/preferences", json={"minMatchScore": 40})
        client.post("/api/applications", json={"jobId": jobs["backend"]})
        data = client.get("/api/jobs/recommendations/personalized").json()["data"]
        assert [job["id"] for job in data["jobs"]] == [jobs["partial"]]

    def test_limit(self, client, candidate, jobs):
        client.put("/api/profile/preferences", json={"minMatchScore": 0})
        data = client.get("/api/jobs/recommendations/personalized", params={"limit": 2}).json()["data"]
        assert len(data["jobs"]) == 2

    def test_rate_limited(self, app, client, candidate, jobs):
        app.state.rate_limiter.max_requests = 2
        assert client.get("/api/jobs/recommendations/personalized").status_code == 200
        assert client.get("/api/jobs/recommendations/personalized").status_code == 200

        resp = client.get("/api/jobs/recommendations/personalized")
        assert resp.status_code == 429
        assert resp.json()["retryAfter"] >= 1
        assert "Retry-After" in resp.headers


class TestTrending:
    def test_trending(self, client, jobs):
        data = client.get("/api/jobs/stats/trending").json()["data"]
        assert len(data["recentJobs"]) == 3
        assert data["topCompanies"][0] == {"company": "Acme", "count": 2}
        assert {"location": "Berlin", "count": 1} in data["topLocations"]


class TestAdminJobs:
    payload = {
        "title": "Data Engineer",
        "company": "Acme",
        "description": "Pipelines.",
        "applyUrl": "https://acme.example/jobs/1",
        "remoteType": "remote",
        "skillsRequired": ["Python", " ", "Airflow"],
    }

    def test_requires_login(self, client):
        assert client.post("/api/jobs", json=self.payload).status_code == 401

    def test_requires_admin(self, client, register):
        register()
        resp = client.post("/api/jobs", json=self.payload)
        assert resp.status_code == 403
        assert resp.json()["message"] == "Access denied"

    def test_admin_crud(self, client, register, make_admin):
        user = register(email="admin@example.com")
        make_admin(user["id"])

        resp = client.post("/api/jobs", json=self.payload)
        assert resp.status_code == 201
        job = resp.json()["data"]["job"]
        assert job["skillsRequired"] == ["Python", "Airflow"]
        assert job["externalId"].startswith("manual-")

        updated = client.put(f"/api/jobs/{job['id']}", json={"location": "Berlin", "title": None})
        assert updated.status_code == 200
        assert updated.json()["data"]["job"]["location"] == "Berlin"
        assert updated.json()["data"]["job"]["title"] == "Data Engineer"

        assert client.delete(f"/api/jobs/{job['id']}").status_code == 200
        assert client.get(f"/api/jobs/{job['id']}").status_code == 404

    def test_invalid_apply_url(self, client, register, make_admin):
        user = register(email="admin@example.com")
        make_admin(user["id"])
        resp = client.post("/api/jobs", json={**self.payload, "applyUrl": "not-a-url"})
        assert resp.status_code == 400

    def test_apply_url_without_host_rejected(self, client, register, make_admin):
        user = register(email="admin@example.com")
        make_admin(user["id"])
        resp = client.post("/api/jobs", json={**self.payload, "applyUrl": "http://"})
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "applyUrl"

    def test_update_validates_apply_url(self, client, register, make_admin, make_job):
        user = register(email="admin@example.com")
        make_admin(user["id"])
        job_id = make_job()

        assert client.put(f"/api/jobs/{job_id}", json={"applyUrl": "ftp://acme.example"}).status_code == 400

        resp = client.put(f"/api/jobs/{job_id}", json={"applyUrl": "https://acme.example/careers/42"})
        assert resp.json()["data"]["job"]["applyUrl"] == "https://acme.example/careers/42"


class TestMisc:
    def test_health(self, client):
        assert client.get("/api/health").json()["status"] == "ok"

    def test_unknown_route(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.json()["success"] is False


class TestConfiguredThreshold:
    @pytest.fixture
    def config(self, config):
        config.matching.default_min_match_score = 80
        return config

    def test_new_users_get_configured_threshold(self, client, register):
        register()
        prefs = client.get("/api/profile/preferences").json()["data"]["preferences"]
        assert prefs["minMatchScore"] == 80

    def test_profile_without_preferences_uses_configured_threshold(self, app, client, register, make_job):
        user = register()
        client.post("/api/profile/skills", json={"name": "python"})
        with app.state.session_factory() as db:
            db.query(JobPreferences).filter(JobPreferences.user_id == user["id"]).delete()
            db.commit()
        job_id = make_job(skills_required=["Python"])

        jobs = client.get("/api/jobs").json()["data"]["jobs"]
        assert jobs[0]["id"] == job_id
        assert jobs[0]["matchScore"] == 50
        assert jobs[0]["recommended"] is False
