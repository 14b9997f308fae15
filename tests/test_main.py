"""Tests for the command-line entry point."""

import pytest
import yaml

from applytrack.config import AppConfig
from applytrack.jobs.models import JobPosting
from applytrack.main import load_jobs, load_profile, main, print_ranking
from applytrack.profile.models import CandidateProfile


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("APPLYTRACK_CONFIG", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("SESSION_SECRET", raising=False)
    return tmp_path


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return str(path)


@pytest.fixture
def profile_file(workdir):
    return write_yaml(workdir / "profile.yaml", {
        "skills": ["python", "django"],
        "desired_roles": ["Backend"],
        "desired_locations": ["Berlin"],
        "remote_preference": "remote",
    })


@pytest.fixture
def jobs_file(workdir):
    return write_yaml(workdir / "jobs.yaml", {"jobs": [
        {"title": "Frontend Developer", "company": "Pixel", "skills_required": ["React"]},
        {"title": "Backend Engineer", "company": "Acme", "location": "Berlin",
         "remote_type": "remote", "skills_required": ["Python", "Django"]},
    ]})


class TestLoaders:
    def test_load_profile(self, profile_file):
        profile = load_profile(profile_file)
        assert profile.skills == ["python", "django"]
        assert profile.remote_preference == "remote"
        assert profile.min_match_score is None

    def test_load_jobs_from_mapping(self, jobs_file):
        jobs = load_jobs(jobs_file)
        assert [j.id for j in jobs] == [1, 2]
        assert jobs[1].skills_required == ["Python", "Django"]
        assert jobs[0].location is None

    def test_load_jobs_from_list(self, workdir):
        path = write_yaml(workdir / "list.yaml", [{"title": "Chef"}])
        jobs = load_jobs(path)
        assert jobs[0].title == "Chef"
        assert jobs[0].skills_required == []


class TestMain:
    def test_ranks_jobs(self, profile_file, jobs_file, capsys):
        main(["--profile", profile_file, "--jobs", jobs_file])
        out = capsys.readouterr().out
        assert "=== 2 jobs ranked (threshold 50) ===" in out
        assert "* #1 [100] Backend Engineer @ Acme" in out
        assert "#2 [  0] Frontend Developer @ Pixel" in out

    def test_profile_without_jobs(self, profile_file):
        with pytest.raises(SystemExit) as exc:
            main(["--profile", profile_file])
        assert exc.value.code == 2

    def test_nothing_to_do(self, workdir):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2

    def test_missing_config(self, workdir, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--config", "missing.yaml", "--check-config"])
        assert exc.value.code == 1
        assert "config.example.yaml" in capsys.readouterr().err

    def test_check_config_reports_warnings(self, workdir, capsys):
        path = write_yaml(workdir / "config.yaml", {"server": {"session_secret": "s3cret"}})
        main(["--config", path, "--check-config"])
        assert "Config OK" in capsys.readouterr().out

    def test_missing_jobs_file(self, profile_file, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--profile", profile_file, "--jobs", "nope.yaml"])
        assert exc.value.code == 1

    def test_null_lists_are_empty(self, workdir):
        path = write_yaml(workdir / "sparse.yaml", {"skills": None, "desired_roles": "Backend"})
        profile = load_profile(path)
        assert profile.skills == []
        assert profile.desired_roles == ["Backend"]

    def test_profile_must_be_mapping(self, workdir):
        path = write_yaml(workdir / "list.yaml", ["python"])
        with pytest.raises(ValueError):
            load_profile(path)

    def test_job_entries_must_be_mappings(self, workdir):
        path = write_yaml(workdir / "jobs.yaml", ["Backend Engineer"])
        with pytest.raises(ValueError):
            load_jobs(path)


class TestMalformedInput:
    def test_list_profile_exits_1(self, workdir, jobs_file, capsys):
        path = write_yaml(workdir / "bad.yaml", ["python"])
        with pytest.raises(SystemExit) as exc:
            main(["--profile", path, "--jobs", jobs_file])
        assert exc.value.code == 1
        assert "profile must be a mapping" in capsys.readouterr().err

    def test_string_job_entries_exit_1(self, workdir, profile_file):
        path = write_yaml(workdir / "bad_jobs.yaml", {"jobs": ["Backend Engineer", "Chef"]})
        with pytest.raises(SystemExit) as exc:
            main(["--profile", profile_file, "--jobs", path])
        assert exc.value.code == 1


class TestPrintRanking:
    def test_does_not_modify_profile(self, capsys):
        config = AppConfig()
        config.matching.default_min_match_score = 70
        profile = CandidateProfile(skills=["python"])

        print_ranking(profile, [JobPosting(title="Dev", skills_required=["Python"])], config)

        assert profile.min_match_score is None
        assert "(threshold 70)" in capsys.readouterr().out
