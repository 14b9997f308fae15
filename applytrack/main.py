"""CLI entry point: run the API server or score jobs from YAML files."""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import yaml

from applytrack.config import AppConfig, load_default_config, validate_config
from applytrack.jobs.models import JobPosting
from applytrack.matching.matcher import rank_jobs
from applytrack.profile.models import CandidateProfile
from applytrack.utils.logging_config import setup_logging

logger = logging.getLogger("applytrack")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="ApplyTrack - job application tracker and match scorer",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to config file (default: $APPLYTRACK_CONFIG or built-in defaults)",
    )
    parser.add_argument(
        "--check-config", action="store_true",
        help="Print config warnings and exit",
    )
    parser.add_argument(
        "--serve", action="store_true",
        help="Run the API server",
    )
    parser.add_argument(
        "--profile",
        help="YAML file with a candidate profile to score --jobs against",
    )
    parser.add_argument(
        "--jobs",
        help="YAML file with a list of job postings",
    )
    return parser.parse_args(argv)


def _read_yaml(path: str):
    with open(Path(path), "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _string_list(raw: dict, key: str, where: str) -> list[str]:
    value = raw.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ValueError(f"{where}: '{key}' must be a list of strings")
    return [str(v) for v in value if v is not None]


def load_profile(path: str) -> CandidateProfile:
    raw = _read_yaml(path) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: profile must be a mapping")

    min_score = raw.get("min_match_score")
    if min_score is not None and not isinstance(min_score, int):
        raise ValueError(f"{path}: 'min_match_score' must be an integer")

    return CandidateProfile(
        skills=_string_list(raw, "skills", path),
        desired_roles=_string_list(raw, "desired_roles", path),
        desired_locations=_string_list(raw, "desired_locations", path),
        remote_preference=raw.get("remote_preference"),
        min_match_score=min_score,
    )


def load_jobs(path: str) -> list[JobPosting]:
    raw = _read_yaml(path) or []
    if isinstance(raw, dict):
        raw = raw.get("jobs") or []
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of jobs")

    jobs = []
    for i, item in enumerate(raw, 1):
        if not isinstance(item, dict):
            raise ValueError(f"{path}: job #{i} must be a mapping")
        jobs.append(JobPosting(
            id=i,
            title=str(item.get("title") or ""),
            company=str(item.get("company") or ""),
            location=item.get("location"),
            remote_type=item.get("remote_type"),
            skills_required=_string_list(item, "skills_required", f"{path} job #{i}"),
        ))
    return jobs


def print_ranking(profile: CandidateProfile, jobs: list[JobPosting], config: AppConfig):
    """Print jobs ranked by match score."""
    if profile.min_match_score is None:
        profile = replace(profile, min_match_score=config.matching.default_min_match_score)

    ranked = rank_jobs(profile, jobs, config.matching.weights)

    print(f"\n=== {len(ranked)} jobs ranked (threshold {profile.threshold}) ===")
    for i, (job, result) in enumerate(ranked, 1):
        flag = "*" if result.recommended else " "
        where = f" @ {job.company}" if job.company else ""
        print(f"{flag} #{i} [{result.score:3d}] {job.title}{where}")
        if result.reasons:
            print(f"        {'; '.join(result.reasons)}")
    print()


def serve(config: AppConfig):
    import uvicorn

    from applytrack.web.app import create_app

    logger.info("Starting API server on %s:%d", config.server.host, config.server.port)
    uvicorn.run(create_app(config), host=config.server.host, port=config.server.port, log_config=None)


def main(argv=None):
    args = parse_args(argv)

    try:
        config = load_default_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.log_dir, config.log_level)

    warnings = validate_config(config)
    for w in warnings:
        logger.warning("Config: %s", w)

    if args.check_config:
        if not warnings:
            print("Config OK")
        return

    if args.profile or args.jobs:
        if not (args.profile and args.jobs):
            print("Error: --profile and --jobs must be given together", file=sys.stderr)
            sys.exit(2)
        try:
            profile = load_profile(args.profile)
            jobs = load_jobs(args.jobs)
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print_ranking(profile, jobs, config)
        return

    if args.serve:
        serve(config)
        return

    print("Nothing to do: pass --serve, --check-config, or --profile/--jobs", file=sys.stderr)
    sys.exit(2)


if __name__ == "__main__":
    main()
