# gitdash/routers/dashboard.py
"""
Authenticated views over the caller's own GitHub data.

Owners see everything here (private repositories included); redaction only
applies on the public share path.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from gitdash.core.errors import UpstreamError, ValidationError
from gitdash.routers.auth_scope import GitHubContext, get_github_client_factory, get_github_context
from gitdash.schemas.aggregates import DashboardAggregate
from gitdash.schemas.profile import ExportRequest
from gitdash.services import aggregation
from gitdash.services.collector import collect_dashboard, run_blocking
from gitdash.utils.time import utc_now

router = APIRouter()
logger = logging.getLogger(__name__)

USERNAME_RE = re.compile(r"^[A-Za-z0-9-]{1,39}$")
EXPORT_TYPES = ("dashboard", "repositories", "contributions")


def _map_repo(r: dict) -> Dict[str, Any]:
    return {
        "name": r.get("name"),
        "full_name": r.get("full_name"),
        "description": r.get("description"),
        "html_url": r.get("html_url"),
        "stars": r.get("stargazers_count"),
        "forks": r.get("forks_count"),
        "open_issues": r.get("open_issues_count"),
        "language": r.get("language"),
        "created_at": r.get("created_at"),
        "updated_at": r.get("updated_at"),
        "is_private": r.get("private", False),
        "is_fork": r.get("fork", False),
    }


@router.get("/dashboard", response_model=DashboardAggregate)
async def dashboard(
    ctx: GitHubContext = Depends(get_github_context),
    client_factory=Depends(get_github_client_factory),
):
    try:
        return await collect_dashboard(client_factory(ctx.token), ctx.username, True)
    except Exception:
        logger.exception("Dashboard fetch failed for %s", ctx.username)
        raise UpstreamError("Failed to fetch dashboard data")


@router.get("/repositories")
async def repositories(
    ctx: GitHubContext = Depends(get_github_context),
    client_factory=Depends(get_github_client_factory),
):
    try:
        repos = await run_blocking(client_factory(ctx.token).get_user_repositories)
    except Exception:
        logger.exception("Repository fetch failed for %s", ctx.username)
        raise UpstreamError("Failed to fetch repositories")
    return [_map_repo(r) for r in repos]


@router.get("/pull-requests")
async def pull_requests(
    username: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(30, ge=1, le=100),
    ctx: GitHubContext = Depends(get_github_context),
    client_factory=Depends(get_github_client_factory),
):
    if not username:
        raise ValidationError("Username is required")
    if not USERNAME_RE.match(username):
        raise ValidationError("Invalid GitHub username")
    try:
        items = await run_blocking(client_factory(ctx.token).get_user_pull_requests, username, page, per_page)
    except Exception:
        logger.exception("Pull request fetch failed for %s", username)
        raise UpstreamError("Failed to fetch pull requests")
    return [i.model_dump(by_alias=True) for i in aggregation.visible_issues(items, True, set())]


@router.post("/export")
async def export(
    body: ExportRequest,
    ctx: GitHubContext = Depends(get_github_context),
    client_factory=Depends(get_github_client_factory),
):
    if body.export_type not in EXPORT_TYPES:
        raise ValidationError("Invalid export type")

    client = client_factory(ctx.token)
    try:
        payload = await _export_payload(body.export_type, client, ctx.username)
    except Exception:
        logger.exception("Export %s failed for %s", body.export_type, ctx.username)
        raise UpstreamError("Failed to export data")

    return {
        "type": body.export_type,
        "username": ctx.username,
        "generatedAt": utc_now().isoformat(),
        **payload,
    }


async def _export_payload(export_type: str, client, username: str) -> Dict[str, Any]:
    if export_type == "dashboard":
        data = await collect_dashboard(client, username, True)
        return {"stats": data.model_dump(by_alias=True)}

    if export_type == "repositories":
        repos: List[dict] = await run_blocking(client.get_user_repositories)
        totals = aggregation.repository_totals(repos)
        breakdown = aggregation.repository_breakdown(repos)
        return {
            "totalRepositories": len(repos),
            "repositories": [_map_repo(r) for r in repos],
            "summary": {
                "public": breakdown.public,
                "private": breakdown.private,
                "forks": breakdown.forked,
                "original": breakdown.original,
                "totalStars": totals["total_stars"],
                "totalForks": totals["total_forks"],
            },
        }

    # contributions: a full year of weeks rather than the 12 shown on a share
    calendar = await run_blocking(client.get_contribution_data, username)
    issues = await run_blocking(client.get_user_issues, username, 1, 20)
    prs = await run_blocking(client.get_user_pull_requests, username, 1, 20)
    commits = await run_blocking(client.get_recent_commits, username, 1, 20)
    return {
        "totalContributions": calendar.get("totalContributions", 0),
        "contributionWeeks": aggregation.last_weeks(calendar, 52),
        "recentActivity": {
            "issues": [i.model_dump(by_alias=True) for i in aggregation.visible_issues(issues[:10], True, set())],
            "pullRequests": [i.model_dump(by_alias=True) for i in aggregation.visible_issues(prs[:10], True, set())],
            "commits": [c.model_dump(by_alias=True) for c in aggregation.commit_activity(commits[:10], True, set())],
        },
    }
