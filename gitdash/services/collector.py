"""
Concurrent fetch + aggregate per share type.

The GitHub client is blocking (``requests``), so every call runs in a worker
thread and the independent calls are joined with ``asyncio.gather``.

``dashboard`` and ``repositories`` fail as a whole when any call fails.
``contributions`` lets each call settle on its own and substitutes an empty
default for the ones that failed.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

from gitdash.schemas.aggregates import Aggregate, ContributionsAggregate, DashboardAggregate, RepositoriesAggregate
from gitdash.services import aggregation
from gitdash.services.github import GitHubClient
from gitdash.utils.repos import private_full_names

logger = logging.getLogger(__name__)


async def run_blocking(fn: Callable[..., Any], *args, **kwargs) -> Any:
    return await asyncio.to_thread(fn, *args, **kwargs)


async def collect_dashboard(client: GitHubClient, username: str, show_private: bool) -> DashboardAggregate:
    repos, profile, commits, calendar = await asyncio.gather(
        run_blocking(client.get_user_repositories),
        run_blocking(client.get_user_stats, username),
        run_blocking(client.get_recent_commits, username, 1, 20, include_private=show_private),
        run_blocking(client.get_contribution_data, username),
    )
    return aggregation.build_dashboard(repos, profile, commits, calendar, username, show_private)


async def collect_repositories(client: GitHubClient, username: str, show_private: bool) -> RepositoriesAggregate:
    repos, profile = await asyncio.gather(
        run_blocking(client.get_user_repositories),
        run_blocking(client.get_user_stats, username),
    )
    return aggregation.build_repositories(repos, profile, username, show_private)


async def settle(sources: Dict[str, Awaitable[Any]], defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Await every source; a failed one yields its documented default."""
    names = list(sources)
    results = await asyncio.gather(*(sources[n] for n in names), return_exceptions=True)
    settled: Dict[str, Any] = {}
    for name, result in zip(names, results):
        if isinstance(result, Exception):
            logger.warning("Source %s failed, using default: %s", name, result)
            settled[name] = defaults[name]
        else:
            settled[name] = result
    return settled


async def collect_contributions(client: GitHubClient, username: str, show_private: bool) -> ContributionsAggregate:
    sources = {
        "profile": run_blocking(client.get_user_stats, username),
        "calendar": run_blocking(client.get_contribution_data, username),
        "commits": run_blocking(client.get_recent_commits, username, 1, 30, include_private=show_private),
        "issues": run_blocking(client.get_user_issues, username, 1, 20, include_private=show_private),
        "pull_requests": run_blocking(client.get_user_pull_requests, username, 1, 20, include_private=show_private),
    }
    defaults = {
        "profile": None,
        "calendar": dict(aggregation.EMPTY_CALENDAR),
        "commits": [],
        "issues": [],
        "pull_requests": [],
    }
    if not show_private:
        # search hits for issues and PRs carry no visibility flag, so they are
        # matched against the owner's private repository names
        sources["repos"] = run_blocking(client.get_user_repositories)
        defaults["repos"] = []

    results = await settle(sources, defaults)
    return aggregation.build_contributions(
        results["profile"],
        results["calendar"],
        results["commits"],
        results["issues"],
        results["pull_requests"],
        username,
        show_private,
        private_full_names(results.get("repos", [])),
    )


COLLECTORS: Dict[str, Callable[[GitHubClient, str, bool], Awaitable[Aggregate]]] = {
    "dashboard": collect_dashboard,
    "repositories": collect_repositories,
    "contributions": collect_contributions,
}


async def aggregate_for(share_type: str, client: GitHubClient, username: str, show_private: bool) -> Aggregate:
    try:
        collector = COLLECTORS[share_type]
    except KeyError:
        raise ValueError(f"Unknown share type: {share_type}") from None
    return await collector(client, username, show_private)
