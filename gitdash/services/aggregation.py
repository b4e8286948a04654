"""
Aggregation engine: raw GitHub JSON in, dashboard-shaped summaries out.

Everything here is pure. Redaction rules:

* repository counters, histograms and top lists use the *visible* set, which
  is every repository when ``show_private`` is set and public ones otherwise;
* ``private_repo_stats`` only exists when ``show_private`` is set and only
  carries counts, never names, descriptions or URLs;
* activity (commits, issues, pull requests) coming from a private repository
  is dropped when ``show_private`` is not set.
"""

from typing import Dict, Iterable, List, Optional, Set, Tuple

from gitdash.schemas.aggregates import (
    ActivityBreakdown,
    ActivityItem,
    CategoryCount,
    ContributionCalendar,
    ContributionsAggregate,
    DashboardAggregate,
    IssueItem,
    LanguageCount,
    PrivateRepoStats,
    RepositoriesAggregate,
    RepositoryItem,
    RepositoryStats,
    TopicCount,
    TopRepository,
    UserProfileBlock,
    WeeklyStat,
)
from gitdash.utils.repos import private_full_names, repo_from_url, select_visible, split_by_visibility
from gitdash.utils.time import activity_timestamp

TOP_LANGUAGES = 5
TOP_TOPICS = 8
TOP_REPOS_DASHBOARD = 5
TOP_REPOS_LIST = 10
WEEKS_SHOWN = 12

# Heuristic split of a contribution count, in tenths; the calendar does not break it down.
COMMIT_TENTHS = 7
ISSUE_TENTHS = 2
PR_TENTHS = 1

EMPTY_CALENDAR = {"totalContributions": 0, "weeks": []}


# ---------------------------------------------------------------------------
# building blocks
# ---------------------------------------------------------------------------

def kb_to_mb(kb: int) -> int:
    """GitHub reports `size` in KB. Rounds half up."""
    return (kb + 512) // 1024


def count_languages(repos: Iterable[dict]) -> Dict[str, int]:
    hist: Dict[str, int] = {}
    for r in repos:
        lang = r.get("language")
        if lang:
            hist[lang] = hist.get(lang, 0) + 1
    return hist


def count_topics(repos: Iterable[dict]) -> Dict[str, int]:
    hist: Dict[str, int] = {}
    for r in repos:
        for topic in r.get("topics") or []:
            hist[topic] = hist.get(topic, 0) + 1
    return hist


def count_categories(repos: Iterable[dict]) -> Dict[str, int]:
    """A repository's category is its first topic."""
    hist: Dict[str, int] = {}
    for r in repos:
        topics = r.get("topics") or []
        category = topics[0] if topics else "General"
        hist[category] = hist.get(category, 0) + 1
    return hist


def top_counts(hist: Dict[str, int], limit: int) -> List[Tuple[str, int]]:
    # sorted() is stable, ties keep first-seen order
    return sorted(hist.items(), key=lambda kv: kv[1], reverse=True)[:limit]


def repository_totals(repos: List[dict]) -> dict:
    return {
        "total_repositories": len(repos),
        "total_stars": sum(r.get("stargazers_count") or 0 for r in repos),
        "total_forks": sum(r.get("forks_count") or 0 for r in repos),
        "total_watchers": sum(r.get("watchers_count") or 0 for r in repos),
        "total_size": kb_to_mb(sum(r.get("size") or 0 for r in repos)),
    }


def repository_breakdown(repos: List[dict]) -> RepositoryStats:
    return RepositoryStats(
        public=sum(1 for r in repos if not r.get("private")),
        private=sum(1 for r in repos if r.get("private")),
        forked=sum(1 for r in repos if r.get("fork")),
        original=sum(1 for r in repos if not r.get("fork")),
        archived=sum(1 for r in repos if r.get("archived")),
        disabled=sum(1 for r in repos if r.get("disabled")),
    )


def private_repo_stats(private_repos: List[dict]) -> PrivateRepoStats:
    """Counts over private repositories only. No identifying fields."""
    totals = repository_totals(private_repos)
    return PrivateRepoStats(
        total=totals["total_repositories"],
        total_size=totals["total_size"],
        total_stars=totals["total_stars"],
        total_forks=totals["total_forks"],
        total_watchers=totals["total_watchers"],
        languages=[LanguageCount(language=k, count=v) for k, v in top_counts(count_languages(private_repos), TOP_LANGUAGES)],
        topics=[TopicCount(topic=k, count=v) for k, v in top_counts(count_topics(private_repos), TOP_TOPICS)],
        archived=sum(1 for r in private_repos if r.get("archived")),
        disabled=sum(1 for r in private_repos if r.get("disabled")),
        forked=sum(1 for r in private_repos if r.get("fork")),
        original=sum(1 for r in private_repos if not r.get("fork")),
    )


def build_user_profile(raw: Optional[dict], username: str) -> UserProfileBlock:
    raw = raw or {}
    return UserProfileBlock(
        name=raw.get("name") or username,
        bio=raw.get("bio") or "",
        location=raw.get("location") or "",
        company=raw.get("company") or "",
        blog=raw.get("blog") or "",
        twitter=raw.get("twitter_username") or "",
        followers=raw.get("followers") or 0,
        following=raw.get("following") or 0,
        created_at=raw.get("created_at") or "",
        updated_at=raw.get("updated_at") or "",
        public_gists=raw.get("public_gists") or 0,
        public_repos=raw.get("public_repos") or 0,
        hireable=bool(raw.get("hireable")),
        type=raw.get("type") or "User",
    )


def top_repositories(repos: List[dict], limit: int) -> List[TopRepository]:
    ranked = sorted(repos, key=lambda r: r.get("stargazers_count") or 0, reverse=True)[:limit]
    return [
        TopRepository(
            name=r.get("name", ""),
            description=r.get("description") or "",
            stars=r.get("stargazers_count") or 0,
            forks=r.get("forks_count") or 0,
            language=r.get("language") or "Unknown",
            updated_at=r.get("updated_at"),
            topics=r.get("topics") or [],
            private=bool(r.get("private")),
            fork=bool(r.get("fork")),
        )
        for r in ranked
    ]


def map_repository(r: dict) -> RepositoryItem:
    return RepositoryItem(
        name=r.get("name", ""),
        description=r.get("description") or "",
        stars=r.get("stargazers_count") or 0,
        forks=r.get("forks_count") or 0,
        language=r.get("language") or "Unknown",
        updated_at=r.get("updated_at"),
        created_at=r.get("created_at"),
        topics=r.get("topics") or [],
        private=bool(r.get("private")),
        fork=bool(r.get("fork")),
        archived=bool(r.get("archived")),
        disabled=bool(r.get("disabled")),
        size=r.get("size") or 0,
        watchers=r.get("watchers_count") or 0,
        open_issues=r.get("open_issues_count") or 0,
        html_url=r.get("html_url") or "",
    )


def split_contributions(total: int) -> ActivityBreakdown:
    return ActivityBreakdown(
        commits=total * COMMIT_TENTHS // 10,
        issues=total * ISSUE_TENTHS // 10,
        pull_requests=total * PR_TENTHS // 10,
    )


def last_weeks(calendar: Optional[dict], count: int = WEEKS_SHOWN) -> List[dict]:
    weeks = (calendar or {}).get("weeks") or []
    return weeks[-count:]


def weekly_series(weeks: List[dict]) -> List[WeeklyStat]:
    series = []
    for index, week in enumerate(weeks):
        total = sum(day.get("contributionCount") or 0 for day in week.get("contributionDays") or [])
        split = split_contributions(total)
        series.append(WeeklyStat(
            week=f"Week {index + 1}",
            contributions=total,
            commits=split.commits,
            issues=split.issues,
            pull_requests=split.pull_requests,
        ))
    return series


# ---------------------------------------------------------------------------
# activity feed
# ---------------------------------------------------------------------------

def _is_private_source(repository: Optional[dict], full_name: str, private_names: Set[str]) -> bool:
    if repository and repository.get("private"):
        return True
    return bool(full_name) and full_name.lower() in private_names


def commit_activity(commits: List[dict], show_private: bool, private_names: Set[str]) -> List[ActivityItem]:
    items = []
    for c in commits:
        repository = c.get("repository") or {}
        if not show_private and _is_private_source(repository, repository.get("full_name", ""), private_names):
            continue
        detail = c.get("commit") or {}
        author = detail.get("author") or {}
        items.append(ActivityItem(
            id=str(c.get("sha", "")),
            message=detail.get("message") or "",
            date=author.get("date") or "",
            repo=repository.get("name") or "Unknown",
            author=author.get("name") or "",
            type="commit",
        ))
    return items


def _issue_repo(item: dict) -> Tuple[str, str, Optional[dict]]:
    repository = item.get("repository")
    if repository:
        return repository.get("full_name", ""), repository.get("name") or "Unknown", repository
    full_name, name = repo_from_url(item.get("repository_url"))
    return full_name, name or "Unknown", None


def visible_issues(items: List[dict], show_private: bool, private_names: Set[str]) -> List[IssueItem]:
    out = []
    for item in items:
        full_name, name, repository = _issue_repo(item)
        if not show_private and _is_private_source(repository, full_name, private_names):
            continue
        out.append(IssueItem(
            id=item.get("id") or 0,
            number=item.get("number") or 0,
            title=item.get("title") or "",
            state=item.get("state") or "",
            created_at=item.get("created_at"),
            updated_at=item.get("updated_at"),
            repo=name,
            html_url=item.get("html_url") or "",
        ))
    return out


def issue_activity(issues: List[IssueItem], kind: str, author: str) -> List[ActivityItem]:
    prefix = "issue" if kind == "issue" else "pr"
    return [
        ActivityItem(
            id=f"{prefix}-{i.id}",
            message=i.title,
            date=i.created_at or "",
            repo=i.repo,
            author=author,
            type=kind,
        )
        for i in issues
    ]


def merge_activity(*feeds: List[ActivityItem], limit: int) -> List[ActivityItem]:
    merged = [item for feed in feeds for item in feed]
    merged.sort(key=lambda a: activity_timestamp(a.date), reverse=True)
    return merged[:limit]


# ---------------------------------------------------------------------------
# variants
# ---------------------------------------------------------------------------

def build_dashboard(
    repos: List[dict],
    profile: Optional[dict],
    commits: List[dict],
    calendar: Optional[dict],
    username: str,
    show_private: bool,
) -> DashboardAggregate:
    visible = select_visible(repos, show_private)
    _, private = split_by_visibility(repos)
    languages = count_languages(visible)
    total_contributions = (calendar or {}).get("totalContributions") or 0

    return DashboardAggregate(
        **repository_totals(visible),
        total_contributions=total_contributions,
        user_profile=build_user_profile(profile, username),
        repository_stats=repository_breakdown(visible),
        private_repo_stats=private_repo_stats(private) if show_private else None,
        top_languages=[LanguageCount(language=k, count=v) for k, v in top_counts(languages, TOP_LANGUAGES)],
        language_stats=languages,
        topic_stats=count_topics(visible),
        repo_categories=[CategoryCount(category=k, count=v) for k, v in top_counts(count_categories(visible), TOP_TOPICS)],
        recent_activity=commit_activity(commits, show_private, private_full_names(repos))[:10],
        weekly_stats=weekly_series(last_weeks(calendar)),
        activity_breakdown=split_contributions(total_contributions),
        top_repositories=top_repositories(visible, TOP_REPOS_DASHBOARD),
    )


def build_repositories(
    repos: List[dict],
    profile: Optional[dict],
    username: str,
    show_private: bool,
) -> RepositoriesAggregate:
    visible = select_visible(repos, show_private)
    _, private = split_by_visibility(repos)
    languages = count_languages(visible)

    return RepositoriesAggregate(
        **repository_totals(visible),
        user_profile=build_user_profile(profile, username),
        repository_stats=repository_breakdown(visible),
        private_repo_stats=private_repo_stats(private) if show_private else None,
        top_languages=[LanguageCount(language=k, count=v) for k, v in top_counts(languages, TOP_LANGUAGES)],
        language_stats=languages,
        topic_stats=count_topics(visible),
        top_repositories=top_repositories(visible, TOP_REPOS_LIST),
        repositories=[map_repository(r) for r in visible],
    )


def build_contributions(
    profile: Optional[dict],
    calendar: Optional[dict],
    commits: List[dict],
    issues: List[dict],
    pull_requests: List[dict],
    username: str,
    show_private: bool,
    private_names: Optional[Set[str]] = None,
) -> ContributionsAggregate:
    private_names = private_names or set()
    calendar = calendar or EMPTY_CALENDAR
    total_contributions = calendar.get("totalContributions") or 0
    weeks = last_weeks(calendar)

    commit_items = commit_activity(commits, show_private, private_names)
    issue_items = visible_issues(issues, show_private, private_names)
    pr_items = visible_issues(pull_requests, show_private, private_names)
    author = (profile or {}).get("login") or username

    recent = merge_activity(
        commit_items[:15],
        issue_activity(issue_items[:10], "issue", author),
        issue_activity(pr_items[:10], "pull_request", author),
        limit=20,
    )

    return ContributionsAggregate(
        user_profile=build_user_profile(profile, username),
        total_contributions=total_contributions,
        total_commits=len(commit_items),
        total_issues=len(issue_items),
        total_pull_requests=len(pr_items),
        contribution_data=ContributionCalendar.model_validate({"totalContributions": total_contributions, "weeks": weeks}),
        weekly_stats=weekly_series(weeks),
        recent_activity=recent,
        activity_breakdown=ActivityBreakdown(
            commits=len(commit_items),
            issues=len(issue_items),
            pull_requests=len(pr_items),
        ),
        issues=issue_items,
        pull_requests=pr_items,
    )
