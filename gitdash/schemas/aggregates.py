"""
Result schemas for the three aggregate variants.

Each variant is tagged by ``type`` so a serialized payload always says which
shape it carries. ``PrivateRepoStats`` intentionally has no field able to
hold a repository name, description or URL.
"""

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfileBlock(CamelModel):
    name: str
    bio: str = ""
    location: str = ""
    company: str = ""
    blog: str = ""
    twitter: str = ""
    followers: int = 0
    following: int = 0
    created_at: str = ""
    updated_at: str = ""
    public_gists: int = 0
    public_repos: int = 0
    hireable: bool = False
    type: str = "User"


class RepositoryStats(CamelModel):
    public: int = 0
    private: int = 0
    forked: int = 0
    original: int = 0
    archived: int = 0
    disabled: int = 0


class LanguageCount(CamelModel):
    language: str
    count: int


class TopicCount(CamelModel):
    topic: str
    count: int


class CategoryCount(CamelModel):
    category: str
    count: int


class PrivateRepoStats(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    total: int
    total_size: int
    total_stars: int
    total_forks: int
    total_watchers: int
    languages: List[LanguageCount]
    topics: List[TopicCount]
    archived: int
    disabled: int
    forked: int
    original: int


class ActivityItem(CamelModel):
    id: str
    message: str
    date: str
    repo: str
    author: str
    type: Literal["commit", "issue", "pull_request"] = "commit"


class WeeklyStat(CamelModel):
    week: str
    contributions: int
    commits: int
    issues: int
    pull_requests: int


class ActivityBreakdown(CamelModel):
    commits: int
    issues: int
    pull_requests: int


class TopRepository(CamelModel):
    name: str
    description: str
    stars: int
    forks: int
    language: str
    updated_at: Optional[str] = None
    topics: List[str] = Field(default_factory=list)
    private: bool = False
    fork: bool = False


class RepositoryItem(TopRepository):
    created_at: Optional[str] = None
    archived: bool = False
    disabled: bool = False
    size: int = 0
    watchers: int = 0
    open_issues: int = 0
    html_url: str = ""


class ContributionDay(CamelModel):
    date: str
    contribution_count: int
    color: Optional[str] = None


class ContributionWeek(CamelModel):
    contribution_days: List[ContributionDay] = Field(default_factory=list)


class ContributionCalendar(CamelModel):
    total_contributions: int = 0
    weeks: List[ContributionWeek] = Field(default_factory=list)


class IssueItem(CamelModel):
    id: int
    number: int
    title: str
    state: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    repo: str
    html_url: str = ""


class RepositoryTotals(CamelModel):
    total_repositories: int
    total_stars: int
    total_forks: int
    total_watchers: int
    total_size: int


class DashboardAggregate(RepositoryTotals):
    type: Literal["dashboard"] = "dashboard"
    total_contributions: int
    user_profile: UserProfileBlock
    repository_stats: RepositoryStats
    private_repo_stats: Optional[PrivateRepoStats] = None
    top_languages: List[LanguageCount]
    language_stats: Dict[str, int]
    topic_stats: Dict[str, int]
    repo_categories: List[CategoryCount]
    recent_activity: List[ActivityItem]
    weekly_stats: List[WeeklyStat]
    activity_breakdown: ActivityBreakdown
    top_repositories: List[TopRepository]


class RepositoriesAggregate(RepositoryTotals):
    type: Literal["repositories"] = "repositories"
    user_profile: UserProfileBlock
    repository_stats: RepositoryStats
    private_repo_stats: Optional[PrivateRepoStats] = None
    top_languages: List[LanguageCount]
    language_stats: Dict[str, int]
    topic_stats: Dict[str, int]
    top_repositories: List[TopRepository]
    repositories: List[RepositoryItem]


class ContributionsAggregate(CamelModel):
    type: Literal["contributions"] = "contributions"
    user_profile: UserProfileBlock
    total_contributions: int
    total_commits: int
    total_issues: int
    total_pull_requests: int
    contribution_data: ContributionCalendar
    weekly_stats: List[WeeklyStat]
    recent_activity: List[ActivityItem]
    activity_breakdown: ActivityBreakdown
    issues: List[IssueItem]
    pull_requests: List[IssueItem]


Aggregate = Union[DashboardAggregate, RepositoriesAggregate, ContributionsAggregate]
