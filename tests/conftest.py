import copy
import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("JWT_SECRET", "test-secret-that-is-long-enough-for-hs256")
os.environ.setdefault("ENCRYPTION_KEY", "test-encryption-key-for-gitdash-tests")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from gitdash.core.database import Base, get_db
from gitdash.models.profile import UserProfile
from gitdash.models.share import ShareRecord
from gitdash.routers.auth_scope import get_github_client_factory
from gitdash.services.crypto import encrypt_token
from gitdash.services.github import GitHubAPIError
from gitdash.services.session_token import create_session_token
from main import app


OWNER_ID = "owner-1"
OTHER_ID = "intruder-1"
OWNER_LOGIN = "octo"


def auth_header(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_session_token(user_id)['token']}"}


def make_repo(name, private=False, stars=0, forks=0, watchers=0, size=0, language=None,
              topics=None, fork=False, archived=False, disabled=False):
    return {
        "name": name,
        "full_name": f"{OWNER_LOGIN}/{name}",
        "description": f"{name} description",
        "html_url": f"https://github.com/{OWNER_LOGIN}/{name}",
        "private": private,
        "fork": fork,
        "archived": archived,
        "disabled": disabled,
        "stargazers_count": stars,
        "forks_count": forks,
        "watchers_count": watchers,
        "size": size,
        "language": language,
        "topics": topics or [],
        "open_issues_count": 1,
        "created_at": "2023-01-01T00:00:00Z",
        "updated_at": "2024-06-01T00:00:00Z",
    }


REPOS = [
    make_repo("alpha", stars=10, forks=2, watchers=10, size=2048, language="Python", topics=["cli", "tools"]),
    make_repo("beta", stars=30, forks=5, watchers=30, size=1024, language="Go", topics=["web"]),
    make_repo("gamma", stars=5, forks=0, watchers=5, size=512, language="Python"),
    make_repo("secret-one", private=True, stars=3, forks=1, watchers=3, size=4096, language="Rust",
              topics=["internal"], archived=True),
    make_repo("secret-two", private=True, stars=1, forks=0, watchers=1, size=1024, language="Rust", fork=True),
]

PROFILE = {
    "login": OWNER_LOGIN,
    "name": "Octo Cat",
    "bio": "builds things",
    "followers": 12,
    "following": 3,
    "public_repos": 3,
    "public_gists": 1,
    "created_at": "2015-01-01T00:00:00Z",
    "type": "User",
}


def make_commit(sha, repo, date, private=False, message=None):
    return {
        "sha": sha,
        "commit": {"message": message or f"commit {sha}", "author": {"name": "Octo Cat", "date": date}},
        "repository": {"name": repo, "full_name": f"{OWNER_LOGIN}/{repo}", "private": private},
    }


def make_issue(number, repo, date, title=None):
    return {
        "id": 1000 + number,
        "number": number,
        "title": title or f"issue {number}",
        "state": "open",
        "created_at": date,
        "updated_at": date,
        "html_url": f"https://github.com/{OWNER_LOGIN}/{repo}/issues/{number}",
        "repository_url": f"https://api.github.com/repos/{OWNER_LOGIN}/{repo}",
    }


COMMITS = [
    make_commit("c1", "alpha", "2024-06-03T10:00:00Z"),
    make_commit("c2", "secret-one", "2024-06-02T10:00:00Z", private=True, message="secret work"),
    make_commit("c3", "beta", "2024-06-01T10:00:00Z"),
]

ISSUES = [make_issue(1, "alpha", "2024-06-04T10:00:00Z")]
PULLS = [make_issue(2, "beta", "2024-05-30T10:00:00Z", title="add feature")]

CALENDAR = {
    "totalContributions": 140,
    "weeks": [
        {"contributionDays": [{"date": f"2024-0{1 + i // 5}-0{1 + i % 5}", "contributionCount": 10, "color": "#fff"}]}
        for i in range(14)
    ],
}


class FakeGitHub:
    """Stands in for GitHubClient; `failures` maps method name -> exception."""

    def __init__(self):
        self.repos = copy.deepcopy(REPOS)
        self.profile = copy.deepcopy(PROFILE)
        self.commits = copy.deepcopy(COMMITS)
        self.issues = copy.deepcopy(ISSUES)
        self.pulls = copy.deepcopy(PULLS)
        self.calendar = copy.deepcopy(CALENDAR)
        self.failures = {}
        self.calls = []
        self.tokens = []

    def _record(self, name, **kwargs):
        self.calls.append((name, kwargs))
        if name in self.failures:
            raise self.failures[name]

    def get_user_repositories(self, max_pages=10):
        self._record("get_user_repositories")
        return copy.deepcopy(self.repos)

    def get_user_stats(self, username):
        self._record("get_user_stats", username=username)
        return dict(self.profile)

    def get_contribution_data(self, username):
        self._record("get_contribution_data", username=username)
        return copy.deepcopy(self.calendar)

    def _visible(self, items, include_private):
        if include_private:
            return copy.deepcopy(items)
        return [i for i in copy.deepcopy(items) if not (i.get("repository") or {}).get("private")]

    def get_recent_commits(self, username, page=1, per_page=30, include_private=True):
        self._record("get_recent_commits", include_private=include_private)
        return self._visible(self.commits, include_private)[:per_page]

    def get_user_issues(self, username, page=1, per_page=30, include_private=True):
        self._record("get_user_issues", include_private=include_private)
        return self._visible(self.issues, include_private)[:per_page]

    def get_user_pull_requests(self, username, page=1, per_page=30, include_private=True):
        self._record("get_user_pull_requests", include_private=include_private)
        return self._visible(self.pulls, include_private)[:per_page]


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'gitdash_test.db'}")
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield maker
    await engine.dispose()


@pytest_asyncio.fixture
async def api(session_maker, fake_github):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    def override_factory():
        def factory(token):
            fake_github.tokens.append(token)
            return fake_github
        return factory

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_github_client_factory] = override_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_github_client_factory, None)


async def seed_profile(session_maker, user_id=OWNER_ID, token="gho_owner_token", username=OWNER_LOGIN):
    async with session_maker() as session:
        session.add(UserProfile(
            id=user_id,
            github_username=username,
            avatar=f"https://avatars.example/{username}.png",
            github_token=encrypt_token(token) if token else None,
            theme="system",
            notifications={},
        ))
        await session.commit()


async def seed_share(session_maker, share_id="share-abc", owner_id=OWNER_ID, share_type="repositories",
                     is_public=True, show_private=False, expires_at=None, view_count=0, created_at=None):
    created_at = created_at or datetime.now(timezone.utc) - timedelta(days=1)
    async with session_maker() as session:
        session.add(ShareRecord(
            id=share_id,
            owner_id=owner_id,
            username=OWNER_LOGIN,
            avatar=f"https://avatars.example/{OWNER_LOGIN}.png",
            type=share_type,
            is_public=is_public,
            settings={
                "allowComments": False,
                "showAnalytics": True,
                "autoExpire": expires_at is not None,
                "expireDays": 30,
                "showPrivateRepos": show_private,
            },
            created_at=created_at,
            expires_at=expires_at,
            view_count=view_count,
        ))
        await session.commit()


async def load_share(session_maker, share_id):
    async with session_maker() as session:
        return await session.get(ShareRecord, share_id)


def upstream_down():
    return GitHubAPIError(502, "bad gateway")
