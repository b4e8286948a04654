from typing import Any, Dict, List

import requests
from gitdash.core.config import settings


CONTRIBUTIONS_QUERY = """
query($username: String!) {
  user(login: $username) {
    contributionsCollection {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            date
            contributionCount
            color
          }
        }
      }
    }
  }
}
"""


class GitHubAPIError(Exception):
    """Upstream failure. `message` is for logs, never for clients."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"GitHub {status_code}: {message}")


class GitHubClient:
    """Blocking REST/GraphQL client authenticated with one user's token.

    Calls go through the module-level ``requests.get``/``requests.post``
    unless a session is passed in.
    """

    def __init__(self, token: str, session: requests.Session | None = None):
        self.token = token
        self.session = session or requests
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "Authorization": f"token {token}",
        }

    def gh_get(self, path: str, params: dict | None = None):
        url = f"{settings.GITHUB_API}{path}"
        try:
            r = self.session.get(url, headers=self.headers, params=params or {}, timeout=settings.GITHUB_TIMEOUT)
        except requests.RequestException as exc:
            raise GitHubAPIError(0, str(exc)) from exc
        return self._json_or_raise(r)

    def gh_get_paginated(self, path: str, base_params: dict | None = None, max_pages: int = 10) -> list:
        items, params = [], dict(base_params or {})
        params.setdefault("per_page", 100)
        for page in range(1, max_pages + 1):
            params["page"] = page
            chunk = self.gh_get(path, params)
            if not isinstance(chunk, list) or not chunk: break
            items.extend(chunk)
            if len(chunk) < params["per_page"]: break
        return items

    def gh_graphql(self, query: str, variables: dict) -> dict:
        headers = {"Authorization": f"bearer {self.token}", "Content-Type": "application/json"}
        try:
            r = self.session.post(
                settings.GITHUB_GRAPHQL_URL,
                json={"query": query, "variables": variables},
                headers=headers,
                timeout=settings.GITHUB_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise GitHubAPIError(0, str(exc)) from exc
        body = self._json_or_raise(r)
        if body.get("errors"):
            raise GitHubAPIError(r.status_code, str(body["errors"]))
        return body.get("data") or {}

    @staticmethod
    def _json_or_raise(r: requests.Response):
        if r.status_code == 404: raise GitHubAPIError(404, "Not found on GitHub")
        if r.status_code == 401: raise GitHubAPIError(401, "Invalid token or missing permissions")
        if r.status_code == 403: raise GitHubAPIError(403, "Rate limit reached")
        if r.status_code >= 400: raise GitHubAPIError(r.status_code, r.text)
        return r.json()

    # --- data sources -------------------------------------------------------

    def get_user_repositories(self, max_pages: int = 10) -> List[dict]:
        """Repositories owned by the token holder, private ones included."""
        return self.gh_get_paginated(
            "/user/repos",
            {"sort": "updated", "direction": "desc", "affiliation": "owner"},
            max_pages=max_pages,
        )

    def get_user_stats(self, username: str) -> dict:
        return self.gh_get(f"/users/{username}")

    def get_contribution_data(self, username: str) -> Dict[str, Any]:
        data = self.gh_graphql(CONTRIBUTIONS_QUERY, {"username": username})
        user = data.get("user")
        if not user:
            raise GitHubAPIError(404, f"No GitHub user {username}")
        calendar = user["contributionsCollection"]["contributionCalendar"]
        return {
            "totalContributions": calendar.get("totalContributions", 0),
            "weeks": calendar.get("weeks", []),
        }

    def get_user_issues(self, username: str, page: int = 1, per_page: int = 30, include_private: bool = True) -> List[dict]:
        return self._search("/search/issues", f"author:{username} is:issue", page, per_page, include_private)

    def get_user_pull_requests(self, username: str, page: int = 1, per_page: int = 30, include_private: bool = True) -> List[dict]:
        return self._search("/search/issues", f"author:{username} is:pr", page, per_page, include_private)

    def get_recent_commits(self, username: str, page: int = 1, per_page: int = 30, include_private: bool = True) -> List[dict]:
        return self._search("/search/commits", f"author:{username}", page, per_page, include_private, sort="author-date")

    def _search(self, path: str, query: str, page: int, per_page: int, include_private: bool, sort: str = "updated") -> List[dict]:
        if not include_private:
            query += " is:public"
        data = self.gh_get(path, {"q": query, "page": page, "per_page": per_page, "sort": sort, "order": "desc"})
        return data.get("items", []) if isinstance(data, dict) else []
