from unittest.mock import MagicMock

import pytest
import requests

from gitdash.services.github import GitHubAPIError, GitHubClient


def _response(status=200, payload=None, text=""):
    r = MagicMock()
    r.status_code = status
    r.json.return_value = payload
    r.text = text
    return r


def _client(*responses, method="get"):
    session = MagicMock()
    getattr(session, method).side_effect = list(responses)
    return GitHubClient("gho_test", session=session), session


@pytest.mark.parametrize("status", [401, 403, 404, 500])
def test_error_statuses_raise(status):
    client, _ = _client(_response(status, text="boom"))
    with pytest.raises(GitHubAPIError) as exc:
        client.get_user_stats("octo")
    assert exc.value.status_code == status


def test_network_error_raises_api_error():
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("down")
    client = GitHubClient("gho_test", session=session)
    with pytest.raises(GitHubAPIError):
        client.get_user_stats("octo")


def test_default_client_uses_module_level_requests(monkeypatch):
    calls = []

    def fake_get(url, **kwargs):
        calls.append(url)
        return _response(payload={"login": "octo"})

    monkeypatch.setattr(requests, "get", fake_get)
    client = GitHubClient("gho_test")

    assert client.get_user_stats("octo") == {"login": "octo"}
    assert len(calls) == 1 and calls[0].endswith("/users/octo")
    assert not isinstance(client.session, requests.Session)


def test_token_goes_in_authorization_header():
    client, session = _client(_response(payload={"login": "octo"}))
    client.get_user_stats("octo")
    headers = session.get.call_args.kwargs["headers"]
    assert headers["Authorization"] == "token gho_test"


def test_repositories_are_paginated_until_short_page():
    full = [{"id": i} for i in range(100)]
    client, session = _client(_response(payload=full), _response(payload=[{"id": 100}]))

    repos = client.get_user_repositories()
    assert len(repos) == 101
    assert session.get.call_count == 2
    first_params = session.get.call_args_list[0].kwargs["params"]
    assert first_params["affiliation"] == "owner"


def test_public_only_search_adds_qualifier():
    client, session = _client(_response(payload={"items": [{"id": 1}]}))
    items = client.get_user_issues("octo", 1, 20, include_private=False)

    assert items == [{"id": 1}]
    assert session.get.call_args.kwargs["params"]["q"] == "author:octo is:issue is:public"


def test_search_with_private_keeps_query():
    client, session = _client(_response(payload={"items": []}))
    client.get_recent_commits("octo", 1, 30)
    params = session.get.call_args.kwargs["params"]
    assert params["q"] == "author:octo"
    assert params["sort"] == "author-date"


def test_contribution_calendar_from_graphql():
    payload = {"data": {"user": {"contributionsCollection": {"contributionCalendar": {
        "totalContributions": 7,
        "weeks": [{"contributionDays": [{"date": "2024-01-01", "contributionCount": 7, "color": "#000"}]}],
    }}}}}
    client, session = _client(_response(payload=payload), method="post")

    calendar = client.get_contribution_data("octo")
    assert calendar["totalContributions"] == 7
    assert session.post.call_args.kwargs["headers"]["Authorization"] == "bearer gho_test"


def test_graphql_errors_raise():
    client, _ = _client(_response(payload={"errors": [{"message": "nope"}]}), method="post")
    with pytest.raises(GitHubAPIError):
        client.get_contribution_data("octo")
