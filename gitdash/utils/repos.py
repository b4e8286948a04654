# gitdash/utils/repos.py
from typing import Iterable, List, Optional, Set, Tuple

def split_by_visibility(repos: Iterable[dict]) -> Tuple[List[dict], List[dict]]:
    """(public, private) keeping the input order inside each half."""
    public: List[dict] = []
    private: List[dict] = []
    for r in repos:
        (private if r.get("private") else public).append(r)
    return public, private

def select_visible(repos: List[dict], show_private: bool) -> List[dict]:
    if show_private:
        return list(repos)
    return [r for r in repos if not r.get("private")]

def private_full_names(repos: Iterable[dict]) -> Set[str]:
    return {r.get("full_name", "").lower() for r in repos if r.get("private") and r.get("full_name")}

def repo_from_url(repository_url: Optional[str]) -> Tuple[str, str]:
    """`https://api.github.com/repos/owner/name` -> ("owner/name", "name")."""
    if not repository_url:
        return "", ""
    parts = repository_url.rstrip("/").split("/")
    if len(parts) < 2:
        return "", ""
    return f"{parts[-2]}/{parts[-1]}", parts[-1]
