"""
Pull request values as reported by `gh pr list --json`.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List

# Field set requested from gh; anything else in the response is ignored.
PR_JSON_FIELDS = "number,title,state,author,createdAt,headRefName"


@dataclass(frozen=True)
class Author:
    login: str


@dataclass(frozen=True)
class PullRequest:
    """One pull request, kept exactly as gh reported it."""

    number: int
    title: str
    state: str
    author: Author
    created_at: str
    head_ref_name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PullRequest":
        """Build from one gh JSON record.

        Unknown keys are ignored. Missing or mistyped required keys raise
        ValueError.
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected object, got {type(data).__name__}")

        try:
            number = data["number"]
            title = data["title"]
            state = data["state"]
            author = data["author"]
            created_at = data["createdAt"]
            head_ref_name = data["headRefName"]
        except KeyError as e:
            raise ValueError(f"missing field {e.args[0]!r}") from None

        if isinstance(number, bool) or not isinstance(number, int) or number < 0:
            raise ValueError(f"invalid PR number {number!r}")
        if not isinstance(author, dict) or not isinstance(author.get("login"), str):
            raise ValueError("author.login missing")
        for name, value in (("title", title), ("state", state),
                            ("createdAt", created_at), ("headRefName", head_ref_name)):
            if not isinstance(value, str):
                raise ValueError(f"{name} is not a string")

        return cls(
            number=number,
            title=title,
            state=state,
            author=Author(login=author["login"]),
            created_at=created_at,
            head_ref_name=head_ref_name,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to gh's JSON shape."""
        return {
            "number": self.number,
            "title": self.title,
            "state": self.state,
            "author": {"login": self.author.login},
            "createdAt": self.created_at,
            "headRefName": self.head_ref_name,
        }


def parse_pull_requests(text: str) -> List[PullRequest]:
    """Parse the JSON array printed by `gh pr list --json ...`.

    The whole list is rejected if any record is malformed, so a caller
    never ends up with a partial list.

    Raises:
        ValueError: If text is not a JSON array of PR records
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid JSON: {e}") from None

    if not isinstance(data, list):
        raise ValueError(f"expected array, got {type(data).__name__}")

    return [PullRequest.from_dict(item) for item in data]
