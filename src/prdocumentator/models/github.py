"""
GitHub pull request webhook payload models.

Only the fields the analyzer reads are modelled; everything else in the
payload is ignored.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class GitHubUser(BaseModel):
    id: int = 0
    login: str = ""
    avatar_url: str = ""
    html_url: str = ""


class GitHubRepository(BaseModel):
    id: int = 0
    name: str = ""
    full_name: str = ""
    owner: GitHubUser = Field(default_factory=GitHubUser)
    html_url: str = ""
    clone_url: str = ""
    ssh_url: str = ""


class GitHubBranch(BaseModel):
    label: str = ""
    ref: str = ""
    sha: str = ""


class GitHubPullRequest(BaseModel):
    """A pull request as delivered in a webhook payload."""

    id: int = 0
    number: int = 0
    title: str = ""
    body: Optional[str] = None
    state: str = ""
    user: GitHubUser = Field(default_factory=GitHubUser)
    head: GitHubBranch = Field(default_factory=GitHubBranch)
    base: GitHubBranch = Field(default_factory=GitHubBranch)
    diff_url: str = ""
    patch_url: str = ""
    html_url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None


class PullRequestEvent(BaseModel):
    """A ``pull_request`` webhook event.

    Attributes:
        action: Webhook action (opened, synchronize, reopened, closed, ...)
        number: Pull request number
        pull_request: Pull request details, including ``diff_url``
        repository: Repository the pull request belongs to
        sender: User that triggered the event
        diff: Inline diff text; when set, ``diff_url`` is not fetched
    """

    action: str = ""
    number: int = 0
    pull_request: GitHubPullRequest = Field(default_factory=GitHubPullRequest)
    repository: GitHubRepository = Field(default_factory=GitHubRepository)
    sender: GitHubUser = Field(default_factory=GitHubUser)
    diff: Optional[str] = None

    @classmethod
    def manual(cls, diff: str, source: str = "manual") -> "PullRequestEvent":
        """Wrap a raw diff so it flows through the same pipeline as a webhook."""
        return cls(
            action="opened",
            pull_request=GitHubPullRequest(
                number=1,
                title=f"{source.title()} Analysis",
                body=f"Analysis triggered via {source}",
                diff_url=source,
            ),
            repository=GitHubRepository(full_name=f"{source}/analysis"),
            diff=diff,
        )
