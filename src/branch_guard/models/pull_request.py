"""Pull request data models built from GitHub event payloads."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class PullRequestRef(BaseModel):
    """One side (base or head) of a pull request, as seen in the triggering event."""

    repository_id: Optional[int] = Field(default=None, description="Repository ID")
    repository_owner: Optional[str] = Field(default=None, description="Repository owner login")
    repository_name: Optional[str] = Field(default=None, description="Repository name")
    ref: str = Field(..., description="Branch name")
    label: str = Field(..., description="Repository-qualified branch, owner:ref")

    class Config:
        """Pydantic configuration."""
        frozen = True

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> 'PullRequestRef':
        """Create instance from the ``base``/``head`` object of a pull_request payload."""
        # head.repo is null when the fork has been deleted
        repo = data.get('repo') or {}
        owner = repo.get('owner') or {}
        return cls(
            repository_id=repo.get('id'),
            repository_owner=owner.get('login'),
            repository_name=repo.get('name'),
            ref=data['ref'],
            label=data.get('label') or data['ref'],
        )

    def same_repository(self, other: 'PullRequestRef') -> bool:
        """True when both refs live in the same repository."""
        if self.repository_id is None or other.repository_id is None:
            return False
        return self.repository_id == other.repository_id


class PullRequestEvent(BaseModel):
    """Snapshot of the pull request event that triggered this run."""

    number: int = Field(..., description="Pull request number")
    html_url: str = Field(default="", description="Pull request web URL")
    base: PullRequestRef = Field(..., description="Destination of the pull request")
    head: PullRequestRef = Field(..., description="Source of the pull request")
    action: Optional[str] = Field(default=None, description="Event action (opened, edited, ...)")
    trigger_mode: str = Field(..., description="Workflow event name")

    class Config:
        """Pydantic configuration."""
        frozen = True

    @classmethod
    def from_payload(cls, event_name: str, payload: Dict[str, Any]) -> 'PullRequestEvent':
        """Create instance from a GitHub ``pull_request``/``pull_request_target`` payload."""
        pull_request = payload['pull_request']
        return cls(
            number=pull_request['number'],
            html_url=pull_request.get('html_url', ''),
            base=PullRequestRef.from_payload(pull_request['base']),
            head=PullRequestRef.from_payload(pull_request['head']),
            action=payload.get('action'),
            trigger_mode=event_name,
        )

    @property
    def same_repository(self) -> bool:
        return self.head.same_repository(self.base)


class ExistingPullRequest(BaseModel):
    """An open pull request returned by the GitHub API."""

    number: int = Field(..., description="Pull request number")
    html_url: str = Field(default="", description="Pull request web URL")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'ExistingPullRequest':
        return cls(number=data['number'], html_url=data.get('html_url', ''))
