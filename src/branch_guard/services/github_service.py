import os
import logging
from typing import Optional, Dict, Any, List
import requests


logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """Exception raised when a GitHub REST call fails."""
    pass


class GitHubService:
    """Service for the GitHub pull request and issue comment API calls."""

    def __init__(self, access_token: str, api_base_url: Optional[str] = None, timeout: int = 30):
        """Initialize GitHub service with a token and the REST API root."""
        self.access_token = access_token
        self.api_base_url = (api_base_url or self._get_api_base_url()).rstrip('/')
        self.timeout = timeout

    def _get_api_base_url(self) -> str:
        """Get GitHub REST API root from environment (set by Actions on GHES)."""
        return os.getenv('GITHUB_API_URL', 'https://api.github.com')

    def _headers(self) -> Dict[str, str]:
        return {
            'Authorization': f'Bearer {self.access_token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'pr-branch-guard/1.0'
        }

    def _check_response(self, response: requests.Response, what: str) -> None:
        """Map error statuses to GitHubAPIError with GitHub's own message where available."""
        if response.status_code < 400:
            return

        try:
            body = response.json()
        except ValueError:
            body = None
        detail = body.get('message', '') if isinstance(body, dict) else ''
        suffix = f": {detail}" if detail else ""

        if response.status_code == 404:
            raise GitHubAPIError(f"Not found: {what}{suffix}")
        elif response.status_code == 403:
            raise GitHubAPIError(f"Access denied: {what}{suffix}")
        elif response.status_code == 422:
            raise GitHubAPIError(f"Validation failed: {what}{suffix}")

        response.raise_for_status()

    def list_pull_requests(self, owner: str, repo: str, head: str, base: str, state: str = 'open') -> List[Dict[str, Any]]:
        """
        List pull requests filtered by head label, base branch and state.

        Args:
            owner: Repository owner
            repo: Repository name
            head: Head label in ``user:ref`` form
            base: Base branch name
            state: Pull request state filter

        Returns:
            Pull request objects from GitHub API

        Raises:
            GitHubAPIError: If the API request fails
        """
        what = f"{owner}/{repo} pulls (head={head}, base={base})"
        try:
            url = f"{self.api_base_url}/repos/{owner}/{repo}/pulls"
            response = requests.get(
                url,
                headers=self._headers(),
                params={'head': head, 'base': base, 'state': state},
                timeout=self.timeout
            )
            self._check_response(response, what)
            pulls = response.json()

            logger.debug(f"Found {len(pulls)} pull requests: {what}")
            return pulls

        except requests.RequestException as e:
            logger.error(f"GitHub API request failed: {e}")
            raise GitHubAPIError(f"Failed to list pull requests: {e}")

    def update_pull_request(self, owner: str, repo: str, pull_number: int,
                            base: Optional[str] = None, state: Optional[str] = None) -> Dict[str, Any]:
        """
        Change a pull request's base branch and/or state.

        Args:
            owner: Repository owner
            repo: Repository name
            pull_number: Pull request number
            base: New base branch
            state: New state (``open`` or ``closed``)

        Returns:
            Updated pull request data from GitHub API

        Raises:
            GitHubAPIError: If the API request fails
        """
        payload = {}
        if base is not None:
            payload['base'] = base
        if state is not None:
            payload['state'] = state
        if not payload:
            raise ValueError("update_pull_request needs base or state")

        what = f"{owner}/{repo}/pull/{pull_number}"
        try:
            url = f"{self.api_base_url}/repos/{owner}/{repo}/pulls/{pull_number}"
            response = requests.patch(url, headers=self._headers(), json=payload, timeout=self.timeout)
            self._check_response(response, what)

            logger.debug(f"Updated {what}: {payload}")
            return response.json()

        except requests.RequestException as e:
            logger.error(f"GitHub API request failed: {e}")
            raise GitHubAPIError(f"Failed to update pull request {what}: {e}")

    def create_comment(self, owner: str, repo: str, issue_number: int, body: str) -> Dict[str, Any]:
        """
        Post a comment on a pull request (through the issues API).

        Args:
            owner: Repository owner
            repo: Repository name
            issue_number: Pull request number
            body: Comment text

        Returns:
            Created comment data from GitHub API

        Raises:
            GitHubAPIError: If the API request fails
        """
        what = f"{owner}/{repo}/issues/{issue_number}"
        try:
            url = f"{self.api_base_url}/repos/{owner}/{repo}/issues/{issue_number}/comments"
            response = requests.post(url, headers=self._headers(), json={'body': body}, timeout=self.timeout)
            self._check_response(response, what)

            logger.debug(f"Created comment on {what}")
            return response.json()

        except requests.RequestException as e:
            logger.error(f"GitHub API request failed: {e}")
            raise GitHubAPIError(f"Failed to create comment on {what}: {e}")
