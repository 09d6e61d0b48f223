"""Remediation of pull requests that target the wrong branch."""

import logging
from enum import Enum
from typing import Callable, Dict, Optional

from branch_guard.models.outcome import RemediationOutcome
from branch_guard.models.policy import AlreadyExistsAction, PolicyConfig
from branch_guard.models.pull_request import ExistingPullRequest, PullRequestEvent
from branch_guard.services.github_service import GitHubService

logger = logging.getLogger(__name__)


class DuplicatePullRequestError(Exception):
    """Exception raised when a duplicate PR exists and the configured action is ``error``."""
    pass


class RemediationState(str, Enum):
    """States of a remediation run."""
    IDLE = "idle"
    EVALUATING_DUPLICATE = "evaluating_duplicate"
    REDIRECTING = "redirecting"
    BLOCKED = "blocked"
    SKIPPED = "skipped"
    COMMENTING = "commenting"
    DONE = "done"


def render_template(template: str, pull_request: ExistingPullRequest) -> str:
    """Substitute ``{number}`` and ``{url}`` with a pull request's number and link."""
    return template.replace("{number}", str(pull_request.number)).replace("{url}", pull_request.html_url)


class RemediationService:
    """Redirects and/or comments on a PR, reconciling with an already-open duplicate."""

    def __init__(self, github_service: GitHubService, config: PolicyConfig, event: PullRequestEvent,
                 outcome: Optional[RemediationOutcome] = None):
        """
        Initialize a single remediation run.

        Args:
            github_service: Host API used for all side effects
            config: Loaded policy configuration
            event: Triggering pull request event
            outcome: Outcome to record results into (a fresh one when omitted)
        """
        self.github_service = github_service
        self.config = config
        self.event = event
        self.outcome = outcome if outcome is not None else RemediationOutcome()
        self.owner = event.base.repository_owner
        self.repo = event.base.repository_name
        self.existing_pr: Optional[ExistingPullRequest] = None
        self.state = RemediationState.IDLE
        self._handlers: Dict[RemediationState, Callable[[], RemediationState]] = {
            RemediationState.IDLE: self._start,
            RemediationState.EVALUATING_DUPLICATE: self._evaluate_duplicate,
            RemediationState.REDIRECTING: self._redirect,
            RemediationState.BLOCKED: self._stop,
            RemediationState.SKIPPED: self._stop,
            RemediationState.COMMENTING: self._comment,
        }

    @property
    def current_pr(self) -> ExistingPullRequest:
        return ExistingPullRequest(number=self.event.number, html_url=self.event.html_url)

    def run(self) -> RemediationOutcome:
        """
        Drive the state machine to completion.

        Returns:
            The populated RemediationOutcome

        Raises:
            DuplicatePullRequestError: If a duplicate exists and the action is ``error``
            GitHubAPIError: If any host call fails
        """
        while self.state is not RemediationState.DONE:
            self.state = self.transition(self.state)
        return self.outcome

    def transition(self, state: RemediationState) -> RemediationState:
        """Run the work of ``state`` and return the next state."""
        logger.debug(f"Remediation state: {state.value}")
        return self._handlers[state]()

    def _start(self) -> RemediationState:
        if self.config.change_to:
            return RemediationState.EVALUATING_DUPLICATE
        return RemediationState.COMMENTING

    def _evaluate_duplicate(self) -> RemediationState:
        pulls = self.github_service.list_pull_requests(
            self.owner, self.repo, head=self.event.head.label, base=self.config.change_to, state='open'
        )
        duplicates = [
            ExistingPullRequest.from_api(pull) for pull in pulls if pull.get('number') != self.event.number
        ]
        if not duplicates:
            self.outcome.pr_already_exists = False
            return RemediationState.REDIRECTING

        self.existing_pr = duplicates[0]
        self.outcome.pr_already_exists = True
        logger.info(f"A pull request already exists for {self.event.head.label} -> {self.config.change_to}: "
                    f"#{self.existing_pr.number}")

        if self.config.already_exists_comment:
            body = render_template(self.config.already_exists_comment, self.existing_pr)
            self._post_comment(body)

        return self._resolve_duplicate(self.config.already_exists_action)

    def _resolve_duplicate(self, action: AlreadyExistsAction) -> RemediationState:
        if action is AlreadyExistsAction.ERROR:
            raise DuplicatePullRequestError(
                f"A pull request from {self.event.head.label} to {self.config.change_to} already exists: "
                f"#{self.existing_pr.number} {self.existing_pr.html_url}".rstrip()
            )

        if action is AlreadyExistsAction.CLOSE_THIS:
            self.github_service.update_pull_request(self.owner, self.repo, self.event.number, state='closed')
            logger.info(f"Closed this pull request #{self.event.number}")
            return RemediationState.BLOCKED

        if action in (AlreadyExistsAction.CLOSE_OTHER, AlreadyExistsAction.CLOSE_OTHER_CONTINUE):
            if self.config.already_exists_other_comment:
                body = render_template(self.config.already_exists_other_comment, self.current_pr)
                self.github_service.create_comment(self.owner, self.repo, self.existing_pr.number, body)
                logger.info(f"Commented on #{self.existing_pr.number}: {body}")
            self.github_service.update_pull_request(self.owner, self.repo, self.existing_pr.number, state='closed')
            logger.info(f"Closed other pull request #{self.existing_pr.number}")
            if action is AlreadyExistsAction.CLOSE_OTHER_CONTINUE:
                return RemediationState.REDIRECTING
            return RemediationState.BLOCKED

        if action is AlreadyExistsAction.UNRECOGNIZED:
            logger.warning(f"Unrecognized already-exists-action: {self.config.already_exists_action_input}")

        return RemediationState.BLOCKED

    def _redirect(self) -> RemediationState:
        change_to = self.config.change_to
        if change_to == self.event.head.ref:
            logger.info("Not changing base because it would be the same as the head")
            return RemediationState.SKIPPED

        self.github_service.update_pull_request(self.owner, self.repo, self.event.number, base=change_to)
        self.outcome.new_target = change_to
        logger.info(f"Changed the branch to {change_to}")
        return RemediationState.COMMENTING

    def _comment(self) -> RemediationState:
        if self.config.comment:
            self._post_comment(self.config.comment)
        return RemediationState.DONE

    def _stop(self) -> RemediationState:
        return RemediationState.DONE

    def _post_comment(self, body: str) -> None:
        self.github_service.create_comment(self.owner, self.repo, self.event.number, body)
        self.outcome.record_comment(body)
        logger.info(f"Commented: {body}")
