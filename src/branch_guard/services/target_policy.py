"""Target and source branch checks."""

import logging

from branch_guard.models.policy import PolicyConfig
from branch_guard.models.pull_request import PullRequestEvent, PullRequestRef
from branch_guard.utils.patterns import matches_any

logger = logging.getLogger(__name__)


class PolicyViolation(Exception):
    """Exception raised when a PR targets the wrong branch and nothing is configured to fix it."""
    pass


def is_required_target(base: PullRequestRef, config: PolicyConfig) -> bool:
    """True if the base branch is one of the required targets (any base when none are configured)."""
    if not config.required_targets:
        return True
    return matches_any(config.required_targets, base, allow_label_form=False, same_repository=True)


def is_wrong_target(event: PullRequestEvent, config: PolicyConfig) -> bool:
    """
    Decide whether the PR's source is on a disallowed path.

    Args:
        event: Triggering pull request event
        config: Loaded policy configuration

    Returns:
        True if the PR should not be targeting its base branch
    """
    same_repository = event.same_repository

    if config.include_patterns and not matches_any(
        config.include_patterns, event.head, allow_label_form=True, same_repository=same_repository
    ):
        logger.info("This repository/branch is not included")
        return False

    if matches_any(config.exclude_patterns, event.head, allow_label_form=True, same_repository=same_repository):
        logger.info("This repository/branch is excluded")
        return False

    return True
