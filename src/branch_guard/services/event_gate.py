"""Checks that the triggering event can be handled under the current configuration."""

import logging
from enum import Enum
from typing import Optional

from branch_guard.models.policy import ConfigurationError, PolicyConfig

logger = logging.getLogger(__name__)


class TriggerMode(str, Enum):
    """Workflow events this action runs under."""
    PULL_REQUEST = "pull_request"
    PULL_REQUEST_TARGET = "pull_request_target"


HANDLED_ACTIONS = ("opened", "edited")


def check_event(event_name: str, action: Optional[str], config: PolicyConfig, token: str) -> bool:
    """
    Decide whether this event should be evaluated.

    Args:
        event_name: Workflow trigger (GITHUB_EVENT_NAME)
        action: Pull request event action, None when not tracked
        config: Loaded policy configuration
        token: GitHub token ('' when absent)

    Returns:
        True to continue, False to stop quietly

    Raises:
        ConfigurationError: If the trigger cannot be used with this configuration
    """
    try:
        mode = TriggerMode(event_name)
    except ValueError:
        raise ConfigurationError("The event must be pull_request or pull_request_target")

    if config.remediation_enabled:
        if mode is not TriggerMode.PULL_REQUEST_TARGET:
            raise ConfigurationError("pull_request_target is required when using change-to or comment")
        if not token:
            raise ConfigurationError(
                "GITHUB_TOKEN must be set (as a environment variable) when using change-to or comment"
            )

    if action is not None and action not in HANDLED_ACTIONS:
        logger.info(f"Ignoring pull request action: {action}")
        return False

    return True
