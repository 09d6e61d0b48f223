"""
Entry point for the branch policy action.
"""

import logging
import sys
from typing import Optional

from branch_guard.models.outcome import RemediationOutcome
from branch_guard.models.policy import ConfigurationError, PolicyConfig
from branch_guard.models.pull_request import PullRequestEvent
from branch_guard.services.event_gate import check_event
from branch_guard.services.github_service import GitHubService
from branch_guard.services.remediation_service import RemediationService
from branch_guard.services.target_policy import PolicyViolation, is_required_target, is_wrong_target
from branch_guard.utils.action_io import ActionIO, get_github_token

logger = logging.getLogger(__name__)


def run(io: Optional[ActionIO] = None, github_service: Optional[GitHubService] = None) -> RemediationOutcome:
    """
    Evaluate the triggering pull request against the branch policy and remediate it.

    Any error is reported through ``io.set_failed``; outputs determined before
    the error are still written.

    Args:
        io: Runner I/O (reads the process environment when omitted)
        github_service: Host API client (built from GITHUB_TOKEN when omitted)

    Returns:
        The RemediationOutcome of the run
    """
    io = io or ActionIO()
    outcome = RemediationOutcome()

    try:
        config = PolicyConfig.from_inputs(io.get_input)
        token = get_github_token(io.env)
        payload = io.load_event_payload()

        if not check_event(io.event_name, payload.get('action'), config, token):
            return outcome

        try:
            event = PullRequestEvent.from_payload(io.event_name, payload)
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Event payload does not describe a pull request: {e}")

        if not is_required_target(event.base, config):
            logger.info(f"Base branch {event.base.ref} is not a required target")
            return outcome

        outcome.wrong_target = is_wrong_target(event, config)
        if not outcome.wrong_target:
            return outcome

        if not config.remediation_enabled:
            raise PolicyViolation("This PR was submitted to the wrong branch")

        github_service = github_service or GitHubService(token)
        RemediationService(github_service, config, event, outcome).run()

    except Exception as e:
        logger.error(f"Branch policy run failed: {e}")
        io.set_failed(str(e))

    finally:
        try:
            io.set_outputs(outcome.to_outputs())
        except Exception as e:
            logger.error(f"Failed to write outputs: {e}")
            io.set_failed(f"Failed to write outputs: {e}")

    return outcome


def main() -> int:
    """Console entry point."""
    logging.basicConfig(level=logging.INFO, format='%(message)s', stream=sys.stdout)
    io = ActionIO()
    run(io)
    return io.exit_code
