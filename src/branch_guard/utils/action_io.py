"""GitHub Actions runner I/O: inputs, event context, outputs and failure reporting."""

import json
import logging
import os
import sys
import uuid
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, TextIO

logger = logging.getLogger(__name__)


def escape_command_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')


class ActionIO:
    """Reads the workflow context and reports results back to the runner."""

    def __init__(self, env: Optional[Mapping[str, str]] = None, stream: Optional[TextIO] = None):
        """
        Args:
            env: Environment to read from (defaults to os.environ)
            stream: Where workflow commands are written (defaults to stdout)
        """
        self.env = env if env is not None else os.environ
        self.stream = stream if stream is not None else sys.stdout
        self.outputs: Dict[str, str] = {}
        self.failure: Optional[str] = None

    def get_input(self, name: str) -> str:
        """Return an action input ('' when not set), as ``INPUT_<NAME>``."""
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        return self.env.get(key, '').strip()

    @property
    def event_name(self) -> str:
        return self.env.get('GITHUB_EVENT_NAME', '')

    def load_event_payload(self) -> Dict[str, Any]:
        """
        Load the webhook payload that triggered the workflow.

        Returns:
            Parsed payload, or an empty dict when no event file is configured
        """
        event_path = self.env.get('GITHUB_EVENT_PATH')
        if not event_path:
            logger.warning("GITHUB_EVENT_PATH is not set")
            return {}
        payload = json.loads(Path(event_path).read_text(encoding='utf-8'))
        return payload if isinstance(payload, dict) else {}

    def set_output(self, name: str, value: str) -> None:
        """Record an output and hand it to the runner through ``GITHUB_OUTPUT``."""
        self.outputs[name] = value

        output_path = self.env.get('GITHUB_OUTPUT')
        if not output_path:
            self.stream.write(f"::set-output name={name}::{escape_command_data(value)}\n")
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with open(output_path, 'a', encoding='utf-8') as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")

    def set_outputs(self, outputs: Mapping[str, str]) -> None:
        for name, value in outputs.items():
            self.set_output(name, value)

    def set_failed(self, message: str) -> None:
        """Mark the run as failed with a single human-readable message."""
        self.failure = message
        self.stream.write(f"::error::{escape_command_data(message)}\n")

    @property
    def exit_code(self) -> int:
        return 1 if self.failure is not None else 0


def get_github_token(env: Optional[Mapping[str, str]] = None) -> str:
    """Get the GitHub token from the environment ('' when absent)."""
    env = env if env is not None else os.environ
    return env.get('GITHUB_TOKEN', '').strip()
