"""Branch pattern parsing and matching.

A pattern string takes one of three forms, decided once when the
configuration is loaded:

* ``/regex/`` - a regular expression, searched (unanchored) in the label, or in
  the bare ref when labels are not in play
* ``owner:branch`` - an exact repository-qualified label
* ``branch`` - an exact bare branch name
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Union

from branch_guard.models.pull_request import PullRequestRef


class PatternError(ValueError):
    """Exception raised for patterns that cannot be parsed."""
    pass


@dataclass(frozen=True)
class RegexPattern:
    raw: str
    regex: re.Pattern


@dataclass(frozen=True)
class LabelPattern:
    raw: str


@dataclass(frozen=True)
class RefPattern:
    raw: str


BranchPattern = Union[RegexPattern, LabelPattern, RefPattern]


def parse_pattern(raw: str) -> BranchPattern:
    """
    Classify a raw pattern string.

    Args:
        raw: Pattern as written in the configuration

    Returns:
        RegexPattern, LabelPattern or RefPattern

    Raises:
        PatternError: If the pattern is empty or the regular expression is invalid
    """
    if not raw:
        raise PatternError("Pattern cannot be empty")

    if len(raw) >= 2 and raw.startswith("/") and raw.endswith("/"):
        try:
            return RegexPattern(raw=raw, regex=re.compile(raw[1:-1]))
        except re.error as e:
            raise PatternError(f"Invalid regular expression {raw}: {e}")

    if ":" in raw:
        return LabelPattern(raw=raw)
    return RefPattern(raw=raw)


def parse_patterns(value: Union[str, Iterable[str], None]) -> List[BranchPattern]:
    """Parse a space-separated string (or an iterable of strings) into patterns."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split()
    return [parse_pattern(item.strip()) for item in value if item.strip()]


def matches(pattern: BranchPattern, ref: PullRequestRef, allow_label_form: bool, same_repository: bool) -> bool:
    """
    Test a single pattern against a pull request ref.

    Args:
        pattern: Parsed pattern
        ref: Base or head ref of the pull request
        allow_label_form: Match regexes against the label and accept label patterns
        same_repository: Whether the ref lives in the base repository

    Returns:
        True if the pattern matches
    """
    if isinstance(pattern, RegexPattern):
        if not allow_label_form:
            return pattern.regex.search(ref.ref) is not None
        return pattern.regex.search(ref.label) is not None

    if isinstance(pattern, LabelPattern):
        return allow_label_form and pattern.raw == ref.label

    # A bare branch name is only trusted across forks when labels are not in play
    if same_repository or not allow_label_form:
        return pattern.raw == ref.ref
    return False


def matches_any(patterns: Iterable[BranchPattern], ref: PullRequestRef, allow_label_form: bool, same_repository: bool) -> bool:
    """True if any pattern matches; False for an empty collection."""
    return any(matches(pattern, ref, allow_label_form, same_repository) for pattern in patterns)
