"""
Script: heroku_deploy/environments.py
What: Parses branch-to-app rules and picks the app for the current ref.
Doing: Reads `/regex/ -> app-name` lines, validates every line, and matches the ref in rule order.
Why: Lets one workflow deploy different branches to different Heroku apps without YAML branching.
Goal: Resolve exactly one target app, or refuse to deploy when the rules are broken.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from heroku_deploy.common import DeployToolError

RULE_SEPARATOR = "->"


class EnvironmentRulesError(DeployToolError):
    """Raised when one or more rule lines are malformed."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = tuple(errors)
        count = len(self.errors)
        noun = "error" if count == 1 else "errors"
        super().__init__(f"Found {count} syntax {noun} in environments rules; nothing was deployed.")


class NoMatchingEnvironment(DeployToolError):
    """Raised when no rule matches the current ref."""

    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"No environment rule matches ref '{ref}'; skipping deployment.")


@dataclass(frozen=True)
class EnvironmentMatcher:
    regex: re.Pattern[str]
    app: str

    def matches(self, ref: str) -> bool:
        return self.regex.search(ref) is not None


def parse_rule(line: str) -> EnvironmentMatcher:
    """
    Parse one `/regex/ -> app-name` line.

    Raises `ValueError` with a short reason when the line is malformed.
    """
    parts = line.split(RULE_SEPARATOR)
    if len(parts) != 2:
        raise ValueError(f"expected exactly one '{RULE_SEPARATOR}' separator")

    pattern_text = parts[0].strip()
    app = parts[1].strip()

    if len(pattern_text) < 2 or not (pattern_text.startswith("/") and pattern_text.endswith("/")):
        raise ValueError(f"pattern must be wrapped in slashes, got '{pattern_text}'")
    if not app:
        raise ValueError("missing app name")
    if " " in app:
        raise ValueError(f"app name must not contain spaces, got '{app}'")

    body = pattern_text[1:-1]
    try:
        regex = re.compile(body)
    except re.error as exc:
        raise ValueError(f"invalid regular expression /{body}/: {exc}") from exc

    return EnvironmentMatcher(regex=regex, app=app)


def parse_environments(text: str) -> list[EnvironmentMatcher]:
    """
    Parse every rule line and return matchers in file order.

    All lines are checked before failing so one run reports every broken rule.
    """
    matchers: list[EnvironmentMatcher] = []
    errors: list[str] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            matchers.append(parse_rule(line))
        except ValueError as exc:
            errors.append(f"line {line_number}: {exc}: {line.strip()}")

    if errors:
        raise EnvironmentRulesError(errors)
    return matchers


def match_environment(matchers: Sequence[EnvironmentMatcher], ref: str) -> str | None:
    """Return the app of the first matcher that matches `ref` (first match wins)."""
    for matcher in matchers:
        if matcher.matches(ref):
            return matcher.app
    return None
