"""
Script: heroku_deploy/arguments.py
What: Resolves the target app, artifact path, and API token for one run.
Doing: Reads either `--app=`/`--artifact=` flags plus `HEROKU_API_TOKEN`, or GitHub Action inputs.
Why: The same pipeline runs from a workflow step and from a developer shell.
Goal: Produce one immutable `Arguments` value, or a clear usage error before any network call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from heroku_deploy.common import DeployToolError, get_input, optional_env, require_env
from heroku_deploy.environments import NoMatchingEnvironment, match_environment, parse_environments

TOKEN_ENV = "HEROKU_API_TOKEN"
USAGE = "usage: python3 -m heroku_deploy.cli --app=<your app> --artifact=<path>"
# Direct shell use passes exactly `--app=...` and `--artifact=...`.
CLI_ARGUMENT_COUNT = 2
SHORT_SHA_LENGTH = 7
REF_PREFIXES = ("refs/heads/", "refs/tags/")


class UsageError(DeployToolError):
    """Raised when required arguments are missing."""

    def __init__(self, message: str, *, show_usage: bool = True) -> None:
        self.show_usage = show_usage
        super().__init__(message)


@dataclass(frozen=True)
class Arguments:
    artifact_path: str
    token: str
    app: str
    # Optional build version label sent with the build request.
    version: str | None = None


def read_flag(argv: Sequence[str], label: str) -> str | None:
    """Return the value of a `label=value` token, or None when absent."""
    for token in argv:
        parts = token.split("=")
        if len(parts) == 2 and parts[0] == label:
            return parts[1]
    return None


def is_cli_invocation(argv: Sequence[str]) -> bool:
    return len(argv) == CLI_ARGUMENT_COUNT


def cli_arguments(argv: Sequence[str]) -> Arguments:
    app = read_flag(argv, "--app")
    artifact_path = read_flag(argv, "--artifact")
    if not app or not artifact_path:
        raise UsageError("not enough arguments provided.")

    token = optional_env(TOKEN_ENV)
    if not token:
        raise UsageError(f"{TOKEN_ENV} not set in the environment.", show_usage=False)

    return Arguments(artifact_path=artifact_path, token=token, app=app)


def ref_display_name(ref: str) -> str:
    """Shorten `refs/heads/main` to `main` for display."""
    for prefix in REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix):]
    return ref


def build_version_label() -> str | None:
    """
    Build a human-readable version label from the workflow run context.

    Example: `main 1a2b3c4 by octocat`. Returns None outside GitHub Actions.
    """
    ref = optional_env("GITHUB_REF")
    sha = optional_env("GITHUB_SHA")
    actor = optional_env("GITHUB_ACTOR")
    if not (ref and sha and actor):
        return None
    ref_name = optional_env("GITHUB_REF_NAME") or ref_display_name(ref)
    return f"{ref_name} {sha[:SHORT_SHA_LENGTH]} by {actor}"


def resolve_app_from_environments(rules: str) -> str:
    """Match the current `GITHUB_REF` against the `environments` rules."""
    matchers = parse_environments(rules)
    ref = require_env("GITHUB_REF")
    app = match_environment(matchers, ref)
    if app is None:
        raise NoMatchingEnvironment(ref)
    print(f"Ref '{ref}' matched environment app '{app}'")
    return app


def action_arguments() -> Arguments:
    # `artifact` is the older input name; prefer `artifact-path`.
    artifact_path = get_input("artifact-path") or get_input("artifact")
    token = get_input("token")
    app = get_input("app")

    if not app:
        rules = get_input("environments")
        if not rules:
            raise UsageError("either the 'app' or the 'environments' input is required.")
        app = resolve_app_from_environments(rules)

    return Arguments(
        artifact_path=artifact_path,
        token=token,
        app=app,
        version=build_version_label(),
    )


def resolve_arguments(argv: Sequence[str]) -> Arguments:
    """
    Pick the argument source and resolve `Arguments`.

    `argv` excludes the program name. Exactly two tokens means direct shell
    use; anything else is treated as a GitHub Action run.
    """
    if is_cli_invocation(argv):
        return cli_arguments(argv)
    return action_arguments()
