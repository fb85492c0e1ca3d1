"""
Script: heroku_deploy/common.py
What: Shared helper functions used by all `heroku_deploy` modules.
Doing: Wraps env reads, GitHub Action input reads, step output writes, and workflow annotations.
Why: Avoids duplicated helper code.
Goal: Keep behavior consistent across argument resolution, the pipeline, and the CLI.
"""

from __future__ import annotations

import os
from typing import Mapping


class DeployToolError(RuntimeError):
    """Raised when the deploy helper hits a known error condition."""


def require_env(name: str) -> str:
    """Return a required environment variable or raise a clear error."""
    value = os.environ.get(name)
    if value is None or value == "":
        raise DeployToolError(f"Missing required environment variable: {name}")
    return value


def optional_env(name: str, default: str = "") -> str:
    """Return an environment variable with a fallback default."""
    return os.environ.get(name, default)


def input_env_name(name: str) -> str:
    """
    Return the environment variable that carries one action input.

    The Actions runner exposes `with:` values as `INPUT_<NAME>`, upper-cased,
    with spaces turned into underscores. Dashes are kept, so `artifact-path`
    becomes `INPUT_ARTIFACT-PATH`.
    """
    return "INPUT_" + name.replace(" ", "_").upper()


def get_input(name: str) -> str:
    """Return one action input, stripped, or empty string when not given."""
    return os.environ.get(input_env_name(name), "").strip()


def write_github_outputs(values: Mapping[str, str]) -> None:
    """
    Write step outputs for GitHub Actions.

    GitHub provides a file path in `GITHUB_OUTPUT`; writing `name=value` lines
    there makes that value available to later steps in the same job.
    """
    output_file = require_env("GITHUB_OUTPUT")
    with open(output_file, "a", encoding="utf-8") as handle:
        for key, value in values.items():
            handle.write(f"{key}={value}\n")


def escape_annotation(message: str) -> str:
    # Workflow commands are line based; newlines must be percent-encoded.
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def annotate_warning(message: str) -> None:
    """Print a `::warning::` workflow command (shown as a yellow annotation)."""
    print(f"::warning::{escape_annotation(message)}")


def annotate_error(message: str) -> None:
    """Print an `::error::` workflow command (shown as a red annotation)."""
    print(f"::error::{escape_annotation(message)}")
