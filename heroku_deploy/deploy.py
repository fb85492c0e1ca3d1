"""
Script: heroku_deploy/deploy.py
What: Runs one artifact deploy from resolved arguments to a started Heroku build.
Doing: Creates a source slot, uploads the artifact bytes, starts the build, and writes step outputs.
Why: Keeps the ordered three-call sequence in one place, separate from exit handling.
Goal: Return a `RunResult` that says exactly how the run ended.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

from heroku_deploy.arguments import Arguments, UsageError, resolve_arguments
from heroku_deploy.client import HerokuClient
from heroku_deploy.common import DeployToolError, optional_env, write_github_outputs
from heroku_deploy.environments import EnvironmentRulesError, NoMatchingEnvironment
from heroku_deploy.outcome import RunResult, RunStatus


def read_artifact(artifact_path: str) -> bytes:
    """Read the whole artifact into memory."""
    try:
        return Path(artifact_path).read_bytes()
    except OSError as exc:
        raise DeployToolError(f"Failed to read artifact {artifact_path}: {exc.strerror or exc}") from exc


def deploy(arguments: Arguments, client: HerokuClient) -> dict:
    """
    Upload the artifact and start a build; return the build JSON.

    Each step must finish before the next one starts. The first failure
    stops the run and nothing is rolled back.
    """
    print(f"Starting deployment for app '{arguments.app}' using artifact '{arguments.artifact_path}'")

    source_blob = client.create_source(arguments.app)
    artifact_data = read_artifact(arguments.artifact_path)
    client.upload_artifact(source_blob.put_url, artifact_data)
    print("Artifact uploaded.")

    build = client.create_build(arguments.app, source_blob.get_url, version=arguments.version)
    print("Success!")
    if build.get("id"):
        print(f"Build {build['id']} started (status: {build.get('status', 'unknown')})")
    return build


def _write_outputs_if_available(values: dict[str, str]) -> None:
    # Outside GitHub Actions there is no step output file to write.
    if optional_env("GITHUB_OUTPUT"):
        write_github_outputs(values)


def run(
    argv: Sequence[str],
    client_factory: Callable[[str], HerokuClient] = HerokuClient,
) -> RunResult:
    """
    Resolve arguments and deploy.

    `client_factory` receives the API token; tests pass a factory that
    builds a client on a mock transport.
    """
    try:
        arguments = resolve_arguments(argv)
    except UsageError as exc:
        return RunResult(RunStatus.USAGE_ERROR, str(exc), show_usage=exc.show_usage)
    except EnvironmentRulesError as exc:
        return RunResult(RunStatus.VALIDATION_ERROR, str(exc), details=exc.errors)
    except NoMatchingEnvironment as exc:
        _write_outputs_if_available({"deployed": "false"})
        return RunResult(RunStatus.NO_OP, str(exc))
    except DeployToolError as exc:
        return RunResult(RunStatus.RUNTIME_ERROR, str(exc))

    try:
        with client_factory(arguments.token) as client:
            build = deploy(arguments, client)
    except DeployToolError as exc:
        return RunResult(RunStatus.RUNTIME_ERROR, str(exc))

    _write_outputs_if_available(
        {
            "deployed": "true",
            "app": arguments.app,
            "build_id": str(build.get("id") or ""),
            "build_status": str(build.get("status") or ""),
        }
    )
    return RunResult(RunStatus.SUCCESS, build=build)
