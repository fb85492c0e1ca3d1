from __future__ import annotations

import sys

from heroku_deploy.arguments import USAGE
from heroku_deploy.common import annotate_error, annotate_warning
from heroku_deploy.deploy import run
from heroku_deploy.outcome import RunResult, RunStatus


def report(result: RunResult) -> None:
    """Print how the run ended, in the form each kind of ending expects."""
    if result.status is RunStatus.USAGE_ERROR:
        print(f"error: {result.message}", file=sys.stderr)
        if result.show_usage:
            print(USAGE, file=sys.stderr)
    elif result.status is RunStatus.VALIDATION_ERROR:
        for detail in result.details:
            print(f"error: {detail}", file=sys.stderr)
        print(f"error: {result.message}", file=sys.stderr)
    elif result.status is RunStatus.NO_OP:
        annotate_warning(result.message)
    elif result.status is RunStatus.RUNTIME_ERROR:
        # Same effect as `core.setFailed` in a JavaScript action: red annotation, failed step.
        annotate_error(result.message)


def main(argv: list[str] | None = None) -> None:
    if argv is None:
        argv = sys.argv[1:]

    result = run(argv)
    report(result)
    if not result.ok:
        raise SystemExit(result.exit_code)


if __name__ == "__main__":
    main()
