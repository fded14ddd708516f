import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from rollover.config import RunConfig, resolve_config
from rollover.errors import ConfigError
from rollover.github.client import GitHubClient
from rollover.reconcile import ReconcileResult, reconcile
from rollover.trace.store_jsonl import JsonlTraceStore

logger = logging.getLogger(__name__)


def configure_logging(verbosity: int):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def fail(message: str):
    """Report a failed run and exit non-zero."""
    if os.getenv("GITHUB_ACTIONS") == "true":
        print(f"::error::{message}")
    print(f"✗ Error: {message}", file=sys.stderr)
    sys.exit(1)


def execute(config: RunConfig, dry_run: bool, trace_path: Optional[Path]) -> ReconcileResult:
    client = GitHubClient(config.token, base_url=config.api_url)
    trace_store = JsonlTraceStore(trace_path) if trace_path else None
    try:
        return reconcile(
            client,
            config.repo,
            config.milestone,
            config.issues_count,
            dry_run=dry_run,
            trace_store=trace_store,
        )
    finally:
        if trace_store is not None:
            trace_store.close()


def print_plan(result: ReconcileResult):
    plan = result.plan
    print(f"Milestone {plan.milestone} ({plan.title}) in {plan.repo.full_name}: {len(plan.actions)} open issue(s)")
    if plan.create_label:
        print(f"  create label '{plan.label}'")
    target = plan.target_milestone if plan.target_milestone is not None else "none"
    for action in plan.actions:
        label_step = f"add '{plan.label}'" if action.add_label else "keep labels"
        print(f"  #{action.number}: {label_step}, milestone -> {target}")


def cmd_run(args, dry_run: bool = False):
    try:
        config = resolve_config(
            repo=args.repo,
            milestone=args.milestone,
            issues_count=args.issues_count,
            token=args.token,
            api_url=args.api_url,
        )
    except ConfigError as e:
        fail(str(e))

    dry_run = dry_run or getattr(args, "dry_run", False)
    try:
        result = execute(config, dry_run, args.trace)
    except Exception as e:
        logger.exception("Unexpected failure")
        fail(str(e))

    if not result.ok:
        fail(str(result.error))
    if dry_run:
        print_plan(result)


def cmd_plan(args):
    cmd_run(args, dry_run=True)


def main(argv=None):
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--repo", help="Repository (owner/name). Default: GITHUB_REPOSITORY")
    common.add_argument("--milestone", help="Milestone number to close out. Default: INPUT_MILESTONE")
    common.add_argument("--issues-count", help="Maximum open issues to fetch. Default: INPUT_ISSUES-COUNT")
    common.add_argument("--token", help="GitHub token. Default: INPUT_GITHUB-TOKEN or GITHUB_TOKEN")
    common.add_argument("--api-url", help="GitHub API URL. Default: GITHUB_API_URL or https://api.github.com")
    common.add_argument("--trace", type=Path, help="Write a JSONL trace of the run to this path")
    common.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")

    parser = argparse.ArgumentParser(
        description="Rollover: label open issues of a finished milestone and move them to the next one"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    run_parser = subparsers.add_parser("run", parents=[common], help="Label and roll over open issues")
    run_parser.add_argument("--dry-run", action="store_true", help="Show what would change without mutating")

    subparsers.add_parser("plan", parents=[common], help="Show what a run would change")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.verbose)

    if args.command == "run":
        cmd_run(args)
    elif args.command == "plan":
        cmd_plan(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
