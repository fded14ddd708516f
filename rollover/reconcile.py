"""Roll open issues of a finished milestone into the next one.

For milestone N the run reads two pieces of tracker state (whether N+1 exists,
and the open issues of N with their labels), derives one action per issue,
then applies it: the issue gets a "missed: v<title>" label unless it already
carries any missed label, and its milestone is set to N+1 or cleared.

All reads happen before the first write. The missed label is created before
any issue is labeled, and only when there is at least one issue. Failures stop
the run at the first error; mutations already applied stay applied.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple

from rollover.config import RepoRef
from rollover.errors import AlreadyExists, NotFound, RolloverError
from rollover.github.models import Milestone
from rollover.trace.schema import EventType, new_event
from rollover.trace.store_jsonl import JsonlTraceStore

logger = logging.getLogger(__name__)

MISSED_LABEL_PREFIX = "missed: v"
MISSED_LABEL_COLOR = "497E76"


class Tracker(Protocol):
    """The tracker operations a rollover run needs."""

    def milestone_exists(self, repo: RepoRef, number: int) -> bool:
        ...

    def get_milestone(self, repo: RepoRef, number: int, issues_count: int) -> Optional[Milestone]:
        ...

    def create_label(self, repo: RepoRef, name: str, color: str) -> Any:
        ...

    def add_labels(self, repo: RepoRef, issue_number: int, labels: List[str]) -> Any:
        ...

    def set_milestone(self, repo: RepoRef, issue_number: int, milestone: Optional[int]) -> Any:
        ...


@dataclass(frozen=True)
class IssueAction:
    number: int
    add_label: bool
    milestone: Optional[int]


@dataclass(frozen=True)
class ReconcilePlan:
    """Everything a run will do, derived from the tracker state it read."""

    repo: RepoRef
    milestone: int
    title: str
    next_exists: bool
    label: str
    actions: Tuple[IssueAction, ...]

    @property
    def create_label(self) -> bool:
        return bool(self.actions)

    @property
    def target_milestone(self) -> Optional[int]:
        return self.milestone + 1 if self.next_exists else None


@dataclass
class ReconcileResult:
    """Outcome of a run. A failed run carries its error instead of raising it."""

    plan: Optional[ReconcilePlan] = None
    applied: List[int] = field(default_factory=list)
    label_created: bool = False
    dry_run: bool = False
    error: Optional[RolloverError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def missed_label_name(title: str) -> str:
    return MISSED_LABEL_PREFIX + title


def has_missed_label(label_names: Iterable[str]) -> bool:
    """Return True if any label marks the issue as having missed a milestone.

    Any "missed: v" label counts, including ones from earlier milestones.
    """
    return any(MISSED_LABEL_PREFIX in name for name in label_names)


def plan_reconciliation(repo: RepoRef, milestone: int, next_exists: bool, target: Milestone) -> ReconcilePlan:
    """Derive the per-issue actions for a milestone.

    Args:
        repo: Repository reference.
        milestone: Number of the milestone being closed out.
        next_exists: Whether milestone + 1 exists.
        target: The milestone with its open issues.

    Returns:
        Plan with one action per fetched issue.
    """
    new_milestone = milestone + 1 if next_exists else None
    actions = tuple(
        IssueAction(
            number=issue.number,
            add_label=not has_missed_label(issue.label_names),
            milestone=new_milestone,
        )
        for issue in target.open_issues
    )
    return ReconcilePlan(
        repo=repo,
        milestone=milestone,
        title=target.title,
        next_exists=next_exists,
        label=missed_label_name(target.title),
        actions=actions,
    )


class _Recorder:
    """Write trace events when a store is configured."""

    def __init__(self, repo: RepoRef, store: Optional[JsonlTraceStore]):
        self.repo = repo
        self.store = store

    def __call__(self, event_type: EventType, payload: Dict[str, Any]):
        if self.store is not None:
            self.store.append(new_event(event_type, payload, repo=self.repo.full_name))


def _read_plan(client: Tracker, repo: RepoRef, milestone: int, issues_count: int, record: _Recorder) -> ReconcilePlan:
    record(EventType.TOOL_CALL, {"call": "milestone_exists", "milestone": milestone + 1})
    next_exists = client.milestone_exists(repo, milestone + 1)
    record(EventType.OBSERVATION, {"milestone": milestone + 1, "exists": next_exists})

    record(EventType.TOOL_CALL, {"call": "get_milestone", "milestone": milestone, "first": issues_count})
    target = client.get_milestone(repo, milestone, issues_count)
    if target is None:
        raise NotFound(f"Milestone {milestone} not found in {repo.full_name}")
    record(
        EventType.OBSERVATION,
        {"milestone": milestone, "title": target.title, "issue_count": len(target.open_issues)},
    )

    plan = plan_reconciliation(repo, milestone, next_exists, target)
    for action in plan.actions:
        record(
            EventType.DECISION,
            {"issue": action.number, "add_label": action.add_label, "milestone": action.milestone},
        )
    logger.info(
        "Milestone %d (%s) in %s: %d open issue(s), next milestone %s",
        milestone,
        plan.title,
        repo.full_name,
        len(plan.actions),
        "exists" if next_exists else "missing",
    )
    return plan


def _apply(client: Tracker, plan: ReconcilePlan, result: ReconcileResult, record: _Recorder):
    if not plan.create_label:
        logger.info("No open issues in milestone %d, nothing to do", plan.milestone)
        return

    record(EventType.TOOL_CALL, {"call": "create_label", "label": plan.label, "color": MISSED_LABEL_COLOR})
    try:
        client.create_label(plan.repo, plan.label, MISSED_LABEL_COLOR)
        result.label_created = True
        logger.info("Created label '%s'", plan.label)
    except AlreadyExists:
        logger.debug("Label '%s' already exists", plan.label)

    for action in plan.actions:
        if action.add_label:
            record(EventType.TOOL_CALL, {"call": "add_labels", "issue": action.number, "labels": [plan.label]})
            client.add_labels(plan.repo, action.number, [plan.label])
        else:
            logger.debug("Issue #%d already has a missed label", action.number)

        record(EventType.TOOL_CALL, {"call": "set_milestone", "issue": action.number, "milestone": action.milestone})
        client.set_milestone(plan.repo, action.number, action.milestone)
        result.applied.append(action.number)
        logger.info(
            "Issue #%d: %s, milestone -> %s",
            action.number,
            "labeled" if action.add_label else "already labeled",
            action.milestone if action.milestone is not None else "none",
        )


def reconcile(
    client: Tracker,
    repo: RepoRef,
    milestone: int,
    issues_count: int,
    dry_run: bool = False,
    trace_store: Optional[JsonlTraceStore] = None,
) -> ReconcileResult:
    """Label and roll over the open issues of a milestone.

    Args:
        client: Tracker client.
        repo: Repository reference.
        milestone: Number of the milestone being closed out.
        issues_count: Maximum number of open issues to process.
        dry_run: Compute the plan without mutating anything.
        trace_store: Optional store receiving trace events.

    Returns:
        Result holding the plan, the issues fully processed, and the error that
        stopped the run, if any.
    """
    record = _Recorder(repo, trace_store)
    result = ReconcileResult(dry_run=dry_run)
    try:
        result.plan = _read_plan(client, repo, milestone, issues_count, record)
        if not dry_run:
            _apply(client, result.plan, result, record)
    except RolloverError as e:
        logger.error("Rollover of milestone %d in %s failed: %s", milestone, repo.full_name, e)
        record(EventType.ERROR, {"error": type(e).__name__, "message": str(e), "applied": list(result.applied)})
        result.error = e
    return result
