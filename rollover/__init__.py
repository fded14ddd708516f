"""Rollover: close out a milestone by labeling and moving its open issues."""

from rollover.config import RepoRef, RunConfig, resolve_config
from rollover.errors import AlreadyExists, ConfigError, NotFound, RemoteFailure, RolloverError
from rollover.reconcile import (
    IssueAction,
    ReconcilePlan,
    ReconcileResult,
    has_missed_label,
    missed_label_name,
    plan_reconciliation,
    reconcile,
)

__all__ = [
    "RepoRef",
    "RunConfig",
    "resolve_config",
    "RolloverError",
    "ConfigError",
    "NotFound",
    "RemoteFailure",
    "AlreadyExists",
    "IssueAction",
    "ReconcilePlan",
    "ReconcileResult",
    "has_missed_label",
    "missed_label_name",
    "plan_reconciliation",
    "reconcile",
]
