"""GitHub integration for reading milestones and updating issues."""

from rollover.github.client import GitHubClient
from rollover.github.models import Issue, Label, Milestone

__all__ = ["GitHubClient", "Issue", "Label", "Milestone"]
