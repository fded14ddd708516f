"""Response schema for the tracker's GraphQL API.

Every field a query selects is required, so a response missing one fails
validation instead of being read as empty.
"""

from typing import List, Optional

from pydantic import BaseModel


class Label(BaseModel):
    name: str


class LabelConnection(BaseModel):
    nodes: List[Label]


class Issue(BaseModel):
    """An open issue with the labels fetched alongside it."""

    number: int
    labels: LabelConnection

    @property
    def label_names(self) -> List[str]:
        return [label.name for label in self.labels.nodes]


class IssueConnection(BaseModel):
    nodes: List[Issue]


class MilestoneTitle(BaseModel):
    """Shape of the existence check, which selects only the title."""

    title: str


class Milestone(BaseModel):
    """A milestone with its open issues."""

    title: str
    issues: IssueConnection

    @property
    def open_issues(self) -> List[Issue]:
        return self.issues.nodes


class TitleRepository(BaseModel):
    milestone: Optional[MilestoneTitle]


class IssuesRepository(BaseModel):
    milestone: Optional[Milestone]


class CheckMilestoneData(BaseModel):
    """The `data` object of the existence check."""

    repository: TitleRepository


class MilestoneIssuesData(BaseModel):
    """The `data` object of the milestone issues query."""

    repository: IssuesRepository
