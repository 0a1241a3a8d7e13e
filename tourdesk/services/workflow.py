"""Admin-triggered status transitions and per-status tallies.

Transitions are only ever triggered by an explicit admin action through the
action gate; there are no automatic transitions. Tallies are recomputed by
scanning the live collection on every read.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Iterable, Mapping, TypeVar

from tourdesk.data.errors import TourdeskError
from tourdesk.domain.models import AgencyStatus, ReportStatus
from tourdesk.services.gate import ConfirmPrompt

S = TypeVar("S", bound=Enum)


class TransitionError(TourdeskError):
    """Raised when a status change is not allowed from the current status."""


@dataclass(frozen=True)
class StatusPhrase:
    """Wording used when confirming and reporting a transition to one status.

    ``{target}`` in the templates is replaced with the entity label.
    """

    title: str
    question: str
    confirm_label: str
    done: str
    destructive: bool = False


class StatusWorkflow(Generic[S]):
    """Validates transitions within a closed status vocabulary.

    Example:
        >>> workflow = REPORT_WORKFLOW
        >>> workflow.check(ReportStatus.PENDING, ReportStatus.REVIEWED)
        >>> workflow.tally(reports)
        {<ReportStatus.PENDING: 'pending'>: 3, <ReportStatus.REVIEWED: 'reviewed'>: 2, ...}
    """

    def __init__(self, status_type: type[S], phrases: Mapping[S, StatusPhrase], field: str = "status"):
        self.status_type = status_type
        self._phrases = dict(phrases)
        self.field = field

    @property
    def targets(self) -> list[S]:
        """Statuses an admin can move an entity to."""
        return list(self._phrases)

    def coerce(self, status) -> S:
        """Accept an enum member or its wire value."""
        if isinstance(status, self.status_type):
            return status
        try:
            return self.status_type(status)
        except ValueError:
            raise TransitionError(f"Unknown status: {status!r}") from None

    def check(self, current: S, target: S) -> None:
        """Raise TransitionError unless ``current -> target`` is allowed."""
        if target not in self._phrases:
            raise TransitionError(f"Cannot set status to {target.value}")
        if not current.can_transition_to(target):
            raise TransitionError(f"Already {current.value}")

    def status_of(self, entity) -> S:
        return getattr(entity, self.field)

    def prompt(self, target: S, label: str) -> ConfirmPrompt:
        phrase = self._phrases[target]
        return ConfirmPrompt(
            title=phrase.title,
            text=phrase.question.format(target=label),
            confirm_label=phrase.confirm_label,
            destructive=phrase.destructive,
        )

    def done_message(self, target: S, label: str) -> str:
        return self._phrases[target].done.format(target=label)

    def tally(self, collection: Iterable) -> dict[S, int]:
        """Count entities per status; every status appears, zero if unused."""
        counts = Counter(self.status_of(e) for e in collection)
        return {status: counts.get(status, 0) for status in self.status_type}

    def count(self, collection: Iterable, status: S) -> int:
        return sum(1 for e in collection if self.status_of(e) == status)


REPORT_WORKFLOW: StatusWorkflow[ReportStatus] = StatusWorkflow(
    ReportStatus,
    {
        ReportStatus.PENDING: StatusPhrase(
            title="Mark as Pending",
            question="Are you sure you want to mark {target} as pending?",
            confirm_label="Yes, mark as pending!",
            done="{target} has been marked as pending.",
        ),
        ReportStatus.REVIEWED: StatusPhrase(
            title="Mark as Reviewed",
            question="Are you sure you want to mark {target} as reviewed?",
            confirm_label="Yes, mark as reviewed!",
            done="{target} has been marked as reviewed.",
        ),
        ReportStatus.IGNORED: StatusPhrase(
            title="Mark as Ignored",
            question="Are you sure you want to mark {target} as ignored?",
            confirm_label="Yes, mark as ignored!",
            done="{target} has been marked as ignored.",
            destructive=True,
        ),
    },
)

AGENCY_WORKFLOW: StatusWorkflow[AgencyStatus] = StatusWorkflow(
    AgencyStatus,
    {
        AgencyStatus.APPROVED: StatusPhrase(
            title="Approve Agency",
            question="Are you sure you want to approve {target}?",
            confirm_label="Yes, approve it!",
            done="{target} has been approved successfully.",
        ),
        AgencyStatus.REJECTED: StatusPhrase(
            title="Reject Agency",
            question="Are you sure you want to reject {target}?",
            confirm_label="Yes, reject it!",
            done="{target} has been rejected successfully.",
            destructive=True,
        ),
    },
)

