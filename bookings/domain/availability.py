"""Issue availability: whether an issue still takes new bookings.

Every function works on a snapshot of schedules and an explicit ``now``;
nothing here reads the clock or caches a decision.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from bookings.domain.errors import CloseDateLockedError
from bookings.domain.models import Schedule, ScheduleIssue

UNCONSTRAINED_MESSAGE = "Issue is available (no schedule restrictions)"
AVAILABLE_MESSAGE = "Issue is available for booking"


@dataclass(frozen=True)
class AvailabilityResult:
    """Outcome of an availability check.

    A closed result carries the schedule and close date that closed it.
    """

    issue_name: str
    available: bool
    message: str
    schedule_name: str | None = None
    close_date: datetime | None = None

    @property
    def closed(self) -> bool:
        return not self.available

    @classmethod
    def unconstrained(cls, issue_name: str) -> "AvailabilityResult":
        return cls(issue_name=issue_name, available=True, message=UNCONSTRAINED_MESSAGE)

    @classmethod
    def open(cls, issue_name: str) -> "AvailabilityResult":
        return cls(issue_name=issue_name, available=True, message=AVAILABLE_MESSAGE)

    @classmethod
    def closed_by(
        cls, issue_name: str, schedule: Schedule, issue: ScheduleIssue
    ) -> "AvailabilityResult":
        return cls(
            issue_name=issue_name,
            available=False,
            message=(
                f'Issue "{issue_name}" is closed. '
                f"Close date was {format_close_date(issue.close_date)}."
            ),
            schedule_name=schedule.name,
            close_date=issue.close_date,
        )


def format_close_date(close_date: datetime) -> str:
    """Render a close date as e.g. ``Mon Oct 19 2026``."""
    return close_date.strftime("%a %b %d %Y")


def is_past(close_date: datetime, now: datetime) -> bool:
    return close_date < now


def check_availability(
    issue_name: str, schedules: Iterable[Schedule], now: datetime
) -> AvailabilityResult:
    """Decide whether ``issue_name`` is open for booking at ``now``.

    Issues no active schedule knows about are always bookable. Otherwise the
    first schedule (in iteration order) whose copy of the issue has closed
    is reported.
    """
    constrained = False
    for schedule in schedules:
        if schedule.archived:
            continue
        issue = schedule.issue(issue_name)
        if issue is None:
            continue
        constrained = True
        if is_past(issue.close_date, now):
            return AvailabilityResult.closed_by(issue_name, schedule, issue)

    if not constrained:
        return AvailabilityResult.unconstrained(issue_name)
    return AvailabilityResult.open(issue_name)


def first_closed(
    issue_names: Iterable[str], schedules: Sequence[Schedule], now: datetime
) -> AvailabilityResult | None:
    """Check each distinct issue name once; return the first closed result."""
    seen: set[str] = set()
    for name in issue_names:
        if name in seen:
            continue
        seen.add(name)
        result = check_availability(name, schedules, now)
        if result.closed:
            return result
    return None


def current_open_issue(schedules: Iterable[Schedule], now: datetime) -> str | None:
    """Name of the issue whose close date is the soonest one not yet passed."""
    best: ScheduleIssue | None = None
    for schedule in schedules:
        if schedule.archived:
            continue
        for issue in schedule.ordered_issues():
            if is_past(issue.close_date, now):
                continue
            if best is None or issue.close_date < best.close_date:
                best = issue
    return best.name if best is not None else None


def current_or_nearest_issue(schedule: Schedule | None, now: datetime) -> str | None:
    """First issue of ``schedule`` still open, else its last issue.

    Unlike ``current_open_issue`` this never comes back empty while the
    schedule has issues.
    """
    if schedule is None or not schedule.issues:
        return None
    ordered = schedule.ordered_issues()
    for issue in ordered:
        if not is_past(issue.close_date, now):
            return issue.name
    return ordered[-1].name


def available_issues(schedule: Schedule, now: datetime) -> list[ScheduleIssue]:
    return [issue for issue in schedule.ordered_issues() if not is_past(issue.close_date, now)]


def ensure_close_dates_unchanged(
    existing: Schedule, proposed: Iterable[ScheduleIssue], now: datetime
) -> None:
    """Reject edits to the close date of an issue that has already closed.

    Raises:
        CloseDateLockedError: For the first proposed issue whose stored
            counterpart closed before ``now`` and whose date differs.
    """
    for issue in proposed:
        stored = existing.issue(issue.name)
        if stored is None or not is_past(stored.close_date, now):
            continue
        if issue.close_date != stored.close_date:
            raise CloseDateLockedError(issue.name)
