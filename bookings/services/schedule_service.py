"""Schedule service - schedules and the availability of their issues.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime

from django.utils import timezone

from bookings.domain import OperatorId, Schedule, ScheduleId, ScheduleIssue
from bookings.domain import availability
from bookings.domain.availability import AvailabilityResult
from bookings.domain.errors import DuplicateNameError, InvalidInputError, ScheduleNotFoundError
from bookings.services._ids import parse_id
from bookings.stores.interfaces import ScheduleStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssueDraft:
    name: str
    close_date: datetime


class ScheduleService:
    """Service for schedules and issue availability."""

    def __init__(self, store: ScheduleStore, clock: Callable[[], datetime] = timezone.now) -> None:
        self._store = store
        self._clock = clock

    def list_schedules(self, operator_id: OperatorId, include_archived: bool = False) -> list[Schedule]:
        return self._store.list_schedules(operator_id, include_archived=include_archived)

    def get_schedule(self, operator_id: OperatorId, schedule_id: str) -> Schedule:
        """Return a schedule by ID.

        Raises:
            InvalidIdError: If the schedule_id is not a valid UUID.
            ScheduleNotFoundError: If the schedule does not exist.
        """
        schedule = self._store.get_schedule(
            operator_id, parse_id(ScheduleId, schedule_id, "schedule")
        )
        if schedule is None:
            raise ScheduleNotFoundError(schedule_id)
        return schedule

    def create_schedule(
        self, operator_id: OperatorId, name: str, issues: Sequence[IssueDraft]
    ) -> Schedule:
        name = self._clean_name(name)
        if self._store.exists_by_name_case_insensitive(operator_id, name):
            raise DuplicateNameError("schedule", name)

        schedule = Schedule(
            id=ScheduleId(uuid.uuid4()),
            operator_id=operator_id,
            name=name,
            issues=self._number_issues(issues),
        )
        saved = self._store.save_schedule(schedule)
        logger.info("Schedule %s created with %d issues", saved.id.value, len(saved.issues))
        return saved

    def update_schedule(
        self,
        operator_id: OperatorId,
        schedule_id: str,
        name: str,
        issues: Sequence[IssueDraft],
    ) -> Schedule:
        """Replace a schedule's name and issues.

        Raises:
            DuplicateNameError: If the new name is taken by another schedule.
            CloseDateLockedError: If the close date of a closed issue changes.
        """
        existing = self.get_schedule(operator_id, schedule_id)
        name = self._clean_name(name)
        if name != existing.name and self._store.exists_by_name_case_insensitive(
            operator_id, name, exclude=existing.id
        ):
            raise DuplicateNameError("schedule", name)

        proposed = self._number_issues(issues)
        availability.ensure_close_dates_unchanged(existing, proposed, self._clock())

        saved = self._store.save_schedule(replace(existing, name=name, issues=proposed))
        logger.info("Schedule %s updated", saved.id.value)
        return saved

    def toggle_archived(self, operator_id: OperatorId, schedule_id: str) -> Schedule:
        """Flip a schedule between archived and active.

        Raises:
            DuplicateNameError: If an active schedule took the name while this
                one was archived.
        """
        existing = self.get_schedule(operator_id, schedule_id)
        archived = not existing.archived
        if not archived and self._store.exists_by_name_case_insensitive(
            operator_id, existing.name, exclude=existing.id
        ):
            raise DuplicateNameError("schedule", existing.name)
        saved = self._store.save_schedule(replace(existing, archived=archived))
        logger.info("Schedule %s archived=%s", saved.id.value, archived)
        return saved

    def delete_schedule(self, operator_id: OperatorId, schedule_id: str) -> None:
        """Delete a schedule and its issues.

        Raises:
            ScheduleNotFoundError: If the schedule does not exist.
            RecordInUseError: If a magazine still follows the schedule.
        """
        key = parse_id(ScheduleId, schedule_id, "schedule")
        if not self._store.delete_schedule(operator_id, key):
            raise ScheduleNotFoundError(schedule_id)
        logger.info("Schedule %s deleted", schedule_id)

    def available_issues(self, operator_id: OperatorId, schedule_id: str) -> list[ScheduleIssue]:
        schedule = self.get_schedule(operator_id, schedule_id)
        return availability.available_issues(schedule, self._clock())

    def validate_issue(self, operator_id: OperatorId, issue_name: str) -> AvailabilityResult:
        return availability.check_availability(
            issue_name, self._store.list_schedules(operator_id), self._clock()
        )

    def current_open_issue(self, operator_id: OperatorId) -> str | None:
        return availability.current_open_issue(
            self._store.list_schedules(operator_id), self._clock()
        )

    @staticmethod
    def _clean_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("name", "is required")
        return name

    @staticmethod
    def _number_issues(issues: Sequence[IssueDraft]) -> tuple[ScheduleIssue, ...]:
        if not issues:
            raise InvalidInputError("issues", "must contain at least one issue")
        numbered = []
        for index, issue in enumerate(issues):
            issue_name = (issue.name or "").strip()
            if not issue_name:
                raise InvalidInputError("issues", "must all have a name")
            numbered.append(
                ScheduleIssue(name=issue_name, close_date=issue.close_date, sort_order=index)
            )
        return tuple(numbered)
