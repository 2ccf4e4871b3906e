"""Base salary resolution over effective-dated salary changes."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

from payroll_accrual.calculators.types import SalaryChangeEntry


@dataclass(frozen=True)
class SalarySegment:
    """A run of days paid at one salary rate."""

    start: date
    end: date
    salary: Decimal


class SalaryHistory:
    """Ordered index over one employee's salary changes.

    Changes are kept sorted by ``effective_date`` (ties keep insertion order)
    and looked up with binary search, so historical months stay reproducible
    after the live salary has moved on.

    Salary in effect on a day:
    1. Newest change effective on or before the day -> its ``new_salary``
    2. Otherwise the earliest later change -> its ``old_salary``
    3. Otherwise the employee's current ``base_salary``
    """

    def __init__(
        self,
        base_salary: Decimal | None,
        changes: Iterable[SalaryChangeEntry] = (),
    ):
        self.base_salary = base_salary
        self._changes = sorted(changes, key=lambda c: c.effective_date)
        self._dates = [c.effective_date for c in self._changes]

    def __len__(self) -> int:
        return len(self._changes)

    def salary_as_of(self, day: date) -> Decimal | None:
        """Resolve the salary in effect on a day.

        Returns None only when there is neither history nor a base salary.
        """
        idx = bisect_right(self._dates, day)
        if idx > 0:
            return self._changes[idx - 1].new_salary
        if self._changes:
            return self._changes[0].old_salary
        return self.base_salary

    def changes_between(self, start: date, end: date) -> list[SalaryChangeEntry]:
        """Changes effective strictly after ``start`` and on or before ``end``."""
        lo = bisect_right(self._dates, start)
        hi = bisect_right(self._dates, end)
        return self._changes[lo:hi]

    def segments(self, start: date, end: date) -> list[SalarySegment]:
        """Split an inclusive date range at every salary change inside it."""
        if start > end:
            return []
        salary = self.salary_as_of(start)
        if salary is None:
            return []

        segments: list[SalarySegment] = []
        seg_start = start
        for change in self.changes_between(start, end):
            segments.append(
                SalarySegment(seg_start, change.effective_date - timedelta(days=1), salary)
            )
            salary = change.new_salary
            seg_start = change.effective_date
        segments.append(SalarySegment(seg_start, end, salary))
        return segments

    def to_canonical_list(self) -> list[dict[str, str]]:
        return [c.to_canonical_dict() for c in self._changes]
