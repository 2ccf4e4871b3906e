"""Unit type registry: resolves ledger entry types to a direction."""

from __future__ import annotations

from typing import Iterable, Mapping

from payroll_accrual.calculators.types import Direction

# Overtime is always paid out, whatever the registry says
OVERTIME_TYPES = frozenset({"OT", "Overtime"})


class UnitTypeRegistry:
    """Maps unit type names to directions at read time.

    Resolution order:
    1. ``OT`` / ``Overtime`` -> addition (hard-coded, registry rows ignored)
    2. A registered name -> its direction
    3. Anything else (including types deleted since the entry was written)
       -> deduction

    Directions are looked up when the ledger is read, so editing a type's
    direction re-classifies its historical entries.
    """

    def __init__(
        self,
        directions: Mapping[str, Direction | str] | None = None,
        insurance_types: Iterable[str] = ("Insurance",),
    ):
        self._directions: dict[str, Direction] = {
            name: Direction(direction) for name, direction in (directions or {}).items()
        }
        self._insurance = frozenset(t.strip().lower() for t in insurance_types)

    @classmethod
    def from_unit_types(
        cls,
        unit_types: Iterable[object],
        insurance_types: Iterable[str] = ("Insurance",),
    ) -> UnitTypeRegistry:
        """Build from objects exposing ``name`` and ``direction``."""
        return cls(
            {ut.name: ut.direction for ut in unit_types},  # type: ignore[attr-defined]
            insurance_types=insurance_types,
        )

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._directions

    def direction_of(self, type_name: str) -> Direction:
        """Resolve the direction of a unit type name."""
        if type_name in OVERTIME_TYPES:
            return Direction.ADDITION
        return self._directions.get(type_name, Direction.DEDUCTION)

    def is_addition(self, type_name: str) -> bool:
        return self.direction_of(type_name) is Direction.ADDITION

    def is_insurance(self, type_name: str) -> bool:
        """Insurance deductions are reported separately as well as totalled."""
        return (
            not self.is_addition(type_name)
            and type_name.strip().lower() in self._insurance
        )

    def to_canonical_dict(self, type_names: Iterable[str]) -> dict[str, str]:
        """Directions actually used for the given names, for fingerprinting."""
        return {name: self.direction_of(name).value for name in sorted(set(type_names))}
