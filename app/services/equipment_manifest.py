"""Equipment manifest arithmetic for workshop exercises.

Pure functions only: callers pass catalog requirements in and get new
values back. Nothing here touches the database.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from functools import reduce
from typing import TYPE_CHECKING

from app.core.exceptions import ValidationError

if TYPE_CHECKING:
    from app.services.catalog import Exercise


@dataclass(frozen=True)
class EquipmentRequirement:
    item: str
    quantity: int
    scalable: bool = True


@dataclass(frozen=True)
class EquipmentTotal:
    item: str
    total: int

    @property
    def display_name(self) -> str:
        return f"{self.item}: {self.total}"


def _combine(existing: EquipmentRequirement, incoming: EquipmentRequirement) -> EquipmentRequirement:
    if existing.scalable and incoming.scalable:
        return replace(existing, quantity=existing.quantity + incoming.quantity)
    # A fixed-quantity prop is never duplicated, only raised to the larger need
    return replace(
        existing,
        quantity=max(existing.quantity, incoming.quantity),
        scalable=False,
    )


def _fold(
    acc: Mapping[str, EquipmentRequirement], req: EquipmentRequirement
) -> dict[str, EquipmentRequirement]:
    merged = dict(acc)
    current = merged.get(req.item)
    merged[req.item] = req if current is None else _combine(current, req)
    return merged


def merge_equipment(
    item_lists: Iterable[Sequence[EquipmentRequirement]],
) -> list[EquipmentRequirement]:
    """Merge several requirement lists into one, keyed by item name.

    - both occurrences scalable: quantities are summed
    - either occurrence fixed: the larger quantity wins and the result is fixed

    Order follows the first time each name is seen.
    """

    flat = (req for items in item_lists for req in items)
    merged: dict[str, EquipmentRequirement] = reduce(_fold, flat, {})
    return list(merged.values())


def clamp_groups(num_groups: int | None) -> int:
    if num_groups is None or num_groups < 1:
        return 1
    return int(num_groups)


def get_total_equipment(
    requirements: Sequence[EquipmentRequirement], num_groups: int
) -> list[EquipmentTotal]:
    groups = clamp_groups(num_groups)
    return [
        EquipmentTotal(
            item=req.item,
            total=req.quantity * groups if req.scalable else req.quantity,
        )
        for req in requirements
    ]


def exercise_requirements(
    exercise: Exercise, sub_activity_ids: Iterable[int] | None = None
) -> list[EquipmentRequirement]:
    """Return the merged requirement list for an exercise selection.

    Composite exercises contribute the equipment of the selected
    sub-activities, taken in catalog order.
    """

    if not exercise.sub_activities:
        return list(exercise.equipment)

    selected = set(sub_activity_ids or ())
    if not selected:
        raise ValidationError(f"exercise {exercise.id} requires at least one sub-activity")
    known = {sub.id for sub in exercise.sub_activities}
    unknown = sorted(selected - known)
    if unknown:
        raise ValidationError(f"unknown sub-activities for exercise {exercise.id}: {unknown}")

    return merge_equipment(
        sub.equipment for sub in exercise.sub_activities if sub.id in selected
    )


def build_exercise_manifest(
    exercise: Exercise,
    sub_activity_ids: Iterable[int] | None,
    num_groups: int,
) -> list[EquipmentTotal]:
    return get_total_equipment(exercise_requirements(exercise, sub_activity_ids), num_groups)


__all__ = [
    "EquipmentRequirement",
    "EquipmentTotal",
    "build_exercise_manifest",
    "clamp_groups",
    "exercise_requirements",
    "get_total_equipment",
    "merge_equipment",
]
