from __future__ import annotations

import pytest

from app.core.exceptions import ValidationError
from app.services.catalog import parse_catalog
from app.services.equipment_manifest import (
    EquipmentRequirement,
    EquipmentTotal,
    build_exercise_manifest,
    get_total_equipment,
    merge_equipment,
)

ROPE_1 = EquipmentRequirement("Rope", 1, True)
ROPE_2 = EquipmentRequirement("Rope", 2, True)
STOPWATCH = EquipmentRequirement("Stopwatch", 1, False)


def _catalog():
    return parse_catalog(
        {
            "exercises": [
                {
                    "id": 1,
                    "name": "Multitasking",
                    "sub_activities": [
                        {"id": 1, "name": "Egg Drop", "equipment": [{"item": "Egg", "quantity": 1}]},
                        {"id": 2, "name": "Rope Jump", "equipment": [{"item": "Rope", "quantity": 1}]},
                        {
                            "id": 3,
                            "name": "Knots",
                            "equipment": [
                                {"item": "Rope", "quantity": 1},
                                {"item": "Timer", "quantity": 1, "scalable": False},
                            ],
                        },
                    ],
                },
                {
                    "id": 2,
                    "name": "Three Islands",
                    "equipment": [
                        {"item": "Blindfolds", "quantity": 10},
                        {"item": "Stopwatch", "quantity": 1, "scalable": False},
                    ],
                },
            ]
        }
    )


def test_merge_sums_scalable_quantities():
    assert merge_equipment([[ROPE_1], [ROPE_2]]) == [EquipmentRequirement("Rope", 3, True)]


def test_merge_fixed_and_scalable_keeps_single_fixed_item():
    scalable_stopwatch = EquipmentRequirement("Stopwatch", 1, True)
    assert merge_equipment([[STOPWATCH], [scalable_stopwatch]]) == [
        EquipmentRequirement("Stopwatch", 1, False)
    ]


def test_merge_fixed_takes_larger_quantity():
    larger = EquipmentRequirement("Stopwatch", 3, True)
    assert merge_equipment([[STOPWATCH], [larger]]) == [EquipmentRequirement("Stopwatch", 3, False)]


def test_merge_keeps_first_encounter_order():
    egg = EquipmentRequirement("Egg", 1, True)
    merged = merge_equipment([[egg, ROPE_1], [STOPWATCH, ROPE_2, egg]])
    assert [r.item for r in merged] == ["Egg", "Rope", "Stopwatch"]


def test_merge_is_repeatable_and_does_not_mutate_inputs():
    lists = [[ROPE_1, STOPWATCH], [ROPE_2]]
    snapshot = [list(items) for items in lists]

    first = merge_equipment(lists)
    second = merge_equipment(lists)

    assert first == second
    assert lists == snapshot


def test_merge_of_nothing_is_empty():
    assert merge_equipment([]) == []
    assert merge_equipment([[], []]) == []


def test_total_scales_with_groups():
    assert get_total_equipment([ROPE_1], 4) == [EquipmentTotal("Rope", 4)]


def test_total_fixed_item_ignores_groups():
    assert get_total_equipment([STOPWATCH], 4) == [EquipmentTotal("Stopwatch", 1)]


@pytest.mark.parametrize("groups", [0, -3])
def test_total_treats_groups_below_one_as_one(groups):
    assert get_total_equipment([ROPE_2], groups) == [EquipmentTotal("Rope", 2)]


def test_total_preserves_input_order_and_display_name():
    totals = get_total_equipment([STOPWATCH, ROPE_2], 2)
    assert [t.display_name for t in totals] == ["Stopwatch: 1", "Rope: 4"]


def test_manifest_for_flat_exercise():
    exercise = _catalog().get_exercise(2)
    totals = build_exercise_manifest(exercise, None, 3)
    assert totals == [EquipmentTotal("Blindfolds", 30), EquipmentTotal("Stopwatch", 1)]


def test_manifest_merges_selected_sub_activities_in_catalog_order():
    exercise = _catalog().get_exercise(1)
    # Selection order does not matter: catalog order does
    totals = build_exercise_manifest(exercise, [3, 1], 2)
    assert totals == [
        EquipmentTotal("Egg", 2),
        EquipmentTotal("Rope", 2),
        EquipmentTotal("Timer", 1),
    ]


def test_manifest_merges_shared_items_across_sub_activities():
    exercise = _catalog().get_exercise(1)
    totals = build_exercise_manifest(exercise, [2, 3], 3)
    assert totals == [EquipmentTotal("Rope", 6), EquipmentTotal("Timer", 1)]


def test_manifest_requires_a_sub_activity_for_composite_exercise():
    exercise = _catalog().get_exercise(1)
    with pytest.raises(ValidationError):
        build_exercise_manifest(exercise, [], 1)


def test_manifest_rejects_unknown_sub_activity():
    exercise = _catalog().get_exercise(1)
    with pytest.raises(ValidationError):
        build_exercise_manifest(exercise, [1, 42], 1)
