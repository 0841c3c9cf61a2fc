"""Static exercise catalog loaded from ``configs/exercises.yaml``."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from app.core.config import get_settings
from app.core.exceptions import NotFoundError
from app.services.equipment_manifest import EquipmentRequirement

_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "exercises.yaml"


@dataclass(frozen=True)
class SubActivity:
    id: int
    name: str
    equipment: tuple[EquipmentRequirement, ...]


@dataclass(frozen=True)
class Exercise:
    id: int
    name: str
    equipment: tuple[EquipmentRequirement, ...] = ()
    sub_activities: tuple[SubActivity, ...] = ()
    options: tuple[str, ...] = ()
    notes: str | None = None

    @property
    def is_composite(self) -> bool:
        return bool(self.sub_activities)


@dataclass(frozen=True)
class ExerciseCatalog:
    exercises: tuple[Exercise, ...]
    _by_id: dict[int, Exercise] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_id", {ex.id: ex for ex in self.exercises})

    def list_exercises(self) -> list[Exercise]:
        return list(self.exercises)

    def get_exercise(self, exercise_id: int) -> Exercise:
        try:
            return self._by_id[exercise_id]
        except KeyError:
            raise NotFoundError(f"exercise {exercise_id} not found") from None


def _parse_requirements(raw: Any, where: str) -> tuple[EquipmentRequirement, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ValueError(f"{where}: equipment must be a list")
    out: list[EquipmentRequirement] = []
    for entry in raw:
        if not isinstance(entry, Mapping) or "item" not in entry:
            raise ValueError(f"{where}: equipment entries need an 'item'")
        quantity = int(entry.get("quantity", 1))
        if quantity < 0:
            raise ValueError(f"{where}: negative quantity for {entry['item']!r}")
        out.append(
            EquipmentRequirement(
                item=str(entry["item"]),
                quantity=quantity,
                scalable=bool(entry.get("scalable", True)),
            )
        )
    return tuple(out)


def _parse_exercise(raw: Mapping[str, Any]) -> Exercise:
    exercise_id = int(raw["id"])
    where = f"exercise {exercise_id}"
    subs = tuple(
        SubActivity(
            id=int(sub["id"]),
            name=str(sub["name"]),
            equipment=_parse_requirements(sub.get("equipment"), f"{where} sub {sub['id']}"),
        )
        for sub in raw.get("sub_activities") or ()
    )
    equipment = _parse_requirements(raw.get("equipment"), where)
    if subs and equipment:
        raise ValueError(f"{where}: define either equipment or sub_activities, not both")
    return Exercise(
        id=exercise_id,
        name=str(raw["name"]),
        equipment=equipment,
        sub_activities=subs,
        options=tuple(str(o) for o in raw.get("options") or ()),
        notes=raw.get("notes"),
    )


def parse_catalog(data: Any) -> ExerciseCatalog:
    if not isinstance(data, Mapping) or not isinstance(data.get("exercises"), list):
        raise ValueError("Invalid exercise catalog structure: expected 'exercises' list")
    exercises = tuple(_parse_exercise(raw) for raw in data["exercises"])
    ids = [ex.id for ex in exercises]
    if len(ids) != len(set(ids)):
        raise ValueError("Invalid exercise catalog: duplicate exercise ids")
    return ExerciseCatalog(exercises=exercises)


def _load_from_filesystem(path: Path) -> Any | None:
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _load_from_package() -> Any | None:
    try:
        resource = resources.files("configs").joinpath("exercises.yaml")
    except ModuleNotFoundError:
        return None
    if not resource.is_file():
        return None
    with resource.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_catalog(path: str | Path | None = None) -> ExerciseCatalog:
    """Read and validate the catalog YAML.

    Lookup order: explicit *path*, ``EXERCISE_CATALOG_PATH``, the repository
    ``configs/`` directory, then the installed ``configs`` package.
    """

    configured = path or get_settings().exercise_catalog_path
    candidate = Path(configured) if configured else _CONFIG_PATH
    data = _load_from_filesystem(candidate)
    if data is None and configured is None:
        data = _load_from_package()
    if data is None:
        raise FileNotFoundError(f"Exercise catalog not found: {candidate}")
    return parse_catalog(data)


_CATALOG: ExerciseCatalog | None = None


def get_catalog() -> ExerciseCatalog:
    global _CATALOG
    if _CATALOG is None:
        _CATALOG = load_catalog()
    return _CATALOG


__all__ = [
    "Exercise",
    "ExerciseCatalog",
    "SubActivity",
    "get_catalog",
    "load_catalog",
    "parse_catalog",
]
