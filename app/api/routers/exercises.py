from __future__ import annotations

from fastapi import APIRouter, Depends

from app.schemas.common import ErrorResponse
from app.schemas.exercise import ExerciseOut, ManifestOut, ManifestRequest
from app.services.catalog import ExerciseCatalog, get_catalog
from app.services.equipment_manifest import build_exercise_manifest, clamp_groups

router = APIRouter(prefix="/exercises", tags=["exercises"])


@router.get("", response_model=list[ExerciseOut], summary="Exercise catalog")
async def list_exercises(catalog: ExerciseCatalog = Depends(get_catalog)):
    return catalog.list_exercises()


@router.get(
    "/{exercise_id}",
    response_model=ExerciseOut,
    responses={404: {"model": ErrorResponse}},
    summary="One exercise",
)
async def get_exercise(exercise_id: int, catalog: ExerciseCatalog = Depends(get_catalog)):
    return catalog.get_exercise(exercise_id)


@router.post(
    "/{exercise_id}/manifest",
    response_model=ManifestOut,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Preview equipment totals",
    description="Totals for the selected sub-activities and group count, without booking anything.",
)
async def preview_manifest(
    exercise_id: int,
    payload: ManifestRequest,
    catalog: ExerciseCatalog = Depends(get_catalog),
):
    exercise = catalog.get_exercise(exercise_id)
    totals = build_exercise_manifest(exercise, payload.sub_activity_ids, payload.num_groups)
    return {
        "exercise_id": exercise.id,
        "num_groups": clamp_groups(payload.num_groups),
        "items": totals,
    }
