"""Routes for creating reading plans and tracking their completion."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Path, Query, Response

from app.auth import get_current_user_dependency
from app.config import get_settings
from app.models.schemas import (
    ReadingPlanCreate,
    ReadingPlanUpdate,
    ReadingPlanResponse,
    ReadingPlanProgressResponse,
)
from app.services.reading_plan_service import (
    ReadingPlanService,
    get_reading_plan_service,
)
from app.utils.exceptions import ValidationError

router = APIRouter(prefix="/api/plans", tags=["reading-plans"])

settings = get_settings()


def parse_if_match(value: Optional[str]) -> Optional[int]:
    """Plan version from an If-Match header; accepts 3, "3" and W/"3"."""
    if value is None:
        return None
    tag = value.strip()
    if tag.startswith("W/"):
        tag = tag[2:]
    tag = tag.strip('"')
    try:
        return int(tag)
    except ValueError:
        raise ValidationError("If-Match must carry the plan version") from None


def _set_etag(response: Response, plan: dict) -> dict:
    response.headers["ETag"] = f'"{plan["version"]}"'
    return plan


@router.post("", response_model=ReadingPlanResponse, status_code=201)
async def create_reading_plan(
    payload: ReadingPlanCreate,
    response: Response,
    current_user=Depends(get_current_user_dependency),
    service: ReadingPlanService = Depends(get_reading_plan_service),
):
    plan = service.create_plan(
        user_id=current_user["id"],
        name=payload.name,
        start_book=payload.start_book,
        start_chapter=payload.start_chapter,
        end_book=payload.end_book,
        end_chapter=payload.end_chapter,
        start_date=payload.start_date,
        duration_in_days=payload.duration_in_days,
        is_public=payload.is_public,
        shared_with=payload.shared_with,
    )
    return _set_etag(response, plan)


@router.get("", response_model=List[ReadingPlanResponse])
async def list_reading_plans(
    limit: int = Query(default=50, ge=1, le=settings.plan_list_limit_max),
    current_user=Depends(get_current_user_dependency),
    service: ReadingPlanService = Depends(get_reading_plan_service),
):
    return service.list_plans(current_user["id"], limit=limit)


@router.get("/{plan_id}", response_model=ReadingPlanResponse)
async def get_reading_plan(
    response: Response,
    plan_id: int = Path(..., ge=1),
    current_user=Depends(get_current_user_dependency),
    service: ReadingPlanService = Depends(get_reading_plan_service),
):
    return _set_etag(response, service.get_plan(user_id=current_user["id"], plan_id=plan_id))


@router.put("/{plan_id}", response_model=ReadingPlanResponse)
async def update_reading_plan(
    payload: ReadingPlanUpdate,
    response: Response,
    plan_id: int = Path(..., ge=1),
    current_user=Depends(get_current_user_dependency),
    service: ReadingPlanService = Depends(get_reading_plan_service),
):
    plan = service.update_plan(
        user_id=current_user["id"],
        plan_id=plan_id,
        name=payload.name,
        status=payload.status,
        is_public=payload.is_public,
        expected_version=payload.version,
    )
    return _set_etag(response, plan)


@router.delete("/{plan_id}", status_code=204)
async def delete_reading_plan(
    plan_id: int = Path(..., ge=1),
    current_user=Depends(get_current_user_dependency),
    service: ReadingPlanService = Depends(get_reading_plan_service),
):
    service.delete_plan(user_id=current_user["id"], plan_id=plan_id)
    return Response(status_code=204)


@router.post("/{plan_id}/days/{day_number}/complete", response_model=ReadingPlanResponse)
async def complete_reading_plan_day(
    response: Response,
    plan_id: int = Path(..., ge=1),
    day_number: int = Path(...),
    if_match: Optional[str] = Header(default=None, alias="If-Match"),
    current_user=Depends(get_current_user_dependency),
    service: ReadingPlanService = Depends(get_reading_plan_service),
):
    plan = service.mark_day_complete(
        user_id=current_user["id"],
        plan_id=plan_id,
        day_number=day_number,
        expected_version=parse_if_match(if_match),
    )
    return _set_etag(response, plan)


@router.get("/{plan_id}/progress", response_model=ReadingPlanProgressResponse)
async def get_reading_plan_progress(
    plan_id: int = Path(..., ge=1),
    current_user=Depends(get_current_user_dependency),
    service: ReadingPlanService = Depends(get_reading_plan_service),
):
    return service.get_progress(user_id=current_user["id"], plan_id=plan_id)
