"""Dashboard analytics routes."""

from fastapi import APIRouter, Depends

from learnhub.core.dependencies import AnalyticsManagerDep
from learnhub.core.permissions import enforce_ownership, require
from learnhub.schemas.analytics import PlatformOverview, TeacherOverview

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


@router.get("/overview", response_model=PlatformOverview, summary="Platform overview")
def platform_overview(
    analytics_manager: AnalyticsManagerDep,
    current_user=Depends(require("analytics:overview")),
) -> PlatformOverview:
    return PlatformOverview.model_validate(analytics_manager.overview())


@router.get(
    "/teacher/{teacher_id}",
    response_model=TeacherOverview,
    summary="Teacher course statistics",
)
def teacher_overview(
    teacher_id: int,
    analytics_manager: AnalyticsManagerDep,
    current_user=Depends(require("analytics:teacher")),
) -> TeacherOverview:
    enforce_ownership("analytics:teacher", current_user, teacher_id)
    return TeacherOverview.model_validate(analytics_manager.teacher_overview(teacher_id))
