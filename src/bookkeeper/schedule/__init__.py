"""Reading plans: pages-per-day targets and finish-date projections."""

from .manager import PlanManager, PlanProjection, project_plan
from .models import ReadingPlan
from .schemas import ReadingPlanRequest, ReadingPlanResponse

__all__ = [
    "PlanManager",
    "PlanProjection",
    "project_plan",
    "ReadingPlan",
    "ReadingPlanRequest",
    "ReadingPlanResponse",
]
