"""
KPI API endpoints.

Admin-facing member performance views: the overall KPI of one workspace's
members and the paginated team report across every administered workspace.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from workspace_kpi.api.deps import INTERNAL_ERROR, AppSettings, CurrentUser, KpiService
from workspace_kpi.core.exceptions import AuthorizationError, KpiServiceError, NotFoundError
from workspace_kpi.core.logger import setup_logger
from workspace_kpi.utils.query_params import (
    parse_limit,
    parse_page,
    parse_uuid,
    resolve_date_range,
)

logger = setup_logger(__name__)

router = APIRouter()

WORKSPACE_ID_REQUIRED = "Workspace ID is required"

_STATUS_BY_ERROR = [
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
]


def to_http_exception(exc: KpiServiceError) -> HTTPException:
    """Map a service error to its HTTP status; anything else is a bare 500."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    logger.error(f"KPI request failed: {exc.message}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=INTERNAL_ERROR,
    )


@router.get("/overall-kpi")
async def get_overall_kpi(
    user: CurrentUser,
    service: KpiService,
    workspace_id: Optional[str] = Query(None, alias="workspaceId", description="Workspace ID"),
):
    """Overall KPI for every non-customer member of a workspace. Admins only."""
    if not workspace_id or not workspace_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=WORKSPACE_ID_REQUIRED,
        )
    parsed_id = parse_uuid(workspace_id)
    if parsed_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid workspace ID",
        )

    try:
        members = await service.build_workspace_overall_kpi(user.id, parsed_id)
    except KpiServiceError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logger.exception(f"Unexpected error computing overall KPI for workspace {parsed_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR,
        ) from exc

    return {"data": [member.model_dump(mode="json") for member in members]}


@router.get("/team-overall-kpi")
async def get_team_overall_kpi(
    user: CurrentUser,
    service: KpiService,
    settings: AppSettings,
    workspace_id: Optional[str] = Query(None, alias="workspaceId", description="Narrow to one administered workspace"),
    page: Optional[str] = Query(None, description="1-based page number"),
    limit: Optional[str] = Query(None, description="Members per page"),
    start_date: Optional[str] = Query(None, alias="startDate", description="Created-at lower bound (date)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Created-at upper bound (date)"),
):
    """Team KPI report across every workspace the caller administers."""
    page_number = parse_page(page)
    page_size = parse_limit(
        limit,
        default=settings.TEAM_KPI_DEFAULT_LIMIT,
        maximum=settings.TEAM_KPI_MAX_LIMIT,
    )
    date_range = resolve_date_range(start_date, end_date)

    try:
        report = await service.build_team_report(
            user.id,
            filter_workspace_id=parse_uuid(workspace_id),
            page=page_number,
            limit=page_size,
            date_range=date_range,
        )
    except KpiServiceError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logger.exception(f"Unexpected error building team KPI report for {user.id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR,
        ) from exc

    return {"data": report.model_dump(mode="json")}
