from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..api.deps import get_activity_service, present_params
from ..core.auth import require_role
from ..models.user import UserRoleEnum
from ..schemas.activity import ActivityList
from ..schemas.common import ApiResponse
from ..services.activity_service import ActivityService

router = APIRouter(
    prefix="/api/activity",
    tags=["activity"],
    dependencies=[Depends(require_role(UserRoleEnum.CONTENT_MANAGER))],
)


@router.get("/logs", response_model=ApiResponse[ActivityList])
async def list_activity_logs(
    user_id: Optional[str] = Query(None, alias="userId"),
    resource_id: Optional[str] = Query(None, alias="resourceId"),
    action_type: Optional[str] = Query(None, alias="actionType"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    service: ActivityService = Depends(get_activity_service),
):
    result = await service.get_activity_logs(
        present_params(
            user_id=user_id,
            resource_id=resource_id,
            action_type=action_type,
            start_date=start_date,
            end_date=end_date,
            page=page,
            page_size=page_size,
        )
    )
    return ApiResponse(data=result, message="Activity logs retrieved successfully")


@router.get("/user/{user_id}", response_model=ApiResponse[ActivityList])
async def list_user_activities(
    user_id: str,
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    service: ActivityService = Depends(get_activity_service),
):
    result = await service.get_activity_by_user(user_id, **present_params(page=page, page_size=page_size))
    return ApiResponse(data=result, message="User activities retrieved successfully")


@router.get("/resource/{resource_id}", response_model=ApiResponse[ActivityList])
async def list_resource_activities(
    resource_id: str,
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    service: ActivityService = Depends(get_activity_service),
):
    result = await service.get_activity_by_resource(resource_id, **present_params(page=page, page_size=page_size))
    return ApiResponse(data=result, message="Resource activities retrieved successfully")
