from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from ..api.deps import get_request_context, get_resource_service, present_params
from ..core.auth import require_role
from ..models.user import UserRoleEnum
from ..schemas.common import ApiResponse
from ..schemas.resource import Resource, ResourceCreate, ResourceList, ResourceUpdate
from ..services.audit import RequestContext
from ..services.resource_service import ResourceService

router = APIRouter(prefix="/api/resource", tags=["resources"])

manager_only = [Depends(require_role(UserRoleEnum.CONTENT_MANAGER))]
any_role = [Depends(require_role(UserRoleEnum.CONTENT_MANAGER, UserRoleEnum.VIEWER))]


@router.post("/add", response_model=ApiResponse[Resource], dependencies=manager_only)
async def create_resource(
    resource_in: ResourceCreate,
    ctx: RequestContext = Depends(get_request_context),
    service: ResourceService = Depends(get_resource_service),
):
    resource = await service.add_resource(resource_in, ctx)
    return ApiResponse(data=Resource.model_validate(resource), message="Resource created successfully")


@router.get("/list", response_model=ApiResponse[ResourceList], dependencies=any_role)
async def list_resources(
    search: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    service: ResourceService = Depends(get_resource_service),
):
    result = await service.list_resources(
        present_params(search=search, type=type, status=status, tag=tag, page=page, page_size=page_size)
    )
    return ApiResponse(data=result, message="Resource list")


@router.get("/{resource_id}", response_model=ApiResponse[Resource], dependencies=any_role)
async def get_resource(
    resource_id: UUID,
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    service: ResourceService = Depends(get_resource_service),
):
    resource = await service.get_resource(resource_id, ctx, path=request.url.path)
    return ApiResponse(data=Resource.model_validate(resource), message="Resource fetched successfully")


@router.put("/{resource_id}", response_model=ApiResponse[Resource], dependencies=manager_only)
async def update_resource(
    resource_id: UUID,
    resource_in: ResourceUpdate,
    ctx: RequestContext = Depends(get_request_context),
    service: ResourceService = Depends(get_resource_service),
):
    resource = await service.update_resource(resource_id, resource_in, ctx)
    return ApiResponse(data=Resource.model_validate(resource), message="Resource updated successfully")


@router.delete("/{resource_id}", response_model=ApiResponse[Resource], dependencies=manager_only)
async def archive_resource(
    resource_id: UUID,
    ctx: RequestContext = Depends(get_request_context),
    service: ResourceService = Depends(get_resource_service),
):
    result = await service.archive_resource(resource_id, ctx)
    return ApiResponse(data=Resource.model_validate(result.resource), message=result.message)
