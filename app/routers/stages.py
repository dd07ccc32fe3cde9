"""
Stage and pipeline board API endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.core.dependencies import get_current_api_user, get_stage_service
from app.schemas.member import PipelineColumn
from app.schemas.stage import StageData, StageRead, StageReorder, StageWithCount
from app.services.stage_service import StageService

router = APIRouter(
    prefix="/api",
    tags=["Stages"],
    dependencies=[Depends(get_current_api_user)],
)


@router.get("/stages", response_model=List[StageWithCount])
async def list_stages(service: StageService = Depends(get_stage_service)):
    """Stages in pipeline order with their member counts."""
    result = await service.list_stages()
    return [
        StageWithCount(
            id=stage.id,
            name=stage.name,
            order=stage.order,
            created_at=stage.created_at,
            updated_at=stage.updated_at,
            member_count=count,
        )
        for stage, count in result.unwrap()
    ]


@router.post("/stages", response_model=StageRead, status_code=status.HTTP_201_CREATED)
async def create_stage(
    data: StageData,
    service: StageService = Depends(get_stage_service),
):
    """Append a new stage at the end of the pipeline."""
    result = await service.create_stage(data)
    return result.unwrap()


# Registered before /stages/{stage_id} so "reorder" is not taken for an id
@router.put("/stages/reorder", response_model=List[StageRead])
async def reorder_stages(
    data: StageReorder,
    service: StageService = Depends(get_stage_service),
):
    result = await service.reorder_stages(data)
    return result.unwrap()


@router.patch("/stages/{stage_id}", response_model=StageRead)
async def rename_stage(
    stage_id: str,
    data: StageData,
    service: StageService = Depends(get_stage_service),
):
    result = await service.rename_stage(stage_id, data)
    return result.unwrap()


@router.delete("/stages/{stage_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_stage(
    stage_id: str,
    service: StageService = Depends(get_stage_service),
):
    """Delete an empty stage. Stages that still hold members are rejected with 409."""
    result = await service.delete_stage(stage_id)
    result.unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/pipeline", response_model=List[PipelineColumn])
async def get_board(service: StageService = Depends(get_stage_service)):
    result = await service.get_board()
    return result.unwrap()
