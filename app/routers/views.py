"""View version counters, polled by the board and list pages."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.core.dependencies import get_current_api_user, get_views
from app.services.view_invalidation import ViewInvalidator

router = APIRouter(
    prefix="/api/views",
    tags=["Views"],
    dependencies=[Depends(get_current_api_user)],
)


@router.get("/versions")
async def get_view_versions(
    view: Optional[List[str]] = Query(None),
    views: ViewInvalidator = Depends(get_views),
):
    return {"versions": views.versions(view)}
