"""
Shared Jinja2 environment for the dashboard pages.
"""

from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from app.models.enums import AREA_LABELS, ENGLISH_LEVEL_LABELS, WORK_PREFERENCE_LABELS

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

templates.env.globals.update(
    area_labels={area.value: label for area, label in AREA_LABELS.items()},
    english_level_labels={level.value: label for level, label in ENGLISH_LEVEL_LABELS.items()},
    work_preference_labels={pref.value: label for pref, label in WORK_PREFERENCE_LABELS.items()},
)


def render(
    request: Request,
    name: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
):
    """Render a page with the flash message and current view versions filled in."""
    page: Dict[str, Any] = {
        "msg": request.query_params.get("msg"),
        "error": request.query_params.get("error"),
        "view_versions": request.app.state.views.versions(),
    }
    page.update(context or {})
    return templates.TemplateResponse(request, name, page, status_code=status_code)


def redirect_to(url: str, msg: Optional[str] = None, error: Optional[str] = None) -> RedirectResponse:
    """303 redirect carrying a one-shot message in the query string."""
    params = {key: value for key, value in (("msg", msg), ("error", error)) if value}
    if params:
        url = f"{url}?{urlencode(params)}"
    return RedirectResponse(url=url, status_code=303)
