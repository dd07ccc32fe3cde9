"""
Public application page (no login required).
"""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from app.models.enums import Area, EnglishLevel, WorkPreference
from app.ui.templating import render


router = APIRouter()


@router.get("/apply", response_class=HTMLResponse)
async def apply_page(request: Request):
    """Candidate-facing form; submits multipart to /api/apply."""
    return render(
        request,
        "apply.html",
        {
            "areas": [area.value for area in Area],
            "english_levels": [level.value for level in EnglishLevel],
            "work_preferences": [pref.value for pref in WorkPreference],
            "max_resume_mb": request.app.state.settings.RESUME_MAX_BYTES // (1024 * 1024),
        },
    )
