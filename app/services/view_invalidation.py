"""
View invalidation signal.

Mutating operations bump a version counter per stale view so pages and the
pipeline board can tell they need to re-render. Best-effort only: a failure here
never fails the operation that triggered it.
"""

import logging
import threading
from typing import Dict, Iterable
from uuid import UUID

logger = logging.getLogger(__name__)

MEMBERS_VIEW = "members"
PIPELINE_VIEW = "pipeline"


def member_view(member_id: UUID | str) -> str:
    return f"member:{member_id}"


class ViewInvalidator:
    """In-process version counters keyed by view name."""

    def __init__(self) -> None:
        self._versions: Dict[str, int] = {}
        self._lock = threading.Lock()

    def invalidate(self, *views: str) -> None:
        try:
            with self._lock:
                for view in views:
                    self._versions[view] = self._versions.get(view, 0) + 1
            logger.debug("Invalidated views: %s", ", ".join(views))
        except Exception:
            logger.exception("View invalidation failed for %s", views)

    def version(self, view: str) -> int:
        return self._versions.get(view, 0)

    def versions(self, views: Iterable[str] | None = None) -> Dict[str, int]:
        with self._lock:
            if views is None:
                return dict(self._versions)
            return {view: self._versions.get(view, 0) for view in views}
