"""
Stage transition rules.

By default a member may move from any stage to any other stage. An optional
adjacency map (STAGE_TRANSITIONS) restricts the allowed destinations per source
stage; stages missing from the map keep the any-to-any behavior.
"""

from typing import Dict, Iterable, List, Mapping, Optional

from app.core.config import Settings
from app.models.stage import Stage


def is_hired_stage(stage: Stage, settings: Settings) -> bool:
    """The terminal stage is matched by well-known id or by name."""
    hired_ids = {value.lower() for value in settings.HIRED_STAGE_IDS}
    hired_names = {value.lower() for value in settings.HIRED_STAGE_NAMES}
    return stage.id.lower() in hired_ids or stage.name.strip().lower() in hired_names


class TransitionPolicy:
    """Any stage may move to any other stage."""

    def allows(self, from_stage_id: str, to_stage_id: str) -> bool:
        return True

    def allowed_targets(self, from_stage_id: str, all_stage_ids: Iterable[str]) -> List[str]:
        return [stage_id for stage_id in all_stage_ids if self.allows(from_stage_id, stage_id)]


class AdjacencyTransitionPolicy(TransitionPolicy):
    """Only the listed destinations are allowed for the listed source stages."""

    def __init__(self, edges: Mapping[str, Iterable[str]]):
        self.edges: Dict[str, frozenset] = {
            source: frozenset(targets) for source, targets in edges.items()
        }

    def allows(self, from_stage_id: str, to_stage_id: str) -> bool:
        if from_stage_id == to_stage_id:
            return True
        targets: Optional[frozenset] = self.edges.get(from_stage_id)
        if targets is None:
            return True
        return to_stage_id in targets


def build_transition_policy(settings: Settings) -> TransitionPolicy:
    if settings.STAGE_TRANSITIONS:
        return AdjacencyTransitionPolicy(settings.STAGE_TRANSITIONS)
    return TransitionPolicy()
