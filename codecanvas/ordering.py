"""Z-order operations mixin for SceneModel.

Shapes and texts share a single stacking order. Ties are allowed (parsed
code may contain them); when an entity is tied with others, stepping it
forward or backward moves it by one so it leaves the tie.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Tuple

from PySide6.QtCore import Slot


class ZOrderMixin:
    """Mixin providing stacking-order operations."""

    # Attributes expected from SceneModel
    _z_entities: Callable[[], List[Any]]
    find_entity: Callable[[str, int], Optional[Any]]
    _emit_z_changed: Callable[[], None]

    def _z_split(self, kind: str, entity_id: int) -> Tuple[Optional[Any], List[Any]]:
        entity = self.find_entity(kind, entity_id)
        if entity is None:
            return None, []
        return entity, [other for other in self._z_entities() if other is not entity]

    @staticmethod
    def _lift_others(others: List[Any], amount: int) -> None:
        for other in others:
            other.z_index += amount

    @Slot(str, int, result=bool)
    def bringForward(self, kind: str, entity_id: int) -> bool:
        """Swap with the nearest entity above; no-op when already on top."""
        entity, others = self._z_split(kind, entity_id)
        if entity is None or not others:
            return False
        higher = [other for other in others if other.z_index > entity.z_index]
        if higher:
            target = min(higher, key=lambda other: other.z_index)
            entity.z_index, target.z_index = target.z_index, entity.z_index
        elif any(other.z_index == entity.z_index for other in others):
            entity.z_index += 1
        else:
            return False
        self._emit_z_changed()
        return True

    @Slot(str, int, result=bool)
    def sendBackward(self, kind: str, entity_id: int) -> bool:
        """Swap with the nearest entity below; no-op when already at the bottom."""
        entity, others = self._z_split(kind, entity_id)
        if entity is None or not others:
            return False
        lower = [other for other in others if other.z_index < entity.z_index]
        if lower:
            target = max(lower, key=lambda other: other.z_index)
            entity.z_index, target.z_index = target.z_index, entity.z_index
        elif any(other.z_index == entity.z_index for other in others):
            if entity.z_index > 0:
                entity.z_index -= 1
            else:
                self._lift_others(others, 1)
        else:
            return False
        self._emit_z_changed()
        return True

    @Slot(str, int, result=bool)
    def bringToFront(self, kind: str, entity_id: int) -> bool:
        entity, others = self._z_split(kind, entity_id)
        if entity is None or not others:
            return False
        top = max(other.z_index for other in others)
        if entity.z_index > top:
            return False
        entity.z_index = top + 1
        self._emit_z_changed()
        return True

    @Slot(str, int, result=bool)
    def sendToBack(self, kind: str, entity_id: int) -> bool:
        entity, others = self._z_split(kind, entity_id)
        if entity is None or not others:
            return False
        bottom = min(other.z_index for other in others)
        if entity.z_index < bottom:
            return False
        if bottom > 0:
            entity.z_index = bottom - 1
        else:
            # z stays non-negative: push everything else up instead.
            self._lift_others(others, 1 - bottom)
            entity.z_index = 0
        self._emit_z_changed()
        return True
