"""Grouping mixin for SceneModel.

Groups are weak: they reference members by id and never own them.
An entity belongs to at most one group, and a group with fewer than two
members is dissolved.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Set, Tuple

from PySide6.QtCore import Signal, Slot
from PySide6.QtQml import QJSValue

from .types import Group, Shape, Text

MemberStart = Tuple[str, int, int, int]


def _id_list(value: Any) -> List[int]:
    if isinstance(value, QJSValue):
        value = value.toVariant()
    if not value:
        return []
    if not isinstance(value, (list, tuple, set)):
        return []
    result = []
    for item in value:
        try:
            result.append(int(item))
        except (TypeError, ValueError):
            continue
    return result


class GroupMixin:
    """Mixin providing group operations."""

    # Signals (will be defined in SceneModel)
    groupsChanged: Signal
    shapesChanged: Signal
    sceneChanged: Signal

    # Attributes expected from SceneModel
    _groups: List[Group]
    _shapes: List[Shape]
    _texts: List[Text]
    _canvas_width: int
    _canvas_height: int
    _selected_shape_ids: Set[int]
    _selected_text_ids: Set[int]
    _selected_group_id: Optional[int]
    _next_id: Callable[[], int]
    find_entity: Callable[[str, int], Optional[Any]]
    _shape_row: Callable[[int], int]
    _emit_shape_rows: Callable[..., None]
    _emit_selection_changed: Callable[[], None]
    select_group: Callable[[int], bool]
    textsChanged: Signal

    def getGroup(self, group_id: int) -> Optional[Group]:
        for group in self._groups:
            if group.id == group_id:
                return group
        return None

    def group_of(self, kind: str, entity_id: int) -> Optional[Group]:
        for group in self._groups:
            members = group.shape_ids if kind == "shape" else group.text_ids
            if entity_id in members:
                return group
        return None

    @Slot(int, result=int)
    def groupIdForShape(self, shape_id: int) -> int:
        group = self.group_of("shape", shape_id)
        return group.id if group else -1

    @Slot(int, result=int)
    def groupIdForText(self, text_id: int) -> int:
        group = self.group_of("text", text_id)
        return group.id if group else -1

    def _members(self, group: Group) -> List[Tuple[str, Any]]:
        members: List[Tuple[str, Any]] = []
        for kind, ids in (("shape", group.shape_ids), ("text", group.text_ids)):
            for entity_id in sorted(ids):
                entity = self.find_entity(kind, entity_id)
                if entity is not None:
                    members.append((kind, entity))
        return members

    def _update_group_bounds(self, group: Group) -> None:
        members = [entity for _kind, entity in self._members(group)]
        if not members:
            group.x = group.y = group.width = group.height = 0
            return
        group.x = min(entity.x for entity in members)
        group.y = min(entity.y for entity in members)
        group.width = max(entity.right for entity in members) - group.x
        group.height = max(entity.bottom for entity in members) - group.y

    def _refresh_group_of(self, kind: str, entity_id: int) -> None:
        group = self.group_of(kind, entity_id)
        if group is None:
            return
        self._update_group_bounds(group)
        self.groupsChanged.emit()

    def _remove_group(self, group: Group) -> None:
        self._groups.remove(group)
        if self._selected_group_id == group.id:
            self._selected_group_id = None
            self._emit_selection_changed()

    def _discard_member(self, kind: str, entity_id: int) -> None:
        """Drop an entity from its group, dissolving the group if too small."""
        group = self.group_of(kind, entity_id)
        if group is None:
            return
        (group.shape_ids if kind == "shape" else group.text_ids).discard(entity_id)
        if group.member_count < 2:
            self._remove_group(group)
        else:
            self._update_group_bounds(group)
        self.groupsChanged.emit()

    def _adopt_group(self, group: Group) -> bool:
        """Add a parsed group, keeping only members that exist and are free."""
        group.shape_ids = {
            i for i in group.shape_ids
            if self.find_entity("shape", i) is not None and self.group_of("shape", i) is None
        }
        group.text_ids = {
            i for i in group.text_ids
            if self.find_entity("text", i) is not None and self.group_of("text", i) is None
        }
        if group.member_count < 2:
            return False
        self._update_group_bounds(group)
        self._groups.append(group)
        return True

    def create_group(self, shape_ids: Iterable[int], text_ids: Iterable[int], name: str = "") -> Optional[Group]:
        shape_ids = {i for i in shape_ids if self.find_entity("shape", i) is not None}
        text_ids = {i for i in text_ids if self.find_entity("text", i) is not None}
        if len(shape_ids) + len(text_ids) < 2:
            return None
        for kind, ids in (("shape", shape_ids), ("text", text_ids)):
            for entity_id in ids:
                self._discard_member(kind, entity_id)
        members = [self.find_entity("shape", i) for i in shape_ids]
        members.extend(self.find_entity("text", i) for i in text_ids)
        group = Group(
            id=self._next_id(),
            shape_ids=shape_ids,
            text_ids=text_ids,
            z_index=max(entity.z_index for entity in members),
            name=name,
        )
        self._update_group_bounds(group)
        self._groups.append(group)
        self.groupsChanged.emit()
        self.sceneChanged.emit()
        self.select_group(group.id)
        return group

    @Slot("QVariant", "QVariant", result=int)
    def createGroup(self, shape_ids: Any, text_ids: Any) -> int:
        group = self.create_group(_id_list(shape_ids), _id_list(text_ids))
        return group.id if group else -1

    @Slot(result=int)
    def groupSelection(self) -> int:
        group = self.create_group(set(self._selected_shape_ids), set(self._selected_text_ids))
        return group.id if group else -1

    @Slot(int, result=bool)
    def ungroup(self, group_id: int) -> bool:
        group = self.getGroup(group_id)
        if group is None:
            return False
        self._remove_group(group)
        self.groupsChanged.emit()
        self.sceneChanged.emit()
        return True

    @Slot(int, str)
    def setGroupName(self, group_id: int, name: str) -> None:
        group = self.getGroup(group_id)
        if group is None or group.name == name:
            return
        group.name = name
        self.groupsChanged.emit()
        self.sceneChanged.emit()

    def member_starts(self, group_id: int) -> Tuple[MemberStart, ...]:
        """Capture (kind, id, x, y) for every member before a drag."""
        group = self.getGroup(group_id)
        if group is None:
            return ()
        return tuple((kind, entity.id, entity.x, entity.y) for kind, entity in self._members(group))

    def group_has_locked_member(self, group_id: int) -> bool:
        group = self.getGroup(group_id)
        if group is None:
            return False
        return any(entity.locked for _kind, entity in self._members(group))

    def translate_group(
        self, group_id: int, starts: Iterable[MemberStart], dx: float, dy: float
    ) -> Tuple[int, int]:
        """Move members to start + delta, clamping the delta to the canvas.

        Returns the delta actually applied.
        """
        group = self.getGroup(group_id)
        placed = []
        for kind, entity_id, start_x, start_y in starts:
            entity = self.find_entity(kind, entity_id)
            if entity is not None:
                placed.append((kind, entity, start_x, start_y))
        if group is None or not placed:
            return 0, 0

        min_x = min(start_x for _k, _e, start_x, _y in placed)
        min_y = min(start_y for _k, _e, _x, start_y in placed)
        max_right = max(start_x + entity.width for _k, entity, start_x, _y in placed)
        max_bottom = max(start_y + entity.height for _k, entity, _x, start_y in placed)
        dx = max(-min_x, min(round(dx), self._canvas_width - max_right))
        dy = max(-min_y, min(round(dy), self._canvas_height - max_bottom))

        rows = []
        texts_moved = False
        for kind, entity, start_x, start_y in placed:
            entity.x = start_x + dx
            entity.y = start_y + dy
            if kind == "shape":
                rows.append(self._shape_row(entity.id))
            else:
                texts_moved = True
        self._update_group_bounds(group)
        self._emit_shape_rows(rows)
        self.shapesChanged.emit()
        if texts_moved:
            self.textsChanged.emit()
        self.groupsChanged.emit()
        self.sceneChanged.emit()
        return dx, dy

    @Slot(int, int, int)
    def moveGroupBy(self, group_id: int, dx: int, dy: int) -> None:
        if self.group_has_locked_member(group_id):
            return
        self.translate_group(group_id, self.member_starts(group_id), dx, dy)
