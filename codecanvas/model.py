"""Core SceneModel class for CodeCanvas.

This module provides the Qt model that owns every shape, text and group
on the canvas, along with the current selection.
"""

from __future__ import annotations

import copy
import logging
from itertools import count
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from PySide6.QtCore import (
    QAbstractListModel,
    QModelIndex,
    Property,
    Qt,
    Signal,
    Slot,
)

from .clipboard import ClipboardMixin
from .constants import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_ROUNDED_RADIUS,
    DEFAULT_SHADOW_COLOR,
    DEFAULT_STROKE_COLOR,
    DEFAULT_TEXT_CONTENT,
    DEFAULT_TEXT_HEIGHT,
    DEFAULT_TEXT_WIDTH,
    FONT_STYLES,
    FONT_WEIGHTS,
    MAX_FONT_SIZE,
    MIN_FONT_SIZE,
    MIN_SHAPE_SIZE,
    MIN_TEXT_HEIGHT,
    MIN_TEXT_WIDTH,
    TEXT_ALIGNS,
)
from .groups import GroupMixin
from .ordering import ZOrderMixin
from .style import polygon_points, resolve_shape
from .types import (
    Glow,
    Group,
    ParsedScene,
    SceneSnapshot,
    Shadow,
    ShadowKind,
    Shape,
    ShapeType,
    Stroke,
    Text,
)

logger = logging.getLogger(__name__)

SHAPE = "shape"
TEXT = "text"


class SceneModel(
    ClipboardMixin,
    GroupMixin,
    ZOrderMixin,
    QAbstractListModel,
):
    """Qt model exposing canvas shapes to QML; texts and groups ride along."""

    IdRole = Qt.UserRole + 1
    TypeRole = Qt.UserRole + 2
    XRole = Qt.UserRole + 3
    YRole = Qt.UserRole + 4
    WidthRole = Qt.UserRole + 5
    HeightRole = Qt.UserRole + 6
    ColorRole = Qt.UserRole + 7
    ZIndexRole = Qt.UserRole + 8
    FillRole = Qt.UserRole + 9
    ImageDataRole = Qt.UserRole + 10
    BorderRadiusRole = Qt.UserRole + 11
    TransformRole = Qt.UserRole + 12
    ClipPointsRole = Qt.UserRole + 13
    BoxShadowRole = Qt.UserRole + 14
    FilterRole = Qt.UserRole + 15
    OpacityRole = Qt.UserRole + 16
    StrokeColorRole = Qt.UserRole + 17
    StrokeWidthRole = Qt.UserRole + 18
    LockedRole = Qt.UserRole + 19
    SelectedRole = Qt.UserRole + 20

    shapesChanged = Signal()
    textsChanged = Signal()
    groupsChanged = Signal()
    selectionChanged = Signal()
    sceneChanged = Signal()
    canvasSizeChanged = Signal()

    def __init__(
        self,
        canvas_width: int = DEFAULT_CANVAS_WIDTH,
        canvas_height: int = DEFAULT_CANVAS_HEIGHT,
    ):
        super().__init__()
        self._shapes: List[Shape] = []
        self._texts: List[Text] = []
        self._groups: List[Group] = []
        self._canvas_width = int(canvas_width)
        self._canvas_height = int(canvas_height)
        self._id_source = count(1)
        self._last_issued_id = 0
        self._selected_shape_ids: Set[int] = set()
        self._selected_text_ids: Set[int] = set()
        self._selected_group_id: Optional[int] = None
        self._primary: Optional[Tuple[str, int]] = None

        self._init_clipboard()

    def _next_id(self) -> int:
        self._last_issued_id = next(self._id_source)
        return self._last_issued_id

    def _next_z(self) -> int:
        z_values = [entity.z_index for entity in self._z_entities()]
        return max(z_values) + 1 if z_values else 1

    # --- Qt model overrides -------------------------------------------------
    def rowCount(self, parent: QModelIndex | None = QModelIndex()) -> int:  # type: ignore[override]
        return len(self._shapes)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid() or not (0 <= index.row() < len(self._shapes)):
            return None

        shape = self._shapes[index.row()]
        if role == self.IdRole:
            return shape.id
        if role == self.TypeRole:
            return shape.shape_type.value
        if role == self.XRole:
            return shape.x
        if role == self.YRole:
            return shape.y
        if role == self.WidthRole:
            return shape.width
        if role == self.HeightRole:
            return shape.height
        if role == self.ColorRole:
            return shape.color
        if role == self.ZIndexRole:
            return shape.z_index
        if role == self.ImageDataRole:
            return shape.image_data
        if role == self.LockedRole:
            return shape.locked
        if role == self.SelectedRole:
            return shape.id in self._selected_shape_ids
        if role == self.ClipPointsRole:
            return [{"x": x, "y": y} for x, y in polygon_points(shape)]

        style = resolve_shape(shape)
        if role == self.FillRole:
            return style.fill or ""
        if role == self.BorderRadiusRole:
            return style.border_radius or ""
        if role == self.TransformRole:
            return style.transform or ""
        if role == self.BoxShadowRole:
            return ", ".join(style.box_shadows)
        if role == self.FilterRole:
            return " ".join(style.filters)
        if role == self.OpacityRole:
            return 1.0 if style.opacity is None else style.opacity
        if role == self.StrokeColorRole:
            return style.outline.color if style.outline else ""
        if role == self.StrokeWidthRole:
            return style.outline.width if style.outline else 0
        return None

    def roleNames(self) -> Dict[int, bytes]:  # type: ignore[override]
        return {
            self.IdRole: b"shapeId",
            self.TypeRole: b"shapeType",
            self.XRole: b"x",
            self.YRole: b"y",
            self.WidthRole: b"width",
            self.HeightRole: b"height",
            self.ColorRole: b"color",
            self.ZIndexRole: b"zIndex",
            self.FillRole: b"fill",
            self.ImageDataRole: b"imageData",
            self.BorderRadiusRole: b"borderRadius",
            self.TransformRole: b"transform",
            self.ClipPointsRole: b"clipPoints",
            self.BoxShadowRole: b"boxShadow",
            self.FilterRole: b"filter",
            self.OpacityRole: b"shapeOpacity",
            self.StrokeColorRole: b"strokeColor",
            self.StrokeWidthRole: b"strokeWidth",
            self.LockedRole: b"locked",
            self.SelectedRole: b"selected",
        }

    # --- Properties exposed to QML -----------------------------------------
    @Property(int, notify=shapesChanged)
    def count(self) -> int:
        return len(self._shapes)

    @Property(list, notify=textsChanged)
    def texts(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": text.id,
                "x": text.x,
                "y": text.y,
                "width": text.width,
                "height": text.height,
                "text": text.text,
                "fontSize": text.font_size,
                "color": text.color,
                "fontFamily": text.font_family,
                "fontWeight": text.font_weight,
                "fontStyle": text.font_style,
                "textAlign": text.text_align,
                "zIndex": text.z_index,
                "locked": text.locked,
                "selected": text.id in self._selected_text_ids,
            }
            for text in self._texts
        ]

    @Property(list, notify=groupsChanged)
    def groups(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": group.id,
                "x": group.x,
                "y": group.y,
                "width": group.width,
                "height": group.height,
                "zIndex": group.z_index,
                "name": group.name,
                "selected": group.id == self._selected_group_id,
            }
            for group in self._groups
        ]

    @Property(int, notify=canvasSizeChanged)
    def canvasWidth(self) -> int:
        return self._canvas_width

    @Property(int, notify=canvasSizeChanged)
    def canvasHeight(self) -> int:
        return self._canvas_height

    @Property(int, notify=selectionChanged)
    def selectedShapeId(self) -> int:
        if self._primary and self._primary[0] == SHAPE:
            return self._primary[1]
        return -1

    @Property(int, notify=selectionChanged)
    def selectedTextId(self) -> int:
        if self._primary and self._primary[0] == TEXT:
            return self._primary[1]
        return -1

    @Property(int, notify=selectionChanged)
    def selectedGroupId(self) -> int:
        return -1 if self._selected_group_id is None else self._selected_group_id

    @Property(int, notify=selectionChanged)
    def selectionCount(self) -> int:
        return len(self._selected_shape_ids) + len(self._selected_text_ids)

    @Slot(int, int)
    def setCanvasSize(self, width: int, height: int) -> None:
        width, height = max(MIN_SHAPE_SIZE, int(width)), max(MIN_SHAPE_SIZE, int(height))
        if (width, height) == (self._canvas_width, self._canvas_height):
            return
        self._canvas_width = width
        self._canvas_height = height
        self.canvasSizeChanged.emit()

    # --- Lookup -------------------------------------------------------------
    @property
    def shapes(self) -> Tuple[Shape, ...]:
        return tuple(self._shapes)

    @property
    def text_items(self) -> Tuple[Text, ...]:
        return tuple(self._texts)

    @property
    def group_items(self) -> Tuple[Group, ...]:
        return tuple(self._groups)

    @property
    def selected_shape_ids(self) -> Set[int]:
        return set(self._selected_shape_ids)

    @property
    def selected_text_ids(self) -> Set[int]:
        return set(self._selected_text_ids)

    def getShape(self, shape_id: int) -> Optional[Shape]:
        for shape in self._shapes:
            if shape.id == shape_id:
                return shape
        return None

    def getText(self, text_id: int) -> Optional[Text]:
        for text in self._texts:
            if text.id == text_id:
                return text
        return None

    def find_entity(self, kind: str, entity_id: int):
        if kind == SHAPE:
            return self.getShape(entity_id)
        if kind == TEXT:
            return self.getText(entity_id)
        return None

    def _shape_row(self, shape_id: int) -> int:
        for row, shape in enumerate(self._shapes):
            if shape.id == shape_id:
                return row
        return -1

    def _z_entities(self) -> List[Any]:
        return [*self._shapes, *self._texts]

    def entity_at(self, x: float, y: float) -> Optional[Tuple[str, int]]:
        """Return the topmost (kind, id) under the point, if any."""
        entities = [(SHAPE, shape) for shape in self._shapes]
        entities.extend((TEXT, text) for text in self._texts)
        # Later entries paint over earlier ones with the same z.
        for kind, entity in sorted(
            reversed(entities), key=lambda entry: entry[1].z_index, reverse=True
        ):
            if entity.x <= x <= entity.right and entity.y <= y <= entity.bottom:
                return kind, entity.id
        return None

    def entities_in_rect(
        self, x0: float, y0: float, x1: float, y1: float
    ) -> Tuple[Set[int], Set[int]]:
        """Return (shape_ids, text_ids) intersecting the rectangle."""
        min_x, max_x = min(x0, x1), max(x0, x1)
        min_y, max_y = min(y0, y1), max(y0, y1)

        def hits(entity) -> bool:
            return (
                entity.x < max_x and entity.right > min_x
                and entity.y < max_y and entity.bottom > min_y
            )

        return (
            {shape.id for shape in self._shapes if hits(shape)},
            {text.id for text in self._texts if hits(text)},
        )

    @Slot(float, float, result=int)
    def shapeIdAt(self, x: float, y: float) -> int:
        hit = self.entity_at(x, y)
        return hit[1] if hit and hit[0] == SHAPE else -1

    @Slot(float, float, result=int)
    def textIdAt(self, x: float, y: float) -> int:
        hit = self.entity_at(x, y)
        return hit[1] if hit and hit[0] == TEXT else -1

    def snapshot(self) -> SceneSnapshot:
        """Return an immutable deep copy of the scene for generators."""
        return SceneSnapshot(
            shapes=tuple(copy.deepcopy(self._shapes)),
            texts=tuple(copy.deepcopy(self._texts)),
            groups=tuple(copy.deepcopy(self._groups)),
        )

    # --- Geometry helpers ---------------------------------------------------
    def _clamp_origin(self, x: float, y: float, width: int, height: int) -> Tuple[int, int]:
        x = max(0, min(round(x), self._canvas_width - width))
        y = max(0, min(round(y), self._canvas_height - height))
        return x, y

    def _floor_size(self, width: float, height: float, min_width: int, min_height: int) -> Tuple[int, int]:
        width = min(max(min_width, round(width)), self._canvas_width)
        height = min(max(min_height, round(height)), self._canvas_height)
        return width, height

    # --- Change notification ------------------------------------------------
    def _emit_shape_rows(self, rows: Iterable[int], roles: Optional[List[int]] = None) -> None:
        for row in rows:
            index = self.index(row, 0)
            self.dataChanged.emit(index, index, roles or [])

    def _notify_shape(self, row: int, roles: Optional[List[int]] = None) -> None:
        self._emit_shape_rows([row], roles)
        self.shapesChanged.emit()
        self.sceneChanged.emit()

    def _notify_texts(self) -> None:
        self.textsChanged.emit()
        self.sceneChanged.emit()

    def _emit_z_changed(self) -> None:
        if self._shapes:
            self.dataChanged.emit(
                self.index(0, 0), self.index(len(self._shapes) - 1, 0), [self.ZIndexRole]
            )
        self.shapesChanged.emit()
        self.textsChanged.emit()
        self.sceneChanged.emit()

    def _update_shape(
        self,
        shape_id: int,
        mutate: Callable[[Shape], None],
        roles: Optional[List[int]] = None,
        allow_locked: bool = False,
    ) -> bool:
        row = self._shape_row(shape_id)
        if row < 0:
            return False
        shape = self._shapes[row]
        if shape.locked and not allow_locked:
            return False
        before = copy.copy(shape)
        mutate(shape)
        if shape == before:
            return False
        self._notify_shape(row, roles)
        self._refresh_group_of(SHAPE, shape_id)
        return True

    def _update_text(
        self,
        text_id: int,
        mutate: Callable[[Text], None],
        allow_locked: bool = False,
    ) -> bool:
        text = self.getText(text_id)
        if text is None:
            return False
        if text.locked and not allow_locked:
            return False
        before = copy.copy(text)
        mutate(text)
        if text == before:
            return False
        self._notify_texts()
        self._refresh_group_of(TEXT, text_id)
        return True

    # --- Shape management ---------------------------------------------------
    def add_shape(
        self,
        shape_type: ShapeType,
        x: float,
        y: float,
        width: float,
        height: float,
        **fields: Any,
    ) -> Shape:
        width, height = self._floor_size(width, height, MIN_SHAPE_SIZE, MIN_SHAPE_SIZE)
        x, y = self._clamp_origin(x, y, width, height)
        shape = Shape(
            id=self._next_id(),
            shape_type=shape_type,
            x=x,
            y=y,
            width=width,
            height=height,
            z_index=self._next_z(),
            **fields,
        )
        self._normalize_shape(shape)
        self._append_shape(shape)
        return shape

    def _append_shape(self, shape: Shape) -> None:
        self.beginInsertRows(QModelIndex(), len(self._shapes), len(self._shapes))
        self._shapes.append(shape)
        self.endInsertRows()
        self.shapesChanged.emit()
        self.sceneChanged.emit()

    @staticmethod
    def _normalize_shape(shape: Shape) -> None:
        if shape.shape_type == ShapeType.ROUNDED_RECTANGLE and shape.border_radius is None:
            shape.border_radius = DEFAULT_ROUNDED_RADIUS
        elif shape.shape_type == ShapeType.RECTANGLE and not shape.border_radius:
            shape.border_radius = None
        elif shape.shape_type not in (ShapeType.RECTANGLE, ShapeType.ROUNDED_RECTANGLE):
            shape.border_radius = None
        if shape.shadow is not None and shape.shadow.kind == ShadowKind.NONE:
            shape.shadow = None
        if shape.glow is not None and not shape.glow.enabled:
            shape.glow = None

    @Slot(str, float, float, float, float, result=int)
    def addShape(self, type_name: str, x: float, y: float, width: float, height: float) -> int:
        shape_type = ShapeType.from_name(type_name)
        if shape_type is None:
            return -1
        return self.add_shape(shape_type, x, y, width, height).id

    @Slot(float, float, float, float, str, result=int)
    def addImageShape(self, x: float, y: float, width: float, height: float, data_url: str) -> int:
        if not data_url:
            return -1
        return self.add_shape(ShapeType.IMAGE, x, y, width, height, image_data=data_url).id

    @Slot(int, float, float)
    def moveShape(self, shape_id: int, x: float, y: float) -> None:
        def mutate(shape: Shape) -> None:
            shape.x, shape.y = self._clamp_origin(x, y, shape.width, shape.height)

        self._update_shape(shape_id, mutate, [self.XRole, self.YRole])

    @Slot(int, float, float, float, float)
    def setShapeGeometry(self, shape_id: int, x: float, y: float, width: float, height: float) -> None:
        def mutate(shape: Shape) -> None:
            shape.width, shape.height = self._floor_size(width, height, MIN_SHAPE_SIZE, MIN_SHAPE_SIZE)
            shape.x, shape.y = self._clamp_origin(x, y, shape.width, shape.height)

        self._update_shape(shape_id, mutate)

    @Slot(int, str)
    def setShapeColor(self, shape_id: int, color: str) -> None:
        if not color:
            return

        def mutate(shape: Shape) -> None:
            shape.color = color

        self._update_shape(shape_id, mutate)

    @Slot(int, str)
    def setShapeType(self, shape_id: int, type_name: str) -> None:
        shape_type = ShapeType.from_name(type_name)
        if shape_type is None:
            return

        def mutate(shape: Shape) -> None:
            shape.shape_type = shape_type
            shape.border_radius = None
            self._normalize_shape(shape)

        self._update_shape(shape_id, mutate)

    @Slot(int, int)
    def setShapeBorderRadius(self, shape_id: int, radius: int) -> None:
        def mutate(shape: Shape) -> None:
            if shape.shape_type in (ShapeType.RECTANGLE, ShapeType.ROUNDED_RECTANGLE):
                shape.border_radius = max(0, int(radius))
                self._normalize_shape(shape)

        self._update_shape(shape_id, mutate, [self.BorderRadiusRole])

    @Slot(int, float)
    def setShapeOpacity(self, shape_id: int, opacity: float) -> None:
        """Set opacity in [0, 1]; a negative value clears it."""
        def mutate(shape: Shape) -> None:
            shape.opacity = None if opacity < 0 else min(1.0, float(opacity))

        self._update_shape(shape_id, mutate, [self.OpacityRole])

    @Slot(int, str, str, int, int, int)
    def setShapeShadow(
        self,
        shape_id: int,
        kind: str,
        color: str,
        blur_radius: int,
        offset_x: int,
        offset_y: int,
    ) -> None:
        try:
            shadow_kind = ShadowKind(kind)
        except ValueError:
            return

        def mutate(shape: Shape) -> None:
            if shadow_kind == ShadowKind.NONE:
                shape.shadow = None
                return
            shape.shadow = Shadow(
                kind=shadow_kind,
                color=color or DEFAULT_SHADOW_COLOR,
                blur_radius=max(0, int(blur_radius)),
                offset_x=int(offset_x),
                offset_y=int(offset_y),
            )

        self._update_shape(shape_id, mutate, [self.BoxShadowRole, self.FilterRole])

    @Slot(int, bool, str, int)
    def setShapeGlow(self, shape_id: int, enabled: bool, color: str, blur_radius: int) -> None:
        def mutate(shape: Shape) -> None:
            if not enabled:
                shape.glow = None
                return
            shape.glow = Glow(enabled=True, color=color or None, blur_radius=max(0, int(blur_radius)))

        self._update_shape(shape_id, mutate, [self.BoxShadowRole, self.FilterRole])

    @Slot(int, str, int)
    def setShapeStroke(self, shape_id: int, color: str, width: int) -> None:
        def mutate(shape: Shape) -> None:
            if width <= 0:
                shape.stroke = None
                return
            shape.stroke = Stroke(color=color or DEFAULT_STROKE_COLOR, width=int(width))

        self._update_shape(shape_id, mutate, [self.StrokeColorRole, self.StrokeWidthRole])

    @Slot(int, str)
    def setShapeImage(self, shape_id: int, data_url: str) -> None:
        def mutate(shape: Shape) -> None:
            shape.image_data = data_url
            if data_url:
                shape.shape_type = ShapeType.IMAGE
                self._normalize_shape(shape)

        self._update_shape(shape_id, mutate)

    @Slot(int, bool)
    def setShapeLocked(self, shape_id: int, locked: bool) -> None:
        def mutate(shape: Shape) -> None:
            shape.locked = bool(locked)

        self._update_shape(shape_id, mutate, [self.LockedRole], allow_locked=True)

    @Slot(int, result=bool)
    def removeShape(self, shape_id: int) -> bool:
        row = self._shape_row(shape_id)
        if row < 0:
            return False
        self.beginRemoveRows(QModelIndex(), row, row)
        self._shapes.pop(row)
        self.endRemoveRows()
        self._discard_member(SHAPE, shape_id)
        self._drop_from_selection(SHAPE, shape_id)
        self.shapesChanged.emit()
        self.sceneChanged.emit()
        return True

    # --- Text management ----------------------------------------------------
    def add_text(
        self,
        x: float,
        y: float,
        content: str = DEFAULT_TEXT_CONTENT,
        width: float = DEFAULT_TEXT_WIDTH,
        height: float = DEFAULT_TEXT_HEIGHT,
        **fields: Any,
    ) -> Text:
        width, height = self._floor_size(width, height, MIN_TEXT_WIDTH, MIN_TEXT_HEIGHT)
        x, y = self._clamp_origin(x, y, width, height)
        text = Text(
            id=self._next_id(),
            x=x,
            y=y,
            width=width,
            height=height,
            text=content,
            z_index=self._next_z(),
            **fields,
        )
        text.font_size = _clamp_font_size(text.font_size)
        self._texts.append(text)
        self._notify_texts()
        return text

    @Slot(float, float, str, result=int)
    def addText(self, x: float, y: float, content: str) -> int:
        return self.add_text(x, y, content).id

    @Slot(result=int)
    def addTextAtCenter(self) -> int:
        x = (self._canvas_width - DEFAULT_TEXT_WIDTH) / 2
        y = (self._canvas_height - DEFAULT_TEXT_HEIGHT) / 2
        return self.add_text(x, y).id

    @Slot(int, float, float)
    def moveText(self, text_id: int, x: float, y: float) -> None:
        def mutate(text: Text) -> None:
            text.x, text.y = self._clamp_origin(x, y, text.width, text.height)

        self._update_text(text_id, mutate)

    @Slot(int, float, float, float, float)
    def setTextGeometry(self, text_id: int, x: float, y: float, width: float, height: float) -> None:
        def mutate(text: Text) -> None:
            text.width, text.height = self._floor_size(width, height, MIN_TEXT_WIDTH, MIN_TEXT_HEIGHT)
            text.x, text.y = self._clamp_origin(x, y, text.width, text.height)

        self._update_text(text_id, mutate)

    @Slot(int, str)
    def setTextContent(self, text_id: int, content: str) -> None:
        def mutate(text: Text) -> None:
            text.text = content

        self._update_text(text_id, mutate)

    @Slot(int, int)
    def setTextFontSize(self, text_id: int, font_size: int) -> None:
        def mutate(text: Text) -> None:
            text.font_size = _clamp_font_size(font_size)

        self._update_text(text_id, mutate)

    @Slot(int, str)
    def setTextColor(self, text_id: int, color: str) -> None:
        if not color:
            return

        def mutate(text: Text) -> None:
            text.color = color

        self._update_text(text_id, mutate)

    @Slot(int, str)
    def setTextFontFamily(self, text_id: int, family: str) -> None:
        if not family.strip():
            return

        def mutate(text: Text) -> None:
            text.font_family = family.strip()

        self._update_text(text_id, mutate)

    @Slot(int, str)
    def setTextFontWeight(self, text_id: int, weight: str) -> None:
        if weight not in FONT_WEIGHTS:
            return

        def mutate(text: Text) -> None:
            text.font_weight = weight

        self._update_text(text_id, mutate)

    @Slot(int, str)
    def setTextFontStyle(self, text_id: int, font_style: str) -> None:
        if font_style not in FONT_STYLES:
            return

        def mutate(text: Text) -> None:
            text.font_style = font_style

        self._update_text(text_id, mutate)

    @Slot(int, str)
    def setTextAlign(self, text_id: int, align: str) -> None:
        if align not in TEXT_ALIGNS:
            return

        def mutate(text: Text) -> None:
            text.text_align = align

        self._update_text(text_id, mutate)

    @Slot(int, bool)
    def setTextLocked(self, text_id: int, locked: bool) -> None:
        def mutate(text: Text) -> None:
            text.locked = bool(locked)

        self._update_text(text_id, mutate, allow_locked=True)

    @Slot(int, result=bool)
    def removeText(self, text_id: int) -> bool:
        for index, text in enumerate(self._texts):
            if text.id == text_id:
                self._texts.pop(index)
                self._discard_member(TEXT, text_id)
                self._drop_from_selection(TEXT, text_id)
                self._notify_texts()
                return True
        return False

    # --- Selection ----------------------------------------------------------
    def _emit_selection_changed(self) -> None:
        if self._shapes:
            self.dataChanged.emit(
                self.index(0, 0), self.index(len(self._shapes) - 1, 0), [self.SelectedRole]
            )
        self.textsChanged.emit()
        self.groupsChanged.emit()
        self.selectionChanged.emit()

    def _drop_from_selection(self, kind: str, entity_id: int) -> None:
        selected = self._selected_shape_ids if kind == SHAPE else self._selected_text_ids
        if entity_id not in selected:
            return
        selected.discard(entity_id)
        if self._primary == (kind, entity_id):
            self._primary = None
        self.selectionChanged.emit()

    def select(self, kind: str, entity_id: int, additive: bool = False) -> bool:
        """Select one entity, replacing the selection unless ``additive``."""
        if self.find_entity(kind, entity_id) is None:
            return False
        if not additive:
            self._selected_shape_ids.clear()
            self._selected_text_ids.clear()
        self._selected_group_id = None
        (self._selected_shape_ids if kind == SHAPE else self._selected_text_ids).add(entity_id)
        self._primary = (kind, entity_id)
        self._emit_selection_changed()
        return True

    def toggle_selection(self, kind: str, entity_id: int) -> None:
        if self.find_entity(kind, entity_id) is None:
            return
        selected = self._selected_shape_ids if kind == SHAPE else self._selected_text_ids
        self._selected_group_id = None
        if entity_id in selected:
            selected.discard(entity_id)
            if self._primary == (kind, entity_id):
                self._primary = None
        else:
            selected.add(entity_id)
            self._primary = (kind, entity_id)
        self._emit_selection_changed()

    def select_many(self, shape_ids: Iterable[int], text_ids: Iterable[int], additive: bool = False) -> None:
        if not additive:
            self._selected_shape_ids.clear()
            self._selected_text_ids.clear()
            self._primary = None
        self._selected_group_id = None
        self._selected_shape_ids.update(i for i in shape_ids if self.getShape(i) is not None)
        self._selected_text_ids.update(i for i in text_ids if self.getText(i) is not None)
        if self.selectionCount == 1:
            if self._selected_shape_ids:
                self._primary = (SHAPE, next(iter(self._selected_shape_ids)))
            else:
                self._primary = (TEXT, next(iter(self._selected_text_ids)))
        self._emit_selection_changed()

    def select_group(self, group_id: int) -> bool:
        group = self.getGroup(group_id)
        if group is None:
            return False
        self._selected_shape_ids = set(group.shape_ids)
        self._selected_text_ids = set(group.text_ids)
        self._selected_group_id = group_id
        self._primary = None
        self._emit_selection_changed()
        return True

    @Slot(int, bool)
    def selectShape(self, shape_id: int, additive: bool = False) -> None:
        self.select(SHAPE, shape_id, additive)

    @Slot(int, bool)
    def selectText(self, text_id: int, additive: bool = False) -> None:
        self.select(TEXT, text_id, additive)

    @Slot(int)
    def selectGroup(self, group_id: int) -> None:
        self.select_group(group_id)

    @Slot()
    def clearSelection(self) -> None:
        if not (self._selected_shape_ids or self._selected_text_ids or self._selected_group_id is not None):
            return
        self._selected_shape_ids.clear()
        self._selected_text_ids.clear()
        self._selected_group_id = None
        self._primary = None
        self._emit_selection_changed()

    @Slot(result=bool)
    def removeSelection(self) -> bool:
        """Delete selected shapes and texts; a selected group is dissolved."""
        if self._selected_group_id is not None:
            return self.ungroup(self._selected_group_id)
        removed = False
        for shape_id in sorted(self._selected_shape_ids):
            shape = self.getShape(shape_id)
            if shape is not None and not shape.locked:
                removed = self.removeShape(shape_id) or removed
        for text_id in sorted(self._selected_text_ids):
            text = self.getText(text_id)
            if text is not None and not text.locked:
                removed = self.removeText(text_id) or removed
        return removed

    # --- Whole-scene operations ---------------------------------------------
    @Slot()
    def clearScene(self) -> None:
        self.replaceScene(ParsedScene())

    def replaceScene(self, scene: ParsedScene) -> None:
        """Swap in parsed entities, keeping ids unique and sizes floored."""
        shapes = copy.deepcopy(list(scene.shapes))
        texts = copy.deepcopy(list(scene.texts))
        for shape in shapes:
            shape.width = max(MIN_SHAPE_SIZE, shape.width)
            shape.height = max(MIN_SHAPE_SIZE, shape.height)
            self._normalize_shape(shape)
        for text in texts:
            text.width = max(MIN_TEXT_WIDTH, text.width)
            text.height = max(MIN_TEXT_HEIGHT, text.height)
            text.font_size = _clamp_font_size(text.font_size)

        self.beginResetModel()
        self._shapes = shapes
        self._texts = texts
        self.endResetModel()
        self._groups = []
        for group in scene.groups:
            self._adopt_group(copy.deepcopy(group))

        ids = [entity.id for entity in (*self._shapes, *self._texts, *self._groups)]
        self._last_issued_id = max([self._last_issued_id, *ids])
        self._id_source = count(self._last_issued_id + 1)

        self._selected_shape_ids &= {shape.id for shape in self._shapes}
        self._selected_text_ids &= {text.id for text in self._texts}
        if self._selected_group_id is not None and self.getGroup(self._selected_group_id) is None:
            self._selected_group_id = None
        if self._primary is not None and self.find_entity(*self._primary) is None:
            self._primary = None

        logger.debug(
            "Scene replaced: %d shapes, %d texts, %d groups",
            len(self._shapes), len(self._texts), len(self._groups),
        )
        self.shapesChanged.emit()
        self.textsChanged.emit()
        self.groupsChanged.emit()
        self.selectionChanged.emit()
        self.sceneChanged.emit()


def _clamp_font_size(size: int) -> int:
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, int(size)))
