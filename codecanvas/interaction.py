"""Pointer and keyboard interaction for the canvas.

The controller is a small state machine. Each state is a frozen dataclass
holding only what that gesture needs; every pointer or key event goes
through ``handle_pointer`` or ``handle_key`` and ends in SceneModel
mutations. Degenerate gestures are dropped without raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from PySide6.QtCore import Property, QObject, Signal, Slot

from .constants import (
    ARROW_STEP,
    CREATE_THRESHOLD,
    MIN_SHAPE_SIZE,
    MIN_TEXT_HEIGHT,
    MIN_TEXT_WIDTH,
)
from .model import SHAPE, TEXT, SceneModel
from .types import ShapeType

logger = logging.getLogger(__name__)

HANDLES = ("nw", "n", "ne", "e", "se", "s", "sw", "w")
HANDLE_RADIUS = 6


@dataclass(frozen=True)
class HitTarget:
    """What lies under the pointer.

    ``kind`` is one of canvas, shape, text, group or handle. For a handle,
    ``entity_kind`` says whether it belongs to a shape or a text.
    """

    kind: str = "canvas"
    entity_id: int = -1
    entity_kind: str = ""
    handle: str = ""


CANVAS = HitTarget()


@dataclass(frozen=True)
class PointerEvent:
    kind: str  # down | move | up | leave | double_click
    x: float
    y: float
    target: Optional[HitTarget] = None
    ctrl: bool = False


@dataclass(frozen=True)
class Idle:
    name = "idle"


@dataclass(frozen=True)
class Creating:
    shape_type: ShapeType
    start_x: float
    start_y: float
    current_x: float
    current_y: float
    name = "creating"

    @property
    def rect(self) -> Tuple[float, float, float, float]:
        return (
            min(self.start_x, self.current_x),
            min(self.start_y, self.current_y),
            abs(self.current_x - self.start_x),
            abs(self.current_y - self.start_y),
        )


@dataclass(frozen=True)
class Dragging:
    entity_kind: str
    entity_id: int
    offset_x: float
    offset_y: float
    name = "dragging"


@dataclass(frozen=True)
class ResizeStart:
    pointer_x: float
    pointer_y: float
    width: int
    height: int
    origin_x: int
    origin_y: int


@dataclass(frozen=True)
class Resizing:
    entity_kind: str
    entity_id: int
    handle: str
    start: ResizeStart
    name = "resizing"


@dataclass(frozen=True)
class MarqueeSelecting:
    start_x: float
    start_y: float
    current_x: float
    current_y: float
    additive: bool = False
    name = "marquee"

    @property
    def rect(self) -> Tuple[float, float, float, float]:
        return (
            min(self.start_x, self.current_x),
            min(self.start_y, self.current_y),
            abs(self.current_x - self.start_x),
            abs(self.current_y - self.start_y),
        )


@dataclass(frozen=True)
class DraggingGroup:
    group_id: int
    start_x: float
    start_y: float
    member_starts: Tuple[Tuple[str, int, int, int], ...]
    name = "dragging-group"


@dataclass(frozen=True)
class EditingText:
    text_id: int
    created: bool = False
    name = "editing-text"


State = Union[Idle, Creating, Dragging, Resizing, MarqueeSelecting, DraggingGroup, EditingText]


def resize_box(handle: str, start: ResizeStart, x: float, y: float,
               min_width: int, min_height: int,
               canvas_width: Optional[int] = None,
               canvas_height: Optional[int] = None) -> Tuple[float, float, float, float]:
    """Return (x, y, width, height) for a handle drag from ``start``.

    Corner handles keep the opposite corner fixed, edge handles keep the
    other axis untouched. With a canvas size, the dragged edges stop at
    the canvas border instead of pushing the fixed edges inward.
    """
    dx = x - start.pointer_x
    dy = y - start.pointer_y
    left, top = start.origin_x, start.origin_y
    width, height = start.width, start.height
    if "e" in handle:
        width = max(min_width, start.width + dx)
    if "w" in handle:
        width = max(min_width, start.width - dx)
        left = start.origin_x + start.width - width
    if "s" in handle:
        height = max(min_height, start.height + dy)
    if "n" in handle:
        height = max(min_height, start.height - dy)
        top = start.origin_y + start.height - height
    if left < 0:
        width += left
        left = 0
    if top < 0:
        height += top
        top = 0
    if canvas_width is not None:
        width = min(width, canvas_width - left)
    if canvas_height is not None:
        height = min(height, canvas_height - top)
    return left, top, max(min_width, width), max(min_height, height)


class InteractionController(QObject):
    """State machine turning pointer and key input into scene edits."""

    stateChanged = Signal()
    pendingShapeTypeChanged = Signal()
    previewChanged = Signal()
    marqueeChanged = Signal()
    editingChanged = Signal()

    def __init__(self, model: SceneModel):
        super().__init__()
        self._model = model
        self._state: State = Idle()
        self._pending_type: Optional[ShapeType] = None
        self._last_x = 0.0
        self._last_y = 0.0

    # --- State ----------------------------------------------------------------
    @property
    def state(self) -> State:
        return self._state

    def _set_state(self, state: State) -> None:
        previous = self._state
        if previous == state:
            return
        self._state = state
        if previous.name != state.name:
            logger.debug("Interaction %s -> %s", previous.name, state.name)
        self.stateChanged.emit()
        if isinstance(previous, Creating) or isinstance(state, Creating):
            self.previewChanged.emit()
        if isinstance(previous, MarqueeSelecting) or isinstance(state, MarqueeSelecting):
            self.marqueeChanged.emit()
        if isinstance(previous, EditingText) or isinstance(state, EditingText):
            self.editingChanged.emit()

    @Property(str, notify=stateChanged)
    def stateName(self) -> str:
        return self._state.name

    @Property(str, notify=pendingShapeTypeChanged)
    def pendingShapeType(self) -> str:
        return self._pending_type.value if self._pending_type else ""

    @Property(int, notify=editingChanged)
    def editingTextId(self) -> int:
        if isinstance(self._state, EditingText):
            return self._state.text_id
        return -1

    @Property("QVariant", notify=previewChanged)
    def preview(self):
        """Creation preview with the rendered size floored to the minimum."""
        if not isinstance(self._state, Creating):
            return {}
        x, y, width, height = self._state.rect
        return {
            "type": self._state.shape_type.value,
            "x": x,
            "y": y,
            "width": max(MIN_SHAPE_SIZE, width),
            "height": max(MIN_SHAPE_SIZE, height),
        }

    @Property("QVariant", notify=marqueeChanged)
    def marquee(self):
        if not isinstance(self._state, MarqueeSelecting):
            return {}
        x, y, width, height = self._state.rect
        return {"x": x, "y": y, "width": width, "height": height}

    @Slot(str, result=bool)
    def armShapeType(self, type_name: str) -> bool:
        """Arm a shape type so the next canvas press starts drawing it."""
        shape_type = ShapeType.from_name(type_name)
        if shape_type is None or shape_type == ShapeType.IMAGE:
            return False
        self._commit_if_editing()
        self._pending_type = shape_type
        self.pendingShapeTypeChanged.emit()
        return True

    @Slot()
    def disarm(self) -> None:
        if self._pending_type is None:
            return
        self._pending_type = None
        self.pendingShapeTypeChanged.emit()

    # --- Hit testing ----------------------------------------------------------
    def _handle_points(self, entity):
        cx = entity.x + entity.width / 2
        cy = entity.y + entity.height / 2
        return {
            "nw": (entity.x, entity.y),
            "n": (cx, entity.y),
            "ne": (entity.right, entity.y),
            "e": (entity.right, cy),
            "se": (entity.right, entity.bottom),
            "s": (cx, entity.bottom),
            "sw": (entity.x, entity.bottom),
            "w": (entity.x, cy),
        }

    def _resizable_selection(self) -> Optional[Tuple[str, object]]:
        model = self._model
        for kind, entity_id in ((SHAPE, model.selectedShapeId), (TEXT, model.selectedTextId)):
            if entity_id < 0 or model.selectionCount != 1:
                continue
            entity = model.find_entity(kind, entity_id)
            if entity is None or entity.locked or model.group_of(kind, entity_id) is not None:
                continue
            return kind, entity
        return None

    def hit_test(self, x: float, y: float) -> HitTarget:
        selected = self._resizable_selection()
        if selected is not None:
            kind, entity = selected
            for handle, (hx, hy) in self._handle_points(entity).items():
                if abs(x - hx) <= HANDLE_RADIUS and abs(y - hy) <= HANDLE_RADIUS:
                    return HitTarget("handle", entity.id, kind, handle)
        hit = self._model.entity_at(x, y)
        if hit is not None:
            return HitTarget(hit[0], hit[1])
        for group in self._model.group_items:
            if group.x <= x <= group.x + group.width and group.y <= y <= group.y + group.height:
                return HitTarget("group", group.id)
        return CANVAS

    # --- Pointer input --------------------------------------------------------
    def handle_pointer(self, event: PointerEvent) -> None:
        target = event.target
        if event.kind == "down":
            self._last_x, self._last_y = event.x, event.y
            self._pointer_down(event, target or self.hit_test(event.x, event.y))
        elif event.kind == "move":
            self._last_x, self._last_y = event.x, event.y
            self._pointer_move(event.x, event.y)
        elif event.kind == "up":
            self._last_x, self._last_y = event.x, event.y
            self._pointer_up(event.x, event.y)
        elif event.kind == "leave":
            self._pointer_up(self._last_x, self._last_y)
        elif event.kind == "double_click":
            self._double_click(event, target or self.hit_test(event.x, event.y))

    def _pointer_down(self, event: PointerEvent, target: HitTarget) -> None:
        state = self._state
        if isinstance(state, EditingText):
            if target.kind == TEXT and target.entity_id == state.text_id:
                return
            self._commit_if_editing()
        elif not isinstance(state, Idle):
            return

        model = self._model
        if target.kind == "handle":
            self._start_resize(target, event.x, event.y)
            return
        if self._pending_type is not None:
            self._set_state(Creating(self._pending_type, event.x, event.y, event.x, event.y))
            return
        if target.kind in (SHAPE, TEXT):
            if event.ctrl:
                model.toggle_selection(target.kind, target.entity_id)
                return
            group = model.group_of(target.kind, target.entity_id)
            if group is not None:
                self._start_group_drag(group.id, event.x, event.y)
                return
            entity = model.find_entity(target.kind, target.entity_id)
            if entity is None:
                return
            model.select(target.kind, target.entity_id)
            if entity.locked:
                return
            self._set_state(Dragging(
                target.kind, target.entity_id, event.x - entity.x, event.y - entity.y
            ))
            return
        if target.kind == "group":
            self._start_group_drag(target.entity_id, event.x, event.y)
            return
        if not event.ctrl:
            model.clearSelection()
        self._set_state(MarqueeSelecting(event.x, event.y, event.x, event.y, event.ctrl))

    def _start_resize(self, target: HitTarget, x: float, y: float) -> None:
        entity = self._model.find_entity(target.entity_kind, target.entity_id)
        if entity is None or entity.locked or target.handle not in HANDLES:
            return
        if self._model.group_of(target.entity_kind, target.entity_id) is not None:
            return
        start = ResizeStart(x, y, entity.width, entity.height, entity.x, entity.y)
        self._set_state(Resizing(target.entity_kind, target.entity_id, target.handle, start))

    def _start_group_drag(self, group_id: int, x: float, y: float) -> None:
        model = self._model
        if not model.select_group(group_id):
            return
        if model.group_has_locked_member(group_id):
            return
        self._set_state(DraggingGroup(group_id, x, y, model.member_starts(group_id)))

    def _pointer_move(self, x: float, y: float) -> None:
        state = self._state
        model = self._model
        if isinstance(state, Creating):
            self._set_state(replace(state, current_x=x, current_y=y))
        elif isinstance(state, Dragging):
            if state.entity_kind == SHAPE:
                model.moveShape(state.entity_id, x - state.offset_x, y - state.offset_y)
            else:
                model.moveText(state.entity_id, x - state.offset_x, y - state.offset_y)
        elif isinstance(state, Resizing):
            if state.entity_kind == SHAPE:
                box = resize_box(
                    state.handle, state.start, x, y, MIN_SHAPE_SIZE, MIN_SHAPE_SIZE,
                    model.canvasWidth, model.canvasHeight,
                )
                model.setShapeGeometry(state.entity_id, *box)
            else:
                box = resize_box(
                    state.handle, state.start, x, y, MIN_TEXT_WIDTH, MIN_TEXT_HEIGHT,
                    model.canvasWidth, model.canvasHeight,
                )
                model.setTextGeometry(state.entity_id, *box)
        elif isinstance(state, MarqueeSelecting):
            self._set_state(replace(state, current_x=x, current_y=y))
        elif isinstance(state, DraggingGroup):
            model.translate_group(
                state.group_id, state.member_starts, x - state.start_x, y - state.start_y
            )

    def _pointer_up(self, x: float, y: float) -> None:
        state = self._state
        if isinstance(state, (Idle, EditingText)):
            return
        if isinstance(state, Creating):
            self._finish_create(replace(state, current_x=x, current_y=y))
            return
        if isinstance(state, MarqueeSelecting):
            self._finish_marquee(replace(state, current_x=x, current_y=y))
            return
        self._pointer_move(x, y)
        self._set_state(Idle())

    def _finish_create(self, state: Creating) -> None:
        self._set_state(Idle())
        self.disarm()
        x, y, width, height = state.rect
        if width < CREATE_THRESHOLD or height < CREATE_THRESHOLD:
            logger.debug("Discarded %.0fx%.0f %s", width, height, state.shape_type.value)
            return
        shape = self._model.add_shape(state.shape_type, x, y, width, height)
        self._model.select(SHAPE, shape.id)

    def _finish_marquee(self, state: MarqueeSelecting) -> None:
        self._set_state(Idle())
        x, y, width, height = state.rect
        if width == 0 and height == 0:
            return
        shape_ids, text_ids = self._model.entities_in_rect(x, y, x + width, y + height)
        if shape_ids or text_ids:
            self._model.select_many(shape_ids, text_ids, additive=state.additive)

    def _double_click(self, event: PointerEvent, target: HitTarget) -> None:
        # The second press of a double click has already started a gesture.
        if isinstance(self._state, (Dragging, MarqueeSelecting)):
            self._set_state(Idle())
        if not isinstance(self._state, (Idle, EditingText)):
            return
        if target.kind == TEXT:
            self.begin_text_edit(target.entity_id)
        elif target.kind == "canvas" and self._pending_type is None:
            self._commit_if_editing()
            text = self._model.add_text(event.x, event.y, "")
            self._model.select(TEXT, text.id)
            self._set_state(EditingText(text.id, created=True))

    # --- Text editing ---------------------------------------------------------
    def begin_text_edit(self, text_id: int) -> bool:
        text = self._model.getText(text_id)
        if text is None or text.locked:
            return False
        if isinstance(self._state, EditingText):
            if self._state.text_id == text_id:
                return True
            self._commit_if_editing()
        self._model.select(TEXT, text_id)
        self._set_state(EditingText(text_id))
        return True

    @Slot(int, result=bool)
    def beginTextEdit(self, text_id: int) -> bool:
        return self.begin_text_edit(text_id)

    def update_editing_text(self, content: str) -> None:
        """Replace the edited text's content wholesale."""
        if isinstance(self._state, EditingText):
            self._model.setTextContent(self._state.text_id, content)

    @Slot(str)
    def updateEditingText(self, content: str) -> None:
        self.update_editing_text(content)

    def commit_text_edit(self) -> None:
        """Leave text editing, as on Enter, Escape or focus loss."""
        self._commit_if_editing()

    @Slot()
    def commitTextEdit(self) -> None:
        self._commit_if_editing()

    def _commit_if_editing(self) -> None:
        state = self._state
        if not isinstance(state, EditingText):
            return
        self._set_state(Idle())
        text = self._model.getText(state.text_id)
        if state.created and text is not None and not text.text:
            # A text created by double-click and left empty is discarded.
            self._model.removeText(state.text_id)

    def _edit_key(self, state: EditingText, key: str, ctrl: bool, shift: bool) -> None:
        text = self._model.getText(state.text_id)
        if text is None:
            self._set_state(Idle())
            return
        if key == "Enter":
            if shift:
                self._model.setTextContent(state.text_id, text.text + "\n")
            else:
                self._commit_if_editing()
        elif key == "Escape":
            self._commit_if_editing()
        elif key == "Backspace":
            self._model.setTextContent(state.text_id, text.text[:-1])
        elif len(key) == 1 and not ctrl:
            self._model.setTextContent(state.text_id, text.text + key)

    # --- Keyboard input -------------------------------------------------------
    def handle_key(self, key: str, ctrl: bool = False, shift: bool = False) -> bool:
        """Handle a key press; returns True when the key was consumed."""
        state = self._state
        if isinstance(state, EditingText):
            self._edit_key(state, key, ctrl, shift)
            return True
        if not isinstance(state, Idle):
            return False

        model = self._model
        if ctrl:
            lowered = key.lower()
            if lowered == "c":
                return model.copySelection()
            if lowered == "v":
                return model.pasteFromClipboard()
            if lowered == "g" and shift:
                return model.selectedGroupId >= 0 and model.ungroup(model.selectedGroupId)
            if lowered == "g":
                return model.groupSelection() >= 0
            return False
        if key in ("Delete", "Backspace"):
            return model.removeSelection()
        if key == "Escape":
            self.disarm()
            model.clearSelection()
            return True
        if key in ("ArrowUp", "ArrowDown", "ArrowLeft", "ArrowRight"):
            return self._nudge(key)
        return False

    def _nudge(self, key: str) -> bool:
        model = self._model
        shape_id = model.selectedShapeId
        if shape_id < 0 or model.selectionCount != 1:
            return False
        shape = model.getShape(shape_id)
        if shape is None or shape.locked:
            return False
        dx, dy = {
            "ArrowUp": (0, -ARROW_STEP),
            "ArrowDown": (0, ARROW_STEP),
            "ArrowLeft": (-ARROW_STEP, 0),
            "ArrowRight": (ARROW_STEP, 0),
        }[key]
        model.moveShape(shape_id, shape.x + dx, shape.y + dy)
        return True

    # --- QML entry points -----------------------------------------------------
    @Slot(float, float, bool)
    def pointerDown(self, x: float, y: float, ctrl: bool = False) -> None:
        self.handle_pointer(PointerEvent("down", x, y, ctrl=ctrl))

    @Slot(float, float)
    def pointerMove(self, x: float, y: float) -> None:
        self.handle_pointer(PointerEvent("move", x, y))

    @Slot(float, float)
    def pointerUp(self, x: float, y: float) -> None:
        self.handle_pointer(PointerEvent("up", x, y))

    @Slot()
    def pointerLeave(self) -> None:
        self.handle_pointer(PointerEvent("leave", self._last_x, self._last_y))

    @Slot(float, float)
    def doubleClick(self, x: float, y: float) -> None:
        self.handle_pointer(PointerEvent("double_click", x, y))

    @Slot(str, bool, bool, result=bool)
    def keyPress(self, key: str, ctrl: bool = False, shift: bool = False) -> bool:
        return self.handle_key(key, ctrl, shift)
