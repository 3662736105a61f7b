"""Tests for SceneModel shape, text, selection and scene operations."""

from PySide6.QtCore import QModelIndex

from codecanvas.model import SHAPE, TEXT, SceneModel
from codecanvas.types import Glow, Group, ParsedScene, Shadow, ShadowKind, Shape, ShapeType, Text


class TestShapes:
    def test_empty_model(self, scene_model):
        assert scene_model.rowCount() == 0
        assert scene_model.count == 0
        assert scene_model.texts == []
        assert scene_model.groups == []

    def test_add_shape_defaults(self, scene_model):
        shape_id = scene_model.addShape("rectangle", 10, 10, 100, 80)
        shape = scene_model.getShape(shape_id)
        assert (shape.x, shape.y, shape.width, shape.height) == (10, 10, 100, 80)
        assert shape.color == "#f9a8d4"
        assert shape.z_index == 1
        assert shape.border_radius is None

    def test_add_shape_unknown_type(self, scene_model):
        assert scene_model.addShape("blob", 0, 0, 50, 50) == -1
        assert scene_model.count == 0

    def test_rounded_rectangle_gets_radius(self, scene_model):
        shape_id = scene_model.addShape("roundedRectangle", 0, 0, 50, 50)
        assert scene_model.getShape(shape_id).border_radius == 10

    def test_ids_are_unique_across_kinds(self, scene_model):
        ids = [
            scene_model.addShape("circle", 0, 0, 40, 40),
            scene_model.addText(0, 0, "a"),
            scene_model.addShape("star", 0, 0, 40, 40),
        ]
        assert len(set(ids)) == 3

    def test_size_floor_and_bounds(self, scene_model):
        shape_id = scene_model.addShape("rectangle", 790, 590, 5, 5)
        shape = scene_model.getShape(shape_id)
        assert (shape.width, shape.height) == (20, 20)
        assert (shape.x, shape.y) == (780, 580)

    def test_move_clamps_to_canvas(self, scene_model):
        shape_id = scene_model.addShape("rectangle", 10, 10, 100, 80)
        scene_model.moveShape(shape_id, -50, 900)
        shape = scene_model.getShape(shape_id)
        assert (shape.x, shape.y) == (0, 520)

    def test_data_roles(self, scene_model):
        shape_id = scene_model.addShape("circle", 0, 0, 60, 60)
        index = scene_model.index(0, 0)
        assert scene_model.data(index, SceneModel.IdRole) == shape_id
        assert scene_model.data(index, SceneModel.TypeRole) == "circle"
        assert scene_model.data(index, SceneModel.BorderRadiusRole) == "50%"
        assert scene_model.data(index, SceneModel.OpacityRole) == 1.0
        assert scene_model.data(index, SceneModel.SelectedRole) is False
        assert scene_model.data(QModelIndex(), SceneModel.IdRole) is None

    def test_role_names(self, scene_model):
        names = scene_model.roleNames()
        assert names[SceneModel.XRole] == b"x"
        assert names[SceneModel.ClipPointsRole] == b"clipPoints"

    def test_polygon_clip_points(self, scene_model):
        scene_model.addShape("triangle", 0, 0, 100, 80)
        points = scene_model.data(scene_model.index(0, 0), SceneModel.ClipPointsRole)
        assert points[0] == {"x": 50.0, "y": 0.0}

    def test_style_setters(self, scene_model):
        shape_id = scene_model.addShape("rectangle", 0, 0, 50, 50)
        scene_model.setShapeColor(shape_id, "#000fff")
        scene_model.setShapeOpacity(shape_id, 0.25)
        scene_model.setShapeShadow(shape_id, "inner", "", 5, 1, 2)
        scene_model.setShapeGlow(shape_id, True, "", 12)
        scene_model.setShapeStroke(shape_id, "#111111", 3)
        shape = scene_model.getShape(shape_id)
        assert shape.color == "#000fff"
        assert shape.opacity == 0.25
        assert shape.shadow == Shadow(ShadowKind.INNER, "rgba(0, 0, 0, 0.3)", 5, 1, 2)
        assert shape.glow == Glow(True, None, 12)
        assert shape.stroke.width == 3

        scene_model.setShapeOpacity(shape_id, -1)
        scene_model.setShapeShadow(shape_id, "none", "", 0, 0, 0)
        scene_model.setShapeGlow(shape_id, False, "", 0)
        scene_model.setShapeStroke(shape_id, "", 0)
        shape = scene_model.getShape(shape_id)
        assert shape.opacity is None
        assert shape.shadow is None
        assert shape.glow is None
        assert shape.stroke is None

    def test_set_shape_type_resets_radius(self, scene_model):
        shape_id = scene_model.addShape("rounded-rectangle", 0, 0, 50, 50)
        scene_model.setShapeType(shape_id, "circle")
        assert scene_model.getShape(shape_id).border_radius is None
        scene_model.setShapeType(shape_id, "rounded-rectangle")
        assert scene_model.getShape(shape_id).border_radius == 10

    def test_locked_shape_ignores_edits(self, scene_model):
        shape_id = scene_model.addShape("rectangle", 0, 0, 50, 50)
        scene_model.setShapeLocked(shape_id, True)
        scene_model.moveShape(shape_id, 100, 100)
        scene_model.setShapeColor(shape_id, "#000000")
        shape = scene_model.getShape(shape_id)
        assert (shape.x, shape.y) == (0, 0)
        assert shape.color == "#f9a8d4"
        scene_model.setShapeLocked(shape_id, False)
        scene_model.moveShape(shape_id, 100, 100)
        assert scene_model.getShape(shape_id).x == 100

    def test_scene_changed_emitted_once_per_mutation(self, scene_model):
        calls = []
        scene_model.sceneChanged.connect(lambda: calls.append(1))
        shape_id = scene_model.addShape("rectangle", 0, 0, 50, 50)
        scene_model.moveShape(shape_id, 0, 0)
        assert len(calls) == 1

    def test_remove_shape(self, scene_model):
        shape_id = scene_model.addShape("rectangle", 0, 0, 50, 50)
        assert scene_model.removeShape(shape_id) is True
        assert scene_model.removeShape(shape_id) is False
        assert scene_model.count == 0


class TestTexts:
    def test_add_text_at_center(self, scene_model):
        text_id = scene_model.addTextAtCenter()
        text = scene_model.getText(text_id)
        assert (text.x, text.y, text.width, text.height) == (300, 275, 200, 50)
        assert text.text == "Enter text"
        assert text.font_size == 16
        assert text.font_family == "Arial"

    def test_font_size_clamped(self, scene_model):
        text_id = scene_model.addText(0, 0, "x")
        scene_model.setTextFontSize(text_id, 2)
        assert scene_model.getText(text_id).font_size == 8
        scene_model.setTextFontSize(text_id, 500)
        assert scene_model.getText(text_id).font_size == 200

    def test_text_resize_floor(self, scene_model):
        text_id = scene_model.addText(0, 0, "x")
        scene_model.setTextGeometry(text_id, 0, 0, 10, 10)
        text = scene_model.getText(text_id)
        assert (text.width, text.height) == (50, 30)

    def test_invalid_style_values_ignored(self, scene_model):
        text_id = scene_model.addText(0, 0, "x")
        scene_model.setTextFontWeight(text_id, "heavy")
        scene_model.setTextAlign(text_id, "justify")
        scene_model.setTextFontStyle(text_id, "italic")
        text = scene_model.getText(text_id)
        assert text.font_weight == "normal"
        assert text.text_align == "left"
        assert text.font_style == "italic"

    def test_texts_property(self, scene_model):
        text_id = scene_model.addText(5, 6, "hello")
        entry = scene_model.texts[0]
        assert entry["id"] == text_id
        assert entry["text"] == "hello"
        assert entry["selected"] is False


class TestSelectionAndHitTesting:
    def test_topmost_entity_wins(self, scene_model):
        lower = scene_model.addShape("rectangle", 0, 0, 100, 100)
        upper = scene_model.addShape("rectangle", 50, 50, 100, 100)
        assert scene_model.entity_at(75, 75) == (SHAPE, upper)
        assert scene_model.entity_at(10, 10) == (SHAPE, lower)
        assert scene_model.entity_at(400, 400) is None

    def test_text_above_shape(self, scene_model):
        scene_model.addShape("rectangle", 0, 0, 300, 300)
        text_id = scene_model.addText(10, 10, "top")
        assert scene_model.textIdAt(20, 20) == text_id
        assert scene_model.shapeIdAt(20, 20) == -1

    def test_select_and_toggle(self, scene_model):
        first = scene_model.addShape("rectangle", 0, 0, 50, 50)
        second = scene_model.addShape("rectangle", 100, 0, 50, 50)
        scene_model.selectShape(first, False)
        assert scene_model.selectedShapeId == first
        scene_model.toggle_selection(SHAPE, second)
        assert scene_model.selectionCount == 2
        scene_model.toggle_selection(SHAPE, first)
        assert scene_model.selected_shape_ids == {second}

    def test_entities_in_rect(self, scene_model):
        inside = scene_model.addShape("rectangle", 10, 10, 50, 50)
        scene_model.addShape("rectangle", 400, 400, 50, 50)
        text_id = scene_model.addText(30, 30, "t")
        assert scene_model.entities_in_rect(0, 0, 40, 40) == ({inside}, {text_id})

    def test_remove_selection_skips_locked(self, scene_model):
        kept = scene_model.addShape("rectangle", 0, 0, 50, 50)
        gone = scene_model.addShape("rectangle", 100, 0, 50, 50)
        scene_model.setShapeLocked(kept, True)
        scene_model.select_many([kept, gone], [])
        assert scene_model.removeSelection() is True
        assert scene_model.getShape(kept) is not None
        assert scene_model.getShape(gone) is None

    def test_removed_entity_leaves_selection(self, scene_model):
        shape_id = scene_model.addShape("rectangle", 0, 0, 50, 50)
        scene_model.select(SHAPE, shape_id)
        scene_model.removeShape(shape_id)
        assert scene_model.selectionCount == 0


class TestReplaceScene:
    def test_replace_floors_sizes_and_advances_ids(self, scene_model):
        scene = ParsedScene(
            shapes=[Shape(id=40, shape_type=ShapeType.RECTANGLE, x=0, y=0, width=5, height=5)],
            texts=[Text(id=41, x=0, y=0, width=10, height=10, font_size=1)],
        )
        scene_model.replaceScene(scene)
        shape = scene_model.getShape(40)
        text = scene_model.getText(41)
        assert (shape.width, shape.height) == (20, 20)
        assert (text.width, text.height, text.font_size) == (50, 30, 8)
        assert scene_model.addShape("circle", 0, 0, 30, 30) == 42

    def test_replace_does_not_alias_input(self, scene_model):
        shape = Shape(id=1, shape_type=ShapeType.RECTANGLE, x=0, y=0)
        scene_model.replaceScene(ParsedScene(shapes=[shape]))
        scene_model.moveShape(1, 50, 50)
        assert shape.x == 0

    def test_replace_prunes_selection(self, scene_model):
        shape_id = scene_model.addShape("rectangle", 0, 0, 50, 50)
        scene_model.select(SHAPE, shape_id)
        scene_model.replaceScene(ParsedScene())
        assert scene_model.selectionCount == 0
        assert scene_model.count == 0

    def test_replace_adopts_groups(self, scene_model):
        scene = ParsedScene(
            shapes=[Shape(id=1, shape_type=ShapeType.RECTANGLE, x=0, y=0, width=50, height=50),
                    Shape(id=2, shape_type=ShapeType.RECTANGLE, x=100, y=100, width=50, height=50)],
            groups=[Group(id=3, shape_ids={1, 2, 99})],
        )
        scene_model.replaceScene(scene)
        group = scene_model.getGroup(3)
        assert group.shape_ids == {1, 2}
        assert (group.x, group.y, group.width, group.height) == (0, 0, 150, 150)

    def test_ids_never_reused_after_removal(self, scene_model):
        first = scene_model.addShape("rectangle", 0, 0, 50, 50)
        scene_model.removeShape(first)
        scene_model.replaceScene(ParsedScene())
        assert scene_model.addShape("rectangle", 0, 0, 50, 50) != first

    def test_adopted_ids_never_reissued(self, scene_model):
        scene_model.replaceScene(ParsedScene(shapes=[Shape(id=50, shape_type=ShapeType.RECTANGLE, x=0, y=0)]))
        scene_model.replaceScene(ParsedScene(shapes=[Shape(id=3, shape_type=ShapeType.RECTANGLE, x=0, y=0)]))
        assert scene_model.addShape("rectangle", 0, 0, 50, 50) == 51

    def test_snapshot_is_detached(self, scene_model):
        shape_id = scene_model.addShape("rectangle", 0, 0, 50, 50)
        snapshot = scene_model.snapshot()
        scene_model.moveShape(shape_id, 70, 70)
        assert snapshot.shapes[0].x == 0
