"""Tests for grouping and clipboard operations."""

import json

from PySide6.QtGui import QGuiApplication

from codecanvas.constants import CLIPBOARD_MIME_TYPE
from codecanvas.model import SHAPE, TEXT


def _pair(model):
    first = model.addShape("rectangle", 10, 10, 50, 50)
    second = model.addShape("circle", 100, 100, 40, 40)
    return first, second


class TestGroups:
    def test_create_group_from_ids(self, scene_model):
        first, second = _pair(scene_model)
        group_id = scene_model.createGroup([first, second], [])
        group = scene_model.getGroup(group_id)
        assert group.shape_ids == {first, second}
        assert (group.x, group.y, group.width, group.height) == (10, 10, 130, 130)
        assert group.z_index == 2
        assert scene_model.selectedGroupId == group_id
        assert scene_model.groupIdForShape(first) == group_id

    def test_group_needs_two_members(self, scene_model):
        first, _second = _pair(scene_model)
        assert scene_model.createGroup([first], []) == -1
        assert scene_model.createGroup([first, 99], []) == -1

    def test_group_selection_with_text(self, scene_model):
        shape_id = scene_model.addShape("rectangle", 0, 0, 50, 50)
        text_id = scene_model.addText(200, 200, "label")
        scene_model.select_many([shape_id], [text_id])
        group_id = scene_model.groupSelection()
        assert scene_model.groupIdForText(text_id) == group_id

    def test_entity_belongs_to_one_group(self, scene_model):
        first, second = _pair(scene_model)
        third = scene_model.addShape("rectangle", 300, 300, 50, 50)
        old = scene_model.createGroup([first, second], [])
        new = scene_model.createGroup([second, third], [])
        # The old group fell below two members and was dissolved.
        assert scene_model.getGroup(old) is None
        assert scene_model.groupIdForShape(second) == new

    def test_removing_member_dissolves_group(self, scene_model):
        first, second = _pair(scene_model)
        group_id = scene_model.createGroup([first, second], [])
        scene_model.removeShape(first)
        assert scene_model.getGroup(group_id) is None
        assert scene_model.getShape(second) is not None

    def test_move_group_clamps_to_canvas(self, scene_model):
        first, second = _pair(scene_model)
        group_id = scene_model.createGroup([first, second], [])
        scene_model.moveGroupBy(group_id, -100, 1000)
        assert (scene_model.getShape(first).x, scene_model.getShape(first).y) == (0, 470)
        assert (scene_model.getShape(second).x, scene_model.getShape(second).y) == (90, 560)
        group = scene_model.getGroup(group_id)
        assert (group.x, group.y) == (0, 470)

    def test_locked_member_blocks_group_move(self, scene_model):
        first, second = _pair(scene_model)
        group_id = scene_model.createGroup([first, second], [])
        scene_model.setShapeLocked(first, True)
        scene_model.moveGroupBy(group_id, 20, 20)
        assert scene_model.getShape(second).x == 100

    def test_ungroup_and_remove_selection(self, scene_model):
        first, second = _pair(scene_model)
        group_id = scene_model.createGroup([first, second], [])
        assert scene_model.removeSelection() is True
        assert scene_model.getGroup(group_id) is None
        assert scene_model.count == 2
        assert scene_model.ungroup(group_id) is False

    def test_group_name(self, scene_model):
        first, second = _pair(scene_model)
        group_id = scene_model.createGroup([first, second], [])
        scene_model.setGroupName(group_id, "pair")
        assert scene_model.groups[0]["name"] == "pair"


class TestClipboard:
    def test_copy_without_selection(self, scene_model):
        assert scene_model.copySelection() is False

    def test_copy_writes_envelope_and_text(self, scene_model):
        shape_id = scene_model.addShape("rectangle", 10, 10, 50, 50)
        scene_model.select(SHAPE, shape_id)
        assert scene_model.copySelection() is True
        mime_data = QGuiApplication.clipboard().mimeData()
        payload = json.loads(bytes(mime_data.data(CLIPBOARD_MIME_TYPE)).decode("utf-8"))
        assert payload["format"] == "codecanvas-scene"
        assert payload["markup"].startswith("<root>")
        assert mime_data.text() == payload["markup"]

    def test_paste_offsets_and_selects(self, scene_model):
        shape_id = scene_model.addShape("rectangle", 10, 10, 50, 50)
        text_id = scene_model.addText(100, 100, "copy me")
        scene_model.select_many([shape_id], [text_id])
        scene_model.copySelection()

        assert scene_model.pasteFromClipboard() is True
        assert scene_model.count == 2
        pasted_shape = scene_model.shapes[-1]
        pasted_text = scene_model.text_items[-1]
        assert pasted_shape.id != shape_id
        assert (pasted_shape.x, pasted_shape.y) == (30, 30)
        assert pasted_text.text == "copy me"
        assert scene_model.selected_shape_ids == {pasted_shape.id}
        assert scene_model.selected_text_ids == {pasted_text.id}

        scene_model.pasteFromClipboard()
        assert (scene_model.shapes[-1].x, scene_model.shapes[-1].y) == (50, 50)

    def test_paste_plain_markup(self, scene_model):
        QGuiApplication.clipboard().setText(
            '<root><text id="7"><position x="5" y="5" /><size width="100" height="40" />'
            "<content>pasted</content></text></root>"
        )
        assert scene_model.pasteFromClipboard() is True
        text = scene_model.text_items[0]
        assert text.text == "pasted"
        assert (text.x, text.y) == (25, 25)
        assert scene_model.selectedTextId == text.id

    def test_paste_garbage(self, scene_model):
        QGuiApplication.clipboard().setText("definitely not markup")
        assert scene_model.pasteFromClipboard() is False
        assert scene_model.count == 0
        assert scene_model.text_items == ()
