"""Tests for stacking order operations."""

import random

from codecanvas.model import SHAPE, TEXT
from codecanvas.types import ParsedScene, Shape, ShapeType


def _z(model, kind, entity_id):
    return model.find_entity(kind, entity_id).z_index


class TestZOrder:
    def test_new_entities_stack_on_top(self, scene_model):
        first = scene_model.addShape("rectangle", 0, 0, 50, 50)
        text_id = scene_model.addText(0, 0, "t")
        second = scene_model.addShape("rectangle", 0, 0, 50, 50)
        assert _z(scene_model, SHAPE, first) < _z(scene_model, TEXT, text_id) < _z(scene_model, SHAPE, second)

    def test_bring_forward_swaps_with_next(self, scene_model):
        a = scene_model.addShape("rectangle", 0, 0, 50, 50)
        b = scene_model.addShape("rectangle", 0, 0, 50, 50)
        c = scene_model.addShape("rectangle", 0, 0, 50, 50)
        assert scene_model.bringForward(SHAPE, a) is True
        assert (_z(scene_model, SHAPE, a), _z(scene_model, SHAPE, b), _z(scene_model, SHAPE, c)) == (2, 1, 3)

    def test_bring_forward_on_top_is_noop(self, scene_model):
        scene_model.addShape("rectangle", 0, 0, 50, 50)
        top = scene_model.addShape("rectangle", 0, 0, 50, 50)
        assert scene_model.bringForward(SHAPE, top) is False

    def test_send_to_back_keeps_z_non_negative(self, scene_model):
        a = scene_model.addShape("rectangle", 0, 0, 50, 50)
        b = scene_model.addShape("rectangle", 0, 0, 50, 50)
        scene_model.replaceScene(ParsedScene(shapes=[
            Shape(id=a, shape_type=ShapeType.RECTANGLE, x=0, y=0, z_index=0),
            Shape(id=b, shape_type=ShapeType.RECTANGLE, x=0, y=0, z_index=1),
        ]))
        assert scene_model.sendToBack(SHAPE, b) is True
        assert _z(scene_model, SHAPE, b) == 0
        assert _z(scene_model, SHAPE, a) == 1

    def test_ties_are_broken(self, scene_model):
        scene_model.replaceScene(ParsedScene(shapes=[
            Shape(id=1, shape_type=ShapeType.RECTANGLE, x=0, y=0, z_index=3),
            Shape(id=2, shape_type=ShapeType.RECTANGLE, x=0, y=0, z_index=3),
        ]))
        assert scene_model.bringForward(SHAPE, 1) is True
        assert _z(scene_model, SHAPE, 1) > _z(scene_model, SHAPE, 2)
        assert scene_model.sendBackward(SHAPE, 2) is False
        assert scene_model.sendBackward(SHAPE, 1) is True
        assert _z(scene_model, SHAPE, 1) < _z(scene_model, SHAPE, 2)

    def test_unknown_entity(self, scene_model):
        assert scene_model.bringToFront(SHAPE, 99) is False
        assert scene_model.sendBackward(TEXT, 99) is False

    def test_locked_entities_can_be_reordered(self, scene_model):
        a = scene_model.addShape("rectangle", 0, 0, 50, 50)
        scene_model.addShape("rectangle", 0, 0, 50, 50)
        scene_model.setShapeLocked(a, True)
        assert scene_model.bringToFront(SHAPE, a) is True

    def test_random_operations_keep_invariants(self, scene_model):
        rng = random.Random(1234)
        entities = []
        for _ in range(4):
            entities.append((SHAPE, scene_model.addShape("rectangle", 0, 0, 50, 50)))
            entities.append((TEXT, scene_model.addText(0, 0, "t")))
        operations = ["bringForward", "sendBackward", "bringToFront", "sendToBack"]
        for _ in range(300):
            kind, entity_id = rng.choice(entities)
            operation = rng.choice(operations)
            getattr(scene_model, operation)(kind, entity_id)
            z_values = [entity.z_index for entity in scene_model._z_entities()]
            assert min(z_values) >= 0
            mine = _z(scene_model, kind, entity_id)
            others = [z for (k, i), z in zip(
                [(SHAPE, s.id) for s in scene_model.shapes] + [(TEXT, t.id) for t in scene_model.text_items],
                z_values,
            ) if (k, i) != (kind, entity_id)]
            if operation == "bringToFront":
                assert mine > max(others)
            elif operation == "sendToBack":
                assert mine < min(others)
