"""Tests for code/scene synchronization."""

import pytest

from codecanvas.files import SourceFiles
from codecanvas.model import TEXT
from codecanvas.sync import SyncController
from codecanvas.types import Dialect

RECT_MARKUP = (
    "<root>\n"
    '  <shape id="5" type="rectangle">\n'
    '    <position x="10" y="20" />\n'
    '    <size width="100" height="80" />\n'
    '    <style color="#22c55e" zIndex="1" borderRadius="0" />\n'
    "  </shape>\n"
    "</root>"
)


@pytest.fixture
def sync(scene_model):
    return SyncController(scene_model, regenerate_delay_ms=0, parse_delay_ms=0)


class TestSceneToCode:
    def test_initial_code_is_placeholder(self, sync):
        assert sync.code == "<!-- Code appears here -->"
        assert sync.codeValid is True
        assert sync.activeDialect == "markup"

    def test_mutation_regenerates(self, scene_model, sync):
        scene_model.addShape("rectangle", 10, 10, 100, 80)
        assert '<shape id="1" type="rectangle">' in sync.code

    def test_debounced_regenerate_waits_for_flush(self, scene_model):
        sync = SyncController(scene_model, regenerate_delay_ms=150, parse_delay_ms=300)
        scene_model.addShape("rectangle", 10, 10, 100, 80)
        assert sync.code == "<!-- Code appears here -->"
        sync.flush()
        assert sync.code.startswith("<root>")

    def test_switch_dialect_regenerates(self, scene_model, sync):
        scene_model.addShape("rectangle", 10, 10, 100, 80)
        changes = []
        sync.activeDialectChanged.connect(lambda: changes.append(sync.activeDialect))
        assert sync.setActiveDialect("stylesheet") is True
        assert sync.code.startswith(".shape-1 {")
        assert sync.setActiveDialect("component") is True
        assert "export default Shapes;" in sync.code
        assert changes == ["stylesheet", "component"]
        assert sync.setActiveDialect("yaml") is False


class TestCodeToScene:
    def test_valid_edit_replaces_scene(self, scene_model, sync):
        sync.editCode(RECT_MARKUP)
        assert sync.isUserEditingCode is True
        assert sync.codeValid is True
        shape = scene_model.getShape(5)
        assert (shape.x, shape.y, shape.color) == (10, 20, "#22c55e")
        # The user's text is not rewritten under them.
        assert sync.code == RECT_MARKUP

    def test_invalid_edit_keeps_scene(self, scene_model, sync):
        scene_model.addShape("circle", 0, 0, 40, 40)
        sync.editCode("<root><shape")
        assert sync.codeValid is False
        assert scene_model.count == 1
        assert sync.code == "<root><shape"

    def test_recovering_from_invalid(self, scene_model, sync):
        sync.editCode("<root><shape")
        sync.editCode(RECT_MARKUP)
        assert sync.codeValid is True
        assert scene_model.count == 1

    def test_scene_changes_while_editing_are_deferred(self, scene_model, sync):
        sync.editCode(RECT_MARKUP)
        scene_model.moveShape(5, 200, 200)
        assert sync.code == RECT_MARKUP
        sync.endEditing()
        assert sync.isUserEditingCode is False
        assert '<position x="200" y="200" />' in sync.code

    def test_end_editing_flushes_pending_parse(self, scene_model):
        sync = SyncController(scene_model, regenerate_delay_ms=150, parse_delay_ms=300)
        sync.editCode(RECT_MARKUP)
        assert scene_model.count == 0
        sync.endEditing()
        assert scene_model.count == 1

    def test_dialect_switch_applies_pending_edit(self, scene_model):
        sync = SyncController(scene_model, regenerate_delay_ms=150, parse_delay_ms=300)
        sync.editCode(RECT_MARKUP)
        sync.setActiveDialect("stylesheet")
        assert sync.isUserEditingCode is False
        assert ".shape-5 {" in sync.code
        assert "background-color: #22c55e;" in sync.code

    def test_stylesheet_edit_keeps_text_content(self, scene_model, sync):
        text_id = scene_model.addText(10, 10, "keep me")
        sync.setActiveDialect("stylesheet")
        edited = sync.code.replace("left: 10px;", "left: 40px;")
        sync.editCode(edited)
        text = scene_model.getText(text_id)
        assert text.x == 40
        assert text.text == "keep me"

    def test_new_ids_do_not_collide_after_parse(self, scene_model, sync):
        sync.editCode(RECT_MARKUP)
        sync.endEditing()
        assert scene_model.addShape("rectangle", 0, 0, 50, 50) == 6

    def test_edit_preserves_selection_of_surviving_entities(self, scene_model, sync):
        text_id = scene_model.addText(10, 10, "x")
        scene_model.select(TEXT, text_id)
        sync.editCode(sync.code.replace('x="10"', 'x="30"', 1))
        assert scene_model.selectedTextId == text_id


class TestFiles:
    def test_bound_file_receives_regenerated_code(self, tmp_path, scene_model, sync):
        target = tmp_path / "scene.xml"
        sync.bindFile(str(target))
        scene_model.addShape("rectangle", 10, 10, 100, 80)
        assert target.read_text(encoding="utf-8") == sync.code

    def test_open_file_picks_dialect(self, tmp_path, scene_model, sync):
        source = tmp_path / "scene.css"
        source.write_text(
            ".shape-3 { position: absolute; left: 1px; top: 2px; width: 30px; height: 40px; z-index: 1; }",
            encoding="utf-8",
        )
        assert sync.openFile(str(source)) is True
        assert sync.activeDialect == "stylesheet"
        assert sync.boundFile == str(source)
        assert scene_model.getShape(3).height == 40
        assert sync.isUserEditingCode is False

    def test_open_invalid_file_keeps_scene_and_file(self, tmp_path, scene_model, sync):
        shape_id = scene_model.addShape("rectangle", 10, 10, 100, 80)
        source = tmp_path / "broken.tsx"
        source.write_text("export default nothing;", encoding="utf-8")
        assert sync.openFile(str(source)) is False
        assert sync.activeDialect == "markup"
        assert sync.boundFile == ""
        assert scene_model.getShape(shape_id) is not None

        scene_model.addShape("circle", 200, 200, 50, 50)
        assert source.read_text(encoding="utf-8") == "export default nothing;"

    def test_open_unreadable_file_keeps_scene_and_file(self, tmp_path, scene_model, sync):
        shape_id = scene_model.addShape("rectangle", 10, 10, 100, 80)
        source = tmp_path / "mine.xml"
        source.write_bytes(b"\xff\xfe")
        assert sync.openFile(str(source)) is False
        assert scene_model.count == 1
        assert scene_model.getShape(shape_id) is not None
        assert sync.boundFile == ""

        scene_model.addShape("circle", 200, 200, 50, 50)
        assert source.read_bytes() == b"\xff\xfe"

    def test_open_missing_file_keeps_bound_file(self, tmp_path, scene_model, sync):
        bound = tmp_path / "scene.xml"
        sync.bindFile(str(bound))
        assert sync.openFile(str(tmp_path / "gone.xml")) is False
        assert sync.boundFile == str(bound)

    def test_open_unsupported_extension(self, tmp_path, app, scene_model):
        files = SourceFiles()
        errors = []
        files.errorOccurred.connect(errors.append)
        sync = SyncController(scene_model, files, regenerate_delay_ms=0, parse_delay_ms=0)
        assert sync.openFile(str(tmp_path / "notes.txt")) is False
        assert errors

    def test_save_file(self, tmp_path, scene_model, sync):
        assert sync.saveFile() is False
        target = tmp_path / "out.xml"
        sync.bindFile(str(target))
        assert sync.saveFile() is True
        assert target.read_text(encoding="utf-8") == "<!-- Code appears here -->"

    def test_dialect_from_constructor(self, scene_model):
        sync = SyncController(scene_model, dialect=Dialect.COMPONENT, regenerate_delay_ms=0)
        assert sync.code == "// Code appears here"
