"""Tests for the workspace host: selection, units, and file import/export."""

import pytest

from lemlibpath.core.geometry import Control, EndControl, Segment
from lemlibpath.core.units import UnitOfLength
from lemlibpath.core.workspace import APP_VERSION, Workspace
from lemlibpath.errors import GrammarError
from lemlibpath.formats.lemlib_v0_4 import LemLibFormatV0_4
from lemlibpath.formats.pdj import PDJ_MARKER, import_pdj_data_from_file


def _segment(y0: float = 0, y1: float = 24) -> Segment:
    span = y1 - y0
    return Segment(
        EndControl(0, y0), Control(0, y0 + span / 3), Control(0, y0 + 2 * span / 3), EndControl(0, y1),
    )


@pytest.fixture
def ws() -> Workspace:
    return Workspace(format=LemLibFormatV0_4())


class TestSelection:
    def test_registers_format(self, ws):
        assert ws.format.is_init

    def test_no_paths(self, ws):
        assert ws.interested_path() is None

    def test_single_path_is_interested(self, ws):
        path = ws.add_path(ws.format.create_path(_segment()))
        assert ws.interested_path() is path

    def test_ambiguous_without_selection(self, ws):
        ws.add_path(ws.format.create_path(_segment()))
        ws.add_path(ws.format.create_path(_segment()))
        assert ws.interested_path() is None

    def test_selection_wins(self, ws):
        ws.add_path(ws.format.create_path(_segment()))
        second = ws.add_path(ws.format.create_path(_segment()))
        ws.select(second)
        assert ws.interested_path() is second

    def test_remove_clears_selection(self, ws):
        path = ws.add_path(ws.format.create_path(_segment()))
        ws.select(path)
        ws.remove_path(path)
        assert ws.selected == []


class TestUnits:
    def test_rescales_geometry_and_config(self, ws):
        ws.add_path(ws.format.create_path(_segment()))
        ws.set_unit_of_length(UnitOfLength.CENTIMETER)
        assert ws.format.get_general_config().point_density == pytest.approx(5.08)
        assert ws.paths[0].segments[0].last.y == pytest.approx(60.96)

    def test_same_unit_is_noop(self, ws):
        ws.add_path(ws.format.create_path(_segment()))
        ws.set_unit_of_length(UnitOfLength.INCH)
        assert ws.paths[0].segments[0].last.y == 24


class TestProjectData:
    def test_contents(self, ws):
        path = ws.add_path(ws.format.create_path(_segment()))
        path.name = "Skills"
        data = ws.export_pdj_data()
        assert data["appVersion"] == APP_VERSION
        assert data["format"] == ws.format.get_name()
        assert data["gc"]["uol"] == "in"
        assert data["paths"][0]["name"] == "Skills"
        assert data["paths"][0]["segments"][0][-1] == {"x": 0, "y": 24}

    def test_embedded_in_export(self, ws):
        ws.add_path(ws.format.create_path(_segment()))
        data = import_pdj_data_from_file(ws.export_file())
        assert data["format"] == ws.format.get_name()


class TestImport:
    def test_restores_names_and_settings(self, ws):
        path = ws.add_path(ws.format.create_path(_segment()))
        path.name = "Auton left"
        path.pc.speed_limit.from_ = 35
        path.pc.bent_rate_applicable_range.to = 0.4
        data = ws.export_file()

        other = Workspace(format=LemLibFormatV0_4())
        (restored,) = other.import_file(data)
        assert restored.name == "Auton left"
        assert restored.pc.speed_limit.from_ == 35
        assert restored.pc.bent_rate_applicable_range.to == 0.4
        assert other.interested_path() is restored
        assert other.selected == [restored.uid]

    def test_restores_unit_of_length(self, ws):
        ws.add_path(ws.format.create_path(_segment()))
        ws.set_unit_of_length(UnitOfLength.CENTIMETER)
        data = ws.export_file()

        other = Workspace(format=LemLibFormatV0_4())
        (restored,) = other.import_file(data)
        assert other.format.get_general_config().uol is UnitOfLength.CENTIMETER
        assert restored.segments[0].last.y == pytest.approx(60.96, abs=1e-3)

    def test_foreign_project_data_ignored(self, ws):
        text = (
            "endData\n127\n100\n200\n0, 0, 0, 8, 0, 16, 0, 24\n"
            f'{PDJ_MARKER} {{"format": "Other", "gc": {{"uol": "cm"}}, "paths": [{{"name": "X"}}]}}'
        )
        (path,) = ws.import_file(text.encode())
        assert path.name == "Path"
        assert ws.format.get_general_config().uol is UnitOfLength.INCH

    def test_plain_file_without_project_data(self, ws):
        (path,) = ws.import_file(b"endData\n127\n80\n200\n0, 0, 0, 8, 0, 16, 0, 24\n")
        assert path.pc.speed_limit.to == 80

    def test_failed_import_keeps_state(self, ws):
        existing = ws.add_path(ws.format.create_path(_segment()))
        text = (
            "endData\n127\n100\n200\n0, 0, 0, 8, 0, 16, 0\n"
            f'{PDJ_MARKER} {{"format": "{ws.format.get_name()}", "gc": {{"uol": "mm"}}}}'
        )
        with pytest.raises(GrammarError):
            ws.import_file(text.encode())
        assert ws.paths == [existing]
        assert ws.format.get_general_config().uol is UnitOfLength.INCH

    @pytest.mark.parametrize("project_data", [
        '"gc": {"uol": "cm"}, "paths": [{"pc": {"speedLimit": {"to": 90}}}]',
        '"gc": {"uol": "yd"}',
        '"gc": {"uol": "cm", "fieldImage": {"origin": "builtin"}}',
        '"gc": {"uol": "cm"}, "paths": ["Auton"]',
        '"gc": {"uol": "cm"}, "paths": 5',
    ])
    def test_malformed_project_data_rolls_back(self, ws, project_data):
        existing = ws.add_path(ws.format.create_path(_segment()))
        text = (
            "endData\n127\n100\n200\n0, 0, 0, 8, 0, 16, 0, 24\n"
            f'{PDJ_MARKER} {{"format": "{ws.format.get_name()}", {project_data}}}'
        )
        with pytest.raises(GrammarError, match="embedded path data"):
            ws.import_file(text.encode())
        assert ws.paths == [existing]
        gc = ws.format.get_general_config()
        assert gc.uol is UnitOfLength.INCH
        assert gc.point_density == 2
