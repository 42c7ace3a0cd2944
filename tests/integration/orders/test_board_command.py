"""Integration tests for the ``board`` management command.

Runs the command against a file backend in a temporary directory and
checks both the printed output and the document left on disk.
"""

import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

pytestmark = pytest.mark.integration


@pytest.fixture()
def state_file(tmp_path, settings, mixed_document):
    path = tmp_path / "appState.json"
    path.write_text(json.dumps(mixed_document), encoding="utf-8")
    settings.ORDER_STATE_BACKEND = "file"
    settings.ORDER_STATE_FILE = str(path)
    settings.ORDER_SEED_ON_EMPTY = False
    return path


@pytest.fixture()
def machines_file(tmp_path, settings):
    path = tmp_path / "machines.json"
    path.write_text(
        json.dumps([{"id": "machine-A", "name": "Maschine A"}, {"id": "machine-B", "name": "Maschine B"}]),
        encoding="utf-8",
    )
    settings.MACHINES_FILE = str(path)
    return path


def run(*args) -> str:
    out = StringIO()
    call_command("board", *args, stdout=out, stderr=StringIO())
    return out.getvalue()


def stored(path) -> list[dict]:
    return json.loads(path.read_text(encoding="utf-8"))


class TestBoardQueries:
    def test_list_prints_main_list_then_lanes(self, state_file):
        output = run("list")
        lines = output.splitlines()

        assert lines[0].startswith("ID")
        assert [line.split("|")[0].strip() for line in lines[2:]] == ["1", "2", "3"]

    def test_list_sorted_by_product(self, state_file):
        output = run("list", "--sort", "product-desc")
        first_column = [line.split("|")[0].strip() for line in output.splitlines()[2:]]

        assert first_column == ["2", "1", "3"]

    def test_lanes_groups_by_machine(self, state_file, machines_file):
        output = run("lanes")

        assert "Main list (2)" in output
        assert "Maschine A (1)" in output
        assert "Maschine B (0)" in output
        assert "<empty>" in output

    def test_machines_lists_configuration(self, machines_file):
        output = run("machines")
        assert "machine-A\tMaschine A" in output

    def test_missing_machines_file_is_an_error(self, settings, tmp_path):
        settings.MACHINES_FILE = str(tmp_path / "absent.json")
        with pytest.raises(CommandError, match="Could not load machine data"):
            run("machines")


class TestBoardCommands:
    def test_add_assigns_next_id_in_main_list(self, state_file):
        output = run("add", "--product", "Drucker", "--quantity", "2", "--status", "yellow")

        assert "Added order #4." in output
        added = stored(state_file)[-1]
        assert added["id"] == 4
        assert added["productName"] == "Drucker"
        assert added["location"] == "main-list"

    def test_add_rejects_unknown_status(self, state_file):
        with pytest.raises(CommandError, match="not one of"):
            run("add", "--product", "Drucker", "--quantity", "1", "--status", "blue")
        assert len(stored(state_file)) == 3

    def test_add_rejects_zero_quantity(self, state_file):
        with pytest.raises(CommandError, match="Quantity must be at least 1"):
            run("add", "--product", "Drucker", "--quantity", "0", "--status", "red")

    def test_update_merges_given_fields(self, state_file):
        run("update", "3", "--quantity", "5", "--customer", "Stadtwerke")

        order = next(o for o in stored(state_file) if o["id"] == 3)
        assert order["quantity"] == 5
        assert order["customerName"] == "Stadtwerke"
        assert order["productName"] == "Keyboard"
        assert order["location"] == "machine-A"

    def test_update_unknown_order_is_an_error(self, state_file):
        with pytest.raises(CommandError, match="#99 not found"):
            run("update", "99", "--quantity", "5")

    def test_delete(self, state_file):
        assert "Deleted order #2." in run("delete", "2")
        assert [o["id"] for o in stored(state_file)] == [1, 3]

    def test_delete_unknown_order_is_an_error(self, state_file):
        with pytest.raises(CommandError):
            run("delete", "42")

    def test_move_reconciles_target_lane(self, state_file):
        run("move", "1", "machine-A", "--ids", "3,1")

        assert [(o["id"], o["location"]) for o in stored(state_file)] == [
            (3, "machine-A"),
            (1, "machine-A"),
            (2, "main-list"),
        ]

    def test_move_with_malformed_ids_is_an_error(self, state_file):
        with pytest.raises(CommandError, match="--ids"):
            run("move", "1", "machine-A", "--ids", "1,x")

    def test_reorder_by_index(self, state_file):
        run("reorder", "0", "2")
        assert [o["id"] for o in stored(state_file)] == [2, 3, 1]

    def test_reorder_out_of_range_is_an_error(self, state_file):
        with pytest.raises(CommandError, match="between 0 and 2"):
            run("reorder", "0", "3")
        assert [o["id"] for o in stored(state_file)] == [1, 2, 3]

    def test_memory_backend_override_leaves_file_untouched(self, state_file):
        before = state_file.read_text(encoding="utf-8")

        output = run("--backend", "memory", "add", "--product", "X", "--quantity", "1", "--status", "red")

        assert "Added order #1." in output
        assert state_file.read_text(encoding="utf-8") == before
