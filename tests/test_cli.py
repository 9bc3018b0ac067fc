from __future__ import annotations

import json

import pytest

from cuboid_packer.cli import EXIT_BAD_INPUT, EXIT_OK, main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SCALAR", "EXACT_FIT_TOLERANCE", "MAX_ITEMS", "LOG_LEVEL"):
        monkeypatch.delenv(f"CUBOID_PACKER_{name}", raising=False)


def write_request(tmp_path, request: dict):
    path = tmp_path / "request.json"
    path.write_text(json.dumps(request), encoding="utf-8")
    return path


DECK_AND_DIE = {
    "bin": {"length": 8, "width": 8, "height": 12},
    "items": [
        {"id": "deck", "length": 2, "width": 8, "height": 12, "quantity": 4},
        {"id": "die", "length": 8, "width": 8, "height": 8},
    ],
}


def test_cli_writes_plan(tmp_path, capsys) -> None:
    """Test that the CLI packs a request and writes the plan JSON."""
    input_path = write_request(tmp_path, DECK_AND_DIE)
    output_path = tmp_path / "out" / "plan.json"

    assert main(["--input", str(input_path), "--output", str(output_path)]) == EXIT_OK

    plan = json.loads(output_path.read_text(encoding="utf-8"))
    assert plan["bin_count"] == 2
    assert plan["item_count"] == 5
    assert [b["item_ids"] for b in plan["bins"]] == [["deck"] * 4, ["die"]]
    assert plan["bins"][0]["fill_rate"] == pytest.approx(1.0)
    assert plan["counts_by_id"] == {"deck": 4, "die": 1}
    assert "Packed 5 items into 2 bins" in capsys.readouterr().out


def test_cli_quiet(tmp_path, capsys) -> None:
    input_path = write_request(tmp_path, DECK_AND_DIE)
    assert main(["--input", str(input_path), "--output", str(tmp_path / "plan.json"), "--quiet"]) == EXIT_OK
    assert capsys.readouterr().out == ""


def test_cli_items_do_not_fit(tmp_path) -> None:
    request = {
        "bin": {"length": 3, "width": 4.5, "height": 5},
        "items": [{"id": "item1", "length": 3, "width": 4.5, "height": 6}],
    }
    output_path = tmp_path / "plan.json"
    assert main(["--input", str(write_request(tmp_path, request)), "--output", str(output_path)]) == EXIT_BAD_INPUT
    assert not output_path.exists()


def test_cli_invalid_request(tmp_path) -> None:
    request = {"items": [{"id": "a", "length": 1, "width": 1, "height": 1}]}
    assert main(["--input", str(write_request(tmp_path, request)), "--output", str(tmp_path / "p.json")]) == EXIT_BAD_INPUT


def test_cli_missing_file(tmp_path) -> None:
    assert main(["--input", str(tmp_path / "nope.json"), "--output", str(tmp_path / "p.json")]) == EXIT_BAD_INPUT


def test_cli_max_items(tmp_path) -> None:
    input_path = write_request(tmp_path, DECK_AND_DIE)
    args = ["--input", str(input_path), "--output", str(tmp_path / "p.json"), "--max-items", "3"]
    assert main(args) == EXIT_BAD_INPUT


def test_cli_bad_tolerance(tmp_path) -> None:
    input_path = write_request(tmp_path, DECK_AND_DIE)
    args = ["--input", str(input_path), "--output", str(tmp_path / "p.json"), "--tolerance", "x"]
    assert main(args) == EXIT_BAD_INPUT


def test_cli_preset_and_scalar(tmp_path) -> None:
    request = {
        "bin_preset": "20",
        "items": [{"id": "crate", "length": 1.2, "width": 1.0, "height": 1.1, "quantity": 10}],
    }
    output_path = tmp_path / "plan.json"
    args = ["--input", str(write_request(tmp_path, request)), "--output", str(output_path), "--scalar", "decimal"]
    assert main(args) == EXIT_OK
    plan = json.loads(output_path.read_text(encoding="utf-8"))
    assert plan["item_count"] == 10
    assert sum(len(b["item_ids"]) for b in plan["bins"]) == 10


def test_cli_unwritable_output(tmp_path) -> None:
    """Test that an output path under a regular file is reported, not raised."""
    input_path = write_request(tmp_path, DECK_AND_DIE)
    blocker = tmp_path / "blocker"
    blocker.write_text("not a folder", encoding="utf-8")
    args = ["--input", str(input_path), "--output", str(blocker / "plan.json"), "--quiet"]
    assert main(args) == EXIT_BAD_INPUT
