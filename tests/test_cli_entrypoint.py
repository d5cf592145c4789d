from __future__ import annotations

import importlib

import pytest

pytest.importorskip("typer")

from typer.testing import CliRunner  # noqa: E402

from dirt_finder.main import app  # noqa: E402

runner = CliRunner()

BOX_ARGS = ["-x", "0", "-X", "7", "-y", "0", "-Y", "0", "-z", "0", "-Z", "2"]
THREADS = ["--backend", "thread", "-w", "2"]


def test_console_entrypoint_exposes_app() -> None:
    module = importlib.import_module("dirt_finder.main")

    assert hasattr(module, "app")
    assert module.app is not None


def test_search_single_cell() -> None:
    args = ["search", "-f", "north", "-c", "[{dx:0,dy:0,dz:0,r:0}]", *THREADS]
    args += ["-x", "0", "-X", "0", "-y", "0", "-Y", "0", "-z", "0", "-Z", "0"]
    result = runner.invoke(app, args)

    assert result.exit_code == 0
    assert result.stdout == "[0, 0, 0]\n"


def test_search_rotation_list_with_facing() -> None:
    result = runner.invoke(app, ["search", "-f", "east", "-r", "3,2", *BOX_ARGS, *THREADS])

    assert result.exit_code == 0
    assert sorted(result.stdout.splitlines()) == ["[2, 0, 0]", "[5, 0, 2]", "[6, 0, 2]"]


def test_search_negative_bounds() -> None:
    args = ["search", "-f", "north", "-r", "0", "-x", "-4", "-X", "-1", "-y", "-1", "-Y", "-1", "-z", "-1", "-Z", "-1"]
    result = runner.invoke(app, [*args, *THREADS])

    assert result.exit_code == 0
    assert sorted(result.stdout.splitlines()) == ["[-1, -1, -1]", "[-4, -1, -1]"]


def test_search_without_matches_exits_cleanly() -> None:
    args = ["search", "-f", "north", "-r", "0,0,0,0,0,0,0,0,0,0,0,0", *BOX_ARGS, *THREADS]
    result = runner.invoke(app, args)

    assert result.exit_code == 0
    assert result.stdout == ""


@pytest.mark.parametrize(
    ("extra", "message"),
    [
        (["-f", "north", "-r", ","], "Predicate is empty"),
        (["-r", "0"], "Missing facing"),
        (["-f", "north", "-r", "0", "-c", "[{dx:0,dy:0,dz:0,r:0}]"], "not both"),
        (["-f", "north", "-c", "[{dx:0,dy:0,r:0}]"], "missing: dz"),
        (["-f", "north", "-r", "0", "-d", "h"], "Unsupported direction"),
    ],
)
def test_invalid_input_prints_usage_and_fails(extra: list[str], message: str) -> None:
    result = runner.invoke(app, ["search", *extra, *BOX_ARGS, *THREADS])

    assert result.exit_code == 1
    assert message in result.output
    assert "ROTATION" in result.output
    assert "[2, 0, 0]" not in result.output


def test_inverted_range_is_rejected() -> None:
    args = ["search", "-f", "north", "-r", "0", "-x", "5", "-X", "4", "-y", "0", "-Y", "0", "-z", "0", "-Z", "0"]
    result = runner.invoke(app, [*args, *THREADS])

    assert result.exit_code == 1
    assert "Invalid block range" in result.output


def test_orientation_command() -> None:
    result = runner.invoke(app, ["orientation", "--x", "1", "--y", "0", "--z", "0"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "1"


def test_settings_command() -> None:
    result = runner.invoke(app, ["settings"])

    assert result.exit_code == 0
    assert "dirt-finder" in result.output


@pytest.mark.parametrize(
    ("option", "value", "message"),
    [
        ("-x", "abc", "Invalid integer for minX"),
        ("-Z", "1.5", "Invalid integer for maxZ"),
        ("-w", "two", "Invalid integer for workers"),
    ],
)
def test_unparseable_integer_prints_usage_and_fails(option: str, value: str, message: str) -> None:
    args = ["search", "-f", "north", "-r", "0", *BOX_ARGS, "--backend", "thread", option, value]
    result = runner.invoke(app, args)

    assert result.exit_code == 1
    assert message in result.output
    assert "ROTATION" in result.output
