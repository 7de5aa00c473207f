"""Tests for build state persistence."""

import pytest

from ccr_installer.state_store import (
    ensure_defaults,
    is_step_completed,
    load_state,
    mark_step_completed,
    save_state,
)


def test_missing_state_is_empty(tmp_path) -> None:
    assert load_state(str(tmp_path / "state.json")) == {}


def test_json_and_yaml_state_persist(tmp_path) -> None:
    state = ensure_defaults({})
    mark_step_completed(state, "10_inspect_project")
    mark_step_completed(state, "10_inspect_project")

    for name in ("nested/state.json", "state.yaml"):
        path = str(tmp_path / name)
        save_state(path, state)
        loaded = load_state(path)
        assert loaded["execution"]["completed_steps"] == ["10_inspect_project"]
        assert is_step_completed(loaded, "10_inspect_project")
        assert not is_step_completed(loaded, "20_clean")


def test_non_object_state_rejected(tmp_path) -> None:
    p = tmp_path / "state.json"
    p.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_state(str(p))


def test_ensure_defaults_keeps_existing_values() -> None:
    state = ensure_defaults({"project": {"version": "1.2.3"}, "execution": {"errors": ["x"]}})
    assert state["project"] == {"version": "1.2.3"}
    assert state["execution"]["errors"] == ["x"]
    assert state["execution"]["completed_steps"] == []
    assert state["artifact"] == {}
