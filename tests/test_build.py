"""End-to-end tests for building the installer archive."""

import json
import logging
import os
import shutil
import stat
import tarfile

import pytest

from ccr_installer.build import main, run_build
from ccr_installer.errors import BuildError
from ccr_installer.lib import npm

requires_tar_xz = pytest.mark.skipif(
    shutil.which("tar") is None or shutil.which("xz") is None,
    reason="needs tar with xz support",
)


def _members(archive):
    with tarfile.open(archive, "r:gz") as tf:
        return {m.name[2:] if m.name.startswith("./") else m.name: m for m in tf.getmembers()}


def _offline(node_tarball):
    return {"node": {"local_archive": str(node_tarball)}, "build": {"run_npm": False}}


def test_missing_package_json_exits_1(tmp_path, caplog) -> None:
    caplog.set_level(logging.INFO)
    rc = main(["--project-root", str(tmp_path), "--skip-npm"])
    assert rc == 1
    assert "package.json not found" in caplog.text
    assert not list(tmp_path.glob("*.tar.gz"))


def test_explicit_missing_config_exits_1(node_project) -> None:
    assert main(["--project-root", str(node_project), "--config", "nope.yaml"]) == 1


@requires_tar_xz
def test_builds_installer_archive(node_project, node_tarball, os_release) -> None:
    state = run_build(
        project_root=str(node_project),
        overrides=_offline(node_tarball),
        os_release_path=str(os_release),
    )

    archive = node_project / "claude-router-installer-linux-x64-ubuntu22.04.tar.gz"
    assert archive.is_file()
    assert state["artifact"]["name"] == archive.name
    assert state["project"]["version"] == "1.0.8"
    assert (node_project / (archive.name + ".sha256")).is_file()
    assert not (node_project / "installer-temp").exists()
    # Prebuilt output survives the clean step when npm is skipped.
    assert (node_project / "dist" / "cli.js").is_file()

    members = _members(archive)
    for name in (
        "nodejs/bin/node",
        "app/cli.js",
        "app/tiktoken_bg.wasm",
        "install.sh",
        "uninstall.sh",
        "claude-code-router",
        "claude-code-router.service",
        "README_INSTALLER.md",
        "README.md",
        "LICENSE",
        "config.example.json",
    ):
        assert name in members, name

    for name in ("claude-code-router", "install.sh", "uninstall.sh", "nodejs/bin/node"):
        assert members[name].mode & stat.S_IXUSR, name

    with tarfile.open(archive, "r:gz") as tf:
        unit = tf.extractfile(members["claude-code-router.service"]).read().decode("utf-8")
    assert "Restart=always" in unit
    assert "ExecStart=/opt/claude-code-router/claude-code-router" in unit

    saved = json.loads((node_project / ".ccr-installer" / "build_state.json").read_text(encoding="utf-8"))
    assert saved["execution"]["completed_steps"][-1] == "90_finalize"
    assert saved["execution"]["errors"] == []


@requires_tar_xz
def test_archive_default_name_without_os_release(node_project, node_tarball, tmp_path) -> None:
    run_build(
        project_root=str(node_project),
        overrides=_offline(node_tarball),
        os_release_path=str(tmp_path / "missing-os-release"),
        keep_staging=True,
    )
    assert (node_project / "claude-router-installer.tar.gz").is_file()
    assert os.access(node_project / "installer-temp" / "claude-code-router", os.X_OK)


@requires_tar_xz
def test_previous_archives_are_cleaned(node_project, node_tarball, os_release) -> None:
    stale = node_project / "claude-router-installer-linux-x64-ubuntu20.04.tar.gz"
    stale.write_bytes(b"old")
    run_build(project_root=str(node_project), overrides=_offline(node_tarball), os_release_path=str(os_release))
    assert not stale.exists()


@requires_tar_xz
def test_resume_after_failure(node_project, node_tarball, os_release) -> None:
    (node_project / "LICENSE").unlink()
    with pytest.raises(BuildError, match="Required file missing"):
        run_build(project_root=str(node_project), overrides=_offline(node_tarball), os_release_path=str(os_release))

    state_file = node_project / ".ccr-installer" / "build_state.json"
    failed = json.loads(state_file.read_text(encoding="utf-8"))
    assert failed["execution"]["errors"][0]["step"] == "50_stage_app"

    (node_project / "LICENSE").write_text("MIT\n", encoding="utf-8")
    state = run_build(
        project_root=str(node_project),
        overrides=_offline(node_tarball),
        os_release_path=str(os_release),
        resume=True,
    )
    assert state["execution"]["summary"]["skipped_steps"] == [
        "10_inspect_project",
        "20_clean",
        "30_build_app",
        "40_fetch_runtime",
    ]
    assert (node_project / "claude-router-installer-linux-x64-ubuntu22.04.tar.gz").is_file()


def test_npm_install_and_build_invoked(node_project, monkeypatch, os_release) -> None:
    calls = []
    monkeypatch.setattr(npm, "run_cmd", lambda argv, **kw: calls.append((list(argv), kw.get("cwd"))))

    state = run_build(project_root=str(node_project), stop_after="30_build_app", os_release_path=str(os_release))

    assert calls == [
        (["npm", "install"], str(node_project)),
        (["npm", "run", "build"], str(node_project)),
    ]
    assert state["execution"]["summary"]["ran_steps"][-1] == "30_build_app"


def test_dry_run_touches_nothing(node_project, os_release) -> None:
    run_build(project_root=str(node_project), dry_run=True, os_release_path=str(os_release))
    assert not (node_project / "installer-temp").exists()
    assert not list(node_project.glob("*.tar.gz"))
    assert (node_project / "dist" / "cli.js").is_file()


def test_download_failure_exits_1(node_project, monkeypatch) -> None:
    monkeypatch.setenv("PATH", "")
    assert main(["--project-root", str(node_project), "--skip-npm"]) == 1


def test_dry_run_before_first_build(node_project) -> None:
    shutil.rmtree(node_project / "dist")
    rc = main(["--project-root", str(node_project), "--dry-run"])
    assert rc == 0
    assert not (node_project / "dist").exists()
    assert not (node_project / "installer-temp").exists()


@requires_tar_xz
def test_start_at_later_step_keeps_versioned_archive_name(node_project, node_tarball, os_release) -> None:
    state = run_build(
        project_root=str(node_project),
        overrides=_offline(node_tarball),
        os_release_path=str(os_release),
        start_at="40_fetch_runtime",
    )

    assert state["project"]["version"] == "1.0.8"
    assert state["execution"]["summary"]["ran_steps"][0] == "40_fetch_runtime"
    assert (node_project / "claude-router-installer-linux-x64-ubuntu22.04.tar.gz").is_file()
    assert not (node_project / "claude-router-installer.tar.gz").exists()
