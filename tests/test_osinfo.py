"""Tests for /etc/os-release parsing and arch mapping."""

from ccr_installer.lib.osinfo import detect_os_release, normalize_node_arch, parse_os_release


def test_parse_os_release_strips_quotes_and_skips_comments() -> None:
    text = '# comment\n\nNAME="Ubuntu"\nVERSION_ID="24.04"\nID=ubuntu\nPRETTY_NAME=\'Ubuntu 24.04 LTS\'\n'
    values = parse_os_release(text)
    assert values["VERSION_ID"] == "24.04"
    assert values["ID"] == "ubuntu"
    assert values["PRETTY_NAME"] == "Ubuntu 24.04 LTS"
    assert "# comment" not in values


def test_parse_os_release_tolerates_unbalanced_quotes() -> None:
    assert parse_os_release('VERSION_ID="22.04\n')["VERSION_ID"] == "22.04"


def test_detect_os_release_reads_file(os_release) -> None:
    osr = detect_os_release(str(os_release))
    assert osr is not None
    assert osr.version_id == "22.04"
    assert osr.is_ubuntu
    assert osr.detected


def test_detect_os_release_missing_file(tmp_path) -> None:
    assert detect_os_release(str(tmp_path / "nope")) is None


def test_detect_os_release_without_version_id(tmp_path) -> None:
    p = tmp_path / "os-release"
    p.write_text("ID=debian\n", encoding="utf-8")
    osr = detect_os_release(str(p))
    assert osr is not None
    assert not osr.detected
    assert not osr.is_ubuntu


def test_normalize_node_arch() -> None:
    assert normalize_node_arch("x86_64") == "x64"
    assert normalize_node_arch("aarch64") == "arm64"
    assert normalize_node_arch("armv7l") == "armv7l"
    assert normalize_node_arch("riscv64") == "riscv64"
