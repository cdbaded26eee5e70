from __future__ import annotations

import json
from pathlib import Path

import pytest

from l10nbot.models.resources import ScanResult, StringEntry
from scripts import scan_resources


def _write(root: Path, relative: str, content: str) -> None:
    target = root / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")


@pytest.fixture()
def checkout(tmp_path: Path) -> Path:
    _write(
        tmp_path,
        "app/src/main/res/values/strings.xml",
        '<resources><string name="welcome">Hello</string><string name="bye">Goodbye</string></resources>',
    )
    _write(tmp_path, "app/src/main/res/values-es/strings.xml", '<resources><string name="welcome">Hola</string></resources>')
    return tmp_path


def test_json_report_lists_missing_keys(checkout: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        scan_resources.main([str(checkout), "--format", "json"])

    assert excinfo.value.code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["totalStrings"] == 2
    assert payload["defaultPaths"] == ["app/src/main/res/values/strings.xml"]
    locales = {row["locale"]: row for row in payload["locales"]}
    assert locales["es"]["missingKeys"] == ["bye"]
    assert locales["es"]["coverage"] == 50.0
    assert locales["en"]["missing"] == 0


def test_table_report_can_show_missing_keys(checkout: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        scan_resources.main([str(checkout), "--show-missing", "--default-locale", "en-US"])

    assert excinfo.value.code == 0
    output = capsys.readouterr().out
    assert output.splitlines()[0].split() == ["Locale", "Translated", "Missing", "Coverage"]
    assert "en-US" in output
    assert "- bye" in output
    assert "Default strings: 2" in output


def test_checkout_without_resources_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path, "README.md", "# Nothing here")

    with pytest.raises(SystemExit) as excinfo:
        scan_resources.main([str(tmp_path)])

    assert excinfo.value.code == 1
    assert "No translatable string files" in capsys.readouterr().out


def test_missing_root_is_a_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        scan_resources.main([str(tmp_path / "absent")])

    assert excinfo.value.code == 2


def test_coverage_rows_handle_empty_default_set() -> None:
    result = ScanResult(
        default_strings=(),
        existing_by_locale={"fr": (StringEntry(key="a", value="A"),)},
        missing_by_locale={"fr": ()},
        available_locales=("fr",),
        total_strings=0,
    )

    assert scan_resources.coverage_rows(result) == [("fr", 0, 0, 100.0)]
