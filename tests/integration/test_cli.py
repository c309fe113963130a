"""Integration tests for the folio CLI.

These tests render the sample templates in tests/fixtures/templates.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from folio import __version__
from folio.cli import app
from tests.fixtures import TEMPLATES_DIR

runner = CliRunner()

EXPECTED_PROFILE = (
    "<title>Profile</title>\n"
    "<aside><p>Recently viewed</p></aside>\n"
    "<main>\n"
    "<h1>Hello, Ada &amp; co</h1>\n"
    '<span class="badge">ADMIN</span>\n'
    "</main>\n"
)


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command from an empty directory so no config is discovered."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestFolioRender:
    """Integration tests for `folio render`."""

    def test_render_with_layouts(self) -> None:
        """Test rendering a page through two layouts with a section and a partial."""
        result = runner.invoke(
            app,
            [
                "render", "profile",
                "--directory", str(TEMPLATES_DIR),
                "--data", "name=Ada & co",
                "--data", "role=admin",
            ],
        )

        assert result.exit_code == 0, result.output
        assert result.stdout == EXPECTED_PROFILE

    def test_render_to_file(self, tmp_path: Path) -> None:
        output_path = tmp_path / "out" / "profile.html"

        result = runner.invoke(
            app,
            [
                "render", "profile",
                "--directory", str(TEMPLATES_DIR),
                "--data", "name=Ada & co",
                "--data", "role=admin",
                "--output", str(output_path),
            ],
        )

        assert result.exit_code == 0, result.output
        assert output_path.read_text(encoding="utf-8") == EXPECTED_PROFILE

    def test_render_with_data_file_and_layout(self, tmp_path: Path) -> None:
        data_file = tmp_path / "data.yaml"
        data_file.write_text("title: Badge page\nlabel: ' new '\n")

        result = runner.invoke(
            app,
            [
                "render", "partials.badge",
                "--directory", str(TEMPLATES_DIR),
                "--data-file", str(data_file),
                "--layout", "base",
            ],
        )

        assert result.exit_code == 0, result.output
        assert result.stdout == '<title>Badge page</title>\n<span class="badge">NEW</span>\n'

    def test_render_from_config(self, tmp_path: Path) -> None:
        """Test that folders and shared data come from folio.yaml."""
        (tmp_path / "folio.yaml").write_text(
            f"directory: {TEMPLATES_DIR}\n"
            "folders:\n"
            f"  emails: {TEMPLATES_DIR / 'emails'}\n"
            "data:\n"
            "  site: Example\n"
        )

        result = runner.invoke(app, ["render", "emails::welcome", "--data", "name=Ada"])

        assert result.exit_code == 0, result.output
        assert result.stdout == "Welcome to Example, Ada!\n"

    def test_render_missing_template(self) -> None:
        result = runner.invoke(app, ["render", "missing", "--directory", str(TEMPLATES_DIR)])

        assert result.exit_code == 1
        assert "missing.py" in result.output

    def test_render_failing_template(self) -> None:
        result = runner.invoke(app, ["render", "broken", "--directory", str(TEMPLATES_DIR)])

        assert result.exit_code == 1
        assert "template exploded" in result.output
        assert "never shown" not in result.output

    def test_render_bad_data_pair(self) -> None:
        result = runner.invoke(
            app,
            ["render", "profile", "--directory", str(TEMPLATES_DIR), "--data", "novalue"],
        )

        assert result.exit_code != 0


class TestFolioCheck:
    """Integration tests for `folio check`."""

    def test_check_existing(self) -> None:
        result = runner.invoke(app, ["check", "layout", "--directory", str(TEMPLATES_DIR)])

        assert result.exit_code == 0
        assert str(TEMPLATES_DIR / "layout.py") in result.stdout

    def test_check_missing_json(self) -> None:
        result = runner.invoke(
            app,
            ["check", "nowhere", "--directory", str(TEMPLATES_DIR), "--json"],
        )

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload == {
            "name": "nowhere",
            "exists": False,
            "path": str(TEMPLATES_DIR / "nowhere.py"),
        }

    def test_check_invalid_name(self) -> None:
        result = runner.invoke(app, ["check", "a::b::c", "--directory", str(TEMPLATES_DIR)])

        assert result.exit_code == 1


class TestFolioInit:
    """Integration tests for `folio init`."""

    def test_init_creates_config(self, isolated_cwd: Path) -> None:
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert (isolated_cwd / "folio.yaml").exists()

    def test_init_refuses_overwrite(self, isolated_cwd: Path) -> None:
        (isolated_cwd / "folio.yaml").write_text("directory: x\n")

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert (isolated_cwd / "folio.yaml").read_text() == "directory: x\n"

    def test_init_force(self, isolated_cwd: Path) -> None:
        (isolated_cwd / "folio.yaml").write_text("directory: x\n")

        result = runner.invoke(app, ["init", "--force"])

        assert result.exit_code == 0
        assert "file_extension" in (isolated_cwd / "folio.yaml").read_text()


class TestFolioVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout
