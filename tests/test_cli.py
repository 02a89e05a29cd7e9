"""
Tests for the fpack command line interface.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from conftest import Catalog
from flashpoint_packer import __version__
from flashpoint_packer.cli import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def config_file(catalog: Catalog) -> Path:
    """A legacy-style config.json with paths relative to its directory."""
    path = catalog.root / "config.json"
    path.write_text(
        json.dumps(
            {
                "DatabasePath": "flashpoint.sqlite",
                "OutputPath": "out",
                "ExtremeTags": ["Extreme"],
                "SourcePaths": {
                    "GameZipPath": "Games",
                    "ImagePath": "Images",
                    "LegacyPath": "Legacy",
                    "ExtrasPath": "Extras",
                },
                "ZippedPaths": {
                    "GameZipPath": "Data/Games",
                    "ImagePath": "Data/Images",
                    "LegacyPath": "Legacy",
                    "ExtrasPath": "Extras",
                },
            }
        )
    )
    return path


class TestCLI:
    """Test the command group."""

    def test_version(self, runner: CliRunner) -> None:
        """Test --version."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self, runner: CliRunner) -> None:
        """Test that every command is listed."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("build", "groups", "verify"):
            assert command in result.output


class TestBuildCommand:
    """Test fpack build."""

    def test_build(self, runner: CliRunner, catalog: Catalog, config_file: Path) -> None:
        """Test a full build from a config file."""
        result = runner.invoke(cli, ["build", "-c", str(config_file), "--date", "20240309"])

        assert result.exit_code == 0, result.output
        assert "✅ Built 10 archives" in result.output
        assert (catalog.output / "info.json").exists()
        assert (catalog.output / "Flashpoint_X_NSFW_20240309.zip").exists()

    def test_build_single_category(
        self, runner: CliRunner, catalog: Catalog, config_file: Path
    ) -> None:
        """Test --category and --no-auxiliary."""
        result = runner.invoke(
            cli,
            [
                "-v",
                "build",
                "-c",
                str(config_file),
                "--date",
                "20240309",
                "--category",
                "Y",
                "--no-auxiliary",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "✅ Built 2 archives" in result.output
        assert not (catalog.output / "Flashpoint_Legacy_20240309.zip").exists()

    def test_invalid_date(self, runner: CliRunner, config_file: Path) -> None:
        """Test that a malformed date is a usage error."""
        result = runner.invoke(cli, ["build", "-c", str(config_file), "--date", "2024-03-09"])
        assert result.exit_code == 2
        assert "expected YYYYMMDD" in result.output

    def test_missing_config(self, runner: CliRunner, temp_dir: Path) -> None:
        """Test that a missing config file exits 1."""
        result = runner.invoke(cli, ["build", "-c", str(temp_dir / "missing.json")])
        assert result.exit_code == 1
        assert "CONFIG_NOT_FOUND" in result.output

    def test_missing_database(
        self, runner: CliRunner, catalog: Catalog, config_file: Path
    ) -> None:
        """Test that a missing database exits 1 without a manifest."""
        catalog.database.unlink()
        result = runner.invoke(cli, ["build", "-c", str(config_file)])
        assert result.exit_code == 1
        assert "DATA_SOURCE_ERROR" in result.output
        assert not (catalog.output / "info.json").exists()


class TestGroupsCommand:
    """Test fpack groups."""

    def test_groups(self, runner: CliRunner, catalog: Catalog, config_file: Path) -> None:
        """Test the dry-run listing."""
        result = runner.invoke(cli, ["groups", "-c", str(config_file), "--date", "20240309"])

        assert result.exit_code == 0, result.output
        assert "Flashpoint_X_NSFW_20240309.zip\tplatformsNsfw\t1 files" in result.output
        assert "Flashpoint_Extras_20240309.zip\tother\t" in result.output
        assert "10 archives planned" in result.output
        assert not catalog.output.exists()


class TestVerifyCommand:
    """Test fpack verify."""

    def test_verify(self, runner: CliRunner, catalog: Catalog, config_file: Path) -> None:
        """Test verifying a fresh build, then a tampered one."""
        build = runner.invoke(cli, ["build", "-c", str(config_file), "--date", "20240309"])
        assert build.exit_code == 0, build.output
        manifest = catalog.output / "info.json"

        result = runner.invoke(cli, ["verify", str(manifest)])
        assert result.exit_code == 0, result.output
        assert "10 verified, 0 missing, 0 mismatched" in result.output

        with open(catalog.output / "Flashpoint_X_20240309.zip", "ab") as f:
            f.write(b"tampered")
        result = runner.invoke(cli, ["verify", str(manifest)])
        assert result.exit_code == 1
        assert "✗ mismatch: Flashpoint_X_20240309.zip" in result.output

    def test_verify_unreadable_manifest(self, runner: CliRunner, temp_dir: Path) -> None:
        """Test that a missing manifest exits 1."""
        result = runner.invoke(cli, ["verify", str(temp_dir / "info.json")])
        assert result.exit_code == 1
        assert "INTEGRITY_ERROR" in result.output
