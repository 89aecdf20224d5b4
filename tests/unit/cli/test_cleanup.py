"""Unit tests for the cleanup-stale-data command."""

from datetime import timedelta
from pathlib import Path
from unittest.mock import patch

from emcptools.cleanup import KEEP_MARKER, CleanupIOError
from emcptools.cli.commands.cleanup import _is_writable
from emcptools.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()

OLD = timedelta(seconds=10)


def _write_config(config_home: Path, content: str) -> None:
    """Write a config file under the isolated XDG config home."""
    path = config_home / "emcp-tools" / "config.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class TestCleanupStaleData:
    """Tests for emcp-tools cleanup-stale-data."""

    def test_removes_stale_and_honors_keep(self, root: Path, make_file) -> None:
        """Old files go, new files and .keep directories stay."""
        old = make_file(root / "test1" / "old_file.txt", OLD)
        new = make_file(root / "test1" / "new_file.txt")
        keep_old = make_file(root / "keep_dir" / "old_file.txt", OLD)
        keep_new = make_file(root / "keep_dir" / "new_file.txt")
        marker = make_file(root / "keep_dir" / KEEP_MARKER, content="")

        result = runner.invoke(app, ["cleanup-stale-data", "--dir", str(root), "--age", "5s"])

        assert result.exit_code == 0
        assert not old.exists()
        assert new.exists()
        assert keep_old.exists()
        assert keep_new.exists()
        assert marker.exists()

    def test_given_dir_not_removed(self, root: Path, make_file) -> None:
        """The directory argument stays even when emptied."""
        target = root / "test_not_remove_given"
        old = make_file(target / "old_file.txt", OLD)
        new = make_file(target / "new_file.txt", timedelta(seconds=1))

        result = runner.invoke(app, ["cleanup-stale-data", "-d", str(target), "-a", "0s"])

        assert result.exit_code == 0
        assert target.is_dir()
        assert not old.exists()
        assert not new.exists()

    def test_silent_on_success(self, root: Path, make_file) -> None:
        """A successful run prints nothing."""
        make_file(root / "old.txt", OLD)

        result = runner.invoke(app, ["cleanup-stale-data", "--dir", str(root), "--age", "5s"])

        assert result.exit_code == 0
        assert result.output.strip() == ""

    def test_verbose_prints_summary(self, root: Path, make_file) -> None:
        """--verbose prints a summary table."""
        make_file(root / "old.txt", OLD)

        result = runner.invoke(
            app, ["--verbose", "cleanup-stale-data", "--dir", str(root), "--age", "5s"]
        )

        assert result.exit_code == 0
        assert "Files removed" in result.output
        assert "Protected directories" in result.output

    def test_missing_directory(self, tmp_path: Path) -> None:
        """A missing directory exits with code 1 and an error."""
        missing = tmp_path / "missing"

        result = runner.invoke(app, ["cleanup-stale-data", "--dir", str(missing), "--age", "1d"])

        assert result.exit_code == 1
        assert "Directory does not exist" in result.output

    def test_invalid_age(self, root: Path) -> None:
        """An unparseable age is a usage error."""
        result = runner.invoke(app, ["cleanup-stale-data", "--dir", str(root), "--age", "soon"])

        assert result.exit_code == 2

    def test_missing_dir_option(self) -> None:
        """Without --dir and without config the command fails."""
        result = runner.invoke(app, ["cleanup-stale-data", "--age", "1d"])

        assert result.exit_code == 2

    def test_missing_age_option(self, root: Path) -> None:
        """Without --age and without config the command fails."""
        result = runner.invoke(app, ["cleanup-stale-data", "--dir", str(root)])

        assert result.exit_code == 2

    def test_uses_config_defaults(self, root: Path, make_file, isolated_config: Path) -> None:
        """Directory and age fall back to the config file."""
        old = make_file(root / "old.txt", OLD)
        new = make_file(root / "new.txt")
        _write_config(isolated_config, f'[cleanup]\ndir = "{root}"\nage = "5s"\n')

        result = runner.invoke(app, ["cleanup-stale-data"])

        assert result.exit_code == 0
        assert not old.exists()
        assert new.exists()

    def test_options_override_config(self, root: Path, make_file, isolated_config: Path) -> None:
        """Command-line options win over config defaults."""
        old = make_file(root / "old.txt", OLD)
        _write_config(isolated_config, '[cleanup]\nage = "1d"\n')

        result = runner.invoke(app, ["cleanup-stale-data", "--dir", str(root), "--age", "5s"])

        assert result.exit_code == 0
        assert not old.exists()

    def test_broken_config(self, root: Path, isolated_config: Path) -> None:
        """An invalid config file exits with code 1."""
        _write_config(isolated_config, "[cleanup\n")

        result = runner.invoke(app, ["cleanup-stale-data", "--dir", str(root), "--age", "5s"])

        assert result.exit_code == 1
        assert "Invalid TOML" in result.output

    def test_not_writable(self, root: Path, make_file) -> None:
        """A directory without write access is rejected before cleaning."""
        old = make_file(root / "old.txt", OLD)

        with patch(
            "emcptools.cli.commands.cleanup._is_writable", return_value=False
        ) as mock_writable:
            result = runner.invoke(
                app, ["cleanup-stale-data", "--dir", str(root), "--age", "5s"]
            )

        assert result.exit_code == 1
        assert "not writable" in result.output
        assert old.exists()
        mock_writable.assert_called_once_with(root.absolute())

    def test_writable_check(self, root: Path) -> None:
        """A fresh temporary directory passes the writability check."""
        assert _is_writable(root) is True

    def test_empty_age_not_replaced_by_config(
        self, root: Path, make_file, isolated_config: Path
    ) -> None:
        """An explicit empty --age is rejected instead of falling back to config."""
        old = make_file(root / "old.txt", OLD)
        _write_config(isolated_config, '[cleanup]\nage = "5s"\n')

        result = runner.invoke(app, ["cleanup-stale-data", "--dir", str(root), "--age", ""])

        assert result.exit_code == 2
        assert old.exists()

    def test_config_age_used_when_option_missing(
        self, root: Path, make_file, isolated_config: Path
    ) -> None:
        """The configured age applies when --age is omitted."""
        old = make_file(root / "old.txt", OLD)
        young = make_file(root / "young.txt", timedelta(seconds=2))
        _write_config(isolated_config, '[cleanup]\nage = "1h"\n')

        result = runner.invoke(app, ["cleanup-stale-data", "--dir", str(root)])

        assert result.exit_code == 0
        assert old.exists()
        assert young.exists()

    def test_cleanup_failure(self, root: Path) -> None:
        """Errors during cleanup exit with code 1."""
        error = CleanupIOError("Cannot remove file /x: denied", "/x")

        with patch(
            "emcptools.cli.commands.cleanup.cleanup_stale_data", side_effect=error
        ) as mock_cleanup:
            result = runner.invoke(
                app, ["cleanup-stale-data", "--dir", str(root), "--age", "7d"]
            )

        assert result.exit_code == 1
        assert "Cannot remove file" in result.output
        mock_cleanup.assert_called_once_with(root.absolute(), timedelta(days=7))
