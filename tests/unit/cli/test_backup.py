"""Unit tests for backup command.

Tests for the CLI backup command: resolution, dry-run listing, copying,
exclusion, configuration defaults and archiving.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

from confbk.cli.commands.backup import build_input_spec
from confbk.cli.main import app
from confbk.core.archive import ArchiveResult
from confbk.core.config import BackupConfig
from confbk.core.paths import get_config_path, get_default_output_dir
from typer.testing import CliRunner

runner = CliRunner()


def _write_config(text: str) -> None:
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


class TestBackupDryRun:
    """Tests for backup --dry-run."""

    def test_lists_files_one_per_line(self, config_tree: Path) -> None:
        """Dry-run prints each path of the backup set on its own line."""
        result = runner.invoke(app, ["backup", "-l", str(config_tree / "a.txt"), "-d"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [str(config_tree / "a.txt")]

    def test_directory_entry_lists_contained_files(self, config_tree: Path) -> None:
        """A directory entry lists the files below it."""
        result = runner.invoke(app, ["backup", "--list", str(config_tree), "--dry-run"])

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert sorted(lines) == sorted(
            [
                str(config_tree / "a.txt"),
                str(config_tree / "dir" / "b.txt"),
                str(config_tree / "dir" / "c.txt"),
            ]
        )

    def test_copies_nothing(self, config_tree: Path, tmp_path: Path) -> None:
        """Dry-run never creates the output directory."""
        out = tmp_path / "out"

        result = runner.invoke(app, ["backup", "-l", str(config_tree), "-d", "-o", str(out)])

        assert result.exit_code == 0
        assert not out.exists()
        assert not get_default_output_dir().exists()

    def test_exclude_removes_matching_paths(self, config_tree: Path) -> None:
        """Paths containing an exclusion pattern are not listed."""
        result = runner.invoke(app, ["backup", "-l", str(config_tree), "-e", "dir", "-d"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [str(config_tree / "a.txt")]

    def test_manifest_entries_listed_in_order(self, tmp_path: Path, write_manifest) -> None:
        """Manifest lines are listed in file order, duplicates included."""
        first = tmp_path / "first.conf"
        second = tmp_path / "second.conf"
        first.write_text("")
        second.write_text("")
        manifest = write_manifest([str(second), str(first), str(second)])

        result = runner.invoke(app, ["backup", "-f", str(manifest), "-d"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [str(second), str(first), str(second)]

    def test_quiet_still_lists(self, config_tree: Path) -> None:
        """The dry-run listing is printed even with --quiet."""
        result = runner.invoke(app, ["-q", "backup", "-l", str(config_tree / "a.txt"), "-d"])

        assert result.exit_code == 0
        assert str(config_tree / "a.txt") in result.stdout

    def test_verbose_shows_counts(self, config_tree: Path) -> None:
        """Verbose dry-run adds a summary of selected and excluded paths."""
        result = runner.invoke(app, ["-v", "backup", "-l", str(config_tree), "-e", "dir", "-d"])

        assert result.exit_code == 0
        assert "1 path(s) selected, 2 excluded" in result.stdout
        assert "would be copied" in result.stdout


class TestBackupErrors:
    """Tests for backup error handling."""

    def test_missing_entry_fails(self, tmp_path: Path) -> None:
        """A missing --list path aborts with exit code 1."""
        result = runner.invoke(app, ["backup", "-l", str(tmp_path / "missing"), "-d"])

        assert result.exit_code == 1
        assert "Path not found" in result.output
        assert "missing" in result.output

    def test_missing_manifest_line_fails(self, tmp_path: Path, write_manifest) -> None:
        """A manifest naming a missing path aborts before anything is copied."""
        manifest = write_manifest([str(tmp_path / "gone.conf")])
        out = tmp_path / "out"

        result = runner.invoke(app, ["backup", "-f", str(manifest), "-o", str(out)])

        assert result.exit_code == 1
        assert "Path not found" in result.output
        assert not out.exists()

    def test_missing_manifest_file_fails(self, tmp_path: Path) -> None:
        """A --file that does not exist aborts with exit code 1."""
        result = runner.invoke(app, ["backup", "-f", str(tmp_path / "nope.txt")])

        assert result.exit_code == 1
        assert "Path not found" in result.output

    def test_nothing_requested(self) -> None:
        """Without --list or --file the command fails."""
        result = runner.invoke(app, ["backup"])

        assert result.exit_code == 1
        assert "Nothing to back up" in result.output

    def test_verbose_and_quiet_rejected(self, config_tree: Path) -> None:
        """--verbose and --quiet together are a usage error."""
        result = runner.invoke(app, ["-v", "-q", "backup", "-l", str(config_tree), "-d"])

        assert result.exit_code == 2
        assert "cannot be used together" in result.output

    def test_invalid_config_fails(self, config_tree: Path) -> None:
        """An unreadable config file aborts the backup."""
        _write_config("compress = [")

        result = runner.invoke(app, ["backup", "-l", str(config_tree), "-d"])

        assert result.exit_code == 1
        assert "Invalid TOML" in result.output


class TestBackupCopy:
    """Tests for copying the backup set."""

    def test_copies_to_output_dir(self, config_tree: Path, tmp_path: Path) -> None:
        """Files are copied below --out with their home-relative layout."""
        out = tmp_path / "out"

        with patch("confbk.core.executor.Path.home", return_value=tmp_path):
            result = runner.invoke(app, ["backup", "-l", str(config_tree), "-o", str(out)])

        assert result.exit_code == 0
        assert (out / "cfg" / "a.txt").read_text() == "a"
        assert (out / "cfg" / "dir" / "b.txt").read_text() == "b"
        assert (out / "cfg" / "dir" / "c.txt").read_text() == "c"
        assert "Backed up 3 path(s)." in result.stdout
        assert "Backup written to" in result.stdout

    def test_excluded_files_not_copied(self, config_tree: Path, tmp_path: Path) -> None:
        """Excluded paths are not copied."""
        out = tmp_path / "out"

        with patch("confbk.core.executor.Path.home", return_value=tmp_path):
            result = runner.invoke(
                app, ["backup", "-l", str(config_tree), "-e", "b.txt", "-o", str(out)]
            )

        assert result.exit_code == 0
        assert (out / "cfg" / "dir" / "c.txt").exists()
        assert not (out / "cfg" / "dir" / "b.txt").exists()

    def test_default_output_dir(self, config_tree: Path, tmp_path: Path) -> None:
        """Without --out the backup lands in the XDG state directory."""
        with patch("confbk.core.executor.Path.home", return_value=tmp_path):
            result = runner.invoke(app, ["backup", "-l", str(config_tree / "a.txt")])

        assert result.exit_code == 0
        assert (get_default_output_dir() / "cfg" / "a.txt").exists()

    def test_quiet_prints_nothing(self, config_tree: Path, tmp_path: Path) -> None:
        """--quiet suppresses all output on success."""
        out = tmp_path / "out"

        result = runner.invoke(app, ["-q", "backup", "-l", str(config_tree), "-o", str(out)])

        assert result.exit_code == 0
        assert result.output == ""
        assert out.exists()

    def test_everything_excluded(self, config_tree: Path, tmp_path: Path) -> None:
        """An empty backup set warns and copies nothing."""
        out = tmp_path / "out"

        result = runner.invoke(app, ["backup", "-l", str(config_tree), "-e", "cfg", "-o", str(out)])

        assert result.exit_code == 0
        assert "Backup set is empty" in result.output
        assert not out.exists()

    def test_copy_failure_exits_nonzero(self, config_tree: Path, tmp_path: Path) -> None:
        """A failed copy is reported and the command exits with code 1."""
        out = tmp_path / "out"

        with patch("confbk.core.executor.shutil.copy2", side_effect=OSError("disk full")):
            result = runner.invoke(
                app, ["backup", "-l", str(config_tree / "a.txt"), "-o", str(out)]
            )

        assert result.exit_code == 1
        assert "disk full" in result.output


class TestBackupConfigDefaults:
    """Tests for defaults taken from the config file."""

    def test_config_manifest_and_exclude(self, tmp_path: Path, write_manifest) -> None:
        """The configured manifest is used and configured patterns are applied."""
        keep = tmp_path / "keep.conf"
        secret = tmp_path / "secret.conf"
        keep.write_text("")
        secret.write_text("")
        manifest = write_manifest([str(keep), str(secret)])
        _write_config(f'manifest = "{manifest}"\nexclude = ["secret"]\n')

        result = runner.invoke(app, ["backup", "-d"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [str(keep)]

    def test_file_option_overrides_config_manifest(
        self, tmp_path: Path, write_manifest
    ) -> None:
        """--file replaces the configured manifest."""
        one = tmp_path / "one.conf"
        two = tmp_path / "two.conf"
        one.write_text("")
        two.write_text("")
        configured = write_manifest([str(one)], name="configured.txt")
        given = write_manifest([str(two)], name="given.txt")
        _write_config(f'manifest = "{configured}"\n')

        result = runner.invoke(app, ["backup", "-f", str(given), "-d"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [str(two)]

    def test_config_output_dir(self, config_tree: Path, tmp_path: Path) -> None:
        """The configured output directory is used when --out is absent."""
        out = tmp_path / "configured-out"
        _write_config(f'output_dir = "{out}"\n')

        with patch("confbk.core.executor.Path.home", return_value=tmp_path):
            result = runner.invoke(app, ["backup", "-l", str(config_tree / "a.txt")])

        assert result.exit_code == 0
        assert (out / "cfg" / "a.txt").exists()


class TestBackupArchive:
    """Tests for backup --tar."""

    @patch("confbk.cli.commands.backup.Archiver")
    def test_tar_compresses_new_output_dir(
        self, mock_archiver: MagicMock, config_tree: Path, tmp_path: Path
    ) -> None:
        """--tar compresses the output directory and removes it when newly created."""
        out = tmp_path / "out"
        mock_archiver.return_value.compress.return_value = ArchiveResult(
            archive=tmp_path / "out.tar.xz", success=True, source_removed=True
        )

        result = runner.invoke(app, ["backup", "-l", str(config_tree), "-o", str(out), "-t"])

        assert result.exit_code == 0
        mock_archiver.return_value.compress.assert_called_once_with(out, remove_source=True)
        assert "Archive created:" in result.stdout

    @patch("confbk.cli.commands.backup.Archiver")
    def test_tar_keeps_existing_output_dir(
        self, mock_archiver: MagicMock, config_tree: Path, tmp_path: Path
    ) -> None:
        """A pre-existing output directory is never removed after archiving."""
        out = tmp_path / "out"
        out.mkdir()
        mock_archiver.return_value.compress.return_value = ArchiveResult(
            archive=tmp_path / "out.tar.xz", success=True
        )

        result = runner.invoke(app, ["backup", "-l", str(config_tree), "-o", str(out), "--tar"])

        assert result.exit_code == 0
        mock_archiver.return_value.compress.assert_called_once_with(out, remove_source=False)

    @patch("confbk.cli.commands.backup.Archiver")
    def test_config_compress(
        self, mock_archiver: MagicMock, config_tree: Path, tmp_path: Path
    ) -> None:
        """compress = true in the config file enables archiving."""
        _write_config("compress = true\n")
        mock_archiver.return_value.compress.return_value = ArchiveResult(
            archive=tmp_path / "out.tar.xz", success=True
        )

        result = runner.invoke(app, ["backup", "-l", str(config_tree), "-o", str(tmp_path / "out")])

        assert result.exit_code == 0
        mock_archiver.return_value.compress.assert_called_once()

    @patch("confbk.cli.commands.backup.Archiver")
    def test_archive_failure(
        self, mock_archiver: MagicMock, config_tree: Path, tmp_path: Path
    ) -> None:
        """A failed archive exits with code 1."""
        mock_archiver.return_value.compress.return_value = ArchiveResult(
            archive=tmp_path / "out.tar.xz", success=False, error="tar exited with code 2"
        )

        result = runner.invoke(
            app, ["backup", "-l", str(config_tree), "-o", str(tmp_path / "out"), "-t"]
        )

        assert result.exit_code == 1
        assert "tar exited with code 2" in result.output

    @patch("confbk.cli.commands.backup.Archiver")
    def test_dry_run_never_archives(
        self, mock_archiver: MagicMock, config_tree: Path
    ) -> None:
        """--tar has no effect during a dry run."""
        result = runner.invoke(app, ["backup", "-l", str(config_tree), "-t", "-d"])

        assert result.exit_code == 0
        mock_archiver.assert_not_called()


class TestBuildInputSpec:
    """Tests for build_input_spec function."""

    def test_cli_patterns_before_config_patterns(self) -> None:
        """Configured patterns are appended after command-line ones."""
        config = BackupConfig(exclude=["from-config"])

        spec = build_input_spec(config, [], None, ["from-cli"])

        assert spec.exclude == ("from-cli", "from-config")

    def test_empty_pattern_dropped(self) -> None:
        """Empty patterns never reach the spec."""
        spec = build_input_spec(BackupConfig(), [Path("/a")], None, ["", "x"])

        assert spec.exclude == ("x",)

    def test_entries_preserved(self) -> None:
        """Entries keep their order and duplicates."""
        entries = [Path("/b"), Path("/a"), Path("/b")]

        spec = build_input_spec(BackupConfig(), entries, None, [])

        assert spec.entries == (Path("/b"), Path("/a"), Path("/b"))
        assert spec.manifest is None
