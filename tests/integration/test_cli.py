#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Integration tests for the marksage command line."""

import logging
from pathlib import Path

import pytest

from marksage import commands
from marksage.cli import create_parser, main
from marksage.exceptions import ArchiveError
from marksage.transforms.text import EM_DASH

pytestmark = [pytest.mark.integration, pytest.mark.cli]


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the root logger changes made by each CLI run."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestArguments:
    """Test argument handling before any command runs."""

    def test_missing_vault_path(self, capsys: pytest.CaptureFixture[str], tmp_path: Path, monkeypatch) -> None:
        """Running without a vault is a validation error."""
        monkeypatch.chdir(tmp_path)
        assert main(["format"]) == 2
        assert "--vault-path is required" in capsys.readouterr().err

    def test_vault_path_not_found(self, capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
        """A vault that does not exist is reported."""
        assert main(["--vault-path", str(tmp_path / "nowhere"), "format"]) == 2
        assert "Path not found" in capsys.readouterr().err

    def test_command_required(self) -> None:
        """A subcommand must be given."""
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--vault-path", "."])
        assert exc_info.value.code == 2

    def test_jobs_must_be_positive(self) -> None:
        """Zero workers is rejected by the parser."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--jobs", "0", "format"])

    def test_unset_flags_are_none(self) -> None:
        """Flags that are not given do not override configuration."""
        args = create_parser().parse_args(["archive"])
        assert args.dry_run is None
        assert args.rich is None
        assert args.tag is None

    def test_log_level_case_insensitive(self) -> None:
        """Log level names may be lowercase."""
        assert create_parser().parse_args(["--log-level", "debug", "format"]).log_level == "DEBUG"

    def test_vault_from_environment(self, vault: Path, monkeypatch, capsys: pytest.CaptureFixture[str]) -> None:
        """MARKSAGE_VAULT_PATH stands in for the flag."""
        monkeypatch.setenv("MARKSAGE_VAULT_PATH", str(vault))
        assert main(["format"]) == 0

    def test_invalid_config_file(self, vault: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Bad settings in a config file stop the run."""
        config = tmp_path / "bad.json"
        config.write_text('{"jobs": 0}', encoding="utf-8")
        assert main(["--vault-path", str(vault), "--config", str(config), "format"]) == 2
        assert "jobs must be a positive integer" in capsys.readouterr().err


class TestArchiveCommand:
    """Test ``marksage archive``."""

    def test_archive(self, vault: Path, write_note, todo_note: str, capsys: pytest.CaptureFixture[str]) -> None:
        """Tagged notes are rewritten and reported."""
        path = write_note("lists/groceries.md", todo_note)
        untagged = write_note("plain.md", "- [x] done\n")

        assert main(["--vault-path", str(vault), "archive"]) == 0

        assert path.read_text(encoding="utf-8").endswith("## Archived\n\n- [x] milk\n- [x] bread\n    - [x] rye\n")
        assert untagged.read_text(encoding="utf-8") == "- [x] done\n"
        assert f"Archived {Path('lists/groceries.md')}" in capsys.readouterr().out

    def test_archive_custom_tag(self, vault: Path, write_note) -> None:
        """The tag can be changed."""
        path = write_note("work.md", "#work\n- [x] ship\n")
        assert main(["--vault-path", str(vault), "archive", "--tag", "work"]) == 0
        assert "## Archived" in path.read_text(encoding="utf-8")

    def test_dry_run(self, vault: Path, write_note, todo_note: str, capsys: pytest.CaptureFixture[str]) -> None:
        """A dry run prints a diff and leaves the note alone."""
        path = write_note("todo.md", todo_note)

        assert main(["--vault-path", str(vault), "--dry-run", "archive"]) == 0

        assert path.read_text(encoding="utf-8") == todo_note
        out = capsys.readouterr().out
        assert "Archived todo.md" in out
        assert "dry run, would make the following changes:" in out
        assert "+## Archived" in out

    def test_second_run_changes_nothing(
        self, vault: Path, write_note, todo_note: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Archiving is idempotent across runs."""
        path = write_note("todo.md", todo_note)
        main(["--vault-path", str(vault), "archive"])
        first = path.read_text(encoding="utf-8")
        capsys.readouterr()

        assert main(["--vault-path", str(vault), "archive"]) == 0
        assert path.read_text(encoding="utf-8") == first
        assert "Archived" not in capsys.readouterr().out

    def test_rich_output(self, vault: Path, write_note, todo_note: str, capsys: pytest.CaptureFixture[str]) -> None:
        """Rich mode still reports each file and prints a summary."""
        write_note("todo.md", todo_note)
        assert main(["--vault-path", str(vault), "--rich", "archive"]) == 0
        captured = capsys.readouterr()
        assert "Archived todo.md" in captured.out
        assert "Archived summary" in captured.err

    def test_unreadable_note_fails_run(self, vault: Path, write_note, capsys: pytest.CaptureFixture[str]) -> None:
        """A note that cannot be read is reported and the exit code is 1."""
        good = write_note("good.md", "#todo\n- [x] done\n")
        (vault / "bad.md").write_bytes(b"\xff\xfe")

        assert main(["--vault-path", str(vault), "archive"]) == 1

        assert "## Archived" in good.read_text(encoding="utf-8")
        assert (vault / "bad.md").read_bytes() == b"\xff\xfe"
        captured = capsys.readouterr()
        assert "Archived good.md" in captured.out
        assert "Failed to apply changes: Could not read" in captured.err

    def test_failed_rewrite_does_not_stop_run(
        self, vault: Path, write_note, monkeypatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A note whose rewrite fails is reported and later notes are still archived."""
        real_archive_text = commands.archive_text

        def fail_on_a(text: str):
            if "a item" in text:
                raise ArchiveError("inconsistent archive state")
            return real_archive_text(text)

        monkeypatch.setattr(commands, "archive_text", fail_on_a)
        first = write_note("a.md", "#todo\n- [x] a item\n")
        second = write_note("b.md", "#todo\n- [x] b item\n")

        assert main(["--vault-path", str(vault), "archive"]) == 1

        assert first.read_text(encoding="utf-8") == "#todo\n- [x] a item\n"
        assert "## Archived" in second.read_text(encoding="utf-8")
        captured = capsys.readouterr()
        assert "Failed to apply changes: inconsistent archive state" in captured.err
        assert "Archived b.md" in captured.out


class TestFormatCommand:
    """Test ``marksage format``."""

    def test_format(self, vault: Path, write_note, capsys: pytest.CaptureFixture[str]) -> None:
        """Every note is normalized."""
        messy = write_note("messy.md", "Title\n=====\n\n* a--b\n")
        clean = write_note("clean.md", "# Clean\n")

        assert main(["--vault-path", str(vault), "format"]) == 0

        assert messy.read_text(encoding="utf-8") == f"# Title\n\n- a{EM_DASH}b\n"
        assert clean.read_text(encoding="utf-8") == "# Clean\n"
        out = capsys.readouterr().out
        assert "Formatted messy.md" in out
        assert "clean.md" not in out

    def test_format_skips_hidden_and_conflicts(self, vault: Path, write_note) -> None:
        """Hidden folders and conflict copies are never rewritten."""
        hidden = write_note(".trash/old.md", "* x\n")
        conflict = write_note("n.sync-conflict-1.md", "* x\n")
        assert main(["--vault-path", str(vault), "format"]) == 0
        assert hidden.read_text(encoding="utf-8") == "* x\n"
        assert conflict.read_text(encoding="utf-8") == "* x\n"

    def test_dry_run_from_config(self, vault: Path, write_note) -> None:
        """Settings in a config file next to the vault apply."""
        (vault / ".marksage.toml").write_text("dry_run = true\n", encoding="utf-8")
        messy = write_note("messy.md", "* x\n")
        assert main(["--vault-path", str(vault), "format"]) == 0
        assert messy.read_text(encoding="utf-8") == "* x\n"

    def test_unreadable_note_fails_run(self, vault: Path, write_note, capsys: pytest.CaptureFixture[str]) -> None:
        """Read failures count toward the exit code while other notes are formatted."""
        messy = write_note("messy.md", "* x\n")
        (vault / "bad.md").write_bytes(b"\xff\xfe")
        assert main(["--vault-path", str(vault), "format"]) == 1
        assert messy.read_text(encoding="utf-8") == "- x\n"
        assert "bad.md" in capsys.readouterr().err


class TestNotifyConflictsCommand:
    """Test ``marksage notify-conflicts``."""

    def test_topic_required(self, vault: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Without a topic there is nowhere to send to."""
        assert main(["--vault-path", str(vault), "notify-conflicts"]) == 2
        assert "requires --topic" in capsys.readouterr().err

    def test_no_conflicts(self, vault: Path, write_note, capsys: pytest.CaptureFixture[str]) -> None:
        """A clean vault sends nothing and succeeds."""
        write_note("note.md", "")
        assert main(["--vault-path", str(vault), "notify-conflicts", "--topic", "alerts"]) == 0
        assert "No sync conflicts found" in capsys.readouterr().err

    def test_conflicts_sent(self, vault: Path, write_note, monkeypatch) -> None:
        """Conflicts are published to the configured server."""
        import httpx

        from marksage import notify

        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200)

        real_client = httpx.Client
        monkeypatch.setattr(
            notify.httpx, "Client", lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs)
        )
        write_note("a.sync-conflict-1.md", "")

        args = ["--vault-path", str(vault), "notify-conflicts", "-n", "https://ntfy.example.org", "-t", "alerts"]
        assert main(args) == 0
        [request] = requests
        assert str(request.url) == "https://ntfy.example.org/alerts"
        assert request.headers["Title"] == "1 sync conflicts found"
