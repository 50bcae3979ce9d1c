"""Tests for commander.git runner and status query."""

import subprocess
from pathlib import Path
from unittest.mock import patch, MagicMock

import pytest

from commander.git.errors import PathResolutionError, RepositoryError
from commander.git.runner import run_git, GitResult
from commander.git.status import (
    DiffDelta,
    StatusFlags,
    StatusRecord,
    StatusSnapshot,
    get_status_records,
    parse_status_v2,
    parse_submodule_field,
)


class TestGitResult:
    """Test GitResult dataclass."""

    def test_success_when_returncode_zero(self):
        result = GitResult(returncode=0, stdout="ok", stderr="")
        assert result.success is True

    def test_failure_when_returncode_nonzero(self):
        result = GitResult(returncode=1, stdout="", stderr="error")
        assert result.success is False

    def test_failure_when_timed_out(self):
        result = GitResult(returncode=0, stdout="ok", stderr="", timed_out=True)
        assert result.success is False


class TestRunGit:
    """Test run_git function."""

    @patch("commander.git.runner.subprocess.run")
    def test_returns_result_on_success(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="output", stderr="")
        result = run_git(["status"], Path("/tmp"))
        assert result.success
        assert result.stdout == "output"
        mock_run.assert_called_once()

    @patch("commander.git.runner.subprocess.run")
    def test_handles_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="git", timeout=30)
        result = run_git(["status"], Path("/tmp"))
        assert not result.success
        assert result.timed_out
        assert "timed out" in result.stderr

    @patch("commander.git.runner.subprocess.run")
    def test_handles_missing_git(self, mock_run):
        mock_run.side_effect = FileNotFoundError("git")
        result = run_git(["status"], Path("/tmp"))
        assert not result.success
        assert result.returncode == 127
        assert "not found" in result.stderr

    @patch("commander.git.runner.subprocess.run")
    def test_passes_cwd_with_C_flag(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        run_git(["status", "--porcelain=v2"], Path("/my/repo"))
        call_args = mock_run.call_args[0][0]
        assert call_args == ["git", "-C", "/my/repo", "status", "--porcelain=v2"]

    @patch("commander.git.runner.subprocess.run")
    def test_passes_stdin_input(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        run_git(["update-index", "--stdin"], Path("/my/repo"), input="a.txt\0")
        assert mock_run.call_args.kwargs["input"] == "a.txt\0"

    @patch("commander.git.runner.subprocess.run")
    def test_undecodable_bytes_round_trip(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        run_git(["status"], Path("/my/repo"))
        assert mock_run.call_args.kwargs["errors"] == "surrogateescape"

    @patch("commander.git.runner.subprocess.run")
    def test_merges_extra_env(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        run_git(["commit-tree"], Path("/my/repo"), env={"GIT_AUTHOR_NAME": "Ada"})
        env = mock_run.call_args.kwargs["env"]
        assert env["GIT_AUTHOR_NAME"] == "Ada"
        assert "PATH" in env

    @patch("commander.git.runner.subprocess.run")
    def test_no_env_inherits_environment(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        run_git(["status"], Path("/my/repo"))
        assert mock_run.call_args.kwargs["env"] is None


class TestParseSubmoduleField:
    """Test the porcelain v2 <sub> field parser."""

    def test_plain_file_has_no_submodule_state(self):
        assert parse_submodule_field("N...") is None

    def test_new_commits(self):
        state = parse_submodule_field("SC..")
        assert state.new_commits
        assert not state.index_modified
        assert not state.untracked

    def test_modified_content(self):
        state = parse_submodule_field("S.M.")
        assert state.index_modified and state.worktree_modified

    def test_untracked_content(self):
        state = parse_submodule_field("S..U")
        assert state.untracked
        assert not state.new_commits


class TestParseStatusV2:
    """Test parse_status_v2 over -z output."""

    def test_empty_output(self):
        assert parse_status_v2("") == []

    def test_modified_in_worktree(self):
        out = "1 .M N... 100644 100644 100644 abc abc file.txt\0"
        [record] = parse_status_v2(out)
        assert record.path == "file.txt"
        assert record.flags == StatusFlags.WT_MODIFIED
        assert record.head_to_index is None
        assert record.index_to_workdir == DiffDelta("file.txt", "file.txt")

    def test_staged_new_file(self):
        out = "1 A. N... 000000 100644 100644 000 abc a.txt\0"
        [record] = parse_status_v2(out)
        assert record.flags == StatusFlags.INDEX_NEW
        assert record.head_to_index == DiffDelta("a.txt", "a.txt")
        assert record.index_to_workdir is None

    def test_both_sides_changed(self):
        out = "1 MD N... 100644 100644 000000 abc def b.txt\0"
        [record] = parse_status_v2(out)
        assert record.flags == StatusFlags.INDEX_MODIFIED | StatusFlags.WT_DELETED

    def test_path_with_spaces(self):
        out = "1 .M N... 100644 100644 100644 abc abc path with spaces/file.txt\0"
        [record] = parse_status_v2(out)
        assert record.path == "path with spaces/file.txt"

    def test_rename_record_reads_original_path(self):
        out = "2 R. N... 100644 100644 100644 abc abc R100 new.txt\0old.txt\0"
        [record] = parse_status_v2(out)
        assert record.flags == StatusFlags.INDEX_RENAMED
        assert record.head_to_index == DiffDelta("old.txt", "new.txt")

    def test_rename_with_worktree_change(self):
        out = "2 RM N... 100644 100644 100644 abc abc R90 new.txt\0old.txt\0"
        [record] = parse_status_v2(out)
        assert record.flags == StatusFlags.INDEX_RENAMED | StatusFlags.WT_MODIFIED
        assert record.index_to_workdir == DiffDelta("new.txt", "new.txt")

    def test_untracked_and_ignored(self):
        out = "? new.txt\0! build/out.o\0"
        untracked, ignored = parse_status_v2(out)
        assert untracked.flags == StatusFlags.WT_NEW
        assert untracked.index_to_workdir == DiffDelta("new.txt", "new.txt")
        assert ignored.flags == StatusFlags.IGNORED

    def test_submodule_record(self):
        out = "1 .M SC.. 160000 160000 160000 abc abc libs/dep\0"
        [record] = parse_status_v2(out)
        assert record.submodule is not None
        assert record.submodule.new_commits

    def test_unmerged_path_skipped_with_warning(self, caplog):
        out = "u UU N... 100644 100644 100644 100644 a b c conflict.txt\0? x.txt\0"
        records = parse_status_v2(out)
        assert [r.path for r in records] == ["x.txt"]
        assert "Unmerged path skipped: conflict.txt" in caplog.text

    def test_preserves_query_order(self):
        out = (
            "1 .M N... 100644 100644 100644 abc abc z.txt\0"
            "1 A. N... 000000 100644 100644 000 abc a.txt\0"
            "? m.txt\0"
        )
        assert [r.path for r in parse_status_v2(out)] == ["z.txt", "a.txt", "m.txt"]

    def test_ignores_header_lines(self):
        out = "# branch.oid abc\0# branch.head main\0? a.txt\0"
        assert [r.path for r in parse_status_v2(out)] == ["a.txt"]


class TestGetStatusRecords:
    """Test get_status_records command construction and failure handling."""

    @patch("commander.git.status.run_git")
    def test_builds_porcelain_v2_command(self, mock_run):
        mock_run.return_value = GitResult(returncode=0, stdout="", stderr="")
        get_status_records(Path("/repo"), ["src"], include_ignored=True)
        args = mock_run.call_args[0][0]
        assert args[:4] == ["status", "--porcelain=v2", "-z", "--untracked-files=all"]
        assert "--ignored" in args
        assert args[-2:] == ["--", "src"]

    @patch("commander.git.status.run_git")
    def test_raises_repository_error_on_failure(self, mock_run):
        mock_run.return_value = GitResult(
            returncode=128, stdout="", stderr="fatal: not a git repository"
        )
        with pytest.raises(RepositoryError, match="not a git repository"):
            get_status_records(Path("/tmp"))


class TestStatusSnapshot:
    """Test per-path lookups."""

    def test_changed_path_returns_flags(self, tmp_path):
        snapshot = StatusSnapshot(tmp_path, [StatusRecord("a.txt", StatusFlags.WT_MODIFIED)])
        assert snapshot.status_file("a.txt") == StatusFlags.WT_MODIFIED

    def test_existing_unchanged_path_is_current(self, tmp_path):
        (tmp_path / "clean.txt").write_text("x")
        snapshot = StatusSnapshot(tmp_path, [])
        assert snapshot.status_file("clean.txt") == StatusFlags.CURRENT

    def test_dangling_symlink_is_current(self, tmp_path):
        (tmp_path / "link").symlink_to(tmp_path / "missing-target")
        snapshot = StatusSnapshot(tmp_path, [])
        assert snapshot.status_file("link") == StatusFlags.CURRENT

    def test_vanished_path_cannot_be_resolved(self, tmp_path):
        snapshot = StatusSnapshot(tmp_path, [])
        with pytest.raises(PathResolutionError):
            snapshot.status_file("gone.txt")
