"""Integration tests against a real git repository.

A bare repository stands in for the remote and a small shell script on
PATH stands in for the git-flow extension (release start/finish only), so
the whole release run goes through the real subprocess runner.
"""

from __future__ import annotations

import os
import shutil
import stat
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from flowrel.cli.app import app
from flowrel.core.result import Ok
from flowrel.platform.process import run

pytestmark = [
    pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed"),
    pytest.mark.skipif(sys.platform == "win32", reason="git-flow stand-in is a POSIX shell script"),
]

GIT_FLOW_SCRIPT = """\
#!/bin/sh
set -e
[ "$1" = "release" ] || exit 1
case "$2" in
  start)
    git checkout -q -b "release/$3" development
    ;;
  finish)
    [ "$3" = "-m" ] || exit 1
    message="$4"
    version="$5"
    git checkout -q master
    git merge -q --no-ff -m "Merge branch 'release/$version'" "release/$version"
    git tag -a "$version" -m "$message"
    git checkout -q development
    git merge -q --no-ff -m "Merge tag '$version' into development" "$version"
    git branch -q -d "release/$version"
    ;;
  *)
    exit 1
    ;;
esac
"""

runner = CliRunner()


def git(cwd: Path, *args: str) -> str:
    result = run(["git", *args], cwd)
    assert isinstance(result, Ok), result
    return result.value


@pytest.fixture
def remote(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty bare origin, with a git identity and the git-flow stand-in on PATH."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    monkeypatch.setenv("GIT_MERGE_AUTOEDIT", "no")
    for var in ("AUTHOR", "COMMITTER"):
        monkeypatch.setenv(f"GIT_{var}_NAME", "Release Bot")
        monkeypatch.setenv(f"GIT_{var}_EMAIL", "release@example.com")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = bin_dir / "git-flow"
    script.write_text(GIT_FLOW_SCRIPT, encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    origin = tmp_path / "origin.git"
    git(tmp_path, "init", "-q", "--bare", str(origin))
    return origin


@pytest.fixture
def work(tmp_path: Path, remote: Path) -> Path:
    """Working copy on development, tracking the bare origin."""
    path = tmp_path / "work"
    path.mkdir()
    git(path, "init", "-q")
    git(path, "symbolic-ref", "HEAD", "refs/heads/master")
    git(path, "config", "pull.rebase", "false")
    (path / "README.md").write_text("# app\n", encoding="utf-8")
    git(path, "add", "README.md")
    git(path, "commit", "-q", "-m", "Initial commit")
    git(path, "remote", "add", "origin", str(remote))
    git(path, "push", "-q", "origin", "master")
    git(path, "checkout", "-q", "-b", "development")
    git(path, "push", "-q", "origin", "development")
    return path


class TestRealGitRelease:
    """The release run end to end against real git."""

    def test_first_run_pushes_release_branch(self, work: Path, remote: Path) -> None:
        result = runner.invoke(app, [str(work)])

        assert result.exit_code == 0, result.output
        assert "Last tag: 0.0.0" in result.output
        assert "Started release 0.1.0" in result.output
        assert "release/0.1.0" in git(remote, "branch", "--list")

    def test_second_run_is_idempotent(self, work: Path, remote: Path) -> None:
        runner.invoke(app, [str(work)])
        before = git(remote, "branch", "--list")

        result = runner.invoke(app, [str(work)])

        assert result.exit_code == 0, result.output
        assert "Release branch release/0.1.0 already exists." in result.output
        assert git(remote, "branch", "--list") == before

    def test_close_tags_and_pushes(self, work: Path, remote: Path) -> None:
        runner.invoke(app, [str(work)])

        result = runner.invoke(app, [str(work), "--close"])

        assert result.exit_code == 0, result.output
        assert "Finished and pushed release 0.1.0" in result.output
        assert git(remote, "tag", "--list") == "0.1.0\n"
        assert "Release 0.1.0" in git(remote, "tag", "-n1", "--list", "0.1.0")
        assert "Merge branch 'release/0.1.0'" in git(remote, "log", "--format=%s", "master")

        next_run = runner.invoke(app, [str(work)])
        assert "Last tag: 0.1.0" in next_run.output
        assert "New release version: 0.2.0" in next_run.output

    def test_existing_tag_rolls_over_minor(self, work: Path, remote: Path) -> None:
        git(work, "tag", "1.9.0")

        result = runner.invoke(app, [str(work)])

        assert result.exit_code == 0, result.output
        assert "New release version: 2.0.0" in result.output
        assert "release/2.0.0" in git(remote, "branch", "--list")

    def test_yes_discards_local_changes(self, work: Path) -> None:
        (work / "README.md").write_text("edited\n", encoding="utf-8")
        (work / "scratch.txt").write_text("tmp\n", encoding="utf-8")

        result = runner.invoke(app, [str(work), "--yes"])

        assert result.exit_code == 0, result.output
        assert "Uncommitted changes discarded." in result.output
        assert (work / "README.md").read_text(encoding="utf-8") == "# app\n"
        assert not (work / "scratch.txt").exists()

    def test_declined_prompt_leaves_tree_untouched(self, work: Path, remote: Path) -> None:
        (work / "scratch.txt").write_text("tmp\n", encoding="utf-8")

        result = runner.invoke(app, [str(work)], input="n\n")

        assert result.exit_code == 1
        assert (work / "scratch.txt").exists()
        assert "release/" not in git(remote, "branch", "--list")
