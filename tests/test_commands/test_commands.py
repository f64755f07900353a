from __future__ import annotations

import json
from typing import Callable, Iterator
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from vertrail.cli import cli
from vertrail.core import BranchSettings, ClassificationPatterns, Resolver
from vertrail.exceptions import RepositoryAccessError

BRANCH_HEAD = "abcd" + "0" * 36


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CI variables and color settings of the host out of the tests."""
    for name in ("NO_COLOR", "VERTRAIL_CONFIG", "TRAVIS_TAG", "TRAVIS_BRANCH"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def branch_repo(repo):
    """Master at 0.0.1 and 'feature/a-branch' three bumps ahead."""
    master = repo.chain(None, "Initial commit")
    repo.set_branch("master", master)
    head = repo.chain(master, "(+semver: major)", "(+semver: minor)", "(+semver: patch)")
    head = repo.add_commit("some text", [head], sha=BRANCH_HEAD)
    repo.set_branch("feature/a-branch", head)
    repo.checkout(head, "feature/a-branch")
    return repo


@pytest.fixture
def use_repo() -> Iterator[Callable]:
    """Route build_resolver in every command to an in-memory repository."""
    patches = []

    def _use(repository, environ=None):
        def _build(ctx, *, forbid_behind_master=False, trim_branch_prefix=False):
            settings = ctx.config.branch_settings(
                forbid_behind_master=forbid_behind_master,
                trim_branch_prefix=trim_branch_prefix,
                ignore_env_vars=ctx.ignore_env_vars,
            )
            return Resolver(
                repository, ClassificationPatterns(), settings, environ=environ or {}
            )

        for module in ("version", "label", "trail"):
            patcher = patch(f"vertrail.commands.{module}.build_resolver", side_effect=_build)
            patcher.start()
            patches.append(patcher)

    yield _use

    for patcher in patches:
        patcher.stop()


@pytest.mark.unit
class TestVersionCommand:
    """Tests for `vertrail version`."""

    def test_branch_version(self, branch_repo, use_repo: Callable) -> None:
        """Test the labelled branch version is printed alone on stdout."""
        use_repo(branch_repo)

        result = CliRunner().invoke(cli, ["version"])

        assert result.exit_code == 0, result.output
        assert result.output == "1.1.1-feature-a-branch-3-abcd\n"

    def test_default_command_is_version(self, branch_repo, use_repo: Callable) -> None:
        """Test running without a subcommand prints the version."""
        use_repo(branch_repo)

        result = CliRunner().invoke(cli, [])

        assert result.exit_code == 0, result.output
        assert result.output.startswith("1.1.1-")

    def test_trim_branch_prefix_flag(self, branch_repo, use_repo: Callable) -> None:
        use_repo(branch_repo)

        result = CliRunner().invoke(cli, ["version", "--trim-branch-prefix"])

        assert result.output == "1.1.1-a-branch-3-abcd\n"

    def test_trim_branch_prefix_from_settings_file(
        self, branch_repo, use_repo: Callable, tmp_path
    ) -> None:
        """Test the settings file enables trimming without the flag."""
        use_repo(branch_repo)
        (tmp_path / ".vertrail.yaml").write_text("trim-branch-prefix: true\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["-C", str(tmp_path), "version"])

        assert result.output == "1.1.1-a-branch-3-abcd\n"

    def test_environment_tag(self, branch_repo, use_repo: Callable) -> None:
        """Test a CI tag wins unless --ignore-env-vars is given."""
        use_repo(branch_repo, environ={"TRAVIS_TAG": "v1.2.3"})

        assert CliRunner().invoke(cli, ["version"]).output == "1.2.3\n"
        ignored = CliRunner().invoke(cli, ["--ignore-env-vars", "version"])
        assert ignored.output.startswith("1.1.1-feature-a-branch")

    def test_forbid_behind_master(self, repo, use_repo: Callable) -> None:
        """Test --forbid-behind-master fails with exit code 1."""
        base = repo.chain(None, "Initial commit")
        stale = repo.add_commit("wip", [base])
        master = repo.add_commit("+semver: minor", [base])
        repo.set_branch("master", master)
        repo.checkout(stale, "stale")
        use_repo(repo)

        result = CliRunner().invoke(cli, ["version", "--forbid-behind-master"])

        assert result.exit_code == 1
        assert "less than master '0.1.0'" in " ".join(result.output.split())

    def test_repository_error(self, tmp_path) -> None:
        """Test a repository failure is reported with exit code 1."""
        with patch(
            "vertrail.commands.version.build_resolver",
            side_effect=RepositoryAccessError("Not a git repository"),
        ):
            result = CliRunner().invoke(cli, ["-C", str(tmp_path), "version"])

        assert result.exit_code == 1
        assert "[ERROR] Not a git repository" in result.output


@pytest.mark.unit
class TestLabelCommand:
    """Tests for `vertrail label`."""

    def test_branch_label(self, branch_repo, use_repo: Callable) -> None:
        use_repo(branch_repo)

        result = CliRunner().invoke(cli, ["label"])

        assert result.exit_code == 0, result.output
        assert result.output == "feature-a-branch\n"

    def test_trimmed_label(self, branch_repo, use_repo: Callable) -> None:
        use_repo(branch_repo)

        result = CliRunner().invoke(cli, ["label", "--trim-branch-prefix"])

        assert result.output == "a-branch\n"

    def test_master_label_is_empty(self, repo, use_repo: Callable) -> None:
        """Test master prints an empty line."""
        head = repo.chain(None, "Initial commit")
        repo.set_branch("master", head)
        repo.checkout(head, "master")
        use_repo(repo)

        result = CliRunner().invoke(cli, ["label"])

        assert result.exit_code == 0
        assert result.output == "\n"

    def test_unknown_branch(self, repo, use_repo: Callable) -> None:
        """Test a detached, unnamed HEAD is an error."""
        head = repo.chain(None, "Initial commit")
        repo.checkout(head)
        use_repo(repo)

        result = CliRunner().invoke(cli, ["label"])

        assert result.exit_code == 1
        assert "Cannot determine branch" in " ".join(result.output.split())


@pytest.mark.unit
class TestTrailCommand:
    """Tests for `vertrail trail`."""

    def test_json(self, branch_repo, use_repo: Callable) -> None:
        """Test the JSON report lists both trails with running versions."""
        use_repo(branch_repo)

        result = CliRunner().invoke(cli, ["trail", "--format", "json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["version"] == "1.1.1-feature-a-branch-3-abcd"
        assert payload["source"] == "branch"
        assert payload["master_version"] == "0.0.1"
        assert [row["kind"] for row in payload["master"]] == ["none"]
        assert [row["kind"] for row in payload["branch_trail"]] == [
            "none",
            "patch",
            "minor",
            "major",
        ]
        assert [row["version"] for row in payload["branch_trail"]] == [
            "1.1.1",
            "1.1.1",
            "1.1.0",
            "1.0.0",
        ]
        assert payload["branch_trail"][0]["commit"] == BRANCH_HEAD[:8]
        assert payload["branch_trail"][0]["message"] == "some text"

    def test_table(self, branch_repo, use_repo: Callable) -> None:
        """Test the table report shows master and branch sections."""
        use_repo(branch_repo)

        result = CliRunner().invoke(cli, ["--no-color", "trail"])

        assert result.exit_code == 0, result.output
        assert "Commit" in result.output
        assert "Initial commit" in result.output
        assert "some text" in result.output
        assert BRANCH_HEAD[:8] in result.output

    def test_table_captions(self, branch_repo, use_repo: Callable) -> None:
        """Test each table notes where its counting started."""
        use_repo(branch_repo)

        result = CliRunner().invoke(cli, ["--no-color", "trail"])

        output = " ".join(result.output.split())
        assert "no tag reached, counted from 0.0.0" in output
        assert "applied on top of master 0.0.1" in output

    def test_environment_tag(self, branch_repo, use_repo: Callable) -> None:
        """Test a CI-provided version has no trail to show."""
        use_repo(branch_repo, environ={"CI_COMMIT_TAG": "2.0.0"})

        result = CliRunner().invoke(cli, ["trail", "--format", "json"])

        payload = json.loads(result.output)
        assert payload["source"] == "environment"
        assert payload["master"] == []
        assert payload["branch_trail"] == []

    def test_anchor_row(self, repo, use_repo: Callable) -> None:
        """Test a tag appears as the anchor row of the master trail."""
        tagged = repo.chain(None, "release")
        repo.tag(tagged, "v1.2.3")
        head = repo.chain(tagged, "+semver: feature")
        repo.set_branch("master", head)
        repo.checkout(head, "master")
        use_repo(repo)

        result = CliRunner().invoke(cli, ["trail", "-f", "json"])

        rows = json.loads(result.output)["master"]
        assert [(row["kind"], row["version"]) for row in rows] == [
            ("minor", "1.3.0"),
            ("anchor", "1.2.3"),
        ]

    def test_anchor_caption(self, repo, use_repo: Callable) -> None:
        """Test the master table names the tag it counted from."""
        tagged = repo.chain(None, "release")
        repo.tag(tagged, "v1.2.3")
        head = repo.chain(tagged, "+semver: feature")
        repo.set_branch("master", head)
        repo.checkout(head, "master")
        use_repo(repo)

        result = CliRunner().invoke(cli, ["--no-color", "trail"])

        assert result.exit_code == 0, result.output
        output = " ".join(result.output.split())
        assert f"counted from tag 1.2.3 at {tagged[:8]}" in output
