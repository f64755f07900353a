from __future__ import annotations

import pytest

from vertrail.core.branch import (
    BRANCH_PROVIDERS,
    TAG_PROVIDERS,
    EnvironmentProvider,
    cleanse_branch_name,
    find_branch_name,
    first_provided,
)
from vertrail.exceptions import BranchNotFoundError
from vertrail.models.commit import HeadRef


@pytest.mark.unit
class TestCleanseBranchName:
    """Tests for cleanse_branch_name()."""

    @pytest.mark.parametrize(
        "name,trim,expected",
        [
            ("feature/should-be-trimmed", True, "should-be-trimmed"),
            ("hotfix/urgent", True, "urgent"),
            ("author's-branch", False, "author-s-branch"),
            ("feature/keep-prefix", False, "feature-keep-prefix"),
            ("a//b__c", False, "a-b-c"),
            ("bugfix/thing", True, "bugfix-thing"),
            ("my-feature/x", True, "my-feature-x"),
        ],
    )
    def test_cleanse(self, name: str, trim: bool, expected: str) -> None:
        """Test non-alphanumeric runs collapse to '-' and prefixes are trimmed."""
        assert cleanse_branch_name(name, trim) == expected

    @pytest.mark.parametrize("name", ["a-branch", "release-1-2", "plain"])
    def test_idempotent(self, name: str) -> None:
        """Test cleansing a cleansed name is a no-op."""
        once = cleanse_branch_name(name)

        assert cleanse_branch_name(once) == once


@pytest.mark.unit
class TestEnvironmentProvider:
    """Tests for EnvironmentProvider and first_provided()."""

    def test_lookup_plain(self) -> None:
        """Test a plain provider returns the variable's value."""
        provider = EnvironmentProvider("TRAVIS_BRANCH")

        assert provider.lookup({"TRAVIS_BRANCH": "dev"}) == "dev"
        assert provider.lookup({}) is None

    def test_lookup_empty_is_none(self) -> None:
        """Test an empty variable counts as unset."""
        assert EnvironmentProvider("TRAVIS_TAG").lookup({"TRAVIS_TAG": ""}) is None

    def test_lookup_with_prefix(self) -> None:
        """Test a prefixed provider strips the prefix and ignores other values."""
        provider = EnvironmentProvider("GITHUB_REF", prefix="refs/tags/")

        assert provider.lookup({"GITHUB_REF": "refs/tags/v1.0.0"}) == "v1.0.0"
        assert provider.lookup({"GITHUB_REF": "refs/heads/main"}) is None
        assert provider.lookup({"GITHUB_REF": "refs/tags/"}) is None

    def test_first_non_empty_wins(self) -> None:
        """Test providers are polled in order, skipping empty values."""
        environ = {
            "TRAVIS_PULL_REQUEST_BRANCH": "",
            "TRAVIS_BRANCH": "from-travis",
            "CI_COMMIT_REF_NAME": "from-gitlab",
        }

        assert first_provided(BRANCH_PROVIDERS, environ) == ("TRAVIS_BRANCH", "from-travis")

    def test_pull_request_branch_has_priority(self) -> None:
        """Test the PR source branch wins over the PR target branch."""
        environ = {
            "TRAVIS_PULL_REQUEST_BRANCH": "feature/x",
            "TRAVIS_BRANCH": "master",
        }

        assert first_provided(BRANCH_PROVIDERS, environ)[1] == "feature/x"

    def test_tag_providers(self) -> None:
        """Test CI tag variables, GitHub tag refs included."""
        assert first_provided(TAG_PROVIDERS, {"CI_COMMIT_TAG": "v2.0.0"}) == (
            "CI_COMMIT_TAG",
            "v2.0.0",
        )
        assert first_provided(TAG_PROVIDERS, {"GITHUB_REF": "refs/tags/1.0.0"}) == (
            "GITHUB_REF",
            "1.0.0",
        )

    def test_nothing_provided(self) -> None:
        """Test None is returned when no provider has a value."""
        assert first_provided(TAG_PROVIDERS, {}) is None


@pytest.mark.unit
class TestFindBranchName:
    """Tests for find_branch_name()."""

    def test_environment_first(self, repo) -> None:
        """Test a CI variable overrides the checked-out branch."""
        sha = repo.add_commit("initial")
        head = HeadRef(sha=sha, is_branch=True, branch_name="local")

        name = find_branch_name(repo, head, environ={"TRAVIS_BRANCH": "feature/ci"})

        assert name == "feature-ci"

    def test_environment_ignored(self, repo) -> None:
        """Test use_environment=False skips CI variables."""
        sha = repo.add_commit("initial")
        head = HeadRef(sha=sha, is_branch=True, branch_name="local")

        name = find_branch_name(
            repo, head, environ={"TRAVIS_BRANCH": "ci"}, use_environment=False
        )

        assert name == "local"

    def test_attached_head(self, repo) -> None:
        """Test the attached branch name is used and cleansed."""
        sha = repo.add_commit("initial")
        head = HeadRef(sha=sha, is_branch=True, branch_name="feature/login")

        assert find_branch_name(repo, head, environ={}, trim_prefix=True) == "login"

    def test_detached_head_matches_local_branch(self, repo) -> None:
        """Test a detached HEAD is named after a local branch at the same commit."""
        root = repo.add_commit("initial")
        sha = repo.add_commit("work", [root])
        repo.set_branch("master", root)
        repo.set_remote_branch("remote-name", sha)
        repo.set_branch("local-name", sha)

        assert find_branch_name(repo, HeadRef(sha=sha), environ={}) == "local-name"

    def test_detached_head_matches_remote_branch(self, repo) -> None:
        """Test remote-tracking branches are used without the remote name."""
        sha = repo.add_commit("initial")
        repo.set_remote_branch("fix/bug", sha)

        assert find_branch_name(repo, HeadRef(sha=sha), environ={}) == "fix-bug"

    def test_no_branch_raises(self, repo) -> None:
        """Test BranchNotFoundError when nothing names the commit."""
        sha = repo.add_commit("initial")

        with pytest.raises(BranchNotFoundError) as exc_info:
            find_branch_name(repo, HeadRef(sha=sha), environ={})

        assert exc_info.value.details["commit"] == sha
