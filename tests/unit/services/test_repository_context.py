"""Tests for repository identity derivation."""

import logging

import pytest

from slippy_find.exceptions import (
    InvalidRemoteURLError,
    NoRemoteOriginError,
    RepositoryNotFoundError,
)
from slippy_find.git.repository import GitRepository
from slippy_find.services.repository_context import (
    RepositoryContext,
    parse_repository_name,
)


class TestParseRepositoryName:
    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/TestOrg/test-repo.git",
            "https://github.com/TestOrg/test-repo",
            "http://git.example.com/TestOrg/test-repo.git",
            "git@github.com:TestOrg/test-repo.git",
            "git@github.com:TestOrg/test-repo",
            "  https://github.com/TestOrg/test-repo.git\n",
        ],
    )
    def test_supported_shapes(self, url):
        assert parse_repository_name(url) == "TestOrg/test-repo"

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "not-a-url",
            "https://github.com/only-owner",
            "https://github.com/a/b/c.git",
            "/srv/git/repo.git",
        ],
    )
    def test_unrecognized_shapes(self, url):
        with pytest.raises(InvalidRemoteURLError):
            parse_repository_name(url)


class TestGetContext:
    def test_on_branch(self, fake_repository):
        repo, commits = fake_repository(branch="feature/x")

        identity = RepositoryContext(repo).get_context()

        assert identity.head_commit == commits[0]
        assert identity.branch == "feature/x"
        assert identity.repository_name == "TestOrg/test-repo"
        assert identity.is_detached is False

    def test_detached_head_warns_and_continues(self, fake_repository, caplog):
        repo, commits = fake_repository(branch="")

        with caplog.at_level(logging.WARNING, logger="slippy_find"):
            identity = RepositoryContext(repo, path="/work").get_context()

        assert identity.is_detached is True
        assert identity.branch == ""
        assert identity.head_commit == commits[0]
        assert "HEAD is detached" in caplog.text

    def test_missing_origin(self, fake_repository):
        repo, _ = fake_repository(origin=None)
        repo.remotes = {"upstream": ["https://github.com/Other/repo.git"]}

        with pytest.raises(NoRemoteOriginError) as exc_info:
            RepositoryContext(repo).get_context()

        assert "no 'origin' remote configured" in str(exc_info.value)

    def test_origin_without_urls(self, fake_repository):
        repo, _ = fake_repository()
        repo.remotes = {"origin": []}

        with pytest.raises(NoRemoteOriginError) as exc_info:
            RepositoryContext(repo).get_context()

        assert "no URLs" in str(exc_info.value)

    def test_first_origin_url_wins(self, fake_repository):
        repo, _ = fake_repository()
        repo.remotes = {
            "origin": [
                "git@github.com:First/one.git",
                "https://github.com/Second/two.git",
            ]
        }

        identity = RepositoryContext(repo).get_context()

        assert identity.repository_name == "First/one"

    def test_unparseable_origin(self, fake_repository):
        repo, _ = fake_repository(origin="file:///srv/repo")

        with pytest.raises(InvalidRemoteURLError):
            RepositoryContext(repo).get_context()

    def test_unresolvable_head(self, fake_repository):
        repo, _ = fake_repository(commit_count=0)

        with pytest.raises(RepositoryNotFoundError):
            RepositoryContext(repo).get_context()


def test_context_from_real_repository(git_repo):
    head = git_repo.commit("first")
    git_repo.add_origin("git@github.com:TestOrg/test-repo.git")

    identity = RepositoryContext(GitRepository(git_repo.path)).get_context()

    assert identity.head_commit == head
    assert identity.branch == "main"
    assert identity.repository_name == "TestOrg/test-repo"
