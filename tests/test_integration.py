"""
End-to-end tests against real git repositories.

Skipped when git is not installed.
"""

import json

from click.testing import CliRunner

from zgit.cli import cli
from zgit.domain import RepositoryDescriptor
from zgit.infra.git_client import GitClient
from zgit.services.status_service import StatusService, StatusOptions
from conftest import git, requires_git


def service(**options):
    return StatusService(config={}, git_client=GitClient(timeout=30), options=StatusOptions(**options))


@requires_git
class TestRealRepositories:

    def test_clean_repo(self, make_repo):
        repo = make_repo("clean")

        report = service().aggregate([RepositoryDescriptor.from_path(repo)])

        (row,) = report.rows
        assert row.branch == "main"
        assert row.staged == ""
        assert row.unstaged == ""
        assert len(row.ref_label) >= 4
        assert report.errors == []

    def test_tag_and_changes(self, make_repo):
        repo = make_repo("dirty")
        git(repo, "tag", "v1.0")
        (repo / "added.txt").write_text("new\n")
        git(repo, "add", "added.txt")
        (repo / "doomed.txt").unlink()
        (repo / "untracked.txt").write_text("?\n")

        (row,) = service().aggregate([RepositoryDescriptor.from_path(repo)]).rows

        assert row.ref_label == "v1.0"
        assert row.staged == "+1 ~0 -0"
        assert row.unstaged == "+1 ~0 -1"

    def test_mixed_with_non_repository(self, make_repo, tmp_path):
        good = make_repo("good")
        plain = tmp_path / "plain"
        plain.mkdir()
        repos = [RepositoryDescriptor.from_path(plain), RepositoryDescriptor.from_path(good)]

        report = service(max_workers=2).aggregate(repos)

        bad_row, good_row = report.rows
        assert bad_row.branch == "See Error: 1"
        assert bad_row.staged == "See Error: 2"
        assert good_row.branch == "main"
        assert [e.index for e in report.errors] == [1, 2]
        assert "not a git repository" in report.errors[0].detail.lower()

    def test_cli_end_to_end(self, make_repo, tmp_path):
        repo = make_repo("api-server")
        env = {
            'ZGIT_REPOS_FILE': str(tmp_path / 'zg-repos.json'),
            'ZGIT_CONFIG': str(tmp_path / 'none.json'),
        }
        runner = CliRunner()

        runner.invoke(cli, ['@api', 'register', str(repo)], env=env)
        result = runner.invoke(cli, ['@api', 'status', '-f', 'json'], env=env)

        assert result.exit_code == 0, result.output
        (record,) = json.loads(result.output)
        assert record['name'] == 'api-server'
        assert record['branch'] == 'main'
