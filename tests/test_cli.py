"""
CLI tests using click's CliRunner.

Each test points ZGIT_REPOS_FILE and ZGIT_CONFIG into a temp directory so
the user's registry and config are never touched.
"""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from zgit import __version__
from zgit.cli import cli, COMMAND_ALIASES
from zgit.domain import StatusReport
from zgit.exit_codes import SUCCESS, CONFIG_ERROR, NO_REPOS_FOUND, PARTIAL_SUCCESS, INTERRUPTED


@pytest.fixture
def env(tmp_path):
    return {
        'ZGIT_REPOS_FILE': str(tmp_path / 'zg-repos.json'),
        'ZGIT_CONFIG': str(tmp_path / 'no-config.json'),
        'COLUMNS': '200',
    }


@pytest.fixture
def invoke(env):
    runner = CliRunner()

    def _invoke(*args):
        return runner.invoke(cli, list(args), env=env)

    return _invoke


@pytest.fixture
def plain_dirs(tmp_path):
    dirs = []
    for name in ('alpha', 'beta', 'gamma'):
        path = tmp_path / name
        path.mkdir()
        dirs.append(path)
    return dirs


def registry(env):
    with open(env['ZGIT_REPOS_FILE']) as f:
        return json.load(f)


class TestEmptyRegistry:

    def test_no_command_prints_hint(self, invoke):
        result = invoke()
        assert result.exit_code == SUCCESS
        assert "No repositories registered. Nothing to do." in result.output
        assert "zgit register [path]" in result.output

    @pytest.mark.parametrize("command", ["status", "list", "branch", "ts"])
    def test_commands_print_hint(self, invoke, command):
        result = invoke(command)
        assert result.exit_code == SUCCESS
        assert "Nothing to do" in result.output


class TestRegistryCommands:

    def test_register_with_tag(self, invoke, env, plain_dirs):
        result = invoke('@api', 'register', str(plain_dirs[0]))

        assert result.exit_code == SUCCESS, result.output
        assert "Registered" in result.output
        assert registry(env) == [{'name': 'alpha', 'location': str(plain_dirs[0]), 'tag': 'api'}]

    def test_register_missing_path(self, invoke, tmp_path):
        result = invoke('register', str(tmp_path / 'nope'))

        assert result.exit_code == CONFIG_ERROR
        assert "Invalid path" in result.output

    def test_list_filters_by_tag(self, invoke, plain_dirs):
        invoke('@api', 'register', str(plain_dirs[0]))
        invoke('register', str(plain_dirs[1]))

        everything = invoke('list')
        tagged = invoke('@api', 'list')

        assert "alpha" in everything.output and "beta" in everything.output
        assert "alpha" in tagged.output
        assert "beta" not in tagged.output

    def test_unregister(self, invoke, env, plain_dirs):
        invoke('register', str(plain_dirs[0]))
        invoke('register', str(plain_dirs[1]))

        result = invoke('unregister', str(plain_dirs[0]))

        assert result.exit_code == SUCCESS
        assert [r['name'] for r in registry(env)] == ['beta']

    def test_unregister_unknown(self, invoke, plain_dirs):
        result = invoke('unregister', str(plain_dirs[2]))
        assert result.exit_code == SUCCESS
        assert "Not registered" in result.output

    def test_invalid_registry_file(self, invoke, env):
        with open(env['ZGIT_REPOS_FILE'], 'w') as f:
            f.write('{broken')

        result = invoke('list')

        assert result.exit_code == CONFIG_ERROR
        assert "ERROR:" in result.output


class TestStatusCommand:
    """Status runs against plain directories, where every git query fails."""

    @pytest.fixture
    def registered(self, invoke, plain_dirs):
        invoke('@api', 'register', str(plain_dirs[0]))
        invoke('register', str(plain_dirs[1]))
        invoke('@api', 'register', str(plain_dirs[2]))
        return plain_dirs

    def test_json_records(self, invoke, registered):
        result = invoke('status', '-f', 'json')

        assert result.exit_code == SUCCESS, result.output
        records = json.loads(result.output)
        rows = [r for r in records if r['type'] == 'status']
        errors = [r for r in records if r['type'] == 'error']
        assert [r['name'] for r in rows] == ['alpha', 'beta', 'gamma']
        assert rows[0]['branch'] == 'See Error: 1'
        assert rows[0]['staged'] == rows[0]['unstaged'] == 'See Error: 2'
        assert rows[2]['branch'] == 'See Error: 5'
        assert [e['index'] for e in errors] == [1, 2, 3, 4, 5, 6]

    def test_tag_prefix_filters(self, invoke, registered):
        result = invoke('@api', 'status', '-f', 'jsonl')

        names = [json.loads(line)['name'] for line in result.output.splitlines()
                 if json.loads(line)['type'] == 'status']
        assert names == ['alpha', 'gamma']

    def test_tag_without_command_runs_status(self, invoke, registered):
        result = invoke('@api')
        assert result.exit_code == SUCCESS
        assert "Tag/Ref" in result.output
        assert "alpha" in result.output
        assert "beta" not in result.output

    def test_unknown_tag(self, invoke, registered):
        result = invoke('@nope', 'status')
        assert result.exit_code == NO_REPOS_FOUND
        assert "No repositories tagged 'nope'" in result.output

    def test_strict(self, invoke, registered):
        result = invoke('status', '--strict', '-f', 'jsonl')
        assert result.exit_code == PARTIAL_SUCCESS

    def test_table_output(self, invoke, registered):
        result = invoke('table-status', '-w', '2')
        assert result.exit_code == SUCCESS
        assert "Error Index" in result.output

    def test_cancelled_run_exits_130(self, invoke, registered):
        with patch('zgit.commands.status.StatusService') as service_cls:
            service_cls.return_value.aggregate.return_value = StatusReport(cancelled=True)
            result = invoke('status')

        assert result.exit_code == INTERRUPTED
        assert "partial report" in result.output

    def test_workers_must_be_positive(self, invoke, registered):
        result = invoke('status', '--workers', '0')
        assert result.exit_code == 2


class TestMisc:

    def test_version(self, invoke):
        result = invoke('--version')
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_aliases_resolve(self):
        for alias, target in COMMAND_ALIASES.items():
            assert cli.get_command(None, alias).name == target

    def test_branch_alias(self, invoke, plain_dirs):
        invoke('register', str(plain_dirs[0]))
        result = invoke('b')
        assert result.exit_code == SUCCESS
        assert "alpha" in result.output
