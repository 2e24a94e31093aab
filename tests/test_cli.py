"""
Tests for the gitplumb command-line interface.
"""

import json
import zlib

import pytest
from click.testing import CliRunner

from gitplumb import exit_codes
from gitplumb.cli import cli
from gitplumb.domain import ObjectKind, TypedObject
from gitplumb.object_store import object_path
from gitplumb.repository import Repository


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def workdir(runner, tmp_path):
    """Run each test inside a fresh directory."""
    with runner.isolated_filesystem(temp_dir=tmp_path) as path:
        yield path


@pytest.fixture
def initialized(runner, workdir):
    result = runner.invoke(cli, ['init'])
    assert result.exit_code == 0, result.output
    return workdir


class TestInitCommand:

    def test_init_current_directory(self, runner, workdir):
        result = runner.invoke(cli, ['init'])
        assert result.exit_code == 0
        assert "Initialized empty repository" in result.output
        assert Repository.open(workdir).settings.format_version == 0

    def test_init_path(self, runner, workdir):
        result = runner.invoke(cli, ['init', 'sub/project'])
        assert result.exit_code == 0
        assert Repository.find('sub/project').gitdir.name == ".git"

    def test_init_twice(self, runner, initialized):
        result = runner.invoke(cli, ['init'])
        assert result.exit_code == exit_codes.ALREADY_EXISTS
        assert "already a git repository" in result.output

    def test_init_unsupported_version(self, runner, workdir, monkeypatch):
        monkeypatch.setenv('GITPLUMB_CORE_REPOSITORYFORMATVERSION', '3')
        result = runner.invoke(cli, ['init'])
        assert result.exit_code == exit_codes.UNSUPPORTED


class TestHashObjectCommand:

    def test_hash_empty_file(self, runner, workdir):
        with open('empty', 'wb'):
            pass
        result = runner.invoke(cli, ['hash-object', 'empty'])
        assert result.exit_code == 0
        assert result.output.strip() == "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"

    def test_hash_stdin(self, runner, workdir):
        result = runner.invoke(cli, ['hash-object', '-'], input=b"test content\n")
        assert result.exit_code == 0
        assert result.output.strip() == "d670460b4b4aece5915caf5c68d12f560a9fe3e4"

    def test_hash_with_type(self, runner, workdir):
        result = runner.invoke(cli, ['hash-object', '-t', 'commit', '-'], input=b"x")
        assert result.output.strip() == TypedObject.new(ObjectKind.COMMIT, b"x").hash.to_hex()

    def test_write_stores_object(self, runner, initialized):
        result = runner.invoke(cli, ['hash-object', '-w', '-'], input=b"hello\n")
        assert result.exit_code == 0
        oid = result.output.strip()

        path = object_path(Repository.find('.'), oid)
        assert zlib.decompress(path.read_bytes()) == b"blob 6\0hello\n"

    def test_write_twice_succeeds(self, runner, initialized):
        first = runner.invoke(cli, ['hash-object', '-w', '-'], input=b"again")
        second = runner.invoke(cli, ['hash-object', '-w', '-'], input=b"again")
        assert first.exit_code == second.exit_code == 0
        assert first.output == second.output

    def test_write_outside_repository(self, runner, workdir):
        result = runner.invoke(cli, ['hash-object', '-w', '-'], input=b"x")
        assert result.exit_code == exit_codes.NO_REPOSITORY
        assert "Not a git repository" in result.output


class TestCatFileCommand:

    @pytest.fixture
    def stored(self, runner, initialized):
        result = runner.invoke(cli, ['hash-object', '-w', '-'], input=b"hello\n")
        return result.output.strip()

    def test_type(self, runner, stored):
        result = runner.invoke(cli, ['cat-file', '-t', stored])
        assert result.exit_code == 0
        assert result.output == "blob\n"

    def test_size(self, runner, stored):
        result = runner.invoke(cli, ['cat-file', '-s', stored])
        assert result.output == "6\n"

    def test_content(self, runner, stored):
        result = runner.invoke(cli, ['cat-file', '-p', stored])
        assert result.exit_code == 0
        assert result.output == "hello\n"

    def test_flag_required(self, runner, stored):
        result = runner.invoke(cli, ['cat-file', stored])
        assert result.exit_code == exit_codes.USAGE_ERROR

    def test_missing_object(self, runner, initialized):
        result = runner.invoke(cli, ['cat-file', '-p', 'e69de29bb2d1d6434b8b29ae775ad8c2e48c5391'])
        assert result.exit_code == exit_codes.OBJECT_NOT_FOUND

    def test_invalid_hash(self, runner, initialized):
        result = runner.invoke(cli, ['cat-file', '-p', 'xyz'])
        assert result.exit_code == exit_codes.DATA_ERROR

    def test_corrupt_object(self, runner, stored):
        path = object_path(Repository.find('.'), stored)
        path.chmod(0o644)
        path.write_bytes(zlib.compress(b"blob 99\0hello\n"))
        result = runner.invoke(cli, ['cat-file', '-p', stored])
        assert result.exit_code == exit_codes.DATA_ERROR
        assert "size mismatch" in result.output


class TestLsObjectsCommand:

    def test_jsonl(self, runner, initialized):
        runner.invoke(cli, ['hash-object', '-w', '-'], input=b"one")
        runner.invoke(cli, ['hash-object', '-w', '-t', 'tag', '-'], input=b"two!")

        result = runner.invoke(cli, ['ls-objects'])

        assert result.exit_code == 0
        records = [json.loads(line) for line in result.output.splitlines()]
        assert sorted((r['kind'], r['size']) for r in records) == [('blob', 3), ('tag', 4)]

    def test_corrupt_object_listed_with_error(self, runner, initialized):
        """One bad object does not hide the rest of the listing."""
        good = runner.invoke(cli, ['hash-object', '-w', '-'], input=b"good").output.strip()
        bad = TypedObject.new(ObjectKind.BLOB, b"bad")
        path = object_path(Repository.find('.'), bad.hash)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"not zlib at all")

        result = runner.invoke(cli, ['ls-objects'])

        assert result.exit_code == 0
        # Warnings are logged to stderr, which the runner may mix into output.
        records = {r['hash']: r for r in
                   (json.loads(line) for line in result.output.splitlines() if line.startswith('{'))}
        assert records[good]['kind'] == 'blob'
        assert 'kind' not in records[bad.hash.to_hex()]
        assert "decompress" in records[bad.hash.to_hex()]['error']

    def test_corrupt_object_pretty(self, runner, initialized):
        bad = TypedObject.new(ObjectKind.BLOB, b"bad")
        path = object_path(Repository.find('.'), bad.hash)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(zlib.compress(b"blob 99\0bad"))

        result = runner.invoke(cli, ['ls-objects', '--pretty'])

        assert result.exit_code == 0
        assert "1 loose objects" in result.output

    def test_pretty_empty(self, runner, initialized):
        result = runner.invoke(cli, ['ls-objects', '--pretty'])
        assert result.exit_code == 0
        assert "No objects found" in result.output


class TestConfigCommand:

    def test_show_inside_repository(self, runner, initialized):
        with open('.git/config', 'w') as f:
            f.write("[core]\nrepositoryformatversion = 0\nbare = true\n")
        result = runner.invoke(cli, ['config', 'show'])
        assert result.exit_code == 0
        assert json.loads(result.output)['core']['bare'] is True

    def test_show_outside_repository(self, runner, workdir, monkeypatch):
        monkeypatch.setenv('GITPLUMB_CORE_FILEMODE', 'false')
        result = runner.invoke(cli, ['config', 'show'])
        assert result.exit_code == 0
        assert json.loads(result.output)['core']['filemode'] is False

    def test_show_pretty(self, runner, workdir):
        result = runner.invoke(cli, ['config', 'show', '--pretty'])
        assert result.exit_code == 0
        assert "core.repositoryformatversion" in result.output
