import pytest

from mongit.git.client import FIELD_SEP, RECORD_SEP, GitClient
from mongit.utils.datatypes import Snapshot
from mongit.utils.process import CommandError

HEAD_CHECK = ['git', 'rev-parse', '--verify', '--quiet', 'HEAD']
INSIDE_CHECK = ['git', 'rev-parse', '--is-inside-work-tree']
LOG = ['git', 'log']
COMMIT = ['git', 'commit', '--allow-empty', '--cleanup=verbatim', '-m']


def test_empty_prefix_is_rejected(runner, tmp_path):
    with pytest.raises(ValueError):
        GitClient(tmp_path, message_prefix='', runner=runner)


def test_find_snapshots_in_empty_repository(runner, tmp_path):
    runner.on(HEAD_CHECK, returncode=1)
    git = GitClient(tmp_path, runner=runner)
    assert git.find_snapshots('day1') == []
    assert not runner.called(LOG)


def test_find_snapshots_greps_exact_message(runner, tmp_path):
    runner.on(LOG, stdout='abc1234\ndef5678\n')
    git = GitClient(tmp_path, runner=runner)
    snapshots = git.find_snapshots('v1.0')
    assert snapshots == [Snapshot('v1.0', 'abc1234'), Snapshot('v1.0', 'def5678')]
    assert runner.calls[-1] == ['git', 'log', '--format=%h', '--basic-regexp',
                                r'--grep=^mongit-v1\.0$']


def test_list_snapshots_parses_log(runner, tmp_path):
    stdout = (f'abc1234{FIELD_SEP}mongit-day2\n{RECORD_SEP}\n'
              f'def5678{FIELD_SEP}mongit-day1\n\nnotes\n{RECORD_SEP}\n'
              f'0000000{FIELD_SEP}mongit-\n{RECORD_SEP}\n')
    runner.on(LOG, stdout=stdout)
    git = GitClient(tmp_path, runner=runner)
    snapshots = git.list_snapshots()
    assert [(x.commit, x.label) for x in snapshots] == [('abc1234', 'day2'),
                                                        ('def5678', 'day1')]


def test_commit_returns_short_id(runner, tmp_path):
    runner.on(['git', 'rev-parse', '--short', 'HEAD'], stdout='abc1234\n')
    git = GitClient(tmp_path, runner=runner)
    assert git.commit('mongit-day1') == 'abc1234'
    assert COMMIT + ['mongit-day1'] in runner.calls


def test_create_branch_and_checkout(runner, tmp_path):
    git = GitClient(tmp_path, binary='/usr/bin/git', runner=runner)
    git.create_branch('feature')
    git.checkout('abc1234')
    assert runner.calls == [['/usr/bin/git', 'checkout', '-b', 'feature'],
                            ['/usr/bin/git', 'checkout', 'abc1234']]


def test_discard_resets_path(runner, tmp_path):
    git = GitClient(tmp_path, runner=runner)
    git.discard('dump')
    assert runner.calls == [
        HEAD_CHECK,
        ['git', 'reset', '--quiet', '--', 'dump'],
        ['git', 'checkout', 'HEAD', '--', 'dump'],
        ['git', 'clean', '-fdq', '--', 'dump'],
    ]


def test_discard_in_empty_repository_unstages_path(runner, tmp_path):
    runner.on(HEAD_CHECK, returncode=1)
    git = GitClient(tmp_path, runner=runner)
    git.discard('dump')
    assert runner.calls == [
        HEAD_CHECK,
        ['git', 'rm', '-r', '--cached', '--quiet', '--ignore-unmatch', '--', 'dump'],
        ['git', 'clean', '-fdq', '--', 'dump'],
    ]


def test_lookup_outside_repository_raises(runner, tmp_path):
    runner.on(INSIDE_CHECK, returncode=128,
              stderr='fatal: not a git repository (or any of the parent directories): .git')
    git = GitClient(tmp_path, runner=runner)
    with pytest.raises(CommandError) as e:
        git.find_snapshots('day1')
    assert 'not a git repository' in e.value.output
    with pytest.raises(CommandError):
        git.list_snapshots()
    assert not runner.called(HEAD_CHECK)
    assert not runner.called(LOG)


def test_lookup_inside_git_dir_raises(runner, tmp_path):
    runner.on(INSIDE_CHECK, stdout='false\n')
    git = GitClient(tmp_path, runner=runner)
    with pytest.raises(CommandError) as e:
        git.find_snapshots('day1')
    assert 'not inside a git working tree' in e.value.output
