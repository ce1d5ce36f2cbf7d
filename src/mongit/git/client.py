"""
git client / the commit history used as snapshot storage
"""
from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger

from mongit.utils.converters import (DEFAULT_PREFIX, escape_basic_regex, grep_pattern,
                                     parse_message)
from mongit.utils.datatypes import Snapshot
from mongit.utils.process import CommandError, run_command

# separates fields / records in git log output
FIELD_SEP = '\x1f'
RECORD_SEP = '\x1e'


class GitClient:
    """
    Runs git in a working tree. Every call waits for git to finish.
    """

    def __init__(self, work_dir: Optional[Path] = None, binary: str = 'git',
                 message_prefix: str = DEFAULT_PREFIX,
                 runner: Callable = run_command):
        """
        :param work_dir: git working tree. current directory by default
        :param binary: git executable
        :param message_prefix: prefix of snapshot commit messages
        :param runner: function running a command, see run_command
        """
        if not message_prefix:
            raise ValueError('message_prefix must not be empty')
        self.work_dir = Path(work_dir) if work_dir else Path.cwd()
        self.binary = binary
        self.message_prefix = message_prefix
        self._runner = runner

    def _git(self, *args: str, check: bool = True):
        return self._runner([self.binary, *args], cwd=self.work_dir, check=check)

    def ensure_repository(self):
        """
        Raise CommandError unless work_dir is inside a git working tree.
        """
        args = [self.binary, 'rev-parse', '--is-inside-work-tree']
        result = self._git(*args[1:], check=False)
        if result.returncode != 0:
            raise CommandError(args, result.returncode, result.stdout,
                               result.stderr or f'{self.work_dir} is not a git repository')
        if result.stdout.strip() != 'true':
            raise CommandError(args, result.returncode,
                               stderr=f'{self.work_dir} is not inside a git working tree')

    def has_commits(self) -> bool:
        """
        Whether HEAD points to a commit. False for a fresh repository.
        """
        return self._git('rev-parse', '--verify', '--quiet', 'HEAD', check=False).returncode == 0

    def find_snapshots(self, label: str) -> List[Snapshot]:
        """
        Search the history of the current branch for commits of the given label.
        Raises CommandError outside of a git working tree.
        :param label: snapshot label
        :return: matching snapshots, newest first
        """
        self.ensure_repository()
        if not self.has_commits():
            return []
        result = self._git('log', '--format=%h', '--basic-regexp',
                           f'--grep={grep_pattern(label, self.message_prefix)}')
        return [Snapshot(label, commit, self.message_prefix)
                for commit in result.stdout.split()]

    def list_snapshots(self) -> List[Snapshot]:
        """
        All snapshots on the current branch, newest first.
        """
        self.ensure_repository()
        if not self.has_commits():
            return []
        result = self._git('log', f'--format=%h{FIELD_SEP}%B{RECORD_SEP}', '--basic-regexp',
                           f'--grep=^{escape_basic_regex(self.message_prefix)}')
        snapshots = []
        for record in result.stdout.split(RECORD_SEP):
            if FIELD_SEP not in record:
                continue
            commit, message = record.split(FIELD_SEP, 1)
            label = parse_message(message, self.message_prefix)
            if label is None:
                continue
            snapshots.append(Snapshot(label, commit.strip(), self.message_prefix))
        return snapshots

    def stage_all(self):
        """
        Stage every change in the working tree.
        """
        self._git('add', '.')

    def commit(self, message: str) -> str:
        """
        Commit the staged changes. Also commits if nothing changed.
        :param message: commit message
        :return: short id of the new commit
        """
        # verbatim: the default cleanup strips whitespace the label lookup depends on
        self._git('commit', '--allow-empty', '--cleanup=verbatim', '-m', message)
        commit = self._git('rev-parse', '--short', 'HEAD').stdout.strip()
        logger.info(f'Created commit {commit}: {message}')
        return commit

    def checkout(self, ref: str):
        """
        Check out a commit or branch.
        :param ref: commit id or branch name
        """
        self._git('checkout', ref)

    def create_branch(self, name: str):
        """
        Create a new branch and switch to it.
        :param name: branch name
        """
        self._git('checkout', '-b', name)

    def discard(self, path: Path):
        """
        Unstage path and reset it to its content at HEAD.
        Files under path that HEAD does not know are removed.
        :param path: path inside the working tree
        """
        logger.warning(f'Discarding uncommitted changes in {path}')
        if self.has_commits():
            self._git('reset', '--quiet', '--', str(path), check=False)
            # fails if HEAD has no file under path. nothing to reset then
            self._git('checkout', 'HEAD', '--', str(path), check=False)
        else:
            self._git('rm', '-r', '--cached', '--quiet', '--ignore-unmatch', '--', str(path))
        self._git('clean', '-fdq', '--', str(path))
