"""
Snapshot operations. Each one returns a Result and never exits the process.
"""
from typing import List

from loguru import logger

from mongit.git.client import GitClient
from mongit.mongo.client import Client
from mongit.utils.datatypes import ErrorKind, Failure, Result, Snapshot, Success
from mongit.utils.process import CommandError

INITIAL_LABEL = 'initial'


class SnapshotManager:
    """
    Pairs database dumps with labeled git commits.
    """

    def __init__(self, git: GitClient, mongo: Client, rollback: bool = False):
        """
        :param git: client for the working tree holding the dumps
        :param mongo: client dumping / restoring the database
        :param rollback: undo the dump if staging or committing it fails
        """
        self.git = git
        self.mongo = mongo
        self.rollback = rollback

    def resolve(self, label: str) -> Result:
        """
        Find the commit of a label.
        :param label: snapshot label
        :return: Success with the snapshot, Failure NOT_FOUND or AMBIGUOUS
        """
        try:
            matches = self.git.find_snapshots(label)
        except CommandError as e:
            return Failure(ErrorKind.COMMAND, e.output)
        if not matches:
            return Failure(ErrorKind.NOT_FOUND, f"Can't find snapshot {label}")
        if len(matches) > 1:
            commits = ', '.join(x.commit for x in matches)
            return Failure(ErrorKind.AMBIGUOUS,
                           f'Snapshot {label} matches more than one commit: {commits}')
        return Success(matches[0])

    def snapshot(self, label: str) -> Result:
        """
        Dump the database and commit the dump under the given label.
        Nothing is dumped if the label is already in use.
        :param label: snapshot label
        :return: Success with the new snapshot or Failure
        """
        try:
            existing = self.git.find_snapshots(label)
        except CommandError as e:
            return Failure(ErrorKind.COMMAND, e.output)
        if existing:
            return Failure(ErrorKind.COLLISION,
                           f'Snapshot {label} already exists in commit {existing[0].commit}')

        snapshot = Snapshot(label, prefix=self.git.message_prefix)
        try:
            self.mongo.dump()
        except CommandError as e:
            return Failure(ErrorKind.COMMAND, e.output)

        try:
            self.git.stage_all()
            snapshot.commit = self.git.commit(snapshot.message)
        except CommandError as e:
            if self.rollback:
                self._discard_dump()
            return Failure(ErrorKind.COMMAND, e.output)
        logger.info(f'Created {snapshot} in commit {snapshot.commit}')
        return Success(snapshot)

    def _discard_dump(self):
        try:
            self.git.discard(self.mongo.dump_dir)
        except CommandError as e:
            logger.error(f'Failed to discard the dump in {self.mongo.dump_dir}: {e.output}')

    def restore(self, label: str) -> Result:
        """
        Check out the commit of label and restore its dump.
        :param label: snapshot label
        :return: Success with the restored snapshot or Failure
        """
        result = self.resolve(label)
        if not result.ok:
            return result
        snapshot = result.snapshot
        try:
            self.git.checkout(snapshot.commit)
            self.mongo.restore()
        except CommandError as e:
            return Failure(ErrorKind.COMMAND, e.output)
        logger.info(f'Restored {snapshot} from commit {snapshot.commit}')
        return Success(snapshot)

    def init(self) -> Result:
        """
        Create the initial snapshot.
        """
        return self.snapshot(INITIAL_LABEL)

    def branch(self, name: str) -> Result:
        """
        Create and switch to a new branch, then snapshot it as <name>-initial.
        :param name: branch name
        """
        try:
            self.git.create_branch(name)
        except CommandError as e:
            return Failure(ErrorKind.COMMAND, e.output)
        return self.snapshot(f'{name}-{INITIAL_LABEL}')

    def list(self) -> List[Snapshot]:
        """
        Snapshots on the current branch, newest first.
        Raises CommandError if git fails.
        """
        return self.git.list_snapshots()
