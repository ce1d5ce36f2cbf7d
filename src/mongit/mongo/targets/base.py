import shutil
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional

from mongit.utils.process import run_command


class Target(ABC):
    """
    ABC for the places mongodump and mongorestore run.
    Implements how a dump ends up in the working tree and how it gets restored from there.
    """

    def __init__(self, dump_dir: Path, dump_binary: str = 'mongodump',
                 restore_binary: str = 'mongorestore', runner: Callable = run_command):
        """
        :param dump_dir: absolute dump directory in the working tree
        :param dump_binary: dump tool
        :param restore_binary: restore tool
        :param runner: function running a command, see run_command
        """
        self.dump_dir = Path(dump_dir)
        self.dump_binary = dump_binary
        self.restore_binary = restore_binary
        self._runner = runner

    @staticmethod
    def _connection_args(uri: Optional[str], drop: bool = False) -> List[str]:
        args = ['--uri', uri] if uri else []
        if drop:
            args.append('--drop')
        return args

    def _replace_dump_dir(self, write: Callable[[Path], None]):
        """
        Let write fill a fresh directory next to the dump dir and swap it in.
        The old dump stays untouched if write raises.
        Swapping also drops files of collections which no longer exist.
        :param write: gets the directory to dump into
        """
        self.dump_dir.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f'.{self.dump_dir.name}-',
                                        dir=self.dump_dir.parent))
        try:
            write(staging)
        except Exception:
            shutil.rmtree(staging, ignore_errors=True)
            raise
        if self.dump_dir.is_dir():
            shutil.rmtree(self.dump_dir)
        staging.rename(self.dump_dir)

    @abstractmethod
    def dump(self, uri: Optional[str] = None) -> None:
        """
        Dump the database into self.dump_dir.
        :param uri: connection string. tool default if None
        """
        pass

    @abstractmethod
    def restore(self, uri: Optional[str] = None, drop: bool = False) -> None:
        """
        Restore the database from self.dump_dir.
        :param uri: connection string. tool default if None
        :param drop: drop each collection before restoring it
        """
        pass
