"""
MongoDB dump / restore via the database tools
"""
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from mongit.mongo.targets.base import Target
from mongit.mongo.targets.docker import DockerTarget
from mongit.mongo.targets.host import HostTarget
from mongit.utils.process import run_command


class DumpLocation(Enum):
    """
    Represents where the database tools run.
    """
    HOST = 'Host'
    DOCKER = 'Docker'


class Client:
    """
    MongoDB client. Wraps mongodump and mongorestore.
    """

    def __init__(self, work_dir: Path,
                 dump_dir: str = 'dump',
                 uri: Optional[str] = None,
                 container: Optional[str] = None,
                 container_dump_dir: str = '/opt/dump',
                 docker_binary: str = 'docker',
                 dump_binary: str = 'mongodump',
                 restore_binary: str = 'mongorestore',
                 drop: bool = False,
                 runner: Callable = run_command):
        """
        Init a new client.
        :param work_dir: git working tree
        :param dump_dir: dump directory relative to work_dir. default: dump
        :param uri: connection string. default: None
        :param container: container to run the tools in. default: None (host)
        :param container_dump_dir: default: /opt/dump
        :param docker_binary: default: docker
        :param dump_binary: default: mongodump
        :param restore_binary: default: mongorestore
        :param drop: drop collections before restoring them. default: False
        :param runner: function running a command, see run_command
        """
        work_dir = Path(work_dir).resolve()
        relative = Path(dump_dir)
        if relative.is_absolute() or '..' in relative.parts:
            raise ValueError(f'dump_dir must be relative to the working tree: {dump_dir}')
        if (work_dir / relative).resolve() == work_dir:
            raise ValueError('dump_dir must be a sub directory of the working tree')

        self.uri = uri
        self.drop = drop
        self.dump_dir = relative
        self.location = DumpLocation.DOCKER if container else DumpLocation.HOST
        match self.location:
            case DumpLocation.DOCKER:
                self.target: Target = DockerTarget(
                    container=container,
                    dump_dir=work_dir / relative,
                    container_dump_dir=container_dump_dir,
                    docker_binary=docker_binary,
                    dump_binary=dump_binary,
                    restore_binary=restore_binary,
                    runner=runner,
                )
            case DumpLocation.HOST:
                self.target = HostTarget(
                    dump_dir=work_dir / relative,
                    dump_binary=dump_binary,
                    restore_binary=restore_binary,
                    runner=runner,
                )

    def dump(self):
        """
        Dump the database into the dump directory.
        """
        logger.info(f'Dumping the database to {self.dump_dir} ({self.location.value})')
        self.target.dump(self.uri)

    def restore(self):
        """
        Restore the database from the dump directory.
        """
        logger.info(f'Restoring the database from {self.dump_dir} ({self.location.value})')
        self.target.restore(self.uri, drop=self.drop)
