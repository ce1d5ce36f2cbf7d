from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from mongit.mongo.targets.base import Target
from mongit.utils.process import run_command


class DockerTarget(Target):
    """
    Runs the MongoDB tools inside a container and copies dumps in and out of it.
    """

    def __init__(self, container: str, dump_dir: Path,
                 container_dump_dir: str = '/opt/dump', docker_binary: str = 'docker',
                 dump_binary: str = 'mongodump', restore_binary: str = 'mongorestore',
                 runner: Callable = run_command):
        """
        :param container: container name or id
        :param dump_dir: absolute dump directory in the working tree
        :param container_dump_dir: dump directory inside the container
        :param docker_binary: container runtime executable
        """
        super().__init__(dump_dir, dump_binary, restore_binary, runner)
        if not container:
            raise ValueError('container must be provided when using docker')
        if not container_dump_dir.startswith('/') or container_dump_dir.rstrip('/') == '':
            raise ValueError(f'container dump dir must be an absolute path other than /: '
                             f'{container_dump_dir}')
        self.container = container
        self.container_dump_dir = container_dump_dir.rstrip('/')
        self.docker_binary = docker_binary

    def _exec(self, *args: str):
        return self._runner([self.docker_binary, 'exec', self.container, *args])

    def _clear_container_dump_dir(self):
        self._exec('rm', '-rf', self.container_dump_dir)

    def dump(self, uri: Optional[str] = None) -> None:
        self._clear_container_dump_dir()
        self._exec(self.dump_binary, *self._connection_args(uri),
                   '--out', self.container_dump_dir)
        logger.debug(f'Copying {self.container}:{self.container_dump_dir} to {self.dump_dir}')
        # "dir/." copies the content of dir into the destination
        self._replace_dump_dir(
            lambda out: self._runner([self.docker_binary, 'cp',
                                      f'{self.container}:{self.container_dump_dir}/.', str(out)])
        )

    def restore(self, uri: Optional[str] = None, drop: bool = False) -> None:
        self._clear_container_dump_dir()
        logger.debug(f'Copying {self.dump_dir} to {self.container}:{self.container_dump_dir}')
        self._runner([self.docker_binary, 'cp', f'{self.dump_dir}/.',
                      f'{self.container}:{self.container_dump_dir}'])
        self._exec(self.restore_binary, *self._connection_args(uri, drop),
                   self.container_dump_dir)
