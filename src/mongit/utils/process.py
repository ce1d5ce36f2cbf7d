"""
Thin wrapper around subprocess for the external programs we drive.
"""
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger


class CommandError(Exception):
    """
    An external program failed or could not be started.
    """

    def __init__(self, args: Sequence[str], returncode: Optional[int] = None,
                 stdout: str = '', stderr: str = ''):
        """
        :param args: argv of the failed command
        :param returncode: exit status. None if the program did not start.
        :param stdout: captured standard output
        :param stderr: captured standard error
        """
        self.args_list = list(args)
        self.returncode = returncode
        self.stdout = stdout or ''
        self.stderr = stderr or ''
        super().__init__(self.output)

    @property
    def output(self) -> str:
        """
        The most useful text for the user: stderr, then stdout, then the status.
        """
        if self.stderr.strip():
            return self.stderr.strip()
        if self.stdout.strip():
            return self.stdout.strip()
        if self.returncode is None:
            return f'Could not run {self.args_list[0]}'
        return f'{" ".join(self.args_list)} exited with status {self.returncode}'


def run_command(args: List[str], cwd: Optional[Path] = None,
                check: bool = True) -> subprocess.CompletedProcess:
    """
    Run a command and wait for it.
    :param args: argv
    :param cwd: working directory. current one by default
    :param check: raise CommandError on a non-zero exit status
    :return: completed process with text stdout/stderr
    """
    logger.debug(f'Running: {" ".join(args)}')
    try:
        result = subprocess.run(args, cwd=cwd, capture_output=True, text=True)
    except OSError as e:
        raise CommandError(args, stderr=f'Could not run {args[0]}: {e}') from e
    if check and result.returncode != 0:
        raise CommandError(args, result.returncode, result.stdout, result.stderr)
    return result
