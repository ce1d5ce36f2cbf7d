"""Pytest configuration and shared fixtures."""
import subprocess
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / 'src'))

from mongit.utils.process import CommandError  # noqa: E402


class FakeRunner:
    """
    Records every command instead of running it.
    Responses are matched by argv prefix, the first match wins.
    """

    def __init__(self):
        self.calls = []
        self._responses = []
        self._defaults = [(['git', 'rev-parse', '--is-inside-work-tree'], 0, 'true\n', '')]

    def on(self, prefix, returncode=0, stdout='', stderr=''):
        self._responses.append((list(prefix), returncode, stdout, stderr))
        return self

    def fail(self, prefix, stderr='failed'):
        return self.on(prefix, returncode=1, stderr=stderr)

    def __call__(self, args, cwd=None, check=True):
        self.calls.append(list(args))
        for prefix, returncode, stdout, stderr in self._responses + self._defaults:
            if list(args[:len(prefix)]) == prefix:
                if check and returncode != 0:
                    raise CommandError(args, returncode, stdout, stderr)
                return subprocess.CompletedProcess(args, returncode, stdout, stderr)
        return subprocess.CompletedProcess(args, 0, '', '')

    def programs(self):
        return [call[0] for call in self.calls]

    def called(self, prefix):
        return any(call[:len(prefix)] == list(prefix) for call in self.calls)


@pytest.fixture
def runner():
    return FakeRunner()
