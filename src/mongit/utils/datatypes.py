"""
Contains classes representing snapshots and operation results.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from .converters import DEFAULT_PREFIX, format_message


class Snapshot:
    """
    A labeled database dump stored as a git commit.
    """

    def __init__(self, label: str, commit: Optional[str] = None,
                 prefix: str = DEFAULT_PREFIX):
        """
        :param label: snapshot label
        :param commit: short commit id. None until the snapshot is committed.
        :param prefix: commit message prefix
        """
        self.label = label
        self.commit = commit
        self.prefix = prefix

    def __str__(self):
        return f'Snapshot {self.label}'

    def __repr__(self):
        return f'Snapshot(label={self.label!r}, commit={self.commit!r})'

    def __eq__(self, other):
        if not isinstance(other, Snapshot):
            return NotImplemented
        return (self.label, self.commit, self.prefix) == (other.label, other.commit,
                                                          other.prefix)

    @property
    def message(self) -> str:
        """
        commit message of the snapshot
        """
        return format_message(self.label, self.prefix)


class ErrorKind(Enum):
    """
    Reasons for a failed operation.
    """
    COLLISION = 'collision'
    NOT_FOUND = 'not-found'
    AMBIGUOUS = 'ambiguous'
    COMMAND = 'command'


class Result(ABC):
    """
    Outcome of an operation. Inspect ok before using the payload.
    """

    @property
    @abstractmethod
    def ok(self) -> bool:
        """
        whether the operation succeeded
        """


class Success(Result):
    def __init__(self, snapshot: Optional[Snapshot] = None):
        self.snapshot = snapshot

    def __repr__(self):
        return f'Success({self.snapshot!r})'

    @property
    def ok(self) -> bool:
        return True


class Failure(Result):
    def __init__(self, kind: ErrorKind, message: str):
        """
        :param kind: error tag
        :param message: text shown to the user
        """
        self.kind = kind
        self.message = message

    def __str__(self):
        return self.message

    def __repr__(self):
        return f'Failure({self.kind}, {self.message!r})'

    @property
    def ok(self) -> bool:
        return False
