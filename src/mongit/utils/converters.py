"""
helpers for converting labels to commit messages and back
"""
import re
from typing import Optional

DEFAULT_PREFIX = 'mongit-'

# characters with a special meaning in a POSIX basic regular expression
_BRE_SPECIAL = re.compile(r'([\\.\[\]*^$])')


def escape_basic_regex(text: str) -> str:
    """
    Escape text for a git --grep pattern (basic regular expression).
    :param text: literal text
    :return: pattern matching exactly text
    """
    return _BRE_SPECIAL.sub(r'\\\1', text)


def format_message(label: str, prefix: str = DEFAULT_PREFIX) -> str:
    """
    Commit message for the given label.
    :param label: snapshot label
    :param prefix: message prefix
    :return: commit message
    """
    return f'{prefix}{label}'


def grep_pattern(label: str, prefix: str = DEFAULT_PREFIX) -> str:
    """
    Anchored git log --grep pattern matching only the message of label.
    :param label: snapshot label
    :param prefix: message prefix
    :return: pattern
    """
    return f'^{escape_basic_regex(format_message(label, prefix))}$'


def parse_message(message: str, prefix: str = DEFAULT_PREFIX) -> Optional[str]:
    """
    Get the label of a snapshot commit message.
    :param message: commit message (subject or full message)
    :param prefix: message prefix
    :return: label or None if the message is not a snapshot message
    """
    for line in message.splitlines():
        if line.startswith(prefix) and len(line) > len(prefix):
            return line[len(prefix):]
    return None
