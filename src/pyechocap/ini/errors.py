# -*- encoding: utf-8 -*-
# @File   : errors.py
# @Time   : 2026/10/18 14:21:50
# @Author : EchoCapture contributors

"""Errors raised by the INI engine.

A missing key or section is *not* an error:
it is reported as `False` (or `(False, None)` for searches).
"""

from .consts import ValueType


class IniError(Exception):
    """Base error of this package."""
    pass


class MalformedLineError(IniError, ValueError):
    """A line does not follow the INI grammar."""
    def __init__(self, line: str, reason: str | None = None) -> None:
        self.line = line
        self.reason = reason
        msg = f'cannot classify line {line!r}'
        if reason:
            msg += f': {reason}'
        super().__init__(msg)


class MalformedDocumentError(IniError, ValueError):
    """The document could not be built. Callers should fall back
    to an empty document."""
    def __init__(self, message: str, lineno: int | None = None) -> None:
        self.lineno = lineno
        if lineno is not None:
            message = f'line {lineno}: {message}'
        super().__init__(message)


class DuplicateKeyError(MalformedDocumentError):
    pass


class ValueTypeMismatch(IniError, TypeError):
    """A value exists but is not of the type asked for.

    Different from "not found": it means the stored value is
    corrupted or unexpected.
    """
    def __init__(
        self, expected: ValueType, found: ValueType | None = None,
        key: str | None = None
    ) -> None:
        self.expected = expected
        self.found = found
        self.key = key
        where = f' of key {key!r}' if key is not None else ''
        if found is not None:
            msg = (f'value{where} is type of {found.value} '
                   f'instead of {expected.value}')
        else:
            msg = f'failed to parse value{where} into {expected.value}'
        super().__init__(msg)


class InvalidKeyError(IniError, ValueError):
    pass


class InvalidCommentError(IniError, ValueError):
    pass


class InvalidOperationError(IniError, RuntimeError):
    pass
