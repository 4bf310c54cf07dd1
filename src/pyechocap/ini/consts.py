# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2026/10/18 14:10:37
# @Author : EchoCapture contributors

import re
from enum import Enum

SELECTOR = '='
COMMENT = ';'
ALT_COMMENT = '#'
COMMENT_CHARS = (COMMENT, ALT_COMMENT)
START_SECTION = '['
END_SECTION = ']'
ESCAPE = '\\'
QUOTE = '"'

# canonical boolean literals, nothing else is read as a bool.
TRUE_STRING = 'True'
FALSE_STRING = 'False'

# ASCII digits only.
INT_PATTERN = re.compile(r'[+-]?\d+', re.ASCII)
FLOAT_PATTERN = re.compile(
    r'[+-]?(?:(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?|inf|nan)', re.ASCII)

# escape char -> decoded char
ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    QUOTE: QUOTE,
    COMMENT: COMMENT,
    ALT_COMMENT: ALT_COMMENT,
    ESCAPE: ESCAPE,
}


class LineType(int, Enum):
    KEY_VALUE = 0
    SECTION_HEADER = 1
    FULLY_COMMENTED = 2
    EMPTY = 3  # whitespace only
    INVALID = 4


class ValueType(str, Enum):
    """The only four kinds a value may have."""
    STRING = 'string'
    BOOL = 'bool'
    INT = 'int'
    FLOAT = 'float'

    @property
    def python_type(self) -> type:
        match self:
            case ValueType.STRING:
                return str
            case ValueType.BOOL:
                return bool
            case ValueType.INT:
                return int
            case ValueType.FLOAT:
                return float

    @classmethod
    def of(cls, value: object) -> 'ValueType':
        """Tag a python value. Raises `TypeError` for unsupported ones."""
        # bool is a subclass of int, so it goes first.
        match value:
            case bool():
                return cls.BOOL
            case int():
                return cls.INT
            case float():
                return cls.FLOAT
            case str():
                return cls.STRING
        raise TypeError(
            f'unsupported value type {type(value).__name__!r}, '
            'expected one of str, bool, int or float')

    @classmethod
    def from_type(cls, expect: 'type | ValueType') -> 'ValueType':
        if isinstance(expect, cls):
            return expect
        for i in cls:
            if expect is i.python_type:
                return i
        raise TypeError(f'unsupported value type {expect!r}')
