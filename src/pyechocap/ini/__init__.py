# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2026/10/18 14:08:26
# @Author : EchoCapture contributors

from .consts import LineType, ValueType
from .errors import (
    IniError,
    MalformedLineError,
    MalformedDocumentError,
    DuplicateKeyError,
    ValueTypeMismatch,
    InvalidKeyError,
    InvalidCommentError,
    InvalidOperationError
)
from .line import IniLine, split_lines
from .model import IniDocument, IniSection, parse
from .parser import IniParser, IniJsonParser, IniYamlParser
