# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2026/10/18 16:05:19
# @Author : EchoCapture contributors

"""File handlers of `IniDocument`.

- `IniParser`: the INI file itself, written back with formatting kept.
- `IniJsonParser`, `IniYamlParser`: export of the typed values only,
  in the following shape (comments are *not* exported):

    ```yaml
    protocol: 1
    data:             # global key-values
      selectedPreset: standard
    sections:
      high:
        imageQuality: 100
    ```
"""

import json
import logging
import warnings
from io import TextIOBase
from os import PathLike
from typing import TypedDict

import yaml

from ..abstract import FileHandler
from .errors import InvalidKeyError, MalformedDocumentError
from .line import IniValue
from .model import IniDocument

__all__ = ['IniParser', 'IniJsonParser', 'IniYamlParser']


class IniParser(FileHandler[IniDocument]):
    def __init__(
        self, filename: str | PathLike[str], encoding: str = 'utf-8', *,
        strict: bool = False
    ) -> None:
        """With `strict=False` (default), a malformed file is read as an
        empty document, and the caller is expected to rebuild its defaults
        and write it back."""
        super().__init__(filename, encoding)
        self._strict = strict

    @staticmethod
    def readstream(buf: TextIOBase) -> IniDocument:
        """Parse a decoded stream.

        Just call `self.read()` unless you already hold a stream.
        """
        return IniDocument.loads(buf.read())

    def read(self) -> IniDocument:
        try:
            return super().read()
        except MalformedDocumentError as e:
            if self._strict:
                raise
            logging.warning(
                f'{self._fn} is malformed, using an empty document.\n  {e}')
            return IniDocument()

    def writestream(
        self, instance: IniDocument, buf: TextIOBase, *,
        canonical: bool = False
    ) -> None:
        """Untouched lines are written as they were read, unless
        `canonical` asks to rebuild every line."""
        buf.write(instance.to_canonical_string() if canonical
                  else instance.to_raw_string())

    def __str__(self) -> str:
        return f'INI file: {super().__str__()} ({self._codec})'


class _IniExportPack(TypedDict, total=False):
    protocol: int
    data: dict[str, IniValue]
    sections: dict[str, dict[str, IniValue]]


# should keep this base class for the shared pack conversion.
class _IniExportParser(FileHandler[IniDocument]):
    PROTOCOL = 1

    @staticmethod
    def _has_comments(doc: IniDocument) -> bool:
        lines = list(doc.lines)
        for i in doc.sections.values():
            lines.append(i.header)
            lines.extend(i.lines)
        return any(i.inline_comment for i in lines)

    @classmethod
    def _to_pack(cls, doc: IniDocument) -> _IniExportPack:
        if cls._has_comments(doc):
            warnings.warn('INI comments are dropped on export.')
        return _IniExportPack(
            protocol=cls.PROTOCOL,
            data=dict(doc),
            sections={k: dict(v) for k, v in doc.sections.items()})

    @staticmethod
    def __add(doc: IniDocument, key: object, value: object,
              section: str | None) -> None:
        try:
            doc.add_value(str(key), value, section=section)
        except (TypeError, InvalidKeyError) as e:
            where = 'global scope' if section is None else f'[{section}]'
            raise MalformedDocumentError(
                f'cannot import {key!r} of {where}: {e}') from e

    @classmethod
    def _from_pack(cls, src: object) -> IniDocument:
        if not isinstance(src, dict):
            raise MalformedDocumentError('export root is not a mapping')
        if (protocol := src.get('protocol', cls.PROTOCOL)) != cls.PROTOCOL:
            raise MalformedDocumentError(
                f'unsupported export protocol {protocol!r}')
        data, sections = src.get('data') or {}, src.get('sections') or {}
        if not isinstance(data, dict) or not isinstance(sections, dict):
            raise MalformedDocumentError('data or sections is not a mapping')
        ret = IniDocument()
        for k, v in data.items():
            cls.__add(ret, k, v, None)
        for name, pairs in sections.items():
            name = str(name)
            if not isinstance(pairs, dict):
                raise MalformedDocumentError(
                    f'section [{name}] is not a mapping')
            try:
                ret.create_subsection(name)
            except InvalidKeyError as e:
                raise MalformedDocumentError(str(e)) from e
            for k, v in pairs.items():
                cls.__add(ret, k, v, name)
        return ret


class IniJsonParser(_IniExportParser):
    @staticmethod
    def readstream(buf: TextIOBase) -> IniDocument:
        try:
            src = json.load(buf)
        except ValueError as e:  # JSONDecodeError, or an over-long int
            raise MalformedDocumentError(f'invalid JSON: {e}') from e
        return IniJsonParser._from_pack(src)

    def writestream(
        self, instance: IniDocument, buf: TextIOBase, *, indent: int = 2
    ) -> None:
        json.dump(self._to_pack(instance), buf,
                  ensure_ascii=False, indent=indent)


class IniYamlParser(_IniExportParser):
    @staticmethod
    def readstream(buf: TextIOBase) -> IniDocument:
        try:
            src = yaml.load(buf, yaml.SafeLoader)
        except (yaml.YAMLError, ValueError) as e:
            raise MalformedDocumentError(f'invalid YAML: {e}') from e
        return IniYamlParser._from_pack(src)

    def writestream(
        self, instance: IniDocument, buf: TextIOBase, *, indent: int = 2
    ) -> None:
        yaml.safe_dump(dict(self._to_pack(instance)), buf,
                       allow_unicode=True, sort_keys=False, indent=indent)
