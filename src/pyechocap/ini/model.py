# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2026/10/18 15:20:44
# @Author : EchoCapture contributors

"""
INI document structure: a global scope and one level of subsections.

    ```ini
    selectedPreset = standard  ; global pairs, before any header

    [high]
    pixelFormat = Format48bppRgb
    imageQuality = 100
    ```

Keys are unique per scope. Subsections can't nest,
that is why `IniSection` and `IniDocument` are two different types.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from .consts import LineType, ValueType
from .errors import (
    DuplicateKeyError,
    InvalidOperationError,
    MalformedDocumentError,
    MalformedLineError,
    ValueTypeMismatch,
)
from .line import IniLine, IniValue, check_section_name, split_lines

__all__ = ['IniSection', 'IniDocument', 'parse']


def _parse_line(raw: str, lineno: int) -> IniLine:
    try:
        return IniLine.parse(raw, strict=True)
    except MalformedLineError as e:
        raise MalformedDocumentError(str(e), lineno) from e


class _IniScope(Mapping[str, IniValue]):
    """Ordered lines of one scope, read only mapping of its key-values.

    The line order is the order they are written in.
    """
    def __init__(self) -> None:
        self._lines: list[IniLine] = []

    def _find(self, key: str) -> int:
        for i, line in enumerate(self._lines):
            if line.line_type is LineType.KEY_VALUE and line.key == key:
                return i
        return -1

    def _append_checked(self, line: IniLine, lineno: int) -> None:
        """for construction from text."""
        if (line.line_type is LineType.KEY_VALUE
                and self._find(line.key) != -1):
            raise DuplicateKeyError(
                f'duplicate key {line.key!r} in {self._scope_name}', lineno)
        self._lines.append(line)

    def _check_index(self, index: int) -> None:
        if not 0 <= index <= len(self._lines):
            raise IndexError(
                f'line index {index} out of range 0..{len(self._lines)}')

    @property
    def _scope_name(self) -> str:
        return 'global scope'

    # Mapping

    def __getitem__(self, key: str) -> IniValue:
        if (i := self._find(key)) == -1:
            raise KeyError(key)
        return self._lines[i].value

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._find(key) != -1

    def __iter__(self) -> Iterator[str]:
        for line in self._lines:
            if line.line_type is LineType.KEY_VALUE:
                yield line.key

    def __len__(self) -> int:
        return sum(1 for _ in self)

    @property
    def lines(self) -> tuple[IniLine, ...]:
        return tuple(self._lines)

    # queries & mutation

    def search(
        self, key: str, expect: type | ValueType
    ) -> tuple[bool, IniValue | None]:
        """Look a value up, checking its type.

        Returns:
            - `(True, value)` if found;
            - `(False, None)` if the key doesn't exist.

        Raises:
            ValueTypeMismatch: the key exists but holds another type.
                Callers usually repair the value then,
                see `set_ignoring_type()`.
        """
        expect = ValueType.from_type(expect)
        if (i := self._find(key)) == -1:
            return False, None
        line = self._lines[i]
        if line.value_type is not expect:
            raise ValueTypeMismatch(expect, line.value_type, key)
        return True, line.value

    def set(
        self, key: str, value: IniValue, *,
        comment: str | None = None, drop_comment: bool = False
    ) -> bool:
        """Change an existing value of the same type.

        The inline comment is kept unless replaced or dropped.
        Returns `False` if the key doesn't exist.
        """
        if (i := self._find(key)) == -1:
            return False
        self._lines[i].change_value(
            value, comment=comment, drop_comment=drop_comment)
        return True

    def set_ignoring_type(
        self, key: str, value: IniValue, *,
        comment: str | None = None, drop_comment: bool = False
    ) -> bool:
        """Like `set()`, but the value may be of another type."""
        if (i := self._find(key)) == -1:
            return False
        self._lines[i].change_value(
            value, keep_type=False,
            comment=comment, drop_comment=drop_comment)
        return True

    def add_value(
        self, key: str, value: IniValue, *,
        index: int | None = None, comment: str | None = None
    ) -> bool:
        """Insert a new key-value line at `index`, or append it.

        Returns `False` if the key already exists in this scope.
        """
        line = IniLine.key_value(key, value, comment)
        if self._find(key) != -1:
            return False
        if index is None:
            self._lines.append(line)
        else:
            self._check_index(index)
            self._lines.insert(index, line)
        return True

    def remove_value(self, key: str) -> bool:
        if (i := self._find(key)) == -1:
            return False
        del self._lines[i]
        return True

    def remove_line(self, index: int) -> bool:
        if not 0 <= index < len(self._lines):
            return False
        del self._lines[index]
        return True

    def add_comment(self, text: str, *, index: int | None = None) -> bool:
        line = IniLine.comment(text)
        if index is None:
            self._lines.append(line)
        else:
            self._check_index(index)
            self._lines.insert(index, line)
        return True

    # rendering

    def _render(self, canonical: bool) -> Iterator[str]:
        for line in self._lines:
            yield line.canonical() if canonical else line.raw

    def to_raw_string(self) -> str:
        """Original text of every untouched line,
        canonical text of the changed ones."""
        return '\n'.join(self._render(False))

    def to_canonical_string(self) -> str:
        """Every line rebuilt from its fields."""
        return '\n'.join(self._render(True))

    def __str__(self) -> str:
        return self.to_canonical_string()


class IniSection(_IniScope):
    """A named subsection, its header line is kept apart from the body."""
    def __init__(self, header: IniLine) -> None:
        if header.line_type is not LineType.SECTION_HEADER:
            raise ValueError(f'{header!r} is not a section header')
        super().__init__()
        self.__header = header

    @property
    def name(self) -> str:
        return self.__header.section_header

    @property
    def header(self) -> IniLine:
        return self.__header

    @property
    def _scope_name(self) -> str:
        return f'[{self.name}]'

    def _rename(self, new: str) -> None:
        self.__header.rename_section(new)

    def _render(self, canonical: bool) -> Iterator[str]:
        yield (self.__header.canonical() if canonical
               else self.__header.raw)
        yield from super()._render(canonical)

    @staticmethod
    def __no_nesting(*args, **kwargs):
        raise InvalidOperationError(
            'subsections can only be managed from the document root')

    create_subsection = __no_nesting
    remove_subsection = __no_nesting
    rename_subsection = __no_nesting
    subsection_exists = __no_nesting

    def __repr__(self) -> str:
        return '[%s] { .cnt = %d }' % (self.name, len(self))


class IniDocument(_IniScope):
    """A whole INI document.

    Every key-value operation takes an optional `section`;
    without it the global scope is used. A missing section acts like
    a missing key (`False`, or `(False, None)` for `search()`).
    """
    def __init__(self, lines: Iterable[str] | None = None) -> None:
        """Build a document from physical lines, or an empty one.

        Raises:
            MalformedDocumentError: an invalid line,
                or a duplicated key or section name.
        """
        super().__init__()
        self.__sections: dict[str, IniSection] = {}
        if lines is not None:
            self.__build(lines)

    @classmethod
    def loads(cls, text: str) -> 'IniDocument':
        return cls(split_lines(text))

    def __build(self, content: Iterable[str]) -> None:
        scope: _IniScope = self
        lineno = 0
        for lineno, raw in enumerate(content, 1):
            line = _parse_line(raw, lineno)
            if line.line_type is not LineType.SECTION_HEADER:
                scope._append_checked(line, lineno)
                continue
            if (name := line.section_header) in self.__sections:
                raise DuplicateKeyError(
                    f'duplicate section [{name}]', lineno)
            scope = self.__sections[name] = IniSection(line)
        logging.debug(
            f'INI parsed: {lineno} lines, {len(self.__sections)} sections.')

    def __scope(self, section: str | None) -> _IniScope | None:
        if section is None:
            return self
        return self.__sections.get(section)

    # subsections

    @property
    def sections(self) -> Mapping[str, IniSection]:
        return MappingProxyType(self.__sections)

    def subsection_exists(self, name: str) -> bool:
        return name in self.__sections

    def create_subsection(
        self, name: str, body: str | Iterable[str] | None = None, *,
        comment: str | None = None
    ) -> bool:
        """Append a new subsection, optionally parsing `body` lines into it.

        Returns `False` if the name already exists.

        Raises:
            InvalidKeyError: malformed name.
            MalformedDocumentError: an invalid line in `body`,
                or a section header within it.
        """
        section = IniSection(IniLine.section(name, comment))
        if name in self.__sections:
            return False
        if isinstance(body, str):
            body = split_lines(body)
        for lineno, raw in enumerate(body or (), 1):
            line = _parse_line(raw, lineno)
            if line.line_type is LineType.SECTION_HEADER:
                raise MalformedDocumentError(
                    f'section header inside the body of [{name}]', lineno)
            section._append_checked(line, lineno)
        self.__sections[name] = section
        return True

    def remove_subsection(self, name: str) -> bool:
        return self.__sections.pop(name, None) is not None

    def rename_subsection(self, old: str, new: str) -> bool:
        """Rename a subsection, keeping its position and header comment.

        Returns `False` if `old` is missing or `new` already exists.
        """
        check_section_name(new)
        if old not in self.__sections or new in self.__sections:
            return False
        names, datas = list(self.__sections), list(self.__sections.values())
        names[names.index(old)] = new
        self.__sections[old]._rename(new)
        # in place, so `sections` views stay alive.
        self.__sections.clear()
        self.__sections.update(zip(names, datas))
        return True

    # key-values, optionally scoped

    def search(
        self, key: str, expect: type | ValueType, *,
        section: str | None = None
    ) -> tuple[bool, IniValue | None]:
        if (scope := self.__scope(section)) is None:
            ValueType.from_type(expect)
            return False, None
        return _IniScope.search(scope, key, expect)

    def set(
        self, key: str, value: IniValue, *,
        section: str | None = None,
        comment: str | None = None, drop_comment: bool = False
    ) -> bool:
        if (scope := self.__scope(section)) is None:
            return False
        return _IniScope.set(
            scope, key, value, comment=comment, drop_comment=drop_comment)

    def set_ignoring_type(
        self, key: str, value: IniValue, *,
        section: str | None = None,
        comment: str | None = None, drop_comment: bool = False
    ) -> bool:
        if (scope := self.__scope(section)) is None:
            return False
        return _IniScope.set_ignoring_type(
            scope, key, value, comment=comment, drop_comment=drop_comment)

    def add_value(
        self, key: str, value: IniValue, *,
        section: str | None = None,
        index: int | None = None, comment: str | None = None
    ) -> bool:
        if (scope := self.__scope(section)) is None:
            return False
        return _IniScope.add_value(
            scope, key, value, index=index, comment=comment)

    def remove_value(self, key: str, *, section: str | None = None) -> bool:
        if (scope := self.__scope(section)) is None:
            return False
        return _IniScope.remove_value(scope, key)

    def remove_line(self, index: int, *, section: str | None = None) -> bool:
        if (scope := self.__scope(section)) is None:
            return False
        return _IniScope.remove_line(scope, index)

    def add_comment(
        self, text: str, *,
        section: str | None = None, index: int | None = None
    ) -> bool:
        if (scope := self.__scope(section)) is None:
            return False
        return _IniScope.add_comment(scope, text, index=index)

    # whole document

    def _render(self, canonical: bool) -> Iterator[str]:
        yield from super()._render(canonical)
        for i in self.__sections.values():
            yield from i._render(canonical)

    def clear(self) -> None:
        """Reset to an empty document."""
        self._lines.clear()
        self.__sections.clear()

    def __repr__(self) -> str:
        return '<IniDocument { .cnt = %d, .sections = %d }>' % (
            len(self), len(self.__sections))


def parse(text: str) -> IniDocument:
    """Parse a whole INI text.

    Raises:
        MalformedDocumentError: see `IniDocument`.
    """
    return IniDocument.loads(text)
