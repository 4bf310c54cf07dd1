# -*- encoding: utf-8 -*-
# @File   : line.py
# @Time   : 2026/10/18 14:35:02
# @Author : EchoCapture contributors

"""One physical INI line, classified.

Supported forms:

    ```ini
    ; fully commented line, '#' works as well
    key = value  ; inline comment
    [section]  # inline comment
    name = "quoted \\"string\\" with spaces"
    ```

A value is one of `str`, `bool`, `int` or `float`, see `ValueType`.
Comment markers inside a value have to be escaped (`\\;`, `\\#`),
otherwise they start the inline comment.

Every line keeps the exact text it was parsed from (`raw`), so untouched
lines are written back byte for byte. Lines built or changed from code
are rendered from their fields instead (`canonical()`).
"""

from .consts import (
    COMMENT_CHARS,
    END_SECTION,
    ESCAPE,
    ESCAPES,
    FALSE_STRING,
    FLOAT_PATTERN,
    INT_PATTERN,
    QUOTE,
    SELECTOR,
    START_SECTION,
    TRUE_STRING,
    LineType,
    ValueType,
)
from .errors import (
    InvalidCommentError,
    InvalidKeyError,
    InvalidOperationError,
    MalformedLineError,
    ValueTypeMismatch,
)

__all__ = [
    'IniLine', 'IniValue', 'split_lines',
    'encode_value', 'decode_value', 'infer_type',
    'check_key', 'check_comment', 'check_section_name',
]

IniValue = str | bool | int | float

# decoded char -> escape sequence
_ENCODES = {v: ESCAPE + k for k, v in ESCAPES.items()}


def _find_unescaped(text: str, chars: str | tuple[str, ...],
                    start: int = 0) -> int:
    """Index of the first char in `chars` not consumed by a backslash,
    or -1."""
    i = start
    while i < len(text):
        if text[i] == ESCAPE:
            i += 2
            continue
        if text[i] in chars:
            return i
        i += 1
    return -1


def _has_line_break(text: str) -> bool:
    return '\n' in text or '\r' in text


def split_lines(text: str) -> list[str]:
    """Split text on line feeds, except escaped ones (`\\` + LF),
    which stay inside the line as a continuation.

    Escapes end at the first unescaped comment marker of a line,
    so a comment ending with a backslash never swallows the next line.

    `'\\n'.join(split_lines(text)) == text` always holds.
    """
    ret = []
    begin = i = 0
    in_comment = False
    while i < len(text):
        c = text[i]
        if c == '\n':
            ret.append(text[begin:i])
            begin = i + 1
            in_comment = False
        elif in_comment:
            pass
        elif c == ESCAPE:
            i += 2
            continue
        elif c in COMMENT_CHARS:
            in_comment = True
        i += 1
    ret.append(text[begin:])
    return ret


def _escape(value: str) -> str:
    return ''.join(_ENCODES.get(c, c) for c in value)


def _unescape(text: str) -> str:
    ret = []
    i = 0
    while i < len(text):
        c = text[i]
        if c == ESCAPE and i + 1 < len(text):
            nxt = text[i + 1]
            if nxt in ESCAPES:
                ret.append(ESCAPES[nxt])
                i += 2
                continue
            if nxt == '\n':  # continuation
                ret.append(nxt)
                i += 2
                continue
        # unknown escapes are kept as they are.
        ret.append(c)
        i += 1
    return ''.join(ret)


def _is_quoted(text: str) -> bool:
    if len(text) < 2 or text[0] != QUOTE or text[-1] != QUOTE:
        return False
    body = text[:-1]
    # an odd run of backslashes escapes the closing quote.
    return (len(body) - len(body.rstrip(ESCAPE))) % 2 == 0


def infer_type(text: str) -> ValueType:
    """Guess the type of an encoded value.

    Order matters: bool, then int, then float, otherwise string.
    A double quoted value is always a string.
    """
    if _is_quoted(text):
        return ValueType.STRING
    if text in (TRUE_STRING, FALSE_STRING):
        return ValueType.BOOL
    if INT_PATTERN.fullmatch(text):
        return ValueType.INT
    if FLOAT_PATTERN.fullmatch(text):
        return ValueType.FLOAT
    return ValueType.STRING


def decode_value(text: str, value_type: ValueType) -> IniValue:
    """Decode `text` strictly as `value_type`.

    Raises:
        ValueTypeMismatch: `text` is not a valid `value_type` literal.
            An unquoted bool/int/float literal is *not* a valid string,
            quote it to keep it a string.
    """
    match value_type:
        case ValueType.BOOL:
            if text == TRUE_STRING:
                return True
            if text == FALSE_STRING:
                return False
        case ValueType.INT:
            if INT_PATTERN.fullmatch(text):
                try:
                    return int(text)
                except ValueError:
                    # over the int string conversion limit.
                    raise ValueTypeMismatch(value_type) from None
        case ValueType.FLOAT:
            # int literals are fine floats.
            if FLOAT_PATTERN.fullmatch(text):
                return float(text)
        case ValueType.STRING:
            if _is_quoted(text):
                return _unescape(text[1:-1])
            if infer_type(text) is ValueType.STRING:
                return _unescape(text)
    raise ValueTypeMismatch(value_type, infer_type(text))


def encode_value(value: IniValue) -> str:
    match ValueType.of(value):
        case ValueType.BOOL:
            return TRUE_STRING if value else FALSE_STRING
        case ValueType.INT:
            return str(value)
        case ValueType.FLOAT:
            return repr(value)
        case ValueType.STRING:
            text = _escape(value)
            if (not text
                    or any(c.isspace() for c in text)
                    or infer_type(text) is not ValueType.STRING):
                return f'{QUOTE}{text}{QUOTE}'
            return text


def check_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise InvalidKeyError(f'key must be a non-empty string, got {key!r}')
    if any(c.isspace() for c in key):
        raise InvalidKeyError(f'key {key!r} contains whitespace')
    if (key[0] == START_SECTION
            or any(c in key for c in (SELECTOR, ESCAPE, *COMMENT_CHARS))):
        raise InvalidKeyError(f'key {key!r} contains a reserved character')


def check_comment(text: str) -> None:
    if not isinstance(text, str) or not text:
        raise InvalidCommentError(
            f'comment must be a non-empty string, got {text!r}')
    if text[0] not in COMMENT_CHARS:
        raise InvalidCommentError(
            f'comment {text!r} should start with one of {COMMENT_CHARS}')
    if _has_line_break(text):
        raise InvalidCommentError(f'comment {text!r} contains a line break')


def check_section_name(name: str) -> None:
    if not isinstance(name, str) or not name or name != name.strip():
        raise InvalidKeyError(f'invalid section name {name!r}')
    if (_has_line_break(name)
            or any(c in name for c in (START_SECTION, END_SECTION, ESCAPE))):
        raise InvalidKeyError(
            f'section name {name!r} contains a reserved character')


class IniLine:
    """A classified INI line.

    Don't build one directly; use `IniLine.parse()` for text,
    or the `key_value()`, `section()`, `comment()`, `empty()` factories.
    """
    def __init__(
        self, line_type: LineType, raw: str | None = None, *,
        key: str | None = None,
        value_type: ValueType | None = None,
        value: IniValue | None = None,
        inline_comment: str | None = None,
        section_header: str | None = None,
        reason: str | None = None
    ) -> None:
        self.__line_type = line_type
        self.__key = key
        self.__value_type = value_type
        self.__value = value
        self.__comment = inline_comment
        self.__header = section_header
        self._reason = reason  # why a line is INVALID
        self.__raw = self.canonical() if raw is None else raw

    @property
    def line_type(self) -> LineType:
        return self.__line_type

    @property
    def key(self) -> str | None:
        return self.__key

    @property
    def value_type(self) -> ValueType | None:
        return self.__value_type

    @property
    def value(self) -> IniValue | None:
        return self.__value

    @property
    def inline_comment(self) -> str | None:
        """The comment including its marker, or the whole line for
        fully commented ones."""
        return self.__comment

    @property
    def section_header(self) -> str | None:
        return self.__header

    @property
    def raw(self) -> str:
        """The text this line was parsed from,
        or the one rebuilt by its last change."""
        return self.__raw

    @property
    def is_valid(self) -> bool:
        return self.__line_type is not LineType.INVALID

    # -- factories --

    @classmethod
    def parse(
        cls, raw: str, value_type: type | ValueType | None = None, *,
        strict: bool = False
    ) -> 'IniLine':
        """Classify one physical line.

        Args:
            raw: The line, without its line feed.
            value_type: Decode a key-value line as this type
                instead of guessing it.
            strict: Raise instead of returning an `INVALID` line.

        Raises:
            MalformedLineError: `strict` and the line is invalid.
            ValueTypeMismatch: the value is no valid `value_type`.
        """
        if value_type is not None:
            value_type = ValueType.from_type(value_type)
        ret = cls.__classify(raw, value_type)
        if strict and not ret.is_valid:
            raise MalformedLineError(raw, ret._reason)
        return ret

    @classmethod
    def key_value(cls, key: str, value: IniValue,
                  comment: str | None = None) -> 'IniLine':
        check_key(key)
        vtype = ValueType.of(value)
        if comment is not None:
            check_comment(comment)
        return cls(LineType.KEY_VALUE, key=key, value_type=vtype,
                   value=value, inline_comment=comment)

    @classmethod
    def section(cls, name: str, comment: str | None = None) -> 'IniLine':
        check_section_name(name)
        if comment is not None:
            check_comment(comment)
        return cls(LineType.SECTION_HEADER,
                   section_header=name, inline_comment=comment)

    @classmethod
    def comment(cls, text: str) -> 'IniLine':
        check_comment(text)
        return cls(LineType.FULLY_COMMENTED, inline_comment=text)

    @classmethod
    def empty(cls) -> 'IniLine':
        return cls(LineType.EMPTY)

    # -- classification --

    @classmethod
    def __invalid(cls, raw: str, reason: str) -> 'IniLine':
        return cls(LineType.INVALID, raw, reason=reason)

    @classmethod
    def __classify(cls, raw: str,
                   value_type: ValueType | None) -> 'IniLine':
        text = raw.strip()
        if not text:
            return cls(LineType.EMPTY, raw)
        if text[0] in COMMENT_CHARS:
            if _has_line_break(text):
                return cls.__invalid(raw, 'comment contains a line break')
            return cls(LineType.FULLY_COMMENTED, raw, inline_comment=text)
        if text[0] == START_SECTION:
            return cls.__classify_header(raw, text)
        return cls.__classify_pair(raw, text, value_type)

    @classmethod
    def __classify_header(cls, raw: str, text: str) -> 'IniLine':
        end = _find_unescaped(text, END_SECTION, 1)
        if end == -1:
            return cls.__invalid(raw, 'unclosed section header')
        name = text[1:end].strip()
        rest = text[end + 1:].strip()
        if not name:
            return cls.__invalid(raw, 'empty section name')
        if START_SECTION in name or _has_line_break(name):
            return cls.__invalid(raw, 'malformed section name')
        if rest and rest[0] not in COMMENT_CHARS:
            return cls.__invalid(raw, 'unexpected text after section header')
        if _has_line_break(rest):
            return cls.__invalid(raw, 'comment contains a line break')
        return cls(LineType.SECTION_HEADER, raw,
                   section_header=name, inline_comment=rest or None)

    @classmethod
    def __classify_pair(cls, raw: str, text: str,
                        value_type: ValueType | None) -> 'IniLine':
        sep = _find_unescaped(text, SELECTOR)
        if sep == -1:
            return cls.__invalid(raw, f'missing "{SELECTOR}"')
        left, right = text[:sep].strip(), text[sep + 1:].strip()
        if not left or not right:
            return cls.__invalid(raw, 'empty key or value')
        try:
            check_key(left)
        except InvalidKeyError as e:
            return cls.__invalid(raw, str(e))

        mark = _find_unescaped(right, COMMENT_CHARS)
        if mark == -1:
            value_part, comment = right, None
        else:
            value_part, comment = right[:mark].rstrip(), right[mark:]
        if not value_part:
            return cls.__invalid(raw, 'empty value')
        if comment is not None and _has_line_break(comment):
            return cls.__invalid(raw, 'comment contains a line break')

        declared = value_type is not None
        if not declared:
            value_type = infer_type(value_part)
        try:
            value = decode_value(value_part, value_type)
        except ValueTypeMismatch as e:
            if not declared:
                return cls.__invalid(raw, str(e))
            raise ValueTypeMismatch(e.expected, e.found, left) from None
        return cls(LineType.KEY_VALUE, raw, key=left, value_type=value_type,
                   value=value, inline_comment=comment)

    # -- rendering & mutation --

    def canonical(self) -> str:
        """Rebuild the line from its fields."""
        match self.__line_type:
            case LineType.KEY_VALUE:
                text = f'{self.__key} {SELECTOR} {encode_value(self.__value)}'
            case LineType.SECTION_HEADER:
                text = f'{START_SECTION}{self.__header}{END_SECTION}'
            case LineType.FULLY_COMMENTED:
                return self.__comment
            case LineType.EMPTY:
                return ''
            case _:
                return self.__raw
        if self.__comment:
            text += f' {self.__comment}'
        return text

    def change_value(
        self, value: IniValue, *,
        keep_type: bool = True,
        comment: str | None = None,
        drop_comment: bool = False
    ) -> None:
        """Replace the value of a key-value line and rebuild `raw`.

        The inline comment is kept, unless a new `comment` is given
        or `drop_comment` is set (a new `comment` wins over dropping).

        Raises:
            InvalidOperationError: not a key-value line.
            ValueTypeMismatch: `keep_type` and `value` is of another type.
        """
        if self.__line_type is not LineType.KEY_VALUE:
            raise InvalidOperationError(
                f'cannot change the value of a {self.__line_type.name} line')
        vtype = ValueType.of(value)
        if keep_type and vtype is not self.__value_type:
            raise ValueTypeMismatch(self.__value_type, vtype, self.__key)
        if comment is not None:
            check_comment(comment)
            self.__comment = comment
        elif drop_comment:
            self.__comment = None
        self.__value_type = vtype
        self.__value = value
        self.__rebuild_raw()

    def rename_section(self, name: str) -> None:
        """Rename a section header line, keeping its inline comment.

        Raises:
            InvalidOperationError: not a section header line.
            InvalidKeyError: malformed name.
        """
        if self.__line_type is not LineType.SECTION_HEADER:
            raise InvalidOperationError(
                f'cannot rename a {self.__line_type.name} line')
        check_section_name(name)
        self.__header = name
        self.__rebuild_raw()

    def __rebuild_raw(self) -> None:
        # keep the CR of a CRLF file.
        eol = '\r' if self.__raw.endswith('\r') else ''
        self.__raw = self.canonical() + eol

    def __str__(self) -> str:
        return self.__raw

    def __repr__(self) -> str:
        return f'<IniLine {self.__line_type.name} {self.__raw!r}>'
