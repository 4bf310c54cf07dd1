"""Tests for single line classification, encoding and mutation."""
import pytest

from pyechocap.ini import (
    IniLine,
    InvalidCommentError,
    InvalidKeyError,
    InvalidOperationError,
    LineType,
    MalformedLineError,
    ValueType,
    ValueTypeMismatch,
    split_lines,
)
from pyechocap.ini.line import decode_value, encode_value, infer_type


class TestClassification:

    def test_key_value_int(self):
        line = IniLine.parse('imageQuality = 100')
        assert line.line_type is LineType.KEY_VALUE
        assert line.key == 'imageQuality'
        assert line.value_type is ValueType.INT
        assert line.value == 100
        assert line.inline_comment is None
        assert line.raw == 'imageQuality = 100'

    def test_key_value_float_with_comment(self):
        line = IniLine.parse('ratio = 1.5 ; half')
        assert line.value_type is ValueType.FLOAT
        assert line.value == 1.5
        assert line.inline_comment == '; half'

    def test_bool_needs_canonical_literal(self):
        assert IniLine.parse('enabled = True').value is True
        assert IniLine.parse('enabled = False').value is False
        lower = IniLine.parse('enabled = true')
        assert lower.value_type is ValueType.STRING
        assert lower.value == 'true'

    def test_quoted_string(self):
        line = IniLine.parse('name = "My Value"')
        assert line.value_type is ValueType.STRING
        assert line.value == 'My Value'

    def test_fully_commented(self):
        line = IniLine.parse('; build settings')
        assert line.line_type is LineType.FULLY_COMMENTED
        assert line.inline_comment == '; build settings'
        assert line.canonical() == '; build settings'

    def test_comment_line_may_contain_selector(self):
        line = IniLine.parse('# old = value')
        assert line.line_type is LineType.FULLY_COMMENTED
        assert line.key is None

    def test_indented_comment_keeps_raw(self):
        line = IniLine.parse('   # indented')
        assert line.inline_comment == '# indented'
        assert line.raw == '   # indented'

    def test_section_header(self):
        line = IniLine.parse('[high] ; best quality')
        assert line.line_type is LineType.SECTION_HEADER
        assert line.section_header == 'high'
        assert line.inline_comment == '; best quality'

    def test_blank_line(self):
        line = IniLine.parse('  \t')
        assert line.line_type is LineType.EMPTY
        assert line.canonical() == ''
        assert line.raw == '  \t'

    @pytest.mark.parametrize('raw', [
        'just text',
        'key =',
        '= value',
        'my key = 1',
        'key = ; only a comment',
        '[high',
        '[]',
        '[high] trailing junk',
        '[a[b]]',
    ])
    def test_invalid_lines(self, raw):
        line = IniLine.parse(raw)
        assert line.line_type is LineType.INVALID
        assert not line.is_valid
        assert line.raw == raw

    def test_strict_raises_on_invalid(self):
        with pytest.raises(MalformedLineError) as info:
            IniLine.parse('just text', strict=True)
        assert info.value.line == 'just text'


class TestCommentMarkers:

    def test_unescaped_marker_starts_comment(self):
        line = IniLine.parse('path = abc;def')
        assert line.value == 'abc'
        assert line.inline_comment == ';def'

    def test_escaped_marker_is_literal(self):
        line = IniLine.parse(r'path = abc\;def\#ghi')
        assert line.value == 'abc;def#ghi'
        assert line.inline_comment is None

    def test_alternate_marker(self):
        line = IniLine.parse('quality = 5 # low')
        assert line.value == 5
        assert line.inline_comment == '# low'


class TestDeclaredType:

    def test_mismatch_carries_expected_type(self):
        with pytest.raises(ValueTypeMismatch) as info:
            IniLine.parse('imageQuality = abc', int)
        assert info.value.expected is ValueType.INT
        assert info.value.found is ValueType.STRING
        assert info.value.key == 'imageQuality'

    def test_string_rejects_unquoted_literals(self):
        # a bare literal of another type is not a valid string.
        with pytest.raises(ValueTypeMismatch) as info:
            IniLine.parse('name = 100', str)
        assert info.value.found is ValueType.INT
        with pytest.raises(ValueTypeMismatch):
            IniLine.parse('name = True', ValueType.STRING)

    def test_string_accepts_quoted_literals(self):
        assert IniLine.parse('name = "100"', str).value == '100'

    def test_float_accepts_int_literal(self):
        line = IniLine.parse('scale = 100', float)
        assert line.value_type is ValueType.FLOAT
        assert line.value == 100.0

    def test_unsupported_declared_type(self):
        with pytest.raises(TypeError):
            IniLine.parse('a = 1', list)


class TestEncoding:

    @pytest.mark.parametrize('value, text', [
        (True, 'True'),
        (False, 'False'),
        (-42, '-42'),
        (1.5, '1.5'),
        (1e20, '1e+20'),
        ('plain', 'plain'),
        ('My Value', '"My Value"'),
        ('say "hi"', r'"say \"hi\""'),
        ('a"b', r'a\"b'),
        ('tab\there', r'tab\there'),
        ('multi\nline', r'multi\nline'),
        ('a;b#c', r'a\;b\#c'),
        ('C:\\dir', r'C:\\dir'),
        ('100', '"100"'),
        ('True', '"True"'),
        ('', '""'),
    ])
    def test_encode(self, value, text):
        assert encode_value(value) == text

    def test_encode_rejects_other_types(self):
        with pytest.raises(TypeError):
            encode_value(None)
        with pytest.raises(TypeError):
            encode_value([1])

    def test_quote_round_trip(self):
        line = IniLine.key_value('title', 'say "hi"')
        assert line.raw == r'title = "say \"hi\""'
        assert IniLine.parse(line.raw).value == 'say "hi"'

    def test_infer_order(self):
        assert infer_type('True') is ValueType.BOOL
        assert infer_type('12') is ValueType.INT
        assert infer_type('+12') is ValueType.INT
        assert infer_type('1.') is ValueType.FLOAT
        assert infer_type('.5') is ValueType.FLOAT
        assert infer_type('1.2.3') is ValueType.STRING
        assert infer_type('"12"') is ValueType.STRING

    def test_decode_escaped_closing_quote(self):
        # the last quote is escaped, so the value isn't quoted at all.
        assert infer_type(r'"abc\"') is ValueType.STRING
        assert decode_value(r'"abc\"', ValueType.STRING) == '"abc"'

    def test_unknown_escape_is_kept(self):
        assert decode_value(r'a\qb', ValueType.STRING) == r'a\qb'

    def test_only_ascii_digits_are_numbers(self):
        assert infer_type('١٢٣') is ValueType.STRING
        assert infer_type('1.٥') is ValueType.STRING
        line = IniLine.parse('count = ١٢٣')
        assert line.value_type is ValueType.STRING
        assert line.value == '١٢٣'
        with pytest.raises(ValueTypeMismatch):
            IniLine.parse('count = ١٢٣', int)


class TestOverlongInteger:

    TEXT = '9' * 5000

    def test_decode(self):
        with pytest.raises(ValueTypeMismatch) as info:
            decode_value(self.TEXT, ValueType.INT)
        assert info.value.expected is ValueType.INT
        assert info.value.found is None

    def test_inferred_is_invalid(self):
        line = IniLine.parse(f'k = {self.TEXT}')
        assert line.line_type is LineType.INVALID
        with pytest.raises(MalformedLineError):
            IniLine.parse(f'k = {self.TEXT}', strict=True)

    def test_declared_is_mismatch(self):
        with pytest.raises(ValueTypeMismatch) as info:
            IniLine.parse(f'k = {self.TEXT}', int)
        assert info.value.key == 'k'


class TestFactories:

    def test_key_value(self):
        line = IniLine.key_value('name', 'My Value', '; shown')
        assert line.raw == 'name = "My Value" ; shown'
        assert line.raw == line.canonical()

    @pytest.mark.parametrize('key', ['', 'my key', 'a=b', '[a', 'a;b', 'a\\b'])
    def test_invalid_keys(self, key):
        with pytest.raises(InvalidKeyError):
            IniLine.key_value(key, 1)

    @pytest.mark.parametrize('comment', ['no marker', '', '; a\nb'])
    def test_invalid_comments(self, comment):
        with pytest.raises(InvalidCommentError):
            IniLine.key_value('k', 1, comment)

    def test_section(self):
        assert IniLine.section('high', '# best').raw == '[high] # best'
        with pytest.raises(InvalidKeyError):
            IniLine.section('a]b')
        with pytest.raises(InvalidKeyError):
            IniLine.section(' padded')

    def test_comment_and_empty(self):
        assert IniLine.comment('; note').raw == '; note'
        assert IniLine.empty().raw == ''
        with pytest.raises(InvalidCommentError):
            IniLine.comment('note')


class TestChangeValue:

    @pytest.fixture
    def line(self):
        return IniLine.parse('imageQuality = 100  ; percent')

    def test_keeps_comment(self, line):
        line.change_value(70)
        assert line.value == 70
        assert line.raw == 'imageQuality = 70 ; percent'

    def test_replace_and_drop_comment(self, line):
        line.change_value(70, comment='# new')
        assert line.raw == 'imageQuality = 70 # new'
        line.change_value(60, drop_comment=True)
        assert line.raw == 'imageQuality = 60'
        assert line.inline_comment is None

    def test_type_is_kept(self, line):
        with pytest.raises(ValueTypeMismatch) as info:
            line.change_value(70.5)
        assert info.value.expected is ValueType.INT
        assert info.value.found is ValueType.FLOAT
        # untouched
        assert line.raw == 'imageQuality = 100  ; percent'
        assert line.value == 100

    def test_ignoring_type(self, line):
        line.change_value('best', keep_type=False)
        assert line.value_type is ValueType.STRING
        assert line.raw == 'imageQuality = best ; percent'

    def test_bad_comment_leaves_line_untouched(self, line):
        with pytest.raises(InvalidCommentError):
            line.change_value(1, comment='oops')
        assert line.value == 100

    def test_only_key_values(self):
        with pytest.raises(InvalidOperationError):
            IniLine.parse('; comment').change_value(1)

    def test_keeps_carriage_return(self):
        line = IniLine.parse('a = 1 ; c\r')
        line.change_value(2)
        assert line.raw == 'a = 2 ; c\r'


class TestRenameSection:

    def test_keeps_comment_and_carriage_return(self):
        line = IniLine.parse('[old]  ; note\r')
        line.rename_section('new')
        assert line.section_header == 'new'
        assert line.raw == '[new] ; note\r'

    def test_checks(self):
        line = IniLine.parse('[old]')
        with pytest.raises(InvalidKeyError):
            line.rename_section('a]b')
        assert line.raw == '[old]'
        with pytest.raises(InvalidOperationError):
            IniLine.parse('a = 1').rename_section('new')


class TestSplitLines:

    def test_plain(self):
        assert split_lines('a\nb') == ['a', 'b']
        assert split_lines('a\n') == ['a', '']
        assert split_lines('') == ['']

    def test_crlf_keeps_carriage_return(self):
        assert split_lines('a\r\nb') == ['a\r', 'b']

    def test_escaped_line_feed_continues(self):
        text = 'k = one\\\ntwo\nx = 1'
        assert split_lines(text) == ['k = one\\\ntwo', 'x = 1']
        assert IniLine.parse(split_lines(text)[0]).value == 'one\ntwo'

    def test_comment_ending_with_backslash(self):
        assert split_lines('; saved to D:\\shots\\\na = 1') == [
            '; saved to D:\\shots\\', 'a = 1']
        assert split_lines('a = 1 ; C:\\\nb = 2') == [
            'a = 1 ; C:\\', 'b = 2']
        assert split_lines('[s] # x\\\nb = 2') == ['[s] # x\\', 'b = 2']

    def test_escaped_marker_keeps_continuation(self):
        text = 'k = a\\;b\\\nc'
        assert split_lines(text) == [text]

    @pytest.mark.parametrize('text', [
        '', '\n', 'a\n\nb', 'a\\\\\nb', 'x = 1\r\n[s]\r\n',
        '; c\\\nk = v\\\nw ; d\\\n',
    ])
    def test_join_restores_text(self, text):
        assert '\n'.join(split_lines(text)) == text
