import pytest

import json_parser as jp
from json_value import String


def _parse_string(text):
    value = jp.parse(text)
    assert isinstance(value, String)
    return value.value


def test_short_escapes_decode():
    assert _parse_string(r'"\" \\ \/ \b \f \n \r \t"') == '" \\ / \b \f \n \r \t'


def test_unicode_escape_either_case():
    assert _parse_string(r'"\u00e9\u00C9\u4e16"') == "\u00e9\u00c9\u4e16"


def test_surrogate_pair_combines_to_one_scalar():
    assert jp.parse('"\\uD83D\\uDE02"') == String("\U0001F602")
    assert len(_parse_string('"\\uD83D\\uDE02"')) == 1


def test_raw_non_ascii_passes_through():
    assert _parse_string('"héllo \U0001F602 世界"') == "héllo \U0001F602 世界"


def test_invalid_hex_escape_reports_offset():
    bad = '["\\u123g"]'
    with pytest.raises(jp.ParseError) as ei:
        jp.parse(bad)
    msg = str(ei.value)
    assert "invalid hex digit 'g'" in msg
    assert ei.value.kind is jp.ErrorKind.MALFORMED_STRING
    assert ei.value.position == 7


def test_short_unicode_escape_hits_closing_quote():
    bad = '["\\u12"]'
    with pytest.raises(jp.ParseError) as ei:
        jp.parse(bad)
    assert "invalid hex digit" in str(ei.value)


def test_unicode_escape_cut_off_by_end_of_input():
    with pytest.raises(jp.ParseError) as ei:
        jp.parse('"\\u12')
    assert "unterminated unicode escape" in str(ei.value)


def test_invalid_single_escape_reports_offset():
    bad = '["\\q"]'
    with pytest.raises(jp.ParseError) as ei:
        jp.parse(bad)
    assert "invalid escape \\q" in str(ei.value)
    assert "at offset 2" in str(ei.value)


@pytest.mark.parametrize("bad", [
    '"\\uD800"',
    '"\\uD800x"',
    '"\\uD800\\n"',
])
def test_unpaired_high_surrogate_detected(bad):
    with pytest.raises(jp.ParseError) as ei:
        jp.parse(bad)
    assert "unpaired high surrogate" in str(ei.value)


def test_unpaired_low_surrogate_detected():
    with pytest.raises(jp.ParseError) as ei:
        jp.parse('"\\uDE02"')
    assert "unpaired low surrogate" in str(ei.value)


def test_high_surrogate_followed_by_non_low_unit():
    with pytest.raises(jp.ParseError) as ei:
        jp.parse('"\\uD83D\\u0041"')
    assert "invalid surrogate pair" in str(ei.value)


def test_unterminated_string():
    with pytest.raises(jp.ParseError) as ei:
        jp.parse('"abc')
    assert "unterminated string starting at offset 0" in str(ei.value)


def test_trailing_backslash_is_unterminated():
    with pytest.raises(jp.ParseError) as ei:
        jp.parse('"abc\\')
    assert "unterminated string" in str(ei.value)


def test_raw_control_character_rejected():
    with pytest.raises(jp.ParseError) as ei:
        jp.parse('"tab\there"')
    assert "unescaped control character U+0009" in str(ei.value)
