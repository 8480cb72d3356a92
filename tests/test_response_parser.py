import json

import pytest

from outreach_assistant.errors import ParseError
from outreach_assistant.generator.response_parser import ResponseParser, strip_code_fences
from outreach_assistant.models.message import VariantTag


@pytest.fixture
def parser():
    return ResponseParser()


def test_parses_four_variants(parser, four_variants_json):
    result = parser.parse(four_variants_json)

    assert [v.variant for v in result.variants] == [
        VariantTag.DIRECT,
        VariantTag.VALUE,
        VariantTag.CURIOSITY,
        VariantTag.RELATIONSHIP,
    ]
    assert result.variants[0].match_reason == "Clear ask"
    assert result.dropped_count == 0


@pytest.mark.parametrize(
    "wrapper",
    [
        "```json\n{}\n```",
        "```\n{}\n```",
        "```JSON{}```",
        "  \n```json\n{}```  ",
    ],
)
def test_code_fences_are_stripped(parser, four_variants_json, wrapper):
    fenced = parser.parse(wrapper.replace("{}", four_variants_json))

    assert fenced == parser.parse(four_variants_json)


def test_strip_code_fences_is_idempotent(four_variants_json):
    once = strip_code_fences(f"```json\n{four_variants_json}\n```")

    assert strip_code_fences(once) == once == four_variants_json


def test_does_not_assume_four_entries(parser):
    result = parser.parse('[{"variant": "value", "content": "One good idea"}]')

    assert len(result.variants) == 1
    assert result.variants[0].variant == VariantTag.VALUE
    assert result.variants[0].match_reason is None


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "   ",
        "Here you go!",
        '[{"variant": "direct", "content": "cut off',
        "```json\n```",
    ],
)
def test_unparsable_output_fails_closed(parser, raw):
    with pytest.raises(ParseError):
        parser.parse(raw)


def test_non_array_output_fails(parser):
    with pytest.raises(ParseError):
        parser.parse('{"variant": "direct", "content": "Hi"}')


def test_empty_array_fails(parser):
    with pytest.raises(ParseError):
        parser.parse("[]")


def test_all_entries_invalid_fails(parser):
    with pytest.raises(ParseError, match="2 dropped"):
        parser.parse('[{"variant": "direct", "content": ""}, {"variant": "pushy", "content": "Buy now"}]')


def test_malformed_entries_are_dropped_and_counted(parser):
    raw = json.dumps([
        {"variant": "direct", "content": "Quick ask"},
        {"variant": "aggressive", "content": "Unknown tag"},
        {"variant": "value"},
        {"content": "No tag"},
        {"variant": "curiosity", "content": 42},
        ["not", "an", "object"],
        {"variant": " Relationship ", "content": "  Warm intro  ", "match_reason": "Shared investor"},
    ])

    result = parser.parse(raw)

    assert [v.variant for v in result.variants] == [VariantTag.DIRECT, VariantTag.RELATIONSHIP]
    assert result.variants[1].content == "Warm intro"
    assert result.variants[1].match_reason == "Shared investor"
    assert result.dropped_count == 5


def test_parse_error_keeps_raw_output(parser):
    with pytest.raises(ParseError) as exc_info:
        parser.parse("not json")

    assert exc_info.value.raw_output == "not json"


def test_backticks_inside_content_are_preserved(parser):
    raw = json.dumps([{"variant": "direct", "content": "Run ```Hello world``` today"}])

    for wrapped in (raw, f"```json\n{raw}\n```"):
        result = parser.parse(wrapped)
        assert result.variants[0].content == "Run ```Hello world``` today"


def test_only_outer_fences_are_stripped():
    assert strip_code_fences("```json\n[\"a ```b``` c\"]\n```") == '["a ```b``` c"]'
