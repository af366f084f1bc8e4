"""Tests for entry selection and frequency ordering."""

import pytest

from app.enums import SearchMode
from app.services.dictionary_store import DictionaryStore
from app.services.matcher import Matcher
from app.utils.domain import Entry, ParsedQuery
from app.utils.query_parser import parse_query


@pytest.fixture
def matcher(tag_resolver):
    return Matcher(tag_resolver)


def _keys(entries):
    return [(e.term, e.reading, e.frequency_rank) for e in entries]


# ── Term modes ──────────────────────


def test_exact_matches_term_or_reading(matcher, store):
    by_term = matcher.match(store, parse_query("犬", "exact"))
    by_reading = matcher.match(store, parse_query("いぬ", "exact"))
    assert _keys(by_term) == [("犬", "いぬ", 90)]
    assert by_reading == by_term


def test_exact_on_every_entry_term_finds_that_entry(matcher, store):
    for entry in store:
        assert entry in matcher.match(store, parse_query(entry.term, "exact"))


def test_any_is_substring_and_sorted_by_frequency_desc(matcher, store):
    result = matcher.match(store, parse_query("猫", "any"))
    assert _keys(result) == [
        ("猫", "ねこ", 100),
        ("猫", "ねこ", 40),
        ("猫", "びょう", 10),
        ("猫背", "ねこぜ", None),
    ]


def test_any_matches_reading_substring(matcher, store):
    result = matcher.match(store, parse_query("しる", "any"))
    assert _keys(result) == [("走る", "はしる", 70)]


def test_both_requires_term_and_reading(matcher, store):
    result = matcher.match(store, parse_query("猫,ねこ", "both"))
    assert _keys(result) == [("猫", "ねこ", 100), ("猫", "ねこ", 40)]


@pytest.mark.parametrize("query", ["猫", "猫,ねこ,x", "ねこ,猫"])
def test_both_with_malformed_or_swapped_input_matches_nothing(matcher, store, query):
    assert matcher.match(store, parse_query(query, "both")) == []


def test_en_exact_is_case_insensitive_whole_meaning(matcher, store):
    result = matcher.match(store, parse_query("CAT", "en_exact"))
    assert _keys(result) == [("猫", "ねこ", 100)]


def test_en_any_is_case_insensitive_substring(matcher, store):
    result = matcher.match(store, parse_query("Cat", "en_any"))
    assert _keys(result) == [("猫", "ねこ", 100), ("猫", "びょう", 10)]


def test_term_comparison_is_case_sensitive(tag_resolver):
    store = DictionaryStore([Entry("ABC", "えーびーしー", meanings=("abc",))])
    matcher = Matcher(tag_resolver)
    assert matcher.match(store, parse_query("abc", "any")) == []
    assert len(matcher.match(store, parse_query("abc", "en_any"))) == 1


@pytest.mark.parametrize("mode", [None, "", "fuzzy"])
def test_missing_or_unknown_mode_matches_no_terms(matcher, store, mode):
    assert matcher.match(store, parse_query("猫", mode)) == []


# ── Frequency ──────────────────────


def test_frequency_only_uses_exact_equality(matcher, store):
    assert _keys(matcher.match(store, parse_query("#frq90"))) == [("犬", "いぬ", 90)]
    assert matcher.match(store, parse_query("#frq12")) == []


def test_term_with_frequency_filter(matcher, store):
    result = matcher.match(store, parse_query("猫 #frq40", "any"))
    assert _keys(result) == [("猫", "ねこ", 40)]


# ── Tags ──────────────────────


def test_tag_only_matches_part_of_speech_tags(matcher, store):
    result = matcher.match(store, parse_query("#verb"))
    assert _keys(result) == [("走る", "はしる", 70)]


def test_tag_only_matches_extra_tags(matcher, store):
    result = matcher.match(store, parse_query("#P"))
    assert _keys(result) == [("猫", "ねこ", 100), ("犬", "いぬ", 90)]


def test_tag_only_ignores_mode(matcher, store):
    assert matcher.match(store, parse_query("#verb", None)) == matcher.match(store, parse_query("#verb", "exact"))


def test_wildcard_tag_selects_all_entries(matcher, store):
    assert len(matcher.match(store, parse_query("#"))) == len(store)


def test_unknown_tag_only_is_empty(matcher, store):
    assert matcher.match(store, parse_query("#nope")) == []


def test_term_with_tag_filter(matcher, store):
    assert _keys(matcher.match(store, parse_query("犬 #noun", "exact"))) == [("犬", "いぬ", 90)]
    assert matcher.match(store, parse_query("犬 #verb", "exact")) == []


def test_term_with_tag_filter_on_verb_only_entry(tag_resolver):
    store = DictionaryStore([Entry("犬", "いぬ", ("verb",), (), 1, ("dog",))])
    assert Matcher(tag_resolver).match(store, parse_query("犬 #noun", "exact")) == []


@pytest.mark.parametrize("mode", [m.value for m in SearchMode] + [None, "fuzzy"])
@pytest.mark.parametrize("term", ["猫", "ねこ", "猫,ねこ", "cat", ""])
def test_unknown_tag_filter_is_always_empty(matcher, store, mode, term):
    query = ParsedQuery(search_term=term, tag_filter="does-not-exist", mode=SearchMode.from_param(mode))
    assert matcher.match(store, query) == []


def test_tag_filter_requires_tag_to_be_known_even_if_entry_has_it(matcher):
    store = DictionaryStore([Entry("猫", "ねこ", ("unlisted",), (), 1, ("cat",))])
    assert matcher.match(store, parse_query("#unlisted")) == []


# ── Ordering ──────────────────────


def test_frequency_ties_keep_store_order(matcher):
    store = DictionaryStore([
        Entry("一", "いち", frequency_rank=5, meanings=("one",)),
        Entry("二", "に", frequency_rank=9, meanings=("two",)),
        Entry("三", "さん", frequency_rank=5, meanings=("three",)),
        Entry("四", "よん", frequency_rank=None, meanings=("four",)),
        Entry("五", "ご", frequency_rank=-3, meanings=("five",)),
    ])
    result = matcher.match(store, parse_query("#"))
    assert [e.term for e in result] == ["二", "一", "三", "五", "四"]
