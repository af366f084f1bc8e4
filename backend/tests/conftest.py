"""Shared test fixtures: a small in-memory dictionary and the services built on it."""

import pytest
from fastapi.testclient import TestClient

from app.services.dictionary_store import DictionaryStore
from app.services.result_cache import ResultCache
from app.services.search_service import SearchService, get_search_service
from app.services.tag_service import TagResolver
from app.utils.domain import Entry, FuriganaEntry

# tag_bank rows: [name, category, order, notes, score]
TAG_ROWS = [
    ["noun", "partOfSpeech", 0, "noun (common) (futsuumeishi)", 0],
    ["verb", "partOfSpeech", 0, "Godan verb with 'ru' ending", 0],
    ["P", "popular", -10, "popular term", 10],
    ["uk", "misc", 0, "word usually written using kana alone", 0],
]


def _entries():
    return [
        Entry("猫", "ねこ", ("noun",), ("P",), 100, ("cat",), 1),
        Entry("犬", "いぬ", ("noun",), ("P",), 90, ("dog",), 2),
        Entry("走る", "はしる", ("verb",), (), 70, ("to run", "to dash"), 3, "v5"),
        Entry("猫", "ねこ", ("noun",), (), 40, ("shamisen",), 1),
        Entry("猫", "びょう", ("noun",), (), 10, ("cat (literary)",), 4),
        Entry("猫背", "ねこぜ", ("noun",), (), None, ("stooped posture",), 5),
    ]


def _furigana():
    return [
        FuriganaEntry("猫", "びょう", ({"ruby": "猫", "rt": "びょう"},)),
        FuriganaEntry("猫", "ねこ", ({"ruby": "猫", "rt": "ねこ"},)),
        FuriganaEntry("走る", "はしる", ({"ruby": "走", "rt": "はし"}, {"ruby": "る"})),
    ]


@pytest.fixture
def tag_resolver():
    return TagResolver.from_bank_rows(TAG_ROWS)


@pytest.fixture
def store():
    return DictionaryStore(_entries(), _furigana())


@pytest.fixture
def search_service(store, tag_resolver):
    return SearchService(store, tag_resolver, cache=ResultCache(max_entries=0))


@pytest.fixture
def client(search_service):
    """TestClient without lifespan: the service is injected through dependency overrides."""
    from main import app

    app.dependency_overrides[get_search_service] = lambda: search_service
    yield TestClient(app)
    app.dependency_overrides.clear()
