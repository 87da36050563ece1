from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from pasteur import (
    CacheMetadata,
    EntityList,
    MalformedTimestamp,
    aggregate,
    aggregate_key,
    aggregate_last_modified,
    collect_metadata,
    describe_entity,
)
from tests.conftest import T1, T2, T3, Article, KeyOnly, Opaque, TimeOnly


class TestDescribeEntity:
    def test_both_validators(self) -> None:
        article = Article(id=1, title="First", key="a", updated_at=T1)

        assert describe_entity(article) == CacheMetadata(cache_key="a", last_modified=T1)

    def test_methods_are_independent(self) -> None:
        assert describe_entity(KeyOnly("a")) == CacheMetadata(cache_key="a")
        assert describe_entity(TimeOnly(T1)) == CacheMetadata(last_modified=T1)

    def test_no_capabilities(self) -> None:
        assert describe_entity(Opaque()) == CacheMetadata()
        assert describe_entity(None) == CacheMetadata()
        assert describe_entity({"cache_key": "a"}) == CacheMetadata()

    def test_metadata_passes_through(self) -> None:
        metadata = CacheMetadata(cache_key="a", last_modified=T1)

        assert describe_entity(metadata) is metadata

    def test_attribute_that_is_not_callable_is_ignored(self) -> None:
        class Record:
            cache_key = "a"

        assert describe_entity(Record()) == CacheMetadata()


class TestAggregateKey:
    def test_keys_are_joined_in_order(self) -> None:
        assert aggregate_key([KeyOnly("a"), KeyOnly("b"), KeyOnly("c")]) == "a-b-c"

    def test_single_entity(self) -> None:
        assert aggregate_key([KeyOnly("a")]) == "a"

    def test_empty_sequence(self) -> None:
        assert aggregate_key([]) is None

    def test_absent_keys_are_skipped(self) -> None:
        entities = [KeyOnly(None), KeyOnly("a"), Opaque(), TimeOnly(T1), KeyOnly("b")]

        assert aggregate_key(entities) == "a-b"

    def test_all_keys_absent(self) -> None:
        assert aggregate_key([KeyOnly(None), Opaque(), TimeOnly(T1)]) is None

    def test_empty_string_is_a_key(self) -> None:
        assert aggregate_key([KeyOnly(""), KeyOnly("a")]) == "-a"

    def test_custom_separator(self) -> None:
        assert aggregate_key([KeyOnly("a"), KeyOnly("b")], separator=":") == "a:b"

    def test_custom_describe(self) -> None:
        def describe(entity: dict) -> CacheMetadata:
            return CacheMetadata(cache_key=entity.get("version"))

        assert aggregate_key([{"version": "1"}, {}, {"version": "3"}], describe=describe) == "1-3"

    def test_accepts_any_iterable(self) -> None:
        assert aggregate_key(KeyOnly(key) for key in "abc") == "a-b-c"

    @pytest.mark.parametrize("permutation", list(itertools.permutations(["a", "b", "c"]))[1:])
    def test_reordering_changes_the_key(self, permutation: tuple[str, ...]) -> None:
        original = aggregate_key([KeyOnly("a"), KeyOnly("b"), KeyOnly("c")])

        assert aggregate_key([KeyOnly(key) for key in permutation]) != original

    def test_reordering_identical_keys_is_stable(self) -> None:
        assert aggregate_key([KeyOnly("a"), Opaque(), KeyOnly("a")]) == aggregate_key(
            [Opaque(), KeyOnly("a"), KeyOnly("a")]
        )


class TestAggregateLastModified:
    def test_maximum_is_returned(self) -> None:
        assert aggregate_last_modified([TimeOnly(T2), TimeOnly(T3), TimeOnly(T1)]) == T3

    def test_absent_times_are_skipped(self) -> None:
        entities = [TimeOnly(T1), TimeOnly(None), KeyOnly("a"), Opaque(), TimeOnly(T2)]

        assert aggregate_last_modified(entities) == T2

    def test_empty_sequence(self) -> None:
        assert aggregate_last_modified([]) is None

    def test_all_times_absent(self) -> None:
        assert aggregate_last_modified([TimeOnly(None), KeyOnly("a")]) is None

    def test_naive_and_aware_are_comparable(self) -> None:
        naive = datetime(2024, 1, 4, 12, 0, 0)

        assert aggregate_last_modified([TimeOnly(T1), TimeOnly(naive)]) == naive.replace(tzinfo=timezone.utc)

    def test_result_is_utc(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        moment = datetime(2024, 1, 1, 14, 0, 0, tzinfo=plus_two)

        result = aggregate_last_modified([TimeOnly(moment)])

        assert result == T1
        assert result is not None and result.tzinfo == timezone.utc

    def test_http_date_strings_are_accepted(self) -> None:
        metadata = CacheMetadata(last_modified="Wed, 03 Jan 2024 12:00:00 GMT")  # type: ignore[arg-type]

        assert aggregate_last_modified([TimeOnly(T1), metadata]) == T3

    def test_unparseable_value_raises(self) -> None:
        metadata = CacheMetadata(last_modified="soon")  # type: ignore[arg-type]

        with pytest.raises(MalformedTimestamp):
            aggregate_last_modified([metadata])


class TestAggregate:
    def test_three_entities(self, articles: list[Article]) -> None:
        assert aggregate(articles) == CacheMetadata(cache_key="a-b-c", last_modified=T3)

    def test_empty_sequence(self) -> None:
        metadata = aggregate([])

        assert metadata == CacheMetadata()
        assert metadata.is_empty

    def test_heterogeneous_collection(self) -> None:
        entities = [KeyOnly("a"), TimeOnly(T2), Opaque(), Article(id=1, title="x", key="b", updated_at=T1)]

        assert aggregate(entities) == CacheMetadata(cache_key="a-b", last_modified=T2)

    def test_entities_are_not_mutated(self, articles: list[Article]) -> None:
        before = [(article.key, article.updated_at) for article in articles]

        aggregate(articles)
        aggregate(articles)

        assert [(article.key, article.updated_at) for article in articles] == before

    def test_each_entity_is_described_once(self) -> None:
        calls = []

        def describe(entity: str) -> CacheMetadata:
            calls.append(entity)
            return CacheMetadata(cache_key=entity)

        aggregate(["a", "b"], describe=describe)

        assert calls == ["a", "b"]


class TestEntityList:
    def test_is_a_sequence(self, articles: list[Article]) -> None:
        entity_list = EntityList(articles)

        assert len(entity_list) == 3
        assert entity_list[0] is articles[0]
        assert list(entity_list) == articles

    def test_exposes_aggregated_validators(self, articles: list[Article]) -> None:
        entity_list = EntityList(articles)

        assert entity_list.cache_key() == "a-b-c"
        assert entity_list.last_modified() == T3

    def test_empty_list(self) -> None:
        entity_list = EntityList([])

        assert entity_list.cache_key() is None
        assert entity_list.last_modified() is None

    def test_nested_lists(self) -> None:
        inner = EntityList([KeyOnly("b"), KeyOnly("c")])

        assert aggregate_key([KeyOnly("a"), inner, KeyOnly("d")]) == "a-b-c-d"

    def test_nested_lists_follow_the_outer_separator(self) -> None:
        inner = EntityList([KeyOnly("a"), KeyOnly("b")])

        assert aggregate_key([inner, KeyOnly("c")], separator="|") == "a|b|c"
        assert inner.cache_key() == "a-b"

    def test_nested_lists_follow_the_outer_describe(self) -> None:
        def describe(entity: dict) -> CacheMetadata:
            return CacheMetadata(cache_key=entity["version"], last_modified=entity.get("at"))

        inner = EntityList([{"version": "1", "at": T1}, {"version": "2", "at": T2}])

        assert aggregate([inner, {"version": "3"}], describe=describe) == CacheMetadata(
            cache_key="1-2-3", last_modified=T2
        )

    def test_copies_the_input(self) -> None:
        entities = [KeyOnly("a")]
        entity_list = EntityList(entities)
        entities.append(KeyOnly("b"))

        assert entity_list.cache_key() == "a"


class TestCollectMetadata:
    def test_single_entity(self) -> None:
        article = Article(id=1, title="First", key="a", updated_at=T1)

        assert collect_metadata(article) == CacheMetadata(cache_key="a", last_modified=T1)

    def test_list(self, articles: list[Article]) -> None:
        assert collect_metadata(articles) == CacheMetadata(cache_key="a-b-c", last_modified=T3)

    def test_tuple(self, articles: list[Article]) -> None:
        assert collect_metadata(tuple(articles)) == CacheMetadata(cache_key="a-b-c", last_modified=T3)

    def test_entity_list(self, articles: list[Article]) -> None:
        assert collect_metadata(EntityList(articles)) == CacheMetadata(cache_key="a-b-c", last_modified=T3)

    def test_entity_without_validators(self) -> None:
        assert collect_metadata(Opaque()) == CacheMetadata()

    def test_mapping_is_a_single_entity(self) -> None:
        assert collect_metadata({"a": 1}) == CacheMetadata()
