"""Tests for the deprecated class cache."""

from collections.abc import Callable
from pathlib import Path

import pytest
import structlog
from structlog.testing import capture_logs

from deprecheck.cache import DeprecatedClassCache
from deprecheck.types import (
    CacheUpdateEvent,
    DeprecatedClass,
    FileChangeEvent,
    FileChangeType,
)

Make = Callable[..., DeprecatedClass]


class FakeParser:
    """Stands in for reading stylesheets from disk."""

    def __init__(self) -> None:
        self.files: dict[str, list[DeprecatedClass]] = {}
        self.calls: list[str] = []

    def __call__(self, path: str) -> list[DeprecatedClass]:
        self.calls.append(path)
        return list(self.files.get(path, []))


@pytest.fixture
def parser() -> FakeParser:
    return FakeParser()


@pytest.fixture
def cache(parser: FakeParser) -> DeprecatedClassCache:
    return DeprecatedClassCache(parse_file=parser)


@pytest.fixture
def events(cache: DeprecatedClassCache) -> list[CacheUpdateEvent]:
    received: list[CacheUpdateEvent] = []
    cache.on_update(received.append)
    return received


class TestReads:
    def test_given_new_cache_then_empty(self, cache: DeprecatedClassCache) -> None:
        assert cache.size == 0
        assert len(cache) == 0
        assert dict(cache.get_classes()) == {}
        assert cache.get("x") is None
        assert not cache.has("x")

    def test_snapshot_is_read_only(self, cache: DeprecatedClassCache, make_deprecated: Make) -> None:
        cache.add([make_deprecated("old")])
        snapshot = cache.get_classes()
        with pytest.raises(TypeError):
            snapshot["new"] = make_deprecated("new")  # type: ignore[index]

    def test_snapshot_is_point_in_time(self, cache: DeprecatedClassCache, make_deprecated: Make) -> None:
        cache.add([make_deprecated("old")])
        snapshot = cache.get_classes()
        cache.add([make_deprecated("newer")])
        assert set(snapshot) == {"old"}
        assert set(cache.get_classes()) == {"old", "newer"}


class TestAdd:
    def test_given_classes_then_indexed_both_ways(
        self, cache: DeprecatedClassCache, make_deprecated: Make
    ) -> None:
        cache.add([make_deprecated("a", source_file="/x.css"), make_deprecated("b", source_file="/x.css")])
        assert "a" in cache
        assert cache.files() == {"/x.css": frozenset({"a", "b"})}

    def test_given_add_then_one_notification_listing_files(
        self,
        cache: DeprecatedClassCache,
        events: list[CacheUpdateEvent],
        make_deprecated: Make,
    ) -> None:
        cache.add(
            [make_deprecated("a", source_file="/x.css"), make_deprecated("b", source_file="/y.css")]
        )
        assert events == [CacheUpdateEvent(size=2, modified_files=("/x.css", "/y.css"))]

    def test_given_nothing_to_add_then_no_notification(
        self, cache: DeprecatedClassCache, events: list[CacheUpdateEvent]
    ) -> None:
        cache.add([])
        assert events == []

    def test_given_same_name_from_other_file_then_moves_in_reverse_index(
        self, cache: DeprecatedClassCache, make_deprecated: Make
    ) -> None:
        # Given
        cache.add([make_deprecated("dup", source_file="/a.css"), make_deprecated("keep", source_file="/a.css")])

        # When
        cache.add([make_deprecated("dup", message="newer", source_file="/b.css")])

        # Then
        assert cache.files() == {"/a.css": frozenset({"keep"}), "/b.css": frozenset({"dup"})}
        cache.remove_by_file("/a.css")
        assert cache.get("dup") is not None
        assert cache.get("dup").message == "newer"  # type: ignore[union-attr]


class TestRemoveByFile:
    def test_given_file_then_only_its_classes_removed(
        self,
        cache: DeprecatedClassCache,
        events: list[CacheUpdateEvent],
        make_deprecated: Make,
    ) -> None:
        cache.add([make_deprecated("a", source_file="/x.css"), make_deprecated("b", source_file="/y.css")])
        events.clear()

        removed = cache.remove_by_file("/x.css")

        assert removed == 1
        assert set(cache.get_classes()) == {"b"}
        assert "/x.css" not in cache.files()
        assert events == [CacheUpdateEvent(size=1, modified_files=("/x.css",))]

    def test_given_unknown_file_then_noop(
        self, cache: DeprecatedClassCache, events: list[CacheUpdateEvent]
    ) -> None:
        assert cache.remove_by_file("/nope.css") == 0
        assert events == []

    def test_accepts_path_objects(self, cache: DeprecatedClassCache, make_deprecated: Make) -> None:
        cache.add([make_deprecated("a", source_file="/x.css")])
        assert cache.remove_by_file(Path("/x.css")) == 1


class TestRefreshFile:
    def test_given_edit_then_old_classes_gone_and_new_present(
        self,
        cache: DeprecatedClassCache,
        parser: FakeParser,
        events: list[CacheUpdateEvent],
        make_deprecated: Make,
    ) -> None:
        # Given: x.css declares a and b
        parser.files["/x.css"] = [
            make_deprecated("a", source_file="/x.css"),
            make_deprecated("b", source_file="/x.css"),
        ]
        cache.refresh_file("/x.css")
        events.clear()

        # When: x.css now declares only c
        parser.files["/x.css"] = [make_deprecated("c", source_file="/x.css")]
        cache.refresh_file("/x.css")

        # Then
        assert set(cache.get_classes()) == {"c"}
        assert cache.files() == {"/x.css": frozenset({"c"})}
        assert events == [CacheUpdateEvent(size=1, modified_files=("/x.css",))]

    def test_refresh_leaves_other_files_alone(
        self, cache: DeprecatedClassCache, parser: FakeParser, make_deprecated: Make
    ) -> None:
        cache.add([make_deprecated("other", source_file="/y.css")])
        parser.files["/x.css"] = [make_deprecated("mine", source_file="/x.css")]
        cache.refresh_file("/x.css")
        assert set(cache.get_classes()) == {"other", "mine"}

    def test_given_unchanged_empty_file_then_no_notification(
        self, cache: DeprecatedClassCache, events: list[CacheUpdateEvent]
    ) -> None:
        cache.refresh_file("/empty.css")
        assert events == []

    def test_given_file_emptied_then_classes_removed_with_one_notification(
        self,
        cache: DeprecatedClassCache,
        parser: FakeParser,
        events: list[CacheUpdateEvent],
        make_deprecated: Make,
    ) -> None:
        parser.files["/x.css"] = [make_deprecated("a", source_file="/x.css")]
        cache.refresh_file("/x.css")
        parser.files["/x.css"] = []
        events.clear()

        cache.refresh_file("/x.css")

        assert cache.size == 0
        assert len(events) == 1

    def test_uses_real_parser_by_default(self, tmp_path: Path) -> None:
        css = tmp_path / "a.css"
        css.write_text('.old { --deprecated: "Use .new"; }')
        cache = DeprecatedClassCache()
        cache.refresh_file(css)
        declared = cache.get("old")
        assert declared is not None
        assert declared.source_file == str(css)


class TestHandleFileChange:
    @pytest.mark.parametrize("kind", [FileChangeType.CREATED, FileChangeType.CHANGED])
    def test_given_create_or_change_then_refreshes(
        self,
        cache: DeprecatedClassCache,
        parser: FakeParser,
        make_deprecated: Make,
        kind: FileChangeType,
    ) -> None:
        parser.files["/x.css"] = [make_deprecated("a", source_file="/x.css")]
        cache.handle_file_change(FileChangeEvent("/x.css", kind))
        assert parser.calls == ["/x.css"]
        assert cache.has("a")

    def test_given_delete_then_removes_without_parsing(
        self, cache: DeprecatedClassCache, parser: FakeParser, make_deprecated: Make
    ) -> None:
        cache.add([make_deprecated("a", source_file="/x.css")])
        cache.handle_file_change(FileChangeEvent("/x.css", FileChangeType.DELETED))
        assert parser.calls == []
        assert cache.size == 0


class TestReplaceAllAndClear:
    def test_replace_all_swaps_contents(
        self,
        cache: DeprecatedClassCache,
        events: list[CacheUpdateEvent],
        make_deprecated: Make,
    ) -> None:
        cache.add([make_deprecated("old", source_file="/x.css")])
        events.clear()

        cache.replace_all([make_deprecated("fresh", source_file="/y.css")])

        assert set(cache.get_classes()) == {"fresh"}
        assert cache.files() == {"/y.css": frozenset({"fresh"})}
        assert events == [CacheUpdateEvent(size=1, modified_files=("/y.css",))]

    def test_replace_all_empty_on_empty_cache_is_silent(
        self, cache: DeprecatedClassCache, events: list[CacheUpdateEvent]
    ) -> None:
        cache.replace_all([])
        assert events == []

    def test_clear_notifies_once_when_non_empty(
        self,
        cache: DeprecatedClassCache,
        events: list[CacheUpdateEvent],
        make_deprecated: Make,
    ) -> None:
        cache.add([make_deprecated("a")])
        events.clear()

        cache.clear()
        cache.clear()

        assert cache.size == 0
        assert cache.files() == {}
        assert events == [CacheUpdateEvent(size=0, modified_files=())]


class TestListeners:
    def test_unsubscribe_stops_delivery_and_is_idempotent(
        self, cache: DeprecatedClassCache, make_deprecated: Make
    ) -> None:
        received: list[CacheUpdateEvent] = []
        unsubscribe = cache.on_update(received.append)

        unsubscribe()
        unsubscribe()
        cache.add([make_deprecated("a")])

        assert received == []

    def test_failing_listener_does_not_block_others(self, make_deprecated: Make) -> None:
        # Given
        cache = DeprecatedClassCache(logger=structlog.get_logger())
        received: list[CacheUpdateEvent] = []

        def broken(_event: CacheUpdateEvent) -> None:
            raise RuntimeError("listener bug")

        cache.on_update(broken)
        cache.on_update(received.append)

        # When
        with capture_logs() as logs:
            cache.add([make_deprecated("a")])

        # Then
        assert len(received) == 1
        assert cache.has("a")
        assert [entry["event"] for entry in logs] == ["cache_listener_failed"]

    def test_listener_sees_post_mutation_state(
        self, cache: DeprecatedClassCache, make_deprecated: Make
    ) -> None:
        seen: list[set[str]] = []
        cache.on_update(lambda _e: seen.append(set(cache.get_classes())))
        cache.add([make_deprecated("a")])
        assert seen == [{"a"}]
