from __future__ import annotations

import io
import threading

import pytest

from dirt_finder.engine import SearchEngine, SearchError
from dirt_finder.models import Constraint, Coordinate, Direction, Facing, SearchVolume
from dirt_finder.orientation import orientation
from dirt_finder.predicate import Predicate
from dirt_finder.sink import CollectingMatchSink, StreamMatchSink

BOX = SearchVolume(0, 7, 0, 0, 0, 2)
LEGACY_MATCHES = {Coordinate(2, 0, 0), Coordinate(5, 0, 2), Coordinate(6, 0, 2)}


def _thread_engine(workers: int = 3, **kwargs) -> SearchEngine:
    return SearchEngine(workers=workers, backend="thread", poll_interval_seconds=0.05, **kwargs)


def test_single_cell_search_emits_origin() -> None:
    box = SearchVolume(0, 0, 0, 0, 0, 0)
    predicate = Predicate.of([Constraint(0, 0, 0, orientation(0, 0, 0))]).normalized(Facing.NORTH)

    assert list(_thread_engine(workers=4).search(box, predicate)) == [Coordinate(0, 0, 0)]


def test_rotation_list_search_along_y() -> None:
    predicate = Predicate.from_rotations([0, 3], Direction.Y).normalized(Facing.NORTH)
    assert set(_thread_engine().search(BOX, predicate)) == LEGACY_MATCHES


def test_rotation_list_search_along_x() -> None:
    predicate = Predicate.from_rotations([0, 1], Direction.X)
    assert list(_thread_engine().search(SearchVolume(0, 6, 0, 0, 0, 0), predicate)) == [Coordinate(0, 0, 0)]


def test_constraint_objects_search() -> None:
    predicate = Predicate.of([Constraint(0, 0, 0, 0), Constraint(0, 0, 1, 3)])
    found = set(_thread_engine(workers=2).search(SearchVolume(0, 7, 0, 0, 0, 1), predicate))
    assert found == {Coordinate(0, 0, 0), Coordinate(2, 0, 1)}


def test_facing_is_a_cyclic_rotation_of_expected_values() -> None:
    north = Predicate.from_rotations([0, 3]).normalized(Facing.NORTH)
    east = Predicate.from_rotations([3, 2]).normalized(Facing.EAST)
    engine = _thread_engine()
    assert set(engine.search(BOX, north)) == set(engine.search(BOX, east))


@pytest.mark.parametrize("workers", [1, 2, 5, 24, 60])
def test_every_cell_is_scanned_exactly_once(workers: int) -> None:
    predicate = Predicate.from_rotations([0, 3])
    found = list(_thread_engine(workers=workers, batch_size=1).search(BOX, predicate))
    assert sorted(found, key=lambda c: (c.y, c.z, c.x)) == sorted(LEGACY_MATCHES, key=lambda c: (c.y, c.z, c.x))


def test_growing_the_box_keeps_previous_matches() -> None:
    predicate = Predicate.of([Constraint(0, 0, 0, 0)])
    engine = _thread_engine()
    smaller = set(engine.search(SearchVolume(0, 6, 0, 2, 0, 2), predicate))
    larger = set(engine.search(SearchVolume(0, 7, 0, 2, 0, 2), predicate))

    assert smaller <= larger
    assert all(c.x == 7 for c in larger - smaller)


def test_process_backend_finds_same_matches() -> None:
    engine = SearchEngine(workers=2, backend="process", poll_interval_seconds=0.2)
    predicate = Predicate.from_rotations([0, 3])
    assert set(engine.search(BOX, predicate)) == LEGACY_MATCHES


def test_run_writes_formatted_lines() -> None:
    stream = io.StringIO()
    sink = StreamMatchSink(stream)
    count = _thread_engine(workers=1).run(BOX, Predicate.from_rotations([0, 3]), sink)

    assert count == 3
    assert sink.count == 3
    assert stream.getvalue().splitlines() == ["[2, 0, 0]", "[5, 0, 2]", "[6, 0, 2]"]


def test_run_with_collecting_sink() -> None:
    sink = CollectingMatchSink()
    _thread_engine(workers=3).run(BOX, Predicate.from_rotations([0, 3]), sink)
    assert set(sink.matches) == LEGACY_MATCHES


def test_worker_failure_surfaces_as_search_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(self, x: int, y: int, z: int) -> bool:
        raise RuntimeError("bad cell")

    monkeypatch.setattr(Predicate, "matches_at", boom)
    with pytest.raises(SearchError, match="bad cell"):
        list(_thread_engine(workers=2).search(BOX, Predicate.from_rotations([0])))


def test_invalid_engine_configuration() -> None:
    with pytest.raises(ValueError):
        SearchEngine(workers=0)
    with pytest.raises(ValueError):
        SearchEngine(backend="gpu")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        SearchEngine(batch_size=0)


def test_default_worker_count_is_positive() -> None:
    assert SearchEngine(backend="thread").workers >= 1


def test_failed_search_stops_and_joins_worker_threads(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail_at_origin(self, x: int, y: int, z: int) -> bool:
        if (x, y, z) == (0, 0, 0):
            raise RuntimeError("bad cell")
        return False

    baseline = threading.active_count()
    monkeypatch.setattr(Predicate, "matches_at", fail_at_origin)
    with pytest.raises(SearchError, match="bad cell"):
        list(_thread_engine(workers=4).search(SearchVolume(0, 400, 0, 0, 0, 400), Predicate.from_rotations([0])))

    assert threading.active_count() == baseline


def test_closing_search_early_stops_worker_threads(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Predicate, "matches_at", lambda self, x, y, z: True)
    baseline = threading.active_count()

    engine = _thread_engine(workers=4, batch_size=1)
    results = engine.search(SearchVolume(0, 400, 0, 0, 0, 400), Predicate.from_rotations([0]))
    assert isinstance(next(results), Coordinate)
    results.close()

    assert threading.active_count() == baseline
