from __future__ import annotations

from urd.reporting import format_duration, format_share, render_streams
from urd.store import Store


def test_format_duration() -> None:
    assert format_duration(0) == "0h 00m 00s"
    assert format_duration(59.9) == "0h 00m 59s"
    assert format_duration(3 * 3600 + 7 * 60 + 5) == "3h 07m 05s"
    assert format_duration(-4) == "0h 00m 00s"


def test_format_share() -> None:
    assert format_share(30, 0) == ""
    assert format_share(15, 60) == "   25.0%"


def test_render_empty_store(store: Store) -> None:
    assert render_streams(store) == ["  No streams. Run 'urd add NAME' to add one."]


def test_render_streams_with_wall_clock_footer(store: Store, clock) -> None:
    a = store.add_stream("Writing", 0)
    b = store.add_stream("Reviews", 1)
    store.toggle_stream(a.id)
    store.toggle_stream(b.id)
    clock.advance(60)
    store.toggle_stream(b.id)

    lines = render_streams(store)

    assert lines[0].startswith(" 1 Writing")
    assert "0h 01m 00s" in lines[0]
    assert "100.0%" in lines[0]
    assert lines[0].endswith("●")
    assert not lines[1].endswith("●")
    assert "Wall clock: 0h 01m 00s" in lines[-2]
    assert "Total:      0h 02m 00s" in lines[-1]


def test_render_without_tracked_time_has_no_footer(store: Store) -> None:
    store.add_stream("Writing", 0)

    lines = render_streams(store)

    assert len(lines) == 1
    assert "%" not in lines[0]
