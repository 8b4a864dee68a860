"""Tests for the topo container: snapping, mutation and change tracking."""

import math

import pytest

from phototopo.config import TopoOptions
from phototopo.errors import (
    ConfigurationError,
    DuplicateRouteIdError,
    TopoFormatError,
    UnknownRouteError,
)
from phototopo.geometry import BezierCurve, CapKind
from phototopo.graph import PointType
from phototopo.parser import label_from_data
from phototopo.topo import Topo


def _topo(routes=None, **kwargs):
    options = {
        "element_id": "crag",
        "width": 400,
        "height": 400,
        "image_url": "photo.jpg",
        "routes": routes or [],
    }
    options.update(kwargs)
    return Topo(options)


def _shared_end():
    """Two routes that finish on the same anchor."""
    return _topo([
        {"id": "r1", "points": "50 50,100 100"},
        {"id": "r2", "points": "150 50,100 100"},
    ])


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def test_missing_options_raise():
    with pytest.raises(ConfigurationError) as exc:
        Topo({"element_id": "crag"})
    assert exc.value.missing == ["width", "height", "image_url"]
    assert "PhotoTopo config error" in str(exc.value)


def test_options_accept_camel_case():
    options = TopoOptions.from_dict({
        "elementId": "crag",
        "width": 10,
        "height": 10,
        "imageUrl": "a.jpg",
        "seperateRoutes": True,
        "viewScale": 2,
        "notAnOption": 1,
    })
    assert options.element_id == "crag"
    assert options.separate_routes is True
    assert options.view_scale == 2
    assert options.snap_threshold == 20


def test_auto_size_scales_photo_to_fit():
    topo = _topo(width=400, height=300, image_size=(800, 400))
    assert topo.scale == pytest.approx(0.5)
    assert topo.shown_width == pytest.approx(400)
    assert topo.shown_height == pytest.approx(200)


def test_auto_size_off_uses_canvas():
    topo = _topo(image_size=(800, 400), auto_size=False)
    assert (topo.shown_width, topo.shown_height) == (400, 400)


def test_duplicate_id_first_wins():
    topo = _topo([
        {"id": "r1", "points": "10 10"},
        {"id": "r1", "points": "90 90,120 120"},
    ])
    assert len(topo.route("r1").points) == 1
    assert len(topo.load_warnings) == 1
    assert "r1" in topo.load_warnings[0]


def test_duplicate_id_strict():
    with pytest.raises(DuplicateRouteIdError):
        _topo(
            [{"id": "r1", "points": "10 10"}, {"id": "r1", "points": "20 20"}],
            strict_ids=True,
        )


def test_bad_point_token_raises():
    with pytest.raises(TopoFormatError):
        _topo([{"id": "r1", "points": "ten 10"}])
    with pytest.raises(TopoFormatError):
        _topo([{"id": "r1", "points": "10 10 flying"}])


def test_unknown_route_raises():
    topo = _topo()
    with pytest.raises(UnknownRouteError):
        topo.insert_point("nope", 10, 10)


def test_load_notifies_once_unchanged():
    payloads = []
    topo = _topo([{"id": "r1", "points": "10 10,50 10"}], on_change=payloads.append)
    assert len(payloads) == 1
    assert payloads[0]["changed"] is False
    topo.insert_point("r1", 90, 10)
    assert len(payloads) == 2
    assert payloads[1]["changed"] is True
    assert payloads[1]["routes"][0]["points"] == "10 10,50 10,90 10"


# ---------------------------------------------------------------------------
# Route geometry
# ---------------------------------------------------------------------------


def test_two_point_route_has_arrowhead():
    topo = _topo([{"id": "A", "points": "10 10,50 10"}])
    route = topo.route("A")
    assert len(route.paths) == 1
    path = route.paths[0]
    assert path.point1 is route.points[0]
    assert path.point2 is route.points[1]
    assert path.curve == BezierCurve((10, 10), (26, 10), (34, 10), (50, 10))
    assert path.cap.kind is CapKind.ARROW
    assert path.cap.points[3] == pytest.approx((55.8, 10))


def test_jumpoff_end_gets_tee_bar():
    topo = _topo([{"id": "A", "points": "10 10,50 10 jumpoff"}])
    assert topo.route("A").paths[0].cap.kind is CapKind.TEE


def test_end_with_icon_has_no_cap():
    topo = _topo([{"id": "A", "points": "10 10,50 10 belay"}])
    assert topo.route("A").paths[0].cap is None


def test_hidden_point_hides_following_path():
    topo = _topo([{"id": "A", "points": "10 10 hidden,50 10,90 10"}])
    paths = topo.route("A").paths
    assert paths[0].hidden is True
    assert paths[1].hidden is False


def test_paths_match_points():
    topo = _topo([{"id": "A", "points": "10 10,50 10,90 40,120 90"}])
    route = topo.route("A")
    assert len(route.paths) == len(route.points) - 1
    for i, path in enumerate(route.paths):
        assert path.point1 is route.points[i]
        assert path.point2 is route.points[i + 1]
    assert [p.position for p in route.points] == [0, 1, 2, 3]
    assert route.svg_path().startswith("M10 10C")


# ---------------------------------------------------------------------------
# Snapping
# ---------------------------------------------------------------------------


def test_shared_end_forms_group():
    topo = _shared_end()
    end1 = topo.route("r1").points[-1]
    end2 = topo.route("r2").points[-1]
    group = topo.group_of(end1)
    assert group is topo.group_of(end2)
    assert len(group) == 2
    assert group.get_split_offset(end1) == -0.5
    assert group.get_split_offset(end2) == 0.5


def test_split_offsets_symmetric():
    topo = _topo([
        {"id": "a", "points": "100 100"},
        {"id": "b", "points": "101 102"},
        {"id": "c", "points": "99 98"},
    ])
    group = topo.group_of(topo.route("a").points[0])
    offsets = [group.get_split_offset(p) for p in group.points]
    assert offsets == [-1, 0, 1]
    assert sum(offsets) == 0


def test_group_order_follows_route_order():
    topo = _topo([
        {"id": "a", "order": 2, "points": "100 100"},
        {"id": "b", "order": 1, "points": "100 100"},
    ])
    group = topo.group_of(topo.route("a").points[0])
    assert [p.route_id for p in group.points] == ["b", "a"]


def test_group_order_ties_break_on_id():
    topo = _topo([
        {"id": "z", "order": 1, "points": "100 100"},
        {"id": "m", "order": 1, "points": "100 100"},
    ])
    group = topo.group_of(topo.route("z").points[0])
    assert [p.route_id for p in group.points] == ["m", "z"]


def test_nearby_point_joins_neighbour_cell():
    """(105, 103) and (100, 100) fall in the same 20px cell."""
    topo = _topo([
        {"id": "a", "points": "100 100"},
        {"id": "b", "points": "105 103"},
    ])
    a = topo.route("a").points[0]
    b = topo.route("b").points[0]
    assert topo.group_of(a) is topo.group_of(b)
    # Loaded points keep their own coordinates
    assert (b.x, b.y) == (105, 103)


def test_move_point_snaps_to_group():
    topo = _shared_end()
    point = topo.insert_point("r1", 300, 300)
    assert topo.move_point(point, 104, 98) == (100, 100)
    assert len(topo.group_of(point)) == 3


def test_move_point_is_idempotent():
    topo = _shared_end()
    point = topo.insert_point("r1", 300, 300)
    first = topo.move_point(point, 104, 98)
    key = point.group_key
    second = topo.move_point(point, 104, 98)
    assert first == second
    assert point.group_key == key


def test_move_point_clamps_to_photo():
    topo = _topo([{"id": "a", "points": "10 10"}])
    point = topo.route("a").points[0]
    assert topo.move_point(point, -40, 900) == (0, 400)


def test_move_point_ignores_invalid_coordinates():
    payloads = []
    topo = _topo([{"id": "a", "points": "10 10"}], on_change=payloads.append)
    point = topo.route("a").points[0]
    assert topo.move_point(point, math.nan, 20) == (10, 10)
    assert topo.move_point(point, "left", 20) == (10, 10)
    assert len(payloads) == 1


def test_move_point_leaves_old_group():
    topo = _shared_end()
    end1 = topo.route("r1").points[-1]
    end2 = topo.route("r2").points[-1]
    topo.move_point(end1, 300, 300)
    assert len(topo.group_of(end2)) == 1
    assert topo.group_of(end2).get_split_offset(end2) == 0


def test_separate_routes_fan_out():
    topo = _topo(
        [
            {"id": "r1", "points": "50 50,100 100"},
            {"id": "r2", "points": "150 50,100 100"},
        ],
        separate_routes=True,
    )
    end1 = topo.route("r1").paths[0].curve.end
    end2 = topo.route("r2").paths[0].curve.end
    assert end1[0] + end2[0] == pytest.approx(200)
    assert abs(end1[0] - end2[0]) == pytest.approx(7)
    assert end1[1] == pytest.approx(100)


def test_set_order_resorts_groups():
    topo = _shared_end()
    end1 = topo.route("r1").points[-1]
    topo.set_order({"r1": "z9"})
    assert topo.group_of(end1).get_split_offset(end1) == 0.5


# ---------------------------------------------------------------------------
# Route mutation
# ---------------------------------------------------------------------------


def test_remove_only_point_empties_route():
    topo = _topo([{"id": "a", "points": "10 10"}])
    route = topo.route("a")
    topo.remove_point(route.points[0])
    assert route.points == []
    assert route.paths == []
    assert topo.point_groups == {}


def test_remove_middle_point_keeps_preceding_path():
    topo = _topo([{"id": "a", "points": "10 10,50 10,90 10"}])
    route = topo.route("a")
    first_path = route.paths[0]
    topo.remove_point(route.points[1])
    assert route.paths == [first_path]
    assert first_path.point2 is route.points[1]
    assert [(p.x, p.y) for p in route.points] == [(10, 10), (90, 10)]
    assert [p.position for p in route.points] == [0, 1]


def test_remove_last_point_drops_path():
    topo = _topo([{"id": "a", "points": "10 10,50 10,90 10"}])
    route = topo.route("a")
    topo.remove_point(route.points[-1])
    assert len(route.paths) == 1
    assert route.points[-1].next_path is None
    assert route.paths[0].cap.kind is CapKind.ARROW


def test_remove_point_selects_neighbour():
    topo = _topo([{"id": "a", "points": "10 10,50 10,90 10"}])
    route = topo.route("a")
    first = route.points[0]
    topo.remove_point(route.points[1])
    assert topo.selected_route is route
    assert topo.selected_point is first


def test_insert_at_start_links_new_first_point():
    topo = _topo(
        [{"id": "a", "label": "7", "points": "50 10,90 10"}],
        get_label=label_from_data,
    )
    route = topo.route("a")
    point = topo.insert_point("a", 10, 10, position=0)
    assert route.points[0] is point
    assert point.next_point is route.points[1]
    assert route.paths[0].point1 is point
    assert len(route.paths) == 2
    # The label follows the first point
    assert point.label_box is not None
    assert route.points[1].label_box is None


def test_insert_in_middle_splits_path():
    topo = _topo([{"id": "a", "points": "10 10,90 10"}])
    route = topo.route("a")
    point = topo.insert_point("a", 50, 40, PointType.CRUX, position=1)
    assert route.points[1] is point
    assert len(route.paths) == 2
    assert route.paths[0].point2 is point
    assert route.paths[1].point1 is point
    assert route.get_json()["points"] == "10 10,50 40 crux,90 10"


def test_set_point_type_updates_cap():
    topo = _topo([{"id": "a", "points": "10 10,50 10"}])
    end = topo.route("a").points[-1]
    topo.set_point_type(end, "jumpoff")
    assert topo.route("a").paths[0].cap.kind is CapKind.TEE


def test_label_placed_under_first_point():
    topo = _topo(
        [{"id": "a", "label": "1", "points": "10 10,50 10"}],
        get_label=label_from_data,
    )
    box = topo.route("a").points[0].label_box
    assert box.text == "1"
    assert (box.x, box.y) == (2, 15)


def test_auto_colors_come_from_label():
    topo = _topo(
        [{"id": "a", "label": "1", "color": "red", "points": "10 10"}],
        get_label=label_from_data,
        auto_colors=True,
    )
    assert topo.route("a").color == "red"


def test_manual_colors_override():
    topo = _topo([{"id": "a", "manualColor": "#00ff00", "points": "10 10"}])
    assert topo.route("a").color == "#00ff00"


# ---------------------------------------------------------------------------
# Saving
# ---------------------------------------------------------------------------


def test_save_round_trip_with_view_scale():
    routes = [
        {"id": "a", "order": 1, "points": "10 20 bolt,30 40,50 60 jumpoff"},
        {"id": "b", "type": "area", "points": "100 20,150 20,150 80"},
    ]
    topo = _topo(routes, view_scale=2)
    assert (topo.route("a").points[0].x, topo.route("a").points[0].y) == (20, 40)
    saved = topo.get_json()
    assert saved[0] == routes[0]
    assert saved[1] == routes[1]


def test_reload_reproduces_graph():
    topo = _topo([{"id": "a", "order": 3, "points": "10 20 bolt,30 40,95 60 lower"}])
    again = _topo(topo.get_json())
    assert again.get_json() == topo.get_json()


def test_save_data_while_loading_is_silent():
    topo = _topo()
    with topo.bulk_load():
        assert topo.save_data() is None
    assert topo.loading is False


def test_failed_load_clears_loading_flag():
    payloads = []
    topo = _topo(on_change=payloads.append)
    with pytest.raises(TopoFormatError):
        topo.load([{"id": "x", "points": "1 1,bad 2"}])
    assert topo.loading is False
    topo.insert_point("x", 10, 10)
    assert payloads[-1]["changed"] is True
    assert payloads[-1]["routes"][0] == {"id": "x", "order": "x", "points": "10 10"}


# ---------------------------------------------------------------------------
# Geometry stays current after edits
# ---------------------------------------------------------------------------


def _crossing():
    """r1 and r2 meet at (100, 100), drawn fanned out."""
    return _topo(
        [
            {"id": "r1", "points": "10 10,100 100,200 10"},
            {"id": "r2", "points": "180 190,100 100"},
        ],
        separate_routes=True,
    )


def _assert_matches_reload(topo):
    fresh = _topo(topo.get_json(), separate_routes=True)
    for route in topo.iter_routes():
        other = fresh.route(route.id)
        assert [p.curve for p in route.paths] == [p.curve for p in other.paths], route.id
        assert [p.cap for p in route.paths] == [p.cap for p in other.paths], route.id
        assert [p.hidden for p in route.paths] == [p.hidden for p in other.paths], route.id


def test_move_point_redraws_shared_neighbours():
    topo = _crossing()
    before = topo.route("r2").paths[0].curve
    topo.move_point(topo.route("r1").points[0], 10, 200)
    assert topo.route("r2").paths[0].curve != before
    _assert_matches_reload(topo)


def test_insert_point_redraws_shared_neighbours():
    topo = _crossing()
    topo.insert_point("r1", 40, 60, position=1)
    topo.insert_point("r2", 140, 150, position=1)
    _assert_matches_reload(topo)


def test_remove_point_redraws_shared_neighbours():
    topo = _crossing()
    topo.remove_point(topo.route("r1").points[1])
    assert len(topo.group_of(topo.route("r2").points[-1])) == 1
    _assert_matches_reload(topo)


def test_set_point_type_matches_reload():
    topo = _crossing()
    topo.set_point_type(topo.route("r1").points[1], "hidden")
    _assert_matches_reload(topo)


# ---------------------------------------------------------------------------
# Grid cells
# ---------------------------------------------------------------------------


def test_grid_keys_are_cell_indices():
    topo = _topo()
    assert topo.grid_key(45, 5) == (2, 0)
    assert topo.grid_key(0, 399) == (0, 19)


def test_fractional_cells_still_stick():
    """A 2.8px cell must still find the group in the next cell along."""
    topo = _topo(
        [
            {"id": "a", "points": "5 5"},
            {"id": "b", "points": "8 5"},
            {"id": "c", "points": "14 5"},
        ],
        thickness=0.7,
    )
    a = topo.route("a").points[0]
    b = topo.route("b").points[0]
    c = topo.route("c").points[0]
    assert topo.group_of(a) is topo.group_of(b)
    assert topo.group_of(c) is not topo.group_of(a)


def test_point_snap_previews_landing_spot():
    topo = _shared_end()
    point = topo.insert_point("r1", 300, 300)
    assert point.snap(topo, 104, 98) == (100, 100)
    assert point.snap(topo, 250.4, 40.6) == (250, 41)
    assert point.snap(topo, -5, 1000) == (0, 400)
    # Snapping only previews; the point has not moved
    assert (point.x, point.y) == (300, 300)
