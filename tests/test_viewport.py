import pytest

from cinegraph.config import ViewportConfig
from cinegraph.models import Node, NodeType
from cinegraph.viewport import Transform, Viewport, content_bounds


def _nodes(points: list[tuple[float, float]]) -> list[Node]:
    return [Node(id=f"movie-{i}", label="", type=NodeType.MOVIE, x=x, y=y) for i, (x, y) in enumerate(points)]


def test_zoom_to_fit_on_empty_graph_keeps_transform() -> None:
    viewport = Viewport()
    viewport.pan(15.0, 5.0)
    before = viewport.transform

    assert viewport.zoom_to_fit([]) is None
    assert viewport.transform == before


@pytest.mark.parametrize(
    "points",
    [
        [(10.0, 10.0)],
        [(10.0, 10.0), (10.0, 10.0)],
    ],
)
def test_zoom_to_fit_skips_point_sized_boxes(points: list[tuple[float, float]]) -> None:
    viewport = Viewport()

    assert viewport.zoom_to_fit(_nodes(points), margin=10.0) is None
    assert viewport.transform == Transform()


def test_zoom_to_fit_frames_a_wide_horizontal_line() -> None:
    viewport = Viewport()

    transform = viewport.zoom_to_fit(_nodes([(0.0, 400.0), (3000.0, 400.0)]), margin=10.0)

    assert transform is not None
    assert transform.k == pytest.approx(1120.0 / 3020.0)
    assert transform.apply(1500.0, 400.0) == pytest.approx((600.0, 400.0))
    left, _ = transform.apply(-10.0, 400.0)
    right, _ = transform.apply(3010.0, 400.0)
    assert (left, right) == pytest.approx((40.0, 1160.0))


def test_zoom_to_fit_frames_a_vertical_line_without_margin() -> None:
    viewport = Viewport()

    transform = viewport.zoom_to_fit(_nodes([(5.0, 0.0), (5.0, 100.0)]))

    assert transform.k == 2.0
    assert transform.apply(5.0, 50.0) == pytest.approx((600.0, 400.0))


def test_unpositioned_nodes_are_ignored() -> None:
    nodes = _nodes([(0.0, 0.0), (10.0, 10.0)])
    nodes[1].x = None

    assert content_bounds(nodes) is not None
    assert Viewport().zoom_to_fit(nodes) is None


def test_zoom_to_fit_caps_scale_and_centers_content() -> None:
    viewport = Viewport()

    transform = viewport.zoom_to_fit(_nodes([(0.0, 0.0), (100.0, 0.0), (0.0, 100.0), (100.0, 100.0)]))

    assert transform == viewport.transform
    assert transform.k == 2.0
    assert transform.apply(50.0, 50.0) == pytest.approx((600.0, 400.0))


def test_zoom_to_fit_shrinks_large_content_inside_padding() -> None:
    viewport = Viewport()

    transform = viewport.zoom_to_fit(_nodes([(0.0, 0.0), (2240.0, 1440.0)]))

    assert transform.k == pytest.approx(0.5)
    left, top = transform.apply(0.0, 0.0)
    right, bottom = transform.apply(2240.0, 1440.0)
    assert (left, top) == pytest.approx((40.0, 40.0))
    assert (right, bottom) == pytest.approx((1160.0, 760.0))


def test_zoom_controls_scale_around_viewport_center() -> None:
    viewport = Viewport()

    zoomed = viewport.zoom_in()

    assert zoomed.k == pytest.approx(1.3)
    assert zoomed.apply(600.0, 400.0) == pytest.approx((600.0, 400.0))
    assert viewport.zoom_out().k == pytest.approx(1.0)


def test_zoom_is_clamped_to_scale_extent() -> None:
    viewport = Viewport(ViewportConfig())

    for _ in range(30):
        viewport.zoom_in()
    assert viewport.transform.k == 8.0

    for _ in range(60):
        viewport.zoom_out()
    assert viewport.transform.k == pytest.approx(0.1)


def test_reset_and_pan() -> None:
    viewport = Viewport()
    viewport.zoom_in()
    viewport.pan(10.0, -5.0)

    assert viewport.reset() == Transform()
    assert viewport.pan(3.0, 4.0) == Transform(k=1.0, x=3.0, y=4.0)


def test_transform_invert_round_trips_a_point() -> None:
    transform = Transform(k=2.5, x=-40.0, y=12.0)

    assert transform.invert(*transform.apply(7.0, -3.0)) == pytest.approx((7.0, -3.0))
