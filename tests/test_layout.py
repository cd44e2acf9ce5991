import pytest

from cinegraph.config import CinegraphConfig
from cinegraph.forces import LinkForce, PositionForce
from cinegraph.hooks import HookManager, HookName
from cinegraph.layout import LayoutEngine, TimelineScale, compute_mode_links
from cinegraph.models import LayoutMode, MovieDataset, NodeType


def _dataset() -> MovieDataset:
    return MovieDataset.model_validate(
        {
            "fetched_at": "2024-05-01T10:00:00Z",
            "source": "tmdb",
            "movies": [
                {
                    "id": 1,
                    "title": "Old Drama",
                    "release_date": "1990-01-01",
                    "genres": [{"id": 18, "name": "Drama"}],
                    "cast": [{"id": 100, "name": "Lead"}],
                },
                {
                    "id": 2,
                    "title": "Mid Drama",
                    "release_date": "1995-06-01",
                    "genres": [{"id": 18, "name": "Drama"}],
                    "cast": [{"id": 100, "name": "Lead"}],
                },
                {
                    "id": 3,
                    "title": "New Comedy",
                    "release_date": "2010-03-03",
                    "genres": [{"id": 35, "name": "Comedy"}],
                    "cast": [{"id": 200, "name": "Clown"}],
                    "keywords": [{"id": 7, "name": "office"}],
                },
                {
                    "id": 4,
                    "title": "Undated",
                    "release_date": "unknown",
                    "genres": [{"id": 35, "name": "Comedy"}],
                },
            ],
        }
    )


def test_similarity_mode_lays_out_movies_with_top_k_links() -> None:
    engine = LayoutEngine(_dataset(), CinegraphConfig())

    assert engine.mode == LayoutMode.SIMILARITY
    assert {node.type for node in engine.graph.nodes} == {NodeType.MOVIE}
    assert sorted((link.source, link.target, link.weight) for link in engine.active_links) == [
        ("movie-1", "movie-2", 1.0),
        ("movie-3", "movie-4", 0.5),
    ]
    link_force = engine.simulation.force("link")
    assert isinstance(link_force, LinkForce)
    assert link_force.distance == 90.0
    assert link_force.base_strength == pytest.approx(0.12)
    assert set(engine.simulation.force_names()) >= {"charge", "center", "x", "y", "collide", "genre"}


def test_mode_links_are_cached_per_dataset() -> None:
    engine = LayoutEngine(_dataset(), CinegraphConfig())

    first = engine.links_for(LayoutMode.SIMILARITY)
    engine.set_mode(LayoutMode.COACTOR)
    engine.set_mode(LayoutMode.SIMILARITY)

    assert engine.links_for(LayoutMode.SIMILARITY) is first
    assert len(engine.link_cache) == 2


def test_analytical_switch_keeps_nodes_and_positions() -> None:
    engine = LayoutEngine(_dataset(), CinegraphConfig())
    engine.simulation.run(50)
    nodes_before = list(engine.graph.nodes)
    simulation_before = engine.simulation
    positions = [(node.x, node.y) for node in nodes_before]

    engine.set_mode(LayoutMode.COACTOR)

    assert engine.simulation is simulation_before
    assert engine.graph.nodes == nodes_before
    assert [(node.x, node.y) for node in engine.graph.nodes] == positions
    assert sorted((link.source, link.target, link.weight) for link in engine.active_links) == [("movie-1", "movie-2", 0.5)]
    assert engine.simulation.alpha == 0.6


def test_entity_switch_rebuilds_graph_and_carries_movie_positions() -> None:
    engine = LayoutEngine(_dataset(), CinegraphConfig())
    engine.simulation.run(20)
    movie_positions = {node.id: (node.x, node.y) for node in engine.graph.nodes}

    engine.set_mode(LayoutMode.ENTITY)

    counts = engine.graph.count_by_type()
    assert counts == {"movie": 4, "genre": 2, "person": 2, "keyword": 1}
    for node_id, position in movie_positions.items():
        assert (engine.graph.node(node_id).x, engine.graph.node(node_id).y) == position
    assert len(engine.active_links) == len(engine.graph.links) == 8
    assert engine.simulation.force("link").distance == 60.0


def test_timeline_places_undated_movies_at_center_and_orders_by_year() -> None:
    config = CinegraphConfig()
    engine = LayoutEngine(_dataset(), config, mode=LayoutMode.TIMELINE)

    timeline = engine.simulation.force("timeline")
    assert isinstance(timeline, PositionForce)
    assert engine.simulation.force("link") is None
    assert engine.active_links == []

    targets = {node.id: timeline.targets[node.index] for node in engine.graph.nodes}
    assert targets["movie-4"] == 600.0
    assert targets["movie-1"] == pytest.approx(120.0)
    assert targets["movie-2"] == pytest.approx(360.0)
    assert targets["movie-3"] == pytest.approx(1080.0)


def test_timeline_settled_positions_keep_year_order() -> None:
    engine = LayoutEngine(_dataset(), CinegraphConfig(), mode=LayoutMode.TIMELINE)

    engine.simulation.run(1000)

    assert engine.simulation.converged
    xs = {node.id: node.x for node in engine.graph.nodes}
    # Genre, charge and collide forces still act, so only the ordering is exact.
    assert xs["movie-1"] < xs["movie-2"] < xs["movie-3"]
    assert xs["movie-3"] - xs["movie-1"] > 480.0


def test_timeline_scale_degenerates_to_center() -> None:
    scale = TimelineScale(center_x=600.0, span=960.0, min_year=2000, max_year=2000)

    assert scale.x_for(2000) == 600.0
    assert scale.x_for(None) == 600.0


def test_leaving_timeline_restores_link_force() -> None:
    engine = LayoutEngine(_dataset(), CinegraphConfig(), mode=LayoutMode.TIMELINE)

    engine.set_mode(LayoutMode.SIMILARITY)

    assert engine.simulation.force("timeline") is None
    assert isinstance(engine.simulation.force("link"), LinkForce)


def test_link_strength_change_reheats_and_rebinds_force() -> None:
    engine = LayoutEngine(_dataset(), CinegraphConfig())
    engine.simulation.run(1000)

    engine.set_link_strength(0.5)

    assert engine.simulation.running
    assert engine.simulation.force("link").base_strength == 0.5
    with pytest.raises(ValueError):
        engine.set_link_strength(-0.1)


def test_mode_changes_emit_hook() -> None:
    seen: list[tuple] = []
    hooks = HookManager()
    hooks.register(HookName.MODE_CHANGED, lambda ctx, env: seen.append((ctx["previous"], ctx["mode"], env["links"])) or None)

    engine = LayoutEngine(_dataset(), CinegraphConfig(), hooks=hooks)
    engine.set_mode(LayoutMode.TIMELINE)

    assert seen == [(None, "similarity", 2), ("similarity", "timeline", 0)]


def test_compute_mode_links_respects_top_k() -> None:
    engine = LayoutEngine(_dataset(), CinegraphConfig())

    assert compute_mode_links(LayoutMode.TIMELINE, engine.graph, CinegraphConfig().similarity) == []
    pruned = compute_mode_links(LayoutMode.SIMILARITY, engine.graph, CinegraphConfig(similarity={"top_k": 0}).similarity)
    assert pruned == []
