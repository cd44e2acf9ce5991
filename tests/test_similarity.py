import pytest

from cinegraph.indexer import build_feature_index
from cinegraph.models import Node, NodeType
from cinegraph.similarity import (
    compute_coactor_adjacency,
    compute_similarity_adjacency,
    compute_similarity_adjacency_with_stats,
    feature_tags,
    jaccard,
    record_weight,
)
from cinegraph.topk import build_top_k_links


def _movie(movie_id: int, genres: list[int], actors: list[int] | None = None, keywords: list[int] | None = None) -> Node:
    return Node(
        id=f"movie-{movie_id}",
        label=f"Movie {movie_id}",
        type=NodeType.MOVIE,
        genre_ids=genres,
        actor_ids=actors or [],
        keyword_ids=keywords or [],
    )


def test_jaccard_is_symmetric_and_bounded() -> None:
    a = {"g:18", "g:53", "k:1"}
    b = {"g:18", "k:2"}

    assert jaccard(a, b) == jaccard(b, a)
    assert jaccard(a, b) == pytest.approx(1 / 4)
    assert jaccard(a, a) == 1.0
    assert jaccard(a, set()) == 0.0
    assert jaccard(set(), set()) == 0.0


def test_genre_and_keyword_ids_do_not_collide() -> None:
    movie = _movie(1, [5], keywords=[5])

    assert feature_tags(movie) == {"g:5", "k:5"}


def test_two_movies_sharing_only_drama_get_one_full_weight_edge() -> None:
    movies = [_movie(1, [18]), _movie(2, [18])]

    links = build_top_k_links(compute_similarity_adjacency(movies), k=6)

    assert len(links) == 1
    assert (links[0].source, links[0].target) == ("movie-1", "movie-2")
    assert links[0].weight == 1.0


def test_similarity_never_scores_self_and_is_symmetric() -> None:
    movies = [
        _movie(1, [18, 53], keywords=[10]),
        _movie(2, [18], keywords=[10, 11]),
        _movie(3, [35]),
        _movie(4, [53], keywords=[11]),
    ]

    adjacency, stats = compute_similarity_adjacency_with_stats(movies, build_feature_index(movies))

    for node_id, neighbors in adjacency.items():
        assert node_id not in neighbors
        for other_id, weight in neighbors.items():
            assert adjacency[other_id][node_id] == weight
            assert 0.0 < weight <= 1.0
    assert "movie-3" not in adjacency
    assert adjacency["movie-1"]["movie-2"] == pytest.approx(2 / 4)
    assert stats.unique_pairs_scored == stats.pairs_recorded == 3
    assert stats.candidate_links_generated == 6


def test_record_weight_keeps_the_larger_weight() -> None:
    adjacency: dict[str, dict[str, float]] = {}
    record_weight(adjacency, "a", "b", 0.4)
    record_weight(adjacency, "b", "a", 0.2)
    record_weight(adjacency, "a", "b", 0.7)

    assert adjacency == {"a": {"b": 0.7}, "b": {"a": 0.7}}


def test_three_movies_sharing_one_actor_get_three_half_weight_edges() -> None:
    movies = [_movie(1, [], actors=[100]), _movie(2, [], actors=[100]), _movie(3, [], actors=[100])]

    links = build_top_k_links(compute_coactor_adjacency(movies), k=6)

    assert sorted((link.source, link.target) for link in links) == [
        ("movie-1", "movie-2"),
        ("movie-1", "movie-3"),
        ("movie-2", "movie-3"),
    ]
    assert all(link.weight == 0.5 for link in links)


def test_coactor_weight_saturates() -> None:
    movies = [_movie(1, [], actors=[1, 2, 3]), _movie(2, [], actors=[1, 2, 3])]

    assert compute_coactor_adjacency(movies)["movie-1"]["movie-2"] == 1.0
    assert compute_coactor_adjacency(movies, saturation=4)["movie-1"]["movie-2"] == 0.75

    with pytest.raises(ValueError):
        compute_coactor_adjacency(movies, saturation=0)
