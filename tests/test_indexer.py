from cinegraph.indexer import build_feature_index
from cinegraph.models import Node, NodeType


def _movie(movie_id: int, genres: list[int], actors: list[int] | None = None, keywords: list[int] | None = None) -> Node:
    return Node(
        id=f"movie-{movie_id}",
        label=f"Movie {movie_id}",
        type=NodeType.MOVIE,
        genre_ids=genres,
        actor_ids=actors or [],
        keyword_ids=keywords or [],
    )


def test_index_partitions_exactly_the_declaring_movies() -> None:
    drama = _movie(1, [18], actors=[100])
    thriller = _movie(2, [18, 53], actors=[100, 200], keywords=[9])
    untagged = _movie(3, [], actors=[200])

    index = build_feature_index([drama, thriller, untagged])

    assert [node.id for node in index.by_genre[18]] == ["movie-1", "movie-2"]
    assert [node.id for node in index.by_genre[53]] == ["movie-2"]
    assert [node.id for node in index.by_keyword[9]] == ["movie-2"]
    assert [node.id for node in index.by_actor[200]] == ["movie-2", "movie-3"]
    assert all(untagged not in nodes for nodes in index.by_genre.values())
    assert index.genre_ids() == [18, 53]


def test_index_lists_a_movie_once_per_relation() -> None:
    repeated = _movie(1, [18, 18], actors=[5, 5])

    index = build_feature_index([repeated])

    assert index.by_genre[18] == [repeated]
    assert index.by_actor[5] == [repeated]


def test_empty_input_gives_empty_index() -> None:
    index = build_feature_index([])

    assert index.by_genre == {}
    assert index.by_keyword == {}
    assert index.by_actor == {}
