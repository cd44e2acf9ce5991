from cinegraph.models import LayoutMode, Link, MovieDataset, MovieRecord, Node, NodeType, movie_node_id, pair_key


def test_movie_record_tolerates_missing_and_null_relations() -> None:
    movie = MovieRecord.model_validate({"id": 7, "title": "Heat", "genres": None, "cast": None})

    assert movie.genres == []
    assert movie.cast == []
    assert movie.keywords == []


def test_dataset_ignores_downloader_extras() -> None:
    dataset = MovieDataset.model_validate(
        {
            "fetched_at": "2024-05-01T10:00:00Z",
            "source": "tmdb",
            "page_count": 3,
            "movies": [
                {
                    "id": 1,
                    "title": "Alien",
                    "release_date": "1979-05-25",
                    "runtime": 117,
                    "popularity": 80.5,
                    "genres": [{"id": 27, "name": "Horror"}],
                    "cast": [{"id": 10205, "name": "Sigourney Weaver", "character": "Ripley", "order": 0}],
                }
            ],
        }
    )

    movie = dataset.movies[0]
    assert movie.keywords == []
    assert movie.cast[0].character == "Ripley"
    assert dataset.source == "tmdb"


def test_layout_mode_flags() -> None:
    assert LayoutMode.SIMILARITY.is_analytical
    assert LayoutMode.TIMELINE.is_analytical
    assert not LayoutMode.ENTITY.is_analytical
    assert not LayoutMode.TIMELINE.uses_links
    assert LayoutMode.ENTITY.uses_links


def test_pair_key_is_order_independent() -> None:
    assert pair_key("movie-2", "movie-1") == ("movie-1", "movie-2")
    assert Link(source="movie-9", target="movie-3", weight=0.5).key == ("movie-3", "movie-9")
    assert movie_node_id(42) == "movie-42"


def test_node_pinned_follows_fixed_coordinates() -> None:
    node = Node(id="movie-1", label="Alien", type=NodeType.MOVIE)
    assert not node.pinned
    node.fx = 12.0
    assert node.pinned
