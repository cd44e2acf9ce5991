"""Graph construction from movie datasets."""

from __future__ import annotations

import logging

from cinegraph.models import Graph, Link, LinkType, MovieDataset, MovieRecord, Node, NodeType, movie_node_id

logger = logging.getLogger(__name__)


def parse_release_year(value: str | None) -> int | None:
    if not value:
        return None
    head = value.strip()[:4]
    if len(head) != 4 or not head.isdigit():
        return None
    return int(head)


class _GraphAssembler:
    def __init__(self) -> None:
        self.graph = Graph()
        self._link_keys: set[tuple[str, str, LinkType | None]] = set()

    def ensure_node(self, node_id: str, label: str, node_type: NodeType, **meta) -> Node:
        existing = self.graph.node_map.get(node_id)
        if existing is not None:
            return existing
        node = Node(id=node_id, label=label, type=node_type, **meta)
        self.graph.node_map[node_id] = node
        self.graph.nodes.append(node)
        return node

    def add_link(self, source: str, target: str, link_type: LinkType) -> None:
        key = (source, target, link_type)
        if key in self._link_keys:
            return
        self._link_keys.add(key)
        self.graph.links.append(Link(source=source, target=target, type=link_type))


def _append_unique(values: list[int], value: int) -> None:
    if value not in values:
        values.append(value)


def build_entity_graph(dataset: MovieDataset) -> Graph:
    """Movie/genre/person/keyword nodes with one typed edge per relation."""
    assembler = _GraphAssembler()

    for movie in dataset.movies:
        movie_node = assembler.ensure_node(
            movie_node_id(movie.id),
            movie.title,
            NodeType.MOVIE,
            release_date=movie.release_date,
            runtime=movie.runtime,
            year=parse_release_year(movie.release_date),
        )

        for genre in movie.genres:
            genre_node = assembler.ensure_node(f"genre-{genre.id}", genre.name, NodeType.GENRE)
            assembler.add_link(movie_node.id, genre_node.id, LinkType.GENRE)
            _append_unique(movie_node.genre_ids, genre.id)

        for person in movie.cast:
            person_node = assembler.ensure_node(f"person-{person.id}", person.name, NodeType.PERSON)
            assembler.add_link(movie_node.id, person_node.id, LinkType.CAST)

        for keyword in movie.keywords:
            keyword_node = assembler.ensure_node(f"keyword-{keyword.id}", keyword.name, NodeType.KEYWORD)
            assembler.add_link(movie_node.id, keyword_node.id, LinkType.KEYWORD)

    graph = assembler.graph
    logger.debug("Entity graph built: nodes=%s links=%s", len(graph.nodes), len(graph.links))
    return graph


def _movie_node(movie: MovieRecord) -> Node:
    return Node(
        id=movie_node_id(movie.id),
        label=movie.title,
        type=NodeType.MOVIE,
        release_date=movie.release_date,
        runtime=movie.runtime,
        year=parse_release_year(movie.release_date),
        genre_ids=[genre.id for genre in movie.genres],
        actor_ids=[person.id for person in movie.cast],
        keyword_ids=[keyword.id for keyword in movie.keywords],
    )


def build_movie_graph(dataset: MovieDataset) -> Graph:
    """Movie-only nodes carrying raw relation ids; links are supplied per layout mode."""
    graph = Graph()
    skipped = 0
    for movie in dataset.movies:
        node = _movie_node(movie)
        if node.id in graph.node_map:
            skipped += 1
            continue
        graph.node_map[node.id] = node
        graph.nodes.append(node)

    if skipped:
        logger.debug("Folded %s repeated movie records", skipped)
    return graph
