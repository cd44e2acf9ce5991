"""Dataset inspection command."""

from __future__ import annotations

import argparse
import json

from cinegraph.commands.common import CommandRuntime, load_config
from cinegraph.config import CinegraphConfig
from cinegraph.graph import build_entity_graph, build_movie_graph
from cinegraph.indexer import build_feature_index
from cinegraph.layout import compute_mode_links
from cinegraph.loader import load_dataset, load_dataset_file
from cinegraph.models import LayoutMode, MovieDataset
from cinegraph.session import describe_dataset
from cinegraph.similarity import compute_similarity_adjacency_with_stats


def summarize_dataset(dataset: MovieDataset, config: CinegraphConfig) -> dict:
    entity_graph = build_entity_graph(dataset)
    movie_graph = build_movie_graph(dataset)
    index = build_feature_index(movie_graph.movie_nodes())
    _, stats = compute_similarity_adjacency_with_stats(movie_graph.movie_nodes(), index)

    return {
        "source": dataset.source,
        "fetched_at": dataset.fetched_at,
        "movies": len(dataset.movies),
        "unique_movies": len(movie_graph.nodes),
        "entity_nodes": entity_graph.count_by_type(),
        "index": {
            "genres": len(index.by_genre),
            "keywords": len(index.by_keyword),
            "actors": len(index.by_actor),
        },
        "similarity": {
            "candidates": stats.candidate_links_generated,
            "pairs_scored": stats.unique_pairs_scored,
            "pairs_recorded": stats.pairs_recorded,
        },
        "edges": {
            LayoutMode.ENTITY.value: len(entity_graph.links),
            LayoutMode.SIMILARITY.value: len(compute_mode_links(LayoutMode.SIMILARITY, movie_graph, config.similarity)),
            LayoutMode.COACTOR.value: len(compute_mode_links(LayoutMode.COACTOR, movie_graph, config.similarity)),
            LayoutMode.TIMELINE.value: 0,
        },
    }


def run(args: argparse.Namespace, *, runtime: CommandRuntime) -> int:
    _ = runtime
    config = load_config(args)
    if args.file:
        dataset = load_dataset_file(args.file)
    else:
        dataset = load_dataset(
            args.input or config.loader.primary,
            args.fallback or config.loader.fallback,
            timeout_seconds=config.loader.timeout_seconds,
        )
    payload = summarize_dataset(dataset, config)

    if args.json:
        print(json.dumps(payload, indent=2))
        return 0

    print(describe_dataset(dataset))
    print(f"Source: {payload['source']}")
    print(f"Unique movies: {payload['unique_movies']}")
    print(
        "Entity nodes: "
        + ", ".join(f"{name}={count}" for name, count in sorted(payload["entity_nodes"].items()))
    )
    print(
        "Index: genres={genres} keywords={keywords} actors={actors}".format(**payload["index"])
    )
    print(
        "Similarity: candidates={candidates} scored={pairs_scored} recorded={pairs_recorded}".format(
            **payload["similarity"]
        )
    )
    print("Edges by mode:")
    for mode, count in payload["edges"].items():
        print(f"  {mode}: {count}")
    return 0
