"""Pairwise movie scoring: feature-set Jaccard and shared-actor counts."""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass

from cinegraph.indexer import FeatureIndex, build_feature_index
from cinegraph.models import Node, pair_key

logger = logging.getLogger(__name__)

Adjacency = dict[str, dict[str, float]]


@dataclass
class SimilarityStats:
    nodes_total: int = 0
    candidate_links_generated: int = 0
    unique_pairs_scored: int = 0
    pairs_recorded: int = 0


def feature_tags(node: Node) -> set[str]:
    tags = {f"g:{genre_id}" for genre_id in node.genre_ids}
    tags.update(f"k:{keyword_id}" for keyword_id in node.keyword_ids)
    return tags


def jaccard(items_a: set[str], items_b: set[str]) -> float:
    if not items_a or not items_b:
        return 0.0
    return len(items_a & items_b) / len(items_a | items_b)


def record_weight(adjacency: Adjacency, a: str, b: str, weight: float) -> None:
    """Store ``weight`` for the pair on both sides, keeping the larger value."""
    current = adjacency.get(a, {}).get(b)
    if current is not None and current >= weight:
        return
    adjacency.setdefault(a, {})[b] = weight
    adjacency.setdefault(b, {})[a] = weight


def _candidates(node: Node, index: FeatureIndex) -> dict[str, Node]:
    found: dict[str, Node] = {}
    for genre_id in node.genre_ids:
        for other in index.by_genre.get(genre_id, []):
            if other.id != node.id:
                found.setdefault(other.id, other)
    for keyword_id in node.keyword_ids:
        for other in index.by_keyword.get(keyword_id, []):
            if other.id != node.id:
                found.setdefault(other.id, other)
    return found


def compute_similarity_adjacency_with_stats(
    nodes: Sequence[Node],
    index: FeatureIndex | None = None,
) -> tuple[Adjacency, SimilarityStats]:
    start = time.perf_counter()
    idx = index or build_feature_index(nodes)
    tags = {node.id: feature_tags(node) for node in nodes}
    adjacency: Adjacency = {}
    stats = SimilarityStats(nodes_total=len(nodes))

    for node in nodes:
        candidates = _candidates(node, idx)
        stats.candidate_links_generated += len(candidates)
        for other_id in candidates:
            # Both sides discover the pair; only the lower id scores it.
            if node.id >= other_id:
                continue
            stats.unique_pairs_scored += 1
            score = jaccard(tags[node.id], tags.get(other_id, set()))
            if score <= 0.0:
                continue
            record_weight(adjacency, node.id, other_id, score)
            stats.pairs_recorded += 1

    logger.debug(
        "Similarity scoring: nodes=%s candidates=%s scored=%s recorded=%s elapsed=%.3fs",
        stats.nodes_total,
        stats.candidate_links_generated,
        stats.unique_pairs_scored,
        stats.pairs_recorded,
        time.perf_counter() - start,
    )
    return adjacency, stats


def compute_similarity_adjacency(nodes: Sequence[Node], index: FeatureIndex | None = None) -> Adjacency:
    adjacency, _ = compute_similarity_adjacency_with_stats(nodes, index)
    return adjacency


def compute_coactor_adjacency(
    nodes: Sequence[Node],
    index: FeatureIndex | None = None,
    *,
    saturation: int = 2,
) -> Adjacency:
    """Weight movie pairs by shared actors, saturating at ``saturation`` shared actors."""
    if saturation <= 0:
        raise ValueError("saturation must be positive")

    idx = index or build_feature_index(nodes)
    counts: dict[tuple[str, str], int] = defaultdict(int)
    for movies in idx.by_actor.values():
        for i, left in enumerate(movies):
            for right in movies[i + 1 :]:
                if left.id == right.id:
                    continue
                counts[pair_key(left.id, right.id)] += 1

    adjacency: Adjacency = {}
    for (a, b), count in counts.items():
        record_weight(adjacency, a, b, min(1.0, count / saturation))

    logger.debug("Co-actor scoring: actors=%s pairs=%s", len(idx.by_actor), len(counts))
    return adjacency
