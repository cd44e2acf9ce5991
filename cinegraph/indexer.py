"""Inverted relation indices over movie nodes."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

from cinegraph.models import Node


@dataclass
class FeatureIndex:
    by_genre: dict[int, list[Node]] = field(default_factory=dict)
    by_keyword: dict[int, list[Node]] = field(default_factory=dict)
    by_actor: dict[int, list[Node]] = field(default_factory=dict)

    def genre_ids(self) -> list[int]:
        return sorted(self.by_genre)


def _add_unique(index: dict[int, list[Node]], relation_ids: Iterable[int], node: Node) -> None:
    seen: set[int] = set()
    for relation_id in relation_ids:
        if relation_id in seen:
            continue
        seen.add(relation_id)
        index[relation_id].append(node)


def build_feature_index(nodes: Iterable[Node]) -> FeatureIndex:
    by_genre: dict[int, list[Node]] = defaultdict(list)
    by_keyword: dict[int, list[Node]] = defaultdict(list)
    by_actor: dict[int, list[Node]] = defaultdict(list)

    for node in nodes:
        _add_unique(by_genre, node.genre_ids, node)
        _add_unique(by_keyword, node.keyword_ids, node)
        _add_unique(by_actor, node.actor_ids, node)

    return FeatureIndex(by_genre=dict(by_genre), by_keyword=dict(by_keyword), by_actor=dict(by_actor))
