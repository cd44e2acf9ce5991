"""Core domain models for cinegraph.

Input records are pydantic models validated straight from the dataset JSON.
Graph nodes and links are plain dataclasses because the layout simulation
mutates node positions on every tick.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NodeType(str, Enum):
    MOVIE = "movie"
    GENRE = "genre"
    PERSON = "person"
    KEYWORD = "keyword"


class LinkType(str, Enum):
    GENRE = "genre"
    CAST = "cast"
    KEYWORD = "keyword"


class LayoutMode(str, Enum):
    SIMILARITY = "similarity"
    COACTOR = "coactor"
    TIMELINE = "timeline"
    ENTITY = "entity"

    @property
    def is_analytical(self) -> bool:
        return self is not LayoutMode.ENTITY

    @property
    def uses_links(self) -> bool:
        return self is not LayoutMode.TIMELINE


class GenreRef(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str = ""


class KeywordRef(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str = ""


class CastMember(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str = ""
    character: str | None = None


class MovieRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    title: str = ""
    release_date: str | None = None
    runtime: int | None = None
    genres: list[GenreRef] = Field(default_factory=list)
    cast: list[CastMember] = Field(default_factory=list)
    keywords: list[KeywordRef] = Field(default_factory=list)

    @field_validator("genres", "cast", "keywords", mode="before")
    @classmethod
    def _absent_relations_are_empty(cls, value: Any) -> Any:
        # Reduced datasets drop relation arrays or serialize them as null.
        if value is None:
            return []
        return value


class MovieDataset(BaseModel):
    model_config = ConfigDict(extra="ignore")

    fetched_at: str | None = None
    source: str = "unknown"
    movies: list[MovieRecord] = Field(default_factory=list)


@dataclass(eq=False)
class Node:
    id: str
    label: str
    type: NodeType
    release_date: str | None = None
    runtime: int | None = None
    year: int | None = None
    genre_ids: list[int] = field(default_factory=list)
    actor_ids: list[int] = field(default_factory=list)
    keyword_ids: list[int] = field(default_factory=list)
    index: int = -1
    x: float | None = None
    y: float | None = None
    vx: float = 0.0
    vy: float = 0.0
    fx: float | None = None
    fy: float | None = None

    @property
    def is_movie(self) -> bool:
        return self.type == NodeType.MOVIE

    @property
    def pinned(self) -> bool:
        return self.fx is not None or self.fy is not None


@dataclass(frozen=True)
class Link:
    source: str
    target: str
    type: LinkType | None = None
    weight: float | None = None

    @property
    def key(self) -> tuple[str, str]:
        return pair_key(self.source, self.target)


@dataclass
class Graph:
    nodes: list[Node] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    node_map: dict[str, Node] = field(default_factory=dict)

    def node(self, node_id: str) -> Node:
        return self.node_map[node_id]

    def movie_nodes(self) -> list[Node]:
        return [node for node in self.nodes if node.is_movie]

    def count_by_type(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for node in self.nodes:
            counts[node.type.value] = counts.get(node.type.value, 0) + 1
        return counts


def pair_key(a: str, b: str) -> tuple[str, str]:
    return (a, b) if a < b else (b, a)


def movie_node_id(movie_id: int) -> str:
    return f"movie-{movie_id}"
