"""Dataset loading from local files or HTTP sources."""

from __future__ import annotations

import json
import logging
import urllib.request
from pathlib import Path

from pydantic import ValidationError

from cinegraph.models import MovieDataset

logger = logging.getLogger(__name__)


class DatasetUnavailableError(RuntimeError):
    """Neither the primary nor the fallback dataset could be loaded."""


class InvalidDatasetFileError(ValueError):
    """A user-supplied dataset file is not valid dataset JSON."""


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def read_source(source: str | Path, *, timeout_seconds: float = 10.0) -> str:
    text = str(source)
    if is_url(text):
        req = urllib.request.Request(text, headers={"Accept": "application/json"}, method="GET")
        with urllib.request.urlopen(req, timeout=timeout_seconds) as response:
            return response.read().decode("utf-8")
    return Path(text).read_text(encoding="utf-8")


def parse_dataset(text: str) -> MovieDataset:
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError("Dataset JSON must be an object with a 'movies' array")
    return MovieDataset.model_validate(payload)


def fetch_dataset(source: str | Path, *, timeout_seconds: float = 10.0) -> MovieDataset:
    return parse_dataset(read_source(source, timeout_seconds=timeout_seconds))


def load_dataset(
    primary: str | Path,
    fallback: str | Path | None = None,
    *,
    timeout_seconds: float = 10.0,
) -> MovieDataset:
    """Try the primary source, then the fallback; raise when neither yields a dataset."""
    sources = [primary] if fallback is None else [primary, fallback]
    failures: list[str] = []
    for source in sources:
        try:
            dataset = fetch_dataset(source, timeout_seconds=timeout_seconds)
        except (OSError, ValueError) as exc:
            # HTTP errors, missing files, bad JSON and schema errors all land here.
            logger.warning("Could not load dataset from %s: %s", source, exc)
            failures.append(f"{source}: {exc}")
            continue
        logger.info("Loaded %s movies from %s", len(dataset.movies), source)
        return dataset
    raise DatasetUnavailableError("No dataset available (" + "; ".join(failures) + ")")


def load_dataset_file(path: str | Path) -> MovieDataset:
    try:
        text = Path(path).read_text(encoding="utf-8")
        dataset = parse_dataset(text)
    except (OSError, ValueError, ValidationError) as exc:
        raise InvalidDatasetFileError(f"Could not parse dataset file {path}: {exc}") from exc
    logger.info("Loaded %s movies from file %s", len(dataset.movies), path)
    return dataset
