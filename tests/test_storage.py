from pathlib import Path

from cinegraph.storage import SQLiteStorage


def test_sqlite_storage_round_trips_preferences(tmp_path: Path) -> None:
    db_path = tmp_path / "nested" / "cinegraph.db"
    storage = SQLiteStorage(db_path)

    assert db_path.exists()
    assert storage.get_preference("layout_mode") is None
    assert storage.get_preference("layout_mode", "similarity") == "similarity"

    storage.set_preference("layout_mode", "timeline")
    storage.set_preference("layout_mode", "coactor")
    storage.set_preference("theme", "dark")

    reopened = SQLiteStorage(db_path)
    assert reopened.get_preference("layout_mode") == "coactor"
    assert reopened.list_preferences() == {"layout_mode": "coactor", "theme": "dark"}
