"""
Pytest configuration and fixtures for the Flashpoint packer.

Builds a small on-disk catalogue (SQLite database, content tree, image tree
and auxiliary trees) so tests exercise real files rather than mocks.
"""

import shutil
import sqlite3
import tempfile
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, Generator, Iterator, List, Sequence, Tuple

import pytest

from flashpoint_packer.core.config import Config

BUILD_DATE = date(2024, 3, 9)
RESTRICTED_TAGS = ["Extreme", "Gore"]

SCHEMA = """
CREATE TABLE platform_alias (name TEXT);
CREATE TABLE game (id TEXT PRIMARY KEY, tagsStr TEXT, platformsStr TEXT);
CREATE TABLE game_data (gameId TEXT, path TEXT);
"""


@dataclass
class Catalog:
    """Paths of a generated test catalogue."""

    root: Path
    database: Path
    content: Path
    images: Path
    output: Path
    legacy: Path
    extras: Path


@dataclass
class Game:
    id: str
    tags: str
    platforms: str
    paths: List[str] = field(default_factory=list)


def write_catalog(database: Path, platforms: Sequence[str], games: Sequence[Game]) -> None:
    with sqlite3.connect(database) as conn:
        conn.executescript(SCHEMA)
        conn.executemany(
            "INSERT INTO platform_alias (name) VALUES (?)", [(p,) for p in platforms]
        )
        conn.executemany(
            "INSERT INTO game (id, tagsStr, platformsStr) VALUES (?, ?, ?)",
            [(g.id, g.tags, g.platforms) for g in games],
        )
        conn.executemany(
            "INSERT INTO game_data (gameId, path) VALUES (?, ?)",
            [(g.id, p) for g in games for p in g.paths],
        )
    conn.close()


def write_file(path: Path, content: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def write_images(images_root: Path, item_id: str) -> None:
    for folder in ("Logos", "Screenshots"):
        write_file(
            images_root / folder / item_id[:2] / item_id[2:4] / f"{item_id}.png",
            f"{folder}-{item_id}".encode(),
        )


class FakeSource:
    """In-memory catalogue source with the same over-matching as SQL LIKE."""

    def __init__(
        self,
        categories: Sequence[str],
        content: Sequence[Tuple[str, str, str]] = (),
        images: Sequence[Tuple[str, str, str]] = (),
    ):
        self.categories = list(categories)
        self.content = list(content)
        self.images = list(images)

    def list_categories(self) -> List[str]:
        return list(self.categories)

    def content_rows(self, category: str) -> Iterator[Tuple[str, str, str]]:
        return iter([row for row in self.content if category in row[2]])

    def image_rows(self, category: str) -> Iterator[Tuple[str, str, str]]:
        return iter([row for row in self.images if category in row[2]])


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    path = Path(tempfile.mkdtemp())
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def catalog(temp_dir: Path) -> Catalog:
    """Category "X" with two standard items and one restricted item.

    Also holds a "Super X Extended" item that a substring match would wrongly
    place in "X", and an "Empty" category with no items.
    """
    root = temp_dir
    cat = Catalog(
        root=root,
        database=root / "flashpoint.sqlite",
        content=root / "Games",
        images=root / "Images",
        output=root / "out",
        legacy=root / "Legacy",
        extras=root / "Extras",
    )

    games = [
        Game("aabbcc01", "Action; Platformer", "X", ["X/alpha.zip"]),
        Game("ddeeff02", "Puzzle", "Y; X", ["X/beta.zip"]),
        Game("gghhii03", "Action; Extreme", "X", ["X/gamma.zip"]),
        Game("jjkkll04", "Racing", "Super X Extended", ["Super/delta.zip"]),
    ]
    write_catalog(cat.database, ["X", "Y", "Super X Extended", "Empty"], games)

    for game in games:
        for rel in game.paths:
            write_file(cat.content / rel, f"content of {rel}".encode() * 64)
        write_images(cat.images, game.id)

    write_file(cat.legacy / "htdocs" / "index.html", b"<html></html>")
    write_file(cat.legacy / "readme.txt", b"legacy")
    (cat.legacy / "logs").mkdir(parents=True)
    write_file(cat.extras / "manual.pdf", b"%PDF-1.4")

    return cat


def make_config(catalog: Catalog, **overrides: object) -> Config:
    data: Dict[str, object] = {
        "database_path": str(catalog.database),
        "output_path": str(catalog.output),
        "restricted_tags": list(RESTRICTED_TAGS),
        "source_paths": {
            "content": str(catalog.content),
            "images": str(catalog.images),
            "legacy": str(catalog.legacy),
            "extras": str(catalog.extras),
        },
        "zipped_paths": {
            "content": "Data/Games",
            "images": "Data/Images",
            "legacy": "Legacy",
            "extras": "Extras",
        },
    }
    data.update(overrides)
    return Config.from_dict(data)


@pytest.fixture
def test_config(catalog: Catalog) -> Config:
    return make_config(catalog)

