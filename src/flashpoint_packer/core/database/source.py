"""
Read-only catalogue data source backed by SQLite.

Exposes the two query shapes the grouper needs: the distinct category list
and, per category, the content and image rows. Every failure is wrapped in
``DataSourceError`` because the manifest cannot be trusted without a
complete read of the catalogue.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Iterator, List, Optional, Protocol, Tuple, Union

from ..exceptions import DataSourceError

logger = logging.getLogger(__name__)

# (relative file path, tags string, category membership string)
ContentRow = Tuple[str, str, str]
# (item identifier, tags string, category membership string)
ImageRow = Tuple[str, str, str]

CATEGORIES_QUERY = "SELECT DISTINCT name FROM platform_alias"
CONTENT_ROWS_QUERY = (
    "SELECT game_data.path, game.tagsStr, game.platformsStr "
    "FROM game_data JOIN game ON game_data.gameId = game.id "
    "AND game.platformsStr LIKE ?"
)
IMAGE_ROWS_QUERY = "SELECT id, tagsStr, platformsStr FROM game WHERE platformsStr LIKE ?"


class CatalogSource(Protocol):
    """Read-only view of the content catalogue."""

    def list_categories(self) -> List[str]:
        """Return every distinct category name."""
        ...

    def content_rows(self, category: str) -> Iterator[ContentRow]:
        """Yield content rows whose membership may include ``category``."""
        ...

    def image_rows(self, category: str) -> Iterator[ImageRow]:
        """Yield image rows whose membership may include ``category``."""
        ...


class SQLiteCatalogSource:
    """Catalogue source reading a Flashpoint SQLite database.

    The connection is opened with ``mode=ro`` so the packer can never modify
    the source of truth. Membership queries use ``LIKE`` and therefore
    over-match; callers must re-check membership token by token.
    """

    def __init__(self, db_path: Union[str, Path], timeout: float = 30.0):
        self.db_path = Path(db_path)
        self.timeout = timeout
        self._conn: Optional[sqlite3.Connection] = None

    def open(self) -> None:
        """Open the read-only connection."""
        if self._conn is not None:
            return
        if not self.db_path.is_file():
            raise DataSourceError(
                "open", f"database not found: {self.db_path}", component="database"
            )
        try:
            self._conn = sqlite3.connect(
                f"{self.db_path.resolve().as_uri()}?mode=ro",
                uri=True,
                timeout=self.timeout,
            )
        except sqlite3.Error as e:
            raise DataSourceError("open", str(e), component="database") from e
        logger.info(f"Opened catalogue database {self.db_path}")

    def close(self) -> None:
        """Close the connection if it is open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "SQLiteCatalogSource":
        self.open()
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    @contextmanager
    def _cursor(self, query_name: str) -> Generator[sqlite3.Cursor, None, None]:
        """Yield a cursor, translating SQLite failures into DataSourceError."""
        self.open()
        if self._conn is None:
            raise DataSourceError(
                query_name, "connection is not open", component="database"
            )
        cursor = self._conn.cursor()
        try:
            yield cursor
        except sqlite3.Error as e:
            raise DataSourceError(query_name, str(e), component="database") from e
        finally:
            cursor.close()

    def list_categories(self) -> List[str]:
        with self._cursor("list_categories") as cursor:
            cursor.execute(CATEGORIES_QUERY)
            return [row[0] for row in cursor.fetchall() if row[0] is not None]

    def content_rows(self, category: str) -> Iterator[ContentRow]:
        with self._cursor("content_rows") as cursor:
            cursor.execute(CONTENT_ROWS_QUERY, (f"%{category}%",))
            for path, tags, membership in cursor:
                yield path, tags or "", membership or ""

    def image_rows(self, category: str) -> Iterator[ImageRow]:
        with self._cursor("image_rows") as cursor:
            cursor.execute(IMAGE_ROWS_QUERY, (f"%{category}%",))
            for item_id, tags, membership in cursor:
                yield item_id, tags or "", membership or ""
