"""
In-memory article store backed by a JSON snapshot.

The store is the only way to touch the article map and the snapshot file.
Inserts hold the exclusive lock while allocating the identifier, recording
the article and queueing the snapshot; reads hold the shared lock.
"""
import logging
from concurrent.futures import Future
from typing import Any, Dict, List, NamedTuple, Optional, Union

from website.article import Article
from website.errors import SnapshotLoadError, SnapshotWriteError
from website.id_generator import create_id_generator
from website.rw_lock import ReadWriteLock
from website.snapshot_sink import SnapshotSink
from website.snapshot_writer import SnapshotWriter

logger = logging.getLogger(__name__)

ArticleId = Union[int, str]


class InsertResult(NamedTuple):
    """Outcome of an insert: the new identifier and whether it reached disk."""

    article_id: ArticleId
    persisted: bool


class ArticleStore:
    """Authoritative mapping from identifier to article for the running process."""

    def __init__(
        self,
        writer: Optional[SnapshotWriter] = None,
        id_strategy: str = "sequential",
        articles: Optional[Dict[ArticleId, Article]] = None,
    ):
        """
        Initialize the store.

        Args:
            writer: Snapshot writer receiving every mutation (None keeps the
                store memory-only)
            id_strategy: 'sequential' or 'random'
            articles: Initial content, e.g. from a loaded snapshot
        """
        self.writer = writer
        self.id_strategy = id_strategy
        self._articles: Dict[ArticleId, Article] = dict(articles or {})
        self._lock = ReadWriteLock()
        self._id_generator = create_id_generator(id_strategy, self._articles.keys())

    @classmethod
    def load(
        cls,
        sink: SnapshotSink,
        writer: Optional[SnapshotWriter] = None,
        id_strategy: str = "sequential",
        allow_empty: bool = False,
    ) -> "ArticleStore":
        """
        Build a store from the snapshot held by a sink.

        Args:
            sink: Storage backend holding the snapshot
            writer: Snapshot writer for subsequent inserts
            id_strategy: 'sequential' or 'random'
            allow_empty: Start with an empty store instead of failing when the
                snapshot is missing or corrupt

        Returns:
            Loaded ArticleStore

        Raises:
            SnapshotLoadError: If the snapshot cannot be used and allow_empty is False
        """
        try:
            articles = parse_snapshot(sink.load(), id_strategy)
        except SnapshotLoadError as exc:
            if not allow_empty:
                raise
            logger.warning("Starting with an empty article store: %s", exc)
            articles = {}
        logger.info("Loaded %d article(s) from snapshot", len(articles))
        return cls(writer=writer, id_strategy=id_strategy, articles=articles)

    def insert(self, article: Article) -> ArticleId:
        """
        Store a new article under a fresh identifier.

        Blocks until the snapshot write has finished or failed. A failed write
        is logged and the article stays in memory.

        Args:
            article: Article to store

        Returns:
            Identifier of the stored article
        """
        return self.insert_reporting(article).article_id

    def insert_reporting(self, article: Article) -> InsertResult:
        """
        Store a new article and report whether the snapshot write succeeded.

        Args:
            article: Article to store

        Returns:
            InsertResult with the new identifier and the persistence outcome
        """
        future: Optional[Future] = None
        submit_error: Optional[SnapshotWriteError] = None
        with self._lock.write_locked():
            article_id = self._id_generator.generate_unique_id()
            # Callers keep their object; the store holds its own copy.
            self._articles[article_id] = article.model_copy(deep=True)
            if self.writer is not None:
                try:
                    future = self.writer.submit(self._snapshot_unlocked())
                except SnapshotWriteError as exc:
                    submit_error = exc
        logger.info("Inserted article %s", article_id)

        if submit_error is not None:
            logger.error("Article %s kept in memory but not persisted: %s", article_id, submit_error)
            return InsertResult(article_id, False)
        if future is None:
            return InsertResult(article_id, True)
        try:
            future.result()
        except SnapshotWriteError as exc:
            logger.error("Article %s kept in memory but not persisted: %s", article_id, exc)
            return InsertResult(article_id, False)
        return InsertResult(article_id, True)

    def get(self, article_id: ArticleId) -> Optional[Article]:
        """
        Look up an article.

        Args:
            article_id: Identifier of the article

        Returns:
            Copy of the article, or None if not found
        """
        with self._lock.read_locked():
            article = self._articles.get(article_id)
        return article.model_copy(deep=True) if article is not None else None

    def list(self) -> List[ArticleId]:
        """Return every identifier in the store, in no particular order."""
        with self._lock.read_locked():
            return list(self._articles.keys())

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Return the store content in snapshot representation."""
        with self._lock.read_locked():
            return self._snapshot_unlocked()

    def close(self) -> None:
        """Flush pending snapshot writes and stop the writer."""
        if self.writer is not None:
            self.writer.close()

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._articles)

    def __contains__(self, article_id: object) -> bool:
        with self._lock.read_locked():
            return article_id in self._articles

    def _snapshot_unlocked(self) -> Dict[str, Dict[str, Any]]:
        return {str(key): article.to_dict() for key, article in self._articles.items()}


def parse_snapshot(raw: Dict[str, Any], id_strategy: str = "sequential") -> Dict[ArticleId, Article]:
    """
    Turn a raw snapshot into an article map.

    Args:
        raw: Parsed snapshot JSON
        id_strategy: 'sequential' parses keys as positive integers,
            'random' keeps them as strings

    Returns:
        Mapping of identifier to Article

    Raises:
        SnapshotLoadError: If a key or article is malformed
    """
    articles: Dict[ArticleId, Article] = {}
    for key, value in raw.items():
        try:
            article_id = parse_article_id(key, id_strategy)
            if article_id is None:
                raise ValueError(f"invalid identifier {key!r}")
            articles[article_id] = Article.from_dict(value)
        except ValueError as exc:
            raise SnapshotLoadError(f"Malformed snapshot entry {key!r}: {exc}") from exc
    return articles


def parse_article_id(raw: str, id_strategy: str = "sequential") -> Optional[ArticleId]:
    """
    Parse an identifier received as text.

    Args:
        raw: Identifier as found in a URL or snapshot key
        id_strategy: 'sequential' or 'random'

    Returns:
        Identifier in store representation, or None if malformed
    """
    if id_strategy == "random":
        return raw or None
    if not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    # Only the canonical form is accepted, so "01" cannot alias "1".
    if value <= 0 or str(value) != raw:
        return None
    return value
