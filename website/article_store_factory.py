"""
Factory function for creating the article store.
"""
from typing import Optional

from website.article_store import ArticleStore
from website.config import Config
from website.local_disk_snapshot_sink import LocalDiskSnapshotSink
from website.snapshot_writer import SnapshotWriter


def create_article_store(config: Optional[Config] = None) -> ArticleStore:
    """
    Create the article store described by the configuration.

    Loads the snapshot from STATE_DIR/ARTICLES_FILE and starts the snapshot
    writer thread.

    Args:
        config: Configuration to use (default: loaded from the environment)

    Returns:
        ArticleStore: Loaded store

    Raises:
        SnapshotLoadError: If the snapshot cannot be read and
            ALLOW_EMPTY_STORE is not set
    """
    config = config or Config()
    sink = LocalDiskSnapshotSink(state_dir=config.state_dir, filename=config.articles_file)
    store = ArticleStore.load(
        sink,
        id_strategy=config.id_strategy,
        allow_empty=config.allow_empty_store,
    )
    # The writer thread starts only once the snapshot is known to be usable.
    store.writer = SnapshotWriter(
        sink,
        retries=config.snapshot_write_retries,
        retry_delay=config.snapshot_retry_delay,
    )
    return store
