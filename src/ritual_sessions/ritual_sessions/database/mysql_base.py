from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """Run one repository call as one transaction.

    Yields ``(connection, cursor)``. Commits when the block exits cleanly and
    rolls back if it raises; the exception is re-raised unchanged.
    """
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
    except Exception:
        conn.rollback()
        logger.warning("Rolled back transaction on %s", conn_factory.config.describe())
        raise
    else:
        conn.commit()
    finally:
        cur.close()
        conn.close()


def first_row(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def all_rows(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])
