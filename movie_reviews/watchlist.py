# movie_reviews/watchlist.py
import logging
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from sqlalchemy import text

from .errors import translate_storage_errors

logger = logging.getLogger(__name__)


@dataclass
class WatchlistEntry:
    user_id: Optional[int]
    movie_id: str

    def to_dict(self):
        return asdict(self)


@dataclass
class Watchlist:
    user_id: Optional[int]
    movie_ids: List[str] = field(default_factory=list)

    def to_dict(self):
        return asdict(self)


class Watchlists:
    def __init__(self, engine):
        self.engine = engine

    def add(self, user_id, movie_id) -> WatchlistEntry:
        # user_id may be None; such rows are stored but never retrieved
        entry = WatchlistEntry(user_id=user_id, movie_id=str(movie_id))

        with translate_storage_errors("add to watchlist"):
            with self.engine.begin() as conn:
                conn.execute(text("""
                    INSERT INTO watchlist (user_id, movie_id)
                    VALUES (:user_id, :movie_id)
                """), entry.to_dict())

        if user_id is None:
            logger.warning("Watchlist entry for movie %s stored without a user", entry.movie_id)
        else:
            logger.info("User %s added movie %s to watchlist", user_id, entry.movie_id)
        return entry

    def retrieve(self, user_id) -> Watchlist:
        with translate_storage_errors("retrieve watchlist"):
            with self.engine.connect() as conn:
                rows = conn.execute(text("""
                    SELECT movie_id
                    FROM watchlist
                    WHERE user_id = :user_id
                    GROUP BY movie_id
                    ORDER BY MIN(watchlist_id)
                """), {"user_id": user_id}).fetchall()

        logger.debug("Watchlist for user %s has %d movies", user_id, len(rows))
        return Watchlist(user_id=user_id, movie_ids=[str(r.movie_id) for r in rows])

    def delete(self, user_id, movie_id) -> bool:
        """Remove the (user, movie) pair. Returns False if it was not there."""
        with translate_storage_errors("delete from watchlist"):
            with self.engine.begin() as conn:
                res = conn.execute(text("""
                    DELETE FROM watchlist
                    WHERE user_id = :user_id AND movie_id = :movie_id
                """), {"user_id": user_id, "movie_id": str(movie_id)})
                removed = res.rowcount > 0

        if removed:
            logger.info("User %s removed movie %s from watchlist", user_id, movie_id)
        return removed
