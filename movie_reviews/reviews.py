# movie_reviews/reviews.py
import logging
from dataclasses import asdict, dataclass
from typing import List, Optional

from sqlalchemy import text

from .errors import ConstraintViolation, translate_storage_errors

logger = logging.getLogger(__name__)

REVIEW_COLUMNS = "review_id, user_id, username, movie_id, title, body, time"


@dataclass
class Review:
    review_id: int
    user_id: int
    username: str
    movie_id: str
    title: str
    body: str
    time: str

    @classmethod
    def from_row(cls, row):
        m = row._mapping
        return cls(
            review_id=m["review_id"],
            user_id=m["user_id"],
            username=m["username"],
            movie_id=str(m["movie_id"]),
            title=m["title"],
            body=m["body"],
            time=m["time"],
        )

    def to_dict(self):
        return asdict(self)


class Reviews:
    """Reviews keyed by (user, movie). A user may review many movies."""

    def __init__(self, engine):
        self.engine = engine

    def create(self, user_id, movie_id, title, body, time) -> Review:
        params = {
            "user_id": user_id,
            "movie_id": str(movie_id),
            "title": title,
            "body": body,
            "time": time,
        }

        with translate_storage_errors("create review"):
            with self.engine.begin() as conn:
                # username is a snapshot of the author's name at posting time
                res = conn.execute(text("""
                    INSERT INTO reviews (user_id, username, movie_id, title, body, time)
                    SELECT u.user_id, u.username, :movie_id, :title, :body, :time
                    FROM users u
                    WHERE u.user_id = :user_id
                """), params)

                if res.rowcount == 0:
                    raise ConstraintViolation(f"create review: no user with id {user_id}")

                row = conn.execute(
                    text(f"SELECT {REVIEW_COLUMNS} FROM reviews WHERE review_id = :rid"),
                    {"rid": res.lastrowid},
                ).fetchone()

        review = Review.from_row(row)
        logger.info("User %s reviewed movie %s (review %s)",
                    review.user_id, review.movie_id, review.review_id)
        return review

    def all_by_user(self, user_id) -> List[Review]:
        return self._select("WHERE user_id = :user_id", {"user_id": user_id})

    def all_for_movie(self, movie_id) -> List[Review]:
        return self._select("WHERE movie_id = :movie_id", {"movie_id": str(movie_id)})

    def update(self, review_id, title, body) -> Optional[Review]:
        """Replace title and body. Returns None if the review does not exist."""
        with translate_storage_errors("update review"):
            with self.engine.begin() as conn:
                res = conn.execute(text("""
                    UPDATE reviews
                    SET title = :title, body = :body
                    WHERE review_id = :rid
                """), {"title": title, "body": body, "rid": review_id})

                if res.rowcount == 0:
                    logger.info("Update skipped, review %s not found", review_id)
                    return None

                row = conn.execute(
                    text(f"SELECT {REVIEW_COLUMNS} FROM reviews WHERE review_id = :rid"),
                    {"rid": review_id},
                ).fetchone()

        logger.info("Updated review %s", review_id)
        return Review.from_row(row)

    def delete(self, review_id) -> dict:
        with translate_storage_errors("delete review"):
            with self.engine.begin() as conn:
                res = conn.execute(
                    text("DELETE FROM reviews WHERE review_id = :rid"),
                    {"rid": review_id},
                )
                deleted = res.rowcount

        if deleted == 0:
            logger.info("Delete skipped, review %s not found", review_id)
            return {"status": "not_found"}

        logger.info("Deleted review %s", review_id)
        return {"status": "deleted"}

    def _select(self, where, params) -> List[Review]:
        sql = text(f"""
            SELECT {REVIEW_COLUMNS}
            FROM reviews
            {where}
            ORDER BY time DESC, review_id DESC
        """)

        with translate_storage_errors("list reviews"):
            with self.engine.connect() as conn:
                rows = conn.execute(sql, params).fetchall()

        logger.debug("Fetched %d reviews (%s)", len(rows), params)
        return [Review.from_row(r) for r in rows]
