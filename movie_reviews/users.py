# movie_reviews/users.py
import logging

from sqlalchemy import text
from werkzeug.security import generate_password_hash

from .errors import translate_storage_errors

logger = logging.getLogger(__name__)


class UserAccounts:
    def __init__(self, engine):
        self.engine = engine

    def sign_up(self, username: str, email: str, password: str) -> int:
        """Store a new user and return the generated ``user_id``.

        Raises ``ConstraintViolation`` if the username or email is taken.
        """
        pwd_hash = generate_password_hash(password)

        with translate_storage_errors("sign up"):
            with self.engine.begin() as conn:
                res = conn.execute(text("""
                    INSERT INTO users (username, email, password_hash, created_at)
                    VALUES (:username, :email, :pwd_hash, CURRENT_TIMESTAMP)
                """), {"username": username, "email": email, "pwd_hash": pwd_hash})
                user_id = res.lastrowid

        logger.info("Signed up user %s (%s)", user_id, username)
        return user_id
