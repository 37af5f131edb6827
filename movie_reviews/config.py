# movie_reviews/config.py
import os
from dotenv import load_dotenv

# Load .env from the same folder as config.py
load_dotenv(os.path.join(os.path.dirname(__file__), ".env"))


def _mysql_uri():
    user = os.getenv("DB_USER")
    password = os.getenv("DB_PASSWORD")
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "3306")
    name = os.getenv("DB_NAME")

    if not all([user, password, host, port, name]):
        return None

    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}"


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "fallback_key")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # DATABASE_URL wins over the individual DB_* variables
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL") or _mysql_uri()

    SQLALCHEMY_TRACK_MODIFICATIONS = False
