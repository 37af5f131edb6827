# movie_reviews/app.py
import logging
import os

from flask import Flask, current_app, jsonify

from .config import Config
from .errors import ConstraintViolation, StorageUnavailable, ValidationError
from .models import db
from .reviews import Reviews
from .schemas import ReviewIn, ReviewUpdate, SignUp, WatchlistEntryIn, validate_body
from .users import UserAccounts
from .watchlist import Watchlists

logger = logging.getLogger(__name__)


def _stores():
    return current_app.extensions["movie_reviews"]


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise ValueError("Missing database settings: set DATABASE_URL or DB_USER/DB_PASSWORD/DB_NAME")

    db.init_app(app)

    # Ensure DB tables exist; the engine is shared by every store
    with app.app_context():
        db.create_all()
        engine = db.engine

    app.extensions["movie_reviews"] = {
        "users": UserAccounts(engine),
        "reviews": Reviews(engine),
        "watchlist": Watchlists(engine),
    }
    logger.info("Connected to %s", engine.url.render_as_string(hide_password=True))

    # ---------------- ERRORS ----------------
    @app.errorhandler(ValidationError)
    def bad_request(e):
        return jsonify({"error": "invalid request", "details": e.problems}), 400

    @app.errorhandler(ConstraintViolation)
    def conflict(e):
        return jsonify({"error": str(e)}), 409

    @app.errorhandler(StorageUnavailable)
    def unavailable(e):
        return jsonify({"error": "database unavailable"}), 503

    # ---------------- SIGN UP ----------------
    @app.route("/users", methods=["POST"])
    @validate_body(SignUp)
    def sign_up(payload):
        user_id = _stores()["users"].sign_up(payload.username, payload.email, payload.password)
        return jsonify({"user_id": user_id}), 201

    # ---------------- REVIEWS ----------------
    @app.route("/reviews", methods=["POST"])
    @validate_body(ReviewIn)
    def create_review(payload):
        review = _stores()["reviews"].create(
            payload.user_id, payload.movie_id, payload.title, payload.body, payload.time
        )
        return jsonify(review.to_dict()), 201

    @app.route("/users/<int:user_id>/reviews")
    def user_reviews(user_id):
        reviews = _stores()["reviews"].all_by_user(user_id)
        return jsonify([r.to_dict() for r in reviews])

    @app.route("/movies/<movie_id>/reviews")
    def movie_reviews(movie_id):
        reviews = _stores()["reviews"].all_for_movie(movie_id)
        return jsonify([r.to_dict() for r in reviews])

    @app.route("/reviews/<int:review_id>", methods=["PATCH"])
    @validate_body(ReviewUpdate)
    def update_review(payload, review_id):
        review = _stores()["reviews"].update(review_id, payload.title, payload.body)
        if review is None:
            return jsonify({"error": "not found"}), 404
        return jsonify(review.to_dict())

    @app.route("/reviews/<int:review_id>", methods=["DELETE"])
    def delete_review(review_id):
        result = _stores()["reviews"].delete(review_id)
        if result["status"] != "deleted":
            return jsonify({"error": "not found"}), 404
        return jsonify(result)

    # ---------------- WATCHLIST ----------------
    @app.route("/watchlist", methods=["POST"])
    @validate_body(WatchlistEntryIn)
    def add_to_watchlist(payload):
        entry = _stores()["watchlist"].add(payload.user_id, payload.movie_id)
        return jsonify(entry.to_dict()), 201

    @app.route("/users/<int:user_id>/watchlist")
    def get_watchlist(user_id):
        return jsonify(_stores()["watchlist"].retrieve(user_id).to_dict())

    @app.route("/users/<int:user_id>/watchlist/<movie_id>", methods=["DELETE"])
    def remove_from_watchlist(user_id, movie_id):
        if not _stores()["watchlist"].delete(user_id, movie_id):
            return jsonify({"error": "not found"}), 404
        return jsonify({"status": "deleted"})

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=(os.getenv("FLASK_ENV") == "development"))
