"""Flask web API for the reading tracker.

Every route except ``/`` needs ``Authorization: Bearer <token>``. The
owner of every record comes from the verified identity, never from the
request body.
"""

import logging
from functools import wraps
from typing import Optional

from flask import Flask, current_app, g, jsonify, request
from pydantic import ValidationError as SchemaError

from .. import __version__
from ..accounts.manager import AccountManager
from ..config import get_config
from ..db.schemas import (
    BookAddRequest,
    FinishBookRequest,
    ProgressUpdate,
    schema_error_message,
)
from ..db.sqlite import Database, get_db
from ..errors import (
    AuthenticationError,
    BookkeeperError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ..reading.progress import ProgressTracker
from ..schedule.manager import PlanManager
from ..schedule.schemas import ReadingPlanRequest
from ..stats.analytics import StatsService
from .identity import Auth0IdentityProvider, IdentityProvider

logger = logging.getLogger(__name__)

STATUS_CODES = {
    ValidationError: 400,
    AuthenticationError: 401,
    NotFoundError: 404,
    ConflictError: 409,
}


def dump(model) -> dict:
    """Serialize a response model with the client's camelCase keys."""
    return model.model_dump(by_alias=True, mode="json")


def parse_body(schema):
    """Validate the JSON request body against a pydantic schema."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema.model_validate(data)
    except SchemaError as e:
        raise ValidationError(schema_error_message(e)) from e


def bearer_token() -> str:
    """Extract the bearer credential from the Authorization header."""
    header = request.headers.get("Authorization")
    if not header:
        raise AuthenticationError("Missing Authorization header")

    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization header must be 'Bearer <token>'")
    return token.strip()


def login_required(f):
    """Verify the caller's credential and expose the identity as ``g.identity``."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        provider = current_app.config["IDENTITY_PROVIDER"]
        g.identity = provider.verify(bearer_token())
        return f(*args, **kwargs)

    return decorated_function


def create_app(
    db: Optional[Database] = None,
    identity_provider: Optional[IdentityProvider] = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        db: Database instance (default: global database)
        identity_provider: Credential verifier (default: Auth0 from config)

    Raises:
        ValueError: If no identity provider is given and none is configured
    """
    config = get_config()

    if identity_provider is None:
        if not config.has_identity_config():
            raise ValueError("AUTH0_DOMAIN is not set; cannot verify credentials")
        identity_provider = Auth0IdentityProvider(
            config.auth0_domain, timeout=config.identity_timeout
        )

    app = Flask(__name__)
    app.json.sort_keys = False
    app.config["IDENTITY_PROVIDER"] = identity_provider

    database = db or get_db(str(config.db_path))
    books = ProgressTracker(database)
    plans = PlanManager(database)
    stats = StatsService(database)
    accounts = AccountManager(database)

    # -------------------- Errors --------------------

    @app.errorhandler(BookkeeperError)
    def handle_bookkeeper_error(error: BookkeeperError):
        status = STATUS_CODES.get(type(error), 500)
        if status == 500:
            logger.error("%s %s failed: %s", request.method, request.path, error)
            return jsonify({"error": "Internal Server Error"}), 500
        return jsonify({"error": str(error)}), status

    @app.errorhandler(404)
    def handle_unknown_route(error):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def handle_bad_method(error):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def handle_server_error(error):
        logger.error("Unhandled error on %s %s: %s", request.method, request.path, error)
        return jsonify({"error": "Internal Server Error"}), 500

    # -------------------- Health --------------------

    @app.route("/")
    def home():
        """Report that the backend is up."""
        return jsonify({"message": "Book Keeper backend running", "version": __version__})

    # -------------------- Accounts --------------------

    @app.route("/checkUser", methods=["POST"])
    @login_required
    def check_user():
        """Create the caller's account on first login."""
        account = accounts.ensure_account(g.identity)
        return jsonify(dump(account))

    # -------------------- Books --------------------

    @app.route("/addBook", methods=["POST"])
    @login_required
    def add_book():
        """Add a book or overwrite an existing one's details."""
        body = parse_body(BookAddRequest)
        book, created = books.add_book(g.identity.owner_id, body)
        message = "Book added successfully" if created else "Book updated successfully"
        return jsonify({"message": message, "book": dump(book)})

    @app.route("/currentBook", methods=["GET"])
    @login_required
    def get_current_book():
        """Get a book by title, or the latest unfinished one."""
        book = books.get_current_book(g.identity.owner_id, request.args.get("bookTitle"))
        return jsonify({"message": "Current book retrieved successfully", "currentBook": dump(book)})

    @app.route("/currentBook", methods=["PUT"])
    @login_required
    def update_current_book():
        """Record a new current page."""
        body = parse_body(ProgressUpdate)
        book = books.update_progress(g.identity.owner_id, body)
        return jsonify({"message": "Book progress updated successfully", "updatedBook": dump(book)})

    @app.route("/finishedBook", methods=["POST"])
    @login_required
    def finish_book():
        """Mark a book as finished."""
        body = parse_body(FinishBookRequest)
        book = books.finish_book(g.identity.owner_id, body.book_title)
        return jsonify({"message": "Book marked as finished", "book": dump(book)})

    @app.route("/history", methods=["GET"])
    @login_required
    def history():
        """List the caller's books."""
        include_complete = request.args.get("includeComplete", "true").lower() != "false"
        records = books.get_history(g.identity.owner_id, include_complete)
        return jsonify({
            "message": "Book history retrieved successfully",
            "books": [dump(book) for book in records],
        })

    # -------------------- Reading Plans --------------------

    @app.route("/readingPlans", methods=["POST"])
    @login_required
    def create_reading_plan():
        """Create or replace the plan for a book."""
        body = parse_body(ReadingPlanRequest)
        plan, created = plans.create_or_update_plan(g.identity.owner_id, body)
        message = (
            "Reading plan created successfully"
            if created
            else "Reading plan updated successfully"
        )
        return jsonify({"message": message, "readingPlan": dump(plan)})

    @app.route("/readingPlans", methods=["GET"])
    @login_required
    def list_reading_plans():
        """List the caller's plans, or one book's plan, with fresh projections."""
        title = request.args.get("bookTitle")
        if title:
            plan = plans.get_plan(g.identity.owner_id, title)
            return jsonify({"message": "Reading plan retrieved successfully", "readingPlan": dump(plan)})

        records = plans.list_plans(g.identity.owner_id)
        return jsonify({
            "message": "Reading plans retrieved successfully",
            "readingPlans": [dump(plan) for plan in records],
        })

    # -------------------- Statistics --------------------

    @app.route("/readingStats", methods=["GET"])
    @login_required
    def reading_stats():
        """Plan versus actual series for a book."""
        title = request.args.get("bookTitle")
        if not title:
            raise ValidationError("bookTitle is required")
        series = stats.reading_stats(g.identity.owner_id, title)
        return jsonify({
            "message": "Reading stats retrieved successfully",
            "stats": [dump(stat) for stat in series],
        })

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the API with Flask's built-in server."""
    config = get_config()
    app = create_app()
    host = host or config.host
    port = port or config.port
    logger.info("Book Keeper API listening on http://%s:%d", host, port)
    app.run(host=host, port=port, debug=debug)
