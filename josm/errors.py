import logging

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class JosmError(Exception):
    status_code = 400
    code = "error"

    def __init__(self, message=None, **extra):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.extra = extra

    def to_dict(self):
        data = {"error": self.code, "message": self.message}
        data.update(self.extra)
        return data


class NotFound(JosmError):
    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found", entity=entity, id=entity_id)


class InsufficientStock(JosmError):
    status_code = 409
    code = "insufficient_stock"

    def __init__(self, item: str, available: int, requested: int):
        super().__init__(
            f"Insufficient quantity for {item}. Available: {available}, Requested: {requested}",
            available=available,
            requested=requested,
        )
        self.available = available
        self.requested = requested


class ValidationError(JosmError):
    code = "validation_error"


class ValidationMissingField(ValidationError):
    code = "validation_missing_field"

    def __init__(self, field: str):
        super().__init__(f"{field} is required", field=field)
        self.field = field


class IllegalTransition(JosmError):
    status_code = 409
    code = "illegal_transition"


class DuplicateEntry(JosmError):
    status_code = 409
    code = "duplicate"


class PersistenceError(JosmError):
    status_code = 500
    code = "persistence_error"


def register_error_handlers(app):
    from josm.extensions import db

    @app.errorhandler(JosmError)
    def handle_josm_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err):
        db.session.rollback()
        logger.exception("persistence error")
        wrapped = PersistenceError(str(err.__class__.__name__))
        return jsonify(wrapped.to_dict()), wrapped.status_code

    @app.errorhandler(404)
    def handle_404(err):
        return jsonify({"error": "not_found", "message": "resource not found"}), 404

    @app.errorhandler(405)
    def handle_405(err):
        return jsonify({"error": "method_not_allowed", "message": str(err)}), 405
