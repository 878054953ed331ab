from flask import current_app
from sqlalchemy.exc import IntegrityError

from extensions import db
from rentals.errors import ConflictError, DomainError, NotFoundError


def commit_or_rollback():
    """Commit the session, turning constraint violations into ConflictError"""
    try:
        db.session.commit()
    except DomainError:
        db.session.rollback()
        raise
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.warning(f'Integrity violation: {e.orig}')
        raise ConflictError(str(e.orig)) from e


def get_or_404(model, ident, label=None):
    instance = db.session.get(model, ident)
    if instance is None:
        raise NotFoundError(f'{label or model.__name__} not found')
    return instance
