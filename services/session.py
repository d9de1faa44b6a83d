from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db


def commit(action, conflict=None):
    """Commit the session, rolling back on any store failure.

    ``conflict`` is the error to raise instead when the store rejects the
    write on a constraint, e.g. a SKU inserted by a concurrent request.
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        if conflict is None:
            current_app.logger.exception('%s failed', action)
            raise
        current_app.logger.warning('%s rejected by the store: %s', action, exc.orig)
        raise conflict from exc
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('%s failed', action)
        raise
