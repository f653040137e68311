from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from apihub.extensions import db
from apihub.domain.errors import StorageFailure

@contextmanager
def transactional():
    """
    Context manager for database transactions.

    Backend errors surface as StorageFailure and are never retried here.
    """
    try:
        yield
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageFailure(str(exc.__class__.__name__)) from exc
    except Exception:
        db.session.rollback()
        raise
