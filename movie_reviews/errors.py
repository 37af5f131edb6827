"""Exceptions raised by the movie reviews backend.

Store failures come out of the data-access classes as ``StorageError``
subclasses with the SQLAlchemy exception chained as ``__cause__``. Nothing
here retries; callers decide what to do.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

logger = logging.getLogger(__name__)


class MovieReviewsError(Exception):
    pass


class ValidationError(MovieReviewsError):
    """Request body rejected before it reached the store."""

    def __init__(self, problems):
        self.problems = problems
        super().__init__(f"invalid request: {problems}")


class StorageError(MovieReviewsError):
    pass


class ConstraintViolation(StorageError):
    """The store refused a write: duplicate key or missing foreign key."""


class StorageUnavailable(StorageError):
    """The store could not be reached or the pool is exhausted."""


@contextmanager
def translate_storage_errors(operation):
    try:
        yield
    except IntegrityError as exc:
        logger.warning("%s rejected by store: %s", operation, exc.orig)
        raise ConstraintViolation(f"{operation}: {exc.orig}") from exc
    except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
        logger.error("%s failed, store unavailable: %s", operation, exc)
        raise StorageUnavailable(f"{operation}: store unavailable") from exc
