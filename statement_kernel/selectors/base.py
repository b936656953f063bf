"""
Module: statement_kernel.selectors.base
Responsibility: Abstract base class for read-only query selectors over the
    account record store.
Architecture position: Kernel > Selectors.  May import from db/base.py and
    models/.  MUST NOT import from outer layers.

Invariants enforced:
    - Read-only access: selectors accept a Session from the caller and MUST
      NOT add, delete, flush, or commit.
    - DTO return convention: selectors return domain records, not ORM rows.
    - Session ownership: the caller owns the session and its transaction.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from statement_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(ABC, Generic[ModelType]):
    """
    Abstract base class for all selectors.

    Subclasses implement the queries; this class only holds the session.
    """

    def __init__(self, session: Session):
        self.session = session
