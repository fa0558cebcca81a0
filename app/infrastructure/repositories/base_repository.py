"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar

import structlog
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from app.core.exceptions import BusinessRuleViolationException, DuplicateResourceException
from app.domain.repositories.base import BaseRepository
from app.domain.schemas.common import Page, PageRequest
from app.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)

logger = structlog.get_logger(__name__)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models.

    Subclasses list the relationships every read must eager-load in
    ``load_options``; models declare their relations ``raise_on_sql`` so a
    missing option fails loudly instead of issuing a hidden query.
    """

    resource_name: str = "Entity"
    load_options: Sequence[Any] = ()

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def _query(self) -> Query:
        query = self.db.query(self.model)
        if self.load_options:
            query = query.options(*self.load_options)
        return query

    def _order_by(self) -> Sequence[Any]:
        return [column for column in self.model.__mapper__.primary_key]

    def _paginate(self, query: Query, page: PageRequest) -> Page:
        total = query.enable_eagerloads(False).order_by(None).count()
        items = query.order_by(*self._order_by()).offset(page.offset).limit(page.page_size).all()
        return Page.build(items, total, page)

    def get_by_id(self, id: Any) -> Optional[ModelType]:
        if not self.load_options:
            return self.db.get(self.model, id)
        return self._query().filter(self.model.id == id).first()

    def list(self, page: PageRequest) -> Page:
        return self._paginate(self._query(), page)

    def list_all(self) -> List[ModelType]:
        return self._query().order_by(*self._order_by()).all()

    def count(self) -> int:
        return self.db.query(self.model).count()

    def create(self, entity: ModelType) -> ModelType:
        self.db.add(entity)
        self._commit()
        return entity

    def update(self, entity: ModelType) -> ModelType:
        self.db.add(entity)
        self._commit()
        return entity

    def delete(self, entity: ModelType) -> None:
        self.db.delete(entity)
        self._commit()

    def exists_by(self, column: Any, value: Any) -> bool:
        return self.db.query(self.db.query(self.model).filter(column == value).exists()).scalar()

    def find_one_by(self, column: Any, value: Any) -> Optional[ModelType]:
        return self._query().filter(column == value).first()

    def search(self, term: str, *columns: Any, page: PageRequest) -> Page:
        pattern = f"%{term}%"
        query = self._query().filter(or_(*(column.ilike(pattern) for column in columns)))
        return self._paginate(query, page)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("Integrity error", resource=self.resource_name, error=str(exc.orig))
            # SQLite: "UNIQUE constraint failed"; PostgreSQL: "violates unique constraint"
            if "unique" in str(exc.orig).lower():
                raise DuplicateResourceException(self.resource_name) from exc
            raise BusinessRuleViolationException(
                f"{self.resource_name} violates a data integrity rule"
            ) from exc
