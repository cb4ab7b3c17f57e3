# crud/base.py
from __future__ import annotations

from typing import Any, Generic, Mapping, TypeVar, Optional, Iterable
from pydantic import BaseModel
from sqlalchemy import false, func, select
from sqlalchemy.orm import Session

from models.base import Base

# ---- generic types ----
ModelT = TypeVar("ModelT", bound=Base)


class CRUDBase(Generic[ModelT]):
    """
    Shared single-table CRUD.
    - get, get_multi, count, create, update
    - every write commits its own single-row transaction
    """

    def __init__(self, model: type[ModelT]):
        self.model = model

    # ---------- internal ----------
    def _to_data(self, obj: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
        if isinstance(obj, BaseModel):
            return obj.model_dump(exclude_unset=True)
        return dict(obj)

    def _apply_filters(self, query, filters: Optional[Mapping[str, Any]]):
        if not filters:
            return query
        for k, v in filters.items():
            col = getattr(self.model, k, None)
            if col is None:
                raise ValueError(f"unknown filter column: {self.model.__name__}.{k}")
            if v is None:
                query = query.where(col.is_(None))
            elif isinstance(v, (list, tuple, set)):
                # empty IN -> no rows
                query = query.where(col.in_(list(v))) if v else query.where(false())
            else:
                query = query.where(col == v)
        return query

    def _apply_order_by(self, query, order_by: Optional[Iterable[str]]):
        if not order_by:
            return query
        clauses = []
        for field in order_by:
            desc = field.startswith("-")
            name = field[1:] if desc else field
            col = getattr(self.model, name, None)
            if col is None:
                raise ValueError(f"unknown order column: {self.model.__name__}.{name}")
            clauses.append(col.desc() if desc else col.asc())
        return query.order_by(*clauses)

    # ---------- CRUD ----------
    def get(self, db: Session, id: Any) -> Optional[ModelT]:
        return db.get(self.model, id)

    def get_multi(
        self,
        db: Session,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[Iterable[str]] = None,
    ) -> list[ModelT]:
        stmt = select(self.model)
        stmt = self._apply_filters(stmt, filters)
        stmt = self._apply_order_by(stmt, order_by)
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        return list(db.execute(stmt).scalars().all())

    def count(self, db: Session, *, filters: Optional[Mapping[str, Any]] = None) -> int:
        stmt = self._apply_filters(select(func.count()).select_from(self.model), filters)
        return int(db.execute(stmt).scalar() or 0)

    def create(self, db: Session, *, obj_in: BaseModel | Mapping[str, Any]) -> ModelT:
        db_obj: ModelT = self.model(**self._to_data(obj_in))  # type: ignore[arg-type]
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelT,
        obj_in: BaseModel | Mapping[str, Any],
    ) -> ModelT:
        for field, value in self._to_data(obj_in).items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

