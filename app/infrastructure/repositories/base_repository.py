"""
Generic SQLAlchemy repository; each aggregate repository extends it.
"""

from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.domain.repositories.base import BaseRepository, Changes
from app.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Commit-per-call repository bound to one request-scoped session."""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    @staticmethod
    def _values(obj_in: Changes) -> dict:
        if isinstance(obj_in, BaseModel):
            return obj_in.model_dump(exclude_unset=True)
        return dict(obj_in)

    def _save(self, db_obj: ModelType) -> ModelType:
        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    def get_by_id(self, id: int) -> Optional[ModelType]:
        return self.db.get(self.model, id)

    def list(self, skip: int = 0, limit: int = 100) -> List[ModelType]:
        return self.db.query(self.model).order_by(self.model.id).offset(skip).limit(limit).all()

    def create(self, obj_in: Changes) -> ModelType:
        return self._save(self.model(**self._values(obj_in)))

    def update(self, db_obj: ModelType, obj_in: Changes) -> ModelType:
        # Unknown keys are ignored so callers can pass request payloads through
        for field, value in self._values(obj_in).items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        return self._save(db_obj)
