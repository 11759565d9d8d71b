"""
Repository contract shared by every aggregate in the storefront.
Services depend on these Protocols; the SQLAlchemy classes satisfy them.
"""

from typing import Any, List, Mapping, Optional, Protocol, TypeVar, Union

from pydantic import BaseModel

T = TypeVar("T")

# Field values for create/update: a plain mapping or a schema instance (unset fields skipped)
Changes = Union[Mapping[str, Any], BaseModel]


class BaseRepository(Protocol[T]):
    def get_by_id(self, id: int) -> Optional[T]:
        ...

    def list(self, skip: int = 0, limit: int = 100) -> List[T]:
        """Rows in the repository's natural order."""
        ...

    def create(self, obj_in: Changes) -> T:
        """Insert and commit; returns the refreshed row."""
        ...

    def update(self, db_obj: T, obj_in: Changes) -> T:
        """Apply the known fields to an existing row and commit."""
        ...
