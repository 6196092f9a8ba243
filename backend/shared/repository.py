"""
Base repository classes for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access, and the per-user collection used by every entity
kind (tasks, sections, habits, timers).
"""

import logging
from typing import Any, ClassVar, Generic, Optional, TypeVar

import httpx
from postgrest.exceptions import APIError
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from supabase import Client

from .exceptions import BackendError, DecodingError

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_FIELDS_ADAPTER = TypeAdapter(dict[str, Any])


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - _execute(), which turns Supabase failures into BackendError

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _execute(self, query: Any, operation: str, table: str) -> Any:
        """Run a query builder, mapping client errors to BackendError."""
        try:
            return query.execute()
        except (APIError, httpx.HTTPError) as e:
            message = getattr(e, "message", None) or str(e)
            logger.warning(f"Supabase {operation} on {table} failed: {message}")
            raise BackendError(message, operation=operation, collection=table) from e


class UserCollection(BaseRepository[M]):
    """
    One entity kind's documents for one user.

    Every query is filtered on user_id, so a collection can never read or
    write another user's rows even through the service-role client.

    Subclasses set the class attributes:
        table: Table name
        model: Pydantic model each row decodes into
        key_column: Column identifying a document within the user's rows
        order_column / order_desc: Ordering applied by list_all()
        skip_undecodable: Log and drop rows that fail to decode instead of
            aborting the whole fetch
        server_columns: Columns the database fills in when left out
    """

    table: ClassVar[str]
    model: ClassVar[type[BaseModel]]
    key_column: ClassVar[str] = "id"
    order_column: ClassVar[Optional[str]] = None
    order_desc: ClassVar[bool] = False
    skip_undecodable: ClassVar[bool] = True
    server_columns: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, db: Client, user_id: str) -> None:
        super().__init__(db)
        self._user_id = user_id

    @property
    def user_id(self) -> str:
        return self._user_id

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_all(self) -> list[M]:
        """
        Fetch every document in the collection.

        There is no pagination: per-user volumes are small and every fetch
        re-enumerates the whole collection.

        Raises:
            BackendError: If the query fails
            DecodingError: If a row fails to decode and skip_undecodable is off
        """
        query = self._scoped(self._db.table(self.table).select("*"))
        if self.order_column:
            query = query.order(self.order_column, desc=self.order_desc)
        result = self._execute(query, "list", self.table)

        entities: list[M] = []
        for row in result.data or []:
            try:
                entities.append(self._decode(row))
            except DecodingError as e:
                if not self.skip_undecodable:
                    raise
                logger.warning(f"Skipping document: {e.message}")
        return entities

    def get(self, key: str) -> Optional[M]:
        """Fetch one document by key, or None if it doesn't exist."""
        query = self._scoped(self._db.table(self.table).select("*")).eq(self.key_column, key)
        result = self._execute(query, "get", self.table)
        if not result.data:
            return None
        return self._decode(result.data[0])

    def exists(self, key: str) -> bool:
        """Check whether a document exists without decoding it."""
        query = self._scoped(self._db.table(self.table).select(self.key_column)).eq(
            self.key_column, key
        )
        result = self._execute(query, "exists", self.table)
        return bool(result.data)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def upsert(self, entity: M) -> M:
        """
        Write a whole document, replacing any existing one with the same key.

        Returns:
            The stored document, including columns filled in by the database.
        """
        query = self._db.table(self.table).upsert(self._encode(entity))
        result = self._execute(query, "upsert", self.table)
        if result.data:
            return self._decode(result.data[0])
        return entity

    def update(self, key: str, fields: dict[str, Any]) -> None:
        """Patch individual fields of one document."""
        query = self._scoped(
            self._db.table(self.table).update(_FIELDS_ADAPTER.dump_python(fields, mode="json"))
        ).eq(self.key_column, key)
        self._execute(query, "update", self.table)

    def delete(self, key: str) -> None:
        """Delete one document. Deleting a missing key is not an error."""
        query = self._scoped(self._db.table(self.table).delete()).eq(self.key_column, key)
        self._execute(query, "delete", self.table)

    def delete_all(self) -> None:
        """Delete every document in the collection."""
        query = self._scoped(self._db.table(self.table).delete())
        self._execute(query, "delete_all", self.table)

    # -------------------------------------------------------------------------
    # Private mapping methods
    # -------------------------------------------------------------------------

    def _scoped(self, query: Any) -> Any:
        return query.eq("user_id", self._user_id)

    def _encode(self, entity: M) -> dict[str, Any]:
        """Map a model to a row, leaving unset server columns to the database."""
        row = entity.model_dump(mode="json")
        for column in self.server_columns:
            if row.get(column) is None:
                row.pop(column, None)
        row["user_id"] = self._user_id
        return row

    def _decode(self, row: dict[str, Any]) -> M:
        """Map a row to the collection's model."""
        try:
            return self.model.model_validate(row)  # type: ignore[return-value]
        except PydanticValidationError as e:
            raise DecodingError(
                self.table,
                row.get(self.key_column),
                f"{e.error_count()} validation error(s)",
            ) from e
