"""Generic repository base and query utilities for SQLAlchemy 2.x.

Persistence-only concerns shared by every GymKeep repository live here:

- whitelisted sorting with a primary-key tiebreaker,
- row locks (``FOR UPDATE`` on aggregate roots, ``FOR SHARE`` on referenced
  catalog rows),
- whitelisted updates that route through the model ``@validates`` hooks.

Repositories never commit or roll back; services own the unit of work.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import ColumnElement, Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from gymkeep.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


# ----------------------------- Sorting utilities -----------------------------


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse ``["-started_at", "name"]`` into ``[("started_at", True), ("name", False)]``."""
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        field = (token[1:] if is_desc else token).strip()
        if field:
            parsed.append((field, is_desc))
    return parsed


def _apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply whitelisted ``ORDER BY`` clauses and a final PK tiebreaker.

    Unknown tokens are ignored.

    :param stmt: Base selectable.
    :type stmt: :class:`sqlalchemy.sql.Select`
    :param sortable_fields: Public field to ORM attribute mapping.
    :type sortable_fields: Mapping[str, InstrumentedAttribute]
    :param tokens: Public sort tokens.
    :type tokens: Iterable[str]
    :param pk_attr: Primary-key attribute used as the tiebreaker.
    :type pk_attr: InstrumentedAttribute | None
    :returns: Ordered select.
    :rtype: :class:`sqlalchemy.sql.Select`
    """
    orders: list[Any] = []
    for field, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(field)
        if isinstance(col, InstrumentedAttribute):
            orders.append(col.desc() if is_desc else col.asc())

    if orders:
        stmt = stmt.order_by(*orders)
    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.asc())
    return stmt


def nulls_last_order(column: InstrumentedAttribute[Any]) -> tuple[ColumnElement[Any], ...]:
    """Return ``ORDER BY`` clauses placing ``NULL`` after every value.

    Portable across SQLite and PostgreSQL: sort by ``column IS NULL`` first.
    """
    return (column.is_(None), column.asc())


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Persistence-only repository for a single mapped model.

    Subclasses set ``model`` and may override ``_sortable_fields``,
    ``_filterable_fields``, ``_updatable_fields`` and ``_default_eagerload``.
    Cross-aggregate deletion is not done here: it is planned and executed by
    :class:`gymkeep.services.integrity.IntegrityCoordinator`.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Bind to ``session`` or fall back to the Flask-scoped ``db.session``."""
        self._session: Session | None = session

    # ------------------------------ Session access ---------------------------

    @property
    def session(self) -> Session:
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        """Hook for ``selectinload``/``joinedload`` options on generic reads."""
        return stmt

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        """Whitelist of public sort keys."""
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]] | None:
        """Whitelist of equality filters.

        Returning ``None`` applies every key through ``getattr(model, key)``.
        Returning a mapping applies only whitelisted keys and ignores the rest.
        """
        return None

    def _updatable_fields(self) -> set[str]:
        """Keys that :meth:`assign_updates` may set (fail-closed when empty)."""
        return set()

    # ------------------------------ Internals --------------------------------

    def _apply_equality_filters(
        self,
        stmt: Select[Any],
        filters: Mapping[str, Any] | None,
    ) -> Select[Any]:
        if not filters:
            return stmt

        allowed = self._filterable_fields()
        if allowed is None:
            clauses = [getattr(self.model, k) == v for k, v in filters.items()]
            return stmt.where(and_(*clauses)) if clauses else stmt

        whitelist_clauses: list[Any] = []
        for k, v in filters.items():
            col = allowed.get(k)
            if isinstance(col, InstrumentedAttribute):
                whitelist_clauses.append(col == v)
        return stmt.where(and_(*whitelist_clauses)) if whitelist_clauses else stmt

    def _sanitize_update_fields(
        self,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
    ) -> dict[str, Any]:
        """Keep only whitelisted keys.

        :raises ValueError: If ``strict`` and a key is not updatable.
        """
        allowed = self._updatable_fields()
        if not allowed:
            if fields and strict:
                raise ValueError("No updatable fields configured for this repository.")
            return {}

        unknown = [k for k in fields if k not in allowed]
        if unknown and strict:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")

        return {k: v for k, v in fields.items() if k in allowed}

    def _by_pk(self, entity_id: Any) -> Select[Any]:
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError(f"{type(self).__name__} requires a detectable PK attribute.")
        return self._default_eagerload(select(self.model).where(pk_attr == entity_id))

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is assigned."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        result = self.session.execute(self._by_pk(entity_id)).scalars().first()
        return cast(E | None, result)

    def get_for_update(self, entity_id: Any) -> E | None:
        """Retrieve by PK holding an exclusive row lock (``FOR UPDATE``).

        SQLite ignores the clause; its single writer gives the same effect.
        """
        stmt = self._by_pk(entity_id).with_for_update()
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def get_for_share(self, entity_id: Any) -> E | None:
        """Retrieve by PK holding a shared row lock (``FOR SHARE``).

        Used on referenced rows so that a concurrent restrict-delete of the
        same row waits for the referencing transaction.
        """
        stmt = self._by_pk(entity_id).with_for_update(read=True)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def find_one(self, **filters: Any) -> E | None:
        stmt: Select[Any] = select(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        stmt = self._default_eagerload(stmt)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def exists(self, **filters: Any) -> bool:
        stmt: Select[Any] = select(func.count()).select_from(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        return bool(self.session.execute(stmt).scalar_one())

    def count(self, **filters: Any) -> int:
        stmt: Select[Any] = select(func.count()).select_from(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        return int(self.session.execute(stmt).scalar_one())

    def flush(self) -> None:
        self.session.flush()

    # ----------------------------- Safe updates -------------------------------

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
        flush: bool = True,
    ) -> E:
        """Assign whitelisted keys through ``setattr`` and optionally flush.

        ``setattr`` keeps the mapped ``@validates`` hooks in the path.

        :raises ValueError: On non-updatable keys (``strict``) or from a validator.
        """
        updates = self._sanitize_update_fields(fields, strict=strict)
        for k, v in updates.items():
            setattr(instance, k, v)
        if flush:
            self.flush()
        return instance

    # ------------------------------- Listing ---------------------------------

    def list(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        sort: Iterable[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[E]:
        """List rows with whitelisted equality filters and sorting."""
        stmt: Select[Any] = select(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        stmt = self._default_eagerload(stmt)
        stmt = _apply_sorting(stmt, self._sortable_fields(), sort or [], pk_attr=self._pk_attr())

        if limit is not None:
            stmt = stmt.limit(int(limit))
        if offset is not None:
            stmt = stmt.offset(int(offset))

        return cast(list[E], list(self.session.execute(stmt).scalars().all()))
