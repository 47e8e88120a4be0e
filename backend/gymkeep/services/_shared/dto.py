# comments in English; reST docstrings strict
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DeleteOut:
    """
    Outcome of a delete executed through the integrity coordinator.

    :param entity: Root entity name (e.g. ``"WorkoutSession"``).
    :type entity: str
    :param entity_id: Identifier of the deleted root row.
    :type entity_id: int
    :param deleted: Rows removed per table, root included.
    :type deleted: dict[str, int]
    :param nulled: Rows whose foreign key was cleared, per ``table.column``.
    :type nulled: dict[str, int]
    """

    entity: str
    entity_id: int
    deleted: dict[str, int]
    nulled: dict[str, int]
