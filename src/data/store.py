"""Per-resource local cache kept in step with gateway responses.

The state machine is an explicit reducer so it can be tested without a
client; ``ResourceStore`` performs the network call and dispatches the
matching action.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from .errors import SchoolDataError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceState:
    rows: tuple = ()
    loading: bool = True
    error: Optional[str] = None


@dataclass(frozen=True)
class Loaded:
    rows: tuple


@dataclass(frozen=True)
class Added:
    row: dict


@dataclass(frozen=True)
class Updated:
    row: dict


@dataclass(frozen=True)
class Removed:
    id: int


@dataclass(frozen=True)
class Failed:
    message: str


@dataclass(frozen=True)
class ErrorCleared:
    pass


Action = Union[Loaded, Added, Updated, Removed, Failed, ErrorCleared]


def reduce(state: ResourceState, action: Action) -> ResourceState:
    """Return the next state; never mutates ``state``."""
    if isinstance(action, Loaded):
        return ResourceState(rows=tuple(action.rows), loading=False, error=None)
    if isinstance(action, Added):
        return replace(state, rows=(action.row,) + state.rows)
    if isinstance(action, Updated):
        rows = tuple(
            action.row if row.get("id") == action.row.get("id") else row
            for row in state.rows
        )
        return replace(state, rows=rows)
    if isinstance(action, Removed):
        return replace(state, rows=tuple(r for r in state.rows if r.get("id") != action.id))
    if isinstance(action, Failed):
        return replace(state, loading=False, error=action.message)
    if isinstance(action, ErrorCleared):
        return replace(state, error=None)
    raise TypeError(f"Unknown action: {action!r}")


class ResourceStore:
    """Rows of one resource plus the last error, refreshed on demand.

    Mutations return ``True`` on success. Failures are recorded in
    ``state.error`` and logged rather than raised. Overlapping calls are not
    coordinated; whichever response lands last wins.
    """

    def __init__(self, resource: str, client):
        self.resource = resource
        self.client = client
        self.state = ResourceState()

    @property
    def rows(self) -> list[dict]:
        return list(self.state.rows)

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    @property
    def loading(self) -> bool:
        return self.state.loading

    def dispatch(self, action: Action) -> ResourceState:
        self.state = reduce(self.state, action)
        return self.state

    def _fail(self, operation: str, error: SchoolDataError) -> bool:
        logger.error("%s on %s failed: %s", operation, self.resource, error.message)
        self.dispatch(Failed(error.message))
        return False

    def refresh(self) -> bool:
        try:
            rows = self.client.list_all(self.resource)
        except SchoolDataError as e:
            return self._fail("list", e)
        self.dispatch(Loaded(tuple(rows)))
        return True

    def add_item(self, payload: dict) -> bool:
        self.dispatch(ErrorCleared())
        try:
            row = self.client.create(self.resource, payload)
        except SchoolDataError as e:
            return self._fail("create", e)
        self.dispatch(Added(row))
        return True

    def add_multiple_items(self, payloads: list[dict]) -> bool:
        """Batch insert, then reload; the batch endpoint returns no rows."""
        self.dispatch(ErrorCleared())
        try:
            result = self.client.create_batch(self.resource, payloads)
        except SchoolDataError as e:
            return self._fail("batch create", e)
        logger.info(
            "Inserted %s rows into %s", (result or {}).get("insertedCount"), self.resource
        )
        return self.refresh()

    def update_item(self, row: dict) -> bool:
        self.dispatch(ErrorCleared())
        item_id = row.get("id")
        payload = {k: v for k, v in row.items() if k not in ("id", "dateAdded")}
        try:
            updated = self.client.update(self.resource, item_id, payload)
        except SchoolDataError as e:
            return self._fail("update", e)
        self.dispatch(Updated(updated))
        return True

    def remove_item(self, item_id: int) -> bool:
        self.dispatch(ErrorCleared())
        try:
            self.client.delete(self.resource, item_id)
        except SchoolDataError as e:
            return self._fail("delete", e)
        self.dispatch(Removed(item_id))
        return True
