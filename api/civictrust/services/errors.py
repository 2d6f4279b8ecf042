"""Failure conditions raised by the scoring services.

Routers translate these into HTTP responses; scripts and hooks let them
propagate. A scorer never returns a partial result: it either returns the
full value or raises one of these.
"""


class ScoringError(Exception):
    """Base class for scoring engine failures."""


class NotFoundError(ScoringError):
    """The member or organization being scored does not exist."""

    def __init__(self, kind: str, entity_id):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} not found")


class DataUnavailableError(ScoringError):
    """The backing store could not be read."""


class ScoreWriteError(ScoringError):
    """The value was computed but could not be persisted.

    ``value`` may still be shown to the user; it is not durable.
    """

    def __init__(self, kind: str, entity_id, value):
        self.kind = kind
        self.entity_id = entity_id
        self.value = value
        super().__init__(f"failed to persist {kind} for {entity_id}")
