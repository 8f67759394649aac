"""Errors raised by the record store and repositories."""


class RecordNotFoundError(LookupError):
    """No record with the requested id exists in the backing file."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class InvalidTransitionError(ValueError):
    """A lifecycle status change that the state machine does not allow."""

    def __init__(self, record_id: str, current: str, requested: str):
        super().__init__(
            f"Cannot move {record_id} from {current} to {requested}"
        )
        self.record_id = record_id
        self.current = current
        self.requested = requested
