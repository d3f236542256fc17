"""Domain exceptions for the personal workspace bounded context."""


class PersonalWorkspaceInvariantError(RuntimeError):
    """Raised when a personal workspace invariant is violated.

    Signals a logic defect or corrupted data (e.g. a derived name already
    used by another tenant's workspace, or a duplicated subscription
    entry) rather than an environmental condition. It must not be retried
    or swallowed.
    """

    pass
