"""Analysis engine exceptions.

Centralized exception hierarchy for resolution and orchestration failures.
Upstream failures keep their own types (see ``rootscope.upstream``) and
propagate unchanged.
"""


class ServiceError(Exception):
    """Base exception for analysis errors."""

    pass


class NotFoundError(ServiceError):
    """Raised when a query resolves to no entity."""

    def __init__(self, query: str) -> None:
        super().__init__(f"No entity found for '{query}'")
        self.query = query


class AnalysisError(ServiceError):
    """Raised when a composite result cannot be produced."""

    pass
