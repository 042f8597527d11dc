# growgraph/core/exceptions.py
class NodeNotFoundException(Exception):
    """Raised when a node is not found for a given ID."""
    def __init__(self, message="Node not found."):
        self.message = message
        super().__init__(self.message)


class UnknownParentError(Exception):
    """Raised when a child is attached to a parent that is not in the graph."""
    def __init__(self, parent_id: str):
        self.parent_id = parent_id
        self.message = f"Parent node '{parent_id}' does not exist."
        super().__init__(self.message)


class SessionNotFoundException(Exception):
    """Raised when a user has no mind map in memory yet."""
    def __init__(self, message="No mind map has been generated for this workspace."):
        self.message = message
        super().__init__(self.message)


class RemoteCallFailure(Exception):
    """Raised when the career service cannot produce a usable response."""
    def __init__(self, operation: str, message: str, status_code: int | None = None):
        self.operation = operation
        self.status_code = status_code
        self.message = message
        super().__init__(f"{operation}: {message}")
