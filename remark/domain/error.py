"""Domain layer errors.

Every error is terminal for the request that raised it; callers decide
whether to retry.
"""

from datetime import datetime
from typing import Optional


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Input has the wrong shape or length."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class PermissionDeniedError(DomainError):
    """Raised when the actor's role does not allow the action."""

    pass


class RateLimitedError(DomainError):
    """Raised when an action's budget for the current window is spent."""

    def __init__(self, action: str, limit: int, window_minutes: int, retry_after: int):
        self.action = action
        self.limit = limit
        self.window_minutes = window_minutes
        self.retry_after = retry_after
        super().__init__(
            f"Rate limit exceeded for {action}. "
            f"Maximum {limit} per {window_minutes} minutes."
        )


class DepthLimitExceededError(DomainError):
    """Raised when a reply would nest deeper than allowed."""

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"Maximum nesting depth of {max_depth} reached")


class MediaMismatchError(DomainError):
    """Raised when a reply targets a parent on a different media item."""

    pass


class CommentDeletedError(DomainError):
    """Raised when the target comment has been deleted."""

    def __init__(self, comment_id: str):
        self.comment_id = comment_id
        super().__init__(f"Comment {comment_id} has been deleted")


class MutedError(DomainError):
    """Raised when a muted user tries to comment."""

    def __init__(self, until: Optional[datetime]):
        self.until = until
        super().__init__(
            f"User is muted until {until.isoformat()}" if until else "User is muted"
        )


class BannedError(DomainError):
    """Raised when a banned user attempts any write."""

    def __init__(self, until: Optional[datetime], reason: Optional[str] = None):
        self.until = until
        self.reason = reason
        super().__init__(
            f"User is banned until {until.isoformat()}"
            if until
            else "User is permanently banned"
        )


class ConflictError(DomainError):
    """Raised when a write collides with existing state."""

    pass


class InvalidCredentialError(DomainError):
    """Raised when the identity provider rejects a credential."""

    pass
