"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class CommentNotFoundError(NotFoundError):
    """Raised when a comment does not exist."""

    def __init__(self, comment_id: str):
        super().__init__("Comment", comment_id)


class ParentNotFoundError(NotFoundError):
    """Raised when a reply targets a parent that is missing or pruned.

    A parent is also treated as missing when it belongs to a different
    thread than the reply.
    """

    def __init__(self, parent_id: str):
        super().__init__("Parent comment", parent_id)


class SiteNotFoundError(NotFoundError):
    """Raised when a site key does not resolve to a registered site."""

    def __init__(self, site_key: str):
        super().__init__("Site", site_key)


class NotOwnerError(DomainError):
    """Raised when a user attempts to modify a comment they did not write."""

    def __init__(self, resource: str, resource_id: str, user_id: str):
        self.resource_id = resource_id
        self.user_id = user_id
        super().__init__(f"User {user_id} does not own {resource} {resource_id}")


class AlreadyDeletedError(DomainError):
    """Raised when deleting a comment that is already deleted."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} {resource_id} is already deleted")


class CannotEditDeletedError(DomainError):
    """Raised when attempting to modify deleted content."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"Cannot edit deleted {resource} {resource_id}")


class QuotaExceededError(DomainError):
    """Raised when a site owner has used up their comment quota."""

    def __init__(self, owner_id: str):
        self.owner_id = owner_id
        super().__init__(f"Comment quota exceeded for site owner {owner_id}")


class SiteInactiveError(DomainError):
    """Raised when commenting on a deactivated site."""

    def __init__(self, site_key: str):
        super().__init__(f"Site {site_key} is not active")


class DepthInvariantViolationError(DomainError):
    """Raised when a computed depth falls outside 1..max_depth."""

    def __init__(self, depth: int, max_depth: int):
        super().__init__(f"Depth {depth} outside allowed range 1..{max_depth}")


class SortKeyConflictError(DomainError):
    """Raised when a sort key cannot be assigned without colliding."""

    def __init__(self, message: str):
        super().__init__(message)


class ReactionConflictError(DomainError):
    """Raised when a reaction keeps colliding with a concurrent one."""

    def __init__(self, comment_id: str, user_id: str):
        super().__init__(
            f"Concurrent reaction conflict on comment {comment_id} for user {user_id}"
        )
