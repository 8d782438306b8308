"""Exceptions raised by the matching engine and its repositories."""


class SkillSwapError(Exception):
    """Base class for all SkillSwap errors."""


class RepositoryUnavailable(SkillSwapError):
    """A repository query could not be executed."""


class UserNotFound(SkillSwapError):
    """The requesting user does not exist."""

    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id
