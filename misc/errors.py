from __future__ import annotations


class BotError(Exception):
    """Base class for failures that are turned into a user-visible reply."""


class AlreadyOpen(BotError):
    def __init__(self, user_id: int) -> None:
        super().__init__(f"user {user_id} already owns a conversation")
        self.user_id = int(user_id)


class NotOwner(BotError):
    def __init__(self, user_id: int, channel_id: int) -> None:
        super().__init__(f"user {user_id} does not own channel {channel_id}")
        self.user_id = int(user_id)
        self.channel_id = int(channel_id)


class UnknownChannel(BotError):
    def __init__(self, channel_id: int) -> None:
        super().__init__(f"channel {channel_id} has no active conversation")
        self.channel_id = int(channel_id)


class RoleNotFound(BotError):
    def __init__(self, role_name: str) -> None:
        super().__init__(f"role {role_name!r} not found")
        self.role_name = role_name


class PermissionDenied(BotError):
    pass


class BackendError(BotError):
    pass


class ExternalPlatformError(BotError):
    pass


class MalformedDuration(BotError):
    def __init__(self, token: str) -> None:
        super().__init__(f"malformed duration {token!r}")
        self.token = token
