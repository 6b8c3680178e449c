"""
Domain Exceptions

Business rule violations raised by the draft engine, the registry and the
application service. The command layer turns them into chat replies.
"""

from typing import Optional


class CupError(Exception):
    """Base exception for all cup-related errors"""
    pass


class AlreadyStartedError(CupError):
    """Raised when starting a cup in a channel that already has one"""

    def __init__(self, channel_id: str, cup=None) -> None:
        super().__init__(f"A cup is already running in channel {channel_id}")
        self.channel_id = channel_id
        self.cup = cup


class CupAlreadyExistsError(CupError):
    """Raised by the registry when a channel is already registered"""

    def __init__(self, channel_id: str) -> None:
        super().__init__(f"Channel {channel_id} already has an active cup")
        self.channel_id = channel_id


class CupNotFoundError(CupError):
    """Raised when a channel has no active cup"""

    def __init__(self, channel_id: str) -> None:
        super().__init__(f"No cup in progress in channel {channel_id}")
        self.channel_id = channel_id


class InvalidPhaseError(CupError):
    """Raised when an operation is not valid in the cup's current status"""

    def __init__(self, operation: str, status) -> None:
        super().__init__(f"Cannot {operation} while cup is in {status.value}")
        self.operation = operation
        self.status = status


class DuplicateSignupError(CupError):
    """Raised when a user signs up twice"""

    def __init__(self, index: int, total: int) -> None:
        super().__init__(f"Already registered ({index + 1} of {total})")
        self.index = index
        self.total = total


class NotRegisteredError(CupError):
    """Raised when a user tries to withdraw without being signed up"""
    pass


class InvalidIndexError(CupError):
    """Raised when a roster index is out of range"""

    def __init__(self, index: int) -> None:
        super().__init__(f"Invalid player number: {index + 1}")
        self.index = index


class NothingToRemoveError(CupError):
    """Raised when withdrawing from an empty roster"""
    pass


class NoSubstituteAvailableError(CupError):
    """Raised when an active player leaves during pickup and nobody can replace them"""

    def __init__(self, player) -> None:
        super().__init__(f"No substitute available to replace {player.display_name}")
        self.player = player


class NotEnoughPlayersError(CupError):
    """Raised when closing signup without enough players for two teams"""

    def __init__(self, signed_up: int, minimum: int) -> None:
        super().__init__(f"Only {signed_up} players signed up, {minimum} needed")
        self.signed_up = signed_up
        self.minimum = minimum


class TooFewPlayersError(CupError):
    """Raised when the requested keep count is below the minimum"""

    def __init__(self, requested: int, minimum: int) -> None:
        super().__init__(f"Need to keep at least {minimum} players, got {requested}")
        self.requested = requested
        self.minimum = minimum


class TooManyPlayersError(CupError):
    """Raised when the requested keep count exceeds the signups"""

    def __init__(self, requested: int, signed_up: int) -> None:
        super().__init__(f"{requested} players haven't signed up yet ({signed_up} did)")
        self.requested = requested
        self.signed_up = signed_up


class NotYourTurnError(CupError):
    """Raised when someone other than the current picker tries to pick"""

    def __init__(self, expected=None) -> None:
        if expected is None:
            message = "Nobody is picking right now"
        else:
            message = f"It's {expected.display_name}'s turn to pick"
        super().__init__(message)
        self.expected = expected


class InvalidTargetError(CupError):
    """Raised when a pick target is out of range"""

    def __init__(self, index: int, message: Optional[str] = None) -> None:
        super().__init__(message or f"Invalid player number: {index + 1}")
        self.index = index


class SubstitutePickError(InvalidTargetError):
    """Raised when picking a player registered as substitute"""

    def __init__(self, index: int, player) -> None:
        super().__init__(index, f"{player.display_name} is only registered as a substitute")
        self.player = player


class AlreadyAssignedError(InvalidTargetError):
    """Raised when picking a player that already has a team"""

    def __init__(self, index: int, player, team) -> None:
        super().__init__(index, f"{player.display_name} is already on team {player.team_index + 1}, {team.name}")
        self.player = player
        self.team = team


class UnauthorizedError(CupError):
    """Raised when the requester lacks the authority for an operation"""

    def __init__(self, operation: str, manager=None) -> None:
        super().__init__(f"Not allowed to {operation}")
        self.operation = operation
        self.manager = manager


class InvalidTeamSizeError(CupError):
    """Raised when setting a non-positive team size"""

    def __init__(self, size: int) -> None:
        super().__init__(f"{size} is not a valid team size")
        self.size = size


class PromotionThrottledError(CupError):
    """Raised when promoting again before the minimum interval has passed"""

    def __init__(self, remaining: float) -> None:
        super().__init__(f"Too soon to promote, {remaining:.0f}s remaining")
        self.remaining = remaining


class PersistenceError(CupError):
    """Raised when a cup snapshot cannot be written or read"""
    pass
