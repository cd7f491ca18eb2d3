class PlanPokerError(Exception):
    """Base class for errors raised by the planning poker backend."""


class RoomNotFound(PlanPokerError, LookupError):
    def __init__(self, code: str):
        super().__init__(f"room {code!r} not found")
        self.code = code


class MalformedMessage(PlanPokerError, ValueError):
    """An inbound protocol message could not be parsed or lacks a field."""
