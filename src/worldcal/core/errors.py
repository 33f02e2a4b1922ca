class WorldcalError(Exception):
    """Base error."""

class MalformedDefinitionError(WorldcalError, ValueError):
    """Raised when a calendar definition (or a piece of one) is structurally invalid."""

class InvalidDateError(WorldcalError, ValueError):
    """Raised when a structured date does not exist in the calendar it is used with."""

class UnknownCalendarError(WorldcalError, KeyError):
    """Raised when a calendar id is not present in a store."""
