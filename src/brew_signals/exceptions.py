"""Custom exceptions for brew-signals."""


class BrewSignalsError(Exception):
    """Base exception for brew-signals."""

    pass


class RuleSetError(BrewSignalsError):
    """Raised when a rule set version is missing or contains invalid rules."""

    pass


class StoreError(BrewSignalsError):
    """Raised when the persistent store cannot be read or written."""

    pass


class UnknownMembershipError(BrewSignalsError):
    """Raised when a listing carries a membership token with no program."""

    pass


class ListingFormatError(BrewSignalsError):
    """Raised when an external listings file cannot be parsed."""

    pass
