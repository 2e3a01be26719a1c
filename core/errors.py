class RefereeError(Exception):
    """Base class for errors raised by the Referee core."""


class ProviderError(RefereeError):
    """The language model provider could not produce a usable response."""


class ComparisonInFlightError(RefereeError):
    """A comparison was requested while another one is still running."""
