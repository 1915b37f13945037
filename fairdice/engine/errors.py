"""
Error types raised by the engine.
Rule violations are ValueErrors so callers can keep catching ValueError.
"""


class FairDiceError(Exception):
    """Base class for every failure that aborts a match."""


class InvalidRange(FairDiceError, ValueError):
    """Negative range maximum, or a value outside [0, range_max]."""


class InvalidChoice(FairDiceError, ValueError):
    """An answer that is not one of the offered choices."""


class CommitmentMismatch(FairDiceError, ValueError):
    """Revealed key and value do not reproduce the published digest."""


class PromptAttemptsExceeded(FairDiceError):
    """The operator did not give a valid answer within the retry bound."""


class MalformedDie(FairDiceError, ValueError):
    """A die definition with a non-integer face or the wrong face count."""


class InsufficientDice(FairDiceError, ValueError):
    """Fewer dice than a match needs."""


class HelpRequested(FairDiceError):
    """The operator asked for help instead of answering."""


class MatchCancelled(FairDiceError):
    """The operator left the match at a prompt."""
