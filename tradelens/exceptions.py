"""Exceptions raised by the analysis core."""


class InsufficientDataError(ValueError):
    """
    Raised when a calculation needs more history than was supplied.

    Attributes:
        required: Minimum number of candles the calculation needs
        actual: Number of candles supplied
    """

    def __init__(self, required: int, actual: int, what: str = "technical analysis"):
        self.required = required
        self.actual = actual
        super().__init__(
            f"Insufficient data for {what} (need {required}+ candles, got {actual})"
        )
