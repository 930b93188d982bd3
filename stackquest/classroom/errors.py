"""Errors raised by the question sequence and navigation."""


class IndexOutOfRange(IndexError):
    """Question index outside [0, length) of the sequence."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"Question index {index} out of range [0, {length})")


class NotYetAttempted(Exception):
    """Forward navigation requested before the current question was attempted."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(
            "Please attempt the current question before proceeding to the next one."
        )
