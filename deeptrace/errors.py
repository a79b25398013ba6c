"""
Errors raised by the tracing layer.
"""


class NotAnObjectError(TypeError):
    """Raised when a primitive (non-object) value is handed to the tracer."""

    def __init__(self, value, message: str = "Only works on objects"):
        self.value = value
        super().__init__(f"{message}: {type(value).__name__}")
