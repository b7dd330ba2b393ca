"""
Exceptions raised by the filter logging builder
"""


class LoggerMissingError(RuntimeError):
    """Raised when a filtered stream is built without a logger to write to"""

    def __init__(self, method: str = "build"):
        self.method = method
        super().__init__(f"logger is None in the call to {method}(logger)")
