from bftree.types import ErrorVal


class BfError(Exception):
    """Exception type used to propagate parse and run errors."""
    def __init__(self, err: ErrorVal):
        super().__init__(f"{err.name}: {err.message}")
        self.err = err

    @property
    def name(self) -> str:
        return self.err.name
