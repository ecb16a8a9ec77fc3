class StoreError(Exception):
    """Raised when the listing store cannot answer a search or suggestion request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
