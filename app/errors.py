class FilterValidationError(ValueError):
  """Client supplied a malformed filter (bad date, oversized list or slug)."""

  def __init__(self, param: str, message: str):
    super().__init__(f"{param}: {message}")
    self.param = param
    self.message = message


class StoreError(RuntimeError):
  """The stats/quiz store could not complete a query."""
