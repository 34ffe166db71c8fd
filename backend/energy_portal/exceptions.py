class DataIntegrityError(ValueError):
    """A persisted record is malformed; callers log it, nothing is retried."""


class TemplateError(DataIntegrityError):
    """A message template references a placeholder its kind does not define."""
