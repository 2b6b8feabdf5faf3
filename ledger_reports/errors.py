"""Base exception shared by every fatal report-generation failure."""


class ReportGenerationError(Exception):
    """A report job could not complete. The job is marked failed."""
    pass
