class AppException(Exception):
    """Base application exception."""

    pass


class ValidationError(AppException):
    """Validation error exception."""

    pass


class ManifestError(ValidationError):
    """Job manifest is missing required fields."""

    pass


class ClusterConnectionError(AppException, ConnectionError):
    """No usable credential source for the cluster API."""

    pass


class JobSubmissionError(AppException):
    """Creating the job resource failed."""

    pass
