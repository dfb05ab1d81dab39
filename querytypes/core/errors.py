"""Error taxonomy for type generation and orchestration."""


class QueryTypesError(Exception):
    """Base class for every error raised by querytypes."""


class ConfigError(QueryTypesError):
    """Config file could not be read or validated."""

    def __init__(self, path, message: str):
        self.path = str(path)
        super().__init__(f"{self.path}: {message}")


class TypeConflictError(QueryTypesError):
    """Two different type specs share one name within a single output file."""


class AmbiguousTransformError(QueryTypesError):
    """Two parameter transforms resolve to the same field name."""


class UpstreamResolutionError(QueryTypesError):
    """The query source failed or produced a malformed descriptor."""


class SourceFileError(QueryTypesError):
    """An input file could not be read or an output file could not be written."""

    def __init__(self, path, cause: Exception):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")
