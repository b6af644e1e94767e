"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class InputError(PipelineError):
    """Raised when the source table cannot be read."""

    error_code = "INPUT_ERROR"


class MalformedRecordError(PipelineError):
    """Raised for an input record missing a required column."""

    error_code = "MALFORMED_RECORD"


class StageError(PipelineError):
    """Raised for stage failures that should halt in strict mode."""

    error_code = "STAGE_ERROR"


class RemoteLookupFailed(StageError):
    """The geocoding service could not answer (transport, status or payload)."""

    error_code = "REMOTE_LOOKUP_FAILED"


class LookupCancelled(StageError):
    """A record lookup was cancelled after another record failed."""

    error_code = "LOOKUP_CANCELLED"


class BatchFailedError(StageError):
    """Raised when a batch settled with one or more hard failures."""

    error_code = "BATCH_FAILED"

    def __init__(self, message: str, result=None) -> None:
        super().__init__(message)
        self.result = result
