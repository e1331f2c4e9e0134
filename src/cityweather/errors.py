# error taxonomy, one type per pipeline stage so the handler can report where a run stopped

from __future__ import annotations
from typing import Optional


class PipelineError(RuntimeError):
    stage = "pipeline"

    def __str__(self) -> str:
        return f"{self.stage}: {super().__str__()}"


class ConfigError(RuntimeError):
    # raised when a required environment variable is missing
    pass


class StorageError(RuntimeError):
    # raised by object store implementations, translated into a stage error by the caller
    pass


class SourceReadError(PipelineError):
    stage = "ingest"


class WeatherFetchError(PipelineError):
    stage = "fetch"

    def __init__(self, city: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{city!r}: {message}")
        self.city = city
        self.cause = cause


class WeatherParseError(WeatherFetchError):
    # body was received but does not match the expected weather schema
    pass


class SerializationError(PipelineError):
    stage = "write"


class SinkWriteError(PipelineError):
    stage = "write"


class SinkDeleteError(PipelineError):
    stage = "cleanup"


class InvocationError(RuntimeError):
    # raised from the lambda entry point so the runtime marks the invocation failed and the trigger can redeliver
    def __init__(self, response):
        super().__init__(response.status_message)
        self.response = response
