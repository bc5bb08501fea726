# weatherflow/errors.py


class WorkflowError(Exception):
    """Base class for all errors raised by weatherflow."""


class EngineError(WorkflowError):
    """The engine could not run the graph at all (no results are produced)."""


class NodeExecutionError(WorkflowError):
    """A single node failed; the run is reported as failed at that step."""


class WeatherAPIError(WorkflowError):
    """Any failure while looking up a temperature."""


class StorageError(WorkflowError):
    """The workflow store could not be read."""


class RequestValidationFailed(WorkflowError):
    def __init__(self, field: str, kind: str = "missing"):
        self.field = field
        self.kind = kind
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.kind == "missing":
            return f"{self.field} is required"
        return f"{self.field} is invalid"
