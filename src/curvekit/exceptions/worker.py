from typing import Any

from curvekit.exceptions.base import CurvekitError


class DelegatedComputationTimeout(CurvekitError):
    """
    A delegated computation did not finish before its deadline.
    """

    def __init__(self, task: str, timeout_seconds: float) -> None:
        self.task = task
        self.timeout_seconds = timeout_seconds
        super().__init__(message=f"{task} did not complete within {timeout_seconds} seconds.")

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.task, self.timeout_seconds)
