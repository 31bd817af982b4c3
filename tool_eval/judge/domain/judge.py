"""Judge Protocol — a free-text completion endpoint used for grading."""

from typing import Protocol


class Judge(Protocol):
    @property
    def model(self) -> str: ...

    async def complete(self, prompt: str) -> str:
        """
        Return the judge model's reply to a single prompt.

        Raises:
            JudgeRequestError: if the request fails. retriable marks transient
                provider failures.
        """
        ...
