"""UsageMetrics value object — token usage summed over one send()."""

from pydantic import BaseModel


class UsageMetrics(BaseModel, frozen=True):
    input_tokens: int | None
    output_tokens: int | None

    def __add__(self, other: "UsageMetrics") -> "UsageMetrics":
        return UsageMetrics(
            input_tokens=_sum(self.input_tokens, other.input_tokens),
            output_tokens=_sum(self.output_tokens, other.output_tokens),
        )


def _sum(a: int | None, b: int | None) -> int | None:
    if a is None:
        return b
    if b is None:
        return a
    return a + b
