"""DatasetLoadResult — the result of loading a dataset, including samples and integrity hash."""

from pydantic import BaseModel, Field

from tool_eval.dataset.domain.sample import Sample


class DatasetLoadResult(BaseModel, frozen=True):
    """Immutable value object returned by a DatasetLoader.

    Samples are sorted by id. sha256 digests the raw bytes of every sample file
    in path order, so callers can record which exact dataset version was used.
    """

    samples: list[Sample]
    sha256: str = Field(min_length=1)
