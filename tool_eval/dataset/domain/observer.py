"""Observer port for the dataset domain — defines events in domain language."""

from typing import Protocol


class DatasetObserver(Protocol):
    def dataset_loading_started(self, path: str, file_count: int) -> None: ...

    def dataset_sample_loaded(self, sample_id: str, file: str) -> None: ...

    def dataset_loading_completed(self, path: str, total_samples: int) -> None: ...

    def dataset_loading_failed(self, path: str, reason: str) -> None: ...
