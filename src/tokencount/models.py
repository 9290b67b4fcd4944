# src/tokencount/models.py
from dataclasses import asdict, dataclass
from typing import List, Optional, Union


@dataclass(frozen=True)
class FileStat:
    """Token count for one successfully processed file."""
    path: str
    tokens: int

    def to_dict(self) -> dict:
        return {"path": self.path, "tokens": self.tokens}


@dataclass(frozen=True)
class Summary:
    files: int
    total: int
    average: float
    p50: int
    p90: int
    p99: int
    top: Optional[List[FileStat]] = None  # tokens desc, ties by path

    def to_dict(self) -> dict:
        data = asdict(self)
        if self.top is None:
            del data["top"]
        return data


# --- Per-file failures ---
# A closed set of outcomes. Each is a plain value, consumed into a log line.

@dataclass(frozen=True)
class MetadataUnavailable:
    path: str
    reason: str

    @property
    def message(self) -> str:
        return f"failed to read metadata for {self.path}: {self.reason}"


@dataclass(frozen=True)
class TooLarge:
    path: str
    size: int
    limit: int

    @property
    def message(self) -> str:
        return f"skipping {self.path}: file size {self.size} exceeds max {self.limit}"


@dataclass(frozen=True)
class ReadFailed:
    path: str
    reason: str

    @property
    def message(self) -> str:
        return f"skipping {self.path}: {self.reason}"


ProcessFailure = Union[MetadataUnavailable, TooLarge, ReadFailed]
ProcessResult = Union[FileStat, ProcessFailure]
