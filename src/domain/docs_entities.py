"""
Docs Domain Entities

Entities for the vendor documentation downloader.
All entities are immutable (frozen dataclasses) following DDD patterns.

ResultLedger is the aggregate collecting one BookResult per BookEntry.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Dict, Any, Iterator


@dataclass(frozen=True)
class BookEntry:
    """
    A book discovered on the product listing page.

    Title and detail URL may be empty strings when the listing tile was
    malformed; such entries are rejected when they are processed.
    """
    title: str
    detail_url: str


@dataclass(frozen=True)
class BookResult:
    """
    Outcome of processing one BookEntry.

    A successful result always carries both the PDF URL and the path of
    the written file; a failed result never carries a download path.
    """
    title: str
    detail_url: str
    pdf_url: Optional[str] = None
    download_path: Optional[str] = None
    success: bool = False
    error: Optional[str] = None
    critical_error: bool = False

    def __post_init__(self):
        if self.success and (not self.pdf_url or not self.download_path):
            raise ValueError("Successful result requires pdf_url and download_path")
        if not self.success and self.download_path is not None:
            raise ValueError("Failed result cannot have a download_path")

    @classmethod
    def succeeded(cls, entry: BookEntry, pdf_url: str, download_path: str) -> 'BookResult':
        return cls(
            title=entry.title,
            detail_url=entry.detail_url,
            pdf_url=pdf_url,
            download_path=download_path,
            success=True,
        )

    @classmethod
    def failed(cls, entry: BookEntry, error: str, critical_error: bool = False) -> 'BookResult':
        return cls(
            title=entry.title,
            detail_url=entry.detail_url,
            error=error,
            critical_error=critical_error,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Record layout of the JSON summary."""
        data: Dict[str, Any] = {
            "title": self.title,
            "url": self.detail_url,
            "pdfUrl": self.pdf_url,
            "downloadPath": self.download_path,
            "success": self.success,
        }
        if not self.success:
            data["error"] = self.error
            data["criticalError"] = self.critical_error
        return data


class ResultLedger:
    """
    Append-only, ordered record of book outcomes.

    Results keep the order in which books were processed.
    """

    def __init__(self):
        self._results: list = []

    def append(self, result: BookResult) -> None:
        self._results.append(result)

    @property
    def results(self) -> Tuple[BookResult, ...]:
        return tuple(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[BookResult]:
        return iter(tuple(self._results))

    def __getitem__(self, index: int) -> BookResult:
        return self._results[index]

    @property
    def successful(self) -> int:
        return sum(1 for r in self._results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self._results if not r.success)

    @property
    def critical(self) -> int:
        return sum(1 for r in self._results if r.critical_error)

    def to_list(self) -> list:
        return [r.to_dict() for r in self._results]
