"""
Docs Domain Value Objects

Value objects for the vendor documentation downloader.
All value objects are immutable (frozen dataclasses) with no identity
beyond their values.
"""
from dataclasses import dataclass
from enum import Enum
import re


# Characters that cannot appear in a file name on common filesystems.
ILLEGAL_FILENAME_CHARS = re.compile(r'[/\\:*?"<>|]')


def sanitize_filename(name: str) -> str:
    """Replace characters illegal in filesystem entries with '_'."""
    return ILLEGAL_FILENAME_CHARS.sub("_", name)


class ExtractionMode(Enum):
    """
    Strategy used to resolve the PDF URL of a book.

    DIRECT_PATTERN reads the server-rendered markup; UI_INTERACTION drives
    the format selector the way a user would and needs a visible browser.
    """
    DIRECT_PATTERN = "direct"
    UI_INTERACTION = "ui"

    @classmethod
    def for_headless(cls, headless: bool) -> 'ExtractionMode':
        """Default mode for a session: headless runs read markup directly."""
        return cls.DIRECT_PATTERN if headless else cls.UI_INTERACTION

    @property
    def requires_headed(self) -> bool:
        return self is ExtractionMode.UI_INTERACTION


@dataclass(frozen=True)
class ProductTarget:
    """
    Product whose documentation set is downloaded.

    Name and version are kept as given by the user; URL and file names
    are derived from them.
    """
    name: str
    version: str

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Product name cannot be empty")
        if not self.version or not self.version.strip():
            raise ValueError("Product version cannot be empty")

    @property
    def slug(self) -> str:
        """URL form of the product name, e.g. 'OpenShift Container' -> 'openshift_container'."""
        lowered = re.sub(r"\s+", "_", self.name.lower())
        return re.sub(r"[^a-z0-9_]", "", lowered)

    def target_url(self, base_url: str) -> str:
        """Listing page URL for this product under base_url."""
        base = base_url if base_url.endswith("/") else base_url + "/"
        return f"{base}{self.slug}/{self.version}"

    def download_name(self, book_title: str) -> str:
        """Unsanitized destination name for a book; the downloader cleans it."""
        return f"{self.name}-{self.version}-{book_title}"

    @property
    def results_filename(self) -> str:
        """Name of the JSON summary written at the end of a run."""
        name = re.sub(r"[^A-Za-z0-9]", "_", self.name)
        version = re.sub(r"[^A-Za-z0-9.]", "_", self.version)
        return f"{name}-{version}-download-results.json"


@dataclass(frozen=True)
class PdfUrl:
    """
    Absolute URL of a book's PDF rendition.
    """
    value: str

    def __post_init__(self):
        if not self.value.lower().startswith(("http://", "https://")):
            raise ValueError(f"PDF URL must be absolute: {self.value!r}")
