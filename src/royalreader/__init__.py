from .errors import (
    ExtractionError,
    FetchError,
    MalformedTimestampError,
    MarkerNotFoundError,
    MissingFieldError,
    NotFoundError,
    PersistenceError,
    ReaderError,
    UnbalancedBracketsError,
    UnrecognizedLayoutError,
)
from .extraction import (
    chapter_reference_from_entry,
    chapter_reference_from_row,
    flatten_content,
    locate_json_array,
)
from .models import Chapter, ChapterReference, Fiction
from .reading import ReadingPaneState
from .service import FictionService
from .storage import load_fiction_ids, load_fictions, save_fiction_ids
from .viewport import ListState

__all__ = [
    "Chapter",
    "ChapterReference",
    "Fiction",
    "FictionService",
    "ListState",
    "ReadingPaneState",
    "locate_json_array",
    "chapter_reference_from_row",
    "chapter_reference_from_entry",
    "flatten_content",
    "load_fiction_ids",
    "load_fictions",
    "save_fiction_ids",
    "ReaderError",
    "ExtractionError",
    "MarkerNotFoundError",
    "UnbalancedBracketsError",
    "MissingFieldError",
    "MalformedTimestampError",
    "FetchError",
    "NotFoundError",
    "UnrecognizedLayoutError",
    "PersistenceError",
]
