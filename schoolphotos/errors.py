class ScrapeError(RuntimeError):
    """Base class for everything this package raises on purpose."""


class PostError(ScrapeError):
    """Raised for a failure scoped to a single post; the run goes on."""


class StructuralError(PostError):
    """Raised when the page does not have the shape the adapter expects."""


class CarouselOverrunError(StructuralError):
    """Raised when the lightbox keeps offering a next item past the step limit."""


class CorpusError(ScrapeError):
    """Raised when the persisted link list is missing or malformed."""


class LoginError(ScrapeError):
    """Raised when the interactive login did not complete in time."""


class ExifError(RuntimeError):
    """Raised when exiftool is missing or refuses to read/write a file."""
