"""Error kinds raised while building the informes feed."""


class InformesError(Exception):
    """Base class for every error that aborts a run."""


class FetchError(InformesError):
    """The source page could not be retrieved."""


class ParseError(InformesError):
    """Scraped content or a feed document could not be understood."""


class MalformedFeedError(ParseError):
    """The persisted feed exists but is not a valid RSS document."""


class FeedNotFoundError(ParseError, FileNotFoundError):
    """The persisted feed does not exist yet.

    Callers treat this as an empty feed: it marks the bootstrap run.
    """


class StorageError(InformesError):
    """The feed or the run log could not be written."""


class EntropyError(InformesError):
    """No random bytes were available for a new identifier."""
