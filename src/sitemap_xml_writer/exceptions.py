"""Exception hierarchy for the sitemap writer."""


class SitemapError(Exception):
    """Base class for all sitemap writer errors."""


class InvalidLocError(SitemapError, ValueError):
    """The ``loc`` value is not an acceptable URL."""


class InvalidLastmodError(SitemapError, ValueError):
    """The ``lastmod`` value matches neither the date nor the dateTime grammar."""


class InvalidChangefreqError(SitemapError, ValueError):
    """The ``changefreq`` value is not one of the seven protocol tokens."""


class InvalidPriorityError(SitemapError, ValueError):
    """The ``priority`` value is not a decimal in [0.0, 1.0]."""


class SitemapIOError(SitemapError, OSError):
    """The underlying sink failed to accept bytes."""


class MaxByteLengthError(SitemapError):
    """Writing the fragment would exceed 50 MiB (52,428,800 bytes)."""

    def __init__(self, message: str = "max byte length is 50 MiB (52,428,800 bytes)"):
        super().__init__(message)


class MaxNumberOfUrlsError(SitemapError):
    """The sitemap already holds 50,000 ``url`` entries."""

    def __init__(self, message: str = "max number of urls is 50,000"):
        super().__init__(message)


class MaxNumberOfSitemapsError(SitemapError):
    """The sitemap index already holds 50,000 ``sitemap`` entries."""

    def __init__(self, message: str = "max number of sitemaps is 50,000"):
        super().__init__(message)


class WriterClosedError(SitemapError):
    """The document was already ended, aborted or handed back to the caller."""
