"""Exception hierarchy.

Store failures are raised as StoreUnavailable by the repository. The analysis
pipeline wraps every failure of a run in an AnalysisError subclass; the API
maps those to HTTP 500.
"""


class AsyncBriefError(Exception):
    pass


class StoreUnavailable(AsyncBriefError):
    """The SQLite message store could not be read or written."""


class AnalysisError(AsyncBriefError):
    def __init__(self, variant: str, message: str):
        super().__init__(f"[{variant}] {message}")
        self.variant = variant
        self.message = message


class DataUnavailable(AnalysisError):
    """Reading the message window failed or returned no messages."""


class UpstreamError(AnalysisError):
    """The LLM call failed or returned a non-success status."""


class MalformedUpstreamResponse(AnalysisError):
    """The LLM payload could not be parsed into the expected shape."""


class AnalysisFailed(AnalysisError):
    """Any other failure inside an analysis run."""
