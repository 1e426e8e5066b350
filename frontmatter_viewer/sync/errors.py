"""
Failure types raised inside the fetch/extract pipeline.

None of these escape the pipeline: they are caught at the per-prefix loop of
the fetcher, in the extractor, or at the controller's task boundary, logged,
and collapsed into "no metadata".
"""


class FrontmatterError(Exception):
    pass


class NetworkFailure(FrontmatterError):
    """Non-success status or transport exception."""


class NonJsonResponse(FrontmatterError):
    pass


class MissingBody(FrontmatterError):
    """JSON envelope decoded but no body field populated."""


class MalformedBlock(FrontmatterError):
    """Opening marker present without a matching closing marker."""
