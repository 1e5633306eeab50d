from __future__ import annotations


class TreelineError(RuntimeError):
    pass


class FeedFetchError(TreelineError):
    pass


class FeedDecodeError(TreelineError):
    pass
