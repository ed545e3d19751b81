from __future__ import annotations


class SplitterError(RuntimeError):
    pass


class InvalidArgumentError(SplitterError, ValueError):
    pass


class InputNotFoundError(SplitterError):
    pass


class ProbeFailedError(SplitterError):
    pass


class InvalidPlanError(SplitterError):
    pass


class PartTooLargeError(SplitterError):
    pass


class CutFailedError(SplitterError):
    pass


class UploadFailedError(SplitterError):
    pass


class MissingApiKeyError(UploadFailedError):
    pass


class SizeExceededError(SplitterError):
    pass


class DurationExceededError(SplitterError):
    pass
