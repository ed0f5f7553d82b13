"""Exceptions raised by the booking configurator.

Incomplete drafts are never errors; these cover caller bugs and misuse of
the submission lifecycle.
"""

from __future__ import annotations


class InvalidReferenceError(ValueError):
    """A draft references something outside the supplied catalogs.

    Unknown tier/scenario/terms ids, or a scheduled commencement without a
    date-time. Indicates a caller bug, not a user input problem.
    """


class DraftLockedError(RuntimeError):
    """The draft cannot be changed right now.

    Raised while a submission is outstanding, or after the draft has been
    consumed by a successful payment.
    """


class SubmissionInProgressError(DraftLockedError):
    """A second submit was attempted while one is still outstanding."""
