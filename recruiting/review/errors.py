"""Error kinds raised by the review engine.

Every error carries a machine-readable ``kind`` and a human message. None of
them is transient: retrying the same request gives the same outcome.
"""


class ReviewError(Exception):
    """Base class for rejected review requests."""
    kind = "review_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "detail": self.message}


class NotFound(ReviewError):
    """Referenced application, evaluation, posting or participation is absent."""
    kind = "not_found"


class InvalidTransition(ReviewError):
    """Requested status is not an allowed edge from the current status."""
    kind = "invalid_transition"


class InvalidScore(ReviewError):
    """Score (or its memo) outside the accepted bounds."""
    kind = "invalid_score"


class IntegrityError(ReviewError):
    """Posting or program data required for provisioning is missing.

    Not to be confused with ``sqlalchemy.exc.IntegrityError``.
    """
    kind = "integrity_error"


class SubmissionClosed(ReviewError):
    """Posting is unpublished or its recruitment window is not open."""
    kind = "submission_closed"
