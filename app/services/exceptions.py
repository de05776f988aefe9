class SubmissionError(Exception):
    """Base class for failures that decline a submission at intake."""


class SubmissionValidationError(SubmissionError):
    def __init__(self, errors: list | None = None):
        self.errors = errors or []
        super().__init__(f"Invalid submission: {self.errors}")


class SubmissionStorageError(SubmissionError):
    pass
