class ReconciliationError(Exception):
    """A run could not produce output."""


class InputMalformedError(ReconciliationError):
    """An uploaded table is missing, undecodable, or lacks a required column."""


class VocabularyUnavailableError(ReconciliationError):
    """The tag vocabulary could not be fetched or parsed."""
