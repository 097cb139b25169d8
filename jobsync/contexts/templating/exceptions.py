"""Custom exceptions for templating context."""


class InvalidResumeStructureError(ValueError):
    """
    Exception raised when a structured resume file is invalid.

    This is raised when a YAML file doesn't conform to the expected resume
    schema (e.g., missing the top-level 'resume' key or with item lists that
    are not lists). Parsing generated markdown never raises this; only
    loading structured files does.
    """

    pass
