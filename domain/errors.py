"""
Error types shared across the analysis.
"""


class ConfigurationError(RuntimeError):
    """
    Fatal misconfiguration of an analysis run.

    Raised for a missing table directory, an output file that cannot be
    created or an input list that cannot be opened. There is no recovery
    path; the command line entry point exits with a non-zero status.
    """
