"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~multiauth.exceptions.MultiauthError` subclass.
Shell wrappers can inspect the exit code to tell a rejected credential
apart from an unreachable token endpoint without parsing stderr.

Example::

    $ multiauth auth sign twitter --credential env:TWITTER_PICKLE
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the stored credential could not be loaded
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""Authentication or authorisation failed."""

EXIT_CONNECTION_ERROR = 6
"""A token endpoint could not be reached or answered with an HTTP error."""
