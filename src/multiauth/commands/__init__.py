"""Built-in CLI sub-command groups.

- :mod:`~multiauth.commands.services` -- ``multiauth services ...``
- :mod:`~multiauth.commands.auth` -- ``multiauth auth ...``
"""
