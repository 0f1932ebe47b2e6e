"""Exceptions raised inside source adapters.

None of these escape BaseJobSource.fetch(): they are caught per page or per
item, logged, and counted.
"""


class SourceError(Exception):
    """Base class for adapter failures"""


class MalformedPayload(SourceError, ValueError):
    """An upstream item is missing a field the adapter cannot default"""


class BudgetExhausted(SourceError):
    """The invocation deadline ran out before the next upstream call"""
