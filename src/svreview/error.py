class OutOfRangeError(IndexError):
    """
    raised when a row index falls outside the valid bounds of a table
    """

    pass


class UnknownColumnError(KeyError):
    """
    raised when a column name is not part of the table schema
    """

    pass


class InvalidDecisionError(ValueError):
    pass


class ReadOnlyTableError(Exception):
    """
    raised on an attempt to modify a table which has been frozen (ex. the raw table once clustered)
    """

    pass


class MalformedInputError(ValueError):
    """
    raised when a call cannot be parsed into valid breakpoint data. Fatal to clustering
    """

    pass


class PersistenceError(OSError):
    """
    raised when previously saved progress exists but cannot be read back
    """

    pass
