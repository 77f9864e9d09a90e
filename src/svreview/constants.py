"""
module responsible for small utility functions and constants used throughout the svreview package
"""
from typing import List

PROGNAME: str = 'svreview'
EXIT_OK: int = 0
EXIT_ERROR: int = 1


class ReviewNamespace:
    """
    Namespace to hold controlled vocabulary as class attributes

    Example:
        >>> class THING(ReviewNamespace):
        ...     A: str = 'a'
        >>> THING.values()
        ['a']
        >>> THING.enforce('b')
        Traceback (most recent call last):
        ...
        KeyError: ...
    """

    @classmethod
    def keys(cls) -> List[str]:
        return [
            k
            for k, v in vars(cls).items()
            if not k.startswith('_')
            and not isinstance(v, (classmethod, staticmethod))
            and not callable(v)
        ]

    @classmethod
    def values(cls) -> List:
        return [getattr(cls, k) for k in cls.keys()]

    @classmethod
    def enforce(cls, value):
        """
        checks that the current value is part of the namespace

        Raises:
            KeyError: the value is not in the namespace
        """
        if value not in cls.values():
            raise KeyError(f'value {value!r} is not a valid member of {cls.__name__}', cls.values())
        return value


class DECISION(ReviewNamespace):
    """
    holds controlled vocabulary for the reviewer decision of a clustered call

    Attributes:
        NA: no decision has been made yet
        ACCEPT: the event was judged to be real
        REJECT: the event was judged to be an artifact
        MAYBE: the reviewer could not decide
    """

    NA: str = 'NA'
    ACCEPT: str = 'accept'
    REJECT: str = 'reject'
    MAYBE: str = 'maybe'


class COLUMNS(ReviewNamespace):
    """
    Column names for i/o files and tables used throughout the package
    """

    sample: str = 'sample'
    chr1: str = 'chr1'
    bp1: str = 'bp1'
    chr2: str = 'chr2'
    bp2: str = 'bp2'
    decision: str = 'decision'
    cluster_key: str = 'cluster_key'
    cluster_size: str = 'cluster_size'
    clustered_index: str = 'clustered_index'


CORE_COLUMNS: List[str] = [
    COLUMNS.sample,
    COLUMNS.chr1,
    COLUMNS.bp1,
    COLUMNS.chr2,
    COLUMNS.bp2,
    COLUMNS.decision,
]
"""columns every raw call table must carry, in output order"""

REQUIRED_INPUT_COLUMNS: List[str] = [c for c in CORE_COLUMNS if c != COLUMNS.decision]

LIST_DELIM: str = ';'
"""delimiter used to join multi-valued properties when writing tabbed output"""


def sort_columns(input_columns):
    order = {}
    for i, col in enumerate(COLUMNS.values()):
        order[col] = i
    temp = sorted([c for c in input_columns if c in order], key=lambda x: order[x])
    temp = temp + [c for c in input_columns if c not in order]
    return temp


class SUBCOMMAND(ReviewNamespace):
    """
    holds controlled vocabulary for the command line subprograms
    """

    CLUSTER: str = 'cluster'
    DECIDE: str = 'decide'
    SUMMARY: str = 'summary'
