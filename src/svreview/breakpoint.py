import math
import re
from typing import Tuple


def parse_chromosome(value) -> str:
    """
    normalize a chromosome name, dropping any leading 'chr'

    Raises:
        ValueError: the chromosome is missing or empty

    Example:
        >>> parse_chromosome('chrX')
        'X'
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        raise ValueError('missing chromosome')
    name = re.sub(r'^chr', '', str(value).strip())
    if not name:
        raise ValueError('empty chromosome name', value)
    return name


def parse_position(value) -> int:
    """
    cast a breakpoint position to a non-negative integer. Accepts integral floats (ex. 100.0) as
    produced by most csv readers for numeric columns

    Raises:
        ValueError: the value is missing, fractional, negative or not numeric

    Example:
        >>> parse_position('100')
        100
        >>> parse_position(100.0)
        100
    """
    if value is None or isinstance(value, bool):
        raise ValueError('missing or non-numeric position', value)
    if isinstance(value, float):
        if math.isnan(value) or not value.is_integer():
            raise ValueError('position must be an integer', value)
        value = int(value)
    elif not isinstance(value, int):
        text = str(value).strip()
        if not re.match(r'^\d+(\.0+)?$', text):
            raise ValueError('position must be an integer', value)
        value = int(float(text))
    if value < 0:
        raise ValueError('position must be non-negative', value)
    return value


class Breakpoint:
    """
    class for storing one end of a SV call. Coordinates are given as 1-indexed
    """

    chr: str
    pos: int

    @property
    def key(self) -> Tuple[str, int]:
        return (self.chr, self.pos)

    def __init__(self, chr, pos):
        """
        Args:
            chr: the chromosome
            pos: the genomic position of the breakpoint

        Raises:
            ValueError: either value cannot be parsed

        Examples:
            >>> Breakpoint('1', 100)
            >>> Breakpoint('chr1', '100')
        """
        self.chr = parse_chromosome(chr)
        self.pos = parse_position(pos)

    def __repr__(self):
        return 'Breakpoint({0}:{1})'.format(self.chr, self.pos)

    def __str__(self):
        return '{0}:{1}'.format(self.chr, self.pos)

    def __eq__(self, other):
        if not hasattr(other, 'key'):
            return False
        return self.key == other.key

    def __lt__(self, other):
        return self.key < other.key

    def __hash__(self):
        return hash(self.key)


class BreakpointPair:
    """
    both ends of a SV call
    """

    break1: Breakpoint
    break2: Breakpoint

    def __init__(self, break1: Breakpoint, break2: Breakpoint):
        self.break1 = break1
        self.break2 = break2

    def __getitem__(self, index):
        try:
            index = int(index)
        except ValueError:
            raise IndexError('index input accessor must be an integer', index)
        if index == 0:
            return self.break1
        elif index == 1:
            return self.break2
        raise IndexError('index input accessor is out of bounds: 1 or 2 only', index)

    def __repr__(self):
        return 'BreakpointPair({}, {})'.format(repr(self.break1), repr(self.break2))

    def __eq__(self, other):
        for attr in ['break1', 'break2']:
            if not hasattr(other, attr):
                return False
            elif getattr(self, attr) != getattr(other, attr):
                return False
        return True

    def __hash__(self):
        return hash((self.break1, self.break2))

    @property
    def key(self) -> Tuple[str, int, str, int]:
        return self.break1.key + self.break2.key

    def canonical(self) -> 'BreakpointPair':
        """
        the same pair with the ends ordered by (chromosome, position). Calls which
        only differ in which end was reported first have the same canonical form

        Example:
            >>> BreakpointPair(Breakpoint('5', 10), Breakpoint('1', 20)).canonical()
            BreakpointPair(Breakpoint(1:20), Breakpoint(5:10))
        """
        if self.break2 < self.break1:
            return BreakpointPair(self.break2, self.break1)
        return self

    @property
    def chromosomes(self) -> Tuple[str, str]:
        return (self.break1.chr, self.break2.chr)

    def within(self, other: 'BreakpointPair', tolerance: int) -> bool:
        """
        True if both ends lie on the same chromosomes as the other pair and each end is no
        more than tolerance bases from the corresponding end of the other pair. Both pairs
        are expected to be in canonical form
        """
        if self.chromosomes != other.chromosomes:
            return False
        return (
            abs(self.break1.pos - other.break1.pos) <= tolerance
            and abs(self.break2.pos - other.break2.pos) <= tolerance
        )
