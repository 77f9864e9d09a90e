"""
holds the call records and the table abstraction shared by the raw and clustered views
"""
import copy
import numbers
import threading
from typing import Any, Dict, Iterable, List, Optional

from .breakpoint import Breakpoint, BreakpointPair
from .constants import COLUMNS, CORE_COLUMNS, DECISION
from .error import InvalidDecisionError, OutOfRangeError, ReadOnlyTableError, UnknownColumnError


class VariantCall:
    """
    a single SV call: a typed core (sample, both breakpoints, decision) plus the pipeline
    specific properties in the data attribute

    The breakpoint fields are kept as they were read. They are only parsed (and validated) when
    the breakpoints property is accessed so that malformed calls are reported by clustering
    """

    sample: Any
    chr1: Any
    bp1: Any
    chr2: Any
    bp2: Any
    decision: str
    data: Dict[str, Any]

    def __init__(
        self,
        sample,
        chr1,
        bp1,
        chr2,
        bp2,
        decision: str = DECISION.NA,
        data: Optional[Dict[str, Any]] = None,
    ):
        self.sample = sample
        self.chr1 = chr1
        self.bp1 = bp1
        self.chr2 = chr2
        self.bp2 = bp2
        self.decision = decision
        self.data = dict(data) if data else {}

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> 'VariantCall':
        """
        build a call from a flat row. Any column which is not a core column is stored in data
        """
        data = {k: v for k, v in row.items() if k not in CORE_COLUMNS}
        return cls(
            row.get(COLUMNS.sample),
            row.get(COLUMNS.chr1),
            row.get(COLUMNS.bp1),
            row.get(COLUMNS.chr2),
            row.get(COLUMNS.bp2),
            decision=row.get(COLUMNS.decision) or DECISION.NA,
            data=data,
        )

    @property
    def breakpoints(self) -> BreakpointPair:
        """
        Raises:
            ValueError: a chromosome or position is missing or cannot be parsed
        """
        return BreakpointPair(Breakpoint(self.chr1, self.bp1), Breakpoint(self.chr2, self.bp2))

    def get(self, column: str):
        if column in CORE_COLUMNS:
            return getattr(self, column)
        return self.data.get(column)

    def set(self, column: str, value):
        if column in CORE_COLUMNS:
            setattr(self, column, value)
        else:
            self.data[column] = value

    def flatten(self, columns: Iterable[str]) -> Dict[str, Any]:
        """
        the call as a column name to value mapping restricted to (and ordered by) the given columns.
        Multi-valued properties are copied so the result can be handed out safely
        """
        return {c: copy.copy(self.get(c)) for c in columns}

    def copy(self) -> 'VariantCall':
        return VariantCall(
            self.sample,
            self.chr1,
            self.bp1,
            self.chr2,
            self.bp2,
            decision=self.decision,
            data=copy.deepcopy(self.data),
        )

    def __repr__(self):
        return 'VariantCall({}, {}:{}, {}:{}, decision={})'.format(
            self.sample, self.chr1, self.bp1, self.chr2, self.bp2, self.decision
        )


class VariantTable:
    """
    ordered store of calls sharing one column schema

    Row indices are positional and only stable for the lifetime of the table instance. A single
    re-entrant lock guards cell writes, row copies and column snapshots so that a reader never
    observes a partially applied write and a snapshot reflects a single point in time
    """

    def __init__(self, calls: Iterable[VariantCall], column_names: Optional[List[str]] = None):
        """
        Args:
            calls: the calls in row order
            column_names: the column order. Defaults to the core columns followed by the extra
                properties in the order they are first seen. Core columns missing from the given
                list are prepended
        """
        self._calls: List[VariantCall] = list(calls)
        if column_names is None:
            column_names = []
            for call in self._calls:
                for col in call.data:
                    if col not in column_names:
                        column_names.append(col)
        self._columns = [c for c in CORE_COLUMNS if c not in column_names] + list(column_names)
        if len(set(self._columns)) != len(self._columns):
            raise KeyError('duplicate column: column names must be unique', self._columns)
        self._lock = threading.RLock()
        self._frozen = False

    def __len__(self):
        return len(self._calls)

    def size(self) -> int:
        return len(self._calls)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        """
        make the table read-only. There is no way to unfreeze a table
        """
        self._frozen = True

    def _check_index(self, index: int):
        if isinstance(index, bool) or not isinstance(index, numbers.Integral):
            raise OutOfRangeError('row index must be an integer', index)
        if index < 0 or index >= len(self._calls):
            raise OutOfRangeError(
                f'row index {index} is out of range for a table of {len(self._calls)} rows'
            )

    def _check_column(self, column: str):
        if column not in self._columns:
            raise UnknownColumnError(f'column {column!r} is not part of the table', self._columns)

    def call(self, index: int) -> VariantCall:
        """
        the record backing a row. Callers must not modify it, use set_property instead
        """
        self._check_index(index)
        return self._calls[index]

    def calls(self) -> List[VariantCall]:
        return list(self._calls)

    def row(self, index: int) -> Dict[str, Any]:
        """
        Returns:
            the row as a column name to value mapping

        Raises:
            OutOfRangeError: index is not in [0, size)
        """
        self._check_index(index)
        with self._lock:
            return self._calls[index].flatten(self._columns)

    def row_range(self, start: int, end: int) -> List[Dict[str, Any]]:
        """
        rows in [start, end). Returns an empty list when start >= end

        Raises:
            OutOfRangeError: the range extends beyond the table
        """
        if start >= end:
            return []
        if start < 0 or end > len(self._calls):
            raise OutOfRangeError(
                f'row range [{start}, {end}) is out of range for a table of {len(self._calls)} rows'
            )
        with self._lock:
            return [call.flatten(self._columns) for call in self._calls[start:end]]

    def column_names(self) -> List[str]:
        return list(self._columns)

    def set_property(self, index: int, column: str, value):
        """
        set a single cell. The only mutation entry point for a table

        Raises:
            OutOfRangeError: index is not in [0, size)
            UnknownColumnError: column is not part of the table
            InvalidDecisionError: the decision column is given a value outside DECISION
            ReadOnlyTableError: the table is frozen
        """
        if self._frozen:
            raise ReadOnlyTableError('cannot modify a frozen table')
        self._check_index(index)
        self._check_column(column)
        if column == COLUMNS.decision:
            try:
                DECISION.enforce(value)
            except KeyError:
                raise InvalidDecisionError(
                    f'invalid decision {value!r}, expected one of {DECISION.values()}'
                )
        with self._lock:
            self._calls[index].set(column, value)

    def column_snapshot(self, column: str) -> List[Any]:
        """
        copy of every value in a column taken while holding the table lock
        """
        self._check_column(column)
        with self._lock:
            return [copy.copy(call.get(column)) for call in self._calls]

    def __iter__(self):
        return iter(self.row_range(0, len(self._calls)))
