from typing import TYPE_CHECKING, Any, Dict, List, Tuple

from .constants import COLUMNS, DECISION
from .error import OutOfRangeError
from .table import VariantCall, VariantTable

if TYPE_CHECKING:
    from .cluster import Cluster


def cluster_identity(call: VariantCall) -> str:
    """
    content derived key for a cluster, built from its representative call. Used in place of the
    clustered row index, which is not stable between independent runs

    Example:
        >>> cluster_identity(VariantCall('s1', 'chr5', 200, '1', 100))
        's1|1:100|5:200'
    """
    pair = call.breakpoints.canonical()
    return f'{call.sample}|{pair.break1}|{pair.break2}'


class VariantTableCluster:
    """
    the clustered (deduplicated) view of a raw table along with the mapping back to the raw calls

    The raw table is frozen on construction and the cluster membership never changes. The only
    state which changes over a review session is the decision column of the clustered table
    """

    def __init__(self, raw_table: VariantTable, clusters: List['Cluster']):
        """
        Args:
            raw_table: the table the clusters were computed from
            clusters: partition of the raw row indices, in clustered row order
        """
        raw_table.freeze()
        self._raw_table = raw_table
        self._mapping: List[Tuple[int, ...]] = []
        self._keys: List[str] = []
        representatives = []

        for cluster in clusters:
            representative = raw_table.call(cluster.representative)
            call = representative.copy()
            call.decision = DECISION.NA
            representatives.append(call)
            self._mapping.append(tuple(cluster.indices))
            self._keys.append(cluster_identity(representative))

        self._clustered_table = VariantTable(
            representatives, column_names=raw_table.column_names()
        )

    @property
    def clustered_table(self) -> VariantTable:
        return self._clustered_table

    @property
    def raw_table(self) -> VariantTable:
        return self._raw_table

    def __len__(self):
        return len(self._mapping)

    def _check_index(self, index: int):
        # bounds are the same as the clustered table
        self._clustered_table.call(index)

    def raw_indices(self, index: int) -> List[int]:
        """
        raw row indices belonging to a clustered row, in raw row order

        Raises:
            OutOfRangeError: index is not a valid clustered row
        """
        self._check_index(index)
        return list(self._mapping[index])

    def related_calls(self, index: int) -> List[Dict[str, Any]]:
        """
        every raw call belonging to the cluster of a clustered row, in raw row order

        Raises:
            OutOfRangeError: index is not a valid clustered row
        """
        return [self._raw_table.row(i) for i in self.raw_indices(index)]

    def cluster_key(self, index: int) -> str:
        self._check_index(index)
        return self._keys[index]

    def cluster_keys(self) -> List[str]:
        return list(self._keys)

    def find(self, key: str) -> int:
        """
        clustered row index for a stable cluster key

        Raises:
            OutOfRangeError: no cluster has the given key
        """
        try:
            return self._keys.index(key)
        except ValueError:
            raise OutOfRangeError(f'no cluster with key {key!r}')

    def set_decision(self, index: int, decision: str):
        self._clustered_table.set_property(index, COLUMNS.decision, decision)

    def decision_snapshot(self) -> List[Tuple[str, str]]:
        """
        (stable key, decision) for every clustered row, taken at a single point in time
        """
        return list(zip(self._keys, self._clustered_table.column_snapshot(COLUMNS.decision)))
