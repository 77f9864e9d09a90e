"""
groups raw calls describing the same breakpoint event into clusters

Algorithm Overview
--------------------

- Parse the breakpoints of every call (any malformed call aborts clustering)
- Put each call in canonical form (ends ordered by chromosome then position) so that calls
  reporting the ends in the opposite order compare directly
- Split the calls by chromosome pair (and sample, when required)
- Within a group, sweep the calls sorted by their first position and link any two calls
  whose corresponding breakpoints are both within the tolerance
- The connected components of the resulting graph are the clusters. Matching is
  transitive: A~B and B~C puts A, B and C together even if A and C are far apart
- Pick the call closest to the centroid of each cluster as its representative
"""
import itertools
from collections import namedtuple
from typing import TYPE_CHECKING, Dict, Iterator, List, Tuple

import networkx as nx
import numpy as np

from .breakpoint import BreakpointPair
from .error import MalformedInputError
from .schemas import DEFAULTS
from .table import VariantCall, VariantTable

if TYPE_CHECKING:
    from .table_cluster import VariantTableCluster


class Cluster(namedtuple('Cluster', ['indices', 'representative'])):
    """
    Attributes:
        indices (List[int]): raw row indices of the cluster members in ascending order
        representative (int): raw row index of the call standing in for the cluster
    """

    def __new__(cls, indices, representative):
        indices = sorted(indices)
        if not indices:
            raise ValueError('a cluster must contain at least one call')
        if representative not in indices:
            raise ValueError('representative must be a member of the cluster', representative)
        return super(Cluster, cls).__new__(cls, indices, representative)

    def __len__(self):
        return len(self.indices)


def parse_breakpoints(table: VariantTable) -> List[BreakpointPair]:
    """
    canonical breakpoint pairs for every row of the table

    Raises:
        MalformedInputError: any call has a missing or unparseable chromosome or position
    """
    pairs = []
    for index, call in enumerate(table.calls()):
        try:
            pairs.append(call.breakpoints.canonical())
        except ValueError as err:
            raise MalformedInputError(
                f'row {index}: unable to parse the breakpoints of {call!r}: {err}'
            ) from err
    return pairs


def group_key(call: VariantCall, pair: BreakpointPair, same_sample: bool = False) -> Tuple:
    if same_sample:
        return pair.chromosomes + (str(call.sample),)
    return pair.chromosomes


def find_edges(
    group: List[Tuple[int, BreakpointPair]], tolerance: int
) -> Iterator[Tuple[int, int]]:
    """
    all pairs of row indices within a group whose breakpoints are within tolerance

    Args:
        group: (row index, canonical breakpoint pair) of calls sharing the same chromosome pair
    """
    members = sorted(group, key=lambda x: (x[1].break1.pos, x[0]))
    for i, (curr_index, curr) in enumerate(members):
        # the members are sorted so stop once the first breakpoint alone is too far
        for j in range(i + 1, len(members)):
            other_index, other = members[j]
            if other.break1.pos - curr.break1.pos > tolerance:
                break
            if curr.within(other, tolerance):
                yield curr_index, other_index


def tie_break_key(call: VariantCall, pair: BreakpointPair) -> Tuple:
    return (str(call.sample),) + pair.key


def select_representative(
    indices: List[int], pairs: List[BreakpointPair], calls: List[VariantCall]
) -> int:
    """
    choose the call closest (sum of the absolute differences of both positions) to the centroid
    of the cluster. Ties are broken by content (sample then breakpoints) and lastly by row index
    so that the choice does not depend on the input order unless the calls are identical

    distances are computed as n * position - sum(positions) to keep them exact integers
    """
    if len(indices) == 1:
        return indices[0]
    positions = np.array(
        [[pairs[i].break1.pos, pairs[i].break2.pos] for i in indices], dtype=np.int64
    )
    distances = np.abs(len(indices) * positions - positions.sum(axis=0)).sum(axis=1)
    ranked = sorted(
        zip(indices, distances.tolist()),
        key=lambda x: (x[1], tie_break_key(calls[x[0]], pairs[x[0]]), x[0]),
    )
    return ranked[0][0]


def cluster_calls(
    table: VariantTable,
    tolerance: int = DEFAULTS['cluster.tolerance'],
    same_sample: bool = DEFAULTS['cluster.same_sample'],
) -> List[Cluster]:
    """
    partition the rows of a table into clusters of calls describing the same event

    Args:
        table: the raw call table
        tolerance: maximum distance allowed between corresponding breakpoints of linked calls
        same_sample: only link calls from the same sample

    Returns:
        the clusters ordered by the position of their representative. Every row index of the
        table belongs to exactly one cluster

    Raises:
        MalformedInputError: any call has a missing or unparseable chromosome or position
    """
    if tolerance < 0:
        raise ValueError('tolerance must be non-negative', tolerance)
    calls = table.calls()
    pairs = parse_breakpoints(table)

    groups: Dict[Tuple, List[Tuple[int, BreakpointPair]]] = {}
    for index, (call, pair) in enumerate(zip(calls, pairs)):
        groups.setdefault(group_key(call, pair, same_sample), []).append((index, pair))

    graph = nx.Graph()
    graph.add_nodes_from(range(len(calls)))
    for key in sorted(groups):
        graph.add_edges_from(find_edges(groups[key], tolerance))

    clusters = []
    for component in nx.connected_components(graph):
        indices = sorted(component)
        clusters.append(Cluster(indices, select_representative(indices, pairs, calls)))

    clusters.sort(
        key=lambda c: (
            pairs[c.representative].key,
            str(calls[c.representative].sample),
            c.indices[0],
        )
    )
    # every input row must end up in exactly one cluster
    assigned = list(itertools.chain.from_iterable(c.indices for c in clusters))
    if sorted(assigned) != list(range(len(calls))):
        raise AssertionError(
            'clusters do not partition the input ({} assigned, {} input)'.format(
                len(assigned), len(calls)
            )
        )
    return clusters


def build_table_cluster(table: VariantTable, **kwargs) -> 'VariantTableCluster':
    """
    cluster a raw table and wrap the raw and clustered views

    Args:
        table: the raw table, frozen by this call
        kwargs: passed to cluster_calls
    """
    from .table_cluster import VariantTableCluster

    return VariantTableCluster(table, cluster_calls(table, **kwargs))
