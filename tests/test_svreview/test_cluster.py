import random

import pytest
import timeout_decorator

from svreview.breakpoint import Breakpoint, BreakpointPair
from svreview.cluster import Cluster, cluster_calls, find_edges, select_representative
from svreview.error import MalformedInputError
from svreview.table import VariantCall

from ..util import EXAMPLE_ROWS, mock_table


def pair(pos1, pos2, chr1='1', chr2='5'):
    return BreakpointPair(Breakpoint(chr1, pos1), Breakpoint(chr2, pos2))


class TestClusterTuple:
    def test_sorts_indices(self):
        cluster = Cluster([5, 2, 3], 3)
        assert cluster.indices == [2, 3, 5]
        assert len(cluster) == 3

    def test_empty(self):
        with pytest.raises(ValueError):
            Cluster([], 0)

    def test_representative_not_a_member(self):
        with pytest.raises(ValueError):
            Cluster([1, 2], 0)


class TestFindEdges:
    def test_within_tolerance(self):
        group = [(0, pair(100, 100)), (1, pair(105, 100)), (2, pair(200, 100))]
        assert list(find_edges(group, 5)) == [(0, 1)]

    def test_second_breakpoint_too_far(self):
        group = [(0, pair(100, 100)), (1, pair(100, 106))]
        assert list(find_edges(group, 5)) == []

    def test_unsorted_input(self):
        group = [(0, pair(210, 100)), (1, pair(200, 100)), (2, pair(205, 100))]
        edges = {tuple(sorted(e)) for e in find_edges(group, 5)}
        assert edges == {(1, 2), (0, 2)}

    @timeout_decorator.timeout(10)
    def test_large_group(self):
        # one chromosome pair with nothing in range of anything else
        group = [(i, pair(i * 20, 1000)) for i in range(100000)]
        random.Random(0).shuffle(group)
        assert list(find_edges(group, 10)) == []

    @timeout_decorator.timeout(10)
    def test_large_group_with_matches(self):
        group = [(i, pair((i // 2) * 50 + i % 2, 1000)) for i in range(100000)]
        assert len(list(find_edges(group, 10))) == 50000


class TestSelectRepresentative:
    def test_single(self):
        calls = [VariantCall('s1', '1', 100, '5', 100)]
        assert select_representative([0], [c.breakpoints for c in calls], calls) == 0

    def test_closest_to_centroid(self):
        calls = [
            VariantCall('s1', '1', 100, '5', 100),
            VariantCall('s1', '1', 104, '5', 104),
            VariantCall('s1', '1', 110, '5', 110),
        ]
        pairs = [c.breakpoints for c in calls]
        assert select_representative([0, 1, 2], pairs, calls) == 1

    def test_tie_broken_by_sample(self):
        calls = [VariantCall('s2', '1', 102, '5', 101), VariantCall('s1', '1', 100, '5', 100)]
        pairs = [c.breakpoints for c in calls]
        assert select_representative([0, 1], pairs, calls) == 1

    def test_identical_calls(self):
        calls = [VariantCall('s1', '1', 100, '5', 100), VariantCall('s1', '1', 100, '5', 100)]
        pairs = [c.breakpoints for c in calls]
        assert select_representative([0, 1], pairs, calls) == 0


class TestClusterCalls:
    def test_example(self):
        clusters = cluster_calls(mock_table(*EXAMPLE_ROWS), tolerance=5)
        assert [c.indices for c in clusters] == [[0, 2], [1], [4], [3]]
        assert clusters[0].representative == 0

    def test_representative_independent_of_order(self):
        rows = [EXAMPLE_ROWS[2], EXAMPLE_ROWS[0]]
        clusters = cluster_calls(mock_table(*rows), tolerance=5)
        assert len(clusters) == 1
        assert clusters[0].representative == 1

    def test_swapped_ends(self):
        table = mock_table(('s1', '1', 100, '5', 200), ('s2', '5', 202, '1', 98))
        clusters = cluster_calls(table, tolerance=5)
        assert [c.indices for c in clusters] == [[0, 1]]

    def test_transitive(self):
        table = mock_table(
            ('s1', '1', 100, '5', 100), ('s1', '1', 108, '5', 108), ('s1', '1', 116, '5', 116)
        )
        clusters = cluster_calls(table, tolerance=10)
        assert [c.indices for c in clusters] == [[0, 1, 2]]
        assert clusters[0].representative == 1

    def test_one_breakpoint_matches(self):
        table = mock_table(('s1', '1', 100, '5', 100), ('s1', '1', 100, '5', 500))
        assert len(cluster_calls(table, tolerance=10)) == 2

    def test_different_chromosomes(self):
        table = mock_table(('s1', '1', 100, '5', 100), ('s1', '1', 100, '6', 100))
        assert len(cluster_calls(table, tolerance=10)) == 2

    def test_same_sample(self):
        table = mock_table(*EXAMPLE_ROWS)
        clusters = cluster_calls(table, tolerance=5, same_sample=True)
        assert len(clusters) == len(EXAMPLE_ROWS)
        assert sorted(c.indices[0] for c in clusters) == list(range(len(EXAMPLE_ROWS)))

    def test_zero_tolerance(self):
        table = mock_table(
            ('s1', '1', 100, '5', 100), ('s2', '1', 100, '5', 100), ('s3', '1', 101, '5', 100)
        )
        clusters = cluster_calls(table, tolerance=0)
        assert [c.indices for c in clusters] == [[0, 1], [2]]

    def test_negative_tolerance(self):
        with pytest.raises(ValueError):
            cluster_calls(mock_table(*EXAMPLE_ROWS), tolerance=-1)

    def test_empty_table(self):
        assert cluster_calls(mock_table()) == []

    def test_malformed_call(self):
        table = mock_table(EXAMPLE_ROWS[0], ('s1', '1', None, '5', 100))
        with pytest.raises(MalformedInputError) as err:
            cluster_calls(table)
        assert 'row 1' in str(err.value)

    def test_missing_chromosome(self):
        table = mock_table(('s1', None, 100, '5', 100))
        with pytest.raises(MalformedInputError):
            cluster_calls(table)

    @timeout_decorator.timeout(60)
    def test_large_table(self):
        rows = [('s{}'.format(i % 3), '1', (i // 2) * 50 + i % 2, '1', 5000000) for i in range(40000)]
        clusters = cluster_calls(mock_table(*rows), tolerance=10)
        assert len(clusters) == 20000
        assert all(len(c) == 2 for c in clusters)


def random_rows(seed, count):
    rand = random.Random(seed)
    rows = []
    for index in range(count):
        chr1, chr2 = rand.choice('12'), rand.choice('12X')
        rows.append(
            (
                rand.choice(['s1', 's2', 's3']),
                chr1,
                rand.randint(0, 300),
                chr2,
                rand.randint(0, 300),
                {'id': index},
            )
        )
    return rows


def cluster_contents(table, clusters):
    result = set()
    for cluster in clusters:
        members = frozenset(table.call(i).get('id') for i in cluster.indices)
        rep = table.call(cluster.representative)
        result.add((members, (rep.sample,) + rep.breakpoints.canonical().key))
    return result


class TestClusterProperties:
    @pytest.mark.parametrize('seed', [1, 2, 3])
    def test_partition(self, seed):
        table = mock_table(*random_rows(seed, 200))
        clusters = cluster_calls(table, tolerance=10)
        indices = sorted(i for c in clusters for i in c.indices)
        assert indices == list(range(200))
        for cluster in clusters:
            assert cluster.representative in cluster.indices

    @pytest.mark.parametrize('seed', [4, 5])
    def test_deterministic(self, seed):
        table = mock_table(*random_rows(seed, 150))
        assert cluster_calls(table, tolerance=10) == cluster_calls(table, tolerance=10)

    @pytest.mark.parametrize('seed', [6, 7])
    def test_independent_of_input_order(self, seed):
        rows = random_rows(seed, 150)
        shuffled = rows[:]
        random.Random(seed).shuffle(shuffled)
        first = mock_table(*rows)
        second = mock_table(*shuffled)
        assert cluster_contents(first, cluster_calls(first, tolerance=10)) == cluster_contents(
            second, cluster_calls(second, tolerance=10)
        )

    @pytest.mark.parametrize('seed', [8])
    def test_members_are_linked(self, seed):
        # every member of a multi-call cluster matches at least one other member
        table = mock_table(*random_rows(seed, 200))
        for cluster in cluster_calls(table, tolerance=10):
            if len(cluster) == 1:
                continue
            pairs = [table.call(i).breakpoints.canonical() for i in cluster.indices]
            for i, curr in enumerate(pairs):
                assert any(curr.within(other, 10) for j, other in enumerate(pairs) if j != i)
