"""
Тесты разбиения на чанки и редукции частичных агрегатов.
"""

import numpy as np
import pytest
from chunked_kmeans.core.assign import step
from chunked_kmeans.core.cluster import clusters_equal, make_cluster, seed_clusters
from chunked_kmeans.core.reduce import reduce_clusters, split_points


class TestSplitPoints:
    def test_even_split(self):
        assert split_points(10, 2) == [(0, 5), (5, 10)]

    def test_last_chunk_smaller(self):
        assert split_points(10, 3) == [(0, 4), (4, 8), (8, 10)]

    def test_fewer_chunks_than_requested(self):
        # ceil(21 / 5) = 5 → 5 чанков, но при 4 точках и 3 чанках их 2
        assert split_points(21, 5) == [(0, 5), (5, 10), (10, 15), (15, 20), (20, 21)]
        assert split_points(4, 3) == [(0, 2), (2, 4)]
        assert split_points(2, 5) == [(0, 1), (1, 2)]

    def test_covers_all_points_contiguously(self):
        for n in (1, 7, 100):
            for k in (1, 2, 3, 8):
                ranges = split_points(n, k)
                assert ranges[0][0] == 0
                assert ranges[-1][1] == n
                for (_, stop), (start, _) in zip(ranges, ranges[1:]):
                    assert stop == start
                assert len(ranges) <= k

    def test_invalid_chunks(self):
        with pytest.raises(ValueError):
            split_points(10, 0)

    def test_no_points(self):
        assert split_points(0, 3) == []


class TestReduceClusters:
    def test_merges_by_id(self):
        partials = [
            [make_cluster(0, np.array([[0.0, 0.0]])), make_cluster(1, np.array([[10.0, 10.0]]))],
            [make_cluster(1, np.array([[12.0, 12.0], [14.0, 14.0]]))],
        ]
        merged = reduce_clusters(partials)

        assert [c.id for c in merged] == [0, 1]
        assert merged[1].count == 3
        np.testing.assert_allclose(merged[1].centroid, [12.0, 12.0])

    def test_drops_zero_count(self):
        partials = [[make_cluster(0, np.empty((0, 2))), make_cluster(1, np.array([[1.0, 1.0]]))]]
        merged = reduce_clusters(partials)
        assert [c.id for c in merged] == [1]

    def test_sorted_by_id_regardless_of_arrival_order(self):
        a = make_cluster(2, np.array([[2.0, 2.0]]))
        b = make_cluster(0, np.array([[0.0, 0.0]]))
        assert [c.id for c in reduce_clusters([[a], [b]])] == [0, 2]
        assert [c.id for c in reduce_clusters([[b], [a]])] == [0, 2]

    def test_chunked_step_matches_whole(self, medium_dataset):
        X, seeds = medium_dataset
        clusters = seed_clusters(seeds)
        whole = reduce_clusters([step(clusters, X)])

        for n_chunks in (1, 2, 3, 7):
            partials = [step(clusters, X[a:b]) for a, b in split_points(X.shape[0], n_chunks)]
            chunked = reduce_clusters(partials)

            assert [c.id for c in chunked] == [c.id for c in whole]
            assert [c.count for c in chunked] == [c.count for c in whole]
            for c, w in zip(chunked, whole):
                np.testing.assert_allclose(c.centroid, w.centroid, rtol=0, atol=1e-9)

    def test_colocated_points_split_across_chunks(self):
        X = np.array([[3.0, 4.0], [3.0, 4.0]])
        clusters = seed_clusters({0: [3.0, 4.0], 1: [-50.0, -50.0]})

        whole = reduce_clusters([step(clusters, X)])
        chunked = reduce_clusters([step(clusters, X[a:b]) for a, b in split_points(2, 2)])

        assert clusters_equal(whole, chunked)
        np.testing.assert_array_equal(chunked[0].centroid, [3.0, 4.0])
