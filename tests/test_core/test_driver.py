"""
Тесты драйвера сходимости (на последовательной стратегии).
"""

import numpy as np
import pytest
from chunked_kmeans.core.base import Converged, GaveUp, KMeansBase
from chunked_kmeans.core.cluster import make_cluster, seed_clusters
from chunked_kmeans.core.sequential import KMeansSequential
from chunked_kmeans.data.seeds import load_seeds


class _Oscillating(KMeansBase):
    """Стратегия-заглушка: центроид скачет между двумя положениями."""

    def map_chunks(self, clusters):
        n = self.n_iters_actual
        return [[make_cluster(0, self.points[: (n % 2) + 1])]]


class TestConvergence:
    def test_two_pairs_converge_after_one_iteration(self, two_pairs):
        X, seeds = two_pairs
        model = KMeansSequential()
        result = model.fit(X, seeds)

        assert isinstance(result.state, Converged)
        assert result.converged
        assert result.iterations == 1
        assert result.n_evaluations == 2

        c0, c1 = result.clusters
        assert (c0.id, c0.count) == (0, 2)
        assert (c1.id, c1.count) == (1, 2)
        np.testing.assert_allclose(c0.centroid, [0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(c1.centroid, [10.05, 9.95], atol=1e-12)

    def test_far_seed_is_dropped(self, two_pairs):
        X, seeds = two_pairs
        seeds = {**seeds, 2: np.array([1000.0, 1000.0])}
        result = KMeansSequential().fit(X, seeds)

        assert result.converged
        assert len(result.clusters) == 2
        assert [c.id for c in result.clusters] == [0, 1]

    def test_accepts_cluster_list(self, two_pairs):
        X, seeds = two_pairs
        from_mapping = KMeansSequential().fit(X, seeds)
        from_list = KMeansSequential().fit(X, seed_clusters(seeds))
        assert from_mapping.clusters == from_list.clusters

    def test_deterministic(self, medium_dataset):
        X, seeds = medium_dataset
        first = KMeansSequential().fit(X, seeds)
        second = KMeansSequential().fit(X, seeds)

        assert first.iterations == second.iterations
        assert first.clusters == second.clusters

    def test_no_empty_clusters(self, medium_dataset):
        X, seeds = medium_dataset
        result = KMeansSequential().fit(X, seeds)

        assert len(result.clusters) == 3
        assert all(c.count > 0 for c in result.clusters)
        assert sum(c.count for c in result.clusters) == X.shape[0]

    def test_timings_collected(self, small_dataset):
        X, seeds = small_dataset
        model = KMeansSequential()
        model.fit(X, seeds)

        assert model.t_map_total > 0
        assert model.t_reduce_total > 0
        assert abs(model.t_iter_total - (model.t_map_total + model.t_reduce_total)) < 1e-6
        assert model.clusters is model.result.clusters


class TestSeedOrder:
    def test_tie_goes_to_seed_listed_first_in_file(self, tmp_path):
        path = tmp_path / "kmeans-clusters"
        path.write_text("1 0.0 0.0\n0 2.0 0.0\n", encoding="utf-8")
        seeds = load_seeds(path)
        assert list(seeds) == [1, 0]

        # Точка равноудалена от обеих затравок
        X = np.array([[1.0, 0.0]])
        result = KMeansSequential().fit(X, seeds)

        assert result.converged
        assert [c.id for c in result.clusters] == [1]
        np.testing.assert_array_equal(result.clusters[0].centroid, [1.0, 0.0])

    def test_step_timings_logged_at_debug(self, two_pairs, recording_logger):
        X, seeds = two_pairs
        KMeansSequential(logger=recording_logger).fit(X, seeds)

        debug = recording_logger.messages("DEBUG")
        assert any(m.startswith("Iteration 0 map: ") for m in debug)
        assert any(m.startswith("Iteration 1 reduce: ") for m in debug)


class TestIterationCap:
    def test_gives_up_after_cap(self, recording_logger):
        X = np.array([[0.0, 0.0], [1.0, 1.0]])
        model = _Oscillating(max_iters=50, logger=recording_logger)
        result = model.fit(X, {0: [0.0, 0.0]})

        assert isinstance(result.state, GaveUp)
        assert not result.converged
        assert result.n_evaluations == 51
        assert result.iterations == 51
        # Последний вычисленный набор: 51-е вычисление (n=50) взяло 1 точку
        assert result.clusters[0].count == 1
        assert any("Giving up" in m for m in recording_logger.messages("WARNING"))

    def test_zero_cap_allows_single_evaluation(self, two_pairs):
        X, seeds = two_pairs
        result = KMeansSequential(max_iters=0).fit(X, seeds)

        assert isinstance(result.state, GaveUp)
        assert result.n_evaluations == 1
        assert [c.count for c in result.clusters] == [2, 2]

    @pytest.mark.parametrize("max_iters", [0, 1, 3, 10])
    def test_terminates_within_cap(self, medium_dataset, max_iters):
        X, seeds = medium_dataset
        result = KMeansSequential(max_iters=max_iters).fit(X, seeds)
        assert result.n_evaluations <= max_iters + 1

    def test_negative_cap_rejected(self):
        with pytest.raises(ValueError):
            KMeansSequential(max_iters=-1)


class TestMalformedInput:
    def test_empty_points(self):
        with pytest.raises(ValueError):
            KMeansSequential().fit(np.empty((0, 2)), {0: [0.0, 0.0]})

    def test_no_clusters(self, two_pairs):
        X, _ = two_pairs
        with pytest.raises(ValueError):
            KMeansSequential().fit(X, {})

    def test_dimension_mismatch(self, two_pairs):
        X, _ = two_pairs
        with pytest.raises(ValueError):
            KMeansSequential().fit(X, {0: [0.0, 0.0, 0.0]})

    def test_non_finite_points(self, two_pairs):
        X, seeds = two_pairs
        X = X.copy()
        X[0, 0] = np.nan
        with pytest.raises(ValueError):
            KMeansSequential().fit(X, seeds)
