"""Unit tests for sediment classification."""

import pytest

from samples.sediment import SEDIMENT_THRESHOLDS, SedimentType, classify

ORDER = list(SedimentType)


@pytest.mark.unit
class TestClassify:
    """Tests for the dmed -> sediment type mapping"""

    @pytest.mark.parametrize(
        "dmed, expected",
        [
            (0.0, SedimentType.SILT_CLAY),
            (0.0629999, SedimentType.SILT_CLAY),
            (0.063, SedimentType.FINE_SAND),
            (0.199, SedimentType.FINE_SAND),
            (0.2, SedimentType.MEDIUM_SAND),
            (0.629, SedimentType.MEDIUM_SAND),
            (0.63, SedimentType.VERY_COARSE_SAND),
            (1.99, SedimentType.VERY_COARSE_SAND),
            (2.0, SedimentType.GRAVEL),
            (1e9, SedimentType.GRAVEL),
        ],
    )
    def test_class_boundaries(self, dmed, expected):
        """Lower bounds are inclusive, upper bounds exclusive"""
        assert classify(dmed) == expected

    def test_labels_match_stored_values(self):
        assert classify(0.063) == "Fine Sand"
        assert classify(0.01) == "Silt/Clay"

    def test_monotonic_in_coarseness(self):
        """A larger dmed never gives a finer class"""
        values = [i * 0.001 for i in range(0, 3000)] + [5.0, 50.0, 5000.0]
        ranks = [ORDER.index(classify(value)) for value in values]
        assert ranks == sorted(ranks)

    def test_every_class_reachable(self):
        reached = {classify(0.0)} | {classify(bound) for bound, _ in SEDIMENT_THRESHOLDS}
        assert reached == set(SedimentType)
