"""
Tests for style comparison.
"""

from brewing_calc.models import RecipeCalculations, StyleSpec
from brewing_calc.styles import ABOVE, BELOW, WITHIN, compare_to_style, has_any_range, range_status

AMERICAN_PALE_ALE = StyleSpec(
    code="18B",
    name="American Pale Ale",
    og=(1.045, 1.060),
    fg=(1.010, 1.015),
    abv=(4.5, 6.2),
    ibu=(30.0, 50.0),
    srm=(5.0, 10.0),
)


class TestRangeStatus:
    """Tests for placing a value in a range."""

    def test_statuses(self):
        assert range_status(1.0, 2.0, 3.0) == BELOW
        assert range_status(2.5, 2.0, 3.0) == WITHIN
        assert range_status(3.5, 2.0, 3.0) == ABOVE

    def test_bounds_inclusive(self):
        assert range_status(2.0, 2.0, 3.0) == WITHIN
        assert range_status(3.0, 2.0, 3.0) == WITHIN


class TestCompareToStyle:
    """Tests for full style comparison."""

    def test_all_metrics(self):
        calc = RecipeCalculations(og=1.052, fg=1.012, abv=5.3, ibu=38.0, srm=6.5, ebc=12.8)
        results = compare_to_style(calc, AMERICAN_PALE_ALE)
        assert [r.metric for r in results] == ["og", "fg", "abv", "ibu", "srm", "ebc"]
        assert all(r.in_range for r in results)

    def test_out_of_range(self):
        calc = RecipeCalculations(og=1.070, fg=1.008, abv=8.1, ibu=25.0, srm=6.5, ebc=12.8)
        by_metric = {r.metric: r for r in compare_to_style(calc, AMERICAN_PALE_ALE)}
        assert by_metric["og"].status == ABOVE
        assert by_metric["fg"].status == BELOW
        assert by_metric["ibu"].status == BELOW
        assert by_metric["ibu"].low == 30.0
        assert by_metric["ibu"].high == 50.0

    def test_metrics_without_range_skipped(self):
        spec = StyleSpec(code="X", ibu=(10.0, 20.0))
        results = compare_to_style(RecipeCalculations(ibu=15.0), spec)
        assert [r.metric for r in results] == ["ibu"]

    def test_explicit_ebc_without_srm(self):
        spec = StyleSpec(code="X", ebc=(10.0, 20.0))
        results = compare_to_style(RecipeCalculations(ebc=25.0), spec)
        assert len(results) == 1
        assert results[0].status == ABOVE


class TestHasAnyRange:
    """Tests for style range presence."""

    def test_with_ranges(self):
        assert has_any_range(AMERICAN_PALE_ALE)

    def test_without_ranges(self):
        assert not has_any_range(StyleSpec(code="X", name="Historical"))

    def test_none(self):
        assert not has_any_range(None)
