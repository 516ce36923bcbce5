"""
Tests for fuzzy name matching.
"""

from dataclasses import dataclass

from brewing_calc.matching import (
    best_match_object,
    match_names,
    match_objects,
    normalise_ingredient_name,
    suggest_names,
)


@dataclass
class Named:
    name: str


class TestNormaliseIngredientName:
    """Tests for ingredient name normalisation."""

    def test_alias(self):
        assert normalise_ingredient_name("Safale US-05") == "us-05"
        assert normalise_ingredient_name("Black Patent") == "black malt"

    def test_canonical(self):
        assert normalise_ingredient_name("Maris Otter") == "maris otter"

    def test_whitespace(self):
        assert normalise_ingredient_name("  Citra ") == "citra"

    def test_unknown(self):
        assert normalise_ingredient_name("Kveik Voss") == "kveik voss"


class TestMatchNames:
    """Tests for string matching."""

    def test_exact(self):
        results = match_names("cascade", ["Cascade", "Centennial", "Citra"])
        assert results[0] == ("Cascade", 1.0)

    def test_word_order(self):
        results = match_names("Otter Maris", ["Maris Otter", "Munich"])
        assert results == [("Maris Otter", 1.0)]

    def test_threshold(self):
        assert match_names("zzzz", ["Cascade", "Citra"]) == []

    def test_empty_inputs(self):
        assert match_names("", ["Cascade"]) == []
        assert match_names("   ", ["Cascade"]) == []
        assert match_names("Cascade", []) == []

    def test_limit(self):
        candidates = ["Crystal 20", "Crystal 40", "Crystal 60", "Crystal 80"]
        assert len(match_names("crystal", candidates, threshold=0.0, limit=2)) == 2


class TestMatchObjects:
    """Tests for object matching."""

    def test_alias_scores_full(self):
        candidates = [Named("Columbus"), Named("Cascade")]
        results = match_objects("ctz", candidates, key=lambda n: n.name)
        assert results[0][0].name == "Columbus"
        assert results[0][1] == 1.0

    def test_best_first(self):
        candidates = [Named("Crystal 40"), Named("Crystal 60")]
        results = match_objects("Crystal 60", candidates, key=lambda n: n.name)
        assert results[0][0].name == "Crystal 60"

    def test_best_match_none(self):
        candidates = [Named("Cascade")]
        assert best_match_object("Pilsner", candidates, key=lambda n: n.name) is None

    def test_best_match(self):
        candidates = [Named("Cascade"), Named("Citra")]
        match = best_match_object("citra", candidates, key=lambda n: n.name)
        assert match[0].name == "Citra"


class TestSuggestNames:
    """Tests for loose suggestions."""

    def test_partial(self):
        assert suggest_names("casc", ["Citra", "Cascade"])[0] == "Cascade"
