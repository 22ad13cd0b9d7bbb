"""Tests for the derived typology: tension, profiles, Jung type, insights."""

import pytest

from discform.catalog import Catalog
from discform.config import ScoringPolicy
from discform.core.scores import DiscScores
from discform.interpretation import (
    SALES_RULES,
    VERSATILE_INSIGHTS,
    classify_profile,
    competencies,
    jung_type,
    leadership_style,
    sales_insights,
    tension,
    tension_level,
)


def disc(d: int, i: int, s: int, c: int) -> DiscScores:
    return DiscScores(D=d, I=i, S=s, C=c)


class TestTension:
    """Tests for tension and its buckets."""

    @pytest.mark.parametrize(
        "total,level",
        [(0, "low"), (7, "low"), (8, "moderate"), (15, "moderate"), (16, "high"), (80, "high")],
    )
    def test_level_boundaries(self, total: int, level: str) -> None:
        """Test the low/moderate/high cutoffs."""
        assert tension_level(total) == level

    def test_delta_and_total(self) -> None:
        """Test per-factor absolute differences and their sum."""
        result = tension(disc(30, 20, 10, 0), disc(25, 25, 10, 3))
        assert result.delta == disc(5, 5, 0, 3)
        assert result.total == 13
        assert result.level == "moderate"

    def test_identical_vectors(self) -> None:
        """Test zero tension when natural equals adapted."""
        scores = disc(40, 30, 20, 10)
        assert tension(scores, scores).total == 0

    def test_policy_thresholds(self) -> None:
        """Test that thresholds come from the policy."""
        policy = ScoringPolicy(tension_low_below=2, tension_moderate_below=4)
        assert tension_level(3, policy) == "moderate"
        assert tension_level(4, policy) == "high"


class TestClassifyProfile:
    """Tests for classify_profile."""

    def test_secondary_below_minimum(self, catalog: Catalog) -> None:
        """Test that a runner-up under 20 gives no secondary profile."""
        profile = classify_profile(disc(30, 18, 12, 0), catalog)
        assert profile.primary_profile == "Diretor"
        assert profile.secondary_profile is None
        assert profile.secondary_factor is None

    def test_secondary_at_minimum(self, catalog: Catalog) -> None:
        """Test that a runner-up of 22 becomes the secondary profile."""
        profile = classify_profile(disc(28, 22, 10, 0), catalog)
        assert profile.primary_profile == "Diretor"
        assert profile.secondary_profile == "Comunicador"
        assert profile.description == (
            "Perfil Diretor/Comunicador - Orientado para resultados, decisivo e direto"
        )

    def test_secondary_exactly_twenty(self, catalog: Catalog) -> None:
        """Test that a runner-up of exactly 20 qualifies."""
        profile = classify_profile(disc(0, 10, 30, 20), catalog)
        assert profile.primary_profile == "Planejador"
        assert profile.secondary_profile == "Analista"

    def test_ties_follow_precedence(self, catalog: Catalog) -> None:
        """Test that ties resolve in D, I, S, C order."""
        profile = classify_profile(disc(10, 25, 25, 25), catalog)
        assert profile.primary_profile == "Comunicador"
        assert profile.secondary_profile == "Planejador"

    def test_all_equal(self, catalog: Catalog) -> None:
        """Test that a flat vector classifies as D with I secondary."""
        profile = classify_profile(disc(25, 25, 25, 25), catalog)
        assert profile.primary_factor.value == "D"
        assert profile.secondary_factor.value == "I"

    def test_description_without_secondary(self, catalog: Catalog) -> None:
        """Test the description for a single profile."""
        profile = classify_profile(disc(0, 0, 5, 35), catalog)
        assert profile.description.startswith("Perfil Analista - ")


class TestJungType:
    """Tests for jung_type."""

    def test_composites(self) -> None:
        """Test the pairwise composites."""
        result = jung_type(disc(40, 30, 20, 10))
        assert result.extroversion == 35
        assert result.introversion == 15
        assert result.thinking == 25
        assert result.feeling == 25
        assert result.type == "ENFP"

    def test_half_up_rounding(self) -> None:
        """Test that .5 composites round up before comparing."""
        result = jung_type(disc(21, 0, 20, 0))
        assert result.extroversion == 11
        assert result.introversion == 10
        assert result.type[0] == "E"

    def test_ties_fall_to_second_letter(self) -> None:
        """Test that equal composites choose I, S and F."""
        result = jung_type(disc(10, 10, 10, 10))
        assert result.type == "ISFP"

    @pytest.mark.parametrize("c,letter", [(20, "P"), (21, "J")])
    def test_judging_boundary(self, c: int, letter: str) -> None:
        """Test that J requires C strictly above 20."""
        assert jung_type(disc(0, 0, 0, c)).type[3] == letter

    def test_thinking(self) -> None:
        """Test a T outcome."""
        assert jung_type(disc(30, 0, 0, 30)).type == "ISTJ"


class TestLeadershipAndCompetencies:
    """Tests for leadership_style and competencies."""

    def test_leadership_relabels_natural(self) -> None:
        """Test the one-to-one relabeling."""
        style = leadership_style(disc(1, 2, 3, 4))
        assert (style.executive, style.motivator, style.systematic, style.methodical) == (
            1, 2, 3, 4,
        )

    def test_competencies_cover_both_vectors(self) -> None:
        """Test sixteen competencies, natural and adapted."""
        result = competencies(disc(40, 30, 20, 10), disc(10, 20, 30, 40))
        assert len(result) == 32
        assert result["boldness_n"] == 40
        assert result["boldness_a"] == 10
        assert result["sociability_n"] == 30
        assert result["concentration_a"] == 40


class TestSalesInsights:
    """Tests for sales_insights."""

    def test_rule_order(self) -> None:
        """Test that the rules are evaluated D, I, S, C."""
        assert [rule.factor.value for rule in SALES_RULES] == ["D", "I", "S", "C"]

    def test_first_match_wins(self) -> None:
        """Test that D wins when several factors clear the threshold."""
        result = sales_insights(disc(24, 40, 0, 0))
        assert result == SALES_RULES[0].bundle

    def test_threshold_inclusive(self) -> None:
        """Test that exactly 24 qualifies."""
        assert sales_insights(disc(0, 0, 24, 0)) == SALES_RULES[2].bundle

    def test_fallback(self) -> None:
        """Test the versatility bundle when nothing reaches 24."""
        assert sales_insights(disc(23, 23, 23, 23)) == VERSATILE_INSIGHTS

    def test_policy_threshold(self) -> None:
        """Test a lowered threshold."""
        policy = ScoringPolicy(sales_threshold=5)
        assert sales_insights(disc(0, 0, 0, 5), policy) == SALES_RULES[3].bundle
