"""Tests for the analysis module."""

import numpy as np
import pandas as pd
import pytest

from judicial_cfscores.src.analysis import (
    IDEOLOGY_CATEGORIES,
    CFScoreAnalyzer,
    categorize_ideology,
    count_categories,
)
from judicial_cfscores.src.preprocessing import CFScoreDataPreprocessor


def make_analyzer(raw: pd.DataFrame) -> CFScoreAnalyzer:
    """Preprocess raw records and wrap them in an analyzer."""
    preprocessor = CFScoreDataPreprocessor(raw)
    views = preprocessor.preprocess_all()
    return CFScoreAnalyzer(plot_df=views["plot_data"], map_df=views["map_data"])


@pytest.fixture
def analyzer(sample_raw):
    """Create an analyzer over the sample records."""
    return make_analyzer(sample_raw)


class TestCategorizeIdeology:
    """Test cases for categorize_ideology."""

    def test_boundaries(self):
        """Test band edges and the order-resolved overlap at 0.35."""
        assert categorize_ideology(-0.35) == "Slightly Liberal"
        assert categorize_ideology(0.35) == "Conservative"
        assert categorize_ideology(0.0) == "Independent"
        assert categorize_ideology(0.9) == "Other"

    def test_band_interiors(self):
        """Test one value inside each band."""
        assert categorize_ideology(-0.5) == "Liberal"
        assert categorize_ideology(-0.2) == "Slightly Liberal"
        assert categorize_ideology(0.05) == "Independent"
        assert categorize_ideology(0.2) == "Slightly Conservative"
        assert categorize_ideology(0.6) == "Conservative"

    def test_independent_edges(self):
        """Test that +/-0.1 fall in the Independent band."""
        assert categorize_ideology(-0.1) == "Independent"
        assert categorize_ideology(0.1) == "Independent"

    def test_outside_bands(self):
        """Test values beyond +/-0.8."""
        assert categorize_ideology(-0.8) == "Other"
        assert categorize_ideology(0.8) == "Other"
        assert categorize_ideology(-1.5) == "Other"

    def test_missing(self):
        """Test that missing averages are Other."""
        assert categorize_ideology(np.nan) == "Other"
        assert categorize_ideology(None) == "Other"


class TestCFScoreAnalyzer:
    """Test cases for CFScoreAnalyzer."""

    def test_party_means(self, analyzer):
        """Test party means skip missing scores and unknown parties."""
        result = analyzer.compute_party_means()
        means = result.set_index("party")["mean_cfscore"]

        assert list(result["party"]) == [
            "Democratic", "Republican", "Independent/Non-Partisan"
        ]
        assert means["Democratic"] == pytest.approx(-0.2)
        assert means["Republican"] == pytest.approx(0.475)
        assert means["Independent/Non-Partisan"] == pytest.approx(0.05)

    def test_state_averages(self, analyzer):
        """Test per-state averages, keeping states with no scores."""
        result = analyzer.compute_state_averages().set_index("state")

        assert result.loc["california", "avg_cfscore"] == pytest.approx(-0.4)
        assert result.loc["texas", "avg_cfscore"] == pytest.approx(0.6)
        assert result.loc["texas", "n_scores"] == 1
        assert "wyoming" in result.index
        assert pd.isna(result.loc["wyoming", "avg_cfscore"])
        assert "guam" in result.index

    def test_state_averages_skip_unknown_party(self, analyzer):
        """Test that a record with an unknown party code adds no state row."""
        result = analyzer.compute_state_averages()
        assert "district of columbia" not in set(result["state"])

    def test_unknown_party_does_not_move_state(self):
        """Test a state mixing known and unknown party codes."""
        raw = pd.DataFrame({
            "state": ["CA", "CA"],
            "party": [100, 999],
            "cfscore": [-0.5, 0.9],
            "year_enter": [2000, 2001],
            "appointed": [1, 1],
            "legislative_election": [0, 0],
            "non_partisan_election": [0, 0],
        })
        result = make_analyzer(raw).categorize_states().set_index("state")

        assert result.loc["california", "avg_cfscore"] == pytest.approx(-0.5)
        assert result.loc["california", "n_scores"] == 1
        assert result.loc["california", "category"] == "Liberal"

    def test_missing_scores_excluded_everywhere(self, scenario_raw):
        """Test that a record with no score touches no aggregate."""
        with_missing = make_analyzer(scenario_raw)
        without = make_analyzer(scenario_raw[scenario_raw["cfscore"].notna()])

        pd.testing.assert_frame_equal(
            with_missing.compute_party_means(), without.compute_party_means()
        )
        pd.testing.assert_frame_equal(
            with_missing.compute_group_summary(), without.compute_group_summary()
        )
        pd.testing.assert_frame_equal(
            with_missing.compute_state_averages(), without.compute_state_averages()
        )

    def test_scenario(self, scenario_raw):
        """Test the four-record state scenario end to end."""
        result = make_analyzer(scenario_raw).categorize_states().set_index("state")

        assert len(result) == 2
        assert result.loc["california", "avg_cfscore"] == pytest.approx(-0.4)
        assert result.loc["texas", "avg_cfscore"] == pytest.approx(0.6)
        assert result.loc["california", "category"] == "Liberal"
        assert result.loc["texas", "category"] == "Conservative"

    def test_group_summary(self):
        """Test the statistics computed for one group."""
        raw = pd.DataFrame({
            "state": ["CA"] * 5,
            "party": [100, 100, 100, 100, 200],
            "cfscore": [-1.0, -0.5, 0.0, 0.5, 0.7],
            "year_enter": [2000] * 5,
            "appointed": [1, 1, 1, 1, 0],
            "legislative_election": [0, 0, 0, 0, 0],
            "non_partisan_election": [0, 0, 0, 0, 1],
        })
        result = make_analyzer(raw).compute_group_summary()

        assert list(result["party"]) == ["Democratic", "Republican"]
        dem = result.iloc[0]
        assert dem["appointment_type"] == "Appointed"
        assert dem["max"] == pytest.approx(0.5)
        assert dem["min"] == pytest.approx(-1.0)
        assert dem["mean"] == pytest.approx(-0.25)
        assert dem["median"] == pytest.approx(-0.25)
        assert dem["q25"] == pytest.approx(-0.625)
        assert dem["q75"] == pytest.approx(0.125)
        assert dem["n"] == 4
        assert result.iloc[1]["appointment_type"] == "Non-Partisan Election"

    def test_group_summary_ordering(self, analyzer):
        """Test groups are ordered by party then appointment type."""
        result = analyzer.compute_group_summary()
        dem = result[result["party"] == "Democratic"]

        assert list(dem["appointment_type"]) == [
            "Appointed", "Non-Partisan Election", "Other"
        ]

    def test_state_map_frame(self, analyzer):
        """Test the map frame covers every state plus DC."""
        result = analyzer.build_state_map_frame()

        assert len(result) == 51
        assert "guam" not in set(result["state"])
        by_state = result.set_index("state")
        assert by_state.loc["california", "usps_code"] == "CA"
        assert by_state.loc["california", "category"] == "Liberal"
        assert by_state.loc["oklahoma", "category"] == "Conservative"
        assert by_state.loc["new york", "category"] == "Independent"
        assert pd.isna(by_state.loc["maine", "avg_cfscore"])
        assert by_state.loc["maine", "category"] == "Other"
        assert by_state.loc["maine", "n_scores"] == 0

    def test_count_categories(self, analyzer):
        """Test category counts over the map frame."""
        counts = count_categories(analyzer.build_state_map_frame())

        assert list(counts.index) == IDEOLOGY_CATEGORIES
        assert counts["Liberal"] == 1
        assert counts["Slightly Liberal"] == 0
        assert counts["Independent"] == 1
        assert counts["Conservative"] == 2
        assert counts["Other"] == 47
        assert counts.sum() == 51

    def test_party_differences(self, synthetic_raw):
        """Test the Kruskal-Wallis party comparison."""
        result = make_analyzer(synthetic_raw).analyze_party_differences()

        assert set(result) == {
            "statistic", "p_value", "significant_at_05", "group_sizes"
        }
        assert result["significant_at_05"]
        assert sum(result["group_sizes"].values()) == len(synthetic_raw)

    def test_party_differences_single_party(self, scenario_raw):
        """Test that one party alone yields no test."""
        raw = scenario_raw.assign(party=100)
        assert make_analyzer(raw).analyze_party_differences() == {}

    def test_analysis_summary(self, analyzer):
        """Test the headline summary."""
        summary = analyzer.compute_analysis_summary()

        assert summary["n_records"] == 6
        assert summary["party_means"]["Democratic"] == pytest.approx(-0.2)
        assert summary["n_states_with_data"] == 4
        assert summary["category_counts"]["Conservative"] == 2

    def test_cache(self, analyzer):
        """Test that aggregates are cached."""
        assert analyzer.compute_party_means() is analyzer.compute_party_means()

    def test_party_differences_cached(self, synthetic_raw):
        """Test that the party comparison is computed once."""
        analyzer = make_analyzer(synthetic_raw)
        first = analyzer.analyze_party_differences()
        assert analyzer.analyze_party_differences() is first


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
