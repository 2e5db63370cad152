"""
Analysis Module for Judicial CF Score Analysis.

Computes group-wise summaries of judicial CF scores (by party, by state,
by party and appointment type) and buckets state averages into ordered
ideology categories.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
from scipy import stats as scipy_stats

from .preprocessing import APPOINTMENT_TYPES, PARTY_ORDER, STATE_USPS_CODES

logger = logging.getLogger(__name__)


IDEOLOGY_CATEGORIES = [
    "Liberal",
    "Slightly Liberal",
    "Independent",
    "Slightly Conservative",
    "Conservative",
    "Other",
]

# Evaluated top to bottom, first match wins. Conservative is tested before
# Slightly Conservative (unlike the Liberal side), so 0.35 is Conservative.
IDEOLOGY_BANDS: List[Tuple[str, Callable[[float], bool]]] = [
    ("Liberal", lambda x: -0.8 < x < -0.35),
    ("Slightly Liberal", lambda x: -0.35 <= x < -0.1),
    ("Conservative", lambda x: 0.35 <= x < 0.8),
    ("Slightly Conservative", lambda x: 0.1 < x <= 0.35),
    ("Independent", lambda x: abs(x) <= 0.1),
]


def categorize_ideology(score: Any) -> str:
    """
    Assign an ideology category to a state-average CF score.

    Bands in IDEOLOGY_BANDS are checked in order and the first match is
    returned. Missing scores and scores outside every band are "Other".
    """
    if score is None or pd.isna(score):
        return "Other"
    x = float(score)
    for label, predicate in IDEOLOGY_BANDS:
        if predicate(x):
            return label
    return "Other"


def count_categories(frame: pd.DataFrame, column: str = "category") -> pd.Series:
    """Count rows per ideology category, in category order, zeros included."""
    return (
        frame[column]
        .value_counts()
        .reindex(IDEOLOGY_CATEGORIES, fill_value=0)
        .astype(int)
    )


class CFScoreAnalyzer:
    """
    Aggregates preprocessed CF score data.

    - Party means and party/appointment-type summaries use the plot view.
    - State averages and categories use the independently cleaned map view.
    - Both views exclude records without a party label.
    """

    def __init__(
        self,
        plot_df: Optional[pd.DataFrame] = None,
        map_df: Optional[pd.DataFrame] = None,
    ):
        """
        Initialize the analyzer.

        Args:
            plot_df: Output of CFScoreDataPreprocessor.preprocess_plot_data().
            map_df: Output of CFScoreDataPreprocessor.preprocess_map_data().
        """
        self.plot_data = plot_df if plot_df is not None else pd.DataFrame(
            columns=["party", "cfscore", "appointment_type"]
        )
        self.map_data = map_df if map_df is not None else pd.DataFrame(
            columns=["state", "cfscore"]
        )
        self._cache: Dict[str, Any] = {}

    # ==================== Party Means ====================

    def compute_party_means(self) -> pd.DataFrame:
        """
        Mean CF score per party label, ignoring missing scores.

        Returns:
            DataFrame with party and mean_cfscore columns.
        """
        if "party_means" in self._cache:
            return self._cache["party_means"]

        df = self.plot_data
        means = (
            df[df["party"].notna()]
            .groupby("party")["cfscore"]
            .mean()
            .reset_index(name="mean_cfscore")
        )
        means = self._sort_by_rank(means, {"party": PARTY_ORDER})

        self._cache["party_means"] = means
        logger.info("Computed CF score means for %d parties", len(means))
        return means

    @staticmethod
    def _sort_by_rank(
        df: pd.DataFrame, orders: Dict[str, List[str]]
    ) -> pd.DataFrame:
        """Sort rows by the position of each column's value in its order list."""
        rank_cols = []
        for col, order in orders.items():
            rank = {v: i for i, v in enumerate(order)}
            rank_col = f"_{col}_rank"
            df = df.assign(**{rank_col: df[col].map(rank).fillna(len(rank))})
            rank_cols.append(rank_col)
        return (
            df.sort_values(rank_cols, kind="stable")
            .drop(columns=rank_cols)
            .reset_index(drop=True)
        )

    # ==================== State Averages ====================

    def compute_state_averages(self) -> pd.DataFrame:
        """
        Mean CF score per normalized state name, ignoring missing scores.

        States seen only with missing scores keep a NaN average.

        Returns:
            DataFrame with state, avg_cfscore and n_scores columns.
        """
        if "state_averages" in self._cache:
            return self._cache["state_averages"]

        df = self.map_data
        averages = (
            df[df["state"].notna()]
            .groupby("state")
            .agg(
                avg_cfscore=("cfscore", "mean"),
                n_scores=("cfscore", "count"),
            )
            .reset_index()
        )

        self._cache["state_averages"] = averages
        logger.info(
            "Computed averages for %d states (%d without any score)",
            len(averages),
            int(averages["avg_cfscore"].isna().sum()),
        )
        return averages

    # ==================== Party x Appointment Type ====================

    def compute_group_summary(self) -> pd.DataFrame:
        """
        Summary statistics of CF scores per (party, appointment_type).

        Returns:
            DataFrame with max, min, mean, median, q25, q75 and n columns.
        """
        if "group_summary" in self._cache:
            return self._cache["group_summary"]

        df = self.plot_data
        summary = (
            df[df["party"].notna()]
            .groupby(["party", "appointment_type"])["cfscore"]
            .agg(
                max="max",
                min="min",
                mean="mean",
                median="median",
                q25=lambda s: s.quantile(0.25),
                q75=lambda s: s.quantile(0.75),
                n="count",
            )
            .reset_index()
        )

        summary = self._sort_by_rank(
            summary,
            {"party": PARTY_ORDER, "appointment_type": APPOINTMENT_TYPES},
        )

        self._cache["group_summary"] = summary
        logger.info("Computed summary statistics for %d groups", len(summary))
        return summary

    # ==================== Categories ====================

    def categorize_states(self) -> pd.DataFrame:
        """
        Attach an ideology category to each state average.

        Returns:
            State averages with a category column.
        """
        df = self.compute_state_averages().copy()
        df["category"] = df["avg_cfscore"].apply(categorize_ideology)
        return df

    def build_state_map_frame(self) -> pd.DataFrame:
        """
        One row per US state (plus DC) for the choropleth.

        States without data get a NaN average and the "Other" category.

        Returns:
            DataFrame with state, usps_code, avg_cfscore, n_scores, category.
        """
        if "state_map_frame" in self._cache:
            return self._cache["state_map_frame"]

        states = pd.DataFrame(
            sorted(STATE_USPS_CODES.items()), columns=["state", "usps_code"]
        )
        averages = self.compute_state_averages()
        df = states.merge(averages, on="state", how="left")
        df["n_scores"] = df["n_scores"].fillna(0).astype(int)
        df["category"] = df["avg_cfscore"].apply(categorize_ideology)

        self._cache["state_map_frame"] = df
        logger.info(
            "Built map frame: %d of %d states have data",
            int(df["avg_cfscore"].notna().sum()),
            len(df),
        )
        return df

    # ==================== Party Differences ====================

    def analyze_party_differences(self) -> Dict[str, Any]:
        """
        Kruskal-Wallis H-test of CF scores across party labels.

        Returns:
            Dictionary with statistic, p_value, significant_at_05 and
            group_sizes; empty when fewer than two parties have scores.
        """
        if "party_differences" in self._cache:
            return self._cache["party_differences"]

        df = self.plot_data
        groups = {
            party: g["cfscore"].dropna().to_numpy()
            for party, g in df[df["party"].notna()].groupby("party")
        }
        groups = {p: v for p, v in groups.items() if len(v) > 0}

        if len(groups) < 2:
            logger.info("Fewer than two parties with scores; skipping H-test")
            return {}

        try:
            stat, p_value = scipy_stats.kruskal(*groups.values())
        except ValueError as e:
            # All values identical
            logger.warning("Kruskal-Wallis test not computable: %s", e)
            return {}

        result = {
            "statistic": float(stat),
            "p_value": float(p_value),
            "significant_at_05": bool(p_value < 0.05),
            "group_sizes": {p: int(len(v)) for p, v in groups.items()},
        }
        self._cache["party_differences"] = result
        return result

    # ==================== Summary ====================

    def compute_analysis_summary(self) -> Dict[str, Any]:
        """
        Headline numbers for the run summary.

        Returns:
            Dictionary with n_records, party_means, n_states_with_data and
            category_counts.
        """
        party_means = self.compute_party_means()
        map_frame = self.build_state_map_frame()

        return {
            "n_records": int(len(self.plot_data)),
            "party_means": {
                row["party"]: (
                    float(row["mean_cfscore"])
                    if pd.notna(row["mean_cfscore"]) else np.nan
                )
                for _, row in party_means.iterrows()
            },
            "n_states_with_data": int(map_frame["avg_cfscore"].notna().sum()),
            "category_counts": count_categories(map_frame).to_dict(),
        }
