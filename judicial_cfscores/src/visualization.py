"""
Visualization Module for Judicial CF Score Analysis.

Provides static charts (party violin plot, score trend, appointment-type
box plot) and an interactive state choropleth for CF score results.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
import plotly.graph_objects as go
from statsmodels.nonparametric.smoothers_lowess import lowess

from .analysis import IDEOLOGY_CATEGORIES, count_categories
from .preprocessing import APPOINTMENT_TYPES, PARTY_ORDER

logger = logging.getLogger(__name__)


class CFScoreVisualizer:
    """
    Creates visualizations for judicial CF score analysis.

    Supports:
    - Score distribution by party (violin)
    - Score trend over entry year with LOWESS smoothing
    - Appointment-type box plots faceted by party
    - Interactive choropleth of state averages
    """

    # Color schemes
    PARTY_COLORS = {
        "Democratic": "#0015BC",
        "Republican": "#E9141D",
        "Independent/Non-Partisan": "#808080",
    }

    NO_DATA_COLOR = "#C0C0C0"
    OTHER_COLOR = "#808080"

    BOX_LABELS = [
        ("Max", "max"),
        ("Q75", "q75"),
        ("Mean", "mean"),
        ("Q25", "q25"),
        ("Min", "min"),
    ]

    def __init__(self, figsize: Tuple[int, int] = (12, 8)):
        """
        Initialize the visualizer.

        Args:
            figsize: Default figure size for matplotlib plots.
        """
        self.figsize = figsize

    @staticmethod
    def _parties_present(df: pd.DataFrame) -> List[str]:
        present = set(df["party"].dropna())
        return [p for p in PARTY_ORDER if p in present]

    @staticmethod
    def _save(fig: plt.Figure, save_path: Optional[str]) -> None:
        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches="tight")
            logger.info("Saved figure to %s", save_path)

    # ==================== Party Distribution ====================

    def plot_party_violin(
        self,
        plot_df: pd.DataFrame,
        party_means: pd.DataFrame,
        title: str = "Judicial CF Scores by Party",
        save_path: Optional[str] = None,
    ) -> plt.Figure:
        """
        Plot the CF score distribution of each party with its mean marked.

        Args:
            plot_df: Cleaned plot data (party, cfscore).
            party_means: DataFrame from CFScoreAnalyzer.compute_party_means().
            title: Plot title.
            save_path: Optional path to save figure.

        Returns:
            Matplotlib figure.
        """
        parties = self._parties_present(plot_df)
        if not parties:
            raise ValueError("No scored records with a party label to plot")

        fig, ax = plt.subplots(figsize=self.figsize)

        data = plot_df[plot_df["party"].isin(parties)]
        sns.violinplot(
            data=data,
            x="party",
            y="cfscore",
            order=parties,
            hue="party",
            hue_order=parties,
            palette=self.PARTY_COLORS,
            legend=False,
            inner="quartile",
            cut=0,
            ax=ax,
        )

        means = party_means.set_index("party")["mean_cfscore"]
        for i, party in enumerate(parties):
            mean = means.get(party, np.nan)
            if pd.isna(mean):
                continue
            ax.scatter(
                i, mean, marker="D", s=50, color="white",
                edgecolor="black", zorder=3,
            )
            ax.text(
                i + 0.08, mean, f"mean = {mean:.2f}",
                va="center", fontsize=9, fontweight="bold",
            )

        ax.axhline(y=0, color="gray", linestyle="--", alpha=0.5)
        ax.set_xlabel("Party")
        ax.set_ylabel("CF Score")
        ax.set_title(title, fontsize=14)

        plt.tight_layout()
        self._save(fig, save_path)
        return fig

    # ==================== Trend ====================

    def plot_score_trend(
        self,
        plot_df: pd.DataFrame,
        jitter: float = 0.3,
        frac: float = 0.3,
        seed: int = 42,
        title: str = "Judicial CF Scores by Year Entering Office",
        save_path: Optional[str] = None,
    ) -> plt.Figure:
        """
        Scatter CF scores over entry year with a per-party LOWESS curve.

        Args:
            plot_df: Cleaned plot data (party, cfscore, year_enter).
            jitter: Maximum horizontal jitter in years.
            frac: LOWESS smoothing span (fraction of points per fit).
            seed: Random seed for reproducible jitter.
            title: Plot title.
            save_path: Optional path to save figure.

        Returns:
            Matplotlib figure.
        """
        if jitter < 0:
            raise ValueError(f"jitter must be non-negative, got {jitter}")
        if not 0 < frac <= 1:
            raise ValueError(f"frac must be in (0, 1], got {frac}")

        df = plot_df.dropna(subset=["year_enter", "cfscore"])
        parties = self._parties_present(df)
        if not parties:
            raise ValueError("No scored records with an entry year to plot")

        rng = np.random.default_rng(seed)
        fig, ax = plt.subplots(figsize=self.figsize)

        for party in parties:
            sub = df[df["party"] == party]
            years = sub["year_enter"].to_numpy(dtype=float)
            scores = sub["cfscore"].to_numpy(dtype=float)
            color = self.PARTY_COLORS.get(party, self.NO_DATA_COLOR)

            ax.scatter(
                years + rng.uniform(-jitter, jitter, len(years)),
                scores,
                s=10,
                alpha=0.3,
                color=color,
                label=party,
            )

            # LOWESS needs a few distinct points to fit
            if len(sub) >= 3 and len(np.unique(years)) >= 2:
                smoothed = lowess(scores, years, frac=frac, return_sorted=True)
                ax.plot(
                    smoothed[:, 0], smoothed[:, 1],
                    color=color, linewidth=2.5,
                )

        ax.axhline(y=0, color="gray", linestyle="--", alpha=0.5)
        ax.set_xlabel("Year Entering Office")
        ax.set_ylabel("CF Score")
        ax.set_title(title, fontsize=14)
        ax.legend(title="Party")

        plt.tight_layout()
        self._save(fig, save_path)
        return fig

    # ==================== Appointment Type ====================

    def plot_appointment_boxplot(
        self,
        plot_df: pd.DataFrame,
        group_summary: pd.DataFrame,
        ylim: Tuple[float, float] = (-2.0, 2.0),
        title: str = "Judicial CF Scores by Appointment Type",
        save_path: Optional[str] = None,
    ) -> plt.Figure:
        """
        Box plot per appointment type, one facet per party, with labels.

        Args:
            plot_df: Cleaned plot data (party, cfscore, appointment_type).
            group_summary: DataFrame from CFScoreAnalyzer.compute_group_summary().
            ylim: Fixed y-axis display window.
            title: Plot title.
            save_path: Optional path to save figure.

        Returns:
            Matplotlib figure.
        """
        if ylim[0] >= ylim[1]:
            raise ValueError(f"ylim must be increasing, got {ylim}")

        parties = self._parties_present(plot_df)
        if not parties:
            raise ValueError("No scored records with a party label to plot")

        fig, axes = plt.subplots(
            1, len(parties),
            figsize=(7 * len(parties), 7),
            sharey=True,
            squeeze=False,
        )

        summary = group_summary.set_index(["party", "appointment_type"])

        for ax, party in zip(axes[0], parties):
            sub = plot_df[plot_df["party"] == party]
            present = set(sub["appointment_type"])
            types = [t for t in APPOINTMENT_TYPES if t in present]

            sns.boxplot(
                data=sub,
                x="appointment_type",
                y="cfscore",
                order=types,
                color=self.PARTY_COLORS.get(party, self.NO_DATA_COLOR),
                showfliers=False,
                ax=ax,
            )

            for j, appointment_type in enumerate(types):
                if (party, appointment_type) not in summary.index:
                    continue
                row = summary.loc[(party, appointment_type)]
                for label, col in self.BOX_LABELS:
                    value = row[col]
                    if pd.isna(value):
                        continue
                    ax.text(
                        j + 0.42,
                        float(np.clip(value, ylim[0], ylim[1])),
                        f"{label}: {value:.2f}",
                        fontsize=7,
                        va="center",
                        ha="left",
                    )

            ax.set_ylim(*ylim)
            ax.set_title(party)
            ax.set_xlabel("Appointment Type")
            ax.set_ylabel("CF Score")
            ax.tick_params(axis="x", rotation=30)

        fig.suptitle(title, fontsize=14, y=1.02)
        plt.tight_layout()
        self._save(fig, save_path)
        return fig

    # ==================== State Map ====================

    @staticmethod
    def _display_state_name(state: str) -> str:
        return " ".join(
            w if w == "of" else w.capitalize() for w in state.split()
        )

    def _state_hover_text(self, frame: pd.DataFrame) -> List[str]:
        return [
            f"<b>{self._display_state_name(s)}</b><br>"
            f"Average CF score: {avg:.2f}<br>"
            f"Category: {cat}"
            for s, avg, cat in zip(
                frame["state"], frame["avg_cfscore"], frame["category"]
            )
        ]

    def plot_state_choropleth(
        self,
        map_frame: pd.DataFrame,
        category_counts: Optional[pd.Series] = None,
        title: str = "Average Judicial CF Score by State",
        save_path: Optional[str] = None,
    ) -> go.Figure:
        """
        Interactive choropleth of state-average CF scores.

        States are colored on a diverging scale centered at zero. States
        whose average falls outside every ideology band are drawn dark grey
        and states without data light grey. Hovering a state shows its
        name, rounded average and ideology category.

        Args:
            map_frame: DataFrame from CFScoreAnalyzer.build_state_map_frame().
            category_counts: States per category; computed from map_frame
                when omitted.
            title: Plot title.
            save_path: Optional path to save the HTML file.

        Returns:
            Plotly figure.
        """
        has_data = map_frame["avg_cfscore"].notna()
        if not has_data.any():
            raise ValueError("No state has a CF score average to map")

        out_of_band = has_data & (map_frame["category"] == "Other")
        in_band = map_frame[has_data & ~out_of_band]
        other = map_frame[out_of_band]
        without_data = map_frame[~has_data]

        if category_counts is None:
            category_counts = count_categories(map_frame)

        fig = go.Figure()

        if not in_band.empty:
            fig.add_trace(go.Choropleth(
                locations=in_band["usps_code"],
                z=in_band["avg_cfscore"],
                locationmode="USA-states",
                colorscale="RdBu_r",
                zmid=0,
                marker_line_color="white",
                colorbar=dict(title="Average<br>CF Score"),
                text=self._state_hover_text(in_band),
                hovertemplate="%{text}<extra></extra>",
                name="CF Score",
            ))

        if not other.empty:
            fig.add_trace(go.Choropleth(
                locations=other["usps_code"],
                z=[0] * len(other),
                locationmode="USA-states",
                colorscale=[[0, self.OTHER_COLOR], [1, self.OTHER_COLOR]],
                showscale=False,
                marker_line_color="white",
                text=self._state_hover_text(other),
                hovertemplate="%{text}<extra></extra>",
                name="Other",
            ))

        if not without_data.empty:
            fig.add_trace(go.Choropleth(
                locations=without_data["usps_code"],
                z=[0] * len(without_data),
                locationmode="USA-states",
                colorscale=[[0, self.NO_DATA_COLOR], [1, self.NO_DATA_COLOR]],
                showscale=False,
                marker_line_color="white",
                text=[
                    f"<b>{self._display_state_name(s)}</b><br>No data<br>"
                    f"Category: {cat}"
                    for s, cat in zip(
                        without_data["state"], without_data["category"]
                    )
                ],
                hovertemplate="%{text}<extra></extra>",
                name="No data",
            ))

        summary_text = "<br>".join(
            f"{cat}: {int(category_counts.get(cat, 0))}"
            for cat in IDEOLOGY_CATEGORIES
        )
        fig.add_annotation(
            text=f"<b>States per category</b><br>{summary_text}",
            x=0.01,
            y=0.02,
            xref="paper",
            yref="paper",
            showarrow=False,
            align="left",
            bgcolor="white",
            bordercolor="#808080",
            borderwidth=1,
        )

        fig.update_layout(
            title_text=title,
            geo=dict(scope="usa", projection=dict(type="albers usa")),
            template="plotly_white",
            margin=dict(l=20, r=20, t=60, b=20),
        )

        if save_path:
            fig.write_html(save_path, include_plotlyjs="cdn")
            logger.info("Saved interactive map to %s", save_path)

        return fig

    # ==================== Dashboard ====================

    def create_analysis_dashboard(
        self,
        analyzer,
        output_dir: str = "output/figures",
        prefix: str = "",
    ) -> List[str]:
        """
        Render all four CF score artifacts.

        Args:
            analyzer: CFScoreAnalyzer instance.
            output_dir: Directory to save figures.
            prefix: Filename prefix.

        Returns:
            List of saved file paths.
        """
        Path(output_dir).mkdir(parents=True, exist_ok=True)
        saved_files = []
        plot_df = analyzer.plot_data

        path = f"{output_dir}/{prefix}party_violin.png"
        fig = self.plot_party_violin(
            plot_df, analyzer.compute_party_means(), save_path=path
        )
        plt.close(fig)
        saved_files.append(path)

        if plot_df["year_enter"].notna().any():
            path = f"{output_dir}/{prefix}score_trend.png"
            fig = self.plot_score_trend(plot_df, save_path=path)
            plt.close(fig)
            saved_files.append(path)
        else:
            logger.warning("No entry years available; skipping trend plot")

        path = f"{output_dir}/{prefix}appointment_boxplot.png"
        fig = self.plot_appointment_boxplot(
            plot_df, analyzer.compute_group_summary(), save_path=path
        )
        plt.close(fig)
        saved_files.append(path)

        map_frame = analyzer.build_state_map_frame()
        path = f"{output_dir}/{prefix}state_choropleth.html"
        self.plot_state_choropleth(
            map_frame, count_categories(map_frame), save_path=path
        )
        saved_files.append(path)

        logger.info("Created %d visualizations in %s", len(saved_files), output_dir)
        return saved_files
