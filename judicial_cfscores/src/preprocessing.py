"""
Data Preprocessing Module for Judicial CF Score Analysis.

Cleans and normalizes the raw judge records: party codes become labels,
scores are coerced to numbers, state codes are resolved to full state
names and each judge gets an appointment type.

Two cleaned views are produced from the raw table independently of each
other: one for the party/appointment plots (rows without a score or party
label dropped) and one for the state map (no rows dropped).
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

logger = logging.getLogger(__name__)


# Party code mappings (DIME / Voteview convention)
PARTY_CODES = {
    100: "Democratic",
    200: "Republican",
    328: "Independent/Non-Partisan",
}

PARTY_ORDER = ["Democratic", "Republican", "Independent/Non-Partisan"]

# USPS abbreviation -> full state name, both lowercase
STATE_ABBREVIATIONS = {
    "al": "alabama",
    "ak": "alaska",
    "az": "arizona",
    "ar": "arkansas",
    "ca": "california",
    "co": "colorado",
    "ct": "connecticut",
    "de": "delaware",
    "fl": "florida",
    "ga": "georgia",
    "hi": "hawaii",
    "id": "idaho",
    "il": "illinois",
    "in": "indiana",
    "ia": "iowa",
    "ks": "kansas",
    "ky": "kentucky",
    "la": "louisiana",
    "me": "maine",
    "md": "maryland",
    "ma": "massachusetts",
    "mi": "michigan",
    "mn": "minnesota",
    "ms": "mississippi",
    "mo": "missouri",
    "mt": "montana",
    "ne": "nebraska",
    "nv": "nevada",
    "nh": "new hampshire",
    "nj": "new jersey",
    "nm": "new mexico",
    "ny": "new york",
    "nc": "north carolina",
    "nd": "north dakota",
    "oh": "ohio",
    "ok": "oklahoma",
    "or": "oregon",
    "pa": "pennsylvania",
    "ri": "rhode island",
    "sc": "south carolina",
    "sd": "south dakota",
    "tn": "tennessee",
    "tx": "texas",
    "ut": "utah",
    "vt": "vermont",
    "va": "virginia",
    "wa": "washington",
    "wv": "west virginia",
    "wi": "wisconsin",
    "wy": "wyoming",
}

# Jurisdiction codes outside the two-letter scheme
STATE_NAME_OVERRIDES = {
    "dc": "district of columbia",
    "tx (crim)": "texas",
    "ok (crim)": "oklahoma",
}

STATE_NAME_MAP = {**STATE_ABBREVIATIONS, **STATE_NAME_OVERRIDES}

# Full state name -> USPS code, for map geometry lookups
STATE_USPS_CODES = {
    name: abbrev.upper() for abbrev, name in STATE_ABBREVIATIONS.items()
}
STATE_USPS_CODES["district of columbia"] = "DC"

APPOINTMENT_TYPES = [
    "Appointed",
    "Legislative Election",
    "Non-Partisan Election",
    "Other",
]


def map_party(code: Any) -> Optional[str]:
    """
    Map a party code to its label.

    Unknown, missing, or unparseable codes map to None.
    """
    try:
        value = float(code)
    except (TypeError, ValueError):
        return None
    if not value.is_integer():
        return None
    return PARTY_CODES.get(int(value))


def normalize_state(raw: Any) -> Any:
    """
    Resolve a raw state string to a lowercase full state name.

    The value is trimmed and lowercased, then looked up in STATE_NAME_MAP.
    Strings without a mapping pass through trimmed and lowercased, so
    normalizing an already-normalized name returns it unchanged.
    Missing values are returned as-is.
    """
    if raw is None or (not isinstance(raw, str) and pd.isna(raw)):
        return raw
    key = str(raw).strip().lower()
    return STATE_NAME_MAP.get(key, key)


def _flag_set(value: Any) -> bool:
    """True when an indicator flag holds 1/True."""
    if value is None:
        return False
    try:
        return float(value) == 1.0
    except (TypeError, ValueError):
        return False


def derive_appointment_type(
    appointed: Any,
    legislative_election: Any,
    non_partisan_election: Any,
) -> str:
    """
    Derive how a judge attained office from the three indicator flags.

    Flags are checked in a fixed order and the first one set wins:
    appointed, then legislative_election, then non_partisan_election.
    A record with none set is "Other".
    """
    if _flag_set(appointed):
        return "Appointed"
    if _flag_set(legislative_election):
        return "Legislative Election"
    if _flag_set(non_partisan_election):
        return "Non-Partisan Election"
    return "Other"


class CFScoreDataPreprocessor:
    """
    Preprocesses raw CF score records into analysis-ready DataFrames.

    Handles:
    - Party code to label mapping
    - Score and year coercion (unparseable values become NaN)
    - State name normalization
    - Appointment type derivation
    """

    def __init__(self, raw_df: Optional[pd.DataFrame] = None):
        """
        Initialize the preprocessor.

        Args:
            raw_df: Raw DataFrame from CFScoreDataLoader.load().
        """
        self.raw = raw_df.copy() if raw_df is not None else pd.DataFrame()

        # Processed DataFrames
        self.plot_data: Optional[pd.DataFrame] = None
        self.map_data: Optional[pd.DataFrame] = None

    # ==================== Plot Data ====================

    def preprocess_plot_data(self) -> pd.DataFrame:
        """
        Build the cleaned view used by the party and appointment plots.

        Rows missing a score or a party label are dropped.

        Returns:
            DataFrame with party, cfscore, year_enter, state and
            appointment_type columns.
        """
        if self.raw.empty:
            self.plot_data = pd.DataFrame(columns=self._plot_columns())
            return self.plot_data

        df = self.raw.copy()
        df["party_code"] = df["party"]
        df["party"] = df["party_code"].apply(map_party)
        df["cfscore"] = pd.to_numeric(df["cfscore"], errors="coerce")
        df["year_enter"] = pd.to_numeric(df["year_enter"], errors="coerce")
        df["state"] = df["state"].apply(normalize_state)
        df["appointment_type"] = [
            derive_appointment_type(a, l, n)
            for a, l, n in zip(
                df["appointed"],
                df["legislative_election"],
                df["non_partisan_election"],
            )
        ]

        n_before = len(df)
        df = df[df["cfscore"].notna() & df["party"].notna()].reset_index(drop=True)
        logger.info(
            "Preprocessed %d plot records (%d dropped for missing score or party)",
            len(df),
            n_before - len(df),
        )

        self.plot_data = df
        return df

    @staticmethod
    def _plot_columns():
        return [
            "state",
            "party",
            "party_code",
            "cfscore",
            "year_enter",
            "appointed",
            "legislative_election",
            "non_partisan_election",
            "appointment_type",
        ]

    # ==================== Map Data ====================

    def preprocess_map_data(self) -> pd.DataFrame:
        """
        Build the cleaned view used by the state map.

        Derived from the raw table, not from the plot view. Rows without a
        party label are dropped; rows with a missing score are kept so a
        state seen only with missing scores still gets a NaN average.

        Returns:
            DataFrame with normalized state, party label and numeric cfscore.
        """
        if self.raw.empty:
            self.map_data = pd.DataFrame(columns=["state", "party", "cfscore"])
            return self.map_data

        df = self.raw.copy()
        df["party"] = df["party"].apply(map_party)
        df["cfscore"] = pd.to_numeric(df["cfscore"], errors="coerce")
        df["state"] = df["state"].apply(normalize_state)

        unmapped = sorted(
            {s for s in df["state"].dropna() if s not in STATE_USPS_CODES}
        )
        if unmapped:
            logger.warning(
                "%d state value(s) have no state mapping and will not appear "
                "on the map: %s",
                len(unmapped),
                ", ".join(unmapped),
            )

        n_before = len(df)
        df = df[df["party"].notna()].reset_index(drop=True)

        self.map_data = df
        logger.info(
            "Preprocessed %d map records (%d dropped for missing party)",
            len(df),
            n_before - len(df),
        )
        return df

    # ==================== Full Pipeline ====================

    def preprocess_all(self) -> Dict[str, pd.DataFrame]:
        """
        Run the full preprocessing pipeline.

        Returns:
            Dictionary of processed DataFrames keyed by view name.
        """
        return {
            "plot_data": self.preprocess_plot_data(),
            "map_data": self.preprocess_map_data(),
        }

    # ==================== Persistence ====================

    def save_processed_data(self, output_dir: str = "output/data") -> None:
        """
        Save processed DataFrames to CSV files.

        Args:
            output_dir: Directory to write output files.
        """
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        for name, df in [("plot_data", self.plot_data), ("map_data", self.map_data)]:
            if df is not None:
                filepath = output_path / f"{name}.csv"
                df.to_csv(filepath, index=False)
                logger.info("Saved %s to %s", name, filepath)

    @classmethod
    def load_processed_data(
        cls, processed_dir: str = "output/data"
    ) -> "CFScoreDataPreprocessor":
        """
        Load previously processed data from CSV files.

        Args:
            processed_dir: Directory containing processed CSV files.

        Returns:
            CFScoreDataPreprocessor with loaded data.
        """
        path = Path(processed_dir)
        preprocessor = cls()

        for name in ["plot_data", "map_data"]:
            filepath = path / f"{name}.csv"
            if filepath.exists():
                setattr(preprocessor, name, pd.read_csv(filepath))
                logger.info("Loaded %s from %s", name, filepath)

        return preprocessor
