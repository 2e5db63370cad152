"""
Data Acquisition Module for Judicial CF Score Analysis.

Loads the judicial campaign-finance ideology score dataset (one row per
judge) from a delimited text file and checks that the columns the
pipeline relies on are present.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)


class ReadError(Exception):
    """Raised when the input file is missing, unreadable, or malformed."""


class SchemaError(ReadError):
    """Raised when the input file lacks one or more required columns."""

    def __init__(self, missing: List[str], path: Optional[Path] = None):
        self.missing = list(missing)
        self.path = path
        where = f" in {path}" if path is not None else ""
        super().__init__(
            f"Missing required column(s){where}: {', '.join(self.missing)}"
        )


class CFScoreDataLoader:
    """
    Handles loading of the judicial CF score dataset.

    Each record describes one judicial officer:
    - state: jurisdiction code, possibly with a court suffix ("TX (CRIM)")
    - party: party code (100, 200, 328)
    - cfscore: campaign-finance ideology score
    - year_enter: year the judge took office
    - appointed / legislative_election / non_partisan_election: 0/1 flags
    """

    REQUIRED_COLUMNS = [
        "state",
        "party",
        "cfscore",
        "year_enter",
        "appointed",
        "legislative_election",
        "non_partisan_election",
    ]

    def __init__(self, data_path: Union[str, Path]):
        """
        Initialize the data loader.

        Args:
            data_path: Path to the CSV file holding the judge records.
        """
        self.data_path = Path(data_path)

        # Cache for the loaded dataframe
        self._cache = {}

    def load(self, sep: str = ",") -> pd.DataFrame:
        """
        Read the dataset into a DataFrame.

        Args:
            sep: Field delimiter.

        Returns:
            Raw DataFrame with at least the required columns.

        Raises:
            ReadError: If the file does not exist or cannot be parsed.
            SchemaError: If required columns are missing.
        """
        cache_key = f"raw_{sep}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        if not self.data_path.exists():
            raise ReadError(f"Input file not found: {self.data_path}")
        if not self.data_path.is_file():
            raise ReadError(f"Input path is not a file: {self.data_path}")

        logger.info("Loading CF score data from %s", self.data_path)
        try:
            df = pd.read_csv(self.data_path, sep=sep)
        except pd.errors.EmptyDataError as e:
            raise ReadError(f"Input file is empty: {self.data_path}") from e
        except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
            raise ReadError(f"Could not parse {self.data_path}: {e}") from e

        self.validate_columns(df, path=self.data_path)

        logger.info("Loaded %d records with %d columns", len(df), len(df.columns))
        self._cache[cache_key] = df
        return df

    @classmethod
    def validate_columns(
        cls, df: pd.DataFrame, path: Optional[Path] = None
    ) -> None:
        """Raise SchemaError if any required column is absent from df."""
        missing = [c for c in cls.REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise SchemaError(missing, path=path)

    def clear_cache(self):
        """Clear the in-memory cache of loaded dataframes."""
        self._cache.clear()
        logger.info("Cache cleared")


def load_cfscore_data(data_path: Union[str, Path]) -> pd.DataFrame:
    """
    Convenience function to load the CF score dataset.

    Args:
        data_path: Path to the CSV file.

    Returns:
        Raw DataFrame.
    """
    return CFScoreDataLoader(data_path).load()
