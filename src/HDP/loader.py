"""
Spreadsheet import of named scenarios.

A profile table has one scenario per row: the first column holds the
profile name, the remaining columns the twelve feature fields. Headers are
normalized and common aliases renamed before rows are turned into
FeatureVector objects. Row-level problems are collected in a stairval
Notepad instead of aborting the whole import.
"""

import pathlib
import typing

import pandas as pd
from stairval.notepad import Notepad

from .features import FeatureVector, field_names

# Header aliases → FeatureVector fields
RENAME_MAP = {
    "familyhx": "family_hx",
    "family_history": "family_hx",
    "famhx": "family_hx",
    "gender": "sex",
    "sbp": "systolic",
    "systolic_bp": "systolic",
    "dbp": "diastolic",
    "diastolic_bp": "diastolic",
    "chol": "cholesterol",
    "fasting_glucose": "glucose",
    "smoking": "smoker",
}

PROFILE_COLUMNS = set(field_names())

_EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}


def normalize_headers(df: pd.DataFrame) -> pd.DataFrame:
    """
    Normalize headers to snake_case lowercase and apply RENAME_MAP:
      "Systolic BP (mmHg)" → "systolic_bp" → "systolic"
    """
    df = df.copy()
    df.columns = (
        df.columns.astype(str)
        .str.strip()
        .str.replace(r"\s*\(.*?\)", "", regex=True)  # drop any "(…)" units
        .str.replace(r"\s+", "_", regex=True)  # spaces → underscore
        .str.replace(":", "", regex=False)  # drop colons
        .str.lower()
    )
    return df.rename(
        columns={orig: target for orig, target in RENAME_MAP.items() if orig in df.columns}
    )


def load_profile_table(path: typing.Union[str, pathlib.Path], sheet_name: typing.Union[str, int] = 0) -> pd.DataFrame:
    """
    Read a CSV or Excel profile table:
      - first row = header
      - first column = profile name (index)
      - headers normalized via normalize_headers
    """
    path = pathlib.Path(path)
    if path.suffix.lower() in _EXCEL_SUFFIXES:
        df = pd.read_excel(path, sheet_name=sheet_name, header=0, index_col=0, engine="openpyxl")
    else:
        df = pd.read_csv(path, header=0, index_col=0)
    return normalize_headers(df)


def parse_profile_row(name: str, row: pd.Series, notepad: Notepad) -> typing.Optional[FeatureVector]:
    """
    Turn one table row into a FeatureVector.
    Returns None (and records an error) if the row does not validate.
    """
    record = {column: row[column] for column in PROFILE_COLUMNS if column in row.index}
    try:
        return FeatureVector.from_dict(record)
    except (ValueError, TypeError) as e:
        notepad.add_error(f"Profile {name!r}: {e}")
        return None


def map_profile_table(df: pd.DataFrame, notepad: Notepad) -> dict[str, FeatureVector]:
    """
    Map every row of a normalized profile table to a FeatureVector keyed by profile name.
      - missing feature columns → one error, nothing mapped
      - extra columns → one warning, ignored
      - blank names → error, row skipped
      - duplicate names → warning, the last row wins
    """
    profiles: dict[str, FeatureVector] = {}

    missing = sorted(PROFILE_COLUMNS - set(df.columns))
    if missing:
        notepad.add_error(f"Profile table: missing required columns: {missing}")
        return profiles

    extra = sorted(set(df.columns) - PROFILE_COLUMNS)
    if extra:
        notepad.add_warning(f"Profile table: ignoring unknown columns: {extra}")

    for index, row in df.iterrows():
        if index is None or pd.isna(index) or not str(index).strip():
            notepad.add_error(f"Profile table: row without a profile name: {row.to_dict()}")
            continue
        name = str(index).strip()

        features = parse_profile_row(name, row, notepad)
        if features is None:
            continue
        if name in profiles:
            notepad.add_warning(f"Profile {name!r}: duplicate name, keeping the last row")
        profiles[name] = features

    return profiles
