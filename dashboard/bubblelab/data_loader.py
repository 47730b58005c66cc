# bubblelab/data_loader.py - Shared data loading utilities
import logging

import numpy as np
import pandas as pd
import streamlit as st


logger = logging.getLogger(__name__)

FDI_YEARS = (2000, 2005, 2010, 2014)
DATASET_LABELS = {"in": "Stock in", "out": "Stock out"}
RECORD_COLUMNS = ["id", "country", "region", "group", "gni", "year", "value"]


def clean_values(fdi_df):
    """Parse the value column, dropping rows whose value is missing or not numeric"""
    fdi_df = fdi_df.copy()
    raw = fdi_df['value'].astype(str).str.replace(',', '', regex=False).str.strip()
    fdi_df['value'] = pd.to_numeric(raw, errors='coerce')
    invalid = ~np.isfinite(fdi_df['value']) | (fdi_df['value'] < 0)
    if invalid.any():
        logger.warning("Dropping %d row(s) without a usable value", int(invalid.sum()))
    return fdi_df[~invalid].copy()


def records_by_year(fdi_df, years=FDI_YEARS):
    """
    Split a long-format FDI table into per-year record lists.

    Args:
        fdi_df: DataFrame with columns id, country, region, group, gni, year, value
        years: Years to expose; a year with no rows maps to an empty list

    Returns:
        dict of year -> list of record dicts ready for the bubble engine
    """
    fdi_df = clean_values(fdi_df)
    unkeyed = fdi_df['id'].isna() | fdi_df['region'].isna()
    if unkeyed.any():
        logger.warning("Dropping %d row(s) without an id or region", int(unkeyed.sum()))
        fdi_df = fdi_df[~unkeyed].copy()
    fdi_df['id'] = fdi_df['id'].astype(str)
    fdi_df['year'] = pd.to_numeric(fdi_df['year'], errors='coerce')
    fdi_df = fdi_df.dropna(subset=['year'])
    fdi_df['year'] = fdi_df['year'].astype(int)

    columns = [c for c in RECORD_COLUMNS if c in fdi_df.columns]
    dataset = {}
    for year in years:
        year_df = fdi_df[fdi_df['year'] == int(year)][columns]
        year_df = year_df.astype(object).where(year_df.notna(), None)
        dataset[int(year)] = year_df.to_dict(orient='records')
    return dataset


@st.cache_data
def load_fdi_data(fdi_path="data/fdi-out.csv"):
    """Load and cache one FDI stock table"""
    return pd.read_csv(fdi_path)


def load_fdi_datasets(in_path="data/fdi-in.csv", out_path="data/fdi-out.csv", years=FDI_YEARS):
    """Load both stock tables as {"in": {year: records}, "out": {year: records}}"""
    return {
        "in": records_by_year(load_fdi_data(in_path), years),
        "out": records_by_year(load_fdi_data(out_path), years),
    }


@st.cache_data
def load_crime_counts(crime_path="data/crime_counts.csv"):
    """Load and cache yearly incident counts per crime category"""
    crime_df = pd.read_csv(crime_path)
    crime_df['category'] = crime_df['category'].astype(str).str.strip().str.lower()
    crime_df['year'] = crime_df['year'].astype(int)
    return crime_df
