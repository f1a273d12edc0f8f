"""
Analysis settings for the 500 Cities health measures EDA

Dataset location, source -> canonical column mapping, and analysis
defaults. Values marked "env" can be overridden with environment variables.
"""

import os

# ---------------------------------------------------------------------------
# Dataset
# ---------------------------------------------------------------------------

# 500 Cities: Local Data for Better Health (CDC, Socrata CSV export) (env)
DATASET_URL = os.getenv(
    "HEALTH_EDA_DATASET_URL",
    "https://chronicdata.cdc.gov/api/views/6vp6-wxuq/rows.csv?accessType=DOWNLOAD",
).strip()

# Seconds before a fetch is abandoned (env)
DEFAULT_TIMEOUT = float(os.getenv("HEALTH_EDA_TIMEOUT", "120"))

# Source column -> canonical column
COLUMN_MAP = {
    'UniqueID': 'entity_id',
    'Measure': 'measure',
    'Short_Question_Text': 'measure_short',
    'MeasureId': 'measure_id',
    'Data_Value': 'value',
    'GeographicLevel': 'geographic_level',
    'StateAbbr': 'state',
    'CityName': 'city_name',
    'Category': 'category',
    'Data_Value_Type': 'data_value_type',
    'PopulationCount': 'population',
}

# Source columns the pipeline cannot run without
REQUIRED_COLUMNS = ['UniqueID', 'Measure', 'Data_Value', 'GeographicLevel']

# Canonical columns parsed to float (unparsable -> NaN)
NUMERIC_COLUMNS = ['value', 'population']

# ---------------------------------------------------------------------------
# Domain values
# ---------------------------------------------------------------------------

GEOGRAPHIC_LEVELS = ['US', 'City', 'Census Tract']

VALUE_TYPES = {
    'crude': 'Crude prevalence',
    'age_adjusted': 'Age-adjusted prevalence',
}

# Short name of the lack-of-insurance measure (ACCESS2)
INSURANCE_MEASURE = 'Health Insurance'

# ---------------------------------------------------------------------------
# Analysis defaults
# ---------------------------------------------------------------------------

LINKAGE_METHODS = ('average', 'complete', 'single', 'weighted')
DEFAULT_LINKAGE = os.getenv("HEALTH_EDA_LINKAGE", "average").strip()

# 'last': last record wins on duplicate (entity, measure) pairs
# 'raise': duplicates raise DuplicateKey
DUPLICATE_POLICIES = ('last', 'raise')
DEFAULT_DUPLICATES = os.getenv("HEALTH_EDA_DUPLICATES", "last").strip()

LOG_LEVEL = os.getenv("HEALTH_EDA_LOG_LEVEL", "INFO").strip().upper()

# ---------------------------------------------------------------------------
# Plot styling
# ---------------------------------------------------------------------------

PLOT_STYLE = 'whitegrid'
FIGURE_DPI = 150

CHART_COLORS = [
    '#3498db',  # Blue
    '#e74c3c',  # Red
    '#2ecc71',  # Green
    '#f39c12',  # Orange
    '#9b59b6',  # Purple
    '#1abc9c',  # Turquoise
    '#34495e',  # Dark gray
    '#e67e22',  # Carrot
]

HEATMAP_CMAP = 'coolwarm'
