"""
Project Path Configuration

Centralized path definitions for data and outputs
Using Medallion Architecture: Bronze (raw) → Silver (cleaned) → Gold (analysis-ready)
"""

from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# ==============================================================================
# MEDALLION ARCHITECTURE (Bronze / Silver / Gold)
# ==============================================================================

DATA_ROOT = PROJECT_ROOT / "data"

# Bronze Layer: Raw, immutable data (as downloaded)
BRONZE = DATA_ROOT / "bronze"
BRONZE_CDC = BRONZE / "cdc"

# Silver Layer: Filtered, typed long tables
SILVER = DATA_ROOT / "silver"
SILVER_CDC = SILVER / "cdc"

# Gold Layer: Wide matrices and correlation tables
GOLD = DATA_ROOT / "gold"
GOLD_ANALYTICS = GOLD / "analytics"

# ==============================================================================
# DEFAULT FILES
# ==============================================================================

DEFAULT_500_CITIES_FILE = BRONZE_CDC / "500_cities_local_data.csv"

# ==============================================================================
# OUTPUTS
# ==============================================================================

OUTPUTS_ROOT = PROJECT_ROOT / "outputs"
VISUALIZATIONS = OUTPUTS_ROOT / "visualizations"
REPORTS = OUTPUTS_ROOT / "reports"

# ==============================================================================
# DIRECTORY INITIALIZATION
# ==============================================================================

def ensure_directories():
    """Create all necessary directories if they don't exist"""

    data_dirs = [
        BRONZE, BRONZE_CDC,
        SILVER, SILVER_CDC,
        GOLD, GOLD_ANALYTICS,
    ]

    output_dirs = [
        OUTPUTS_ROOT, VISUALIZATIONS, REPORTS
    ]

    for directory in data_dirs + output_dirs:
        directory.mkdir(parents=True, exist_ok=True)
