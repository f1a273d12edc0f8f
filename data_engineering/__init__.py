"""
Data Engineering Module for the 500 Cities health measures EDA

This module contains all data engineering code organized by pipeline stage:
1. download/ - Data acquisition (bronze layer)
2. utils/ - Loading into a long table and schema validation
3. reshape - Filtering and long <-> wide pivoting
4. aggregate - Grouped counts and ratios

Usage:
    from data_engineering.utils.data_loader import load_long_table
    from data_engineering.reshape import filter_rows, pivot_wide
"""

__version__ = "1.0.0"
