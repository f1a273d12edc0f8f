"""
Analysis Module

Correlation, summaries and report figures for the 500 Cities health measures

Modules:
- correlation: Pearson correlation and clustering-based reordering
- summary: descriptive statistics and entity rankings
- reports: figure rendering and the end-to-end EDA narrative
"""

__version__ = "1.0.0"
