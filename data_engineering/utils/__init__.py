"""
Data Engineering Utilities

- data_loader: fetch and parse the dataset into a long table
- validation: pandera schema and data quality checks
"""
