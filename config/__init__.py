"""
Project configuration

- paths: medallion data layout and output folders
- settings: dataset, column mapping and analysis defaults
"""
