"""
Data Download Module

Scripts to download raw data into the bronze layer:
- 500 Cities: Local Data for Better Health (CDC)
"""
