"""
Report figures for the health measures EDA
"""
