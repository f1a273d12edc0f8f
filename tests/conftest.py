"""Shared fixtures: a small synthetic 500 Cities extract."""

import csv

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

SOURCE_HEADER = [
    'Year', 'StateAbbr', 'CityName', 'GeographicLevel', 'DataSource', 'Category',
    'UniqueID', 'Measure', 'Data_Value_Type', 'Data_Value', 'PopulationCount',
    'MeasureId', 'Short_Question_Text',
]

MEASURES = [
    ('OBESITY', 'Obesity among adults aged >=18 Years', 'Obesity', 'Health Outcomes'),
    ('DIABETES', 'Diagnosed diabetes among adults aged >=18 Years', 'Diabetes', 'Health Outcomes'),
    ('ACCESS2', 'Current lack of health insurance among adults aged 18-64 Years', 'Health Insurance', 'Prevention'),
    ('CSMOKING', 'Current smoking among adults aged >=18 Years', 'Current Smoking', 'Unhealthy Behaviors'),
]

CITIES = [('TX', 'Houston', '4835000'), ('CA', 'Fresno', '0627000'), ('NY', 'Albany', '3601000')]


def _tract_values(i):
    return {
        'OBESITY': 20 + i * 1.5,
        'DIABETES': 8 + (i % 5) * 1.1 + i * 0.3,
        'ACCESS2': 10 + ((i * 7) % 11) * 1.8,
        'CSMOKING': 12 + ((i * 3) % 8) * 1.2,
    }


def build_source_rows():
    """Rows in source column order: 1 US row, city rows, 12 census tracts."""
    rows = []

    def add(state, city, level, unique_id, measure, value_type, value, population):
        measure_id, full, short, category = measure
        rows.append([
            '2017', state, city, level, 'BRFSS', category, unique_id, full,
            value_type, value, population, measure_id, short,
        ])

    for m in MEASURES:
        add('US', '', 'US', '59', m, 'Crude prevalence', '18.0', '308745538')

    for c, (state, city, fips) in enumerate(CITIES):
        for m in MEASURES:
            crude = 15 + c * 4 + MEASURES.index(m)
            add(state, city, 'City', fips, m, 'Crude prevalence', f'{crude:.1f}', '500000')
            add(state, city, 'City', fips, m, 'Age-adjusted prevalence', f'{crude - 0.5:.1f}', '500000')

    for i in range(12):
        state, city, fips = CITIES[i % 3]
        tract = f'{fips}-{fips[:2]}0010{i:05d}'
        values = _tract_values(i)
        for m in MEASURES:
            add(state, city, 'Census Tract', tract, m, 'Crude prevalence', f'{values[m[0]]:.1f}', '4000')

    return rows


@pytest.fixture
def source_header():
    return list(SOURCE_HEADER)


@pytest.fixture
def source_rows():
    return build_source_rows()


@pytest.fixture
def cities_csv(tmp_path, source_rows):
    path = tmp_path / '500_cities.csv'
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(SOURCE_HEADER)
        writer.writerows(source_rows)
    return path


@pytest.fixture
def long_table():
    """Canonical long table for reshape / aggregate tests."""
    return pd.DataFrame(
        [
            {'entity_id': 'E1', 'measure_short': 'M1', 'value': 10.0, 'geographic_level': 'City', 'state': 'TX'},
            {'entity_id': 'E1', 'measure_short': 'M2', 'value': 20.0, 'geographic_level': 'City', 'state': 'TX'},
            {'entity_id': 'E2', 'measure_short': 'M1', 'value': 30.0, 'geographic_level': 'City', 'state': 'CA'},
            {'entity_id': 'E2', 'measure_short': 'M2', 'value': 40.0, 'geographic_level': 'City', 'state': 'CA'},
            {'entity_id': 'T1', 'measure_short': 'M1', 'value': 12.0, 'geographic_level': 'Census Tract', 'state': 'TX'},
        ]
    )
