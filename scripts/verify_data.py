#!/usr/bin/env python3
"""
Data Verification Script

Checks that the downloaded 500 Cities file is present and has the columns
the pipeline needs before generating figures.

Usage:
    python scripts/verify_data.py
    python scripts/verify_data.py --file path/to/500_cities.csv
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

import pandas as pd
from config.paths import DEFAULT_500_CITIES_FILE, ensure_directories
from config.settings import COLUMN_MAP, REQUIRED_COLUMNS


def check_file_exists(file_path, description):
    """Check if a file exists and print status"""
    if file_path.exists():
        size_mb = file_path.stat().st_size / (1024 * 1024)
        print(f'✓ {description}: {size_mb:.1f} MB')
        return True
    else:
        print(f'✗ {description}: NOT FOUND')
        print(f'  Expected: {file_path}')
        return False


def verify_500_cities(data_file):
    """Verify the 500 Cities CSV header and row count"""
    try:
        df = pd.read_csv(data_file, nrows=100, dtype=str)
    except (OSError, pd.errors.ParserError) as e:
        print(f'  ✗ Error reading file: {e}')
        return False

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        print(f'  ✗ Missing columns: {missing}')
        return False

    optional_missing = [col for col in COLUMN_MAP if col not in df.columns and col not in REQUIRED_COLUMNS]
    if optional_missing:
        print(f'  ⚠️  Missing optional columns: {optional_missing}')

    with open(data_file, encoding='utf-8-sig') as f:
        total_rows = sum(1 for _ in f) - 1  # -1 for header
    print(f'  ✓ Contains {total_rows:,} records')
    print(f'  ✓ Required columns present')
    return True


def main(argv=None):
    """Main verification function"""
    parser = argparse.ArgumentParser(description='Verify the downloaded dataset')
    parser.add_argument('--file', type=Path, default=DEFAULT_500_CITIES_FILE, help='CSV to check')
    args = parser.parse_args(argv)

    print('=' * 80)
    print('DATA VERIFICATION')
    print('=' * 80)

    if args.file == DEFAULT_500_CITIES_FILE:
        print('\n1. Checking directory structure...')
        ensure_directories()
        print('  ✓ Directory structure initialized')

    print('\n2. Checking data file...')
    print()
    print('500 Cities (Bronze Layer):')
    if check_file_exists(args.file, '500 Cities Local Data'):
        all_ok = verify_500_cities(args.file)
    else:
        all_ok = False
        print('  ℹ️  Download with: python -m data_engineering.download.download_500_cities')

    print()
    print('=' * 80)

    if all_ok:
        print('✓ ALL CHECKS PASSED')
        print()
        print('Next steps:')
        print(f'  python -m analysis.reports.generate_all_figures --source {args.file}')
        return 0
    else:
        print('✗ VERIFICATION FAILED')
        print()
        print('Please fix the issues above before generating figures.')
        return 1


if __name__ == '__main__':
    sys.exit(main())
