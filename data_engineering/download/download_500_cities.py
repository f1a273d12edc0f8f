"""
Download CDC 500 Cities Local Data for Better Health
Uses the Socrata CSV export of the chronicdata.cdc.gov dataset

Source: https://chronicdata.cdc.gov/500-Cities-Places/500-Cities-Local-Data-for-Better-Health-2017-release/6vp6-wxuq
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import requests

from config.paths import BRONZE_CDC, DEFAULT_500_CITIES_FILE
from config.settings import DATASET_URL, DEFAULT_TIMEOUT
from data_engineering.errors import SourceUnavailable

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def download_500_cities(
    output_dir: Optional[Path] = None,
    url: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
    force: bool = False,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download the 500 Cities CSV into the bronze layer

    Args:
        output_dir: Target directory (default: data/bronze/cdc)
        url: CSV export URL (default: config.settings.DATASET_URL)
        timeout: Seconds before the request is abandoned
        force: Re-download even if the file already exists
        session: Optional requests session (tests pass a stub)

    Returns:
        Path to the downloaded CSV

    Raises:
        SourceUnavailable: If the download fails or times out
    """
    url = url or DATASET_URL
    if output_dir is None:
        output_file = DEFAULT_500_CITIES_FILE
    else:
        output_file = Path(output_dir) / DEFAULT_500_CITIES_FILE.name

    if output_file.exists() and not force:
        logger.info("Using cached download %s", output_file)
        return output_file

    output_file.parent.mkdir(parents=True, exist_ok=True)
    partial = output_file.with_suffix(output_file.suffix + ".part")

    http = session or requests.Session()
    logger.info("Downloading %s", url)
    try:
        with http.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with open(partial, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except requests.RequestException as exc:
        partial.unlink(missing_ok=True)
        raise SourceUnavailable(url, str(exc)) from exc

    partial.replace(output_file)
    logger.info("Saved %s (%.1f MB)", output_file, output_file.stat().st_size / 1024 / 1024)
    return output_file


def main():
    """Main execution"""
    parser = argparse.ArgumentParser(description="Download the CDC 500 Cities dataset")
    parser.add_argument('--url', default=DATASET_URL, help='CSV export URL')
    parser.add_argument('--output-dir', type=Path, default=BRONZE_CDC, help='Target directory')
    parser.add_argument('--timeout', type=float, default=DEFAULT_TIMEOUT, help='Request timeout (seconds)')
    parser.add_argument('--force', action='store_true', help='Re-download even if cached')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    print("\n" + "="*60)
    print("CDC 500 CITIES DATA DOWNLOADER")
    print("="*60)
    print(f"\nSource: {args.url}")

    try:
        path = download_500_cities(args.output_dir, url=args.url, timeout=args.timeout, force=args.force)
    except SourceUnavailable as e:
        print(f"\n✗ Error: {e}")
        print("\nTroubleshooting:")
        print("1. Check internet connection")
        print("2. Verify the dataset URL is still active")
        print("3. Try a longer --timeout")
        return 1

    print(f"\n✓ Saved to: {path}")
    print("\nNext steps:")
    print("   python -m analysis.reports.generate_all_figures --source " + str(path))
    return 0


if __name__ == "__main__":
    sys.exit(main())
