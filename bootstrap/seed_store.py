#!/usr/bin/env python3
"""
Initialize the URL store and optionally seed it with URLs.

This CLI creates the backing store of the configured backend (an empty
JSON document for the file backend) and shortens every URL listed in a
seed file through the regular shorten flow, so seeding is idempotent:
URLs which are already stored keep their codes.

CLI usage:
    # Initialize the configured store only
    $ python -m bootstrap.seed_store

    # Initialize a specific JSON file and seed it
    $ python -m bootstrap.seed_store \
        --data-path data/urls.json \
        --base-url https://sho.rt \
        --urls-file seeds/urls.txt

    # Preview which URLs would be shortened without writing anything
    $ python -m bootstrap.seed_store --urls-file seeds/urls.txt --dry-run

Seed file format:
    One URL per line. Blank lines and lines starting with '#' are ignored.

Args:
    --data-path (str): JSON store path (overrides SHORTLINKS_DATA_PATH; file backend only).
    --base-url (str): Public base URL for short URLs (overrides BASE_URL).
    --urls-file (str): Optional seed file.
    --dry-run (flag): If set, preview without writing.

Returns:
    None

Raises:
    ValueError: For invalid or missing inputs.
    ShortLinksError: For configuration or storage failures.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from shortlinks.bootstrap import bootstrap
from shortlinks.shortener import shorten_url
from shortlinks.utils.config import load_config


def read_seed_urls(path: Path) -> list[str]:
    """Return the URLs listed in a seed file, in order, without duplicates."""
    if not path.is_file():
        raise ValueError(f'Seed file not found: {path}')

    urls: list[str] = []
    for line in path.read_text(encoding='utf-8').splitlines():
        url = line.strip()
        if not url or url.startswith('#') or url in urls:
            continue
        urls.append(url)
    return urls


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Steps:
        - Parse CLI arguments
        - Load configuration and apply CLI overrides
        - Initialize the store (skipped with --dry-run)
        - Shorten every seed URL (previewed with --dry-run)
    """
    parser = argparse.ArgumentParser(
        prog='seed_store.py',
        description='Initialize the URL store and seed it with URLs',
    )
    parser.add_argument('--data-path', default=None, help='JSON store path (file backend only)')
    parser.add_argument('--base-url', default=None, help='Public base URL for short URLs (e.g., https://sho.rt)')
    parser.add_argument('--urls-file', default=None, help='Seed file with one URL per line')
    parser.add_argument('--dry-run', action='store_true', help='Preview without writing')

    args = parser.parse_args(argv)

    config = load_config()
    if args.data_path:
        config['file']['data_path'] = args.data_path.strip()
    if args.base_url:
        config['base_url'] = args.base_url.strip()

    urls = read_seed_urls(Path(args.urls_file)) if args.urls_file else []

    if args.dry_run:
        for url in urls:
            print(f'[dry-run] Would shorten {url}')
        print(f"Done. Previewed {len(urls)} URLs for the '{config['active_backend']}' store.")
        return

    dao = bootstrap(config)

    created = 0
    for url in urls:
        before = dao.find_by_url(url)
        record = shorten_url(
            dao,
            url,
            length=config['shortcode']['length'],
            max_attempts=config['shortcode']['max_attempts'],
        )
        if before is None:
            created += 1
            print(f'Shortened {url} -> {record.short}')
        else:
            print(f'Kept {url} -> {record.short}')

    print(f"Done. Initialized the '{config['active_backend']}' store and created {created} of {len(urls)} short URLs.")


if __name__ == '__main__':
    main()
