"""
Unified CLI entry point for anthology-papers

Usage:
    # Mirror index pages, listings, PDFs and bib files
    ANTHOLOGY=~/corpora/acl-anthology python -m anthology_papers download
    python -m anthology_papers download --root ~/corpora/acl-anthology -c acl naacl

    # Only fetch and parse the volume index pages
    python -m anthology_papers index --root ~/corpora/acl-anthology

    # Parse a single index page to JSON
    python -m anthology_papers parse P/P95 index.html > index.html.json

    # Check status
    python -m anthology_papers status --root ~/corpora/acl-anthology
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import DEFAULT_HOST, DEFAULT_MANIFEST, DOWNLOAD_WORKERS, CHECK_WORKERS, VOLUME_WORKERS, Settings
from .core.base_crawler import FILE_KINDS
from .core.manifest import load_conferences, select_conferences
from .core.metadata import ListingManager, dumps_listing
from .crawlers import ACLAnthologyCrawler, parse_index, volume_index_url
from .errors import AggregateDownloadError, AnthologyError

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False, log_file: Optional[str] = None, stream=None) -> None:
    """
    Configure root logging to stdout, optionally also appending to a file

    Args:
        debug: Log at DEBUG instead of INFO
        log_file: Path of a log file to append to
        stream: Console stream (default: stdout)
    """
    handlers = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def build_settings(args) -> Settings:
    """Settings from the environment and command line options"""
    return Settings.from_env(
        root_dir=args.root,
        host=args.host,
        manifest_path=args.manifest,
        volume_workers=getattr(args, 'volume_workers', None),
        check_workers=getattr(args, 'check_workers', None),
        download_workers=getattr(args, 'workers', None),
        timeout=getattr(args, 'timeout', None),
    )


def cmd_download(args):
    """Download index pages, listings and files command"""
    settings = build_settings(args)
    crawler = ACLAnthologyCrawler(settings)

    try:
        crawler.crawl(conference_ids=args.conference, kinds=args.kinds)
    except AggregateDownloadError as e:
        logger.error(f"{len(e.errors)} downloads failed: {e}")
        return 1

    return 0


def cmd_index(args):
    """Fetch and parse volume index pages command"""
    settings = build_settings(args)
    crawler = ACLAnthologyCrawler(settings)
    entries = crawler.load_all(conference_ids=args.conference)
    logger.info(f"Listings complete: {len(entries)} entries")
    return 0


def cmd_parse(args):
    """Parse one index page to JSON command"""
    if args.file:
        html = Path(args.file).read_text(encoding='utf-8', errors='replace')
    else:
        html = sys.stdin.buffer.read().decode('utf-8', errors='replace')

    entries = parse_index(html, args.volume, volume_index_url(args.volume, args.host))
    sys.stdout.write(dumps_listing(entries))
    return 0


def cmd_status(args):
    """Show status command"""
    settings = build_settings(args)
    listings = ListingManager(settings.root_dir)
    conferences = select_conferences(load_conferences(settings.manifest_path), args.conference)

    print("\n" + "=" * 70)
    print(f"ACL Anthology mirror: {settings.root_dir}")
    print("=" * 70)

    for conf in conferences:
        print(f"\n{conf.name or conf.id} ({conf.id}):")
        for volume in conf.volumes:
            volume_dir = listings.get_volume_dir(volume)
            if not volume_dir.exists():
                print(f"  {volume}: (not downloaded)")
                continue

            index = '✓' if listings.index_path(volume).exists() else '✗'
            listing = '✓' if listings.listing_path(volume).exists() else '✗'
            pdf_count = len(list(volume_dir.glob('*.pdf')))
            bib_count = len(list(volume_dir.glob('*.bib')))
            print(f"  {volume}: index {index}  listing {listing}  {pdf_count} pdf  {bib_count} bib")

    print()
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--root', type=str,
                        help='Local mirror root (default: $ANTHOLOGY)')
    parser.add_argument('--manifest', type=str, default=str(DEFAULT_MANIFEST),
                        help='Conference manifest (YAML)')
    parser.add_argument('--host', type=str, default=DEFAULT_HOST,
                        help='Anthology host')
    parser.add_argument('-c', '--conference', nargs='+',
                        help='Conference ids to process (default: all)')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug output')
    parser.add_argument('--log-file', type=str,
                        help='Also append log output to this file')


def cli(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description='ACL Anthology Paper Crawler',
        epilog='''
Examples:
  # Mirror everything listed in the manifest
  %(prog)s download --root ~/corpora/acl-anthology

  # Only bib files for ACL and NAACL
  %(prog)s download -c acl naacl --kinds bib

  # Parse a saved index page
  %(prog)s parse P/P95 index.html
        ''',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Download command
    download_parser = subparsers.add_parser('download', help='Download listings and files')
    _add_common_arguments(download_parser)
    download_parser.add_argument('--kinds', nargs='+', choices=list(FILE_KINDS),
                                 default=list(FILE_KINDS), help='File kinds to download')
    download_parser.add_argument('--workers', type=int, default=DOWNLOAD_WORKERS,
                                 help='Max concurrent file downloads')
    download_parser.add_argument('--check-workers', type=int, default=CHECK_WORKERS,
                                 help='Max concurrent existence checks')
    download_parser.add_argument('--volume-workers', type=int, default=VOLUME_WORKERS,
                                 help='Max concurrent volume index fetches')
    download_parser.add_argument('--timeout', type=float,
                                 help='Request timeout in seconds (default: none)')

    # Index command
    index_parser = subparsers.add_parser('index', help='Fetch and parse volume index pages')
    _add_common_arguments(index_parser)
    index_parser.add_argument('--volume-workers', type=int, default=VOLUME_WORKERS,
                              help='Max concurrent volume index fetches')
    index_parser.add_argument('--timeout', type=float,
                              help='Request timeout in seconds (default: none)')

    # Parse command
    parse_parser = subparsers.add_parser('parse', help='Parse one index page to JSON')
    parse_parser.add_argument('volume', help='Volume identifier, e.g. P/P95')
    parse_parser.add_argument('file', nargs='?', help='HTML file (default: stdin)')
    parse_parser.add_argument('--host', type=str, default=DEFAULT_HOST,
                              help='Anthology host used to resolve links')
    parse_parser.add_argument('--debug', action='store_true',
                              help='Enable debug output')
    parse_parser.add_argument('--log-file', type=str,
                              help='Also append log output to this file')

    # Status command
    status_parser = subparsers.add_parser('status', help='Show mirror status')
    _add_common_arguments(status_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # parse prints its JSON on stdout
    stream = sys.stderr if args.command == 'parse' else sys.stdout
    setup_logging(args.debug, args.log_file, stream)

    commands = {
        'download': cmd_download,
        'index': cmd_index,
        'parse': cmd_parse,
        'status': cmd_status,
    }

    try:
        return commands[args.command](args)
    except AnthologyError as e:
        logger.error(str(e))
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(cli())
