import argparse
import logging
import sys

from .config import ConfigError, load_config
from .site import build_site
from .watcher import run_watcher


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
                        prog='mdhtml',
                        description='Compiles an include/ tree of mdhtml sources into a static HTML site',
                        epilog='Without a config file the defaults (include/, embed/, public/) apply to the working directory')
    parser.add_argument('config', nargs='?', help='YAML site config')
    parser.add_argument('--watch', action='store_true', help='rebuild whenever a source, snippet or watched file changes')
    parser.add_argument('--workers', type=int, help='number of compile threads')
    parser.add_argument('-v', '--verbose', action='store_true', help='log debug output')
    return parser


def main(argv=None) -> int:
    args = make_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    if args.workers is not None:
        if args.workers < 1:
            print("Error: --workers must be at least 1", file=sys.stderr)
            return 2
        config.workers = args.workers

    result = build_site(config)
    for error in result.errors:
        print(error, file=sys.stderr)
    if args.watch:
        run_watcher(config)
        return 0
    return 0 if result.ok else 1


if __name__ == '__main__':
    sys.exit(main())
