"""
corpus-vocab - Command Line Entry Point

Two modes:
  --dir DIR          build a vocabulary from every file in DIR
  --input FILE ...   post-process existing vocabulary file(s); several
                     files are merged by summing counts

Both modes write a "token count" table to --output. Defaults for every
option can be set in a YAML settings file (see config/settings.yaml);
command-line flags win.
"""

import argparse
import sys

import yaml

from corpus_vocab.config import SORT_CHOICES, load_settings
from corpus_vocab.errors import VocabError
from corpus_vocab.ingestion import VocabularyBuilder
from corpus_vocab.logging_config import close_debug_log, debug_log, info
from corpus_vocab.parallel import resolve_worker_count
from corpus_vocab.vocabulary import (
    SortOrder,
    TokenNormalizer,
    merge_vocabularies,
    normalize_vocabulary,
    save_vocabulary,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="corpus-vocab",
        description="Build or post-process token-frequency vocabularies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build a vocabulary from a directory of .txt/.md/.pdf/.docx(.gz) files
  corpus-vocab --dir ./corpus --lowercase --filter-punct --sort freq

  # Merge two vocabularies and re-sort them alphabetically
  corpus-vocab --input va.txt vb.txt --sort alpha --output merged.txt

  # Debug mode (verbose logging)
  DEBUG=true corpus-vocab --dir ./corpus
        """
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        '--dir',
        help='Directory containing the documents to tokenize'
    )
    source.add_argument(
        '--input',
        nargs='+',
        help='Existing vocabulary file(s) to merge and re-normalize'
    )

    parser.add_argument(
        '--output',
        help='Output file for the vocabulary (default: vocab_processed.txt)'
    )
    parser.add_argument(
        '--sort',
        choices=SORT_CHOICES,
        help='Sort by frequency (freq) or alphabetically (alpha); unsorted if omitted'
    )
    parser.add_argument(
        '--lowercase',
        action='store_true',
        default=None,
        help='Convert tokens to lowercase'
    )
    parser.add_argument(
        '--filter-punct',
        action='store_true',
        default=None,
        help='Drop tokens made only of punctuation or symbols'
    )
    parser.add_argument(
        '--max-workers',
        type=int,
        help='Maximum files processed concurrently (default: number of CPUs)'
    )
    parser.add_argument(
        '--quarantine-dir',
        help='Directory for failed files and the error log (default: vocab_errors)'
    )
    parser.add_argument(
        '--config',
        help='YAML settings file (default: config/settings.yaml)'
    )
    return parser


def _merge_settings(args: argparse.Namespace, settings: dict) -> dict:
    """Command-line values override settings-file values."""
    overrides = {
        'lowercase': args.lowercase,
        'filter_punct': args.filter_punct,
        'sort': args.sort,
        'max_workers': args.max_workers,
        'output': args.output,
        'quarantine_dir': args.quarantine_dir,
    }
    merged = dict(settings)
    merged.update({key: value for key, value in overrides.items() if value is not None})
    return merged


def run_ingest(directory: str, settings: dict) -> None:
    normalizer = TokenNormalizer(
        lowercase=bool(settings['lowercase']),
        filter_punct=bool(settings['filter_punct']),
    )
    max_workers = resolve_worker_count(settings['max_workers'])
    print(f"Using {max_workers} workers")

    with VocabularyBuilder(normalizer=normalizer, quarantine_dir=settings['quarantine_dir']) as builder:
        summary = builder.build_vocabulary(
            directory,
            max_workers=max_workers,
            output_path=settings['output'],
            sort_order=settings['sort'],
        )

    if summary.failed:
        print(
            f"{len(summary.failed)} file(s) failed; see {builder.quarantine.log_path}",
            file=sys.stderr,
        )
    print(f"Vocabulary saved to {settings['output']}")


def run_post_process(paths: list[str], settings: dict) -> None:
    normalizer = TokenNormalizer(
        lowercase=bool(settings['lowercase']),
        filter_punct=bool(settings['filter_punct']),
    )
    vocabulary = merge_vocabularies(paths)
    vocabulary = normalize_vocabulary(vocabulary, normalizer)
    save_vocabulary(vocabulary, settings['output'], settings['sort'])
    print(f"Processed vocabulary saved to {settings['output']}")


def main(argv: list[str] | None = None) -> int:
    """
    Run the command-line interface.

    Returns:
        Process exit code: 0 on success, 1 on a fatal error or bad usage.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.dir and not args.input:
        print("Either --dir or --input must be specified.", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    try:
        settings = _merge_settings(args, load_settings(args.config))
        SortOrder.parse(settings['sort'])
    except (yaml.YAMLError, ValueError) as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1

    info(f"Starting corpus-vocab ({'directory' if args.dir else 'post-process'} mode)")
    try:
        if args.dir:
            run_ingest(args.dir, settings)
        else:
            run_post_process(args.input, settings)
    except VocabError as e:
        debug_log(f"[MAIN] Fatal: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        close_debug_log()

    return 0


if __name__ == "__main__":
    sys.exit(main())
