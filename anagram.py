#!/usr/bin/env python3
"""Unscramble a string into phrases of dictionary words.

Usage:
    python anagram.py DICTIONARY ANAGRAM

DICTIONARY is a newline-delimited word file, or ``wordfreq:<lang>`` to use
the most frequent words of a language from the wordfreq package. Every
phrase whose letters are an exact rearrangement of ANAGRAM is printed to
stdout, one per line, as it is found. Status goes to stderr.
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from decoder import PhraseDecoder, SearchStats, decode_parallel, normalize_input
from dictionary import DEFAULT_WORDFREQ_LIMIT, load_dictionary


class ConfigurationError(Exception):
    """Bad command line: wrong number of arguments or an invalid option."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise ConfigurationError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="anagram.py",
        description="Find every phrase of dictionary words that uses exactly the letters of ANAGRAM.",
    )
    parser.add_argument(
        "dictionary",
        help="Newline-delimited word list, or wordfreq:<lang> (e.g. wordfreq:en)",
    )
    parser.add_argument(
        "anagram",
        help="Letters to unscramble; whitespace is ignored",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Processes to split the top-level search across (default: 1)",
    )
    parser.add_argument(
        "--wordfreq-limit",
        type=int,
        default=DEFAULT_WORDFREQ_LIMIT,
        help="How many of the most frequent words to load for wordfreq: dictionaries",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only print phrases; no status lines or progress bar",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    args = build_parser().parse_args(argv)
    if args.workers < 1:
        raise ConfigurationError(f"--workers must be at least 1, got {args.workers}")
    if args.wordfreq_limit < 1:
        raise ConfigurationError(f"--wordfreq-limit must be at least 1, got {args.wordfreq_limit}")
    return args


def print_phrase(phrase: str) -> None:
    print(phrase, flush=True)


def print_summary(stats: SearchStats) -> None:
    print(
        f"Found {stats.phrases:,} phrases | states={stats.states:,} pruned={stats.pruned:,} "
        f"rejected={stats.rejected:,} memo_hits={stats.memo_hits:,}",
        file=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = parse_args(argv)
    except ConfigurationError as exc:
        build_parser().print_usage(sys.stderr)
        print(f"anagram.py: error: {exc}", file=sys.stderr)
        return 2

    verbose = not args.quiet
    words, prefixes = load_dictionary(
        args.dictionary,
        wordfreq_limit=args.wordfreq_limit,
        verbose=verbose,
    )

    if verbose:
        print(f"Decoding '{normalize_input(args.anagram)}'", file=sys.stderr)

    if args.workers > 1:
        _, stats = decode_parallel(words, prefixes, args.anagram, args.workers, on_phrase=print_phrase)
    else:
        decoder = PhraseDecoder(words, prefixes, on_phrase=print_phrase)
        decoder.decode(args.anagram)
        stats = decoder.stats

    if verbose:
        print_summary(stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())
