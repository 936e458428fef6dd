"""
Dictionary loading for the anagram decoder.

Steps:
- Read words from a newline-delimited file (or a wordfreq top-N list)
- Load them into the word set, keeping whatever was read if the source fails
- Derive the prefix set used to prune word fragments during the search
"""

from __future__ import annotations
from pathlib import Path
from typing import Iterable, Iterator, Tuple
import sys

from tqdm import tqdm

from existence_set import ExistenceSet

WORDFREQ_PREFIX = "wordfreq:"
DEFAULT_WORDFREQ_LIMIT = 50000


class DictionaryLoadError(Exception):
    """Raised when the dictionary source cannot be read to the end."""


def progress(iterable, desc="", disable=False):
    """Progress bar with a custom format."""
    return tqdm(iterable, desc=desc, ascii=" ▖▘▝▗▚▞█", bar_format='{desc}: |{bar:20}|', disable=disable)


def read_words(path: Path) -> Iterator[str]:
    """
    Yield one word per line, line terminator stripped, blank lines skipped.
    Words are otherwise taken as-is (case-sensitive, no validation).
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            for line in handle:
                word = line.rstrip("\r\n")
                if word:
                    yield word
    except (OSError, UnicodeDecodeError) as exc:
        raise DictionaryLoadError(f"{path}: {exc}") from exc


def read_wordfreq_words(lang: str = "en", limit: int = DEFAULT_WORDFREQ_LIMIT) -> Iterator[str]:
    """Yield the `limit` most frequent alphabetic words for `lang` from wordfreq."""
    try:
        from wordfreq import top_n_list
    except ImportError as exc:
        raise DictionaryLoadError("wordfreq package is required for wordfreq: dictionaries") from exc

    try:
        words = top_n_list(lang, limit, wordlist="best")
    except (LookupError, OSError) as exc:
        raise DictionaryLoadError(f"wordfreq list for '{lang}': {exc}") from exc

    for word in words:
        if word.isalpha():
            yield word


def iter_source(source: str, *, wordfreq_limit: int = DEFAULT_WORDFREQ_LIMIT) -> Iterator[str]:
    """Resolve a DICTIONARY argument: `wordfreq:<lang>` or a file path."""
    if source.startswith(WORDFREQ_PREFIX):
        lang = source[len(WORDFREQ_PREFIX):] or "en"
        return read_wordfreq_words(lang, wordfreq_limit)
    return read_words(Path(source))


def build_word_set(words: Iterable[str]) -> ExistenceSet:
    """
    Insert every word into a fresh set. A DictionaryLoadError from the source
    is reported on stderr and the words read before it are kept.
    """
    word_set = ExistenceSet()
    try:
        for word in words:
            word_set.insert(word)
    except DictionaryLoadError as exc:
        print(f"Error attempting to load dictionary: {exc}", file=sys.stderr)
        print(f"Continuing with {len(word_set):,} words read before the failure", file=sys.stderr)
    return word_set


def build_prefix_set(word_set: ExistenceSet, *, show_progress: bool = False) -> ExistenceSet:
    """
    Every non-empty proper prefix of every word.
    e.g., 'cat' -> 'c', 'ca'
    """
    prefixes = ExistenceSet()
    for word in progress(list(word_set), "Building prefix set", disable=not show_progress):
        for i in range(1, len(word)):
            prefixes.insert(word[:i])
    return prefixes


def load_dictionary(
    source: str,
    *,
    wordfreq_limit: int = DEFAULT_WORDFREQ_LIMIT,
    verbose: bool = False,
) -> Tuple[ExistenceSet, ExistenceSet]:
    word_set = build_word_set(iter_source(source, wordfreq_limit=wordfreq_limit))
    if verbose:
        print(f"Loaded {len(word_set):,} unique words from {source}", file=sys.stderr)

    prefix_set = build_prefix_set(word_set, show_progress=verbose)
    if verbose:
        print(f"Built prefix set containing {len(prefix_set):,} entries", file=sys.stderr)

    return word_set, prefix_set
