"""
Anagram phrase search.

Partitions the letters of the input into sequences of dictionary words by
depth-first backtracking. At each step one remaining letter is either the
last letter of the current word ("close", a space is appended) or a
non-final letter ("extend"). Fragments that are not a prefix of any word are
pruned immediately, and partial or full phrases that were already processed
are skipped, since they are reached again through other letter orderings.
"""

from __future__ import annotations
from dataclasses import dataclass
from multiprocessing import Pool
from typing import Callable, Iterator, List, Optional, Tuple
import re

from existence_set import ExistenceSet

SEPARATOR = " "
FOUND_CAPACITY = 1031  # grows with the search
_WHITESPACE = re.compile(r"\s+")


def normalize_input(text: str) -> str:
    """Drop whitespace: spaces in the input are not letters to be placed."""
    return _WHITESPACE.sub("", text)


def last_word(phrase: str) -> str:
    """Text after the last separator, or the whole phrase."""
    return phrase[phrase.rfind(SEPARATOR) + 1:]


@dataclass
class SearchStats:
    states: int = 0
    pruned: int = 0       # fragment is not a prefix of any word
    rejected: int = 0     # closed word is not in the dictionary
    memo_hits: int = 0    # partial or full phrase already processed
    phrases: int = 0


class PhraseDecoder:
    """
    Owns the three sets used by the search: dictionary words, word prefixes
    and phrases already found. The found set is reset by every decode().
    """

    def __init__(
        self,
        words: ExistenceSet,
        prefixes: ExistenceSet,
        on_phrase: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.words = words
        self.prefixes = prefixes
        self.on_phrase = on_phrase
        self.reset()

    def reset(self) -> None:
        self.found = ExistenceSet(capacity=FOUND_CAPACITY)
        self.phrases: List[str] = []
        self.stats = SearchStats()

    def decode(self, text: str) -> List[str]:
        """All anagram phrases of `text`, in discovery order."""
        self.reset()
        self.search("", normalize_input(text))
        return self.phrases

    def _emit(self, phrase: str) -> None:
        self.found.insert(phrase)
        self.phrases.append(phrase)
        self.stats.phrases += 1
        if self.on_phrase is not None:
            self.on_phrase(phrase)

    def _closed_word_ok(self, prefix: str) -> bool:
        """Check the word just closed by the trailing separator of `prefix`."""
        if last_word(prefix[:-1]) not in self.words:
            self.stats.rejected += 1
            return False
        if prefix in self.found:
            self.stats.memo_hits += 1
            return False
        return True

    def _visit(self, prefix: str, remaining: str) -> bool:
        """Check one state. True when its children should be explored."""
        self.stats.states += 1
        closed = prefix.endswith(SEPARATOR)

        if len(remaining) <= 1:
            if closed and not self._closed_word_ok(prefix):
                return False
            candidate = prefix + remaining
            if last_word(candidate) not in self.words:
                self.stats.rejected += 1
                return False
            if candidate in self.found:
                self.stats.memo_hits += 1
                return False
            self._emit(candidate)
            return False

        if closed:
            if not self._closed_word_ok(prefix):
                return False
            self.found.insert(prefix)
        elif prefix and last_word(prefix) not in self.prefixes:
            self.stats.pruned += 1
            return False
        return True

    @staticmethod
    def _children(prefix: str, remaining: str) -> Iterator[Tuple[str, str]]:
        """Close before extend, indices left to right."""
        for i, ch in enumerate(remaining):
            rest = remaining[:i] + remaining[i + 1:]
            yield prefix + ch + SEPARATOR, rest
            yield prefix + ch, rest

    def search(self, prefix: str, remaining: str) -> None:
        """
        Depth-first search from one state. Uses an explicit stack of child
        generators, so depth is bounded by memory and not the recursion limit.
        """
        stack: List[Iterator[Tuple[str, str]]] = [iter([(prefix, remaining)])]
        while stack:
            state = next(stack[-1], None)
            if state is None:
                stack.pop()
            elif self._visit(*state):
                stack.append(self._children(*state))


# ============================================================================ #
#                              PARALLEL SEARCH                                 #
# ============================================================================ #

_worker_sets: Optional[Tuple[ExistenceSet, ExistenceSet]] = None


def _init_worker(words: ExistenceSet, prefixes: ExistenceSet):
    global _worker_sets
    _worker_sets = (words, prefixes)


def _search_branch(args: Tuple[str, int]) -> Tuple[List[str], SearchStats]:
    """Worker function: explore every phrase starting with text[index]."""
    text, index = args
    decoder = PhraseDecoder(*_worker_sets)
    ch = text[index]
    rest = text[:index] + text[index + 1:]
    decoder.search(ch + SEPARATOR, rest)
    decoder.search(ch, rest)
    return decoder.phrases, decoder.stats


def decode_parallel(
    words: ExistenceSet,
    prefixes: ExistenceSet,
    text: str,
    workers: int,
    on_phrase: Optional[Callable[[str], None]] = None,
) -> Tuple[List[str], SearchStats]:
    """
    Fan the top-level letter choices out to a process pool. Branches are
    merged in index order and phrases already emitted by an earlier branch
    are dropped, which gives the same sequence as PhraseDecoder.decode.
    """
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    text = normalize_input(text)
    if workers == 1 or len(text) <= 1:
        decoder = PhraseDecoder(words, prefixes, on_phrase)
        return decoder.decode(text), decoder.stats

    seen = ExistenceSet(capacity=FOUND_CAPACITY)
    phrases: List[str] = []
    totals = SearchStats(states=1)
    with Pool(workers, initializer=_init_worker, initargs=(words, prefixes)) as pool:
        for branch_phrases, stats in pool.imap(_search_branch, [(text, i) for i in range(len(text))]):
            totals.states += stats.states
            totals.pruned += stats.pruned
            totals.rejected += stats.rejected
            totals.memo_hits += stats.memo_hits
            for phrase in branch_phrases:
                if seen.insert(phrase):
                    phrases.append(phrase)
                    if on_phrase is not None:
                        on_phrase(phrase)
                else:
                    totals.memo_hits += 1
    totals.phrases = len(phrases)
    return phrases, totals
