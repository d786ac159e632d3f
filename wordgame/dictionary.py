import logging
import os
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Iterable, Optional, Protocol, Set

from .config import GameConfig
from .errors import OracleUnavailable

logger = logging.getLogger(__name__)

MINIMAL_WORD_SET = {"QI", "ZA", "CAT", "DOG", "JO", "AX", "EX",
                    "OX", "XI", "XU", "WORD", "PLAY", "GAME", "TILE", "BOARD"}


class DictionaryOracle(Protocol):
    def is_valid(self, word: str) -> bool:
        ...


def _normalize(word: str) -> str:
    return (word or '').strip().upper()


def _candidate_paths(path: Optional[str]):
    if path:
        return [path]
    here = os.path.dirname(os.path.abspath(__file__))
    return [
        'scrabble_words.txt',
        os.path.join(here, 'scrabble_words.txt'),
        os.path.join(os.path.dirname(here), 'scrabble_words.txt'),
    ]


def load_word_file(path: Optional[str] = None) -> Set[str]:
    """Reads a one-word-per-line list; falls back to a minimal word set if nothing usable is found."""
    dict_path_found = next((p for p in _candidate_paths(path) if os.path.exists(p)), None)
    if not dict_path_found:
        logger.warning("Word list not found. Using minimal word set.")
        return set(MINIMAL_WORD_SET)
    try:
        with open(dict_path_found, 'r', encoding='utf-8') as f:
            loaded_words = {
                line.strip().upper() for line in f
                if len(line.strip()) >= 2 and line.strip().isalpha()
            }
    except OSError as e:
        logger.error(f"Error reading dictionary file {dict_path_found}: {e}. Using minimal word set.")
        return set(MINIMAL_WORD_SET)
    if not loaded_words:
        logger.warning(
            f"Dictionary file {dict_path_found} was empty or contained no valid words. Using minimal set.")
        return set(MINIMAL_WORD_SET)
    logger.info(f"Successfully loaded {len(loaded_words)} words from {dict_path_found}")
    return loaded_words


class WordListDictionary:
    """Case-insensitive lookup against an in-memory word set."""

    def __init__(self, words: Optional[Iterable[str]] = None, path: Optional[str] = None):
        if words is None:
            words = load_word_file(path)
        self._words: Set[str] = {_normalize(w) for w in words}

    def __len__(self) -> int:
        return len(self._words)

    def is_valid(self, word: str) -> bool:
        word = _normalize(word)
        if len(word) < 2 or not word.isalpha():
            return False
        return word in self._words


class NltkDictionary:
    """Backed by the nltk `words` corpus, loaded on first use."""

    def __init__(self):
        self._words: Optional[Set[str]] = None

    def _load(self) -> Set[str]:
        if self._words is None:
            from nltk.corpus import words
            try:
                self._words = {w.upper() for w in words.words()}
            except LookupError as e:
                raise OracleUnavailable(f"nltk words corpus is not installed: {e}") from e
            logger.info(f"Loaded {len(self._words)} words from the nltk corpus")
        return self._words

    def is_valid(self, word: str) -> bool:
        word = _normalize(word)
        if len(word) < 2 or not word.isalpha():
            return False
        return word in self._load()


class TimeoutDictionary:
    """Bounds each lookup on a slow oracle; timeouts and failures become OracleUnavailable."""

    def __init__(self, oracle: DictionaryOracle, timeout_seconds: float):
        self._oracle = oracle
        self._timeout = timeout_seconds
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='dictionary')

    def is_valid(self, word: str) -> bool:
        future = self._executor.submit(self._oracle.is_valid, word)
        try:
            return bool(future.result(timeout=self._timeout))
        except FutureTimeout as e:
            future.cancel()
            raise OracleUnavailable(f"Dictionary lookup for '{word}' timed out after {self._timeout}s") from e
        except OracleUnavailable:
            raise
        except Exception as e:
            raise OracleUnavailable(f"Dictionary lookup for '{word}' failed: {e}") from e


def build_dictionary(config: GameConfig) -> DictionaryOracle:
    if config.dictionary_source == 'nltk':
        oracle: DictionaryOracle = NltkDictionary()
    else:
        oracle = WordListDictionary(path=config.dictionary_path)
    if config.oracle_timeout_seconds:
        oracle = TimeoutDictionary(oracle, config.oracle_timeout_seconds)
    return oracle
