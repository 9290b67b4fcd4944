# src/tokencount/utils/tokenizer.py
import logging

import tiktoken

from tokencount.config import ENCODINGS, ConfigurationError

logger = logging.getLogger(__name__)


class Tokenizer:
    """
    Read-only handle over a loaded BPE vocabulary.

    One instance is shared by every worker thread; nothing on it is mutated
    after load().
    """

    def __init__(self, name: str, encoding):
        self.name = name
        self._encoding = encoding

    @classmethod
    def load(cls, name: str) -> "Tokenizer":
        encoding_name = ENCODINGS.get(name.strip().lower())
        if encoding_name is None:
            raise ConfigurationError(
                f"unknown encoding '{name}' (choose from {', '.join(sorted(ENCODINGS))})"
            )
        try:
            encoding = tiktoken.get_encoding(encoding_name)
        except Exception as e:
            raise ConfigurationError(f"failed to load encoding {encoding_name}: {e}") from e
        logger.debug("loaded encoding %s", encoding_name)
        return cls(encoding_name, encoding)

    def count(self, text: str) -> int:
        """Token count for text, special tokens treated as plain text."""
        return len(self._encoding.encode_ordinary(text))
