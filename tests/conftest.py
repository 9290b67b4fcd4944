# tests/conftest.py
import logging

import pytest

from tokencount.logging_config import LOGGER_NAME
from tokencount.utils import tokenizer as tokenizer_module
from tokencount.utils.tokenizer import Tokenizer


class WhitespaceEncoding:
    """Stand-in for a tiktoken Encoding: one token per whitespace-separated word."""

    def encode_ordinary(self, text):
        return list(range(len(text.split())))


@pytest.fixture
def word_tokenizer():
    return Tokenizer("whitespace", WhitespaceEncoding())


@pytest.fixture
def fake_tiktoken(monkeypatch):
    """Makes Tokenizer.load() return the whitespace encoding without any download."""
    loaded = []

    def get_encoding(name):
        loaded.append(name)
        return WhitespaceEncoding()

    monkeypatch.setattr(tokenizer_module.tiktoken, "get_encoding", get_encoding)
    return loaded


@pytest.fixture(autouse=True)
def reset_package_logger():
    """main() installs a stderr handler; drop it so later tests see a clean logger."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
