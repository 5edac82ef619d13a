# src/projectreview/utils/tokenizer.py
import logging

import tiktoken

logger = logging.getLogger(__name__)

# Same ratio the payload ceiling is derived from
CHARS_PER_TOKEN = 4


class Tokenizer:
    _encoding = None

    @classmethod
    def get_encoding(cls):
        if cls._encoding is None:
            cls._encoding = tiktoken.get_encoding("cl100k_base")
        return cls._encoding

    @staticmethod
    def count(text: str) -> int:
        """Estimates the prompt's token count."""
        try:
            return len(Tokenizer.get_encoding().encode(text, disallowed_special=()))
        except Exception as e:
            # The encoding is downloaded on first use; offline runs fall back to the ratio
            logger.debug("tiktoken unavailable (%s), estimating by length", e)
            return len(text) // CHARS_PER_TOKEN
