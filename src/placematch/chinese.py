"""Default collaborators for Chinese place names: jieba, OpenCC and pinyin."""

from __future__ import annotations

import unicodedata
from pathlib import Path

import jieba
import structlog
from opencc import OpenCC
from pypinyin import Style, lazy_pinyin
from unidecode import unidecode

log = structlog.get_logger()


class OpenCCConverter:
    """ScriptConverter applying NFKC, then traditional -> simplified Chinese."""

    def __init__(self, conversion: str = "t2s") -> None:
        self.conversion = conversion
        self._cc = OpenCC(conversion)

    def to_canonical(self, text: str) -> str:
        return self._cc.convert(unicodedata.normalize("NFKC", text))


class JiebaSegmenter:
    """Segmenter backed by jieba's precise mode."""

    def __init__(self, user_dict: str | Path | None = None) -> None:
        self._tokenizer = jieba.Tokenizer()
        if user_dict is not None:
            self._tokenizer.load_userdict(str(user_dict))
            log.info("jieba_user_dict_loaded", path=str(user_dict))

    def segment(self, text: str) -> list[str]:
        return [t for t in self._tokenizer.lcut(text) if t.strip()]


class PinyinEncoder:
    """PhoneticEncoder rendering Han characters as toneless pinyin.

    Runs of non-Han text are transliterated to lowercase ASCII, so
    "Zürich" and "Zurich" render the same.
    """

    def __init__(self, separator: str = " ") -> None:
        self.separator = separator

    def to_phonetic(self, text: str) -> str:
        syllables = lazy_pinyin(text, style=Style.NORMAL)
        parts = (unidecode(s).strip().lower() for s in syllables)
        return self.separator.join(p for p in parts if p)
