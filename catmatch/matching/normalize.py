"""Text normalization for category matching.

Turkish letters are folded to ASCII so that "Kadın Çanta" and "kadin canta"
compare equal. Every other comparison in the engine runs on normalized text.
"""

from __future__ import annotations

import re
from typing import Optional

# 대문자는 lower() 전에 직접 치환해야 'İ'가 'i̇'(결합 점)로 깨지지 않습니다.
_TURKISH_CHAR_MAP = str.maketrans({
    "ğ": "g", "ü": "u", "ş": "s", "ı": "i", "ö": "o", "ç": "c",
    "Ğ": "g", "Ü": "u", "Ş": "s", "İ": "i", "Ö": "o", "Ç": "c",
    "I": "i",
})

_NON_WORD_RE = re.compile(r"[^\w\s]|_")
_WHITESPACE_RE = re.compile(r"\s+")

# 튀르키예어 알파벳 순서 (정렬용)
_TURKISH_ALPHABET = "abcçdefgğhıijklmnoöprsştuüvyz"
_TURKISH_ORDER = {ch: idx for idx, ch in enumerate(_TURKISH_ALPHABET)}


def fold_turkish(text: str) -> str:
    """튀르키예어 특수문자를 ASCII로 치환 (대소문자 유지 안 함)"""
    return text.translate(_TURKISH_CHAR_MAP)


def normalize(text: Optional[str]) -> str:
    """매칭용 텍스트 정규화

    소문자화 → 튀르키예어 문자 치환 → 특수문자 공백 치환 → 공백 정리

    Args:
        text: 원본 텍스트 (None 허용)

    Returns:
        정규화된 텍스트. 빈 입력이면 빈 문자열.
    """
    if not text:
        return ""

    folded = fold_turkish(text).lower()
    # lower()가 만든 결합 문자 등도 한 번 더 치환
    folded = fold_turkish(folded)
    cleaned = _NON_WORD_RE.sub(" ", folded)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def tokenize(text: Optional[str]) -> list[str]:
    """정규화 후 공백 기준 토큰 분리"""
    normalized = normalize(text)
    if not normalized:
        return []
    return normalized.split(" ")


def contains_term(text: str, term: str) -> bool:
    """정규화된 text 안에 term이 단어(구) 단위로 포함되는지 확인

    'women' 안의 'men', 'bayan' 안의 'bay' 같은 부분 일치를 배제합니다.
    두 인자 모두 이미 정규화되어 있어야 합니다.
    """
    if not text or not term:
        return False
    return f" {term} " in f" {text} "


def turkish_sort_key(text: str) -> tuple:
    """튀르키예어 알파벳 순 정렬 키

    'Çanta'가 'Zeytin' 뒤가 아니라 'C'와 'D' 사이에 오도록 합니다.
    알파벳 밖의 문자(숫자, 기호)는 알파벳 뒤에 코드포인트 순으로 둡니다.
    """
    lowered = text.replace("I", "ı").replace("İ", "i").lower()
    return tuple(
        (0, _TURKISH_ORDER[ch]) if ch in _TURKISH_ORDER else (1, ord(ch))
        for ch in lowered
    )
