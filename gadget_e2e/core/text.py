import re

_NON_DIGIT = re.compile(r"[^0-9]")


def normalize_text(s: str) -> str:
    return (s or "").strip().replace("\u3000", " ").replace("\n", " ")


def parse_price(text: str) -> int:
    """'Rs. 1,299' -> 1299。数字が1つも無ければ ValueError（0 にはしない）"""
    digits = _NON_DIGIT.sub("", text or "")
    if not digits:
        raise ValueError(f"no digits in price text: {text!r}")
    return int(digits)
