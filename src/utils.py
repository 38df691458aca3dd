import math
import re
from typing import Optional, Union

Number = Union[int, float]

_WHITESPACE_RE = re.compile(r"[\s　]+")
_NUMBER_NOISE_RE = re.compile(r"[,，円¥￥\s]")
_FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９．－", "0123456789.-")


def strip_spaces(s: str) -> str:
    return _WHITESPACE_RE.sub("", s)


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def cell_text(value) -> str:
    """Trimmed string form of a cell; integral floats lose their trailing '.0'."""
    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_number(value) -> Number:
    if is_blank(value):
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    cleaned = _NUMBER_NOISE_RE.sub("", str(value).translate(_FULLWIDTH_DIGITS))
    try:
        num = float(cleaned)
    except ValueError:
        return 0
    if math.isnan(num) or math.isinf(num):
        return 0
    return int(num) if num.is_integer() else num


def format_number(n: Optional[Number], signed: bool = False) -> str:
    if n is None:
        return "-"
    if isinstance(n, float) and n.is_integer():
        n = int(n)
    text = str(n)
    if signed and n > 0:
        text = "+" + text
    return text
