"""
セル文字列を型付きの値に変換するデコーダー群

数値として読めない小数は欠測（None）として扱い、例外にはしない
"""
import math
import re
from typing import Optional

from database.models import RainStatus, WindDirectionText
from scrapers.errors import InvalidNumber, TooShort

_UNSIGNED_PATTERN = re.compile(r'[0-9]+')
_DECIMAL_PATTERN = re.compile(r'[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)')

# 降水感知の記号
RAIN_SYMBOLS = {
    '●': RainStatus.RAIN,
    '○': RainStatus.CLEAR,
    '.': RainStatus.UNAVAILABLE,
}

# 風向の表記
WIND_DIRECTIONS = {d.value: d for d in WindDirectionText.compass_points()}
WIND_DIRECTIONS['-'] = WindDirectionText.NO


def parse_unsigned(text: str) -> int:
    """
    10進数の非負整数を解析

    Args:
        text: セル文字列

    Returns:
        整数値

    Raises:
        InvalidNumber: 数字以外を含む、または空文字列
    """
    if not _UNSIGNED_PATTERN.fullmatch(text):
        raise InvalidNumber(text)
    return int(text)


def parse_decimal(text: str) -> Optional[float]:
    """
    小数を解析（欠測の場合はNone）

    Args:
        text: セル文字列

    Returns:
        数値またはNone
    """
    if not _DECIMAL_PATTERN.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def parse_height(text: str) -> int:
    """
    末尾の単位（例: '10m' の 'm'）を取り除いて標高を解析

    Args:
        text: セル文字列

    Returns:
        標高

    Raises:
        TooShort: 空文字列
        InvalidNumber: 単位を除いた部分が整数でない
    """
    if not text:
        raise TooShort(text)
    return parse_unsigned(text[:-1])


def parse_rain_status(text: str) -> RainStatus:
    return RAIN_SYMBOLS.get(text, RainStatus.UNKNOWN)


def parse_wind_direction(text: str) -> WindDirectionText:
    return WIND_DIRECTIONS.get(text, WindDirectionText.UNAVAILABLE)
