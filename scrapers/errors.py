"""
クローラーで使用する例外クラス
"""
from typing import Optional


class CrawlError(Exception):
    """クローラーの全ての例外の基底クラス"""


class FieldDecodeError(CrawlError, ValueError):
    """セル1つ分の値を解析できない"""

    def __init__(self, text: str, message: Optional[str] = None):
        self.text = text
        super().__init__(message or f"Cannot decode field: {text!r}")


class InvalidNumber(FieldDecodeError):
    """数字以外の文字を含む"""

    def __init__(self, text: str):
        super().__init__(text, f"Invalid number: {text!r}")


class TooShort(FieldDecodeError):
    """単位を取り除く前の文字列が空"""

    def __init__(self, text: str):
        super().__init__(text, f"Value too short to strip unit: {text!r}")


class StructuralError(CrawlError):
    """行またはページの構造が想定と異なる"""


class MalformedRow(StructuralError):
    """セル数が想定と異なる行（ヘッダー行、区切り行など）"""

    def __init__(self, cell_count: int, expected: int):
        self.cell_count = cell_count
        self.expected = expected
        super().__init__(f"Expected {expected} cells, got {cell_count}")


class IdentityDecodeError(StructuralError):
    """地点番号を解析できない行"""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid station id: {text!r}")


class MissingTimestamp(StructuralError):
    """見出しに観測時刻が見つからない"""

    def __init__(self, caption: str):
        self.caption = caption
        super().__init__(f"No observation time in caption: {caption!r}")


class PersistenceError(CrawlError):
    """結果ファイルの書き込みに失敗"""


class FetchError(CrawlError):
    """ページの取得に失敗"""
