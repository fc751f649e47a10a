"""
気象庁（韓国）AWSの毎分観測ページをスクレイピング
表の各行を観測地点ごとのレコードに変換する
"""
import re
import time
from typing import Callable, List, NamedTuple, Optional
import logging

import requests
from bs4 import BeautifulSoup
from bs4.element import Tag

from database.models import CrawlResult, Rain, Record, Wind
from scrapers.decoders import (
    parse_decimal,
    parse_height,
    parse_rain_status,
    parse_unsigned,
    parse_wind_direction,
)
from scrapers.errors import (
    FetchError,
    FieldDecodeError,
    IdentityDecodeError,
    MalformedRow,
    MissingTimestamp,
    StructuralError,
)

logger = logging.getLogger(__name__)


class Column(NamedTuple):
    position: int
    field: str
    decoder: Callable


# 表の列構成（列の並びが変わった場合はここだけを修正する）
COLUMNS = (
    Column(0, 'id', parse_unsigned),
    Column(1, 'name', str),
    Column(2, 'height', parse_height),
    Column(3, 'is_raining', parse_rain_status),
    Column(4, 'rain15', parse_decimal),
    Column(5, 'rain60', parse_decimal),
    Column(6, 'rain3h', parse_decimal),
    Column(7, 'rain6h', parse_decimal),
    Column(8, 'rain12h', parse_decimal),
    Column(9, 'rainday', parse_decimal),
    Column(10, 'temperature', parse_decimal),
    Column(11, 'wind1_direction_code', parse_decimal),
    Column(12, 'wind1_direction_text', parse_wind_direction),
    Column(13, 'wind1_velocity', parse_decimal),
    Column(14, 'wind10_direction_code', parse_decimal),
    Column(15, 'wind10_direction_text', parse_wind_direction),
    Column(16, 'wind10_velocity', parse_decimal),
    Column(17, 'humidity', parse_decimal),
    Column(18, 'atmospheric', parse_decimal),
    Column(19, 'address', str),
)

TIME_SELECTOR = 'span.ehead'
ROW_SELECTOR = 'table table tr'

_TIMESTAMP_PATTERN = re.compile(
    r'(?P<year>[0-9]{4})\.(?P<month>[0-9]{2})\.(?P<day>[0-9]{2})\.(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2})'
)


def tokenize_row(row: Tag) -> List[str]:
    """
    行の直下のセルからテキストを取り出す

    Args:
        row: tr要素

    Returns:
        セルごとの文字列（空のセルは空文字列）
    """
    return [cell.get_text().strip() for cell in row.find_all(['td', 'th'], recursive=False)]


def assemble_record(cells: List[str]) -> Record:
    """
    セルの並びからレコードを組み立てる

    地点番号以外の値が解析できない場合は欠測として扱う

    Args:
        cells: tokenize_rowの結果

    Returns:
        レコード

    Raises:
        MalformedRow: セル数が列構成と一致しない
        IdentityDecodeError: 地点番号を解析できない
    """
    if len(cells) != len(COLUMNS):
        raise MalformedRow(len(cells), len(COLUMNS))

    values = {}
    for column in COLUMNS:
        text = cells[column.position]
        try:
            values[column.field] = column.decoder(text)
        except FieldDecodeError:
            if column.field == 'id':
                raise IdentityDecodeError(text)
            values[column.field] = None

    return Record(
        id=values['id'],
        name=values['name'],
        height=values['height'],
        rain=Rain(
            is_raining=values['is_raining'],
            rain15=values['rain15'],
            rain60=values['rain60'],
            rain3h=values['rain3h'],
            rain6h=values['rain6h'],
            rain12h=values['rain12h'],
            rainday=values['rainday'],
        ),
        temperature=values['temperature'],
        wind1=Wind(
            direction_code=values['wind1_direction_code'],
            direction_text=values['wind1_direction_text'],
            velocity=values['wind1_velocity'],
        ),
        wind10=Wind(
            direction_code=values['wind10_direction_code'],
            direction_text=values['wind10_direction_text'],
            velocity=values['wind10_velocity'],
        ),
        humidity=values['humidity'],
        atmospheric=values['atmospheric'],
        address=values['address'],
    )


def extract_observed_at(caption: str) -> str:
    """
    見出しの 'YYYY.MM.DD.HH:MM' を 'YYYY-MM-DDTHH:MM:00+0900' に変換

    Args:
        caption: 見出しのテキスト

    Returns:
        観測時刻

    Raises:
        MissingTimestamp: 時刻が見つからない
    """
    matches = list(_TIMESTAMP_PATTERN.finditer(caption))
    if not matches:
        raise MissingTimestamp(caption)

    # 末尾に近いものを採用
    m = matches[-1]
    return f"{m['year']}-{m['month']}-{m['day']}T{m['hour']}:{m['minute']}:00+0900"


def parse_page(html: str) -> CrawlResult:
    """
    ページ全体を解析

    Args:
        html: デコード済みのHTML

    Returns:
        観測結果（全行が不正でも空のレコードで返す）

    Raises:
        MissingTimestamp: 観測時刻が見つからない
    """
    soup = BeautifulSoup(html, 'html.parser')

    caption = soup.select_one(TIME_SELECTOR)
    observed_at = extract_observed_at(caption.get_text() if caption else '')

    records = []
    skipped = 0
    for row in soup.select(ROW_SELECTOR):
        try:
            records.append(assemble_record(tokenize_row(row)))
        except StructuralError as e:
            logger.debug(f"Skip row: {e}")
            skipped += 1

    logger.info(f"Parsed {len(records)} records ({skipped} rows skipped) at {observed_at}")
    return CrawlResult(observed_at=observed_at, records=records)


class AwsScraper:
    """
    AWS毎分観測ページを取得するクラス
    取得に失敗した場合は一定間隔で再試行する
    """

    URL = "http://www.kma.go.kr/cgi-bin/aws/nph-aws_txt_min"
    ENCODING = 'cp949'
    DEFAULT_DELAY = 0.5
    DEFAULT_TIMEOUT = 10.0

    def __init__(self,
                 url: Optional[str] = None,
                 delay: float = DEFAULT_DELAY,
                 timeout: float = DEFAULT_TIMEOUT,
                 max_attempts: Optional[int] = None,
                 session: Optional[requests.Session] = None):
        """
        Args:
            url: 取得するページのURL
            delay: 再試行の間隔（秒）
            timeout: リクエストのタイムアウト（秒）
            max_attempts: 最大試行回数（Noneの場合は成功するまで繰り返す）
            session: requestsのセッション
        """
        self.url = url or self.URL
        self.delay = delay
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'
        })
        logger.info(f"AwsScraper initialized for {self.url}")

    def fetch_page(self) -> str:
        """
        ページを取得してデコードする

        Returns:
            デコード済みのHTML

        Raises:
            FetchError: 最大試行回数を超えた
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                response = self.session.get(self.url, timeout=self.timeout)
                if response.ok:
                    return response.content.decode(self.ENCODING, errors='ignore')
                logger.warning(f"HTTP Error {response.status_code} (attempt {attempt})")
            except requests.exceptions.RequestException as e:
                logger.warning(f"Request error: {e} (attempt {attempt})")

            if self.max_attempts is not None and attempt >= self.max_attempts:
                raise FetchError(f"Gave up fetching {self.url} after {attempt} attempts")

            # サーバー負荷に配慮して遅延
            time.sleep(self.delay)

    def crawl(self) -> CrawlResult:
        """ページを取得して解析"""
        return parse_page(self.fetch_page())
