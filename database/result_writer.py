"""
観測結果をJSONファイルとして保存
一時ファイルに書き込んでからリネームするため、読み手が書きかけのファイルを見ることはない
"""
import json
import os
import re
import tempfile
from pathlib import Path
from typing import Union
import logging

from database.models import CrawlResult
from scrapers.errors import PersistenceError

logger = logging.getLogger(__name__)

INDEX_FILE = 'index.json'
LATEST_DIR = 'latest'

_OBSERVED_AT_PATTERN = re.compile(
    r'(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})T(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2})'
)


def _fsync_directory(directory: Path):
    """リネームをディスクに反映（対応していないOSでは何もしない）"""
    if not hasattr(os, 'O_DIRECTORY'):
        return
    fd = os.open(directory, os.O_RDONLY | os.O_DIRECTORY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def write_atomic(directory: Union[str, Path], result: CrawlResult) -> Path:
    """
    ディレクトリ内の index.json を置き換える

    同じディレクトリに一時ファイルを作成し、fsync後に index.json へリネームする
    途中で失敗した場合、既存の index.json はそのまま残る

    Args:
        directory: 保存先ディレクトリ
        result: 観測結果

    Returns:
        index.json のパス

    Raises:
        PersistenceError: ディレクトリ作成・書き込み・リネームに失敗
    """
    directory = Path(directory)
    target = directory / INDEX_FILE
    stamp = re.sub(r'[^0-9]', '', result.observed_at)

    try:
        directory.mkdir(parents=True, exist_ok=True)
        tmp = tempfile.NamedTemporaryFile(
            mode='w',
            encoding='utf-8',
            dir=directory,
            prefix=f'.index.{stamp}.',
            suffix='.tmp',
            delete=False,
        )
    except OSError as e:
        raise PersistenceError(f"Cannot prepare {directory}: {e}") from e

    tmp_path = Path(tmp.name)
    try:
        with tmp:
            json.dump(result.to_dict(), tmp, ensure_ascii=False, allow_nan=False)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_path, target)
    except (OSError, TypeError, ValueError) as e:
        tmp_path.unlink(missing_ok=True)
        raise PersistenceError(f"Cannot write {target}: {e}") from e

    try:
        _fsync_directory(directory)
    except OSError as e:
        logger.warning(f"Directory sync failed for {directory}: {e}")

    return target


def load_result(path: Union[str, Path]) -> CrawlResult:
    """
    保存済みの index.json を読み込む

    Args:
        path: ファイルのパス

    Returns:
        観測結果

    Raises:
        FileNotFoundError: ファイルが存在しない
        PersistenceError: 内容が壊れている
    """
    with open(path, encoding='utf-8') as f:
        try:
            return CrawlResult.from_dict(json.load(f))
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"Corrupt result file {path}: {e!r}") from e


class ResultWriter:
    """
    観測時刻ごとのディレクトリと latest ディレクトリに結果を保存するクラス

    base/YYYY/MM/DD/HH/MM/index.json
    base/latest/index.json
    """

    def __init__(self, base_dir: Union[str, Path]):
        """
        Args:
            base_dir: 保存先のルートディレクトリ
        """
        self.base_dir = Path(base_dir)
        logger.info(f"ResultWriter initialized at {self.base_dir}")

    def archive_dir_for(self, observed_at: str) -> Path:
        """
        観測時刻からアーカイブ先のディレクトリを求める

        Args:
            observed_at: 観測時刻 (YYYY-MM-DDTHH:MM:00+0900)

        Returns:
            ディレクトリのパス
        """
        m = _OBSERVED_AT_PATTERN.match(observed_at)
        if not m:
            raise ValueError(f"Invalid observed_at: {observed_at}")
        return self.base_dir.joinpath(m['year'], m['month'], m['day'], m['hour'], m['minute'])

    @property
    def latest_path(self) -> Path:
        return self.base_dir / LATEST_DIR / INDEX_FILE

    def publish(self, result: CrawlResult) -> Path:
        """
        アーカイブと latest の両方に保存

        Args:
            result: 観測結果

        Returns:
            アーカイブ側の index.json のパス
        """
        archived = write_atomic(self.archive_dir_for(result.observed_at), result)
        write_atomic(self.base_dir / LATEST_DIR, result)
        logger.info(f"Published {len(result.records)} records to {archived}")
        return archived

    def load_latest(self) -> CrawlResult:
        """最新の観測結果を読み込む"""
        return load_result(self.latest_path)
