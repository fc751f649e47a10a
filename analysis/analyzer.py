"""
観測結果の集計クラス
保存済みの結果をDataFrameに変換して地点ごとの比較を行う
"""
import pandas as pd
from typing import Dict, Optional
import logging

from database.models import CrawlResult
from database.result_writer import ResultWriter

logger = logging.getLogger(__name__)


def records_to_frame(result: CrawlResult) -> pd.DataFrame:
    """
    レコードを1地点1行のDataFrameに変換

    入れ子の値は 'rain_rain15', 'wind10_velocity' のように接頭辞を付けて展開する

    Args:
        result: 観測結果

    Returns:
        DataFrame
    """
    rows = []
    for record in result.records:
        data = record.to_dict()
        row = {k: v for k, v in data.items() if k not in ('rain', 'wind1', 'wind10')}
        for group in ('rain', 'wind1', 'wind10'):
            for key, value in data[group].items():
                name = key if key == 'is_raining' else f'{group}_{key}'
                row[name] = value
        rows.append(row)

    df = pd.DataFrame(rows)
    if not df.empty:
        df['observed_at'] = pd.to_datetime(result.observed_at, format='%Y-%m-%dT%H:%M:%S%z')
    return df


class StationAnalyzer:
    """
    最新の観測結果を集計するクラス
    """

    def __init__(self, writer: ResultWriter):
        """
        Args:
            writer: ResultWriterインスタンス
        """
        self.writer = writer
        logger.info("Analyzer initialized")

    def load_frame(self) -> pd.DataFrame:
        result = self.writer.load_latest()
        return records_to_frame(result)

    def summarize(self) -> Dict:
        """
        全地点の概要を集計

        Returns:
            集計結果の辞書
        """
        result = self.writer.load_latest()
        df = records_to_frame(result)

        if df.empty:
            logger.warning("No records in latest result")
            return {'observed_at': result.observed_at, 'stations': 0}

        temperature = df['temperature'].dropna()
        wind = df['wind10_velocity'].dropna()

        summary = {
            'observed_at': result.observed_at,
            'stations': len(df),
            'raining_stations': int((df['is_raining'] == 'Rain').sum()),
            'temperature_mean': temperature.mean() if not temperature.empty else None,
            'temperature_max': temperature.max() if not temperature.empty else None,
            'strongest_wind_station': None,
            'strongest_wind_velocity': None,
        }
        if not wind.empty:
            idx = wind.idxmax()
            summary['strongest_wind_station'] = df.loc[idx, 'name']
            summary['strongest_wind_velocity'] = wind[idx]

        return summary

    def top_stations(self, variable: str = 'rain_rainday', n: int = 10) -> pd.DataFrame:
        """
        指定した項目の上位地点を取得

        Args:
            variable: 列名 ('rain_rainday', 'temperature'など)
            n: 件数

        Returns:
            上位地点のDataFrame
        """
        df = self.load_frame()
        if df.empty:
            return df
        if variable not in df.columns:
            raise ValueError(f"Unknown variable: {variable}")

        return (df.dropna(subset=[variable])
                  .nlargest(n, variable)[['id', 'name', variable]]
                  .reset_index(drop=True))

    def generate_summary_report(self) -> str:
        """
        集計結果のレポートを生成

        Returns:
            レポート文字列
        """
        s = self.summarize()

        def fmt(value: Optional[float], format_spec: str = '.1f') -> str:
            return 'N/A' if value is None else format(value, format_spec)

        report = f"""
========================================
AWS Observation Summary
========================================
Observed at: {s['observed_at']}
Stations: {s['stations']}
Raining stations: {s.get('raining_stations', 0)}

[Temperature]
Mean: {fmt(s.get('temperature_mean'))}
Max: {fmt(s.get('temperature_max'))}

[Wind (10 min)]
Strongest: {s.get('strongest_wind_station') or 'N/A'} ({fmt(s.get('strongest_wind_velocity'))} m/s)
========================================
"""
        return report
