"""
データモデル定義
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class RainStatus(str, Enum):
    """降水感知の状態"""
    CLEAR = 'Clear'
    RAIN = 'Rain'
    UNAVAILABLE = 'Unavailable'
    UNKNOWN = 'Unknown'


class WindDirectionText(str, Enum):
    """16方位の風向（および無風・欠測）"""
    N = 'N'
    NNW = 'NNW'
    NW = 'NW'
    WNW = 'WNW'
    W = 'W'
    WSW = 'WSW'
    SW = 'SW'
    SSW = 'SSW'
    S = 'S'
    SSE = 'SSE'
    SE = 'SE'
    ESE = 'ESE'
    E = 'E'
    ENE = 'ENE'
    NE = 'NE'
    NNE = 'NNE'
    NO = 'No'
    UNAVAILABLE = 'Unavailable'

    @classmethod
    def compass_points(cls) -> Tuple['WindDirectionText', ...]:
        return tuple(d for d in cls if d not in (cls.NO, cls.UNAVAILABLE))


@dataclass(frozen=True)
class Wind:
    """風向・風速"""
    direction_code: Optional[float]        # 風向（度）
    direction_text: WindDirectionText      # 風向（16方位）
    velocity: Optional[float]              # 風速(m/s)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'direction_code': self.direction_code,
            'direction_text': self.direction_text.value,
            'velocity': self.velocity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Wind':
        return cls(
            direction_code=data.get('direction_code'),
            direction_text=WindDirectionText(data['direction_text']),
            velocity=data.get('velocity'),
        )


@dataclass(frozen=True)
class Rain:
    """降水"""
    is_raining: RainStatus                 # 降水感知
    rain15: Optional[float] = None         # 15分降水量(mm)
    rain60: Optional[float] = None         # 60分降水量(mm)
    rain3h: Optional[float] = None         # 3時間降水量(mm)
    rain6h: Optional[float] = None         # 6時間降水量(mm)
    rain12h: Optional[float] = None        # 12時間降水量(mm)
    rainday: Optional[float] = None        # 日降水量(mm)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_raining': self.is_raining.value,
            'rain15': self.rain15,
            'rain60': self.rain60,
            'rain3h': self.rain3h,
            'rain6h': self.rain6h,
            'rain12h': self.rain12h,
            'rainday': self.rainday,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Rain':
        return cls(
            is_raining=RainStatus(data['is_raining']),
            rain15=data.get('rain15'),
            rain60=data.get('rain60'),
            rain3h=data.get('rain3h'),
            rain6h=data.get('rain6h'),
            rain12h=data.get('rain12h'),
            rainday=data.get('rainday'),
        )


@dataclass(frozen=True)
class Record:
    """観測地点1つ分の観測値"""
    id: int                                # 地点番号
    name: str                              # 地点名
    height: Optional[int]                  # 標高(m)
    rain: Rain
    temperature: Optional[float]           # 気温(℃)
    wind1: Wind                            # 1分平均風
    wind10: Wind                           # 10分平均風
    humidity: Optional[float]              # 湿度(%)
    atmospheric: Optional[float]           # 気圧(hPa)
    address: str                           # 所在地

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'height': self.height,
            'rain': self.rain.to_dict(),
            'temperature': self.temperature,
            'wind1': self.wind1.to_dict(),
            'wind10': self.wind10.to_dict(),
            'humidity': self.humidity,
            'atmospheric': self.atmospheric,
            'address': self.address,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Record':
        return cls(
            id=data['id'],
            name=data['name'],
            height=data.get('height'),
            rain=Rain.from_dict(data['rain']),
            temperature=data.get('temperature'),
            wind1=Wind.from_dict(data['wind1']),
            wind10=Wind.from_dict(data['wind10']),
            humidity=data.get('humidity'),
            atmospheric=data.get('atmospheric'),
            address=data['address'],
        )


@dataclass(frozen=True)
class CrawlResult:
    """1回の取得で得られた全地点の観測値"""
    observed_at: str                       # 観測時刻 (YYYY-MM-DDTHH:MM:00+0900)
    records: List[Record] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'observed_at': self.observed_at,
            'records': [r.to_dict() for r in self.records],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CrawlResult':
        return cls(
            observed_at=data['observed_at'],
            records=[Record.from_dict(r) for r in data.get('records', [])],
        )
