"""Shared fixtures: a small AWS page in the layout of the real one."""

import pytest

from database.models import CrawlResult, Rain, Record, Wind, RainStatus, WindDirectionText


def make_cells(
    station_id: str = "90",
    name: str = "속초",
    height: str = "18m",
    rain_status: str = "○",
    rains=("0.0", "0.0", "0.0", "0.0", "0.0", "1.5"),
    temperature: str = "12.5",
    wind1=("225.3", "SW", "3.1"),
    wind10=("230.0", "SW", "2.8"),
    humidity: str = "65",
    atmospheric: str = "1013.2",
    address: str = "강원도 속초시",
):
    return [station_id, name, height, rain_status, *rains, temperature,
            *wind1, *wind10, humidity, atmospheric, address]


def row_html(cells) -> str:
    return "<tr>" + "".join(f"<td>{c}</td>" for c in cells) + "</tr>\n"


def page_html(rows, caption: str = "관측시각 2023.04.01.09:30") -> str:
    header = ["지점", "지점명", "고도"] + ["h"] * 17
    body = row_html(header) + "".join(rows)
    return f"""<html><body>
<span class="ehead">{caption}</span>
<table><tr><td>
<table>
{body}</table>
</td></tr></table>
</body></html>"""


@pytest.fixture
def sample_result() -> CrawlResult:
    return CrawlResult(
        observed_at="2023-04-01T09:30:00+0900",
        records=[
            Record(
                id=90,
                name="속초",
                height=18,
                rain=Rain(is_raining=RainStatus.RAIN, rain15=0.5, rain60=1.0, rainday=4.5),
                temperature=12.5,
                wind1=Wind(225.3, WindDirectionText.SW, 3.1),
                wind10=Wind(None, WindDirectionText.NO, None),
                humidity=65.0,
                atmospheric=None,
                address="강원도 속초시",
            ),
            Record(
                id=93,
                name="북춘천",
                height=None,
                rain=Rain(is_raining=RainStatus.UNKNOWN),
                temperature=-3.2,
                wind1=Wind(10.0, WindDirectionText.NNE, 7.4),
                wind10=Wind(12.0, WindDirectionText.NNE, 6.9),
                humidity=None,
                atmospheric=1008.1,
                address="강원도 춘천시",
            ),
        ],
    )
