"""Tests for the tabular summary of stored results."""

import pytest

from analysis.analyzer import StationAnalyzer, records_to_frame
from database.models import CrawlResult
from database.result_writer import ResultWriter


@pytest.fixture
def analyzer(tmp_path, sample_result):
    writer = ResultWriter(tmp_path)
    writer.publish(sample_result)
    return StationAnalyzer(writer)


class TestRecordsToFrame:
    def test_flattens_nested_fields(self, sample_result):
        df = records_to_frame(sample_result)
        assert len(df) == 2
        assert list(df["id"]) == [90, 93]
        assert df.loc[0, "is_raining"] == "Rain"
        assert df.loc[0, "rain_rainday"] == 4.5
        assert df.loc[1, "wind10_direction_text"] == "NNE"
        assert str(df.loc[0, "observed_at"]) == "2023-04-01 09:30:00+09:00"

    def test_empty(self):
        assert records_to_frame(CrawlResult(observed_at="2023-04-01T09:30:00+0900")).empty


class TestStationAnalyzer:
    def test_summarize(self, analyzer):
        s = analyzer.summarize()
        assert s["stations"] == 2
        assert s["raining_stations"] == 1
        assert s["temperature_mean"] == pytest.approx(4.65)
        assert s["temperature_max"] == 12.5
        assert s["strongest_wind_station"] == "북춘천"
        assert s["strongest_wind_velocity"] == 6.9

    def test_summarize_empty(self, tmp_path):
        writer = ResultWriter(tmp_path)
        writer.publish(CrawlResult(observed_at="2023-04-01T09:30:00+0900"))
        assert StationAnalyzer(writer).summarize()["stations"] == 0

    def test_top_stations(self, analyzer):
        top = analyzer.top_stations("temperature", n=1)
        assert list(top["name"]) == ["속초"]

    def test_top_stations_skips_absent(self, analyzer):
        top = analyzer.top_stations("atmospheric")
        assert list(top["id"]) == [93]

    def test_top_stations_unknown_variable(self, analyzer):
        with pytest.raises(ValueError):
            analyzer.top_stations("snow")

    def test_report(self, analyzer):
        report = analyzer.generate_summary_report()
        assert "Stations: 2" in report
        assert "북춘천" in report
