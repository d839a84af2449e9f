"""
Tests for TimeSeries — container, search, transforms, statistics, export

Scenario series (monthly):
    2016-08-31 1.23, 2016-09-30 1.27, 2016-10-31 1.24, 2016-11-30 1.31
"""

import json
import math
from datetime import date, datetime, timedelta

import pytest
from jsonschema import ValidationError as ContractError
from pydantic import ValidationError

from finseries.core.domain.records import RawSeriesRecord
from finseries.core.domain.sample import TimeSeriesItem, TimestampFormatError
from finseries.core.domain.series import MonthRow, Portfolio, SeriesPoint, TimeSeries
from finseries.core.settings import SeriesSettings


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def scenario():
    return TimeSeries(
        [
            TimeSeriesItem(date(2016, 8, 31), 1.23),
            TimeSeriesItem(date(2016, 9, 30), 1.27),
            TimeSeriesItem(date(2016, 10, 31), 1.24),
            TimeSeriesItem(date(2016, 11, 30), 1.31),
        ],
        name="SPX",
    )


def weekly_series(n: int, settings: SeriesSettings = SeriesSettings()) -> TimeSeries:
    start = date(2016, 1, 4)
    return TimeSeries(
        [TimeSeriesItem(start + timedelta(weeks=k), float(k)) for k in range(n)],
        settings=settings,
    )


def series_of(values, start=date(2016, 1, 1)) -> TimeSeries:
    return TimeSeries([TimeSeriesItem(start + timedelta(days=k), v) for k, v in enumerate(values)])


def same_values(actual, expected) -> bool:
    """Element-wise equality treating NaN == NaN."""
    if len(actual) != len(expected):
        return False
    return all(
        (math.isnan(a) and math.isnan(e)) or a == pytest.approx(e) for a, e in zip(actual, expected)
    )


# =============================================================================
# CONSTRUCTION
# =============================================================================


class TestConstruction:
    def test_defaults(self):
        ts = TimeSeries()
        assert ts.count == 0
        assert ts.name is None
        assert ts.start is None and ts.end is None
        assert math.isnan(ts.start_value) and math.isnan(ts.end_value)

    def test_accessors(self, scenario):
        assert scenario.count == len(scenario) == 4
        assert scenario.values == [1.23, 1.27, 1.24, 1.31]
        assert scenario.timestamps[0] == date(2016, 8, 31)
        assert scenario.start == date(2016, 8, 31)
        assert scenario.end == date(2016, 11, 30)
        assert scenario.start_value == 1.23
        assert scenario.end_value == 1.31

    def test_from_record(self):
        record = RawSeriesRecord(
            key="rates", timestamps=["2016-08-31T00:00:00.000Z", "2016-09-30"], values=[0.5, None]
        )
        ts = TimeSeries.from_record(record)

        assert ts.name == "rates"
        assert ts.timestamps == [date(2016, 8, 31), date(2016, 9, 30)]
        assert ts.values[0] == 0.5
        assert math.isnan(ts.values[1])

    def test_from_record_malformed_timestamp(self):
        record = RawSeriesRecord(timestamps=["31/08/2016"], values=[1.0])
        with pytest.raises(TimestampFormatError):
            TimeSeries.from_record(record)

    def test_from_json(self):
        text = json.dumps({"key": "x", "timestamps": ["2016-08-31", "2016-09-30"], "values": [1, 2]})
        ts = TimeSeries.from_json(text)
        assert ts.name == "x"
        assert ts.values == [1.0, 2.0]

    def test_from_json_contract_violation(self):
        with pytest.raises(ContractError):
            TimeSeries.from_json(json.dumps({"timestamps": ["2016-08-31"]}))

    def test_from_json_length_mismatch(self):
        text = json.dumps({"timestamps": ["2016-08-31"], "values": [1, 2]})
        with pytest.raises(ValidationError):
            TimeSeries.from_json(text)

    def test_from_json_bad_timestamp(self):
        with pytest.raises(TimestampFormatError):
            TimeSeries.from_json(json.dumps({"timestamps": ["2016/08/31"], "values": [1]}))

    def test_clone_is_deep(self, scenario):
        copy = scenario.clone()
        copy.items[0].value = 99.0
        copy.items.append(TimeSeriesItem(date(2016, 12, 30), 1.0))

        assert scenario.values[0] == 1.23
        assert scenario.count == 4
        assert copy.name == "SPX"
        assert copy.value_format is scenario.value_format

    def test_clone_items(self, scenario):
        items = scenario.clone_items()
        assert items == scenario.items
        assert all(a is not b for a, b in zip(items, scenario.items))

    def test_assign(self, scenario):
        fmt = lambda v: f"{v:.4f}"
        result = scenario.assign("new", [], str, fmt)
        assert result is scenario
        assert scenario.name == "new"
        assert scenario.count == 0
        assert scenario.value_format is fmt

    def test_range_inclusive(self, scenario):
        ts = scenario.range(date(2016, 9, 30), date(2016, 10, 31))
        assert ts.values == [1.27, 1.24]
        assert ts.name == "SPX"
        ts.items[0].value = 0.0
        assert scenario.values[1] == 1.27

    def test_sort(self):
        ts = TimeSeries(
            [TimeSeriesItem(date(2016, 1, 3), 3.0), TimeSeriesItem(date(2016, 1, 1), 1.0)]
        )
        assert ts.sort() is ts
        assert ts.values == [1.0, 3.0]


# =============================================================================
# SEARCH
# =============================================================================


class TestIndexOf:
    @pytest.mark.parametrize("n", [1, 2, 3, 21, 50])
    def test_own_timestamps(self, n):
        ts = weekly_series(n)
        for k, item in enumerate(ts.items):
            assert ts.index_of(item.timestamp) == k

    @pytest.mark.parametrize("n", [1, 2, 3, 21, 50])
    def test_between_samples(self, n):
        ts = weekly_series(n)
        for k, item in enumerate(ts.items[:-1]):
            assert ts.index_of(item.timestamp + timedelta(days=3)) == k

    @pytest.mark.parametrize("n", [1, 2, 3, 21])
    def test_bounds(self, n):
        ts = weekly_series(n)
        assert ts.index_of(ts.start - timedelta(days=1)) == -1
        assert ts.index_of(ts.end) == n - 1
        assert ts.index_of(ts.end + timedelta(days=100)) == n - 1

    def test_empty(self):
        assert TimeSeries().index_of(date(2016, 1, 1)) == -1

    def test_binary_and_linear_agree(self):
        linear = weekly_series(15)
        binary = weekly_series(15, SeriesSettings(binary_search_threshold=0))
        t = linear.start
        while t <= linear.end + timedelta(days=7):
            assert linear.index_of(t) == binary.index_of(t)
            t += timedelta(days=1)

    def test_duplicates_resolve_to_later_index(self):
        d = date(2016, 1, 5)
        ts = TimeSeries(
            [
                TimeSeriesItem(date(2016, 1, 1), 1.0),
                TimeSeriesItem(d, 2.0),
                TimeSeriesItem(d, 3.0),
                TimeSeriesItem(date(2016, 1, 9), 4.0),
            ]
        )
        assert ts.index_of(d) == 2
        assert ts.latest_value(d) == 3.0


class TestLatestValue:
    def test_value_at_or_before(self, scenario):
        assert scenario.latest_value(date(2016, 10, 15)) == 1.27
        assert scenario.latest_value(date(2016, 10, 31)) == 1.24
        assert scenario.latest_value(date(2017, 1, 1)) == 1.31

    def test_before_start_is_nan(self, scenario):
        assert math.isnan(scenario.latest_value(date(2016, 1, 1)))


class TestDatetimeArguments:
    """Time of day is dropped from lookup and slicing arguments."""

    def test_index_of(self, scenario):
        assert scenario.index_of(datetime(2016, 9, 30, 12, 0)) == 1
        assert scenario.index_of(datetime(2016, 8, 30, 23, 59)) == -1

    def test_index_of_binary_search(self):
        ts = weekly_series(30)
        assert ts.index_of(datetime.combine(ts.timestamps[17], datetime.min.time())) == 17

    def test_latest_value(self, scenario):
        assert scenario.latest_value(datetime(2016, 10, 31, 9, 30)) == 1.24

    def test_range(self, scenario):
        ts = scenario.range(datetime(2016, 9, 1), datetime(2016, 10, 31, 12, 0))
        assert ts.values == [1.27, 1.24]


class TestPeriodicity:
    def test_monthly(self, scenario):
        assert scenario.periodicity == 12

    def test_weekly(self):
        assert weekly_series(10).periodicity == 52

    def test_daily(self):
        assert series_of([1.0] * 30).periodicity == 252

    def test_undefined(self):
        assert series_of([1.0]).periodicity == 0
        same_day = TimeSeries([TimeSeriesItem(date(2016, 1, 1), 1.0)] * 3)
        assert same_day.periodicity == 0


# =============================================================================
# VALUE TRANSFORMS
# =============================================================================


class TestValueTransforms:
    def test_log(self):
        ts = series_of([math.e, 0.0, -1.0, math.nan])
        assert ts.log() is ts
        assert same_values(ts.values, [1.0, math.nan, math.nan, math.nan])

    def test_exp(self):
        assert same_values(series_of([0.0, 1.0, math.nan]).exp().values, [1.0, math.e, math.nan])

    def test_add(self):
        assert series_of([1.0, 2.0]).add(0.5).values == [1.5, 2.5]

    def test_mult_leaves_non_finite(self):
        ts = series_of([2.0, math.inf, math.nan]).mult(3.0)
        assert ts.values[:2] == [6.0, math.inf]
        assert math.isnan(ts.values[2])

    def test_neg(self):
        # -inf would result from a plain multiplication
        assert series_of([1.0, math.inf]).neg().values == [-1.0, math.inf]

    def test_inverse_leaves_zero_and_non_finite(self):
        ts = series_of([2.0, 0.0, math.inf, -4.0]).inverse()
        assert ts.values == [0.5, 0.0, math.inf, -0.25]

    def test_chaining(self):
        assert series_of([1.0, 2.0]).mult(2.0).add(1.0).neg().values == [-3.0, -5.0]


class TestPairwiseTransforms:
    def test_returns_scenario(self, scenario):
        result = scenario.returns()

        assert result is scenario
        assert result.timestamps == [date(2016, 9, 30), date(2016, 10, 31), date(2016, 11, 30)]
        assert result.values == pytest.approx([0.0325, -0.0236, 0.0565], abs=1e-4)

    def test_diff(self, scenario):
        assert scenario.diff().values == pytest.approx([0.04, -0.03, 0.07])

    def test_log_returns(self, scenario):
        assert scenario.log_returns().values == pytest.approx(
            [math.log(1.27 / 1.23), math.log(1.24 / 1.27), math.log(1.31 / 1.24)]
        )

    def test_uses_raw_previous_value(self):
        assert series_of([1.0, 2.0, 4.0, 8.0]).returns().values == pytest.approx([1.0, 1.0, 1.0])

    @pytest.mark.parametrize("operation", ["diff", "returns", "log_returns"])
    @pytest.mark.parametrize("values", [[], [5.0]])
    def test_short_series_unchanged(self, operation, values):
        ts = series_of(values)
        result = getattr(ts, operation)()
        assert result is ts
        assert ts.values == values

    def test_nan_handling(self):
        ts = series_of([1.0, math.nan, 2.0, 0.0, 1.0]).returns()
        assert same_values(ts.values, [math.nan, math.nan, -1.0, math.nan])


class TestCumulativeTransforms:
    def test_cum_sum(self):
        assert series_of([1.0, 2.0, 3.0]).cum_sum().values == [1.0, 3.0, 6.0]

    def test_cum_prod(self):
        assert series_of([1.0, 2.0, 3.0]).cum_prod().values == [1.0, 2.0, 6.0]

    @pytest.mark.parametrize("operation", ["cum_sum", "cum_prod"])
    def test_nan_poisons_rest(self, operation):
        ts = getattr(series_of([1.0, 2.0, math.nan, 3.0]), operation)()
        assert not math.isnan(ts.values[1])
        assert all(math.isnan(v) for v in ts.values[2:])

    def test_returns_then_cum_prod_rebuilds_growth(self, scenario):
        growth = scenario.returns().add(1.0).cum_prod()
        assert growth.end_value == pytest.approx(1.31 / 1.23)


# =============================================================================
# COPY-PRODUCING TRANSFORMS
# =============================================================================


class TestEndOfMonth:
    def test_keeps_last_per_month_and_first(self):
        ts = TimeSeries(
            [
                TimeSeriesItem(date(2016, 1, 4), 1.0),
                TimeSeriesItem(date(2016, 1, 15), 2.0),
                TimeSeriesItem(date(2016, 1, 29), 3.0),
                TimeSeriesItem(date(2016, 2, 10), 4.0),
                TimeSeriesItem(date(2016, 2, 26), 5.0),
            ],
            name="m",
        )
        eom = ts.end_of_month()

        assert eom is not ts
        assert eom.timestamps == [date(2016, 1, 4), date(2016, 1, 29), date(2016, 2, 26)]
        assert eom.values == [1.0, 3.0, 5.0]
        assert eom.name == "m"
        assert ts.count == 5

    def test_first_not_duplicated(self, scenario):
        assert scenario.end_of_month().values == scenario.values

    def test_sorted_output(self):
        ts = TimeSeries(
            [
                TimeSeriesItem(date(2016, 3, 5), 3.0),
                TimeSeriesItem(date(2016, 1, 5), 1.0),
            ]
        )
        assert ts.end_of_month().timestamps == [date(2016, 1, 5), date(2016, 3, 5)]

    def test_empty(self):
        assert TimeSeries().end_of_month().count == 0


class TestSmoother:
    def test_single_pass(self):
        ts = series_of([1.0, 2.0, 10.0, 4.0, 6.0])
        smoothed = ts.smoother()

        assert smoothed.values == [1.0, 2.0, 3.0, 4.5, 6.0]
        assert ts.values == [1.0, 2.0, 10.0, 4.0, 6.0]

    def test_first_two_and_last_untouched(self):
        values = [5.0, -3.0, 8.0, 1.0, 7.0, 2.0]
        smoothed = series_of(values).smoother(3).values
        assert smoothed[:2] == values[:2]
        assert smoothed[-1] == values[-1]

    def test_zero_period_copies(self):
        ts = series_of([1.0, 9.0, 1.0, 9.0])
        smoothed = ts.smoother(0)
        assert smoothed is not ts
        assert smoothed.values == ts.values

    def test_short_series(self):
        assert series_of([1.0, 2.0, 3.0]).smoother(5).values == [1.0, 2.0, 3.0]

    def test_negative_period(self):
        with pytest.raises(ValueError, match="period"):
            series_of([1.0]).smoother(-1)


class TestMaxDrawdown:
    def test_peak_and_trough(self, scenario):
        result = scenario.max_drawdown()

        assert result.name == "SPX"
        assert result.count == 2
        peak, trough = result.items
        assert (peak.timestamp, peak.value) == (date(2016, 9, 30), 1.27)
        assert (trough.timestamp, trough.value) == (date(2016, 10, 31), 1.24)
        assert trough.value / peak.value - 1.0 == pytest.approx(-0.024, abs=1e-3)

    def test_copies_samples(self, scenario):
        result = scenario.max_drawdown()
        result.items[0].value = 0.0
        assert scenario.values[1] == 1.27

    def test_full_series(self, scenario):
        result = scenario.max_drawdown(full_series=True)
        assert result.timestamps == scenario.timestamps
        assert result.values == pytest.approx([0.0, 0.0, 1.24 / 1.27 - 1.0, 0.0])

    def test_no_decline_returns_first_sample_twice(self):
        ts = series_of([1.0, 2.0, 3.0])
        result = ts.max_drawdown()
        assert [item.timestamp for item in result.items] == [ts.start, ts.start]
        assert result.values == [1.0, 1.0]

    def test_decline_from_zero(self):
        ts = series_of([0.0, -1.0, -0.5])
        result = ts.max_drawdown()

        assert result.timestamps == ts.timestamps[:2]
        assert result.values == [0.0, -1.0]
        assert ts.max_drawdown(full_series=True).values[1] == -math.inf

    def test_empty(self):
        result = TimeSeries(name="e").max_drawdown()
        assert result.count == 0
        assert result.name == "e"


# =============================================================================
# STATISTICS
# =============================================================================


class TestStatistics:
    def test_average_annual_return(self, scenario):
        assert scenario.average_annual_return() == pytest.approx((1.31 / 1.23) ** 4 - 1.0)

    def test_average_annual_return_short(self):
        assert series_of([1.0]).average_annual_return() == 0.0

    def test_central_weighted_stdev(self):
        assert math.isnan(TimeSeries().central_weighted_stdev())
        assert series_of([3.0] * 5).central_weighted_stdev() == pytest.approx(0.0, abs=1e-9)


# =============================================================================
# VALUATION AND COMBINATION
# =============================================================================


class TestBondTotalReturn:
    def test_flat_curve(self):
        rates = TimeSeries(
            [
                TimeSeriesItem(date(2020, 1, 1), 0.03),
                TimeSeriesItem(date(2021, 1, 1), 0.03),
            ],
            name="10y",
        )
        result = TimeSeries.bond_total_return(rates, 10, True)

        assert result is not rates
        assert result.name == "10y"
        assert result.timestamps == rates.timestamps
        assert result.values == pytest.approx([1.0, 1.03 ** (366 / 365.25)])
        assert rates.values == [0.03, 0.03]

    def test_empty(self):
        assert TimeSeries.bond_total_return(TimeSeries(name="x"), 10, True).count == 0

    def test_negative_maturity(self):
        rates = series_of([0.01, 0.02])
        with pytest.raises(ValueError):
            TimeSeries.bond_total_return(rates, -1, False)


class TestWeightedTimeSeries:
    def test_weighted_sum(self):
        a = series_of([1.0, 2.0])
        b = series_of([10.0, 20.0], start=date(2017, 1, 1))
        result = TimeSeries.weighted_time_series([0.5, 0.1], [a, b])

        assert result.timestamps == a.timestamps
        assert result.values == pytest.approx([1.5, 3.0])

    def test_empty_input(self):
        assert TimeSeries.weighted_time_series([], []).count == 0

    def test_weight_count_mismatch(self):
        with pytest.raises(ValueError, match="weights"):
            TimeSeries.weighted_time_series([1.0], [series_of([1.0]), series_of([2.0])])

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="equal length"):
            TimeSeries.weighted_time_series([1.0, 1.0], [series_of([1.0]), series_of([1.0, 2.0])])


# =============================================================================
# EXPORT
# =============================================================================


class TestExport:
    def test_str_dump(self, scenario):
        assert str(scenario) == (
            "SPX\n"
            "2016-08-31 = 1.23\n"
            "2016-09-30 = 1.27\n"
            "2016-10-31 = 1.24\n"
            "2016-11-30 = 1.31"
        )

    def test_str_without_name(self):
        assert str(series_of([1.0])) == "2016-01-01 = 1.00"

    def test_custom_formatters(self, scenario):
        scenario.timestamp_format = lambda d: d.strftime("%d.%m.%Y")
        scenario.value_format = lambda v: f"{v:.3f}"
        assert str(scenario).splitlines()[1] == "31.08.2016 = 1.230"

    def test_value_decimals_setting(self):
        ts = TimeSeries(
            [TimeSeriesItem(date(2016, 1, 1), 1.0)], settings=SeriesSettings(value_decimals=4)
        )
        assert str(ts) == "2016-01-01 = 1.0000"

    def test_to_points(self, scenario):
        points = scenario.to_points()
        assert len(points) == 4
        assert points[0] == SeriesPoint(date(2016, 8, 31), 1.23, "2016-08-31", "1.23")

    def test_month_table(self, scenario):
        table = scenario.month_table()

        assert len(table) == 1
        row = table[0]
        assert isinstance(row, MonthRow)
        assert row.year == 2016
        assert row.values[7:11] == [1.23, 1.27, 1.24, 1.31]
        assert all(math.isnan(v) for v in row.values[:7] + row.values[11:])

    def test_month_table_years_and_last_in_month(self):
        ts = TimeSeries(
            [
                TimeSeriesItem(date(2016, 12, 1), 1.0),
                TimeSeriesItem(date(2016, 12, 30), 2.0),
                TimeSeriesItem(date(2017, 1, 31), 3.0),
            ]
        )
        table = ts.month_table()
        assert [row.year for row in table] == [2016, 2017]
        assert table[0].values[11] == 2.0
        assert table[1].values[0] == 3.0


class TestPortfolio:
    def test_container(self, scenario):
        benchmark = scenario.clone()
        risk_free = series_of([0.01])
        portfolio = Portfolio(scenario, benchmark, risk_free)

        assert portfolio.time_series is scenario
        assert portfolio.benchmark_time_series is benchmark
        assert portfolio.risk_free_time_series is risk_free

    def test_frozen(self, scenario):
        portfolio = Portfolio(scenario, scenario, scenario)
        with pytest.raises(AttributeError):
            portfolio.time_series = TimeSeries()
