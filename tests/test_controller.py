import pytest

from econ_savings_charts.interaction import HIGHLIGHT, SCATTER, InteractionController
from econ_savings_charts.transformations.aggregates import YearAggregate
from econ_savings_charts.views import ViewState


class FakeScatter:
    def __init__(self, log):
        self.log = log

    def render(self, records, state):
        self.log.append(("scatter", state))
        return "scatter-geometry"


class FakeStacked:
    def __init__(self, log, years=()):
        self.log = log
        self.years = list(years)
        self.controller = None

    def highlight(self, year):
        self.log.append(("highlight", self.controller.state if self.controller else year))
        return year

    def years_in_extent(self, x0, x1):
        return [y for y in self.years if min(x0, x1) <= y <= max(x0, x1)]


@pytest.fixture
def wired():
    log = []
    stacked = FakeStacked(log, years=[2018, 2019, 2020])
    controller = InteractionController([], FakeScatter(log), stacked, ViewState(selected_year=2019))
    stacked.controller = controller
    return controller, log


def test_year_change_renders_scatter_then_highlight(wired):
    controller, log = wired

    called = controller.on_year_change(2020)

    assert called == [SCATTER, HIGHLIGHT]
    assert [name for name, _ in log] == ["scatter", "highlight"]
    # every render sees the already-updated state
    assert all(state.selected_year == 2020 for _, state in log)
    assert controller.state.selected_year == 2020
    assert controller.last_results[HIGHLIGHT] == 2020


def test_ppp_toggle_only_rerenders_scatter(wired):
    controller, log = wired

    assert controller.on_ppp_toggle(True) == [SCATTER]
    assert log[0][1].use_ppp is True
    assert controller.state.selected_year == 2019


def test_unchanged_values_render_nothing(wired):
    controller, log = wired

    assert controller.on_year_change(2019) == []
    assert controller.on_ppp_toggle(False) == []
    assert controller.on_year_range_change(None) == []
    assert log == []


def test_state_is_replaced_not_mutated(wired):
    controller, _ = wired
    before = controller.state

    controller.on_year_change(2020)

    assert before.selected_year == 2019
    assert controller.state is not before


def test_refresh_paints_everything_in_order(wired):
    controller, log = wired
    assert controller.refresh() == [SCATTER, HIGHLIGHT]
    assert [name for name, _ in log] == ["scatter", "highlight"]


def test_year_range_is_normalized_and_only_touches_scatter(wired):
    controller, log = wired

    assert controller.on_year_range_change((2020, 2018)) == [SCATTER]
    assert controller.state.year_range == (2018, 2020)
    assert controller.state.is_range_mode

    assert controller.on_year_range_change((2018, 2020)) == []
    assert controller.on_year_range_change(None) == [SCATTER]
    assert not controller.state.is_range_mode


def test_brush_selects_covered_years(wired):
    controller, _ = wired

    assert controller.on_brush(2018.5, 2020.5) == [SCATTER]
    assert controller.state.year_range == (2019, 2020)

    # a brush that covers no band clears the range
    assert controller.on_brush(0, 1) == [SCATTER]
    assert controller.state.year_range is None


def test_with_real_renderers(scatter, stacked, make_record):
    records = [make_record("AAA", 2019), make_record("AAA", 2020, gdp_pc=1500.0)]
    stacked.build([YearAggregate(2019, 1.0, 2.0), YearAggregate(2020, 2.0, 3.0)])
    controller = InteractionController(records, scatter, stacked, ViewState(selected_year=2019))
    controller.refresh()

    controller.on_year_change(2020)

    assert stacked.highlighted_year == 2020
    assert [c.key for c in scatter.target.layer("points")] == ["AAA"]
    assert scatter.geometry.point("AAA").x_value == 1500.0


def test_bubble_click_selects_and_clears(scatter, stacked, make_record):
    records = [make_record("AAA", 2020, gdp_pc=1000.0), make_record("BBB", 2020, gdp_pc=40000.0, growth=5.0)]
    stacked.build([YearAggregate(2020, 2.0, 3.0)])
    controller = InteractionController(records, scatter, stacked, ViewState(selected_year=2020))
    controller.refresh()
    target = scatter.geometry.point("BBB")

    assert controller.on_bubble_click(target.cx, target.cy) == [SCATTER]
    assert controller.state.selected_code == "BBB"
    assert scatter.geometry.point("BBB").selected
    assert not scatter.geometry.point("AAA").selected

    # clicking the same bubble again changes nothing
    assert controller.on_bubble_click(target.cx, target.cy) == []

    assert controller.on_bubble_click(-100, -100) == [SCATTER]
    assert controller.state.selected_code is None
    assert not scatter.geometry.point("BBB").selected
