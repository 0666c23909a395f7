import plotly.graph_objects as go

from budgetify import visualization as viz
from budgetify.investments import project_growth


def test_empty_inputs_return_placeholder() -> None:
    for builder in (viz.create_category_pie_chart, viz.create_monthly_bar_chart, viz.create_projection_chart):
        fig = builder([])
        assert isinstance(fig, go.Figure)
        assert fig.layout.title.text == "No data to display"


def test_category_pie_chart() -> None:
    fig = viz.create_category_pie_chart([{'name': 'Food', 'value': 2000.0}, {'name': 'Rent', 'value': 900.0}])
    assert fig.data[0].type == 'pie'
    assert list(fig.data[0].labels) == ['Food', 'Rent']


def test_monthly_bar_chart() -> None:
    rows = [{'month': 'Jan 2024', 'income': 10.0, 'expenses': 4.0, 'savings': 6.0}]
    fig = viz.create_monthly_bar_chart(rows)
    assert [trace.name for trace in fig.data] == ['Income', 'Expenses']


def test_projection_chart() -> None:
    fig = viz.create_projection_chart(project_growth(1000, [], start='2024-01-01'))
    assert len(fig.data[0].x) == 24
    assert fig.layout.title.text == "Portfolio projection"
