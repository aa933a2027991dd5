"""Plotting of indicator data with matplotlib."""

from dataclasses import dataclass
from itertools import cycle
from typing import Callable, List, Optional, Sequence, Union

import numpy as np
import numexpr
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.text import Text

from .models import ForestReport
from .exceptions import InvalidParameterError

OUTPUT_TARGETS = ("window", "file", "none")
FILL_STYLES = ("solid", "empty", "pattern")

DEFAULT_COLORS = ["olivedrab", "steelblue", "goldenrod"]
HATCHES = ["//", "\\\\", "xx", "..", "++", "oo"]

# Constants usable in expression strings such as "sin(x) * exp(-x / pi)";
# functions (sin, exp, log10, sqrt, abs, ...) are the ones numexpr provides
EXPRESSION_CONSTANTS = {'pi': np.pi, 'e': np.e}


@dataclass
class Output:
    """Where plots go: an interactive window, a file or nowhere."""
    target: str = "window"
    filename: Optional[str] = None
    font: Optional[str] = None


@dataclass
class Style:
    """Fill style of histogram bars."""
    fill: str = "solid"


@dataclass
class RangeY:
    """Fixed y-axis range; None leaves that end automatic."""
    low: Optional[float] = None
    high: Optional[float] = None


@dataclass
class Titles:
    """Category labels of the x-axis."""
    x: Optional[List[str]] = None
    xrotate: float = 0


@dataclass
class LineSeries:
    data: List[float]
    title: Optional[str] = None
    line_color: Optional[str] = None


@dataclass
class HistogramSeries:
    data: List[float]
    title: Optional[str] = None
    line_color: Optional[str] = None


PlotItem = Union[str, Callable, LineSeries, HistogramSeries,
                 Sequence[Union[LineSeries, HistogramSeries]]]


class Plotter:
    """
    Small plotting front-end over matplotlib.

    Global settings are changed with ``set`` and apply to every later
    call to ``plot``. Each ``plot`` call draws one figure and sends it to
    the configured output.
    """

    def __init__(self, output: Optional[Output] = None,
                 x_range: Sequence[float] = (-10.0, 10.0),
                 samples: int = 500):
        self.output = Output()
        self.style = Style()
        self.range_y: Optional[RangeY] = None
        self.titles: Optional[Titles] = None
        self.x_range = tuple(x_range)
        self.samples = samples

        if output is not None:
            self.set(output=output)

    def set(self,
            output: Optional[Output] = None,
            style: Optional[Style] = None,
            range_y: Optional[RangeY] = None,
            titles: Optional[Titles] = None) -> None:
        """
        Change global display settings. Arguments left as None are kept.

        Args:
            output: Output target and font
            style: Fill style for histograms
            range_y: Fixed y-axis range
            titles: x-axis category labels and their rotation
        """
        if output is not None:
            if output.target not in OUTPUT_TARGETS:
                raise InvalidParameterError(
                    f"Invalid output target '{output.target}'. Must be one of: {OUTPUT_TARGETS}"
                )
            if output.target == "file" and not output.filename:
                raise InvalidParameterError("Output target 'file' requires a filename")
            self.output = output

        if style is not None:
            if style.fill not in FILL_STYLES:
                raise InvalidParameterError(
                    f"Invalid fill style '{style.fill}'. Must be one of: {FILL_STYLES}"
                )
            self.style = style

        if range_y is not None:
            if (range_y.low is not None and range_y.high is not None
                    and range_y.low >= range_y.high):
                raise InvalidParameterError("RangeY low must be below high")
            self.range_y = range_y

        if titles is not None:
            self.titles = titles

    def plot(self, item: PlotItem) -> Figure:
        """
        Draw a single figure.

        Args:
            item: An expression in x (e.g. "sin(x)") or a function of x,
                a LineSeries, a HistogramSeries, or a list of series.
                Several histograms are drawn as grouped bars.

        Returns:
            The matplotlib Figure
        """
        fig, ax = plt.subplots()

        if isinstance(item, str) or callable(item):
            try:
                self._plot_function(ax, item)
            except InvalidParameterError:
                plt.close(fig)
                raise
        elif isinstance(item, LineSeries):
            self._plot_lines(ax, [item])
        elif isinstance(item, HistogramSeries):
            self._plot_histograms(ax, [item])
        else:
            series = list(item)
            if not series:
                plt.close(fig)
                raise InvalidParameterError("Nothing to plot")
            if all(isinstance(s, HistogramSeries) for s in series):
                self._plot_histograms(ax, series)
            elif all(isinstance(s, LineSeries) for s in series):
                self._plot_lines(ax, series)
            else:
                plt.close(fig)
                raise InvalidParameterError("Cannot mix line and histogram series in one plot")

        self._apply_settings(fig, ax)
        self._render(fig)
        return fig

    def _plot_function(self, ax, function: Union[str, Callable]) -> None:
        x = np.linspace(self.x_range[0], self.x_range[1], self.samples)

        if isinstance(function, str):
            local_dict = dict(EXPRESSION_CONSTANTS, x=x)
            try:
                y = numexpr.evaluate(function, local_dict=local_dict, global_dict={},
                                     sanitize=True)
            except (KeyError, NotImplementedError, SyntaxError, TypeError, ValueError) as e:
                raise InvalidParameterError(f"Cannot evaluate expression '{function}': {e}")
            label = function
        else:
            y = function(x)
            label = getattr(function, '__name__', None)

        # Constant expressions evaluate to a scalar
        y = np.broadcast_to(np.asarray(y, dtype=float), x.shape)
        ax.plot(x, y, label=label)
        ax.legend()

    def _plot_lines(self, ax, series: List[LineSeries]) -> None:
        for s in series:
            ax.plot(range(len(s.data)), [float(v) for v in s.data],
                    label=s.title, color=s.line_color)

        if any(s.title for s in series):
            ax.legend()

    def _plot_histograms(self, ax, series: List[HistogramSeries]) -> None:
        groups = max(len(s.data) for s in series)
        positions = np.arange(groups)
        width = 0.8 / len(series)

        for i, s in enumerate(series):
            offsets = positions[:len(s.data)] + (i - (len(series) - 1) / 2) * width
            values = [float(v) for v in s.data]

            if self.style.fill == "solid":
                ax.bar(offsets, values, width, label=s.title, color=s.line_color)
            elif self.style.fill == "empty":
                ax.bar(offsets, values, width, label=s.title,
                       fill=False, edgecolor=s.line_color or "black")
            else:
                ax.bar(offsets, values, width, label=s.title, fill=False,
                       edgecolor=s.line_color or "black", hatch=HATCHES[i % len(HATCHES)])

        ax.set_xticks(positions)
        if any(s.title for s in series):
            ax.legend()

    def _apply_settings(self, fig: Figure, ax) -> None:
        if self.range_y is not None:
            ax.set_ylim(self.range_y.low, self.range_y.high)

        if self.titles is not None and self.titles.x:
            labels = list(self.titles.x)
            ax.set_xticks(np.arange(len(labels)))
            ax.set_xticklabels(labels, rotation=self.titles.xrotate)

        if self.output.font:
            for text in fig.findobj(Text):
                text.set_fontfamily(self.output.font)

        fig.tight_layout()

    def _render(self, fig: Figure) -> None:
        if self.output.target == "file":
            fig.savefig(self.output.filename)
            plt.close(fig)
        elif self.output.target == "window":
            plt.show()
        else:
            plt.close(fig)


def plot_forest_report(report: ForestReport,
                       plotter: Optional[Plotter] = None,
                       colors: Optional[Sequence[str]] = None,
                       range_y: Optional[RangeY] = None) -> Figure:
    """
    Plot the forest area of every qualifying region, one histogram per year.

    Args:
        report: Output of the forest area calculation
        plotter: Plotter to draw with. By default a new Plotter is used,
            which shows the figure in a window and blocks until it is closed.
        colors: Bar colors assigned to the years in order; reused cyclically
        range_y: Optional fixed y-axis range

    Returns:
        The matplotlib Figure
    """
    plotter = plotter or Plotter()
    plotter.set(
        style=Style("solid"),
        range_y=range_y,
        titles=Titles(x=report.regions, xrotate=-90)
    )

    series = [
        HistogramSeries(
            data=report.stats[year].as_floats(),
            title=str(year),
            line_color=color
        )
        for year, color in zip(report.years, cycle(colors or DEFAULT_COLORS))
    ]
    return plotter.plot(series)
