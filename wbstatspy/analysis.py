"""Forest area calculations over joined indicator series."""

from typing import Dict, Iterable, List, Sequence, Union

from .models import ForestReport, IndicatorSeries, YearlyStat
from .units import Area, Percent, Number, as_area, as_percent


def compute_forest_area(area: Union[Area, Number],
                        forest: Union[Percent, Number]) -> Area:
    """
    Area covered by forest.

    Args:
        area: Surface area in km²
        forest: Forest share of that area in percent (0-100)

    Returns:
        Forest area in km², ``area * forest / 100``
    """
    return as_area(area).share(as_percent(forest))


def _has_data(region: str, years: Iterable[int],
              areas: IndicatorSeries, forests: IndicatorSeries) -> bool:
    return all(
        (year, region) in areas and (year, region) in forests
        for year in years
    )


def available_regions(areas: IndicatorSeries, forests: IndicatorSeries,
                      years: Sequence[int], regions: Iterable[str]) -> List[str]:
    """
    Regions with an area and a forest value for every one of ``years``.

    A region missing either value in a single year is left out entirely,
    so the same regions appear for all years.
    """
    return [region for region in regions if _has_data(region, years, areas, forests)]


def yearly_stats(years: Sequence[int], regions: Iterable[str],
                 areas: IndicatorSeries, forests: IndicatorSeries) -> Dict[int, YearlyStat]:
    """
    Forest area per year for the regions that have data for all years.

    Args:
        years: Years to compute
        regions: Region names in catalog order
        areas: Surface area series (km²)
        forests: Forest share series (percent)

    Returns:
        Mapping from year to YearlyStat, regions in catalog order
    """
    qualifying = available_regions(areas, forests, years, regions)

    stats = {}
    for year in years:
        values = [
            compute_forest_area(areas[year, region], forests[year, region])
            for region in qualifying
        ]
        stats[year] = YearlyStat(year=year, regions=list(qualifying), values=values)
    return stats


def build_forest_report(years: Sequence[int], regions: Iterable[str],
                        areas: IndicatorSeries, forests: IndicatorSeries) -> ForestReport:
    """Run the forest area calculation and bundle it with its inputs."""
    years = list(years)
    regions = list(regions)
    stats = yearly_stats(years, regions, areas, forests)

    return ForestReport(
        years=years,
        regions=available_regions(areas, forests, years, regions),
        stats=stats,
        areas=areas,
        forests=forests
    )
