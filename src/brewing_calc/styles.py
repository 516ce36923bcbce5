"""
Style comparison.

Places calculated values against a style's guideline ranges. The style
tables themselves are catalog data supplied by a CatalogSource.
"""

from brewing_calc.models import RecipeCalculations, StyleComparison, StyleSpec

BELOW = "below"
WITHIN = "within"
ABOVE = "above"


def has_any_range(spec: StyleSpec | None) -> bool:
    """True when the style publishes at least one range."""
    if spec is None:
        return False
    return any(
        r is not None for r in (spec.og, spec.fg, spec.abv, spec.ibu, spec.srm, spec.ebc)
    )


def range_status(value: float, low: float, high: float) -> str:
    if value < low:
        return BELOW
    if value > high:
        return ABOVE
    return WITHIN


def compare_to_style(
    calculations: RecipeCalculations,
    spec: StyleSpec,
) -> list[StyleComparison]:
    """
    Compare a recipe's calculated values with a style.

    Args:
        calculations: Calculated recipe values
        spec: Style guideline ranges

    Returns:
        One comparison per metric the style publishes, in the order
        OG, FG, ABV, IBU, SRM, EBC
    """
    metrics = (
        ("og", calculations.og, spec.og),
        ("fg", calculations.fg, spec.fg),
        ("abv", calculations.abv, spec.abv),
        ("ibu", calculations.ibu, spec.ibu),
        ("srm", calculations.srm, spec.srm),
        ("ebc", calculations.ebc, spec.ebc_range),
    )

    results = []
    for metric, value, bounds in metrics:
        if bounds is None:
            continue
        low, high = bounds
        results.append(
            StyleComparison(
                metric=metric,
                value=value,
                low=low,
                high=high,
                status=range_status(value, low, high),
            )
        )
    return results
