"""
Normalisation of raw catalog entries into canonical presets.

Preset data arrives in several shapes: extract potential as GU, PPG,
specific gravity or a yield fraction; colour as Lovibond, SRM or EBC;
hop flavor keys in camel or snake case with legacy names. Each function
here coalesces the accepted spellings field by field into one model so
the calculation code only ever sees the canonical form.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from brewing_calc.exceptions import NormalisationError
from brewing_calc.models import (
    FermentablePreset,
    FermentableType,
    HopFlavor,
    HopPreset,
    StyleSpec,
    YeastPreset,
)
from brewing_calc.units import ebc_to_srm, ppg_to_gu, srm_to_lovibond, yield_to_gu

# canonical axis -> accepted source keys, in priority order
HOP_FLAVOR_KEYS: dict[str, tuple[str, ...]] = {
    "citrus": ("citrus",),
    "tropical_fruit": ("tropical_fruit", "tropicalFruit", "fruity"),
    "stone_fruit": ("stone_fruit", "stoneFruit"),
    "berry": ("berry",),
    "floral": ("floral",),
    "grassy": ("grassy", "earthy"),
    "herbal": ("herbal",),
    "spice": ("spice", "spicy"),
    "resin_pine": ("resin_pine", "resinPine", "piney"),
}

_FERMENTABLE_TYPE_ALIASES: dict[str, FermentableType] = {
    "grain": FermentableType.GRAIN,
    "base": FermentableType.GRAIN,
    "specialty": FermentableType.GRAIN,
    "adjunct": FermentableType.ADJUNCT_MASHABLE,
    "adjunct_mashable": FermentableType.ADJUNCT_MASHABLE,
    "extract": FermentableType.EXTRACT,
    "dry_extract": FermentableType.EXTRACT,
    "liquid_extract": FermentableType.EXTRACT,
    "sugar": FermentableType.SUGAR,
}


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key present with a non-None value."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _number(value: Any, field: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise NormalisationError(f"{field} must be a number, got {value!r}") from e


def _name(raw: Mapping[str, Any]) -> str:
    name = _first(raw, "name")
    if not isinstance(name, str) or not name.strip():
        raise NormalisationError(f"Catalog entry has no name: {dict(raw)!r}")
    return name.strip()


def potential_to_gu(raw: Mapping[str, Any]) -> float:
    """
    Extract potential in GU·L/kg from whichever field is present.

    Accepts ``potential_gu`` (already canonical), ``ppg``/``potentialGu``
    (points per pound per gallon), ``potential`` (specific gravity such as
    1.037, or PPG when above 2) and ``yield`` (fraction, or percent when
    above 1).

    Raises:
        NormalisationError: If no potential field is present or parseable
    """
    if raw.get("potential_gu") is not None:
        return _number(raw["potential_gu"], "potential_gu")

    ppg = _first(raw, "ppg", "potentialGu")
    if ppg is not None:
        return ppg_to_gu(_number(ppg, "ppg"))

    potential = raw.get("potential")
    if potential is not None:
        value = _number(potential, "potential")
        points = (value - 1.0) * 1000.0 if value < 2.0 else value
        return ppg_to_gu(points)

    yield_value = _first(raw, "yield", "yield_percent", "yieldPercent")
    if yield_value is not None:
        fraction = _number(yield_value, "yield")
        if fraction > 1.0:
            fraction /= 100.0
        return yield_to_gu(fraction)

    raise NormalisationError(f"No extract potential for {raw.get('name')!r}")


def color_to_lovibond(raw: Mapping[str, Any]) -> float:
    """Colour in °L from Lovibond, SRM or EBC fields; 0 when absent."""
    lovibond = _first(raw, "color_lovibond", "colorLovibond", "lovibond", "color")
    if lovibond is not None:
        return _number(lovibond, "color_lovibond")

    srm = _first(raw, "color_srm", "colorSrm", "srm")
    if srm is not None:
        return max(0.0, srm_to_lovibond(_number(srm, "color_srm")))

    ebc = _first(raw, "color_ebc", "colorEbc", "ebc")
    if ebc is not None:
        return max(0.0, srm_to_lovibond(ebc_to_srm(_number(ebc, "color_ebc"))))

    return 0.0


def fermentable_type(raw: Mapping[str, Any]) -> FermentableType:
    value = _first(raw, "type", "fermentable_type", "fermentableType")
    if value is None:
        return FermentableType.GRAIN
    key = str(value).strip().lower().replace(" ", "_").replace("-", "_")
    try:
        return _FERMENTABLE_TYPE_ALIASES[key]
    except KeyError as e:
        raise NormalisationError(f"Unknown fermentable type: {value!r}") from e


def normalise_fermentable(raw: Mapping[str, Any]) -> FermentablePreset:
    """
    Build a FermentablePreset from a raw catalog mapping.

    Raises:
        NormalisationError: If the entry cannot be interpreted
    """
    try:
        return FermentablePreset(
            name=_name(raw),
            color_lovibond=color_to_lovibond(raw),
            potential_gu=potential_to_gu(raw),
            type=fermentable_type(raw),
            origin_code=_first(raw, "origin_code", "originCode", "origin"),
            fermentability=_first(raw, "fermentability"),
        )
    except ValidationError as e:
        raise NormalisationError(f"Invalid fermentable {raw.get('name')!r}: {e}") from e


def normalise_hop_flavor(raw: Mapping[str, Any] | None) -> HopFlavor:
    """
    Map any accepted flavor key spelling onto the nine canonical axes.

    Missing axes default to 0.
    """
    if not raw:
        return HopFlavor()
    values = {}
    for axis, keys in HOP_FLAVOR_KEYS.items():
        value = _first(raw, *keys)
        values[axis] = _number(value, axis) if value is not None else 0.0
    try:
        return HopFlavor(**values)
    except ValidationError as e:
        raise NormalisationError(f"Invalid hop flavor: {e}") from e


def normalise_hop(raw: Mapping[str, Any]) -> HopPreset:
    """
    Build a HopPreset from a raw catalog mapping.

    Raises:
        NormalisationError: If the entry cannot be interpreted
    """
    alpha = _first(raw, "alpha_acid", "alphaAcidPercent", "alpha_acid_percent", "alpha")
    flavor = raw.get("flavor")
    try:
        return HopPreset(
            name=_name(raw),
            alpha_acid=_number(alpha, "alpha_acid") if alpha is not None else 0.0,
            category=_first(raw, "category"),
            flavor=normalise_hop_flavor(flavor) if flavor else None,
            notes=_first(raw, "notes"),
        )
    except ValidationError as e:
        raise NormalisationError(f"Invalid hop {raw.get('name')!r}: {e}") from e


def normalise_yeast(raw: Mapping[str, Any]) -> YeastPreset:
    """
    Build a YeastPreset from a raw catalog mapping.

    Attenuation may be a fraction (0.77) or a percent (77).

    Raises:
        NormalisationError: If the entry cannot be interpreted
    """
    value = _first(raw, "attenuation", "attenuationPercent", "attenuation_percent")
    attenuation = None
    if value is not None:
        attenuation = _number(value, "attenuation")
        if attenuation > 1.0:
            attenuation /= 100.0
    try:
        return YeastPreset(
            name=_name(raw),
            attenuation=attenuation,
            laboratory=_first(raw, "laboratory", "lab", "category"),
        )
    except ValidationError as e:
        raise NormalisationError(f"Invalid yeast {raw.get('name')!r}: {e}") from e


def normalise_style(raw: Mapping[str, Any]) -> StyleSpec:
    """
    Build a StyleSpec from a raw guideline mapping.

    Raises:
        NormalisationError: If the entry has no code or a malformed range
    """
    code = _first(raw, "code")
    if not code:
        raise NormalisationError(f"Style entry has no code: {dict(raw)!r}")
    try:
        return StyleSpec(
            code=str(code),
            name=_first(raw, "name"),
            og=raw.get("og"),
            fg=raw.get("fg"),
            abv=raw.get("abv"),
            ibu=raw.get("ibu"),
            srm=raw.get("srm"),
            ebc=raw.get("ebc"),
        )
    except ValidationError as e:
        raise NormalisationError(f"Invalid style {code!r}: {e}") from e
