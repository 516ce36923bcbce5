"""
Catalog provider for fermentable, hop, yeast and style presets.

A CatalogProvider is built over a CatalogSource and an optional source of
user custom presets. Normalised presets are memoised on first use and
custom entries override generated ones with the same name; call
``invalidate()`` after either source changes. The provider is handed to
whatever needs preset data rather than living as module state.
"""

import logging
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, TypeVar

from brewing_calc.exceptions import CatalogError, NormalisationError
from brewing_calc.matching import DEFAULT_THRESHOLD, match_objects, normalise_ingredient_name
from brewing_calc.models import (
    Fermentable,
    FermentablePreset,
    FermentableType,
    Hop,
    HopFlavor,
    HopPreset,
    HopUse,
    StyleSpec,
    Yeast,
    YeastPreset,
)
from brewing_calc.normalise import (
    normalise_fermentable,
    normalise_hop,
    normalise_style,
    normalise_yeast,
)
from brewing_calc.protocols import CatalogSource, RawEntry
from brewing_calc.styles import has_any_range

logger = logging.getLogger(__name__)

P = TypeVar("P")

DEFAULT_YEAST_ATTENUATION = 0.75


class FermentableGroup(str, Enum):
    """Display groups for fermentable presets, in display order."""

    BASE = "Base malts"
    CRYSTAL = "Crystal/Caramel"
    ROASTED = "Roasted"
    SPECIALTY = "Toasted & specialty"
    ADJUNCT = "Adjuncts (mashable/flaked)"
    EXTRACT = "Extracts"
    SUGAR = "Sugars"
    OTHER = "Lauter aids & other"


def categorize_fermentable(preset: FermentablePreset) -> FermentableGroup:
    """Assign a fermentable preset to a display group by type, name and colour."""
    name = preset.name.lower()
    color = preset.color_lovibond

    if preset.type == FermentableType.EXTRACT:
        return FermentableGroup.EXTRACT
    if preset.type == FermentableType.SUGAR:
        return FermentableGroup.SUGAR
    if "rice hull" in name:
        return FermentableGroup.OTHER
    if preset.type == FermentableType.ADJUNCT_MASHABLE or "flaked" in name or "torrified" in name:
        return FermentableGroup.ADJUNCT
    if any(t in name for t in ("roasted", "black", "chocolate", "carafa")) or (
        color >= 300 and "caramel" not in name
    ):
        return FermentableGroup.ROASTED
    if any(t in name for t in ("crystal", "caramel", "cara")) or (
        10 <= color < 200 and not any(t in name for t in ("munich", "aromatic", "biscuit"))
    ):
        return FermentableGroup.CRYSTAL
    if any(
        t in name
        for t in ("aromatic", "biscuit", "victory", "amber", "brown", "melanoidin", "special")
    ) or (20 <= color < 100):
        return FermentableGroup.SPECIALTY
    return FermentableGroup.BASE


class InMemoryCatalogSource:
    """CatalogSource backed by lists of raw mappings."""

    def __init__(
        self,
        fermentables: list[RawEntry] | None = None,
        hops: list[RawEntry] | None = None,
        yeasts: list[RawEntry] | None = None,
        styles: list[RawEntry] | None = None,
    ):
        self._fermentables = list(fermentables or [])
        self._hops = list(hops or [])
        self._yeasts = list(yeasts or [])
        self._styles = list(styles or [])

    def load_fermentables(self) -> list[RawEntry]:
        return list(self._fermentables)

    def load_hops(self) -> list[RawEntry]:
        return list(self._hops)

    def load_yeasts(self) -> list[RawEntry]:
        return list(self._yeasts)

    def load_styles(self) -> list[RawEntry]:
        return list(self._styles)

    def add_fermentable(self, raw: RawEntry) -> None:
        self._fermentables.append(raw)

    def add_hop(self, raw: RawEntry) -> None:
        self._hops.append(raw)

    def add_yeast(self, raw: RawEntry) -> None:
        self._yeasts.append(raw)


class CatalogProvider:
    """
    Normalised, memoised access to preset catalogs.

    Args:
        source: Generated preset data
        custom: Optional user presets; entries override ``source`` by name
    """

    def __init__(self, source: CatalogSource, custom: CatalogSource | None = None):
        self.source = source
        self.custom = custom
        self._cache: dict[str, Any] = {}

    def invalidate(self) -> None:
        """Drop memoised presets so the next access reloads from the sources."""
        if self._cache:
            logger.debug("Invalidating catalog cache (%s)", ", ".join(sorted(self._cache)))
        self._cache.clear()

    def _load(
        self,
        kind: str,
        loader: Callable[[CatalogSource], list[RawEntry]],
        normalise: Callable[[RawEntry], P],
        key: Callable[[P], str],
    ) -> list[P]:
        if kind in self._cache:
            return self._cache[kind]

        by_key: dict[str, P] = {}
        sources = [self.source] if self.custom is None else [self.source, self.custom]
        for source in sources:
            for raw in loader(source):
                try:
                    preset = normalise(raw)
                except NormalisationError as e:
                    logger.warning("Skipping %s catalog entry: %s", kind, e)
                    continue
                by_key[key(preset)] = preset

        presets = list(by_key.values())
        self._cache[kind] = presets
        logger.debug("Loaded %d %s presets", len(presets), kind)
        return presets

    # === Preset lists ===

    def fermentables(self) -> list[FermentablePreset]:
        return self._load(
            "fermentables", lambda s: s.load_fermentables(), normalise_fermentable, lambda p: p.name
        )

    def hops(self) -> list[HopPreset]:
        return self._load("hops", lambda s: s.load_hops(), normalise_hop, lambda p: p.name)

    def yeasts(self) -> list[YeastPreset]:
        return self._load("yeasts", lambda s: s.load_yeasts(), normalise_yeast, lambda p: p.name)

    def styles(self) -> list[StyleSpec]:
        return self._load("styles", lambda s: s.load_styles(), normalise_style, lambda p: p.code)

    def grouped_fermentables(self) -> list[tuple[FermentableGroup, list[FermentablePreset]]]:
        """Fermentable presets by display group; empty groups are omitted."""
        groups: dict[FermentableGroup, list[FermentablePreset]] = {}
        for preset in self.fermentables():
            groups.setdefault(categorize_fermentable(preset), []).append(preset)
        return [(group, groups[group]) for group in FermentableGroup if group in groups]

    # === Lookup ===

    @staticmethod
    def _exact(presets: list[P], name: str, key: Callable[[P], str]) -> P | None:
        wanted = normalise_ingredient_name(name)
        for preset in presets:
            if normalise_ingredient_name(key(preset)) == wanted:
                return preset
        return None

    def get_fermentable(self, name: str) -> FermentablePreset | None:
        """Exact (case and alias insensitive) fermentable lookup."""
        return self._exact(self.fermentables(), name, lambda p: p.name)

    def get_hop(self, name: str) -> HopPreset | None:
        return self._exact(self.hops(), name, lambda p: p.name)

    def get_yeast(self, name: str) -> YeastPreset | None:
        return self._exact(self.yeasts(), name, lambda p: p.name)

    def get_style(self, code: str) -> StyleSpec | None:
        """Style by code; styles without any published range count as missing."""
        for spec in self.styles():
            if spec.code.lower() == code.strip().lower():
                return spec if has_any_range(spec) else None
        return None

    def search_fermentables(
        self, query: str, threshold: float = DEFAULT_THRESHOLD, limit: int = 5
    ) -> list[tuple[FermentablePreset, float]]:
        """Fuzzy fermentable search, best match first."""
        return match_objects(query, self.fermentables(), lambda p: p.name, threshold, limit)

    def search_hops(
        self, query: str, threshold: float = DEFAULT_THRESHOLD, limit: int = 5
    ) -> list[tuple[HopPreset, float]]:
        return match_objects(query, self.hops(), lambda p: p.name, threshold, limit)

    def search_yeasts(
        self, query: str, threshold: float = DEFAULT_THRESHOLD, limit: int = 5
    ) -> list[tuple[YeastPreset, float]]:
        return match_objects(query, self.yeasts(), lambda p: p.name, threshold, limit)

    def hop_flavor_map(self) -> dict[str, HopFlavor]:
        """Flavor radars for every hop preset that has one."""
        return {p.name: p.flavor for p in self.hops() if p.flavor is not None}

    # === Recipe ingredients from presets ===

    def _require(self, preset: P | None, kind: str, name: str) -> P:
        if preset is None:
            raise CatalogError(f"No {kind} preset named {name!r}")
        return preset

    def fermentable_from_preset(self, name: str, weight_kg: float) -> Fermentable:
        """
        Create a recipe fermentable from a preset.

        Raises:
            CatalogError: If no preset has that name
        """
        preset = self._require(self.get_fermentable(name), "fermentable", name)
        return Fermentable(
            name=preset.name,
            weight_kg=weight_kg,
            color_lovibond=preset.color_lovibond,
            potential_gu=preset.potential_gu,
            type=preset.type,
            origin_code=preset.origin_code,
            fermentability=preset.fermentability,
        )

    def hop_from_preset(
        self,
        name: str,
        grams: float,
        use: HopUse | str = HopUse.BOIL,
        **timing: Any,
    ) -> Hop:
        """
        Create a recipe hop addition from a preset.

        Extra keyword arguments set the timing fields (``time_min``,
        ``dry_hop_days`` and so on).

        Raises:
            CatalogError: If no preset has that name
        """
        preset = self._require(self.get_hop(name), "hop", name)
        return Hop(
            name=preset.name,
            alpha_acid=preset.alpha_acid,
            grams=grams,
            use=use,
            flavor=preset.flavor,
            **timing,
        )

    def yeast_from_preset(self, name: str) -> Yeast:
        """
        Create a recipe yeast from a preset.

        Raises:
            CatalogError: If no preset has that name
        """
        preset = self._require(self.get_yeast(name), "yeast", name)
        attenuation = (
            preset.attenuation if preset.attenuation is not None else DEFAULT_YEAST_ATTENUATION
        )
        return Yeast(name=preset.name, attenuation=attenuation, laboratory=preset.laboratory)


def catalog_from_mappings(data: Mapping[str, list[RawEntry]]) -> CatalogProvider:
    """Build a provider from a mapping with fermentables/hops/yeasts/styles lists."""
    return CatalogProvider(
        InMemoryCatalogSource(
            fermentables=data.get("fermentables"),
            hops=data.get("hops"),
            yeasts=data.get("yeasts"),
            styles=data.get("styles"),
        )
    )
