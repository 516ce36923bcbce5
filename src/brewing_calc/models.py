"""
Data models for recipes, calculation results and catalog presets.

All models use Pydantic v2 and are frozen: a Recipe is read-only for the
duration of a calculation and every result is a fresh record. Amounts are
metric (kilograms for fermentables, grams for hops, litres, Celsius).
"""

from datetime import date, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def new_id() -> str:
    """Generate a random identifier for recipe entities."""
    return str(uuid4())


def _slug_enum_value(v: Any, sep: str) -> Any:
    # "Dry Hop", "dry-hop" and "dry_hop" all name the same member
    if isinstance(v, str):
        slug = v.strip().lower()
        for ch in (" ", "-", "_"):
            slug = slug.replace(ch, sep)
        return slug
    return v


class FermentableType(str, Enum):
    """How a fermentable contributes extract."""

    GRAIN = "grain"
    ADJUNCT_MASHABLE = "adjunct_mashable"
    EXTRACT = "extract"
    SUGAR = "sugar"

    @property
    def efficiency_applies(self) -> bool:
        """Mashed fermentables are subject to mash efficiency."""
        return self in (FermentableType.GRAIN, FermentableType.ADJUNCT_MASHABLE)


class HopUse(str, Enum):
    """How a hop is used in the brewing process."""

    MASH = "mash"
    FIRST_WORT = "first_wort"
    BOIL = "boil"
    WHIRLPOOL = "whirlpool"
    DRY_HOP = "dry_hop"


class MashStepType(str, Enum):
    """How a mash step reaches its temperature."""

    INFUSION = "infusion"
    TEMPERATURE = "temperature"
    DECOCTION = "decoction"


class FermentationStepType(str, Enum):
    """Fermentation schedule step kinds."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    DIACETYL_REST = "diacetyl-rest"
    COLD_CRASH = "cold-crash"
    CONDITIONING = "conditioning"


class BrewDayStage(str, Enum):
    """Brew day stages, declared in natural brew-day order."""

    WATER_PREP = "water-prep"
    MASH = "mash"
    PRE_BOIL = "pre-boil"
    BOIL = "boil"
    POST_BOIL = "post-boil"
    PITCH = "pitch"
    FERMENTATION = "fermentation"
    DRY_HOP = "dry-hop"
    COLD_CRASH = "cold-crash"
    PACKAGING = "packaging"


class IngredientTiming(str, Enum):
    """When a miscellaneous ingredient is added."""

    MASH = "mash"
    BOIL = "boil"
    WHIRLPOOL = "whirlpool"
    SECONDARY = "secondary"
    KEGGING = "kegging"
    BOTTLING = "bottling"


class YeastPackage(str, Enum):
    """How the pitched yeast is packaged."""

    LIQUID = "liquid-100"
    LIQUID_LARGE = "liquid-200"
    DRY = "dry"
    SLURRY = "slurry"


class StarterGrowthModel(str, Enum):
    """Yeast growth model for a starter step."""

    WHITE = "white"
    BRAUKAISER = "braukaiser"


class SessionStatus(str, Enum):
    """Where a brew session is in its life cycle."""

    PLANNING = "planning"
    BREWING = "brewing"
    FERMENTING = "fermenting"
    CONDITIONING = "conditioning"
    COMPLETED = "completed"


# === Ingredients ===


class HopFlavor(BaseModel):
    """Sensory radar for a hop, nine axes on a 0-5 scale."""

    model_config = ConfigDict(frozen=True)

    citrus: float = Field(default=0.0, ge=0, le=5)
    tropical_fruit: float = Field(default=0.0, ge=0, le=5)
    stone_fruit: float = Field(default=0.0, ge=0, le=5)
    berry: float = Field(default=0.0, ge=0, le=5)
    floral: float = Field(default=0.0, ge=0, le=5)
    grassy: float = Field(default=0.0, ge=0, le=5)
    herbal: float = Field(default=0.0, ge=0, le=5)
    spice: float = Field(default=0.0, ge=0, le=5)
    resin_pine: float = Field(default=0.0, ge=0, le=5)

    @classmethod
    def axes(cls) -> tuple[str, ...]:
        """Axis names in radar order."""
        return tuple(cls.model_fields)

    def as_dict(self) -> dict[str, float]:
        return self.model_dump()


class Fermentable(BaseModel):
    """A fermentable in a recipe grist."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str = Field(..., description="Fermentable name")
    weight_kg: float = Field(default=0.0, ge=0, description="Weight in kilograms")
    color_lovibond: float = Field(default=0.0, ge=0, description="Colour in °Lovibond")
    potential_gu: float = Field(
        default=0.0,
        ge=0,
        description="Extract potential in GU per kg per litre (~300 for 2-row)",
    )
    type: FermentableType = Field(default=FermentableType.GRAIN)
    origin_code: str | None = Field(default=None, description="ISO country code")
    fermentability: float | None = Field(
        default=None,
        ge=0,
        le=1,
        description="Fermentable share of the extract (0 for lactose); unset means 1",
    )

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, v: Any) -> Any:
        return _slug_enum_value(v, "_")


class Hop(BaseModel):
    """
    A hop addition.

    The meaning of the timing fields depends on ``use``: boil and first
    wort use ``time_min`` (minutes remaining), whirlpool uses
    ``whirlpool_time_min`` (falling back to ``time_min``) and
    ``whirlpool_temp_c``, and dry hop uses
    ``dry_hop_days``/``dry_hop_start_day``.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str = Field(..., description="Hop variety")
    alpha_acid: float = Field(default=0.0, ge=0, le=100, description="Alpha acid %")
    grams: float = Field(default=0.0, ge=0, description="Mass in grams")
    use: HopUse = Field(default=HopUse.BOIL)
    time_min: float = Field(default=0.0, ge=0)
    whirlpool_time_min: float | None = Field(default=None, ge=0)
    whirlpool_temp_c: float | None = Field(default=None)
    dry_hop_days: float | None = Field(default=None, ge=0)
    dry_hop_start_day: float | None = Field(default=None)
    flavor: HopFlavor | None = Field(default=None)

    @field_validator("use", mode="before")
    @classmethod
    def _coerce_use(cls, v: Any) -> Any:
        return _slug_enum_value(v, "_")

    @property
    def is_kettle_addition(self) -> bool:
        """Hops that sit in the kettle and absorb wort."""
        return self.use in (HopUse.BOIL, HopUse.WHIRLPOOL, HopUse.FIRST_WORT)

    def steep_minutes(self, default: float = 15.0) -> float:
        """Whirlpool steep time: ``whirlpool_time_min``, else a positive ``time_min``."""
        if self.whirlpool_time_min is not None:
            return self.whirlpool_time_min
        if self.time_min > 0:
            return self.time_min
        return default


class StarterStep(BaseModel):
    """One step of a yeast starter. Aeration only affects the White model."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    volume_l: float = Field(default=1.0, ge=0)
    gravity: float = Field(default=1.036, description="Starter wort specific gravity")
    model: StarterGrowthModel = StarterGrowthModel.WHITE
    shaken: bool = Field(default=False, description="Intermittent shaking for aeration")


class StarterInfo(BaseModel):
    """Yeast package and starter steps for a recipe."""

    model_config = ConfigDict(frozen=True)

    package: YeastPackage = YeastPackage.LIQUID
    packs: float = Field(default=1.0, ge=0)
    manufacture_date: date | None = None
    slurry_l: float | None = Field(default=None, ge=0)
    slurry_billion_per_ml: float | None = Field(default=None, ge=0)
    steps: list[StarterStep] = Field(default_factory=list, max_length=3)


class Yeast(BaseModel):
    """Selected yeast; attenuation is a fraction (0.75 = 75%)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str
    attenuation: float = Field(default=0.75, ge=0, le=1)
    laboratory: str | None = None
    starter: StarterInfo | None = None


class OtherIngredient(BaseModel):
    """Water agents, finings, spices and other miscellaneous additions."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str
    category: str = "other"
    amount: float = Field(default=0.0, ge=0)
    unit: str = "g"
    timing: IngredientTiming = IngredientTiming.BOIL
    notes: str | None = None


# === Process ===


class MashStep(BaseModel):
    """
    A single mash step.

    Values are deliberately unconstrained here; use
    ``brewing_calc.mash.validate_mash_step`` to collect problems for display.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str = ""
    type: MashStepType = MashStepType.INFUSION
    temperature_c: float = 66.0
    duration_min: float = 60.0
    infusion_volume_l: float | None = None
    infusion_temp_c: float | None = None
    decoction_volume_l: float | None = None


class FermentationStep(BaseModel):
    """A single fermentation schedule step."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str
    type: FermentationStepType = FermentationStepType.PRIMARY
    duration_days: float = Field(default=0.0, ge=0)
    temperature_c: float = 20.0
    notes: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, v: Any) -> Any:
        return _slug_enum_value(v, "-")


class Equipment(BaseModel):
    """Equipment parameters that drive volumes and efficiency."""

    model_config = ConfigDict(frozen=True)

    boil_time_min: float = Field(default=60.0, ge=0)
    boil_off_rate_l_per_hour: float = Field(default=4.0, ge=0)
    mash_efficiency_percent: float = Field(default=75.0, ge=0, le=100)
    mash_thickness_l_per_kg: float = Field(default=3.0, ge=0)
    grain_absorption_l_per_kg: float = Field(default=1.04, ge=0)
    mash_tun_deadspace_l: float = Field(default=2.0, ge=0)
    kettle_loss_l: float = Field(default=1.0, ge=0)
    hops_absorption_l_per_kg: float = Field(default=0.7, ge=0)
    chiller_loss_l: float = Field(default=0.5, ge=0)
    fermenter_loss_l: float = Field(default=0.5, ge=0)
    cooling_shrinkage_percent: float = Field(default=4.0, ge=0, lt=100)


# === Water ===


class WaterProfile(BaseModel):
    """Ion concentrations in ppm (mg/L)."""

    model_config = ConfigDict(frozen=True)

    ca: float = 0.0
    mg: float = 0.0
    na: float = 0.0
    cl: float = 0.0
    so4: float = 0.0
    hco3: float = 0.0


class SaltAdditions(BaseModel):
    """Total brewing salt additions in grams."""

    model_config = ConfigDict(frozen=True)

    gypsum_g: float = Field(default=0.0, ge=0)
    cacl2_g: float = Field(default=0.0, ge=0)
    epsom_g: float = Field(default=0.0, ge=0)
    nacl_g: float = Field(default=0.0, ge=0)
    nahco3_g: float = Field(default=0.0, ge=0)


class WaterChemistry(BaseModel):
    """Source water plus salts, split automatically between mash and sparge."""

    model_config = ConfigDict(frozen=True)

    source_profile: WaterProfile = Field(default_factory=WaterProfile)
    salt_additions: SaltAdditions = Field(default_factory=SaltAdditions)
    source_profile_name: str | None = None
    target_style_name: str | None = None


# === Brew day ===


class BrewDayChecklistItem(BaseModel):
    """A target measurement or reminder on the brew day checklist."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    stage: BrewDayStage
    details: str = ""
    enabled: bool = True


# === Recipe ===


class Recipe(BaseModel):
    """
    A beer recipe.

    Partially filled recipes are valid: empty ingredient lists, zero
    weights and a zero batch volume all calculate to degenerate results.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str = "Untitled Recipe"
    style_code: str | None = Field(default=None, description="BJCP style code, e.g. 21A")
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    current_version: int = Field(default=1, ge=1)

    batch_volume_l: float = Field(default=20.0, ge=0, description="Target volume into fermenter")
    equipment: Equipment = Field(default_factory=Equipment)

    fermentables: list[Fermentable] = Field(default_factory=list)
    hops: list[Hop] = Field(default_factory=list)
    yeast: Yeast | None = None
    other_ingredients: list[OtherIngredient] = Field(default_factory=list)

    mash_steps: list[MashStep] = Field(default_factory=list)
    fermentation_steps: list[FermentationStep] = Field(default_factory=list)
    water_chemistry: WaterChemistry | None = None

    brew_day_checklist: list[BrewDayChecklistItem] = Field(
        default_factory=list,
        description="User checklist overrides, merged over generated defaults",
    )

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_grain_kg(self) -> float:
        """Total weight of all fermentables."""
        return sum(f.weight_kg for f in self.fermentables)


# === Results ===


class MashPhAdjustment(BaseModel):
    """Acid or base needed to reach a target mash pH (only one is non-zero)."""

    model_config = ConfigDict(frozen=True)

    target_ph: float
    lactic_acid_88_ml: float = 0.0
    baking_soda_g: float = 0.0


class RecipeCalculations(BaseModel):
    """Derived values for a recipe. Recomputed on every call, never stored."""

    model_config = ConfigDict(frozen=True)

    og: float = 1.0
    fg: float = 1.0
    abv: float = 0.0
    ibu: float = 0.0
    srm: float = 0.0
    ebc: float = 0.0

    pre_boil_volume_l: float = 0.0
    post_boil_volume_l: float = 0.0
    boil_off_l: float = 0.0
    mash_water_l: float = 0.0
    sparge_water_l: float = 0.0
    total_water_l: float = 0.0

    calories: float = 0.0
    carbs_g: float = 0.0

    estimated_mash_ph: float | None = None
    mash_ph_adjustment: MashPhAdjustment | None = None


class RecipeVersion(BaseModel):
    """Snapshot of a recipe at a version number."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    recipe_id: str
    version_number: int = Field(..., ge=1)
    created_at: datetime
    change_notes: str | None = None
    recipe_snapshot: Recipe


# === Brew sessions ===


class SessionActuals(BaseModel):
    """Measurements taken on a brew day. Anything not measured stays None."""

    model_config = ConfigDict(frozen=True)

    pre_boil_gravity: float | None = Field(default=None, gt=0)
    pre_boil_volume_l: float | None = Field(default=None, ge=0)
    original_gravity: float | None = Field(default=None, gt=0)
    final_gravity: float | None = Field(default=None, gt=0)
    post_boil_volume_l: float | None = Field(default=None, ge=0)
    into_fermenter_l: float | None = Field(default=None, ge=0)
    mash_ph: float | None = Field(default=None, ge=0, le=14)


class SessionMetrics(BaseModel):
    """Values derived from session actuals; None where inputs are missing."""

    model_config = ConfigDict(frozen=True)

    actual_abv: float | None = None
    apparent_attenuation: float | None = None
    mash_efficiency_percent: float | None = None
    brewhouse_efficiency_percent: float | None = None


class BrewSession(BaseModel):
    """
    One brew day of a recipe.

    ``original_recipe`` is the recipe as planned; ``brew_day_recipe``
    carries any changes made on the day and is what metrics use.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    recipe_id: str
    recipe_version_number: int = Field(default=1, ge=1)
    recipe_name: str
    original_recipe: Recipe
    brew_day_recipe: Recipe
    actuals: SessionActuals = Field(default_factory=SessionActuals)
    metrics: SessionMetrics = Field(default_factory=SessionMetrics)
    brew_date: datetime
    status: SessionStatus = SessionStatus.PLANNING
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# === Styles ===


Range = tuple[float, float]


class StyleSpec(BaseModel):
    """Guideline target ranges for a beer style."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str | None = None
    og: Range | None = None
    fg: Range | None = None
    abv: Range | None = None
    ibu: Range | None = None
    srm: Range | None = None
    ebc: Range | None = Field(default=None, description="Explicit EBC range, if published")

    @property
    def ebc_range(self) -> Range | None:
        """EBC range, derived from SRM when not given explicitly."""
        if self.ebc is not None:
            return self.ebc
        if self.srm is None:
            return None
        return (round(self.srm[0] * 1.97, 1), round(self.srm[1] * 1.97, 1))


class StyleComparison(BaseModel):
    """Where a calculated value sits against a style range."""

    model_config = ConfigDict(frozen=True)

    metric: str
    value: float
    low: float
    high: float
    status: str = Field(..., description="below, within or above")

    @property
    def in_range(self) -> bool:
        return self.status == "within"


# === Catalog presets ===


class FermentablePreset(BaseModel):
    """Canonical fermentable catalog entry."""

    model_config = ConfigDict(frozen=True)

    name: str
    color_lovibond: float = Field(default=0.0, ge=0)
    potential_gu: float = Field(default=0.0, ge=0)
    type: FermentableType = FermentableType.GRAIN
    origin_code: str | None = None
    fermentability: float | None = Field(default=None, ge=0, le=1)


class HopPreset(BaseModel):
    """Canonical hop catalog entry."""

    model_config = ConfigDict(frozen=True)

    name: str
    alpha_acid: float = Field(default=0.0, ge=0, le=100)
    category: str | None = None
    flavor: HopFlavor | None = None
    notes: str | None = None


class YeastPreset(BaseModel):
    """Canonical yeast catalog entry; attenuation is a fraction."""

    model_config = ConfigDict(frozen=True)

    name: str
    attenuation: float | None = Field(default=None, ge=0, le=1)
    laboratory: str | None = None
