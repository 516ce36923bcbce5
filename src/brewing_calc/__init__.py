"""
brewing-calc: Homebrew recipe calculation engine.

Computes gravity, alcohol, bitterness, colour, volumes, mash temperatures,
mash pH and hop flavor for a recipe, and builds brew-day checklists.
Also plans yeast starters and tracks brew sessions against their recipes.
Catalog presets and persistence are supplied through small protocols.
"""

from brewing_calc.models import (
    FermentableType,
    HopUse,
    MashStepType,
    FermentationStepType,
    BrewDayStage,
    IngredientTiming,
    HopFlavor,
    Fermentable,
    Hop,
    Yeast,
    OtherIngredient,
    MashStep,
    FermentationStep,
    Equipment,
    WaterProfile,
    SaltAdditions,
    WaterChemistry,
    BrewDayChecklistItem,
    Recipe,
    MashPhAdjustment,
    RecipeCalculations,
    RecipeVersion,
    StyleSpec,
    StyleComparison,
    FermentablePreset,
    HopPreset,
    YeastPreset,
    YeastPackage,
    StarterGrowthModel,
    StarterStep,
    StarterInfo,
    SessionStatus,
    SessionActuals,
    SessionMetrics,
    BrewSession,
)
from brewing_calc.units import (
    MassUnit,
    VolumeUnit,
    TemperatureUnit,
    convert_mass,
    convert_volume,
    convert_temperature,
    srm_to_ebc,
    ebc_to_srm,
    lovibond_to_srm,
    srm_to_lovibond,
    sg_to_plato,
    plato_to_sg,
    ppg_to_gu,
    gu_to_ppg,
)
from brewing_calc.config import (
    GravityBasis,
    CalculationConfig,
    StorageConfig,
    get_config,
    get_storage_config,
)
from brewing_calc.mash import (
    strike_temp,
    infusion_temp,
    mash_volume_at_step,
    validate_mash_step,
    create_single_infusion_schedule,
    create_multi_step_schedule,
)
from brewing_calc.volume import VolumeBreakdown, calculate_volumes
from brewing_calc.gravity import (
    calculate_og,
    calculate_fg,
    calculate_abv,
    calculate_nutrition,
    fermentable_percentages,
    fermentable_share,
    weights_from_percentages,
)
from brewing_calc.bitterness import calculate_ibu, tinseth_utilization
from brewing_calc.color import calculate_srm, calculate_ebc
from brewing_calc.hop_flavor import (
    HopFlavorContribution,
    estimate_recipe_hop_flavor,
    estimate_per_hop_contributions,
)
from brewing_calc.water import calculate_final_profile, calculate_salts_for_target
from brewing_calc.mash_ph import calculate_mash_ph, calculate_ph_adjustment
from brewing_calc.calculator import RecipeCalculator, calculate
from brewing_calc.checklist import (
    ChecklistGroup,
    generate_default_checklist,
    merge_checklist,
    build_checklist,
    group_by_stage,
)
from brewing_calc.styles import compare_to_style
from brewing_calc.matching import match_names, match_objects, normalise_ingredient_name
from brewing_calc.catalog import CatalogProvider, InMemoryCatalogSource, catalog_from_mappings
from brewing_calc.storage import (
    StorageErrorType,
    StorageResult,
    InMemoryStore,
    FileStore,
    load_json,
    load_json_safe,
    save_json,
    save_json_safe,
    delete_json,
)
from brewing_calc.repository import BrewSessionRepository, RecipeRepository
from brewing_calc.starter import (
    StarterPlan,
    StarterStepResult,
    dme_grams_for_gravity,
    calculate_viability,
    calculate_cells_available,
    calculate_required_cells,
    calculate_starter,
    starter_for_recipe,
)
from brewing_calc.session import (
    apparent_attenuation,
    mash_efficiency,
    brewhouse_efficiency,
    calculate_session_metrics,
    start_session,
    record_actuals,
    update_brew_day_recipe,
    set_status,
)
from brewing_calc.exceptions import (
    BrewingCalcError,
    UnitConversionError,
    NormalisationError,
    CatalogError,
    ConfigurationError,
    StorageError,
    QuotaExceededError,
)

__version__ = "0.1.0"

__all__ = [
    # Models
    "FermentableType",
    "HopUse",
    "MashStepType",
    "FermentationStepType",
    "BrewDayStage",
    "IngredientTiming",
    "HopFlavor",
    "Fermentable",
    "Hop",
    "Yeast",
    "OtherIngredient",
    "MashStep",
    "FermentationStep",
    "Equipment",
    "WaterProfile",
    "SaltAdditions",
    "WaterChemistry",
    "BrewDayChecklistItem",
    "Recipe",
    "MashPhAdjustment",
    "RecipeCalculations",
    "RecipeVersion",
    "StyleSpec",
    "StyleComparison",
    "FermentablePreset",
    "HopPreset",
    "YeastPreset",
    "YeastPackage",
    "StarterGrowthModel",
    "StarterStep",
    "StarterInfo",
    "SessionStatus",
    "SessionActuals",
    "SessionMetrics",
    "BrewSession",
    # Units
    "MassUnit",
    "VolumeUnit",
    "TemperatureUnit",
    "convert_mass",
    "convert_volume",
    "convert_temperature",
    "srm_to_ebc",
    "ebc_to_srm",
    "lovibond_to_srm",
    "srm_to_lovibond",
    "sg_to_plato",
    "plato_to_sg",
    "ppg_to_gu",
    "gu_to_ppg",
    # Config
    "GravityBasis",
    "CalculationConfig",
    "StorageConfig",
    "get_config",
    "get_storage_config",
    # Calculations
    "strike_temp",
    "infusion_temp",
    "mash_volume_at_step",
    "validate_mash_step",
    "create_single_infusion_schedule",
    "create_multi_step_schedule",
    "VolumeBreakdown",
    "calculate_volumes",
    "calculate_og",
    "calculate_fg",
    "calculate_abv",
    "calculate_nutrition",
    "fermentable_percentages",
    "fermentable_share",
    "weights_from_percentages",
    "calculate_ibu",
    "tinseth_utilization",
    "calculate_srm",
    "calculate_ebc",
    "HopFlavorContribution",
    "estimate_recipe_hop_flavor",
    "estimate_per_hop_contributions",
    "calculate_final_profile",
    "calculate_salts_for_target",
    "calculate_mash_ph",
    "calculate_ph_adjustment",
    "RecipeCalculator",
    "calculate",
    # Checklist and styles
    "ChecklistGroup",
    "generate_default_checklist",
    "merge_checklist",
    "build_checklist",
    "group_by_stage",
    "compare_to_style",
    # Catalog
    "match_names",
    "match_objects",
    "normalise_ingredient_name",
    "CatalogProvider",
    "InMemoryCatalogSource",
    "catalog_from_mappings",
    # Storage
    "StorageErrorType",
    "StorageResult",
    "InMemoryStore",
    "FileStore",
    "load_json",
    "load_json_safe",
    "save_json",
    "save_json_safe",
    "delete_json",
    "RecipeRepository",
    "BrewSessionRepository",
    # Brew sessions and starters
    "apparent_attenuation",
    "mash_efficiency",
    "brewhouse_efficiency",
    "calculate_session_metrics",
    "start_session",
    "record_actuals",
    "update_brew_day_recipe",
    "set_status",
    "StarterPlan",
    "StarterStepResult",
    "dme_grams_for_gravity",
    "calculate_viability",
    "calculate_cells_available",
    "calculate_required_cells",
    "calculate_starter",
    "starter_for_recipe",
    # Exceptions
    "BrewingCalcError",
    "UnitConversionError",
    "NormalisationError",
    "CatalogError",
    "ConfigurationError",
    "StorageError",
    "QuotaExceededError",
]
