"""
Water chemistry: ion contributions from brewing salts.

Profiles are in ppm (mg/L). Salt contributions are mass fractions of each
ion in the hydrated salt, computed from molar masses.
"""

from brewing_calc.models import SaltAdditions, WaterProfile

# ppm added by 1 g of salt in 1 L of water
ION_PPM_PER_G_PER_L: dict[str, dict[str, float]] = {
    "gypsum": {"ca": 232.8, "so4": 558.3},  # CaSO4·2H2O
    "cacl2": {"ca": 272.6, "cl": 482.0},  # CaCl2·2H2O
    "epsom": {"mg": 98.6, "so4": 389.6},  # MgSO4·7H2O
    "nacl": {"na": 393.4, "cl": 606.6},
    "nahco3": {"na": 273.7, "hco3": 726.3},
}

IONS = ("ca", "mg", "na", "cl", "so4", "hco3")

COMMON_WATER_PROFILES: dict[str, WaterProfile] = {
    "RO": WaterProfile(),
    "Pilsen": WaterProfile(ca=7, mg=3, na=2, cl=5, so4=5, hco3=15),
    "Dortmund": WaterProfile(ca=225, mg=40, na=60, cl=180, so4=120, hco3=180),
    "Burton": WaterProfile(ca=275, mg=40, na=25, cl=35, so4=470, hco3=300),
    "Dublin": WaterProfile(ca=120, mg=4, na=12, cl=19, so4=53, hco3=319),
    "Vienna": WaterProfile(ca=163, mg=12, na=10, cl=40, so4=125, hco3=258),
    "Montreal": WaterProfile(ca=31, mg=8, na=15, cl=26, so4=22, hco3=0),
}


def ion_delta_from_salts(salts: SaltAdditions, volume_l: float) -> WaterProfile:
    """
    Ion increase produced by dissolving salts into a volume of water.

    Args:
        salts: Salt additions in grams for that volume
        volume_l: Water volume; tiny or zero volumes are floored to avoid
            division by zero

    Returns:
        WaterProfile of ppm deltas
    """
    volume = max(0.0001, volume_l)
    delta = dict.fromkeys(IONS, 0.0)
    for salt, ions in ION_PPM_PER_G_PER_L.items():
        grams = getattr(salts, f"{salt}_g")
        if grams <= 0:
            continue
        for ion, ppm in ions.items():
            delta[ion] += grams / volume * ppm
    return WaterProfile(**delta)


def add_profiles(a: WaterProfile, b: WaterProfile) -> WaterProfile:
    return WaterProfile(**{ion: getattr(a, ion) + getattr(b, ion) for ion in IONS})


def scale_profile(profile: WaterProfile, factor: float) -> WaterProfile:
    return WaterProfile(**{ion: getattr(profile, ion) * factor for ion in IONS})


def clamp_profile(profile: WaterProfile) -> WaterProfile:
    """Floor every ion at zero."""
    return WaterProfile(**{ion: max(0.0, getattr(profile, ion)) for ion in IONS})


def chloride_to_sulfate_ratio(profile: WaterProfile) -> float | None:
    """Cl:SO4 ratio, or None when there is no sulfate."""
    if profile.so4 <= 0:
        return None
    return profile.cl / profile.so4


def calculate_final_profile(
    source: WaterProfile,
    salts: SaltAdditions,
    total_water_l: float,
) -> WaterProfile:
    """Source water plus salts dissolved in the total brewing water."""
    return clamp_profile(add_profiles(source, ion_delta_from_salts(salts, total_water_l)))


def split_salts_proportionally(
    total: SaltAdditions,
    mash_water_l: float,
    sparge_water_l: float,
) -> tuple[SaltAdditions, SaltAdditions]:
    """
    Split total salt additions between mash and sparge by water volume.

    Returns:
        (mash salts, sparge salts); both empty when there is no water
    """
    total_water = mash_water_l + sparge_water_l
    if total_water <= 0:
        return SaltAdditions(), SaltAdditions()

    mash_ratio = mash_water_l / total_water
    sparge_ratio = sparge_water_l / total_water
    amounts = total.model_dump()
    mash = {k: v * mash_ratio for k, v in amounts.items() if v > 0}
    sparge = {k: v * sparge_ratio for k, v in amounts.items() if v > 0}
    return SaltAdditions(**mash), SaltAdditions(**sparge)


def calculate_salts_for_target(
    source: WaterProfile,
    target: WaterProfile,
    mash_water_l: float,
    sparge_water_l: float,
) -> tuple[SaltAdditions, SaltAdditions]:
    """
    Suggest gypsum and calcium chloride to raise sulfate and chloride.

    Only the two flavour ions are targeted; other ions follow from the
    salts chosen.

    Returns:
        (mash salts, sparge salts)
    """
    total_water = mash_water_l + sparge_water_l
    if total_water <= 0:
        return SaltAdditions(), SaltAdditions()

    so4_delta = max(0.0, target.so4 - source.so4)
    cl_delta = max(0.0, target.cl - source.cl)
    total = SaltAdditions(
        gypsum_g=so4_delta * total_water / ION_PPM_PER_G_PER_L["gypsum"]["so4"],
        cacl2_g=cl_delta * total_water / ION_PPM_PER_G_PER_L["cacl2"]["cl"],
    )
    return split_salts_proportionally(total, mash_water_l, sparge_water_l)
