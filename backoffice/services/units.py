"""Unit normalization and conversion helpers.

Stock is costed per base unit (grams, millilitres or each), so every
quantity is converted through its family's base unit. Two units are
comparable exactly when they share a base unit.
"""

import logging
import math

logger = logging.getLogger(__name__)

# Unit key -> base unit of its family
BASE_OF = {"g": "g", "kg": "g", "ml": "ml", "l": "ml", "ea": "ea"}

# Unit key -> multiplicative factor to the base unit
CONVERSION_FACTORS = {"g": 1.0, "kg": 1000.0, "ml": 1.0, "l": 1000.0, "ea": 1.0}

# Long names accepted from forms and imports (lowercase input -> unit key)
UNIT_ALIASES = {
    "gram": "g",
    "grams": "g",
    "gr": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "kilo": "kg",
    "kilos": "kg",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "each": "ea",
    "unit": "ea",
    "units": "ea",
    "pc": "ea",
    "pcs": "ea",
    "piece": "ea",
    "pieces": "ea",
}

UNIT_FAMILIES = {"g": "mass", "ml": "volume", "ea": "count"}


def normalize_unit(unit: str | None) -> str:
    """Trim and lowercase a unit, resolving long names to their key."""
    key = (unit or "").strip().lower()
    return UNIT_ALIASES.get(key, key)


def is_known_unit(unit: str | None) -> bool:
    """Check if a unit belongs to one of the mass, volume or count families."""
    return unit_family(unit) is not None


def base_unit(unit: str | None) -> str:
    """Get the base unit for a unit; unknown units are their own base."""
    key = normalize_unit(unit)
    return BASE_OF.get(key, key)


def unit_family(unit: str | None) -> str | None:
    """Get "mass", "volume" or "count", or None for an unknown unit."""
    return UNIT_FAMILIES.get(BASE_OF.get(normalize_unit(unit), ""))


def conversion_factor(unit: str | None) -> float:
    """Get the factor to the base unit, falling back to 1 for unknown units."""
    key = normalize_unit(unit)
    factor = CONVERSION_FACTORS.get(key)
    if factor is None:
        logger.warning(f"Unrecognized unit '{unit}', treating conversion factor as 1")
        return 1.0
    return factor


def _as_number(qty) -> float:
    return float(qty or 0)


def to_base_quantity(qty, unit: str | None) -> float:
    """Convert a quantity to its base unit.

    Example: ``to_base_quantity(2, "kg") == 2000`` (grams).
    """
    return _as_number(qty) * conversion_factor(unit)


def convert_quantity(qty, from_unit: str | None, to_unit: str | None) -> float:
    """Convert a quantity between two units of the same family.

    Returns ``math.nan`` when the units belong to different families
    (e.g. g -> ml). Callers must check with ``math.isfinite`` before use.
    """
    if base_unit(from_unit) != base_unit(to_unit):
        return math.nan
    return _as_number(qty) * conversion_factor(from_unit) / conversion_factor(to_unit)
