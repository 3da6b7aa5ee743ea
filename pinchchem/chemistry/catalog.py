"""
PinchChem Molecule Catalog.
==========================

The fixed, ordered list of molecules the recognizer knows, plus the
lookup tables for bond intermediates.

! WARNING !
CATALOG order is load-bearing. Matching is "at least these counts", so a
bigger molecule listed first wins over a smaller one it contains
(Propanol C3H8O is checked before Propane C3H8).
"""
from typing import Dict, Optional, Tuple

from pinchchem.core.types import BondMultiplicity, CatalogEntry, ElementKind, FragmentKind, Point2D

C, H, O = ElementKind.C, ElementKind.H, ElementKind.O


def _entry(name: str, formula: str, c: int = 0, h: int = 0, o: int = 0) -> CatalogEntry:
    counts = tuple((k, n) for k, n in ((C, c), (H, h), (O, o)) if n > 0)
    return CatalogEntry(name, formula, counts)


CATALOG = (
    _entry("Propanol", "C3H8O", c=3, h=8, o=1),
    _entry("Propane", "C3H8", c=3, h=8),
    _entry("Acetone", "C3H6O", c=3, h=6, o=1),
    _entry("Ethanol", "C2H6O", c=2, h=6, o=1),
    _entry("Acetaldehyde", "C2H4O", c=2, h=4, o=1),
    _entry("Formaldehyde", "CH2O", c=1, h=2, o=1),
    _entry("Methane", "CH4", c=1, h=4),
    _entry("Carbon Dioxide", "CO2", c=1, o=2),
    _entry("Water", "H2O", h=2, o=1),
)

# --- BOND INTERMEDIATES ---
# (kind, bond) -> hydrogens required to saturate
REQUIRED_HYDROGEN: Dict[Tuple[FragmentKind, Optional[BondMultiplicity]], int] = {
    (FragmentKind.C2, BondMultiplicity.SINGLE): 6,
    (FragmentKind.C2, BondMultiplicity.DOUBLE): 4,
    (FragmentKind.C2, BondMultiplicity.TRIPLE): 2,
    (FragmentKind.C3, None): 6,
}

# (kind, bond) -> (name, formula) of the saturated product
FRAGMENT_PRODUCTS: Dict[Tuple[FragmentKind, Optional[BondMultiplicity]], Tuple[str, str]] = {
    (FragmentKind.C2, BondMultiplicity.SINGLE): ("Ethane", "C2H6"),
    (FragmentKind.C2, BondMultiplicity.DOUBLE): ("Ethene", "C2H4"),
    (FragmentKind.C2, BondMultiplicity.TRIPLE): ("Ethyne", "C2H2"),
    (FragmentKind.C3, None): ("Cyclopropane", "C3H6"),
}

FRAGMENT_LABELS = {
    (FragmentKind.C2, BondMultiplicity.SINGLE): "C–C (single)",
    (FragmentKind.C2, BondMultiplicity.DOUBLE): "C=C (double)",
    (FragmentKind.C2, BondMultiplicity.TRIPLE): "C≡C (triple)",
    (FragmentKind.C3, None): "C3 ring",
}

# Hydrogen placement around each carbon of a C2 intermediate (px from carbon center).
# Carbon 0 sits left of center, carbon 1 right of it.
HYDROGEN_OFFSETS = {
    BondMultiplicity.SINGLE: (
        (Point2D(-36, -40), Point2D(-70, 0), Point2D(-36, 40)),
        (Point2D(36, -40), Point2D(70, 0), Point2D(36, 40)),
    ),
    BondMultiplicity.DOUBLE: (
        (Point2D(-64, -20), Point2D(-64, 20)),
        (Point2D(64, -20), Point2D(64, 20)),
    ),
    BondMultiplicity.TRIPLE: (
        (Point2D(-100, 0),),
        (Point2D(100, 0),),
    ),
}

C2_CARBON_SPACING = 40  # Each carbon sits this far from the fragment center
