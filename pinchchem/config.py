"""
PinchChem Configuration Management.
===================================

This module defines the tunable parameters of the PinchChem core.
The parameters are organized into the same "Layer Cake" as the rest of the
system: input signal -> interaction geometry -> chemistry -> timing -> UI.

! WARNING !
Changing the chemistry radii changes which drops bond, merge or cluster.
Changing PINCH_THRESHOLD affects the "feel" of every interaction immediately.
"""

# --- ELEMENT DEFINITIONS ---
# Order matters: clustering picks atoms per kind in this order.
ELEMENT_NAMES = {
    "C": "Carbon",
    "H": "Hydrogen",
    "O": "Oxygen",
}

# --- MASTER CONFIGURATION ---
CONFIG = {
    # =========================================================
    # LAYER 1: INPUT SIGNAL (The Pinch)
    # =========================================================
    "PINCH_THRESHOLD": 0.08,        # Thumb(4) <-> Index(8) distance, normalized
    "PINCH_REFRACTORY": 0.120,      # Seconds after a release before a new start counts
    "TRACKING_LOSS_RELEASE": None,  # Seconds without a hand before a forced release (None = never)

    # =========================================================
    # LAYER 2: INTERACTION GEOMETRY (Display Pixels)
    # =========================================================
    "VIEWPORT_WIDTH": 1280,
    "VIEWPORT_HEIGHT": 720,
    "ATOM_SIZE": 60,                # Loose atoms are 60x60 boxes
    "C2_FRAGMENT_SIZE": 240,
    "C3_FRAGMENT_SIZE": 260,
    "MOLECULE_SIZE": 240,

    # =========================================================
    # LAYER 3: CHEMISTRY RULES (The Referee)
    # =========================================================
    "MERGE_RADIUS": 70,             # C + C closer than this -> bond choice popup
    "C3_PAIR_RADIUS": 90,           # Two resting carbons closer than this form a pair
    "C3_CENTROID_RADIUS": 120,      # Third carbon must land this close to the pair centroid
    "CLUSTER_RADIUS": 60,           # Proximity graph edge length for recognition

    # =========================================================
    # LAYER 4: TIMING
    # =========================================================
    "BOND_CHOICE_TIMEOUT": 9.0,     # Seconds before an unanswered popup auto-cancels

    # =========================================================
    # LAYER 5: UI LAYOUT (Hit-Test Targets)
    # =========================================================
    "PALETTE_ORIGIN": (20, 120),    # Top-left of the first palette entry
    "PALETTE_ENTRY_SIZE": (80, 80),
    "PALETTE_GAP": 16,
    "CLEAR_BUTTON": (20, 20, 120, 44),  # x, y, w, h
    "POPUP_SIZE": (240, 80),
    "POPUP_BUTTON_HEIGHT": 36,
    "POPUP_CANCEL_WIDTH": 56,
    "POPUP_MARGIN": 8,

    # =========================================================
    # HOST APPLICATION
    # =========================================================
    "TARGET_FPS": 30,               # Hardware limit for Camera
    "CAMERA_INDEX": 0,              # OpenCV device ID
    "MIN_DETECTION_CONFIDENCE": 0.5,
    "MIN_TRACKING_CONFIDENCE": 0.5,
}
