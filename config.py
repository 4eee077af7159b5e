"""
config.py — Load, save, and validate AR overlay configuration.
"""

import json
import logging
import math
import os

log = logging.getLogger("echoes.config")

CONFIG_FILE = "ar_config.json"

DEFAULT_CONFIG = {
    # --- CAMERA / VIEWPORT ---
    "camera_hfov_deg": 60.0,        # horizontal field of view of the preview
    "viewport_w": 390,              # pixels
    "viewport_h": 844,

    # --- PROJECTION ---
    "near_far_threshold_m": 25.0,   # closer than this → "close by" strip
    "location_match_tol_deg": 0.05, # coarse lat/lon box gate (~5 km)
    "scale_cap": 1.0,
    "scale_numerator": 30.0,        # scale = numerator / distance
    "marker_half_width_px": 25.0,
    "marker_anchor_frac": 0.75,     # vertical anchor as fraction of viewport_h

    # --- HEADING ---
    "heading_offset_deg": 0.0,      # mounting correction added to raw heading
    "heading_smoothing": 0.0,       # 0 = overwrite, (0,1) = circular EMA weight
    "heading_update_interval_ms": 100,

    # --- LOCATION PROVIDER HINTS ---
    "location_time_interval_s": 10.0,
    "location_distance_interval_m": 1.0,

    # --- MEDIA ---
    "media_page_size": 10,
    "media_file": "",               # optional JSON list of assets for the CLI

    # --- REVISIT ---
    "revisit_tol_deg": 0.01,
    "revisit_cooldown_s": 600.0,

    # --- OUTPUT ---
    "projection_log_enable": False,
    "log_dir": "logs",
    "log_level": "INFO",
}


def load_config(path: str = CONFIG_FILE) -> dict:
    if not os.path.exists(path):
        save_config(DEFAULT_CONFIG, path)
        log.info("Created default config at %s", path)

    with open(path, "r") as f:
        cfg = json.load(f)

    # Merge any missing keys from defaults
    updated = False
    for k, v in DEFAULT_CONFIG.items():
        if k not in cfg:
            cfg[k] = v
            updated = True

    if updated:
        save_config(cfg, path)

    return cfg


def save_config(cfg: dict, path: str = CONFIG_FILE):
    with open(path, "w") as f:
        json.dump(cfg, f, indent=4)


def set_param(cfg: dict, key: str, value: str, path: str = CONFIG_FILE) -> tuple[bool, str]:
    """
    Parse and set a config value from a CLI string.
    Returns (success, message).
    """
    if key not in DEFAULT_CONFIG:
        return False, f"Unknown key: {key}. Valid keys: {list(DEFAULT_CONFIG.keys())}"

    original = DEFAULT_CONFIG[key]
    try:
        if isinstance(original, bool):
            typed_val = value.lower() in ("true", "1", "yes")
        elif isinstance(original, int):
            typed_val = int(value)
        elif isinstance(original, float):
            typed_val = float(value)
        else:
            typed_val = value
    except ValueError:
        return False, f"Could not cast '{value}' to {type(original).__name__}"

    candidate = dict(cfg)
    candidate[key] = typed_val
    errors = validate_config(candidate)
    if errors:
        return False, "; ".join(errors)

    cfg[key] = typed_val
    save_config(cfg, path)
    return True, f"Set {key} = {typed_val}"


def validate_config(cfg: dict) -> list[str]:
    """Return a list of problems; empty means usable."""
    errors = []

    def positive(key):
        v = cfg.get(key, DEFAULT_CONFIG[key])
        if not isinstance(v, (int, float)) or not math.isfinite(v) or v <= 0:
            errors.append(f"{key} must be > 0 (got {v!r})")

    for key in ("viewport_w", "viewport_h", "near_far_threshold_m",
                "location_match_tol_deg", "scale_cap", "scale_numerator",
                "revisit_tol_deg", "media_page_size"):
        positive(key)

    fov = cfg.get("camera_hfov_deg", DEFAULT_CONFIG["camera_hfov_deg"])
    if not isinstance(fov, (int, float)) or not 0 < fov <= 360:
        errors.append(f"camera_hfov_deg must be in (0, 360] (got {fov!r})")

    alpha = cfg.get("heading_smoothing", DEFAULT_CONFIG["heading_smoothing"])
    if not isinstance(alpha, (int, float)) or not 0 <= alpha < 1:
        errors.append(f"heading_smoothing must be in [0, 1) (got {alpha!r})")

    frac = cfg.get("marker_anchor_frac", DEFAULT_CONFIG["marker_anchor_frac"])
    if not isinstance(frac, (int, float)) or not 0 <= frac <= 1:
        errors.append(f"marker_anchor_frac must be in [0, 1] (got {frac!r})")

    if cfg.get("marker_half_width_px", 0) < 0:
        errors.append("marker_half_width_px must be >= 0")
    if cfg.get("revisit_cooldown_s", 0) < 0:
        errors.append("revisit_cooldown_s must be >= 0")

    return errors
