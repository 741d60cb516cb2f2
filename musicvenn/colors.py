import colorsys
from typing import Callable, Dict, Iterable, Mapping, Sequence, Union

import numpy as np
from matplotlib.colors import to_hex, to_rgb

MixingCallback = Callable[[Sequence[np.ndarray]], np.ndarray]
ColorLike = Union[str, tuple]


def _rgb(color: ColorLike) -> np.ndarray:
    """Convert any Matplotlib color into an RGB float array in [0,1]."""
    return np.array(to_rgb(color), float)


def _hex(rgb: np.ndarray) -> str:
    return to_hex(np.clip(np.asarray(rgb, float), 0.0, 1.0))


def text_color_for(rgb: np.ndarray) -> str:
    """Black or white, whichever reads better on `rgb`."""
    lum = 0.299 * rgb[0] + 0.587 * rgb[1] + 0.114 * rgb[2]
    return "white" if lum < 0.5 else "black"


def _stack(colors: Sequence[np.ndarray]) -> np.ndarray:
    return np.stack([np.asarray(c, float) for c in colors], axis=0)


def mix_average(colors: Sequence[np.ndarray]) -> np.ndarray:
    if not colors:
        return np.zeros(3, float)
    return _stack(colors).mean(axis=0)


def mix_subtractive(colors: Sequence[np.ndarray]) -> np.ndarray:
    """Paint-like mixing: overlaps darken with every set that joins."""
    if not colors:
        return np.zeros(3, float)
    absorbed = np.prod(1.0 - _stack(colors), axis=0)
    return np.abs(1.0 - absorbed * len(colors) ** 0.25)


def mix_hue_average(colors: Sequence[np.ndarray], n: int) -> np.ndarray:
    """
    Average hue; saturation and lightness drop as more of the `n` sets
    overlap, so the triple intersection is the darkest region.
    """
    if not colors:
        return np.zeros(3, float)
    h, _, _ = colorsys.rgb_to_hls(*_stack(colors).mean(axis=0))
    share = len(colors) / float(n)
    sat = float(np.clip(1.5 - share, 0.0, 1.0))
    light = float(np.clip(1.0 - share + 0.5 / n, 0.35, 0.85))
    return np.array(colorsys.hls_to_rgb(h, light, sat), float)


def mix_alpha_stack(colors: Sequence[np.ndarray], alpha: float = 0.5) -> np.ndarray:
    """Lay the colors over each other in label order at a fixed opacity."""
    if not colors:
        return np.zeros(3, float)
    alpha = min(1.0, max(0.0, float(alpha)))
    mixed = np.asarray(colors[0], float)
    for color in colors[1:]:
        mixed = mixed * (1.0 - alpha) + np.asarray(color, float) * alpha
    return mixed


MIXERS: Dict[str, Callable[..., np.ndarray]] = {
    "average": mix_average,
    "subtractive": mix_subtractive,
    "hue_average": mix_hue_average,
    "alpha_stack": mix_alpha_stack,
}


def resolve_color_mixing(color_mixing: Union[str, MixingCallback], n: int) -> MixingCallback:
    """Turn a mixer name (or a callable) into a callback colors -> RGB."""
    if callable(color_mixing):
        return color_mixing
    if not isinstance(color_mixing, str):
        raise TypeError("color_mixing must be either a string or a callable.")
    if color_mixing not in MIXERS:
        raise ValueError(f"Unrecognized color_mixing {color_mixing!r}; choose from {sorted(MIXERS)}.")
    if color_mixing == "hue_average":
        return lambda colors: mix_hue_average(colors, n)
    return MIXERS[color_mixing]


def region_color(
    fills: Mapping[str, np.ndarray],
    members: Iterable[str],
    layout: Sequence[str],
    mixer: MixingCallback,
) -> np.ndarray:
    """Fill of the region whose members are `members`, mixed in layout order."""
    members = set(members)
    mixed = np.asarray(mixer([fills[label] for label in layout if label in members]), float)
    if mixed.shape != (3,):
        raise ValueError("color_mixing callback must return an RGB array of shape (3,).")
    return mixed
