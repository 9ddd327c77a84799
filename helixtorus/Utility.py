import colorsys
import math
import numpy as np


def wrap_unit(t):
    # True modulo into [0, 1), negative inputs included.
    w = np.mod(t, 1.0)
    # np.mod(-1e-17, 1.0) rounds to 1.0
    return np.where(w >= 1.0, 0.0, w)


def wrap_unit_scalar(t: float) -> float:
    w = t % 1.0
    return 0.0 if w >= 1.0 else w


def wrap_distance(a, b):
    d = np.abs(a - b)
    return np.minimum(d, 1.0 - d)


def hsl_to_rgb(h: float, s: float, l: float):
    # colorsys takes hue, lightness, saturation in that order.
    return colorsys.hls_to_rgb(wrap_unit_scalar(h), l, s)


def hsl_to_rgb_array(h: np.ndarray, s: float, l: float) -> np.ndarray:
    h = wrap_unit(np.asarray(h, dtype=np.float64))

    q = l * (1.0 + s) if l <= 0.5 else l + s - l * s
    p = 2.0 * l - q

    def channel(tc):
        tc = wrap_unit(tc)
        return np.select(
            [tc < 1.0 / 6.0, tc < 0.5, tc < 2.0 / 3.0],
            [p + (q - p) * 6.0 * tc, np.full_like(tc, q), p + (q - p) * (2.0 / 3.0 - tc) * 6.0],
            default=p
        )

    return np.stack([
        channel(h + 1.0 / 3.0),
        channel(h),
        channel(h - 1.0 / 3.0)
    ], axis=-1)


def rotate_y(p: np.ndarray, angle: float) -> np.ndarray:
    c = math.cos(angle)
    s = math.sin(angle)
    return np.stack([
        p[..., 0] * c - p[..., 2] * s,
        p[..., 1],
        p[..., 0] * s + p[..., 2] * c
    ], axis=-1)


def rotate_x(p: np.ndarray, angle: float) -> np.ndarray:
    c = math.cos(angle)
    s = math.sin(angle)
    return np.stack([
        p[..., 0],
        p[..., 1] * c - p[..., 2] * s,
        p[..., 1] * s + p[..., 2] * c
    ], axis=-1)


def rotate_z(p: np.ndarray, angle: float) -> np.ndarray:
    c = math.cos(angle)
    s = math.sin(angle)
    return np.stack([
        p[..., 0] * c - p[..., 1] * s,
        p[..., 0] * s + p[..., 1] * c,
        p[..., 2]
    ], axis=-1)


def normalize(v: np.ndarray) -> np.ndarray:
    return v / np.linalg.norm(v)


def clamp(x, minimum, maximum):
    return max(minimum, min(x, maximum))
