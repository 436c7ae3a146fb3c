"""
Deterministic value noise and fractal Brownian motion.

These are shader-style scalar functions evaluated once per cell centroid.
They also accept numpy arrays so whole rasters can be shaded at once;
scalar input gives a Python float back.

- hash2: sin-based lattice hash in [0, 1)
- value_noise: bilinear blend of the four surrounding lattice hashes
- fbm: octave sum of value noise with a slightly detuned lacunarity
"""

import numpy as np

HASH_X = 127.1
HASH_Y = 311.7
HASH_SCALE = 43758.5453

# 2.02 instead of 2 keeps octave lattices from lining up
LACUNARITY = 2.02
GAIN = 0.5


def _out(value):
    if np.ndim(value) == 0:
        return float(value)
    return value


def fract(x):
    return _out(x - np.floor(x))


def mix(a, b, t):
    return _out(a * (1 - t) + b * t)


def clamp(x, lo, hi):
    return _out(np.minimum(np.maximum(x, lo), hi))


def smoothstep(edge0, edge1, x):
    t = clamp((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return _out(t * t * (3 - 2 * t))


def hash2(x, y):
    """Pseudo-random value in [0, 1) for a 2D input. Not cryptographic."""
    return fract(np.sin(x * HASH_X + y * HASH_Y) * HASH_SCALE)


def value_noise(x, y):
    """
    Smooth 2D value noise in [0, 1).

    Hashes the four integer lattice corners around (x, y) and blends them
    with the cubic weight 3u^2 - 2u^3.
    """
    xi = np.floor(x)
    yi = np.floor(y)
    xf = x - xi
    yf = y - yi
    u = xf * xf * (3 - 2 * xf)
    v = yf * yf * (3 - 2 * yf)

    n00 = hash2(xi, yi)
    n10 = hash2(xi + 1, yi)
    n01 = hash2(xi, yi + 1)
    n11 = hash2(xi + 1, yi + 1)

    nx0 = mix(n00, n10, u)
    nx1 = mix(n01, n11, u)
    return mix(nx0, nx1, v)


# Name used by shader code
noise2 = value_noise


def fbm(x, y, octaves: int = 4):
    """Fractal Brownian motion: ``octaves`` layers of value noise.

    Frequency starts at 1 and grows by 2.02 per octave; amplitude starts at
    0.5 and halves. The result lies in [0, 1 - 0.5**octaves).
    """
    value = 0.0
    amplitude = 0.5
    frequency = 1.0
    for _ in range(octaves):
        value = value + amplitude * value_noise(x * frequency, y * frequency)
        frequency *= LACUNARITY
        amplitude *= GAIN
    return _out(value)


def fbm_field(width: int, height: int, scale: float = 1.0,
              t: float = 0.0, octaves: int = 4,
              x0: float = 0.0, y0: float = 0.0) -> np.ndarray:
    """
    Evaluate fBm over a pixel grid whose top-left pixel sits at (x0, y0).

    Uses the same time drift as the noise shading mode, so a pixel at a
    cell centroid gets the value that cell is shaded with.

    Returns:
        Array of shape (height, width)
    """
    xs = (x0 + np.arange(width, dtype=np.float64)) / scale + t * 0.3
    ys = (y0 + np.arange(height, dtype=np.float64)) / scale + t * 0.27
    gx, gy = np.meshgrid(xs, ys)
    return np.asarray(fbm(gx, gy, octaves))
