"""SH coefficient layout fix-up: planar (15 x, 15 y, 15 z) to interleaved xyz triples."""

from __future__ import annotations

import numpy as np

from splatasset.utils.io import SH_COUNT

# Floats preceding the SH block in each record: pos, normal, f_dc.
SH_START = 9


def deinterleave_sh(floats: np.ndarray) -> np.ndarray:
    """Rewrite the SH block of every record in place.

    Args:
        floats: (N, record_floats) float32 view of the raw records, writable.

    Returns:
        The same array, with floats[:, 9:54] holding (x, y, z) per coefficient.
    """
    block = floats[:, SH_START:SH_START + SH_COUNT * 3]
    planar = block.reshape(-1, 3, SH_COUNT)
    block[:] = np.ascontiguousarray(planar.transpose(0, 2, 1)).reshape(-1, SH_COUNT * 3)
    return floats
