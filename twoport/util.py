"""
.. currentmodule:: twoport.util

========================================
util (:mod:`twoport.util`)
========================================

Index helpers for working on sampled axes.

.. autosummary::
   :toctree: generated/

   find_nearest_index
   slice_domain

"""
from __future__ import annotations

from typing import Sequence

import numpy as np


def find_nearest_index(array: np.ndarray, value: float) -> int:
    """
    Index of the element of `array` numerically closest to `value`.

    Parameters
    ----------
    array : numpy.ndarray
        array we are searching for a value in
    value : float
        value to search for

    Returns
    -------
    found_index : int
    """
    return int(np.abs(np.asarray(array) - value).argmin())


def slice_domain(x: np.ndarray, domain: Sequence[float]) -> slice:
    """
    Slice of `x` spanning the closest samples to the `domain` edges.

    Examples
    --------
    >>> x = np.linspace(0, 10, 101)
    >>> x[slice_domain(x, (2, 6))]
    """
    start = find_nearest_index(x, domain[0])
    stop = find_nearest_index(x, domain[1])
    return slice(start, stop + 1)
