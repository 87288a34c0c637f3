"""
.. currentmodule:: twoport.constants

========================================
constants (:mod:`twoport.constants`)
========================================

Numerical guards, type aliases and package-wide defaults.

.. data:: ZERO

    0 + epsilon where epsilon is small. Used for numerical comparisons.

.. data:: ALMOST_ZERO

    Tolerance used by the network property tests (reciprocity, etc).

.. data:: S_DEFINITIONS

    S-parameter definition labels:
        - 'power' for power-waves definition,
        - 'pseudo' for pseudo-waves definition.
        - 'traveling' for the traveling-waves definition.

.. data:: S_DEF_DEFAULT

    Default S-parameter definition: 'power', for power-wave definition.

.. data:: AVAILABLE_GAIN_DEFINITIONS

    How the output reflection term enters the available power gain
    denominator :math:`1 - X`:
        - 'magnitude' uses :math:`X = |\\Gamma_{out}|^2` (real result),
        - 'square' uses :math:`X = \\Gamma_{out}^2` (complex result).

.. data:: AVAILABLE_GAIN_DEF_DEFAULT

    Default available power gain definition: 'magnitude'.

"""
from __future__ import annotations

from numbers import Number
from typing import Literal, Sequence, Union, get_args

import numpy as np

ALMOST_ZERO = 1e-12
"""
Very tiny but not zero value to handle mathematical singularities.
"""

ZERO = 1e-4
"""
A very small values, often used for numerical comparisons.
"""

LOG_OF_NEG = -100
"""
Very low but minus infinity value for numerical purposes.
"""

EIG_COND = 1e-9
"""
Eigenvalue ratio compared to the maximum eigenvalue in :meth:`~twoport.mathFunctions.nudge_eig`.
"""

EIG_MIN = 1e-12
"""
Minimum eigenvalue used in :meth:`~twoport.mathFunctions.nudge_eig`
"""

# S-parameter definition labels and default definition
SdefT = Literal["power", "pseudo", "traveling"]
S_DEFINITIONS: list[SdefT] = list(get_args(SdefT))
S_DEF_DEFAULT = 'power'

# Output reflection term of the available power gain
AvailableGainDefT = Literal["magnitude", "square"]
AVAILABLE_GAIN_DEFINITIONS: list[AvailableGainDefT] = list(get_args(AvailableGainDefT))
AVAILABLE_GAIN_DEF_DEFAULT = 'magnitude'

FrequencyUnitT = Literal["Hz", "kHz", "MHz", "GHz", "THz"]
FREQ_UNITS: dict[FrequencyUnitT, float] = {"Hz": 1.0, "kHz": 1e3, "MHz": 1e6, "GHz": 1e9, "THz": 1e12}

SweepTypeT = Literal["lin", "log"]
PrimaryPropertiesT = Literal['s', 'z', 'y', 'a']

NumberLike = Union[Number, Sequence[Number], np.ndarray]
