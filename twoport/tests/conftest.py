import numpy as np
import pytest

import twoport as tp


@pytest.fixture()
def fet() -> tp.Network:
    """
    GaAs FET at two bias/frequency points: potentially unstable at
    1.9 GHz, unconditionally stable at 4 GHz.
    """
    s = np.array([
        [[tp.magdeg_2_reim(0.869, -159), tp.magdeg_2_reim(0.031, -9)],
         [tp.magdeg_2_reim(4.250, 61), tp.magdeg_2_reim(0.507, -117)]],
        [[tp.magdeg_2_reim(0.72, -116), tp.magdeg_2_reim(0.03, 57)],
         [tp.magdeg_2_reim(2.60, 76), tp.magdeg_2_reim(0.73, -54)]],
    ])
    return tp.Network(name='fet', f=[1.9, 4.0], f_unit='ghz', s=s, z0=50)


@pytest.fixture()
def attenuator() -> tp.Network:
    """
    Matched reciprocal 6 dB pad over three points.
    """
    t = 0.5
    s = np.tile(np.array([[0, t], [t, 0]], dtype=complex), (3, 1, 1))
    return tp.Network(name='pad', f=[1, 2, 3], f_unit='ghz', s=s, z0=50)
