import unittest

import numpy as npy
import pytest
from numpy.testing import assert_almost_equal, assert_array_almost_equal

import twoport as tp
from twoport.constants import LOG_OF_NEG


class TestUnitConversions(unittest.TestCase):
    """
    Test unit-conversion functions
    """
    def test_complex_2_magnitude(self):
        """
        Test complex to magnitude conversion with:
            5 = 3 + 4j
        """
        assert_almost_equal(tp.complex_2_magnitude(3+4j), 5.0)

    def test_complex_2_db(self):
        """
        Test complex to db conversion with:
            20 [dB] = 20 * log10(6+8j)
        """
        assert_almost_equal(tp.complex_2_db(6+8j), 20.0)

    def test_complex_2_db10(self):
        """
        Test complex to db10 conversion with:
            10 [dB] = 10 * log10(6+8j)
        """
        assert_almost_equal(tp.complex_2_db10(6+8j), 10.0)

    def test_complex_2_degree(self):
        """
        Test complex to degree conversion with:
            90 = angle(0 + 1j)
        """
        assert_almost_equal(tp.complex_2_degree(0+1j), 90.0)

    def test_magnitude_2_db(self):
        assert_almost_equal(tp.magnitude_2_db(10), 20)
        assert_almost_equal(tp.mag_2_db10(10), 10)
        # negative magnitudes are clipped, zero is minus infinity
        with npy.errstate(invalid='ignore', divide='ignore'):
            assert tp.mag_2_db(-1) == LOG_OF_NEG
            assert tp.mag_2_db(0) == -npy.inf
            assert npy.isnan(tp.mag_2_db(-1, zero_nan=False))

    def test_db_2_magnitude(self):
        assert_almost_equal(tp.db_2_magnitude(20), 10)
        assert_almost_equal(tp.db_2_mag(-6.0206), 0.5, decimal=4)
        assert_almost_equal(tp.db10_2_mag(10), 10)

    def test_magdeg_2_reim(self):
        assert_almost_equal(tp.magdeg_2_reim(2, 90), 2j)
        assert_array_almost_equal(tp.magdeg_2_reim(npy.array([1, 1]), npy.array([0, 180])), [1, -1])


class TestLinearAlgebra(unittest.TestCase):
    def setUp(self):
        rng = npy.random.default_rng(0)
        self.A = rng.standard_normal((4, 3, 3)) + 1j * rng.standard_normal((4, 3, 3))
        self.B = rng.standard_normal((4, 3, 3)) + 1j * rng.standard_normal((4, 3, 3))

    def test_rsolve(self):
        x = tp.rsolve(self.A, self.B)
        assert_array_almost_equal(x @ self.A, self.B)
        assert_array_almost_equal(x, self.B @ npy.linalg.inv(self.A))

    def test_nudge_eig_keeps_regular_matrices(self):
        npy.testing.assert_array_equal(tp.nudge_eig(self.A), self.A)

    def test_nudge_eig_singular(self):
        mat = npy.array([[[1, 1], [1, 1]]], dtype=complex)
        nudged = tp.nudge_eig(mat)
        self.assertGreater(npy.abs(npy.linalg.det(nudged[0])), 0)
        assert_array_almost_equal(nudged, mat)

    def test_nudge_eig_empty(self):
        mat = npy.zeros((0, 2, 2), dtype=complex)
        assert tp.nudge_eig(mat).shape == (0, 2, 2)


@pytest.mark.parametrize('gain, db', [(1, 0), (100, 20), (0.5, -3.0103)])
def test_gain_db_round_trip(gain, db):
    assert_almost_equal(tp.complex_2_db10(gain), db, decimal=4)
    assert_almost_equal(tp.db10_2_mag(db), gain, decimal=4)
