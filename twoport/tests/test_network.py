import logging
import unittest

import numpy as npy
import pytest
from numpy.testing import assert_almost_equal, assert_array_almost_equal, assert_array_equal

import twoport as tp
from twoport.constants import S_DEFINITIONS


class NetworkTestCase(unittest.TestCase):
    """
    Network construction, parameter conversions and slicing.
    """
    def setUp(self):
        self.f = [1, 2, 3]
        # tee of two 50 Ohm series arms and a 25 Ohm shunt arm
        self.tee_z = npy.tile(npy.array([[75, 25], [25, 75]], dtype=complex), (3, 1, 1))
        self.tee_a = npy.tile(npy.array([[3, 200], [0.04, 3]], dtype=complex), (3, 1, 1))
        self.series_a = npy.tile(npy.array([[1, 50], [0, 1]], dtype=complex), (3, 1, 1))

    def test_blank_network(self):
        ntwk = tp.Network()
        self.assertEqual(len(ntwk), 0)
        self.assertEqual(len(ntwk.frequency), 0)
        self.assertEqual(ntwk.s_def, tp.S_DEF_DEFAULT)

    def test_constructor_from_s(self):
        s = npy.zeros((3, 2, 2))
        ntwk = tp.Network(name='zeros', f=self.f, f_unit='ghz', s=s)
        self.assertEqual(ntwk.s.shape, (3, 2, 2))
        self.assertEqual(ntwk.nports, 2)
        self.assertEqual(ntwk.number_of_ports, 2)
        assert_array_equal(ntwk.f, npy.array(self.f) * 1e9)
        assert_array_equal(ntwk.z0, npy.full((3, 2), 50))
        self.assertEqual(ntwk.name, 'zeros')

    def test_constructor_with_frequency(self):
        freq = tp.Frequency(1, 3, 3, 'ghz')
        ntwk = tp.Network(frequency=freq, s=npy.zeros((3, 2, 2)))
        self.assertEqual(ntwk.frequency, freq)

    def test_constructor_invalid_s_def(self):
        with pytest.raises(ValueError):
            tp.Network(s_def='voltage', s=[0])

    def test_multiple_params_raise(self):
        with pytest.raises(ValueError, match='Multiple input parameters'):
            tp.Network(s=npy.zeros((3, 2, 2)), z=self.tee_z)

    def test_frequency_length_mismatch(self):
        with pytest.raises(ValueError):
            tp.Network(f=[1, 2], s=npy.zeros((3, 2, 2)))

    def test_series_impedance_from_a(self):
        ntwk = tp.Network.from_a(self.series_a, f=self.f, f_unit='ghz')
        assert_array_almost_equal(ntwk.s11, npy.full(3, 1 / 3))
        assert_array_almost_equal(ntwk.s21, npy.full(3, 2 / 3))
        assert_array_almost_equal(ntwk.s12, npy.full(3, 2 / 3))
        assert_array_almost_equal(ntwk.s22, npy.full(3, 1 / 3))
        assert_array_almost_equal(ntwk.a, self.series_a)

    def test_one_port_resistor(self):
        for s_def in S_DEFINITIONS:
            from_z = tp.Network.from_z(100, f=[1], s_def=s_def, z0=50)
            from_y = tp.Network.from_y(0.01, f=[1], s_def=s_def, z0=50)
            assert_almost_equal(from_z.s[0, 0, 0], 1 / 3)
            assert_almost_equal(from_y.s[0, 0, 0], 1 / 3)

    def test_z_and_a_agree(self):
        for s_def in S_DEFINITIONS:
            from_z = tp.Network.from_z(self.tee_z, f=self.f, s_def=s_def)
            from_a = tp.Network.from_a(self.tee_a, f=self.f, s_def=s_def)
            assert_array_almost_equal(from_z.s, from_a.s)
            self.assertTrue(from_z.is_reciprocal(tol=1e-9))

    def test_z_y_inverse(self):
        for s_def in S_DEFINITIONS:
            ntwk = tp.Network.from_z(self.tee_z, f=self.f, s_def=s_def)
            assert_array_almost_equal(ntwk.z, self.tee_z)
            assert_array_almost_equal(ntwk.y, npy.linalg.inv(self.tee_z))
            from_y = tp.Network.from_y(ntwk.y, f=self.f, s_def=s_def)
            assert_array_almost_equal(from_y.s, ntwk.s)

    def test_conversions_with_complex_z0(self):
        z0 = [50 + 10j, 25 - 5j]
        for s_def in S_DEFINITIONS:
            ntwk = tp.Network.from_z(self.tee_z, f=self.f, z0=z0, s_def=s_def)
            assert_array_almost_equal(ntwk.z, self.tee_z)
            assert_array_almost_equal(ntwk.y, npy.linalg.inv(self.tee_z))

    def test_abcd_round_trip(self):
        ntwk = tp.Network.from_z(self.tee_z, f=self.f, z0=[50, 75])
        assert_array_almost_equal(tp.a2s(tp.s2a(ntwk.s, ntwk.z0), ntwk.z0), ntwk.s)
        assert_array_almost_equal(ntwk.a, self.tee_a)

    def test_abcd_with_complex_z0(self):
        series = npy.tile(npy.array([[1, 25], [0, 1]], dtype=complex), (3, 1, 1))
        for s_def in ('pseudo', 'traveling'):
            with pytest.raises(ValueError):
                tp.Network.from_a(series, f=self.f, z0=50 + 30j, s_def=s_def)
            ntwk = tp.Network.from_y(npy.linalg.inv(self.tee_z), f=self.f, z0=50 + 30j, s_def=s_def)
            with pytest.raises(ValueError):
                ntwk.a
        ntwk = tp.Network.from_a(series, f=self.f, z0=50 + 30j, s_def='power')
        assert_array_almost_equal(ntwk.a, series)

    def test_abcd_requires_two_port(self):
        ntwk = tp.Network(f=[1], s=npy.zeros((1, 3, 3)))
        with pytest.raises(IndexError):
            ntwk.a

    def test_z0_shapes(self):
        s = npy.zeros((3, 2, 2))
        self.assertEqual(tp.Network(s=s, z0=50).z0.shape, (3, 2))
        assert_array_equal(tp.Network(s=s, z0=[50, 75]).z0[:, 1], [75, 75, 75])
        assert_array_equal(tp.Network(s=s, z0=[10, 20, 30]).z0[:, 0], [10, 20, 30])
        with pytest.raises(IndexError):
            tp.Network(s=s, z0=[10, 20, 30, 40])

    def test_fix_z0_shape(self):
        self.assertEqual(tp.fix_z0_shape(50, 201, 2).shape, (201, 2))
        self.assertEqual(tp.fix_z0_shape([50, 25], 201, 2).shape, (201, 2))
        z0 = npy.ones((5, 2))
        assert_array_equal(tp.fix_z0_shape(z0, 5, 2), z0)

    def test_fix_param_shape(self):
        self.assertEqual(tp.fix_param_shape(1).shape, (1, 1, 1))
        self.assertEqual(tp.fix_param_shape([1, 2, 3]).shape, (3, 1, 1))
        self.assertEqual(tp.fix_param_shape(npy.eye(2)).shape, (1, 2, 2))
        with pytest.raises(ValueError):
            tp.fix_param_shape(npy.zeros((3, 2, 3)))

    def test_s_setter_reshape_keeps_z0(self):
        ntwk = tp.Network(s=npy.zeros((3, 2, 2)), z0=75)
        ntwk.s = npy.zeros((4, 3, 3))
        assert_array_equal(ntwk.z0, npy.full((4, 3), 75))

    def test_getitem(self):
        ntwk = tp.Network(f=self.f, f_unit='ghz', s=self.tee_a[:, ::-1, :])
        self.assertEqual(len(ntwk[1]), 1)
        self.assertEqual(len(ntwk[-1]), 1)
        self.assertEqual(len(ntwk[:2]), 2)
        self.assertEqual(len(ntwk['2-3ghz']), 2)
        assert_array_equal(ntwk['2ghz'].f, [2e9])
        assert_array_equal(ntwk[ntwk.f > 1.5e9].f, [2e9, 3e9])
        assert_array_equal(ntwk[-1].s, ntwk.s[-1:])

    def test_getitem_is_a_copy(self):
        ntwk = tp.Network(f=self.f, s=npy.zeros((3, 2, 2)))
        sub = ntwk[:2]
        sub.s[:] = 1
        assert_array_equal(ntwk.s, 0)

    def test_getattr_projections(self):
        ntwk = tp.Network.from_a(self.series_a, f=self.f)
        assert_array_almost_equal(ntwk.s_mag[:, 1, 0], npy.full(3, 2 / 3))
        assert_array_almost_equal(ntwk.s_db[:, 0, 0], npy.full(3, 20 * npy.log10(1 / 3)))
        assert_array_almost_equal(ntwk.s_deg[:, 0, 0], 0)
        assert_array_almost_equal(ntwk.y_re, ntwk.y.real)
        with pytest.raises(AttributeError):
            ntwk.s33
        with pytest.raises(AttributeError):
            ntwk.s_foo

    def test_passivity(self):
        pad = tp.Network(s=npy.array([[[0, 0.5], [0.5, 0]]]))
        assert_array_almost_equal(pad.passivity, [[[0.25, 0], [0, 0.25]]])
        amp = tp.Network(s=npy.array([[[0, 0], [2, 0]]]))
        self.assertGreater(amp.passivity[0, 0, 0].real, 1)

    def test_copy(self):
        ntwk = tp.Network(name='tee', f=self.f, z=self.tee_z)
        cp = ntwk.copy()
        cp.s[:] = 0
        self.assertFalse(npy.all(ntwk.s == 0))
        self.assertEqual(cp.name, 'tee')
        self.assertEqual(cp.frequency, ntwk.frequency)

    def test_str(self):
        ntwk = tp.Network(name='tee', f=self.f, f_unit='ghz', z=self.tee_z)
        self.assertIn('2-Port Network', str(ntwk))
        self.assertIn('tee', repr(ntwk))

    def test_construction_is_logged(self):
        with self.assertLogs('twoport.network', level=logging.DEBUG) as cm:
            tp.Network(name='tee', f=self.f, z=self.tee_z)
        self.assertIn('created tee with 2 ports and 3 points', cm.output[0])


def test_unknown_s_def_conversion():
    s = npy.zeros((1, 2, 2))
    with pytest.raises(ValueError):
        tp.s2z(s, s_def='voltage')
    with pytest.raises(ValueError):
        tp.y2s(s, s_def='voltage')


def test_total_reflection_is_nudged():
    # open circuit, 1 - S is singular
    z = tp.s2z(npy.array([[[1]]], dtype=complex), z0=50)
    assert npy.isfinite(z).all()
    assert z[0, 0, 0].real > 1e6


def test_amplifier_fixture(fet):
    assert fet.nports == 2
    assert len(fet) == 2
    assert not fet.is_reciprocal()
