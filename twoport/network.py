"""
.. module:: twoport.network
========================================
network (:mod:`twoport.network`)
========================================

An n-port network container and the conversions between its
representations.

The amplifier functions in :mod:`twoport.amplifiers` only ever consume
the scattering matrix of a :class:`Network`; whatever parameter set a
network was built from is converted to s-parameters here.

Network Class
===============

.. autosummary::
    :toctree: generated/

    Network

Network Representations
============================

.. autosummary::
    :toctree: generated/

    Network.s
    Network.z
    Network.y
    Network.a

Supporting Functions
======================

.. autosummary::
    :toctree: generated/

    s2z
    z2s
    s2y
    y2s
    s2a
    a2s
    passivity
    fix_param_shape
    fix_z0_shape

"""
from __future__ import annotations

import logging
import re
from typing import Callable, Sequence, get_args

import numpy as np

from . import mathFunctions as mf
from .constants import (
    ALMOST_ZERO,
    S_DEF_DEFAULT,
    S_DEFINITIONS,
    ZERO,
    NumberLike,
    PrimaryPropertiesT,
    SdefT,
)
from .frequency import Frequency

logger = logging.getLogger(__name__)


class Network:
    r"""
    An n-port electrical network.

    A network is defined by three quantities

    * a network parameter matrix (s, z, y or abcd)
    * the port reference impedances
    * the frequency points

    Internally the scattering matrix is the only parameter set stored;
    :attr:`z`, :attr:`y` and :attr:`a` are computed from it on access and
    converted back into it on assignment.

    =====================  =============================================
    Property               Meaning
    =====================  =============================================
    :attr:`s`              Scattering parameter matrix, shape `fxnxn`.
    :attr:`z0`             Port reference impedances, shape `fxn`.
    :attr:`frequency`      :class:`~twoport.frequency.Frequency` axis.
    =====================  =============================================

    Scalar projections are available as ``s_re``, ``s_im``, ``s_mag``,
    ``s_db`` and ``s_deg`` (and the same for z, y, a), single entries as
    ``s11``, ``s21``, etc.

    Examples
    --------
    >>> ntwk = Network(f=[1, 2, 3], f_unit='ghz', s=np.zeros((3, 2, 2)), z0=50)
    >>> ntwk = Network.from_z(z, f=f, z0=[50, 75])
    """
    PRIMARY_PROPERTIES: tuple[PrimaryPropertiesT, ...] = get_args(PrimaryPropertiesT)

    COMPONENT_FUNC_DICT: dict[str, Callable] = {
        're': np.real,
        'im': np.imag,
        'mag': np.abs,
        'db': mf.complex_2_db,
        'deg': mf.complex_2_degree,
    }

    def __init__(self, name: str | None = None, s_def: SdefT | None = None,
                 f_unit: str | None = None, **kwargs) -> None:
        r"""
        Network constructor.

        Parameters
        ----------
        name : str, optional
            Name of this Network.
        s_def : str, optional
            Scattering parameter definition: 'power', 'pseudo' or 'traveling'.
            Default is :data:`~twoport.constants.S_DEF_DEFAULT`.
        f_unit : str, optional
            unit of the `f` keyword. Default is 'hz'.
        \*\*kwargs :
            `s`, `z`, `y` or `a` (at most one of them), `z0`, and
            `f` or `frequency`.

        Raises
        ------
        ValueError
            if `s_def` is unknown, if more than one parameter set is given,
            or if the frequency and parameter lengths disagree.
        """
        if s_def is not None and s_def not in S_DEFINITIONS:
            raise ValueError(f's_def parameter should be one of {S_DEFINITIONS}, got {s_def!r}')
        self.s_def = s_def if s_def is not None else S_DEF_DEFAULT
        self.name = name

        params = [p for p in self.PRIMARY_PROPERTIES if p in kwargs]
        if len(params) > 1:
            raise ValueError(f'Multiple input parameters provided: {params}')

        # z0 is needed to convert z, y or abcd into s, and its shape follows s
        self._s = np.zeros((0, 0, 0), dtype=complex)
        if params:
            self._s = np.zeros_like(fix_param_shape(kwargs[params[0]]))
        self.z0 = kwargs.get('z0', 50)
        for p in params:
            setattr(self, p, kwargs[p])

        if 'f' in kwargs:
            self.frequency = Frequency.from_f(kwargs['f'], unit=f_unit or 'hz')
        elif 'frequency' in kwargs:
            self.frequency = kwargs['frequency']

        logger.debug('created %s with %d ports and %d points', self.name or 'network',
                     self.nports, self._s.shape[0])

    @classmethod
    def from_z(cls, z: NumberLike, *args, **kw) -> Network:
        """
        Create a Network from its impedance parameters.

        `z0` given in `kw` is used as the port reference impedance.

        Examples
        --------
        >>> ntwk = Network.from_z(np.array([[[10, 5], [5, 10]]]), f=[1e9])
        """
        return cls(*args, z=z, **kw)

    @classmethod
    def from_y(cls, y: NumberLike, *args, **kw) -> Network:
        """
        Create a Network from its admittance parameters.
        """
        return cls(*args, y=y, **kw)

    @classmethod
    def from_a(cls, a: NumberLike, *args, **kw) -> Network:
        """
        Create a two-port Network from its abcd parameters.
        """
        return cls(*args, a=a, **kw)

    def __str__(self) -> str:
        name = self.name if self.name else ''
        z0 = self.z0[0] if len(self.z0) else self.z0
        return f'{self.nports}-Port Network: \'{name}\', {self.frequency}, z0={z0}'

    def __repr__(self) -> str:
        return self.__str__()

    def __len__(self) -> int:
        """
        Number of frequency points.
        """
        return self._s.shape[0]

    def __getitem__(self, key: str | int | slice | Sequence) -> Network:
        """
        Slice the network along frequency.

        `key` may be an index, slice, boolean mask, or a band string
        understood by :meth:`~twoport.frequency.Frequency.band_slice`.

        Examples
        --------
        >>> ntwk['2-3ghz']
        >>> ntwk[ntwk.f > 1e9]
        """
        if isinstance(key, str):
            key = self.frequency.band_slice(key)
        elif isinstance(key, (int, np.integer)):
            key = slice(key, key + 1 if key != -1 else None)

        out = self.copy()
        out._s = out._s[key]
        out._z0 = out._z0[key]
        if len(self.frequency) == len(self):
            out._frequency = self.frequency[key]
        return out

    def __getattr__(self, name: str) -> np.ndarray:
        # only reached when normal lookup fails
        match = re.match(r'^([szya])(\d)(\d)$', name)
        if match:
            prop, m, n = match.group(1), int(match.group(2)), int(match.group(3))
            if not (1 <= m <= self.nports and 1 <= n <= self.nports):
                raise AttributeError(f'{name}: port index out of range for a {self.nports}-port')
            return getattr(self, prop)[:, m - 1, n - 1]

        match = re.match(r'^([szya])_(\w+)$', name)
        if match and match.group(2) in self.COMPONENT_FUNC_DICT:
            return self.COMPONENT_FUNC_DICT[match.group(2)](getattr(self, match.group(1)))

        raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")

    # PRIMARY PROPERTIES
    @property
    def s(self) -> np.ndarray:
        """
        Scattering parameter matrix.

        A complex :class:`numpy.ndarray` of shape `fxnxn`, where `f` is the
        frequency axis and `n` the number of ports. Indexing starts at 0,
        so s21 is ``s[:, 1, 0]``.
        """
        return self._s

    @s.setter
    def s(self, s: NumberLike) -> None:
        self._s = fix_param_shape(s)
        if self._z0.shape != self._s.shape[:2]:
            # reshaped network, keep the first reference impedance everywhere
            self.z0 = self._z0.flat[0] if self._z0.size else 50

    @property
    def z(self) -> np.ndarray:
        """
        Impedance parameter matrix, shape `fxnxn`.
        """
        return s2z(self._s, self.z0, s_def=self.s_def)

    @z.setter
    def z(self, value: NumberLike) -> None:
        self._s = z2s(fix_param_shape(value), self.z0, s_def=self.s_def)

    @property
    def y(self) -> np.ndarray:
        """
        Admittance parameter matrix, shape `fxnxn`.
        """
        return s2y(self._s, self.z0, s_def=self.s_def)

    @y.setter
    def y(self, value: NumberLike) -> None:
        self._s = y2s(fix_param_shape(value), self.z0, s_def=self.s_def)

    @property
    def a(self) -> np.ndarray:
        """
        abcd parameter matrix, shape `fx2x2`. Only defined for two-ports.

        The conversion uses power-waves. With a complex `z0` the power,
        pseudo and traveling definitions differ, so reading or setting
        `a` on such a network raises ValueError unless `s_def` is 'power'.
        """
        self._check_abcd_s_def()
        return s2a(self._s, self.z0)

    @a.setter
    def a(self, value: NumberLike) -> None:
        self._check_abcd_s_def()
        self._s = a2s(fix_param_shape(value), self.z0)

    def _check_abcd_s_def(self) -> None:
        if self.s_def != 'power' and np.any(self._z0.imag != 0):
            raise ValueError(f'abcd conversion is only implemented for power-waves with a complex z0, '
                             f'got s_def={self.s_def!r}')

    @property
    def z0(self) -> np.ndarray:
        """
        Port reference impedances, stored as a complex `fxn` array.

        Can be set with a number, a per-port vector, a per-frequency
        vector, or a full `fxn` array.
        """
        return self._z0

    @z0.setter
    def z0(self, z0: NumberLike) -> None:
        nfreqs, nports = self._s.shape[:2]
        self._z0 = fix_z0_shape(np.array(z0, dtype=complex), nfreqs, nports)

    @property
    def frequency(self) -> Frequency:
        """
        Frequency information for the network.

        A network built without frequencies has an empty
        :class:`~twoport.frequency.Frequency`.
        """
        try:
            return self._frequency
        except AttributeError:
            self._frequency = Frequency(0, 0, 0, unit='hz')
            return self._frequency

    @frequency.setter
    def frequency(self, new_frequency: Frequency | NumberLike) -> None:
        if not isinstance(new_frequency, Frequency):
            new_frequency = Frequency.from_f(new_frequency, unit=self.frequency.unit)
        if len(self) and len(new_frequency) != len(self):
            raise ValueError(f'Frequency has {len(new_frequency)} points but the network '
                             f'parameters have {len(self)}')
        self._frequency = new_frequency.copy()

    @property
    def f(self) -> np.ndarray:
        """
        The frequency vector for the network, in Hz.
        """
        return self.frequency.f

    # SECONDARY PROPERTIES
    @property
    def number_of_ports(self) -> int:
        """
        The number of ports the network has.
        """
        return self._s.shape[1]

    @property
    def nports(self) -> int:
        """
        The number of ports the network has.
        """
        return self.number_of_ports

    @property
    def passivity(self) -> np.ndarray:
        r"""
        Passivity metric :math:`S^H \cdot S`, shape `fxnxn`.

        The diagonal holds the total power leaving the network normalized
        to the power incident on one port. For a passive network every
        diagonal entry is at most one.
        """
        return passivity(self._s)

    def is_reciprocal(self, tol: float = ALMOST_ZERO) -> bool:
        """
        Test whether the network is reciprocal, S == S^T within `tol`.
        """
        return bool(np.all(np.abs(self._s - self._s.swapaxes(1, 2)) < tol))

    def copy(self) -> Network:
        """
        Return a copy of this Network that shares no arrays with it.
        """
        ntwk = Network(name=self.name, s_def=self.s_def, s=self._s.copy(), z0=self._z0.copy())
        if len(self.frequency):
            ntwk._frequency = self.frequency.copy()
        return ntwk


def s2z(s: np.ndarray, z0: NumberLike = 50, s_def: SdefT = S_DEF_DEFAULT) -> np.ndarray:
    r"""
    Convert scattering parameters to impedance parameters.

    For power-waves, Eq.(19) from [#Kurokawa]_:

    .. math::
        Z = F^{-1} (1 - S)^{-1} (S G + G^*) F

    where :math:`G = diag([Z_0])` and :math:`F = diag([1/2\sqrt{|Re(Z_0)|}])`

    For pseudo-waves, Eq.(74) from [#Marks]_:

    .. math::
        Z = (1 - U^{-1} S U)^{-1}  (1 + U^{-1} S U) G

    where :math:`U = \sqrt{Re(Z_0)}/|Z_0|`

    Parameters
    ----------
    s : complex array-like, shape `fxnxn`
        scattering parameters
    z0 : complex array-like or number
        port impedances.
    s_def : str
        'power', 'pseudo' or 'traveling'.

    Returns
    -------
    z : complex array-like
        impedance parameters

    References
    ----------
    .. [#Kurokawa] Kurokawa, Kaneyuki "Power waves and the scattering matrix",
        IEEE Transactions on Microwave Theory and Techniques, vol.13, iss.2, pp. 194-202, March 1965.

    .. [#Marks] Marks, R. B. and Williams, D. F. "A general waveguide circuit theory",
        Journal of Research of National Institute of Standard and Technology, vol.97, iss.5, pp. 533-562, 1992.
    """
    s = np.array(s, dtype=complex)
    Id, F, G, U = _port_matrices(s, z0)

    if s_def == 'power':
        z = np.linalg.solve(mf.nudge_eig((Id - s) @ F), (s @ G + np.conjugate(G)) @ F)
    elif s_def == 'pseudo':
        usu = np.linalg.solve(U, s @ U)
        z = np.linalg.solve(mf.nudge_eig(Id - usu), (Id + usu) @ G)
    elif s_def == 'traveling':
        sqrtz0 = np.sqrt(G)
        z = sqrtz0 @ np.linalg.solve(mf.nudge_eig(Id - s), (Id + s) @ sqrtz0)
    else:
        raise ValueError(f'Unknown s_def: {s_def}')
    return z


def z2s(z: np.ndarray, z0: NumberLike = 50, s_def: SdefT = S_DEF_DEFAULT) -> np.ndarray:
    r"""
    Convert impedance parameters to scattering parameters.

    For power-waves, Eq.(18) from Kurokawa:

    .. math::
        S = F (Z - G^*) (Z + G)^{-1} F^{-1}

    For pseudo-waves, Eq.(73) from Marks and Williams:

    .. math::
        S = U (Z - G) (Z + G)^{-1}  U^{-1}

    See :func:`s2z` for the notation.
    """
    z = np.array(z, dtype=complex)
    Id, F, G, U = _port_matrices(z, z0)

    if s_def == 'power':
        s = mf.rsolve(F @ (z + G), F @ (z - np.conjugate(G)))
    elif s_def == 'pseudo':
        s = mf.rsolve(U @ (z + G), U @ (z - G))
    elif s_def == 'traveling':
        sqrty0 = np.linalg.inv(np.sqrt(G)) if len(G) else G
        zn = sqrty0 @ z @ sqrty0
        s = mf.rsolve(zn + Id, zn - Id)
    else:
        raise ValueError(f'Unknown s_def: {s_def}')
    return s


def s2y(s: np.ndarray, z0: NumberLike = 50, s_def: SdefT = S_DEF_DEFAULT) -> np.ndarray:
    r"""
    Convert scattering parameters to admittance parameters.

    The inverse of :func:`s2z`, written so that no impedance matrix is
    inverted. For power-waves:

    .. math::
        Y = F^{-1} (S G + G^*)^{-1} (1 - S) F
    """
    s = np.array(s, dtype=complex)
    Id, F, G, U = _port_matrices(s, z0)

    if s_def == 'power':
        y = np.linalg.solve(mf.nudge_eig((s @ G + np.conjugate(G)) @ F), (Id - s) @ F)
    elif s_def == 'pseudo':
        usu = np.linalg.solve(U, s @ U)
        y = np.linalg.solve(mf.nudge_eig((Id + usu) @ G), Id - usu)
    elif s_def == 'traveling':
        sqrtz0 = np.sqrt(G)
        sqrty0 = np.linalg.inv(sqrtz0) if len(G) else G
        y = np.linalg.solve(mf.nudge_eig((Id + s) @ sqrtz0), (Id - s) @ sqrty0)
    else:
        raise ValueError(f'Unknown s_def: {s_def}')
    return y


def y2s(y: np.ndarray, z0: NumberLike = 50, s_def: SdefT = S_DEF_DEFAULT) -> np.ndarray:
    r"""
    Convert admittance parameters to scattering parameters.

    For power-waves, from Kurokawa:

    .. math::
        S = F (1 - G^* Y) (1 + G Y)^{-1} F^{-1}

    For pseudo-waves:

    .. math::
        S = U (1 + G Y)^{-1} (1 - G Y) U^{-1}
    """
    y = np.array(y, dtype=complex)
    Id, F, G, U = _port_matrices(y, z0)

    if s_def == 'power':
        s = mf.rsolve(F @ (Id + G @ y), F @ (Id - np.conjugate(G) @ y))
    elif s_def == 'pseudo':
        u_inv = np.linalg.inv(U) if len(U) else U
        s = U @ np.linalg.solve(Id + G @ y, (Id - G @ y) @ u_inv)
    elif s_def == 'traveling':
        sqrtz0 = np.sqrt(G)
        yn = sqrtz0 @ y @ sqrtz0
        s = mf.rsolve(Id + yn, Id - yn)
    else:
        raise ValueError(f'Unknown s_def: {s_def}')
    return s


def s2a(s: np.ndarray, z0: NumberLike = 50) -> np.ndarray:
    """
    Convert scattering parameters to abcd parameters (power-waves).

    Parameters
    ----------
    s : :class:`numpy.ndarray` (shape `fx2x2`)
        scattering parameter matrix
    z0: number or :class:`numpy.ndarray` (shape `fx2`)
        port impedances

    Returns
    -------
    abcd : np.ndarray (shape `fx2x2`)

    Raises
    ------
    IndexError
        if `s` does not describe a two-port.
    """
    nfreqs, nports, _ = s.shape
    if nports != 2:
        raise IndexError('abcd parameters are defined for 2-ports networks only')

    z0 = fix_z0_shape(z0, nfreqs, nports)
    z01, z02 = z0[:, 0], z0[:, 1]
    s11, s12, s21, s22 = s[:, 0, 0], s[:, 0, 1], s[:, 1, 0], s[:, 1, 1]
    denom = 2 * s21 * np.sqrt(z01.real * z02.real)
    in_side = z01.conj() + s11 * z01
    out_side = z02.conj() + s22 * z02

    a = np.empty_like(s, dtype=complex)
    a[:, 0, 0] = (in_side * (1 - s22) + s12 * s21 * z01) / denom
    a[:, 0, 1] = (in_side * out_side - s12 * s21 * z01 * z02) / denom
    a[:, 1, 0] = ((1 - s11) * (1 - s22) - s12 * s21) / denom
    a[:, 1, 1] = ((1 - s11) * out_side + s12 * s21 * z02) / denom
    return a


def a2s(a: np.ndarray, z0: NumberLike = 50) -> np.ndarray:
    """
    Convert abcd parameters to scattering parameters (power-waves).

    Raises
    ------
    IndexError
        if `a` does not describe a two-port.
    """
    nfreqs, nports, _ = a.shape
    if nports != 2:
        raise IndexError('abcd parameters are defined for 2-ports networks only')

    z0 = fix_z0_shape(z0, nfreqs, nports)
    z01, z02 = z0[:, 0], z0[:, 1]
    A, B, C, D = a[:, 0, 0], a[:, 0, 1], a[:, 1, 0], a[:, 1, 1]
    denom = A * z02 + B + C * z01 * z02 + D * z01
    root = np.sqrt(z01.real * z02.real)

    s = np.empty_like(a, dtype=complex)
    s[:, 0, 0] = (A * z02 + B - C * z01.conj() * z02 - D * z01.conj()) / denom
    s[:, 0, 1] = 2 * (A * D - B * C) * root / denom
    s[:, 1, 0] = 2 * root / denom
    s[:, 1, 1] = (-A * z02.conj() + B - C * z01 * z02.conj() + D * z01) / denom
    return s


def passivity(s: np.ndarray) -> np.ndarray:
    r"""
    Passivity metric for a multi-port network, :math:`S^H \cdot S`.
    """
    s = np.asarray(s)
    return np.conjugate(s.swapaxes(1, 2)) @ s


def _port_matrices(p: np.ndarray, z0: NumberLike) -> tuple[np.ndarray, ...]:
    """
    Per-frequency diagonal matrices used by the s/z/y conversions.

    Returns the identity, F = diag(1/2sqrt(Re z0)), G = diag(z0) and
    U = diag(sqrt(Re z0)/|z0|), each of the shape of `p`.
    """
    nfreqs, nports, _ = p.shape
    z0 = fix_z0_shape(z0, nfreqs, nports).astype(complex)
    # a purely reactive reference impedance would make F and U singular
    z0[z0.real == 0] += ZERO

    Id, F, G, U = (np.zeros_like(p, dtype=complex) for _ in range(4))
    np.einsum('ijj->ij', Id)[...] = 1.0
    np.einsum('ijj->ij', F)[...] = 1.0 / (2 * np.sqrt(z0.real))
    np.einsum('ijj->ij', G)[...] = z0
    np.einsum('ijj->ij', U)[...] = np.sqrt(z0.real) / np.abs(z0)
    return Id, F, G, U


def fix_param_shape(p: NumberLike) -> np.ndarray:
    """
    Broadcast `p` to the `(nfreqs, nports, nports)` parameter shape.

    Parameters
    ----------
    p : number, array-like
        p can be:
        * a number (one frequency, one port)
        * 1D array-like (many frequencies, one port)
        * 2D array-like (one frequency, many ports)
        * 3D array-like (many frequencies, many ports)

    Returns
    -------
    p : complex array of shape (nfreqs, nports, nports)

    Raises
    ------
    ValueError
        if the matrices are not square or `p` has more than 3 dimensions.
    """
    p = np.array(p, dtype=complex)
    if p.ndim == 0:
        return p.reshape(1, 1, 1)
    if p.ndim == 1:
        return p.reshape(-1, 1, 1)
    if p.shape[-1] != p.shape[-2]:
        raise ValueError('Input matrix must be square')
    if p.ndim == 2:
        return p.reshape(1, *p.shape)
    if p.ndim != 3:
        raise ValueError(f'Input array has too many dimensions. Shape: {p.shape}')
    return p


def fix_z0_shape(z0: NumberLike, nfreqs: int, nports: int) -> np.ndarray:
    """
    Broadcast a port impedance to the `(nfreqs, nports)` shape.

    Parameters
    ----------
    z0 : number, array-like
        z0 can be:
        * a number (same at all ports and frequencies)
        * an array-like of length == number ports.
        * an array-like of length == number frequency points.
        * the correct shape == (nfreqs, nports)
    nfreqs : int
        number of frequency points
    nports : int
        number of ports

    Returns
    -------
    z0 : array of shape (nfreqs, nports)

    Raises
    ------
    IndexError
        if `z0` can not be broadcast.

    Examples
    --------
    >>> fix_z0_shape(50, 201, 2).shape
    (201, 2)
    >>> fix_z0_shape([50, 25], 201, 2).shape
    (201, 2)
    """
    z0 = np.asarray(z0)
    if z0.shape == (nfreqs, nports):
        return z0.copy()
    if z0.ndim == 0:
        return np.full((nfreqs, nports), z0)
    if z0.ndim == 1 and len(z0) == nports:
        # per port, constant with frequency
        return np.tile(z0, (nfreqs, 1))
    if z0.ndim == 1 and len(z0) == nfreqs:
        # per frequency, same at every port
        return np.tile(z0[:, None], (1, nports))
    raise IndexError(f'z0 of shape {z0.shape} can not be broadcast to ({nfreqs}, {nports})')
