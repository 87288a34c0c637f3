"""
.. module:: twoport.amplifiers
========================================
amplifiers (:mod:`twoport.amplifiers`)
========================================

Figures of merit of a two-port network seen as an amplifier: reflection
coefficients at its ports, power gains for given terminations, and
stability tests.

Every function takes the two-port either as a
:class:`~twoport.network.Network` or as a raw scattering matrix of shape
`fx2x2`, and returns a new :class:`numpy.ndarray` with one value per
frequency point. Source and load terminations are reflection coefficients
given per frequency point (or as a single number used at every point, or
as a one-port :class:`~twoport.network.Network`).

The formulas are applied independently at each frequency. Denominators
that vanish are not guarded: the result at that point is ``inf`` or
``nan``.

Reflection Coefficients
=======================

.. autosummary::
    :toctree: generated/

    gamma_in
    gamma_out

Power Gains
===========

.. autosummary::
    :toctree: generated/

    power_gain
    available_power_gain
    transducer_power_gain
    max_stable_gain
    max_gain
    unilateral_gain
    gain_to_db

Stability
=========

.. autosummary::
    :toctree: generated/

    mu_test
    mu_factor
    mu_prime_factor
    rollett_stability
    determinant
    stability_circle

Misc
====

.. autosummary::
    :toctree: generated/

    s_parameters

"""
from __future__ import annotations

import logging

import numpy as np

from . import mathFunctions as mf
from .constants import (
    AVAILABLE_GAIN_DEF_DEFAULT,
    AVAILABLE_GAIN_DEFINITIONS,
    AvailableGainDefT,
    NumberLike,
)
from .network import Network, fix_param_shape

logger = logging.getLogger(__name__)


def s_parameters(ntwk: Network | NumberLike) -> np.ndarray:
    """
    Fresh copy of the scattering matrix of a two-port.

    Every analysis function works on such a copy, so the network passed
    in is never modified and may be changed by the caller between calls.

    Parameters
    ----------
    ntwk : :class:`~twoport.network.Network` or complex array-like
        a two-port network, or its s-matrix of shape `fx2x2`
        (a single `2x2` matrix is one frequency point)

    Returns
    -------
    s : complex :class:`numpy.ndarray` of shape `fx2x2`

    Raises
    ------
    ValueError
        if `ntwk` is not a two-port.
    """
    if isinstance(ntwk, Network):
        s = np.array(ntwk.s, dtype=complex)
    else:
        s = fix_param_shape(ntwk)

    if s.shape[1:] != (2, 2):
        raise ValueError(f'Amplifier figures of merit are only defined for two ports, '
                         f'got s-parameters of shape {s.shape}')
    return s


def gamma_in(ntwk: Network | NumberLike, gamma_l: Network | NumberLike) -> np.ndarray:
    r"""
    Input reflection coefficient of a two-port terminated at port 2.

    .. math::

            \Gamma_{in} = S_{11} + \frac{S_{12} S_{21} \Gamma_L}{1 - S_{22} \Gamma_L}

    Parameters
    ----------
    ntwk : :class:`~twoport.network.Network` or complex array-like
        the two-port
    gamma_l : complex array-like, number or one-port Network
        reflection coefficient seen looking out of port 2 (the load)

    Returns
    -------
    gamma_in : complex :class:`numpy.ndarray` of shape `f`

    Raises
    ------
    IndexError
        if `gamma_l` does not have one value per frequency point.

    Examples
    --------
    >>> gamma_in(amp, 0)  # matched load, returns S11
    >>> gamma_in(amp, load.s[:, 0, 0])

    See Also
    --------
    gamma_out
    power_gain
    """
    s = s_parameters(ntwk)
    return _gamma_in(s, _termination(gamma_l, len(s), 'gamma_l'))


def gamma_out(ntwk: Network | NumberLike, gamma_s: Network | NumberLike) -> np.ndarray:
    r"""
    Output reflection coefficient of a two-port driven from port 1.

    .. math::

            \Gamma_{out} = S_{22} + \frac{S_{12} S_{21} \Gamma_S}{1 - S_{11} \Gamma_S}

    Parameters
    ----------
    ntwk : :class:`~twoport.network.Network` or complex array-like
        the two-port
    gamma_s : complex array-like, number or one-port Network
        reflection coefficient seen looking out of port 1 (the source)

    Returns
    -------
    gamma_out : complex :class:`numpy.ndarray` of shape `f`

    See Also
    --------
    gamma_in
    available_power_gain
    """
    s = s_parameters(ntwk)
    return _gamma_out(s, _termination(gamma_s, len(s), 'gamma_s'))


def power_gain(ntwk: Network | NumberLike, gamma_l: Network | NumberLike) -> np.ndarray:
    r"""
    Power gain, the power delivered to the load over the power input to
    the two-port (in linear).

    .. math::

            G = \frac{|S_{21}|^2 (1 - |\Gamma_L|^2)}
                     {(1 - |\Gamma_{in}|^2) |1 - S_{22} \Gamma_L|^2}

    The result is not clamped. It is negative or diverges for terminations
    where the two-port is not stable.

    Parameters
    ----------
    ntwk : :class:`~twoport.network.Network` or complex array-like
        the two-port
    gamma_l : complex array-like, number or one-port Network
        load reflection coefficient

    Returns
    -------
    G : :class:`numpy.ndarray` of shape `f`

    References
    ----------
    ..  [1] David. M. Pozar, "Microwave Engineering, Fourth Edition," Wiley, p. 561, 2011.
    """
    s = s_parameters(ntwk)
    gl = _termination(gamma_l, len(s), 'gamma_l')

    with np.errstate(divide='ignore', invalid='ignore'):
        num = np.abs(s[:, 1, 0]) ** 2 * (1 - np.abs(gl) ** 2)
        den = (1 - np.abs(_gamma_in(s, gl)) ** 2) * np.abs(1 - s[:, 1, 1] * gl) ** 2
        g = num / den
    _log_nonfinite('power_gain', g)
    return g


def available_power_gain(ntwk: Network | NumberLike, gamma_s: Network | NumberLike,
                         gamma_out_def: AvailableGainDefT = AVAILABLE_GAIN_DEF_DEFAULT) -> np.ndarray:
    r"""
    Available power gain, the power available from the two-port over the
    power available from the source (in linear).

    .. math::

            G_A = \frac{|S_{21}|^2 (1 - |\Gamma_S|^2)}
                       {|1 - S_{11} \Gamma_S|^2 (1 - X)}

    with :math:`X = |\Gamma_{out}|^2` for ``gamma_out_def='magnitude'``
    (the usual definition, real valued) or :math:`X = \Gamma_{out}^2` for
    ``gamma_out_def='square'``. The latter keeps the complex square of the
    output reflection coefficient and returns a complex array; it only
    agrees with the usual definition where :math:`\Gamma_{out}` is real.

    Parameters
    ----------
    ntwk : :class:`~twoport.network.Network` or complex array-like
        the two-port
    gamma_s : complex array-like, number or one-port Network
        source reflection coefficient
    gamma_out_def : str, optional
        'magnitude' or 'square'.
        Default is :data:`~twoport.constants.AVAILABLE_GAIN_DEF_DEFAULT`.

    Returns
    -------
    G_A : :class:`numpy.ndarray` of shape `f`

    Raises
    ------
    ValueError
        for an unknown `gamma_out_def`.
    """
    if gamma_out_def not in AVAILABLE_GAIN_DEFINITIONS:
        raise ValueError(f'gamma_out_def should be one of {AVAILABLE_GAIN_DEFINITIONS}, '
                         f'got {gamma_out_def!r}')

    s = s_parameters(ntwk)
    gs = _termination(gamma_s, len(s), 'gamma_s')
    g_out = _gamma_out(s, gs)

    with np.errstate(divide='ignore', invalid='ignore'):
        if gamma_out_def == 'magnitude':
            out_term = np.abs(g_out) ** 2
        else:
            out_term = g_out ** 2
        num = np.abs(s[:, 1, 0]) ** 2 * (1 - np.abs(gs) ** 2)
        den = np.abs(1 - s[:, 0, 0] * gs) ** 2 * (1 - out_term)
        g = num / den
    _log_nonfinite('available_power_gain', g)
    return g


def transducer_power_gain(ntwk: Network | NumberLike, gamma_s: Network | NumberLike,
                          gamma_l: Network | NumberLike) -> np.ndarray:
    r"""
    Transducer power gain, the power delivered to the load over the power
    available from the source (in linear).

    .. math::

            G_T = \frac{|S_{21}|^2 (1 - |\Gamma_S|^2) (1 - |\Gamma_L|^2)}
                       {|1 - \Gamma_S \Gamma_{in}|^2 |1 - S_{22} \Gamma_L|^2}

    Parameters
    ----------
    ntwk : :class:`~twoport.network.Network` or complex array-like
        the two-port
    gamma_s : complex array-like, number or one-port Network
        source reflection coefficient
    gamma_l : complex array-like, number or one-port Network
        load reflection coefficient

    Returns
    -------
    G_T : :class:`numpy.ndarray` of shape `f`
    """
    s = s_parameters(ntwk)
    gs = _termination(gamma_s, len(s), 'gamma_s')
    gl = _termination(gamma_l, len(s), 'gamma_l')

    with np.errstate(divide='ignore', invalid='ignore'):
        num = np.abs(s[:, 1, 0]) ** 2 * (1 - np.abs(gs) ** 2) * (1 - np.abs(gl) ** 2)
        den = np.abs(1 - gs * _gamma_in(s, gl)) ** 2 * np.abs(1 - s[:, 1, 1] * gl) ** 2
        g = num / den
    _log_nonfinite('transducer_power_gain', g)
    return g


def determinant(ntwk: Network | NumberLike) -> np.ndarray:
    r"""
    Determinant of the scattering matrix, :math:`\Delta = S_{11} S_{22} - S_{12} S_{21}`.
    """
    s = s_parameters(ntwk)
    return _determinant(s)


def mu_factor(ntwk: Network | NumberLike) -> np.ndarray:
    r"""
    Edwards-Sinsky stability factor :math:`\mu`.

    .. math::

            \mu = \frac{1 - |S_{11}|^2}{|S_{22} - \Delta S_{11}^*| + |S_{12} S_{21}|}

    :math:`\mu > 1` is necessary and sufficient for unconditional
    stability, and larger values mean a larger margin.

    Returns
    -------
    mu : :class:`numpy.ndarray` of shape `f`

    References
    ----------
    ..  [1] M. L. Edwards and J. H. Sinsky, "A new criterion for linear 2-port stability
        using a single geometrically derived parameter," IEEE Transactions on Microwave
        Theory and Techniques, vol. 40, no. 12, pp. 2303-2311, Dec. 1992.

    See Also
    --------
    mu_test
    mu_prime_factor
    """
    return _mu(s_parameters(ntwk))


def mu_prime_factor(ntwk: Network | NumberLike) -> np.ndarray:
    r"""
    Edwards-Sinsky stability factor :math:`\mu'`, the :math:`\mu` of the
    flipped two-port.

    .. math::

            \mu' = \frac{1 - |S_{22}|^2}{|S_{11} - \Delta S_{22}^*| + |S_{12} S_{21}|}
    """
    s = s_parameters(ntwk)
    return _mu(s[:, ::-1, ::-1])


def mu_test(ntwk: Network | NumberLike, return_mu: bool = False) -> bool | tuple[bool, np.ndarray]:
    """
    Test a two-port for unconditional stability with the :math:`\\mu` factor.

    The network is unconditionally stable if :math:`\\mu > 1` at every
    frequency point. A single point failing the test (including a point
    where :math:`\\mu` is ``nan``) makes the whole network fail. An empty
    sweep passes.

    Parameters
    ----------
    ntwk : :class:`~twoport.network.Network` or complex array-like
        the two-port
    return_mu : bool, optional
        also return the :math:`\\mu` factor. Default is False.

    Returns
    -------
    stable : bool
        True if unconditionally stable at all frequency points
    mu : :class:`numpy.ndarray` of shape `f`
        only if `return_mu` is True

    Examples
    --------
    >>> stable = mu_test(amp)
    >>> stable, mu = mu_test(amp, return_mu=True)
    >>> amp.f[mu <= 1]  # the offending frequencies
    """
    mu = _mu(s_parameters(ntwk))
    unstable = np.count_nonzero(~(mu > 1))
    if unstable:
        logger.debug('mu test: %d of %d points are not unconditionally stable', unstable, len(mu))
    stable = unstable == 0

    if return_mu:
        return stable, mu
    return stable


def rollett_stability(ntwk: Network | NumberLike) -> np.ndarray:
    r"""
    Rollett stability factor.

    .. math::

            K = \frac{1 - |S_{11}|^2 - |S_{22}|^2 + |\Delta|^2}{2 |S_{12}| |S_{21}|}

    ``inf`` where :math:`S_{12} S_{21} = 0`. K > 1 together with
    :math:`|\Delta| < 1` means unconditional stability.

    Returns
    -------
    K : :class:`numpy.ndarray` of shape `f`
    """
    s = s_parameters(ntwk)
    num = 1 - np.abs(s[:, 0, 0]) ** 2 - np.abs(s[:, 1, 1]) ** 2 + np.abs(_determinant(s)) ** 2
    denom = 2 * np.abs(s[:, 0, 1]) * np.abs(s[:, 1, 0])
    infs = np.full(num.shape, np.inf)
    return np.divide(num, denom, out=infs, where=denom != 0)


def max_stable_gain(ntwk: Network | NumberLike) -> np.ndarray:
    r"""
    Maximum stable power gain :math:`|S_{21}| / |S_{12}|` (in linear).

    References
    ----------
    ..  [1] M. S. Gupta, "Power gain in feedback amplifiers, a classic revisited,"
        in IEEE Transactions on Microwave Theory and Techniques, vol. 40, no. 5, pp. 864-879, May 1992,
        doi: 10.1109/22.137392.
    """
    s = s_parameters(ntwk)
    with np.errstate(divide='ignore', invalid='ignore'):
        return np.abs(s[:, 1, 0]) / np.abs(s[:, 0, 1])


def max_gain(ntwk: Network | NumberLike) -> np.ndarray:
    r"""
    Maximum available power gain where K > 1, maximum stable gain
    elsewhere (in linear).

    .. math::

            G_{max}|_{K>1} = \frac{|S_{21}|}{|S_{12}|} \times \frac{1}{K + \sqrt{K^2 - 1}}

            G_{max}|_{K<=1} = \frac{|S_{21}|}{|S_{12}|}

    ``nan`` for a unilateral point (:math:`S_{12} = 0`), where both
    factors are unbounded.

    See Also
    --------
    max_stable_gain
    rollett_stability
    """
    k = np.clip(rollett_stability(ntwk), 1, None)
    with np.errstate(divide='ignore', invalid='ignore'):
        return max_stable_gain(ntwk) / (k + np.sqrt(k ** 2 - 1))


def unilateral_gain(ntwk: Network | NumberLike) -> np.ndarray:
    r"""
    Mason's unilateral power gain (in linear).

    .. math::

            U = \frac{| \frac{S_{21}}{S_{12}} - 1| ^ 2}{2K \frac{|S_{21}|}{|S_{12}|} - 2Re(\frac{S_{21}}{S_{12}})}

    References
    ----------
    ..  [1] M. S. Gupta, "Power gain in feedback amplifiers, a classic revisited,"
        in IEEE Transactions on Microwave Theory and Techniques, vol. 40, no. 5, pp. 864-879, May 1992,
        doi: 10.1109/22.137392.
    """
    s = s_parameters(ntwk)
    k = rollett_stability(s)
    with np.errstate(divide='ignore', invalid='ignore'):
        ratio = s[:, 1, 0] / s[:, 0, 1]
        return np.abs(ratio - 1) ** 2 / (2 * k * np.abs(ratio) - 2 * np.real(ratio))


def stability_circle(ntwk: Network | NumberLike, target_port: int, npoints: int = 181) -> np.ndarray:
    r"""
    Loci of the source (`target_port` 0) or load (`target_port` 1)
    stability circle.

    .. math::

            C_{L} = \frac{(S_{22} - \Delta S_{11}^*)^*}{|S_{22}|^{2} - |\Delta|^{2}}

            R_{L} = \left|\frac{S_{12}S_{21}}{|S_{22}|^2 - |\Delta|^{2}}\right|

    and the same with ports 1 and 2 exchanged for the source side.

    Parameters
    ----------
    ntwk : :class:`~twoport.network.Network` or complex array-like
        the two-port
    target_port : int
        0 for the source plane, 1 for the load plane
    npoints : int, optional
        number of points on each circle. Default is 181.

    Returns
    -------
    sc : complex :class:`numpy.ndarray` of shape `npoints x f`

    Raises
    ------
    ValueError
        for an invalid `target_port` or a non positive `npoints`.

    References
    ----------
    ..  [1] David. M. Pozar, "Microwave Engineering, Fourth Edition," Wiley, p. 566, 2011.
    """
    if target_port not in (0, 1):
        raise ValueError("Invalid target_port. Specify 0 or 1.")
    if npoints <= 0:
        raise ValueError("npoints must be a positive integer")

    s = s_parameters(ntwk)
    if target_port == 0:
        s = s[:, ::-1, ::-1]

    d = _determinant(s)
    with np.errstate(divide='ignore', invalid='ignore'):
        denom = np.abs(s[:, 1, 1]) ** 2 - np.abs(d) ** 2
        center = (s[:, 1, 1] - d * s[:, 0, 0].conj()).conj() / denom
        radius = np.abs(s[:, 0, 1] * s[:, 1, 0] / denom)

    theta = np.linspace(0, 2 * np.pi, npoints)
    return center[None, :] + radius[None, :] * np.exp(1j * theta)[:, None]


def gain_to_db(g: NumberLike) -> np.ndarray:
    """
    Convert a linear power gain to dB, 10*log10(g).

    Only the real part of `g` is used. Non-finite gains stay non-finite
    and negative gains (unstable terminations) give ``nan``, so they are
    not mistaken for valid dB values. A zero gain gives ``-inf``.

    Examples
    --------
    >>> gain_to_db(transducer_power_gain(amp, 0, 0))
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        return mf.mag_2_db10(np.real(g), zero_nan=False)


def _termination(gamma: Network | NumberLike, nfreqs: int, name: str) -> np.ndarray:
    """
    Reflection coefficient of a termination as a complex vector of length
    `nfreqs`. Numbers are used at every frequency point.
    """
    if isinstance(gamma, Network):
        if gamma.nports != 1:
            raise ValueError(f'{name} must be a one-port network, got {gamma.nports} ports')
        gamma = gamma.s[:, 0, 0]

    gamma = np.array(gamma, dtype=complex)
    if gamma.ndim == 0:
        return np.full(nfreqs, gamma)
    if gamma.ndim != 1:
        raise ValueError(f'{name} must be a number or a vector, got shape {gamma.shape}')
    if len(gamma) != nfreqs:
        raise IndexError(f'length mismatch: {name} has {len(gamma)} points, '
                         f'the s-parameters have {nfreqs}')
    return gamma


def _determinant(s: np.ndarray) -> np.ndarray:
    return s[:, 0, 0] * s[:, 1, 1] - s[:, 0, 1] * s[:, 1, 0]


def _gamma_in(s: np.ndarray, gl: np.ndarray) -> np.ndarray:
    with np.errstate(divide='ignore', invalid='ignore'):
        out = s[:, 0, 0] + s[:, 0, 1] * s[:, 1, 0] * gl / (1 - s[:, 1, 1] * gl)
    _log_nonfinite('gamma_in', out)
    return out


def _gamma_out(s: np.ndarray, gs: np.ndarray) -> np.ndarray:
    return _gamma_in(s[:, ::-1, ::-1], gs)


def _mu(s: np.ndarray) -> np.ndarray:
    d = _determinant(s)
    with np.errstate(divide='ignore', invalid='ignore'):
        num = 1 - np.abs(s[:, 0, 0]) ** 2
        den = np.abs(s[:, 1, 1] - d * np.conj(s[:, 0, 0])) + np.abs(s[:, 0, 1] * s[:, 1, 0])
        return num / den


def _log_nonfinite(what: str, values: np.ndarray) -> None:
    bad = np.count_nonzero(~np.isfinite(values))
    if bad:
        logger.debug('%s: %d of %d points are not finite', what, bad, len(values))
