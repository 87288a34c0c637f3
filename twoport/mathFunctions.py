"""
mathFunctions (:mod:`twoport.mathFunctions`)
=============================================

Commonly used mathematical helpers.

Complex Component Conversion
---------------------------------
.. autosummary::
        :toctree: generated/

        complex_2_magnitude
        complex_2_db
        complex_2_db10
        complex_2_degree

Unit Conversion
--------------------------------
.. autosummary::
        :toctree: generated/

        magnitude_2_db
        mag_2_db10
        db_2_magnitude
        db10_2_mag
        magdeg_2_reim

Batched Linear Algebra
--------------------------------
.. autosummary::
        :toctree: generated/

        rsolve
        nudge_eig

"""
import numpy as npy

from .constants import EIG_COND, EIG_MIN, LOG_OF_NEG, NumberLike


def complex_2_magnitude(z: NumberLike):
    """
    Return the magnitude of the complex argument.

    Parameters
    ----------
    z : number or array_like
        A complex number or sequence of complex numbers

    Returns
    -------
    mag : ndarray or scalar

    """
    return npy.abs(z)


def complex_2_db(z: NumberLike):
    r"""
    Return the magnitude in dB of a complex number, :math:`20\log_{10}(|z|)`.

    Use this for wave quantities (reflection coefficients, S-parameters).
    """
    return magnitude_2_db(npy.abs(z))


def complex_2_db10(z: NumberLike):
    r"""
    Return the magnitude in dB of a complex number, :math:`10\log_{10}(|z|)`.

    Use this for power quantities (gains).
    """
    return mag_2_db10(npy.abs(z))


def complex_2_degree(z: NumberLike):
    """
    Return the angle of the complex argument in degree.
    """
    return npy.angle(z, deg=True)


def magnitude_2_db(z: NumberLike, zero_nan: bool = True):
    """
    Convert linear magnitude to dB, 20*log10(z).

    Parameters
    ----------
    z : number or array_like
        linear magnitude(s)
    zero_nan : bool, optional
        Replace NaN with :data:`~twoport.constants.LOG_OF_NEG`.
        The default is True.

    Returns
    -------
    z : number or array_like
       Magnitude in dB
    """
    out = 20 * npy.log10(z)
    if zero_nan:
        return npy.nan_to_num(out, nan=LOG_OF_NEG, neginf=-npy.inf)
    return out

mag_2_db = magnitude_2_db


def mag_2_db10(z: NumberLike, zero_nan: bool = True):
    """
    Convert linear power ratio to dB, 10*log10(z).

    Parameters
    ----------
    z : number or array_like
        linear power ratio(s)
    zero_nan : bool, optional
        Replace NaN with :data:`~twoport.constants.LOG_OF_NEG`.
        The default is True.
    """
    out = 10 * npy.log10(z)
    if zero_nan:
        return npy.nan_to_num(out, nan=LOG_OF_NEG, neginf=-npy.inf)
    return out


def db_2_magnitude(z: NumberLike):
    """
    Convert dB to linear magnitude, 10**(z/20).
    """
    return 10**((z)/20.)

db_2_mag = db_2_magnitude


def db10_2_mag(z: NumberLike):
    """
    Convert dB to linear power ratio, 10**(z/10).
    """
    return 10**((z)/10.)


def magdeg_2_reim(mag: NumberLike, deg: NumberLike):
    """
    Convert linear magnitude and phase (in deg) arrays into a complex array.

    Parameters
    ----------
    mag : number or array_like
        A real number or sequence of real numbers
    deg : number or array_like
        A real number or sequence of real numbers

    Returns
    -------
    z : array_like
        A complex number or sequence of complex numbers

    """
    return mag*npy.exp(1j*deg*npy.pi/180.)


def rsolve(A: npy.ndarray, B: npy.ndarray) -> npy.ndarray:
    r"""Solves x @ A = B.

    Same as B @ npy.linalg.inv(A) but avoids calculating the inverse.

    Input should have dimension of similar to (nfreqs, nports, nports).

    Parameters
    ----------
    A : npy.ndarray
    B : npy.ndarray

    Returns
    -------
    x : npy.ndarray
    """
    At = npy.transpose(A, (0, 2, 1))
    Bt = npy.transpose(B, (0, 2, 1))
    return npy.transpose(npy.linalg.solve(At, Bt), (0, 2, 1))


def nudge_eig(mat: npy.ndarray, cond: float = EIG_COND, min_eig: float = EIG_MIN) -> npy.ndarray:
    r"""Nudge eigenvalues with absolute value smaller than
    max(cond * max(eigenvalue), min_eig) to that value.

    Keeps `(1 - S)` style matrices solvable when a network has a
    reflection of exactly one on some port.

    Parameters
    ----------
    mat : npy.ndarray
        Matrices to nudge, shape (nfreqs, nports, nports)
    cond : float, optional
        Minimum eigenvalue ratio compared to the maximum eigenvalue
    min_eig : float, optional
        Minimum eigenvalue

    Returns
    -------
    res : npy.ndarray
        Nudged matrices
    """
    if mat.shape[0] == 0:
        return mat

    eigw, eigv = npy.linalg.eig(mat)
    max_eig = npy.amax(npy.abs(eigw), axis=1)
    mask = npy.logical_or(npy.abs(eigw) < cond * max_eig[:, None], npy.abs(eigw) < min_eig)
    if not mask.any():
        return mat

    floor = npy.maximum(cond * npy.repeat(max_eig[:, None], mat.shape[-1], axis=-1), min_eig)
    eigw[mask] = floor[mask]

    # reassemble V diag(w) V^-1
    e = npy.zeros_like(mat)
    npy.einsum('ijj->ij', e)[...] = eigw
    return rsolve(eigv, eigv @ e)
