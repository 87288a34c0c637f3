"""
.. currentmodule:: twoport.frequency

========================================
frequency (:mod:`twoport.frequency`)
========================================

The frequency axis shared by a :class:`~twoport.network.Network` and every
sweep computed from it.

.. autosummary::
   :toctree: generated/

   Frequency
   InvalidFrequencyWarning

"""
from __future__ import annotations

import re
import warnings

import numpy as np

from .constants import FREQ_UNITS, ZERO, NumberLike
from .util import find_nearest_index, slice_domain


class InvalidFrequencyWarning(UserWarning):
    """Thrown if frequency values aren't monotonously increasing
    """
    pass


class Frequency:
    """
    A frequency band.

    Holds the frequency vector in Hz (:attr:`f`) together with a display
    unit, so the same points are available scaled (:attr:`f_scaled`).

    Create it from (start, stop, npoints) with the default constructor, or
    from an arbitrary vector with :func:`from_f`.

    Examples
    --------
    >>> band = Frequency(1, 2, 11, 'ghz')
    >>> band.f_scaled
    array([1. , 1.1, 1.2, 1.3, 1.4, 1.5, 1.6, 1.7, 1.8, 1.9, 2. ])
    """
    _units = {k.lower(): k for k in FREQ_UNITS}

    def __init__(self, start: float = 0, stop: float = 0, npoints: int = 0,
                 unit: str = 'ghz', sweep_type: str = 'lin') -> None:
        """
        Frequency initializer.

        Parameters
        ----------
        start : number, optional
            start frequency in units of `unit`. Default is 0.
        stop : number, optional
            stop frequency in units of `unit`. Default is 0.
        npoints : int, optional
            number of points in the band. Default is 0.
        unit : string, optional
            'hz', 'khz', 'mhz', 'ghz' or 'thz', not case sensitive.
            Default is 'ghz'.
        sweep_type : string, optional
            'lin' for linear and 'log' for logarithmic spacing.
        """
        self.unit = unit

        start = self.multiplier * start
        stop = self.multiplier * stop

        if sweep_type.lower() == 'lin':
            self._f = np.linspace(start, stop, npoints)
        elif sweep_type.lower() == 'log':
            if start <= 0:
                raise ValueError(f'Logarithmic sweep needs a positive start frequency, got {start} Hz')
            self._f = np.geomspace(start, stop, npoints)
        else:
            raise ValueError('Sweep Type not recognized')

    def __str__(self) -> str:
        if self.npoints == 0:
            return "[no freqs]"
        return f'{self.f_scaled[0]}-{self.f_scaled[-1]} {self.unit}, {self.npoints} pts'

    def __repr__(self) -> str:
        return self.__str__()

    def __getitem__(self, key: str | int | slice | np.ndarray) -> Frequency:
        """
        Slice the band by index, mask, or a human readable string.

        Strings look like '1.5-2.5ghz' (a band) or '2ghz' (the closest
        point). If the unit is omitted :attr:`unit` is used.
        """
        output = self.copy()
        if isinstance(key, str):
            key = self.band_slice(key)
        output._f = np.array(self.f[key]).reshape(-1)
        return output

    def band_slice(self, band: str) -> slice:
        """
        Index slice for a band string like '1.5-2.5ghz' or '2ghz'.

        Examples
        --------
        >>> freq = Frequency(1, 3, 21, 'ghz')
        >>> freq.band_slice('2-2.5ghz')
        slice(10, 16, None)
        """
        letters = re.findall('[a-zA-Z]+', band)
        unit = letters[0] if letters else self.unit
        edges = re.split(r'\s*-\s*', re.sub('[a-zA-Z]+', '', band).strip())
        try:
            edges_f = np.array([float(k) for k in edges]) * FREQ_UNITS[self._units[unit.lower()]]
        except (ValueError, KeyError) as err:
            raise ValueError(f'Cannot interpret frequency band {band!r}') from err

        if len(edges_f) == 2:
            return slice_domain(self.f, edges_f)
        elif len(edges_f) == 1:
            idx = find_nearest_index(self.f, edges_f[0])
            return slice(idx, idx + 1)
        raise ValueError(f'Cannot interpret frequency band {band!r}')

    @classmethod
    def from_f(cls, f: NumberLike, unit: str = 'hz') -> Frequency:
        """
        Construct a Frequency from a frequency vector given in `unit`.

        Raises
        ------
        InvalidFrequencyWarning:
            If frequency points are not monotonously increasing

        Examples
        --------
        >>> Frequency.from_f([1, 2, 5], unit='ghz')
        """
        if np.isscalar(f):
            f = [f]
        freq = cls(0, 0, 0, unit=unit)
        freq._f = np.array(f, dtype=float) * freq.multiplier
        freq.check_monotonic_increasing()
        return freq

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return False
        if len(self.f) != len(other.f):
            return False
        if len(self.f) == 0:
            return True
        return bool(np.max(np.abs(self.f - other.f)) < ZERO)

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __len__(self) -> int:
        """
        The number of frequency points
        """
        return self.npoints

    def check_monotonic_increasing(self) -> None:
        """Warn if the frequency values are not strictly increasing.

        Raises
        ------
        InvalidFrequencyWarning:
            If frequency points are not monotonously increasing
        """
        if not (np.diff(self._f) > 0).all():
            warnings.warn("Frequency values are not monotonously increasing!",
                          InvalidFrequencyWarning, stacklevel=3)

    @property
    def f(self) -> np.ndarray:
        """
        Frequency vector in Hz.
        """
        return self._f

    @property
    def f_scaled(self) -> np.ndarray:
        """
        Frequency vector in units of :attr:`unit`.
        """
        return self._f / self.multiplier

    @property
    def start(self) -> float:
        """
        Starting frequency in Hz.
        """
        return self._f[0]

    @property
    def stop(self) -> float:
        """
        Stop frequency in Hz.
        """
        return self._f[-1]

    @property
    def npoints(self) -> int:
        """
        Number of points in the frequency.
        """
        return len(self._f)

    @property
    def unit(self) -> str:
        """
        Unit of this frequency band, one of 'Hz', 'kHz', 'MHz', 'GHz', 'THz'.

        Setting this attribute is not case sensitive.
        """
        return self._units[self._unit]

    @unit.setter
    def unit(self, unit: str) -> None:
        if unit.lower() not in self._units:
            raise ValueError(f'Unknown frequency unit {unit!r}')
        self._unit = unit.lower()

    @property
    def multiplier(self) -> float:
        """
        Multiplier from :attr:`unit` to Hz.
        """
        return FREQ_UNITS[self.unit]

    def copy(self) -> Frequency:
        """
        Returns a new copy of this frequency.
        """
        freq = Frequency(0, 0, 0, unit=self.unit)
        freq._f = self._f.copy()
        return freq
