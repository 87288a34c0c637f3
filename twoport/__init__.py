"""
twoport computes the figures of merit of two-port networks used in
amplifier design (reflection coefficients, power gains, stability),
implemented in Python on top of numpy.
"""

__version__ = '0.1.0'
## Import all module names for coherent reference of name-space

from . import (
    amplifiers,
    constants,
    frequency,
    mathFunctions,
    network,
    util,
)
from .amplifiers import *
from .constants import *

# Import contents into current namespace for ease of calling
from .frequency import *
from .mathFunctions import *
from .network import *

## Shorthand Names
F = Frequency
N = Network
