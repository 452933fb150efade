######################################################################
#
# turtle_state.py
#
######################################################################
#
# The turtle's cursor and its save/restore stack, plus the draw
# events the interpreter emits. Positions and directions are numpy
# float arrays of shape (3,), with +Y pointing up.

import logging
import math
from collections import namedtuple
import numpy as np

from rules import ConfigError

logger = logging.getLogger(__name__)

TurtleState = namedtuple('TurtleState',
                         'position, direction, length, radius, angle')

DecayParams = namedtuple('DecayParams',
                         'length_decay, radius_decay, angle_offset_deg')

DEFAULT_DECAY = DecayParams(
    length_decay = 0.9,
    radius_decay = 0.9,
    angle_offset_deg = 20.0
)

# draw events handed to whatever renders the plant
Point = namedtuple('Point', 'position, color')
Arrow = namedtuple('Arrow', 'origin, direction, length, color')

POINT_COLOR = '#ff0000'
MARKER_COLOR = '#00ff00'
ARROW_COLOR = '#ffff00'

UP = np.array([0., 1., 0.])

######################################################################

def normalize(v):

    norm = np.linalg.norm(v)

    if norm == 0:
        raise ValueError('cannot normalize a zero-length vector')

    return v / norm

######################################################################
# unit vector at polar angle angle_from_y (radians) from +Y, with
# the given azimuth around it

def cone_direction(angle_from_y, azimuth):

    s = math.sin(angle_from_y)

    return normalize(np.array([s * math.cos(azimuth),
                               math.cos(angle_from_y),
                               s * math.sin(azimuth)]))

######################################################################
# defaults match the original foliage renderer: start at the origin
# pointing straight up

def make_turtle_state(position=(0., 0., 0.), direction=(0., 1., 0.),
                      length=0.5, radius=0.1, angle=0.):

    position = np.array(position, dtype=float)
    direction = np.array(direction, dtype=float)

    if position.shape != (3,) or direction.shape != (3,):
        raise ConfigError('position and direction must be 3-vectors')

    values = np.concatenate([position, direction, [length, radius, angle]])

    if not np.all(np.isfinite(values)):
        raise ConfigError('turtle state must be finite')

    if not np.any(direction):
        raise ConfigError('direction must not be the zero vector')

    return TurtleState(
        position = position,
        direction = normalize(direction),
        length = float(length),
        radius = float(radius),
        angle = float(angle)
    )

def clone_state(state):
    return state._replace(position=state.position.copy(),
                          direction=state.direction.copy())

######################################################################
# LIFO of turtle states; the last entry is the current one and the
# stack never drops below one entry

class StateStack(object):

    def __init__(self, initial_state):
        self._states = [ clone_state(initial_state) ]

    @property
    def current(self):
        return self._states[-1]

    @current.setter
    def current(self, state):
        self._states[-1] = state

    def push(self):
        self._states.append(clone_state(self.current))

    # returns False (and leaves the stack alone) if only one state
    # is left
    def pop(self):

        if len(self._states) <= 1:
            logger.debug('pop on single-entry stack ignored')
            return False

        self._states.pop()

        return True

    def __len__(self):
        return len(self._states)
