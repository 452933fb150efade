######################################################################
#
# prng.py
#
######################################################################
#
# Small seeded xorshift32 generator. Every stochastic decision made
# while growing a plant (rule choice, branch direction) is drawn from
# one of these so that the same seed always gives the same plant.

import math

MASK32 = 0xFFFFFFFF

HASH_START = 5381
HASH_MULTIPLIER = 33

DEFAULT_SEED = 'default'

######################################################################
# the seed is hashed one UTF-16 code unit at a time, last to first

def _code_units(seed):

    data = seed.encode('utf-16-le', 'surrogatepass')

    return [ data[i] | (data[i+1] << 8) for i in range(0, len(data), 2) ]

######################################################################

class PseudoRandom(object):

    def __init__(self, seed=DEFAULT_SEED):

        if not isinstance(seed, str):
            raise TypeError('seed must be a string, got {}'.format(
                type(seed).__name__))

        self.seed = seed
        self.state = self.hash_seed(seed)

        # zero is a fixed point of xorshift
        if self.state == 0:
            raise ValueError('seed {!r} hashes to 0'.format(seed))

    @staticmethod
    def hash_seed(seed):

        acc = HASH_START

        for unit in reversed(_code_units(seed)):
            acc = ((acc * HASH_MULTIPLIER) ^ unit) & MASK32

        return acc

    # xorshift32 step, shifts 21/3/4; returns a float in [0, 1]
    def next(self):

        s = self.state

        s ^= (s << 21) & MASK32
        s ^= s >> 3
        s ^= (s << 4) & MASK32

        self.state = s

        return s / MASK32

    # next() reaches 1.0 for state 0xFFFFFFFF, so both ranges are
    # clamped to keep max exclusive

    def next_int(self, min_value, max_value):

        value = math.floor(self.next() * (max_value - min_value)) + min_value

        if max_value > min_value:
            value = min(value, max_value - 1)

        return value

    def next_float(self, min_value, max_value):

        value = self.next() * (max_value - min_value) + min_value

        if max_value > min_value and value >= max_value:
            value = math.nextafter(max_value, min_value)

        return value
