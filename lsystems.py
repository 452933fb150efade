#!/usr/bin/env python
######################################################################
#
# lsystems.py
#
######################################################################
#
# Stochastic L-system foliage generator. A grammar is expanded into a
# symbol string, then a 3D turtle walks the string and emits draw
# events (points and arrows) for a renderer to consume.
#
# Based on documentation in https://en.wikipedia.org/wiki/L-system and
# http://paulbourke.net/fractals/lsys/
#
# Two things differ from the textbook versions described there:
#
#  * each iteration APPENDS the rewrite to the current string instead
#    of replacing it (string <- string + rewrite(string)), and
#
#  * '+' and '-' change the turtle's angle from vertical and then pick
#    a new direction on the cone at that angle around +Y, with the
#    azimuth drawn from the seeded generator.

import sys
import math
import numbers
import logging
import argparse
from datetime import datetime
import numpy as np

from prng import PseudoRandom, DEFAULT_SEED
from rules import (Rule, ConfigError, RuleIndex,
                   make_grammar, grammar_from_dict, select_rule)
from turtle_state import (StateStack, Point, Arrow, DEFAULT_DECAY,
                          POINT_COLOR, MARKER_COLOR, ARROW_COLOR,
                          normalize, cone_direction, make_turtle_state)
from logging_config import setup_logging
from plot_events import plot_events

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 4

# the string grows faster than geometrically, so both the iteration
# count and the final length are capped
MAX_ITERATIONS = 6
MAX_SYMBOLS = 2000000

# A few grammars. The first two come from the original foliage
# renderer; the last two are adapted from the plant L-systems on the
# pages linked above.

KNOWN_GRAMMARS = {

    'foliage': make_grammar(
        axiom = 'X',
        rules = [
            Rule('F', 'FX[FX[+XF]]', 0),
            Rule('X', 'F[+XZ++X-F[+ZX]][-X++F-X]', 0),
            Rule('Z', '[+F-X-F][++ZX]', 0)
        ]
    ),

    'foliage_z': make_grammar(
        axiom = 'Z',
        rules = [
            Rule('F', 'FX[FX[+XF]]', 0),
            Rule('X', 'F[+XZ++X-F[+ZX]][-X++F-X]', 0),
            Rule('Z', '[+F-X-F][++ZX]', 0)
        ]
    ),

    'stochastic_bush': make_grammar(
        axiom = 'X',
        rules = [
            Rule('X', 'F[+X]F[-X]+X', 2),
            Rule('X', 'F[-X]F[+X]-X', 2),
            Rule('X', 'F[+X][-X]', 1),
            Rule('F', 'F', 3),
            Rule('F', 'FF', 1)
        ]
    ),

    'sticks': make_grammar(
        axiom = 'X',
        rules = [
            Rule('X', 'F[+X]F[-X]+X', 0),
            Rule('F', 'FF', 0)
        ]
    ),

    'barnsley_fern': make_grammar(
        axiom = 'X',
        rules = [
            Rule('X', 'F+[[X]-X]-F[-FX]+X', 0),
            Rule('F', 'FF', 0)
        ]
    )

}

######################################################################
# one rewriting pass: every symbol is replaced by the output of one
# of its rules, or copied through if it has none. With a budget,
# gives up as soon as the rewrite would be longer than that.

def rewrite_once(lstring, index, rng, budget=None):

    output = []
    total = 0

    for symbol in lstring:
        candidates = index.rules_for(symbol)
        if candidates:
            piece = select_rule(candidates, rng).output
        else:
            piece = symbol
        total += len(piece)
        if budget is not None and total > budget:
            raise ConfigError(
                'rewrite exceeds the budget of {} symbols'.format(budget))
        output.append(piece)

    return ''.join(output)

######################################################################
# make a big ol' string from an axiom using repeated rewriting. Each
# iteration appends the rewrite of the current string to it.
#
# rules may be a RuleIndex or a list of Rule.

def lsys_build_string(axiom, rules, max_depth, rng=None,
                      max_symbols=MAX_SYMBOLS):

    if max_depth < 0:
        raise ConfigError('iterations must be >= 0')

    if not isinstance(rules, RuleIndex):
        rules = RuleIndex(rules)

    if rng is None:
        rng = PseudoRandom(DEFAULT_SEED)

    lstring = axiom

    for i in range(max_depth):

        try:
            rewrite = rewrite_once(lstring, rules, rng,
                                   max_symbols - len(lstring))
        except ConfigError:
            raise ConfigError(
                'iteration {} would grow the string past {} symbols'.format(
                    i + 1, max_symbols)) from None

        lstring = lstring + rewrite

        logger.debug('iteration %d: %d symbols', i + 1, len(lstring))

    return lstring

######################################################################
# "draw" a single symbol from an L-System string
#
# stack is read-write; emit is called once per draw event.
# Symbols other than F + - [ ] do nothing.

def execute_symbol(symbol, stack, decay, rng, emit):

    cur = stack.current

    if symbol == 'F':

        direction = normalize(cur.direction)
        dst = cur.position + direction * cur.length

        emit(Point(cur.position.copy(), POINT_COLOR))
        emit(Point(dst.copy(), POINT_COLOR))
        emit(Arrow(cur.position.copy(), direction, cur.length, ARROW_COLOR))

        stack.current = cur._replace(
            position = dst,
            length = cur.length * decay.length_decay,
            radius = cur.radius * decay.radius_decay
        )

    elif symbol == '+' or symbol == '-':

        if symbol == '+':
            angle = cur.angle + decay.angle_offset_deg
        else:
            angle = cur.angle - decay.angle_offset_deg

        azimuth = rng.next_float(0, 2 * math.pi)

        stack.current = cur._replace(
            angle = angle,
            direction = cone_direction(angle * math.pi / 180, azimuth)
        )

    elif symbol == '[':

        stack.push()

    elif symbol == ']':

        stack.pop()
        emit(Point(stack.current.position.copy(), MARKER_COLOR))

######################################################################
# walk the string with a fresh state stack. Events go to sink if one
# is given, otherwise they are collected and returned as a list.

def interpret(lstring, initial_state, decay=DEFAULT_DECAY, rng=None,
              sink=None):

    if rng is None:
        rng = PseudoRandom(DEFAULT_SEED)

    events = None

    if sink is None:
        events = []
        sink = events.append

    stack = StateStack(initial_state)

    for symbol in lstring:
        execute_symbol(symbol, stack, decay, rng, sink)

    if events is not None:
        logger.debug('interpreted %d symbols into %d events',
                     len(lstring), len(events))

    return events

######################################################################

def _check_decay(decay):

    for name, value in zip(decay._fields, decay):
        if not isinstance(value, numbers.Real) or isinstance(value, bool) \
           or not math.isfinite(value):
            raise ConfigError('{} must be a finite number'.format(name))

    if decay.length_decay <= 0 or decay.radius_decay <= 0:
        raise ConfigError('decay factors must be > 0')

######################################################################
# full run: grammar -> symbol string -> draw events. One generator
# drives both rule selection and branch directions, so identical
# arguments always produce identical events.

def generate(grammar, iterations=DEFAULT_ITERATIONS, seed=DEFAULT_SEED,
             initial_state=None, decay=DEFAULT_DECAY, sink=None,
             max_iterations=MAX_ITERATIONS, max_symbols=MAX_SYMBOLS):

    if isinstance(grammar, dict):
        grammar = grammar_from_dict(grammar)
    elif not (hasattr(grammar, 'axiom') and hasattr(grammar, 'rules')):
        raise ConfigError('grammar must be a Grammar or a dictionary')
    else:
        grammar = make_grammar(grammar.axiom, grammar.rules)

    if not isinstance(iterations, int) or isinstance(iterations, bool):
        raise ConfigError('iterations must be an integer')

    if iterations < 0:
        raise ConfigError('iterations must be >= 0')

    if iterations > max_iterations:
        raise ConfigError('iterations must be <= {}'.format(max_iterations))

    if not isinstance(seed, str):
        raise ConfigError('seed must be a string')

    # xorshift never leaves a zero state
    if PseudoRandom.hash_seed(seed) == 0:
        raise ConfigError('seed {!r} hashes to 0'.format(seed))

    if initial_state is None:
        initial_state = make_turtle_state()
    else:
        initial_state = make_turtle_state(*initial_state)

    _check_decay(decay)

    rng = PseudoRandom(seed)

    lstring = lsys_build_string(grammar.axiom, RuleIndex(grammar.rules),
                                iterations, rng, max_symbols)

    return interpret(lstring, initial_state, decay, rng, sink)

######################################################################
# arrows as an n-by-2-by-3 array where each segment is represented as
#
#  [(x0, y0, z0), (x1, y1, z1)]

def events_to_segments(events):

    segments = [ [e.origin, e.origin + e.direction * e.length]
                 for e in events if isinstance(e, Arrow) ]

    return np.array(segments, dtype=float).reshape(-1, 2, 3)

######################################################################
# parse command-line options for this program

def parse_options(argv=None):

    parser = argparse.ArgumentParser(
        description='stochastic L-system foliage generator')

    parser.add_argument('gname', metavar='GRAMMAR', nargs=1,
                        help='name of desired grammar',
                        type=str,
                        choices=KNOWN_GRAMMARS)

    parser.add_argument('iterations', metavar='ITERATIONS', nargs='?',
                        help='number of rewriting iterations',
                        type=int, default=DEFAULT_ITERATIONS)

    parser.add_argument('-s', dest='seed', metavar='SEED',
                        type=str, default=DEFAULT_SEED,
                        help='seed for the random generator')

    parser.add_argument('-x', dest='max_events', metavar='MAXEVENTS',
                        type=int, default=100000,
                        help='maximum number of events to plot')

    parser.add_argument('-t', dest='text_only', action='store_true',
                        help='write segments.txt instead of a PNG')

    parser.add_argument('-o', dest='image_filename', metavar='IMAGE',
                        type=str, default='foliage.png',
                        help='output image filename')

    parser.add_argument('-v', dest='verbose', action='store_true',
                        help='enable debug logging')

    opts = parser.parse_args(argv)

    opts.gname = opts.gname[0]
    opts.grammar = KNOWN_GRAMMARS[opts.gname]

    return opts

######################################################################
# main function

def main(argv=None):

    opts = parse_options(argv)

    setup_logging(logging.DEBUG if opts.verbose else logging.WARNING)

    # time event generation
    start = datetime.now()

    try:
        events = generate(opts.grammar, opts.iterations, opts.seed)
    except ConfigError as e:
        print('error: {}'.format(e), file=sys.stderr)
        return 2

    segments = events_to_segments(events)

    # print elapsed time
    elapsed = (datetime.now() - start).total_seconds()

    print('generated {} events ({} segments) in {:.6f} s'.format(
        len(events), len(segments), elapsed))

    if opts.max_events >= 0 and len(events) > opts.max_events:
        print('...maximum of {} events exceeded, skipping output!'.format(
            opts.max_events))
        return 0

    if opts.text_only:
        np.savetxt('segments.txt', segments.reshape(-1, 6))
        print('wrote segments.txt')
    else:
        plot_events(events, opts.image_filename)

    return 0

if __name__ == '__main__':
    sys.exit(main())
