######################################################################
#
# rules.py
#
######################################################################
#
# Grammar records, validation, and stochastic rule selection. A
# symbol may have several rules; one of them is picked each time the
# symbol is rewritten, weighted by the rules' probabilities.

import logging
import math
import numbers
from collections import namedtuple

logger = logging.getLogger(__name__)

Rule = namedtuple('Rule', 'input, output, probability')

Grammar = namedtuple('Grammar', 'axiom, rules')

class ConfigError(ValueError):
    pass

def _require(cond, msg):
    if not cond:
        raise ConfigError(msg)

######################################################################
# check a single rule and return a normalized copy of it

def _check_rule(rule, path):

    _require(isinstance(rule.input, str) and len(rule.input) == 1,
             '{}.input must be a single character'.format(path))

    _require(isinstance(rule.output, str),
             '{}.output must be a string'.format(path))

    p = rule.probability

    _require(isinstance(p, numbers.Real) and not isinstance(p, bool),
             '{}.probability must be a number'.format(path))

    _require(math.isfinite(p),
             '{}.probability must be finite'.format(path))

    _require(p >= 0, '{}.probability must be >= 0'.format(path))

    return Rule(rule.input, rule.output, float(p))

######################################################################
# build a validated Grammar; rules may be Rule tuples or
# (input, output[, probability]) sequences

def make_grammar(axiom, rules):

    _require(isinstance(axiom, str) and len(axiom) > 0,
             'axiom must be a non-empty string')

    _require(isinstance(rules, (list, tuple)),
             'grammar rules must be a list')

    rules = list(rules)

    _require(len(rules) > 0, 'grammar must have at least one rule')

    checked = []

    for i, rule in enumerate(rules):
        if not isinstance(rule, Rule):
            _require(isinstance(rule, (tuple, list)) and len(rule) in (2, 3),
                     'rules[{}] must be a Rule'.format(i))
            rule = Rule(*rule) if len(rule) == 3 else Rule(rule[0], rule[1], 0)
        checked.append(_check_rule(rule, 'rules[{}]'.format(i)))

    logger.debug('loaded grammar with axiom %r and %d rules',
                 axiom, len(checked))

    return Grammar(axiom, tuple(checked))

######################################################################
# grammar definition in dictionary form:
#
#   { 'axiom': 'X',
#     'rules': [ { 'input': 'F', 'output': 'FF', 'probability': 0 } ] }

def grammar_from_dict(data):

    _require(isinstance(data, dict), 'grammar must be a dictionary')
    _require('axiom' in data, 'grammar is missing "axiom"')
    _require(isinstance(data.get('rules'), list),
             'grammar "rules" must be a list')

    rules = []

    for i, item in enumerate(data['rules']):

        path = 'rules[{}]'.format(i)

        _require(isinstance(item, dict), '{} must be a dictionary'.format(path))
        _require('input' in item and 'output' in item,
                 '{} needs "input" and "output"'.format(path))

        rules.append(Rule(item['input'], item['output'],
                          item.get('probability', 0)))

    return make_grammar(data['axiom'], rules)

######################################################################
# symbol -> list of candidate rules, built once per grammar

class RuleIndex(object):

    def __init__(self, rules):

        rules = list(rules)

        if not rules:
            raise ConfigError('cannot index an empty rule list')

        self._rules = dict()

        for rule in rules:
            self._rules.setdefault(rule.input, []).append(rule)

    def rules_for(self, symbol):
        return self._rules.get(symbol, [])

    def __contains__(self, symbol):
        return symbol in self._rules

    def __len__(self):
        return len(self._rules)

######################################################################
# pick one rule from a non-empty candidate list. With all-zero
# probabilities the first rule wins and no random draw is made;
# otherwise exactly one draw from rng is consumed.

def select_rule(rules, rng):

    if not rules:
        raise ValueError('select_rule needs at least one candidate rule')

    total = sum(rule.probability for rule in rules)

    if total <= 0:
        return rules[0]

    r = rng.next() * total

    cumulative = 0.0

    for rule in rules:
        cumulative += rule.probability
        if r < cumulative:
            return rule

    # r == total can only happen when next() returns exactly 1.0
    return [ rule for rule in rules if rule.probability > 0 ][-1]
