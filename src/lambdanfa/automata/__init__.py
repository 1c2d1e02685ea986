from loguru import logger

from lambdanfa.automata.alphabet import DEFAULT_ALPHABET, Alphabet
from lambdanfa.automata.nfa import LambdaNFA, StateCountError
from lambdanfa.automata.state import State
from lambdanfa.automata.transition import Transition

# Library code stays quiet until an application calls logger.enable("lambdanfa")
logger.disable("lambdanfa")

__all__ = [
    "Alphabet",
    "DEFAULT_ALPHABET",
    "LambdaNFA",
    "State",
    "StateCountError",
    "Transition",
]
