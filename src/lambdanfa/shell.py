"""
Interactive command shell for building and querying a lambda NFA.

Commands are case-insensitive and recognised by their first letter::

    nfa> INIT 3
    nfa> ADD 1 2 a
    nfa> ADD 2 3 b
    nfa> CHECK "ab"
    In language.
    nfa> PREFIX "abba"
    "ab"
"""

import argparse
import sys

from loguru import logger

from lambdanfa import versionstring
from lambdanfa.automata.alphabet import DEFAULT_ALPHABET
from lambdanfa.automata.builders import sample_nfa
from lambdanfa.automata.nfa import MINIMUM_STATES, LambdaNFA

PROMPT = "nfa> "


class ShellError(Exception):
    """A problem with a command line, reported to the user as ``Error! ...``."""


class Shell:
    """
    Reads commands from ``stdin`` and writes results to ``stdout`` until QUIT
    or the end of the input.

    New automata created by INIT start at state 1 and accept at their last
    state.
    """

    def __init__(self, stdin=None, stdout=None, prompt=PROMPT, alphabet=DEFAULT_ALPHABET):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.prompt = prompt
        self.alphabet = alphabet
        self.automaton = None

        self.commands = {
            "h": self.do_help,
            "d": self.do_display,
            "g": self.do_generate,
            "q": self.do_quit,
            "i": self.do_init,
            "a": self.do_add,
            "c": self.do_check,
            "p": self.do_prefix,
        }

    def write(self, text):
        print(text, file=self.stdout)

    def run(self):
        while True:
            self.stdout.write(self.prompt)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                break
            if not self.execute(line):
                break

    def execute(self, line):
        """
        Runs a single command line.

        Returns:
            bool: False once the shell should stop.
        """
        args = line.split()
        try:
            if not args:
                raise ShellError("No input!")
            handler = self.commands.get(args[0][0].lower())
            if handler is None:
                raise ShellError("Invalid Command")
            return handler(args[1:]) is not False
        except ShellError as e:
            self.write(f"Error! {e}")
            return True

    # Argument helpers

    def _no_arguments(self, args):
        if args:
            raise ShellError("Program doesn't allow additional text.")

    def _integer(self, text):
        try:
            return int(text)
        except ValueError:
            raise ShellError("An integer is needed for this command") from None

    def _initialized(self):
        if self.automaton is None:
            raise ShellError("Automaton isn't initialized")
        return self.automaton

    def _quoted_word(self, args, command):
        if not args:
            raise ShellError(f"A string is needed for the {command} command")

        text = " ".join(args)
        if len(text) < 2 or text[0] != '"' or text[-1] != '"':
            raise ShellError("String must be enclosed in quotation marks")
        word = text[1:-1]
        if not self.alphabet.valid_word(word, allow_epsilon=False):
            raise ShellError("String not in alphabet")
        return word

    # Commands

    def do_help(self, args):
        self._no_arguments(args)
        ab = self.alphabet
        self.write(
            "\n".join(
                [
                    "Lambda NFA",
                    "Commands are case-insensitive and may be abbreviated to "
                    "their first letter.",
                    'Strings must be enclosed in quotation marks, e.g. "abc".',
                    f"Transition labels: {ab.symbols} and {ab.epsilon} (lambda).",
                    "",
                    "INIT n     - create an automaton with n states "
                    "(start 1, accepting n)",
                    "ADD i j c  - add a transition from state i to state j labelled c",
                    "CHECK s    - check whether s is in the language",
                    "PREFIX s   - find the longest prefix of s in the language",
                    "DISPLAY    - list all transitions",
                    "GENERATE   - load the built-in sample automaton",
                    "HELP       - show this text",
                    "QUIT       - leave the shell",
                ]
            )
        )

    def do_display(self, args):
        self._no_arguments(args)
        self.write(self._initialized().render())

    def do_generate(self, args):
        self._no_arguments(args)
        self.automaton = sample_nfa()

    def do_quit(self, args):
        self._no_arguments(args)
        return False

    def do_init(self, args):
        if not args:
            raise ShellError("An integer is needed for this command")
        size = self._integer(args[0])
        self._no_arguments(args[1:])
        if size < MINIMUM_STATES:
            raise ShellError("Cannot initialize with size <= 0")
        self.automaton = LambdaNFA(size, MINIMUM_STATES, [size], alphabet=self.alphabet)

    def do_add(self, args):
        if len(args) < 3:
            raise ShellError("ADD needs two states and a character")
        source = self._integer(args[0])
        target = self._integer(args[1])
        label = args[2]
        if len(label) != 1:
            raise ShellError(f"{label} is not a single character")
        self._no_arguments(args[3:])

        if not self._initialized().add_transition(source, target, label):
            raise ShellError("Transition couldn't be added")

    def do_check(self, args):
        word = self._quoted_word(args, "CHECK")
        if self._initialized().accepts(word):
            self.write("In language.")
        else:
            self.write("Not in language.")

    def do_prefix(self, args):
        word = self._quoted_word(args, "PREFIX")
        prefix = self._initialized().longest_accepted_prefix(word)
        if prefix is None:
            self.write("No prefix in language.")
        else:
            self.write(f'"{prefix}"')


def build_arg_parser():
    p = argparse.ArgumentParser(
        prog="lambdanfa",
        description="Interactive shell for nondeterministic automata with "
        "lambda transitions.",
    )
    p.add_argument("--verbose", action="store_true", help="log engine activity to stderr")
    p.add_argument("--prompt", default=PROMPT, help="prompt text (default: %(default)r)")
    p.add_argument("--version", action="version", version=versionstring())
    return p


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    if args.verbose:
        logger.enable("lambdanfa")

    try:
        Shell(prompt=args.prompt).run()
    except KeyboardInterrupt:
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
