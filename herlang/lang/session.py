"""Session control for herlang. Parses and evaluates herlang source, either a whole file in file mode or line by line
in command-line mode. All programs of a session share one root environment, so bindings made by one shell line are
visible to the next.
"""

import logging

from herlang.lang.error import GenericException, escape_braces
from herlang.runtime.builtins import new_builtins
from herlang.runtime.environment import Environment
from herlang.runtime.evaluator import Evaluator
from herlang.runtime.objects import NULL, BreakSignal, ContinueSignal, Error, Terminate
from herlang.syntax.lexical import Lexer
from herlang.syntax.parser import ReservedName, parse
from herlang.syntax.token import KEYWORDS, TokenKind

logger = logging.getLogger(__name__)

OPENERS = {TokenKind.LPAREN: TokenKind.RPAREN, TokenKind.LBRACE: TokenKind.RBRACE,
           TokenKind.LBRACKET: TokenKind.RBRACKET}
LET_SPELLINGS = tuple(name for name, token in KEYWORDS.items() if token.kind == TokenKind.LET)


class Session:
    """Governs a herlang session, with control over the root environment."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, output=print, max_depth=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = Environment(store=new_builtins(output))
        self.evaluator = Evaluator(self.env, max_depth)

        self.to_run = {}   # dict of line num: (source, Program) to evaluate
        self.results = []  # rendered non-null results, in order

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            if source and not source.isspace():
                self.add(source, 1)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, add_to_prev=""):
        """Preprocesses a line from the command-line. add_to_prev is the unfinished text of the previous lines, if
        any. Returns the joined text and whether it still needs a continuation line, which is the case while a
        bracket is left open.
        """
        line = add_to_prev + line if add_to_prev else line

        depth = 0
        for token in Lexer(line):
            if token.kind in OPENERS:
                depth += 1
            elif token.kind in OPENERS.values():
                depth -= 1

        if depth > 0:
            return line + "\n", True
        return line, False

    def add(self, source, line_num):
        """Parses source and queues it to be run. Evaluation is delayed until run is called. Raises a
        GenericException carrying every parse diagnostic if source does not parse.
        """
        if not source or source.isspace():
            raise ValueError("nothing to add")

        self._register_line(source, line_num)  # in case error is raised

        program, errors = parse(source)
        logger.debug("parsed %d statement(s) at %s:%d", len(program), self.path, line_num)

        if errors:
            messages = "\n".join(escape_braces(error) for error in errors)
            snippet, start, end = self._locate(source, errors)
            if snippet is None:
                raise GenericException(messages, diagnosis=False)
            raise GenericException(messages, [snippet], start, end)

        self.to_run[line_num] = (source, program)
        self.error_handler.remove_line(self.path)  # error was not raised

    def _register_line(self, source, line_num):
        """Registers source in traceback. Whole files are not echoed, only command-line input is."""
        if self.cmd_line:
            self.error_handler.register_line(self.path, source.rstrip("\n"), line_num)

    @staticmethod
    def _locate(source, errors):
        """Returns the source line holding the first reserved name binding with the name's position in it, or
        (None, 0, 0) if no diagnostic can be pinned to one.
        """
        for error in errors:
            if not isinstance(error, ReservedName):
                continue
            for source_line in source.splitlines():
                start = source_line.find(error.name)
                while start != -1:
                    if source_line[:start].rstrip().endswith(LET_SPELLINGS):
                        return source_line, start, start + len(error.name)
                    start = source_line.find(error.name, start + 1)
        return None, 0, 0

    def run(self):
        """Evaluates this session's queued programs in order. Runtime errors are raised as GenericExceptions and quit
        is raised as SystemExit.
        """
        for line_num, (source, program) in list(self.to_run.items()):
            self._register_line(source, line_num)

            try:
                result = self.evaluator.eval(program)
            finally:
                del self.to_run[line_num]
            logger.debug("evaluated %s:%d to %s", self.path, line_num, type(result).__name__)

            if isinstance(result, Error):
                raise GenericException(escape_braces(result.message), diagnosis=False)
            if isinstance(result, Terminate):
                raise SystemExit(result.code)
            if isinstance(result, (BreakSignal, ContinueSignal)):
                self.error_handler.warn(escape_braces(f"{result.inspect()} outside of a loop"), diagnosis=False)
            elif result is not NULL:
                self.results.append(result.inspect())

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the earliest rendered result."""
        return self.results.pop(0)
