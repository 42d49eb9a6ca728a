"""Source formatter: renders a parsed Program back into canonical herlang source.

Output always uses the plain keyword spellings, four-space indentation and the minimal set of parentheses needed to
reparse into the same tree. Blank statements become empty lines, so the visual grouping of the original source
survives. Formatting the formatter's own output gives the same text back.
"""

from herlang.syntax import tree
from herlang.syntax.lexical import escape, is_id_continue, is_id_start, nfc_normalize
from herlang.syntax.parser import PRECEDENCES, Precedence
from herlang.syntax.token import KEYWORDS

OPERATOR_PRECEDENCES = {kind.value: precedence for kind, precedence in PRECEDENCES.items()}
ATOM = Precedence.CALL + 1


def is_plain_name(name):
    """Whether name can be written after a dot, i.e. lexes back into the same identifier."""
    return bool(name) and is_id_start(name[0]) and all(is_id_continue(char) for char in name[1:]) \
        and name not in KEYWORDS and nfc_normalize(name) == name


class Formatter:
    INDENT = "    "

    def __init__(self):
        self.depth = 0

    def format(self, program: tree.Program) -> str:
        """Returns formatted source for program, ending with a newline (empty string for an empty program)."""
        statements = list(program)
        while statements and isinstance(statements[0], tree.Blank):
            statements.pop(0)
        while statements and isinstance(statements[-1], tree.Blank):
            statements.pop()

        lines = self._format_statements(statements)
        return "\n".join(lines) + "\n" if lines else ""

    def _format_statements(self, statements):
        lines = []
        for idx, stmt in enumerate(statements):
            following = statements[idx + 1] if idx + 1 < len(statements) else None
            if isinstance(stmt, tree.Blank):
                lines.append("")
            else:
                lines.append(self.INDENT * self.depth + self.format_statement(stmt, following))
        return lines

    def format_statement(self, stmt, following=None) -> str:
        if isinstance(stmt, tree.Let):
            return f"let {stmt.name} = {self.format_expression(stmt.value)};"
        if isinstance(stmt, tree.Return):
            return f"return {self.format_expression(stmt.value)};"
        if isinstance(stmt, tree.Break):
            return "break;"
        if isinstance(stmt, tree.Continue):
            return "continue;"
        if isinstance(stmt, tree.ExprStmt):
            text = self.format_expression(stmt.expr)
            # a block-ending statement needs no semicolon unless the next line could continue it as an operand
            if isinstance(stmt.expr, (tree.If, tree.While)) and not isinstance(following, tree.ExprStmt):
                return text
            return text + ";"
        raise TypeError(f"cannot format statement {stmt!r}")

    def format_block(self, block: tree.Block) -> str:
        if not block:
            return "{}"

        self.depth += 1
        try:
            lines = self._format_statements(list(block))
        finally:
            self.depth -= 1

        return "{\n" + "\n".join(lines) + "\n" + self.INDENT * self.depth + "}"

    def format_expression(self, expr) -> str:
        if isinstance(expr, tree.Ident):
            return expr.name
        if isinstance(expr, tree.IntLiteral):
            return str(expr.value)
        if isinstance(expr, tree.StringLiteral):
            return escape(expr.value)
        if isinstance(expr, tree.BoolLiteral):
            return "true" if expr.value else "false"
        if isinstance(expr, tree.ArrayLiteral):
            return "[" + ", ".join(self.format_expression(element) for element in expr.elements) + "]"
        if isinstance(expr, tree.HashLiteral):
            pairs = (f"{self.format_expression(key)}: {self.format_expression(value)}" for key, value in expr.pairs)
            return "{" + ", ".join(pairs) + "}"

        if isinstance(expr, tree.Prefix):
            return expr.op + self._operand(expr.right, Precedence.PREFIX)
        if isinstance(expr, tree.Infix):
            precedence = OPERATOR_PRECEDENCES[expr.op]
            left = self._operand(expr.left, precedence)
            right = self._operand(expr.right, precedence + 1)  # left-associative
            return f"{left} {expr.op} {right}"
        if isinstance(expr, tree.Index):
            left = self._operand(expr.left, Precedence.INDEX)
            if isinstance(expr.index, tree.StringLiteral) and is_plain_name(expr.index.value):
                return f"{left}.{expr.index.value}"
            return f"{left}[{self.format_expression(expr.index)}]"
        if isinstance(expr, tree.Call):
            args = ", ".join(self.format_expression(arg) for arg in expr.args)
            return f"{self._operand(expr.func, Precedence.CALL)}({args})"

        if isinstance(expr, tree.If):
            text = f"if ({self.format_expression(expr.cond)}) {self.format_block(expr.consequence)}"
            if expr.alternative is not None:
                text += f" else {self.format_block(expr.alternative)}"
            return text
        if isinstance(expr, tree.While):
            return f"while ({self.format_expression(expr.cond)}) {self.format_block(expr.consequence)}"
        if isinstance(expr, tree.Func):
            params = ", ".join(param.name for param in expr.params)
            return f"fn({params}) {self.format_block(expr.body)}"

        raise TypeError(f"cannot format expression {expr!r}")

    def _operand(self, expr, minimum) -> str:
        """Formats expr, parenthesized if it binds looser than minimum."""
        text = self.format_expression(expr)
        if _precedence(expr) < minimum:
            return f"({text})"
        return text


def _precedence(expr):
    if isinstance(expr, tree.Infix):
        return OPERATOR_PRECEDENCES[expr.op]
    if isinstance(expr, tree.Prefix):
        return Precedence.PREFIX
    if isinstance(expr, tree.Index):
        return Precedence.INDEX
    if isinstance(expr, tree.Call):
        return Precedence.CALL
    return ATOM
