"""Generate Python source for the Lox AST node classes.

The node families are described as text, one node per line:

    Binary : Expr left, Token operator, Expr right

The descriptions are parsed with a small Lark grammar into `NodeSpec`
records, which are rendered as a module of frozen dataclasses deriving from
the family's base class. This is a development tool: the interpreter never
imports it.

Usage:
    python -m lox.tool.generate_ast <output directory>
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from lark import Lark, Transformer


EXPR_DESCRIPTION = """
    Assign   : Token name, Expr value
    Binary   : Expr left, Token operator, Expr right
    Grouping : Expr expression
    Literal  : Any value
    Logical  : Expr left, Token operator, Expr right
    Unary    : Token operator, Expr right
    Variable : Token name
"""

STMT_DESCRIPTION = """
    Block      : List[Stmt] statements
    Expression : Expr expression
    If         : Expr condition, Stmt then_branch, Optional[Stmt] else_branch
    Print      : Expr expression
    Var        : Token name, Optional[Expr] initializer
    While      : Expr condition, Stmt body
"""


DESCRIPTION_GRAMMAR = r"""
    start: node+
    node: NAME ":" field ("," field)*
    field: type_ref NAME
    type_ref: NAME ("[" type_ref "]")?

    %import common.CNAME -> NAME
    %import common.WS
    %ignore WS
"""


DESCRIPTION_PARSER = Lark(DESCRIPTION_GRAMMAR, parser='lalr')


@dataclass(frozen=True)
class FieldSpec:
    type: str
    name: str


@dataclass(frozen=True)
class NodeSpec:
    name: str
    fields: Tuple[FieldSpec, ...]


class DescriptionTransformer(Transformer):
    """Transforms the description parse tree into NodeSpec records."""

    def start(self, items):
        return list(items)

    def node(self, items):
        return NodeSpec(str(items[0]), tuple(items[1:]))

    def field(self, items):
        return FieldSpec(items[0], str(items[1]))

    def type_ref(self, items):
        if len(items) == 1:
            return str(items[0])
        return f"{items[0]}[{items[1]}]"


def parse_description(text: str) -> List[NodeSpec]:
    """Parse node descriptions into NodeSpec records, in source order."""
    tree = DESCRIPTION_PARSER.parse(text)
    return DescriptionTransformer().transform(tree)


def render_module(base: str, specs: List[NodeSpec]) -> str:
    """Render a module defining `base` and one dataclass per spec."""
    lines = [
        f'"""{base} nodes for the Lox AST. Generated by lox.tool.generate_ast."""',
        '',
        'from __future__ import annotations',
        '',
        'from dataclasses import dataclass',
        'from typing import Any, List, Optional',
        '',
        'from lox.tokens import Token',
        '',
        '',
        '@dataclass(frozen=True)',
        f'class {base}:',
        '    pass',
    ]
    for spec in specs:
        lines.extend(['', '', '@dataclass(frozen=True)', f'class {spec.name}({base}):'])
        for field in spec.fields:
            lines.append(f'    {field.name}: {field.type}')
    return '\n'.join(lines) + '\n'


def define_ast(output_dir: Path, base: str, description: str) -> Path:
    path = output_dir / f'{base.lower()}_nodes.py'
    source = render_module(base, parse_description(description))
    with open(path, 'w', encoding='utf-8') as out:
        out.write(source)
    return path


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: generate_ast <output directory>", file=sys.stderr)
        sys.exit(64)
    output_dir = Path(args[0])
    output_dir.mkdir(parents=True, exist_ok=True)
    for base, description in (('Expr', EXPR_DESCRIPTION), ('Stmt', STMT_DESCRIPTION)):
        print(str(define_ast(output_dir, base, description)))


if __name__ == '__main__':
    main()
