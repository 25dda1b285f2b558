"""Abstract Syntax Tree nodes for filter and comparator expressions."""

from dataclasses import dataclass
from typing import Any

@dataclass
class Node:
    """Base class for all AST nodes."""
    pass

@dataclass
class Literal(Node):
    """Represents a literal value (string, number, boolean, null)."""
    value: Any

@dataclass
class ListLiteral(Node):
    """Represents an inline list (e.g., ['a', 'b'])."""
    items: list[Node]

@dataclass
class Variable(Node):
    """Represents a field reference (e.g., doc.age or a.name)."""
    name: str

@dataclass
class BinaryOp(Node):
    """Represents a binary operation (e.g., age > 30)."""
    left: Node
    operator: str
    right: Node

@dataclass
class UnaryOp(Node):
    """Represents a unary operation (e.g., not a, -1)."""
    operator: str
    operand: Node

@dataclass
class FunctionCall(Node):
    """Represents a function call (e.g., starts_with(name, 'A'))."""
    name: str
    arguments: list[Node]

@dataclass
class Subscript(Node):
    """Represents a keyed lookup (e.g., doc['first name'])."""
    container: Node
    key: Node
