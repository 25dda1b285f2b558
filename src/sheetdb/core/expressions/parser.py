"""Parser for filter and comparator expressions."""

from .ast import (
    BinaryOp,
    FunctionCall,
    ListLiteral,
    Literal,
    Node,
    Subscript,
    UnaryOp,
    Variable,
)
from .exceptions import ExpressionSyntaxError
from .lexer import Lexer, Token, TokenType

COMPARISON_OPERATORS = {
    TokenType.EQ: "==",
    TokenType.NEQ: "!=",
    TokenType.LT: "<",
    TokenType.GT: ">",
    TokenType.LTE: "<=",
    TokenType.GTE: ">=",
    TokenType.IN: "in",
}

LITERAL_TOKENS = (
    TokenType.INTEGER,
    TokenType.FLOAT,
    TokenType.STRING,
    TokenType.BOOLEAN,
    TokenType.NULL,
)


class Parser:
    """Recursive descent parser for expressions."""

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.current_token: Token = self.lexer.get_next_token()

    def error(self, message: str) -> None:
        """Raise a syntax error."""
        raise ExpressionSyntaxError(message, self.current_token.position)

    def consume(self, token_type: TokenType) -> None:
        """Consume the current token if it matches the expected type."""
        if self.current_token.type == token_type:
            self.current_token = self.lexer.get_next_token()
        else:
            self.error(f"Expected {token_type.name}, found {self.current_token.type.name}")

    def parse(self) -> Node:
        """Parse the entire expression."""
        if self.current_token.type == TokenType.EOF:
            self.error("Empty expression")
        node = self.expression()
        if self.current_token.type != TokenType.EOF:
            self.error("Unexpected token after expression")
        return node

    def expression(self) -> Node:
        """Parse logical OR expressions."""
        node = self.term()

        while self.current_token.type == TokenType.OR:
            self.consume(TokenType.OR)
            right = self.term()
            node = BinaryOp(left=node, operator="or", right=right)

        return node

    def term(self) -> Node:
        """Parse logical AND expressions."""
        node = self.factor()

        while self.current_token.type == TokenType.AND:
            self.consume(TokenType.AND)
            right = self.factor()
            node = BinaryOp(left=node, operator="and", right=right)

        return node

    def factor(self) -> Node:
        """Parse logical NOT expressions."""
        if self.current_token.type == TokenType.NOT:
            self.consume(TokenType.NOT)
            node = self.factor()
            return UnaryOp(operator="not", operand=node)

        return self.comparison()

    def comparison(self) -> Node:
        """Parse comparison and membership expressions."""
        node = self.unary()

        if self.current_token.type in COMPARISON_OPERATORS:
            token = self.current_token
            self.consume(token.type)
            right = self.unary()
            node = BinaryOp(left=node, operator=COMPARISON_OPERATORS[token.type], right=right)

        return node

    def unary(self) -> Node:
        """Parse arithmetic negation."""
        if self.current_token.type == TokenType.MINUS:
            self.consume(TokenType.MINUS)
            return UnaryOp(operator="-", operand=self.unary())

        return self.postfix(self.atom())

    def postfix(self, node: Node) -> Node:
        """Parse trailing subscripts such as doc['first name']."""
        while self.current_token.type == TokenType.LBRACKET:
            self.consume(TokenType.LBRACKET)
            key = self.expression()
            self.consume(TokenType.RBRACKET)
            node = Subscript(container=node, key=key)
        return node

    def atom(self) -> Node:
        """Parse basic units: literals, lists, variables, function calls, parentheses."""
        token = self.current_token

        if token.type in LITERAL_TOKENS:
            self.consume(token.type)
            return Literal(token.value)

        if token.type == TokenType.LPAREN:
            self.consume(TokenType.LPAREN)
            node = self.expression()
            self.consume(TokenType.RPAREN)
            return node

        if token.type == TokenType.LBRACKET:
            return self._list_literal()

        if token.type == TokenType.IDENTIFIER:
            identifier_value = str(token.value)
            self.consume(TokenType.IDENTIFIER)

            if self.current_token.type == TokenType.LPAREN:
                return self._function_call(identifier_value)
            return Variable(identifier_value)

        self.error(f"Unexpected token: {token.type.name}")
        return Node() # Should not reach here

    def _arguments(self, closing: TokenType) -> list[Node]:
        """Parse a comma separated list of expressions up to the closing token."""
        items = []
        if self.current_token.type != closing:
            items.append(self.expression())
            while self.current_token.type == TokenType.COMMA:
                self.consume(TokenType.COMMA)
                items.append(self.expression())
        self.consume(closing)
        return items

    def _list_literal(self) -> Node:
        """Parse an inline list."""
        self.consume(TokenType.LBRACKET)
        return ListLiteral(self._arguments(TokenType.RBRACKET))

    def _function_call(self, name: str) -> Node:
        """Parse function call arguments."""
        self.consume(TokenType.LPAREN)
        return FunctionCall(name, self._arguments(TokenType.RPAREN))
