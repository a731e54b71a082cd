"""
Source Location (Span)

Pattern: JavaParser Range / Position
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location of a node, taken from lark's propagated positions.

    - File, line, column (1-based, as lark reports them)
    - end_line / end_column when the parser knows them (0 otherwise)
    - Immutable (frozen) so clones can share it
    """
    file: str
    line: int
    column: int
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"

    def __deepcopy__(self, memo) -> "SourceLocation":
        return self


UNKNOWN_LOCATION = SourceLocation(file="<unknown>", line=0, column=0)
