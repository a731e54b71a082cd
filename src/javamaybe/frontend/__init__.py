"""Java frontend: lark grammar, parser and parse-tree transformer"""

from .parser import Parser, default_parser, parse_type

__all__ = ['Parser', 'default_parser', 'parse_type']
