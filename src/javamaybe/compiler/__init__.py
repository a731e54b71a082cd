"""
Compiler: options, task processing and the file-level driver.
"""

from .processor import Task, SyncTaskProcessor
from .options import Options, build_arg_parser, parse_options, build_type_solver
from .driver import CompilerDriver, DriverResult

__all__ = [
    'Task', 'SyncTaskProcessor',
    'Options', 'build_arg_parser', 'parse_options', 'build_type_solver',
    'CompilerDriver', 'DriverResult',
]
