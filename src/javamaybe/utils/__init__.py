"""Utilities for javamaybe"""

from .io_utils import read_source_file, write_source_file, iter_java_files

__all__ = ['read_source_file', 'write_source_file', 'iter_java_files']
