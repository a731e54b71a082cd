"""
Configuration constants for javamaybe
"""

import os

# Marker type: a parameter typed Any is forked into concrete overloads
ANY_TYPE_NAME = "Any"
ANY_QUALIFIED_NAME = "javamaybe.Any"

# Members annotated @CompileOnly exist only to make the input compile
COMPILE_ONLY_ANNOTATION = "CompileOnly"
COMPILE_ONLY_QUALIFIED_NAME = "javamaybe.CompileOnly"

# Root of the reference type hierarchy; substituted for type variables and
# resolution gaps
FALLBACK_TYPE_NAME = "java.lang.Object"

# Always-visible package for simple type names
IMPLICIT_IMPORT_PACKAGE = "java.lang"

# Source files
JAVA_FILE_EXTENSION = ".java"
CLASS_FILE_EXTENSION = ".class"
ARCHIVE_EXTENSIONS = (".jar", ".zip")
DEFAULT_FILE_ENCODING = "utf-8"

# CLI defaults
DEFAULT_INPUT_PATH = "."
DEFAULT_OUTPUT_DIR = os.path.join(".", "out")

# Printer
INDENT_WIDTH = 4

# Parser
PARSER_START_RULES = ["compilation_unit", "type_only"]
