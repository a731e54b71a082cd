"""
Tests for JavaPrinter.
"""

from textwrap import dedent

import pytest
from javamaybe.backends.java_printer import JavaPrinter
from javamaybe.shared.errors import JavaMaybeImplementationError
from javamaybe.shared.nodes import ExpressionStmt, LocalVarDeclStmt, Node
from tests.test_utils import find_type, parse, to_java


CANONICAL = dedent("""\
    package com.example;

    import java.util.List;
    import static java.lang.Math.max;

    @SuppressWarnings("unchecked")
    public class Shapes<T extends Comparable<T>> extends Base implements Runnable, java.io.Serializable {
        private static final int LIMIT = 10;

        private List<? extends Number> sizes;

        static {
            System.out.println("loaded");
        }

        public Shapes(int limit) {
            this(limit, null);
        }

        Shapes(int limit, String name) {
            super();
        }

        @Override
        public void run() {
            int[] counts = new int[] {1, 2, 3};
            String[][] grid = new String[LIMIT][];
            for (int i = 0, j = 1; i < counts.length; i++, j--) {
                counts[i] += j;
            }
            for (int c : counts) {
                if (c > 0) {
                    continue;
                } else if (c < 0) {
                    break;
                } else {
                    return;
                }
            }
            do {
                counts[0]--;
            } while (counts[0] > 0 && !(counts[0] == -1));
            try {
                Object o = (Object) grid;
                boolean b = o instanceof String[][];
            } catch (IllegalStateException | IllegalArgumentException e) {
                throw new RuntimeException(e.getMessage());
            } finally {
                synchronized (this) {
                    sizes = null;
                }
            }
            switch (counts.length) {
                case 1:
                    assert LIMIT > 0 : "limit";
                    break;
                default:
                    ;
            }
        }

        public static <U> U pick(boolean first, U a, U b) throws Exception {
            return first ? a : b;
        }

        abstract int size(String... names);

        enum Kind {
            SQUARE, CIRCLE(2);

            Kind() {
            }

            Kind(int sides) {
            }
        }

        interface Visitor {
            void visit(Shapes<?> shape);
        }
    }

    enum Empty {
    }
""")


class TestJavaPrinter:

    def test_canonical_source_prints_unchanged(self):
        assert to_java(parse(CANONICAL)) == CANONICAL

    def test_single_statement_bodies_are_indented(self):
        unit = parse("class A { void m(int x) { if (x > 0) x = 1; while (x > 0) x--; } }")
        assert to_java(find_type(unit, "A").methods[0]) == dedent("""\
            void m(int x) {
                if (x > 0)
                    x = 1;
                while (x > 0)
                    x--;
            }
        """)

    def test_expressions_and_types_print_as_text(self):
        unit = parse("class A { void m(int x) { int y = - -x + (x * 2); Object k = String.class; } }")
        first, second = find_type(unit, "A").methods[0].body.statements
        assert isinstance(first, LocalVarDeclStmt)
        printer = JavaPrinter()
        assert printer.print(first.variables[0].initializer) == "- -x + (x * 2)"
        assert printer.print(first.type) == "int"
        assert printer.print(second.variables[0].initializer) == "String.class"

    def test_statement_prints_with_newline(self):
        unit = parse("class A { void m() { f(1, \"a\", 'c', 2.5f, null); } }")
        stmt = find_type(unit, "A").methods[0].body.statements[0]
        assert isinstance(stmt, ExpressionStmt)
        assert to_java(stmt) == "f(1, \"a\", 'c', 2.5f, null);\n"

    def test_indent_width(self):
        unit = parse("class A { int x; }")
        assert JavaPrinter(indent_width=2).print(unit) == "class A {\n  int x;\n}\n"

    def test_printer_is_reusable(self):
        printer = JavaPrinter()
        unit = parse("class A { }")
        assert printer.print(unit) == printer.print(unit) == "class A {\n}\n"

    def test_unknown_node_is_an_internal_error(self):
        class Stray(Node):
            __slots__ = ()

        with pytest.raises(JavaMaybeImplementationError, match="no printer for Stray"):
            JavaPrinter().print(Stray())
