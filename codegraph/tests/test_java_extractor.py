import pytest
from pathlib import Path
import sys

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from codegraph.extractors import JavaExtractor
from codegraph.types import EdgeType, NodeType


FILE = "src/Greeter.java"


def edge_pairs(result, edge_type):
    return {(edge.source, edge.target) for edge in result.edges if edge.type == edge_type}


class TestJavaDefinitions:
    """Test nodes extracted from the sample class."""

    def test_module_node(self, sample_java):
        result = JavaExtractor().parse(sample_java, FILE)
        module = result.nodes[0]

        assert module.id == "src/Greeter.java#module"
        assert module.name == "Greeter.java"
        assert module.properties["language"] == "java"

    def test_classes(self, sample_java):
        result = JavaExtractor().parse(sample_java, FILE)
        classes = {node.id: node for node in result.nodes if node.type == NodeType.CLASS}

        assert set(classes) == {"src/Greeter.java#Greeter", "src/Greeter.java#LoudGreeter"}
        greeter = classes["src/Greeter.java#Greeter"]
        assert greeter.line_start == 7
        assert greeter.line_end == 21

    def test_methods_and_constructor(self, sample_java):
        result = JavaExtractor().parse(sample_java, FILE)
        functions = {node.id: node for node in result.nodes if node.type == NodeType.FUNCTION}

        assert set(functions) == {
            "src/Greeter.java#Greeter.Greeter",
            "src/Greeter.java#Greeter.format",
            "src/Greeter.java#Greeter.greet",
            "src/Greeter.java#LoudGreeter.shout",
        }
        assert functions["src/Greeter.java#Greeter.format"].properties["class"] == "Greeter"
        assert functions["src/Greeter.java#Greeter.format"].line_start == 13
        assert functions["src/Greeter.java#Greeter.format"].line_end == 15

    def test_fields(self, sample_java):
        result = JavaExtractor().parse(sample_java, FILE)
        variables = [node for node in result.nodes if node.type == NodeType.VARIABLE]

        # Locals inside method bodies are not fields
        assert [node.id for node in variables] == ["src/Greeter.java#Greeter.names"]

    def test_imports(self, sample_java):
        result = JavaExtractor().parse(sample_java, FILE)
        imports = [node for node in result.nodes if node.properties.get("import")]

        assert [node.name for node in imports] == ["java/util/List", "java/util/ArrayList"]
        assert imports[0].id == "src/Greeter.java#import_java_util_List"
        assert edge_pairs(result, EdgeType.IMPORT) == {
            ("src/Greeter.java#import_java_util_List", "src/Greeter.java#module"),
            ("src/Greeter.java#import_java_util_ArrayList", "src/Greeter.java#module"),
        }


class TestJavaRelations:
    """Test call, inheritance and dependency edges."""

    def test_calls(self, sample_java):
        result = JavaExtractor().parse(sample_java, FILE)

        assert edge_pairs(result, EdgeType.CALL) == {
            ("src/Greeter.java#Greeter.greet", "src/Greeter.java#Greeter.format"),
            ("src/Greeter.java#LoudGreeter.shout", "src/Greeter.java#Greeter.greet"),
        }

    def test_inheritance(self, sample_java):
        result = JavaExtractor().parse(sample_java, FILE)

        assert edge_pairs(result, EdgeType.INHERITANCE) == {
            ("src/Greeter.java#LoudGreeter", "src/Greeter.java#Greeter"),
        }

    def test_instantiation_is_a_dependency(self, sample_java):
        result = JavaExtractor().parse(sample_java, FILE)

        assert edge_pairs(result, EdgeType.DEPENDENCY) == {
            ("src/Greeter.java#LoudGreeter.shout", "src/Greeter.java#Greeter"),
        }

    def test_builtin_calls_are_ignored(self):
        code = (
            "public class App {\n"
            "    public String toString() {\n"
            "        return \"\";\n"
            "    }\n"
            "    public void run() {\n"
            "        System.out.println(toString());\n"
            "    }\n"
            "}\n"
        )
        result = JavaExtractor().parse(code, "App.java")

        assert edge_pairs(result, EdgeType.CALL) == set()


class TestJavaLexical:
    """Comments, annotations and interfaces."""

    def test_block_comments_are_skipped(self):
        code = (
            "public class App {\n"
            "    void helper() {\n"
            "    }\n"
            "    void run() {\n"
            "        /*\n"
            "         * helper();\n"
            "         */\n"
            "        // helper();\n"
            "    }\n"
            "}\n"
        )
        result = JavaExtractor().parse(code, "App.java")

        assert edge_pairs(result, EdgeType.CALL) == set()

    def test_annotated_method(self):
        code = (
            "public class App {\n"
            "    @Override\n"
            "    public int hashCode() {\n"
            "        return 1;\n"
            "    }\n"
            "    @Deprecated public void legacy() {\n"
            "    }\n"
            "}\n"
        )
        result = JavaExtractor().parse(code, "App.java")
        functions = {node.name for node in result.nodes if node.type == NodeType.FUNCTION}

        assert functions == {"hashCode", "legacy"}

    def test_interface_methods(self):
        code = (
            "public interface Shape {\n"
            "    double area();\n"
            "    double perimeter();\n"
            "}\n"
        )
        result = JavaExtractor().parse(code, "Shape.java")
        by_id = {node.id: node for node in result.nodes}

        assert by_id["Shape.java#Shape"].type == NodeType.CLASS
        assert by_id["Shape.java#Shape.area"].type == NodeType.FUNCTION
        assert by_id["Shape.java#Shape.perimeter"].type == NodeType.FUNCTION
        assert by_id["Shape.java#Shape"].line_end == 4

    def test_statements_are_not_methods(self):
        code = (
            "public class App {\n"
            "    void run(int n) {\n"
            "        if (n > 0) {\n"
            "            return;\n"
            "        }\n"
            "    }\n"
            "}\n"
        )
        result = JavaExtractor().parse(code, "App.java")
        functions = {node.name for node in result.nodes if node.type == NodeType.FUNCTION}

        assert functions == {"run"}

    def test_deterministic(self, sample_java):
        first = JavaExtractor().parse(sample_java, FILE)
        second = JavaExtractor().parse(sample_java, FILE)

        assert [node.to_dict() for node in first.nodes] == [node.to_dict() for node in second.nodes]
        assert [edge.to_dict() for edge in first.edges] == [edge.to_dict() for edge in second.edges]

    def test_initializer_block_locals_are_not_fields(self):
        code = (
            "public class A {\n"
            "    static int count;\n"
            "    static {\n"
            "        int local = 1;\n"
            "        count = local;\n"
            "    }\n"
            "    {\n"
            "        int other = 2;\n"
            "    }\n"
            "    void run() {\n"
            "    }\n"
            "}\n"
        )
        result = JavaExtractor().parse(code, "A.java")
        by_id = {node.id: node for node in result.nodes}
        variables = [node.id for node in result.nodes if node.type == NodeType.VARIABLE]

        assert variables == ["A.java#A.count"]
        assert by_id["A.java#A.run"].type == NodeType.FUNCTION
        assert by_id["A.java#A"].line_end == 12

    def test_single_line_static_initializer(self):
        code = (
            "public class A {\n"
            "    static { int local = 1; }\n"
            "    void run() { }\n"
            "}\n"
        )
        result = JavaExtractor().parse(code, "A.java")

        assert [node.id for node in result.nodes] == ["A.java#module", "A.java#A", "A.java#A.run"]

    def test_brace_on_next_line_is_not_an_initializer(self):
        code = (
            "public class A\n"
            "{\n"
            "    int size;\n"
            "}\n"
        )
        result = JavaExtractor().parse(code, "A.java")
        variables = [node.id for node in result.nodes if node.type == NodeType.VARIABLE]

        assert variables == ["A.java#A.size"]
