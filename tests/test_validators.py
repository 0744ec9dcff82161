"""Unit tests for structural rules and the course 1 sub-level validators."""

import pytest

from codepets.validation.registry import get_rule_set
from codepets.validation.rules import (
    IDENT,
    ClassHeader,
    FieldDecl,
    MethodSignature,
    RuleSet,
    Statement,
    find_pattern,
)
from codepets.validation.tokenizer import tokenize


class TestFindPattern:
    """Tests for contiguous token matching."""

    def test_literal_match(self) -> None:
        assert find_pattern(("int", "x"), ["private", "int", "x", ";"])

    def test_ident_wildcard(self) -> None:
        assert find_pattern(("this", ".", "size", "=", IDENT), tokenize("this.size = s;"))

    def test_ident_wildcard_rejects_punctuation(self) -> None:
        assert not find_pattern(("super", "(", IDENT, ")"), tokenize("super();"))

    def test_alternatives(self) -> None:
        pattern = ("x", frozenset({";", "="}))

        assert find_pattern(pattern, ["x", "="])
        assert find_pattern(pattern, ["x", ";"])
        assert not find_pattern(pattern, ["x", ","])

    def test_pattern_longer_than_tokens(self) -> None:
        assert not find_pattern(("a", "b", "c"), ["a", "b"])


class TestRuleVariants:
    """Tests for each construct variant."""

    def test_class_header(self) -> None:
        rule = ClassHeader("egg_class", name="Egg")

        assert rule.check(tokenize("public class Egg {"))
        assert not rule.check(tokenize("class Egg {"))
        assert not rule.check(tokenize("public class Eggs {"))

    def test_class_header_with_parent(self) -> None:
        rule = ClassHeader("dragon_class", name="Dragon", extends="Pet")

        assert rule.check(tokenize("public class Dragon extends Pet {"))
        assert not rule.check(tokenize("public class Dragon {"))

    def test_field_with_or_without_initializer(self) -> None:
        rule = FieldDecl("size", type_name="int", name="size")

        assert rule.check(tokenize("private int size;"))
        assert rule.check(tokenize("private int size = 3;"))
        assert not rule.check(tokenize("public int size;"))
        assert not rule.check(tokenize("private int sizes;"))

    def test_constructor_signature_ignores_parameter_names(self) -> None:
        rule = MethodSignature("ctor", name="Egg", params=("String", "int"))

        assert rule.check(tokenize("public Egg(String c, int s)"))
        assert not rule.check(tokenize("public Egg(int s, String c)"))

    def test_method_signature_without_params(self) -> None:
        rule = MethodSignature("getter", name="getColor", returns="String")

        assert rule.check(tokenize("public String getColor() {"))
        assert not rule.check(tokenize("public int getColor() {"))

    def test_statement_alternatives(self) -> None:
        rule = Statement("ret", snippets=("return color;", "return this.color;"))

        assert rule.check(tokenize("return this.color;"))
        assert rule.check(tokenize("return color ;"))
        assert not rule.check(tokenize("return colour;"))

    def test_rule_set_reports_both_lists(self) -> None:
        rule_set = RuleSet((
            ClassHeader("egg_class", name="Egg"),
            FieldDecl("egg_size_field", type_name="int", name="size"),
        ))

        result = rule_set.validate("public class Egg { }")

        assert result.valid == ["egg_class"]
        assert result.invalid == ["egg_size_field"]
        assert not result.passed


class TestCourseOneSubLevels:
    """Tests for the course 1 rule sets."""

    @pytest.mark.parametrize("sub_level", [1, 2, 3, 4, 5, 6])
    def test_reference_solution_passes(self, sub_level, solutions) -> None:
        result = get_rule_set(1, sub_level).validate(solutions[sub_level])

        assert result.passed, result.invalid

    def test_missing_field_reports_its_code(self, solutions) -> None:
        code = solutions[1].replace("private int size;", "")

        result = get_rule_set(1, 1).validate(code)

        assert result.invalid == ["egg_size_field"]
        assert "egg_color_field" in result.valid

    def test_commented_out_field_does_not_count(self, solutions) -> None:
        code = solutions[1].replace("private int size;", "// private int size;")

        result = get_rule_set(1, 1).validate(code)

        assert "egg_size_field" in result.invalid

    def test_field_inside_string_does_not_count(self) -> None:
        code = 'public class Egg { String s = "private String color; private int size; private boolean hatched;"; }'

        result = get_rule_set(1, 1).validate(code)

        assert result.invalid == ["egg_color_field", "egg_size_field", "egg_hatched_field"]

    def test_empty_submission_fails_every_rule(self) -> None:
        result = get_rule_set(1, 1).validate("")

        assert result.valid == []
        assert len(result.invalid) == 4

    def test_unknown_sub_level_or_course(self) -> None:
        assert get_rule_set(1, 7) is None
        assert get_rule_set(2, 1) is None
