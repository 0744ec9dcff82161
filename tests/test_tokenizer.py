"""Unit tests for the Java tokenizer."""

from codepets.validation.tokenizer import STRING_TOKEN, tokenize


class TestJavaTokenizer:
    """Tests for tokenize()."""

    def test_splits_declaration_into_tokens(self) -> None:
        assert tokenize("private int size;") == ["private", "int", "size", ";"]

    def test_whitespace_and_layout_are_ignored(self) -> None:
        compact = tokenize("public Egg(String c,int s){this.size=s;}")
        spread = tokenize("public   Egg ( String c ,\n  int s )\n{\n  this . size = s ;\n}")

        assert compact == spread

    def test_line_and_block_comments_are_dropped(self) -> None:
        code = """
        // public class Egg {
        /* private int size; */
        int x;
        """

        assert tokenize(code) == ["int", "x", ";"]

    def test_unterminated_block_comment_swallows_rest(self) -> None:
        assert tokenize("int x; /* private int size;") == ["int", "x", ";"]

    def test_string_literal_becomes_single_token(self) -> None:
        tokens = tokenize('String s = "public class Egg {";')

        assert tokens == ["String", "s", "=", STRING_TOKEN, ";"]

    def test_comment_markers_inside_string_are_not_comments(self) -> None:
        tokens = tokenize('String url = "http://x"; int y;')

        assert tokens[-3:] == ["int", "y", ";"]

    def test_char_literal_and_escapes(self) -> None:
        tokens = tokenize(r"char q = '\''; String t = " + '"a\\"b";')

        assert tokens == ["char", "q", "=", STRING_TOKEN, ";", "String", "t", "=", STRING_TOKEN, ";"]

    def test_text_block_is_single_token(self) -> None:
        code = 'String t = """\n  private int size;\n  """;'

        assert tokenize(code) == ["String", "t", "=", STRING_TOKEN, ";"]

    def test_operators_and_annotations(self) -> None:
        assert tokenize("@Override energy++;") == ["@", "Override", "energy", "++", ";"]

    def test_empty_input(self) -> None:
        assert tokenize("") == []
        assert tokenize(None) == []
