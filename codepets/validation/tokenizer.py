"""
Java source tokenizer
Drops comments, collapses string/char literals and splits the rest into tokens
"""

import re
from typing import List

STRING_TOKEN = "<str>"

_TOKEN_RE = re.compile(
    r'''
    (?P<comment>//[^\n]*|/\*.*?(?:\*/|\Z)) |            # Comments (unterminated runs to EOF)
    (?P<string>"""(?:.|\n)*?(?:"""|\Z) |               # Text blocks
               "(?:\\.|[^"\\\n])*"? |                   # String literals
               '(?:\\.|[^'\\\n])*'?) |                  # Char literals
    (?P<number>\b\d[\d_]*(?:\.\d+)?[fFdDlL]?\b) |       # Numbers
    (?P<ident>[A-Za-z_$][\w$]*) |                       # Identifiers/keywords
    (?P<op>\+\+|--|&&|\|\||==|!=|<=|>=|->|::|[+\-*/%=<>!&|^~?:]) |  # Operators
    (?P<punct>[(){}\[\];,.@])                           # Punctuation
    ''',
    re.VERBOSE | re.DOTALL,
)


class JavaTokenizer:
    """Tokenize Java code into meaningful tokens"""

    def tokenize(self, code: str) -> List[str]:
        """
        Tokenize code into list of tokens

        Comments are skipped and every string or char literal becomes a single
        STRING_TOKEN, so text inside them can never form code tokens.
        """
        tokens = []
        for match in _TOKEN_RE.finditer(code or ""):
            kind = match.lastgroup
            if kind == "comment":
                continue
            if kind == "string":
                tokens.append(STRING_TOKEN)
            else:
                tokens.append(match.group(0))
        return tokens


tokenizer = JavaTokenizer()


def tokenize(code: str) -> List[str]:
    return tokenizer.tokenize(code)
