"""Test the regexp command from scripts."""

import pytest
from microscript import NIL
from microscript.errors import (
    EngineError,
    InvalidArgumentError,
    NotImplementedMethodError,
    UnknownMethodError,
    WrongArityError,
)
from microscript.regexp import RegexpValue


class TestQuoteMeta:
    """Test QuoteMeta."""

    def test_escapes_metacharacters(self, ctx):
        """All metacharacters are escaped."""
        result = ctx.eval("regexp QuoteMeta {Escaping symbols like: .+*?()|[]{}^$}")
        assert result == r"Escaping symbols like: \.\+\*\?\(\)\|\[\]\{\}\^\$"

    def test_plain_text(self, ctx):
        """Text without metacharacters is unchanged."""
        assert ctx.eval("regexp QuoteMeta hello") == "hello"


class TestCompile:
    """Test pattern compilation."""

    def test_compile_returns_handle(self, ctx):
        """Compile returns an opaque handle."""
        result = ctx.eval('regexp Compile "a(x*)b"')
        assert isinstance(result, RegexpValue)

    def test_string(self, ctx):
        """String returns the source text."""
        assert ctx.eval('regexp String [regexp Compile "a(x*)b"]') == "a(x*)b"

    def test_invalid_pattern(self, ctx):
        """Engine errors surface unchanged."""
        import re2
        with pytest.raises(re2.error) as engine_exc:
            re2.compile("[")
        with pytest.raises(EngineError) as exc_info:
            ctx.eval("regexp Compile {[}")
        assert exc_info.value.message == str(engine_exc.value)

    def test_compile_posix(self, ctx):
        """POSIX patterns use leftmost-longest matching."""
        ctx.eval("set re [regexp CompilePOSIX {a|ab}]")
        assert ctx.eval("regexp FindString $re ab") == "ab"
        ctx.eval("set re [regexp Compile {a|ab}]")
        assert ctx.eval("regexp FindString $re ab") == "a"


class TestFindAll:
    """Test the FindAll methods."""

    def test_find_all_string(self, ctx):
        """Matches are listed up to the limit."""
        ctx.eval("set re [regexp Compile a.]")
        assert ctx.eval("regexp FindAllString $re paranormal -1") == ["ar", "an", "al"]
        assert ctx.eval("regexp FindAllString $re paranormal 2") == ["ar", "an"]
        assert ctx.eval("regexp FindAllString $re graal -1") == ["aa"]
        assert ctx.eval("regexp FindAllString $re none -1") is NIL

    def test_find_all_string_index(self, ctx):
        """Match offsets are listed as pairs."""
        ctx.eval("set re [regexp Compile o.]")
        assert ctx.eval("regexp FindAllStringIndex $re London 1") == [[1, 3]]
        assert ctx.eval("regexp FindAllStringIndex $re London -1") == [[1, 3], [4, 6]]

    def test_find_all_string_submatch(self, ctx):
        """Submatches are listed per match."""
        ctx.eval('set re [regexp Compile "a(x*)b"]')
        assert ctx.eval("regexp FindAllStringSubmatch $re -ab- -1") == [["ab", ""]]
        assert ctx.eval("regexp FindAllStringSubmatch $re -axxb- -1") == [["axxb", "xx"]]
        assert ctx.eval("regexp FindAllStringSubmatch $re -ab-axb- -1") == [
            ["ab", ""], ["axb", "x"],
        ]
        assert ctx.eval("regexp FindAllStringSubmatch $re -axxb-ab- -1") == [
            ["axxb", "xx"], ["ab", ""],
        ]

    def test_find_all_string_submatch_index(self, ctx):
        """Submatch offsets are listed per match."""
        ctx.eval('set re [regexp Compile "a(x*)b"]')
        assert ctx.eval("regexp FindAllStringSubmatchIndex $re -ab- -1") == [[1, 3, 2, 2]]
        assert ctx.eval("regexp FindAllStringSubmatchIndex $re foo -1") is NIL

    def test_zero_limit(self, ctx):
        """A zero limit finds nothing."""
        ctx.eval("set re [regexp Compile a.]")
        assert ctx.eval("regexp FindAllString $re paranormal 0") is NIL


class TestFind:
    """Test the Find methods."""

    def test_find_string(self, ctx):
        """The leftmost match, or empty."""
        ctx.eval("set re [regexp Compile foo.?]")
        assert ctx.eval('regexp FindString $re "seafood fool"') == "food"
        assert ctx.eval("regexp FindString $re meat") == ""

    def test_find_string_index(self, ctx):
        """The leftmost match offsets, or nil."""
        ctx.eval("set re [regexp Compile ab?]")
        assert ctx.eval("regexp FindStringIndex $re tablett") == [1, 3]
        assert ctx.eval("regexp FindStringIndex $re foo") is NIL

    def test_find_string_submatch(self, ctx):
        """Groups of the leftmost match."""
        ctx.eval('set re [regexp Compile "a(x*)b(y|z)c"]')
        assert ctx.eval("regexp FindStringSubmatch $re -axxxbyc-") == ["axxxbyc", "xxx", "y"]
        assert ctx.eval("regexp FindStringSubmatch $re -abzc-") == ["abzc", "", "z"]

    def test_find_string_submatch_index(self, ctx):
        """Group offsets of the leftmost match."""
        ctx.eval('set re [regexp Compile "a(x*)b"]')
        assert ctx.eval("regexp FindStringSubmatchIndex $re -ab-") == [1, 3, 2, 2]
        assert ctx.eval("regexp FindStringSubmatchIndex $re -axxb-") == [1, 5, 2, 4]
        assert ctx.eval("regexp FindStringSubmatchIndex $re -foo-") is NIL


class TestIntrospection:
    """Test pattern introspection methods."""

    def test_literal_prefix(self, ctx):
        """Prefix and completeness come back as a tuple."""
        assert ctx.eval("regexp LiteralPrefix [regexp Compile abc]") == ("abc", True)
        assert ctx.eval('regexp LiteralPrefix [regexp Compile "a(x+)b"]') == ("ax", False)

    def test_num_subexp(self, ctx):
        """Capturing groups are counted."""
        assert ctx.eval("regexp NumSubexp [regexp Compile a.]") == 0
        assert ctx.eval('regexp NumSubexp [regexp Compile "(.*)((a)b)(.*)a"]') == 4

    def test_subexp_names(self, ctx):
        """Group names, empty for unnamed groups."""
        ctx.eval("set re [regexp Compile {(?P<first>[a-zA-Z]+) (?P<last>[a-zA-Z]+)}]")
        assert ctx.eval("regexp SubexpNames $re") == ["", "first", "last"]
        assert ctx.eval("regexp SubexpIndex $re last") == 2
        assert ctx.eval("regexp SubexpIndex $re middle") == -1
        assert ctx.eval('regexp ReplaceAllString $re "Alan Turing" {${last} ${first}}') == (
            "Turing Alan"
        )


class TestMatching:
    """Test MatchString and Longest."""

    def test_match_string(self, ctx):
        """Whether the pattern matches anywhere."""
        ctx.eval('set re [regexp Compile "(gopher){2}"]')
        assert ctx.eval("regexp MatchString $re gopher") is False
        assert ctx.eval("regexp MatchString $re gophergopher") is True
        assert ctx.eval("regexp MatchString $re gophergophergopher") is True

    def test_longest(self, ctx):
        """Longest switches the handle to leftmost-longest."""
        ctx.eval('set re [regexp Compile "a(|b)"]')
        assert ctx.eval("regexp FindString $re ab") == "a"
        assert ctx.eval("regexp Longest $re") is NIL
        assert ctx.eval("regexp FindString $re ab") == "ab"


class TestReplace:
    """Test the ReplaceAll methods."""

    def test_replace_all_literal_string(self, ctx):
        """Literal replacements are not expanded."""
        ctx.eval('set re [regexp Compile "a(x*)b"]')
        assert ctx.eval("regexp ReplaceAllLiteralString $re -ab-axxb- T") == "-T-T-"
        assert ctx.eval("regexp ReplaceAllLiteralString $re -ab-axxb- {$1}") == "-$1-$1-"
        assert ctx.eval("regexp ReplaceAllLiteralString $re -ab-axxb- {${1}}") == "-${1}-${1}-"

    def test_replace_all_string(self, ctx):
        """Templates expand group references."""
        ctx.eval('set re [regexp Compile "a(x*)b"]')
        assert ctx.eval("regexp ReplaceAllString $re -ab-axxb- T") == "-T-T-"
        assert ctx.eval("regexp ReplaceAllString $re -ab-axxb- {$1}") == "--xx-"
        assert ctx.eval("regexp ReplaceAllString $re -ab-axxb- {$1W}") == "---"
        assert ctx.eval("regexp ReplaceAllString $re -ab-axxb- {${1}W}") == "-W-xxW-"

    def test_replace_all_string_named(self, ctx):
        """Names made of digits and letters refer to named groups."""
        ctx.eval("set re [regexp Compile {a(?P<1W>x*)b}]")
        assert ctx.eval("regexp ReplaceAllString $re -ab-axxb- {$1W}") == "--xx-"
        assert ctx.eval("regexp ReplaceAllString $re -ab-axxb- {${1}W}") == "-W-xxW-"

    def test_replace_all_string_func_disabled(self, ctx):
        """Without callbacks the method is not implemented."""
        ctx.eval("set re [regexp Compile a.]")
        with pytest.raises(NotImplementedMethodError) as exc_info:
            ctx.eval("regexp ReplaceAllStringFunc $re abc (regexp QuoteMeta)")
        assert exc_info.value.message == "not implemented"

    def test_replace_all_string_func(self, callback_ctx):
        """With callbacks each match goes through a command prefix."""
        callback_ctx.eval("set re [regexp Compile a.]")
        result = callback_ctx.eval("regexp ReplaceAllStringFunc $re xa.y (regexp QuoteMeta)")
        assert result == "xa\\.y"

    def test_replace_all_string_func_word(self, callback_ctx):
        """A single word names the callback command."""
        callback_ctx.eval('set re [regexp Compile "a(x*)b"]')
        callback_ctx.eval("regexp ReplaceAllStringFunc $re -ab-axxb- (set last)")
        assert callback_ctx.get("last") == "axxb"


class TestSplit:
    """Test Split."""

    @pytest.mark.parametrize("n,expected", [
        ("-1", ["b", "n", "n", ""]),
        ("0", []),
        ("1", ["banana"]),
        ("2", ["b", "nana"]),
    ])
    def test_split_banana(self, ctx, n, expected):
        """Single-character separator."""
        assert ctx.eval(f"regexp Split [regexp Compile a] banana {n}") == expected

    @pytest.mark.parametrize("n,expected", [
        ("-1", ["pi", "a"]),
        ("0", []),
        ("1", ["pizza"]),
        ("2", ["pi", "a"]),
    ])
    def test_split_pizza(self, ctx, n, expected):
        """Repeated separator."""
        assert ctx.eval(f"regexp Split [regexp Compile z+] pizza {n}") == expected


class TestErrors:
    """Test error reporting."""

    def test_missing_method(self, ctx):
        """The bare command reports its usage."""
        with pytest.raises(WrongArityError) as exc_info:
            ctx.eval("regexp")
        assert exc_info.value.message == 'wrong # args: should be "regexp method ?arg ...?"'

    def test_unknown_method(self, ctx):
        """Unknown methods are named."""
        with pytest.raises(UnknownMethodError) as exc_info:
            ctx.eval("regexp unknownMethod")
        assert exc_info.value.message == 'unknown method "unknownMethod"'

    def test_wrong_arity(self, ctx):
        """Methods report their usage."""
        with pytest.raises(WrongArityError) as exc_info:
            ctx.eval("regexp FindAllString [regexp Compile a.] paranormal")
        assert exc_info.value.message == 'wrong # args: should be "regexp FindAllString re s n"'

    def test_nil_string(self, ctx):
        """Nil has no string form."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            ctx.eval("regexp QuoteMeta []")
        assert exc_info.value.message == "value has no string representation"

    def test_invalid_integer(self, ctx):
        """Limits must be integers."""
        ctx.eval("set re [regexp Compile a.]")
        with pytest.raises(InvalidArgumentError) as exc_info:
            ctx.eval("regexp FindAllString $re paranormal b")
        assert exc_info.value.message == 'invalid integer "b"'

    def test_lone_surrogate(self, ctx):
        """Text without a UTF-8 form fails as an invalid argument."""
        ctx.eval("set re [regexp Compile a]")
        with pytest.raises(InvalidArgumentError) as exc_info:
            ctx.eval('regexp FindString $re "x\\uD800a"')
        assert exc_info.value.message == "invalid UTF-8 string"
        with pytest.raises(InvalidArgumentError):
            ctx.eval('regexp Compile "\\uD800"')

    def test_invalid_handle(self, ctx):
        """Pattern arguments must be handles."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            ctx.eval("regexp FindString a. paranormal")
        assert exc_info.value.message == "invalid regexp value"
