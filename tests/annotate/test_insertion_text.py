"""Tests for markup insertion and escaping."""

from incrcov.annotate.insertion_text import InsertionText


class TestWrapNesting:
    def test_inner_span_inside_outer(self) -> None:
        """
        Given a narrow span recorded before a wide one
        When resolved
        Then the narrow markers sit strictly inside the wide ones
        """
        text = InsertionText("0123456789")
        text.wrap(2, "<b>", 5, "</b>")
        text.wrap(0, "<s>", 10, "</s>")

        assert str(text) == "<s>01<b>234</b>56789</s>"

    def test_identical_spans_nest_in_recording_order(self) -> None:
        text = InsertionText("abcdef")
        text.wrap(0, "<i>", 3, "</i>")
        text.wrap(0, "<o>", 3, "</o>")

        assert str(text) == "<o><i>abc</i></o>def"

    def test_adjacent_spans_close_before_open(self) -> None:
        text = InsertionText("abcdef")
        text.wrap(0, "<x>", 3, "</x>")
        text.wrap(3, "<y>", 6, "</y>")

        assert str(text) == "<x>abc</x><y>def</y>"

    def test_later_offsets_do_not_shift_earlier_ones(self) -> None:
        text = InsertionText("abcdef")
        text.wrap(4, "<late>", 5, "</late>")
        text.wrap(1, "<early>", 2, "</early>")

        assert str(text) == "a<early>b</early>cd<late>e</late>f"

    def test_statement_contains_branch(self) -> None:
        line = "const value = condition ? first : second;"
        text = InsertionText(line)
        text.wrap(5, '<span class="cbranch-no">', 10, "</span>")
        text.wrap(0, '<span class="cstat-no">', 40, "</span>")

        resolved = str(text)

        assert resolved.startswith('<span class="cstat-no">const<span class="cbranch-no"> valu</span>')
        assert resolved.endswith("second</span>;")
        assert resolved.index('class="cbranch-no"') > resolved.index('class="cstat-no"')
        assert resolved.count("</span>") == 2

    def test_wrap_line(self) -> None:
        text = InsertionText("abc")
        text.wrap(1, "<b>", 2, "</b>")
        text.wrap_line("<line>", "</line>")

        assert str(text) == "<line>a<b>b</b>c</line>"


class TestInsert:
    def test_before_insert_precedes_open(self) -> None:
        text = InsertionText("abc")
        text.wrap(1, "<w>", 3, "</w>")
        text.insert(1, "<g/>")

        assert str(text) == "a<g/><w>bc</w>"

    def test_after_insert_follows_open(self) -> None:
        text = InsertionText("abc")
        text.wrap(1, "<w>", 3, "</w>")
        text.insert(1, "<g/>", before=False)

        assert str(text) == "a<w><g/>bc</w>"

    def test_columns_are_clamped(self) -> None:
        text = InsertionText("ab")
        text.insert(10, "!")
        text.insert(-3, "^")

        assert str(text) == "^ab!"


class TestConsumeBlanks:
    def test_markers_swallow_surrounding_blanks(self) -> None:
        text = InsertionText("    foo  ", consume_blanks=True)
        text.wrap(4, "[", 7, "]")

        assert str(text) == "[    foo  ]"

    def test_inner_columns_unchanged(self) -> None:
        text = InsertionText("  a + b  ", consume_blanks=True)
        text.wrap(4, "[", 5, "]")

        assert str(text) == "  a [+] b  "

    def test_blank_line_collapses_to_end(self) -> None:
        text = InsertionText("   ", consume_blanks=True)
        text.wrap(1, "[", 2, "]")

        assert str(text) == "   []"

    def test_insert_can_opt_out_of_snapping(self) -> None:
        text = InsertionText("    if (a) {", consume_blanks=True)
        text.insert(4, "E", consume_blanks=False)
        text.insert(4, "S")

        assert str(text) == "S    Eif (a) {"


class TestHtmlEscaping:
    def test_source_escaped_markup_kept(self) -> None:
        text = InsertionText("if (a < b) {")
        text.wrap(0, '<span class="cstat-no">', 12, "</span>")

        assert text.to_html() == '<span class="cstat-no">if (a &lt; b) {</span>'

    def test_ampersands_and_gt(self) -> None:
        assert InsertionText("a && b > c").to_html() == "a &amp;&amp; b &gt; c"

    def test_quotes_untouched(self) -> None:
        assert InsertionText("s = \"x\" + 'y'").to_html() == "s = \"x\" + 'y'"

    def test_original_length(self) -> None:
        text = InsertionText("abc")
        text.insert(1, "<x>")
        assert text.original_length == 3
        assert text.text == "abc"
