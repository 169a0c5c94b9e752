"""Tests for the public reconcile() entry point.

Covers the orchestrator (root-collapsing vs children-only mode, the
identical-content early return) and the end-to-end behaviour of the
reconciler on small trees.
"""

from bs4 import BeautifulSoup, Comment, Tag

from domsync import DomUpdater, ReconcileConfig, reconcile
from domsync.tracking import track_mutations

_FULL_RUN = ReconcileConfig(skip_identical=False)


def _live(markup: str) -> Tag:
    """First element of markup parsed with bs4 defaults."""
    root = BeautifulSoup(markup, "html.parser").find(True)
    assert isinstance(root, Tag)
    return root


# =============================================================================
# Scenarios
# =============================================================================


class TestScenarios:
    """Small reference cases for the reconciler."""

    def test_identical_markup_makes_no_mutations(self) -> None:
        div = _live('<div id="a">hi</div>')
        with track_mutations() as mutations:
            reconcile(div, '<div id="a">hi</div>')
        assert mutations.total == 0
        assert str(div) == '<div id="a">hi</div>'

    def test_identical_markup_full_run_makes_no_mutations(self) -> None:
        div = _live('<div id="a">hi</div>')
        with track_mutations() as mutations:
            reconcile(div, '<div id="a">hi</div>', config=_FULL_RUN)
        assert mutations.total == 0

    def test_appended_item_is_a_new_node(self) -> None:
        ul = _live("<ul><li>x</li></ul>")
        first = ul.contents[0]
        with track_mutations() as mutations:
            reconcile(ul, "<ul><li>x</li><li>y</li></ul>")
        assert mutations.appended == 1
        assert mutations.total == 1
        items = ul.find_all("li")
        assert len(items) == 2
        assert items[0] is first
        assert items[1] is not first
        assert items[1].string == "y"

    def test_attribute_change_keeps_node(self) -> None:
        p = _live('<p class="a">t</p>')
        text = p.contents[0]
        with track_mutations() as mutations:
            reconcile(p, '<p class="b">t</p>')
        assert p["class"] == "b"
        assert p.contents[0] is text
        assert mutations.attributes_set == 1
        assert mutations.total == 1

    def test_different_tag_is_replaced(self) -> None:
        div = _live("<div><span>1</span></div>")
        with track_mutations() as mutations:
            reconcile(div, "<div><b>1</b></div>")
        assert str(div) == "<div><b>1</b></div>"
        assert mutations.inserted == 1
        assert mutations.removed == 1

    def test_ignored_subtree_is_untouched(self) -> None:
        div = _live('<div data-x="1"><span class="skip">old</span></div>')
        span = div.span
        reconcile(
            div,
            '<div data-x="2"><span class="skip">new</span></div>',
            ignore=[".skip"],
        )
        assert div["data-x"] == "2"
        assert div.span is span
        assert span.string == "old"


# =============================================================================
# Orchestrator modes
# =============================================================================


class TestModes:
    """Root-collapsing vs children-only reconciliation."""

    def test_single_matching_root_updates_root_attributes(self) -> None:
        section = _live('<section id="s" title="old"><p>a</p></section>')
        reconcile(section, '<section id="s" title="new"><p>a</p></section>')
        assert section["title"] == "new"

    def test_root_collapse_ignores_surrounding_whitespace(self) -> None:
        section = _live('<section title="old"></section>')
        reconcile(section, '\n  <section title="new"></section>\n')
        assert section["title"] == "new"
        assert section.contents == []

    def test_fragment_becomes_children(self) -> None:
        div = _live('<div id="keep"><p>a</p></div>')
        reconcile(div, "<p>a</p><p>b</p>")
        assert str(div) == '<div id="keep"><p>a</p><p>b</p></div>'

    def test_children_mode_keeps_root_attributes(self) -> None:
        div = _live('<div id="keep" class="box"><p>a</p></div>')
        with track_mutations() as mutations:
            reconcile(div, "<p>b</p>")
        assert div["id"] == "keep"
        assert div["class"] == ["box"]
        assert mutations.attributes_set == 0
        assert mutations.attributes_removed == 0

    def test_other_single_root_is_a_child(self) -> None:
        section = _live("<section></section>")
        reconcile(section, "<div>x</div>")
        assert str(section) == "<section><div>x</div></section>"

    def test_two_roots_with_same_tag_are_children(self) -> None:
        div = _live("<div></div>")
        reconcile(div, "<div>a</div><div>b</div>")
        assert str(div) == "<div><div>a</div><div>b</div></div>"

    def test_empty_markup_clears_children(self) -> None:
        div = _live('<div id="d"><p>a</p>text<!-- c --></div>')
        reconcile(div, "")
        assert str(div) == '<div id="d"></div>'

    def test_ignored_root_is_untouched(self) -> None:
        div = _live('<div class="frozen"><p>a</p></div>')
        with track_mutations() as mutations:
            reconcile(div, '<div class="frozen"><p>b</p></div>', ignore=".frozen")
        assert div.p.string == "a"
        assert mutations.total == 0


# =============================================================================
# Identical-content early return
# =============================================================================


class TestIdenticalShortCircuit:
    """The fast path must never change the result of a full run."""

    def test_skips_parsing_when_identical(self) -> None:
        class CountingBuilder:
            calls = 0

            def parse(self, markup: str) -> Tag:
                CountingBuilder.calls += 1
                return BeautifulSoup(markup, "html.parser")

        div = _live("<div>hi</div>")
        DomUpdater(builder=CountingBuilder()).update(div, "<div>hi</div>")
        assert CountingBuilder.calls == 0

    def test_disabled_runs_full_reconcile(self) -> None:
        class CountingBuilder:
            calls = 0

            def parse(self, markup: str) -> Tag:
                CountingBuilder.calls += 1
                return BeautifulSoup(markup, "html.parser")

        div = _live("<div>hi</div>")
        DomUpdater(_FULL_RUN, builder=CountingBuilder()).update(div, "<div>hi</div>")
        assert CountingBuilder.calls == 1

    def test_custom_identity_check(self) -> None:
        div = _live("<div>hi</div>")
        config = ReconcileConfig(identical=lambda live, markup: True)
        reconcile(div, "<div>changed</div>", config=config)
        assert div.string == "hi"

    def test_inner_markup_is_not_treated_as_identical(self) -> None:
        div = _live('<div class="outer"><div>x</div></div>')
        reconcile(div, "<div>x</div>")
        # Root-collapsing onto the single inner div
        assert str(div) == "<div>x</div>"


# =============================================================================
# Node content
# =============================================================================


class TestNodeContent:
    """Text, comments, attributes and child lists converge."""

    def test_text_update(self) -> None:
        p = _live("<p>old</p>")
        with track_mutations() as mutations:
            reconcile(p, "<p>new</p>")
        assert p.string == "new"
        assert mutations.text_updated == 1
        assert mutations.total == 1

    def test_comment_update_keeps_comment_type(self) -> None:
        div = _live("<div><!-- a --></div>")
        reconcile(div, "<div><!-- b --></div>")
        assert isinstance(div.contents[0], Comment)
        assert div.contents[0] == " b "

    def test_comment_and_text_are_different_kinds(self) -> None:
        div = _live("<div><!--x--></div>")
        reconcile(div, "<div>x</div>")
        assert str(div) == "<div>x</div>"
        assert not isinstance(div.contents[0], Comment)

    def test_shrinking_list_updates_first_and_removes_rest(self) -> None:
        ul = _live("<ul><li>a</li><li>b</li><li>c</li></ul>")
        first = ul.li
        with track_mutations() as mutations:
            reconcile(ul, "<ul><li>c</li></ul>")
        assert str(ul) == "<ul><li>c</li></ul>"
        assert ul.li is first
        assert mutations.removed == 2

    def test_insert_before_existing_sibling(self) -> None:
        div = _live("<div><p>keep</p></div>")
        paragraph = div.p
        reconcile(div, "<div><h1>title</h1><p>keep</p></div>")
        assert str(div) == "<div><h1>title</h1><p>keep</p></div>"
        assert div.p is paragraph

    def test_deep_nesting(self) -> None:
        div = _live("<div><ul><li><a href='/a'>a</a></li></ul></div>")
        link = div.a
        reconcile(div, '<div><ul><li><a href="/b">b</a></li></ul></div>')
        assert div.a is link
        assert link["href"] == "/b"
        assert link.string == "b"

    def test_reserved_prefix_survives(self) -> None:
        div = _live('<div data-state="open" title="t">x</div>')
        reconcile(div, "<div>x</div>")
        assert div["data-state"] == "open"
        assert "title" not in div.attrs

    def test_custom_reserved_prefixes(self) -> None:
        div = _live('<div data-state="open" x-ref="r">x</div>')
        config = ReconcileConfig(reserved_prefixes=("x-",))
        reconcile(div, "<div>x</div>", config=config)
        assert "data-state" not in div.attrs
        assert div["x-ref"] == "r"

    def test_source_tree_is_not_shared(self) -> None:
        div = _live("<div></div>")
        reconcile(div, "<div><p>a</p></div>")
        other = _live("<div></div>")
        reconcile(other, "<div><p>a</p></div>")
        assert div.p is not other.p


# =============================================================================
# Whitespace policy
# =============================================================================


class TestWhitespace:
    """Whitespace-only text nodes with and without strip_whitespace."""

    def test_default_aligns_whitespace(self) -> None:
        div = _live("<div>\n  <p>a</p>\n</div>")
        with track_mutations() as mutations:
            reconcile(div, "<div><p>b</p></div>")
        assert str(div) == "<div><p>b</p></div>"
        assert mutations.total > 1

    def test_strip_whitespace_leaves_formatting_alone(self) -> None:
        div = _live("<div>\n  <p>a</p>\n</div>")
        before = list(div.contents)
        with track_mutations() as mutations:
            reconcile(div, "<div><p>b</p></div>", config=ReconcileConfig(strip_whitespace=True))
        assert len(div.contents) == len(before)
        assert all(a is b for a, b in zip(div.contents, before, strict=True))
        assert div.p.string == "b"
        assert mutations.total == 1


# =============================================================================
# DomUpdater
# =============================================================================


class TestDomUpdater:
    """High-level updater object."""

    def test_call_is_update(self) -> None:
        updater = DomUpdater()
        p = _live("<p>a</p>")
        updater(p, "<p>b</p>")
        assert p.string == "b"

    def test_instance_config_applies(self) -> None:
        updater = DomUpdater(ReconcileConfig(ignore=(".keep",)))
        div = _live('<div><p class="keep">a</p></div>')
        updater.update(div, '<div><p class="keep">b</p></div>')
        assert div.p.string == "a"

    def test_per_call_selectors_override_config(self) -> None:
        updater = DomUpdater(ReconcileConfig(ignore=(".keep",)))
        div = _live('<div><p class="keep">a</p></div>')
        updater.update(div, '<div><p class="keep">b</p></div>', ignore=[])
        assert div.p.string == "b"

    def test_counts_reconcile_calls(self) -> None:
        p = _live("<p>a</p>")
        with track_mutations() as mutations:
            reconcile(p, "<p>b</p>")
            reconcile(p, "<p>b</p>")
        assert mutations.reconcile_calls == 2
