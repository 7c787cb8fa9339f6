"""Tests for link syntax conversion."""

from richnote.transcode.links import (
    embeds_to_images,
    images_to_embeds,
    markdown_links_to_wikilinks,
    quote_target,
    unquote_target,
    wikilinks_to_markdown,
)


def test_plain_wikilink():
    """Test [[target]] becomes a standard link with encoded target."""
    assert wikilinks_to_markdown("[[My Note]]") == "[My Note](My%20Note)"


def test_aliased_wikilink():
    """Test the alias becomes the label."""
    assert wikilinks_to_markdown("[[My Note|See this]]") == "[See this](My%20Note)"


def test_multiple_wikilinks():
    """Test adjacent links convert independently."""
    text = "[[a]] and [[b|B]][[c d]]"
    assert wikilinks_to_markdown(text) == "[a](a) and [B](b)[c d](c%20d)"


def test_malformed_wikilinks_pass_through():
    """Test unbalanced or empty brackets stay verbatim."""
    assert wikilinks_to_markdown("[[broken") == "[[broken"
    assert wikilinks_to_markdown("[[]]") == "[[]]"
    assert wikilinks_to_markdown("[[a\nb]]") == "[[a\nb]]"


def test_markdown_link_to_plain_wikilink():
    """Test a label equal to the decoded target gives the plain form."""
    assert markdown_links_to_wikilinks("[My Note](My%20Note)") == "[[My Note]]"


def test_markdown_link_to_aliased_wikilink():
    """Test a differing label gives the aliased form."""
    assert markdown_links_to_wikilinks("[See this](My%20Note)") == "[[My Note|See this]]"


def test_markdown_link_angle_brackets():
    """Test one layer of <...> is stripped from the target."""
    assert markdown_links_to_wikilinks("[See this](<My Note>)") == "[[My Note|See this]]"


def test_external_links_untouched():
    """Test http(s) links are left alone."""
    text = "[text](https://example.com/x) and [other](http://example.com)"
    assert markdown_links_to_wikilinks(text) == text
    assert wikilinks_to_markdown(text) == text


def test_tag_link_becomes_bracket_link():
    """Test tag links convert like any other internal link."""
    assert markdown_links_to_wikilinks("see [#project/x](tag:project/x)") == "see [[tag:project/x|#project/x]]"


def test_tag_link_with_other_label_kept_as_link():
    assert markdown_links_to_wikilinks("[label](tag:x)") == "[[tag:x|label]]"


def test_images_not_taken_for_links():
    """Test ![alt](src) is not converted to a bracket link."""
    assert markdown_links_to_wikilinks("![alt](pic.png)") == "![alt](pic.png)"


def test_quote_target_encodes_spaces():
    assert quote_target("folder/My Note.md") == "folder/My%20Note.md"


def test_quote_target_keeps_existing_escapes():
    """Test already-encoded targets are not encoded twice."""
    assert quote_target("My%20Note") == "My%20Note"


def test_quote_target_encodes_parentheses():
    assert quote_target("a (b)") == "a%20%28b%29"
    assert unquote_target("a%20%28b%29") == "a (b)"


def test_embed_to_image():
    """Test embeds become images with encoded paths."""
    assert embeds_to_images("![[Pasted image 1.png]]") == "![](Pasted%20image%201.png)"


def test_image_to_embed():
    """Test images go back to embeds, with or without <...>."""
    assert images_to_embeds("![](Pasted%20image%201.png)") == "![[Pasted image 1.png]]"
    assert images_to_embeds("![](<Pasted image 1.png>)") == "![[Pasted image 1.png]]"


def test_external_image_untouched():
    assert images_to_embeds("![](https://example.com/a.png)") == "![](https://example.com/a.png)"
