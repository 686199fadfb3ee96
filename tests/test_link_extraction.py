from __future__ import annotations

import pytest

from mailreader.extraction.links import extract_links
from mailreader.extraction.rules import ExtractionRules
from mailreader.extraction.titles import is_valid_title, title_from_long_form_url, title_from_url


def urls(html: str) -> list[str]:
    return [link.url for link in extract_links(html)]


# ── validity gate ──────────────────────────────────────────────────────────────

def test_title_gate_rejects_nineteen_characters() -> None:
    assert is_valid_title("A" + "b" * 18) is False
    assert is_valid_title("a" + "b" * 18) is False


def test_title_gate_rejects_lowercase_start() -> None:
    assert is_valid_title("a" + "b" * 19) is False


def test_title_gate_accepts_twenty_characters_with_capital() -> None:
    assert is_valid_title("A" + "b" * 19) is True


def test_title_gate_is_unicode_aware() -> None:
    assert is_valid_title("Édition spéciale sur les bases de données") is True
    assert is_valid_title("élan vital dans les systèmes distribués") is False


@pytest.mark.parametrize(
    ("text", "kept"),
    [
        ("A" + "b" * 18, False),
        ("a" + "b" * 19, False),
        ("A" + "b" * 19, True),
    ],
)
def test_anchor_dropped_unless_title_passes_gate(text: str, kept: bool) -> None:
    html = f'<p><a href="https://blog.example.test/posts/1">{text}</a></p>'

    links = extract_links(html)

    assert (len(links) == 1) is kept
    if kept:
        assert links[0].title == text


# ── filtering, normalisation, dedup ────────────────────────────────────────────

def test_unsubscribe_link_is_never_emitted_even_with_heading_title() -> None:
    html = """
    <div>
      <h2>Our most popular article this month</h2>
      <a href="https://mail.google.com/unsubscribe?x=1">Unsubscribe from this list</a>
      <a href="https://blog.example.test/popular">Read it</a>
    </div>
    """

    links = extract_links(html)

    assert [link.url for link in links] == ["https://blog.example.test/popular"]
    assert links[0].title == "Our most popular article this month"


def test_non_http_schemes_and_in_page_anchors_are_dropped() -> None:
    html = """
    <p><a href="#section-two">Jump to the second section of this issue</a></p>
    <p><a href="ftp://files.example.test/whitepaper.pdf">Download the annual whitepaper here</a></p>
    <p><a href="javascript:void(0)">Open the interactive widget now</a></p>
    """

    assert extract_links(html) == []


def test_duplicate_canonical_urls_keep_first_occurrence() -> None:
    html = """
    <p><a href="https://blog.example.test/posts/alpha?utm_source=nl">First mention of the alpha article</a></p>
    <p><a href="https://blog.example.test/posts/alpha/#comments">Second mention of the alpha article</a></p>
    <p><a href="https://blog.example.test/posts/beta">The beta article is also worth a read</a></p>
    """

    links = extract_links(html)

    assert [(link.url, link.position) for link in links] == [
        ("https://blog.example.test/posts/alpha", 0),
        ("https://blog.example.test/posts/beta", 1),
    ]
    assert links[0].title == "First mention of the alpha article"
    assert links[0].domain == "blog.example.test"


def test_padded_href_dedupes_with_clean_form() -> None:
    html = """
    <p><a href="https://blog.example.test/posts/story/">The story everyone is talking about</a></p>
    <p><a href="  https://blog.example.test/posts/story/ \n">The story everyone is talking about</a></p>
    <p><a href=" https://blog.example.test/posts/other-story ">Another story everyone is reading</a></p>
    """

    links = extract_links(html)

    assert [link.url for link in links] == [
        "https://blog.example.test/posts/story",
        "https://blog.example.test/posts/other-story",
    ]
    assert links[1].position == 1


def test_custom_rules_are_honoured() -> None:
    rules = ExtractionRules(
        tracking_params=frozenset({"sid"}),
        ignored_patterns=("sponsor",),
        long_form_hosts=(),
    )
    html = """
    <p><a href="https://ads.example.test/sponsor/42">A message from this week's sponsor</a></p>
    <p><a href="https://blog.example.test/post?sid=9&utm_source=nl">Keeping tracking params you asked for</a></p>
    """

    links = extract_links(html, rules)

    assert [link.url for link in links] == ["https://blog.example.test/post?utm_source=nl"]


def test_empty_or_garbage_input_yields_no_links() -> None:
    assert extract_links("") == []
    assert extract_links("<<<>>> not html at all") == []


# ── title strategies ───────────────────────────────────────────────────────────

def test_long_form_platform_title_comes_from_slug() -> None:
    html = """
    <div><h2>Something else entirely in the heading</h2>
    <a href="https://medium.com/@someone/how-we-scaled-our-search-cluster-3f2a9c1b7d0e">Read</a></div>
    """

    links = extract_links(html)

    assert links[0].title == "How We Scaled Our Search Cluster"
    assert links[0].url == "https://medium.com/@someone/how-we-scaled-our-search-cluster-3f2a9c1b7d0e"


def test_ancestor_heading_beats_anchor_text() -> None:
    html = """
    <div class="card">
      <h2>Why Postgres indexes matter more than you think</h2>
      <table><tr><td><a href="https://blog.example.test/postgres-indexes">Read more</a></td></tr></table>
    </div>
    """

    links = extract_links(html)

    assert links[0].title == "Why Postgres indexes matter more than you think"


def test_ancestor_heading_takes_longest_candidate_at_a_level() -> None:
    html = """
    <div>
      <strong>Short but valid one</strong>
      <h3>A considerably longer heading for the same article</h3>
      <a href="https://blog.example.test/longest">Continue</a>
    </div>
    """

    links = extract_links(html)

    assert links[0].title == "A considerably longer heading for the same article"


def test_ancestor_heading_prefers_nearest_level() -> None:
    html = """
    <section>
      <h1>The outer heading is longer than the inner one by far</h1>
      <div>
        <strong>Inner container headline here</strong>
        <a href="https://blog.example.test/nearest">Continue</a>
      </div>
    </section>
    """

    links = extract_links(html)

    assert links[0].title == "Inner container headline here"


def test_descendant_text_used_when_anchor_text_is_a_url() -> None:
    html = (
        '<p><a href="https://blog.example.test/partitioning">'
        "<span>https://blog.example.test</span><b>Scaling writes with partitioned tables</b>"
        "</a></p>"
    )

    links = extract_links(html)

    assert links[0].title == "Scaling writes with partitioned tables"


def test_title_attribute_used_for_image_only_anchor() -> None:
    html = (
        '<p><a href="https://blog.example.test/async" title="Deep dive into async generators">'
        '<img src="https://cdn.example.test/banner.png"></a></p>'
    )

    assert extract_links(html)[0].title == "Deep dive into async generators"


def test_image_alt_used_when_nothing_else_matches() -> None:
    html = (
        '<p><a href="https://blog.example.test/pipelines">'
        '<img src="https://cdn.example.test/p.png" alt="Building resilient data pipelines"></a></p>'
    )

    assert extract_links(html)[0].title == "Building resilient data pipelines"


def test_url_slug_is_last_resort_before_href() -> None:
    html = (
        '<p><a href="https://blog.example.test/2024/10/understanding-the-python-gil.html">'
        '<img src="https://cdn.example.test/p.png"></a></p>'
    )

    assert extract_links(html)[0].title == "Understanding The Python Gil"


def test_whitespace_in_titles_is_collapsed() -> None:
    html = '<p><a href="https://blog.example.test/ws">  Tabs\tand\nnewlines   get   collapsed  </a></p>'

    assert extract_links(html)[0].title == "Tabs and newlines get collapsed"


def test_long_titles_are_truncated() -> None:
    text = "A" + "x" * 249
    html = f'<p><a href="https://blog.example.test/long">{text}</a></p>'

    title = extract_links(html)[0].title

    assert title == text[:200] + "..."


def test_title_from_url_helpers() -> None:
    assert title_from_url("https://blog.example.test/scaling-postgres-reads_9f8e7d6c5b") == "Scaling Postgres Reads"
    assert title_from_url("https://www.example-newsletter.test/") == "www.example-newsletter.test"
    assert title_from_long_form_url("https://medium.com/p/abc123def456") == "Abc123def456"


# ── description ────────────────────────────────────────────────────────────────

def test_description_from_paragraph_after_container() -> None:
    html = (
        '<div><a href="https://blog.example.test/posts/zero-downtime">'
        "Zero downtime deploys with blue green</a></div>\n"
        "<p>  How we ship forty times a day.  </p>"
    )

    links = extract_links(html)

    assert links[0].description == "How we ship forty times a day."


def test_description_is_truncated_and_optional() -> None:
    long_text = "Details " * 60
    html = (
        '<div><a href="https://blog.example.test/a">The first article with a description</a></div>'
        f"<p>{long_text}</p>"
        '<div><a href="https://blog.example.test/b">The second article without any description</a></div>'
        "<span>not a paragraph</span>"
    )

    first, second = extract_links(html)

    assert first.description == long_text.strip()[:300] + "..."
    assert second.description == ""
