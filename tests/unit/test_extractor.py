"""Tests for the portal page extractors."""

import pytest
from hypothesis import given, strategies as st

from conftest import PORTAL_URL, detail_html, idea_card_html, listing_html
from wishlist_crawler.exceptions import ExtractionError
from wishlist_crawler.services.browser import RenderedPage
from wishlist_crawler.services.extractor import (
    extract_idea_content,
    extract_idea_summaries,
    extract_next_page_url,
    extract_statuses,
    split_created_line,
)


def _page(html: str, url: str = PORTAL_URL) -> RenderedPage:
    return RenderedPage(url=url, html=html)


class TestSplitCreatedLine:
    """Test split_created_line() author/date parsing."""

    def test_splits_date_and_name(self):
        """The composite line yields the date and the author."""
        assert split_created_line("Created Jan 5, 2024 by Jane Doe") == (
            "Jan 5, 2024",
            "Jane Doe",
        )

    def test_trims_surrounding_whitespace_and_newlines(self):
        """Whitespace from the rendered markup does not leak into the fields."""
        line = "\n   Created Mar 14, 2023\n        by   Ada Lovelace  \n"
        assert split_created_line(line) == ("Mar 14, 2023", "Ada Lovelace")

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "Jan 5, 2024 by Jane Doe",
            "Created Jan 5, 2024",
            "Posted yesterday",
            "Created  by ",
        ],
    )
    def test_malformed_line_raises(self, line: str):
        """A line missing either half fails as a whole."""
        with pytest.raises(ExtractionError, match="Unrecognized created line"):
            split_created_line(line)

    @given(
        date_words=st.lists(
            st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789,", min_size=1, max_size=8),
            min_size=1,
            max_size=4,
        ),
        name_words=st.lists(
            st.text(alphabet="acdefghijklmnopqrstuvwxyz", min_size=1, max_size=10),
            min_size=1,
            max_size=3,
        ),
    )
    def test_split_properties(self, date_words: list[str], name_words: list[str]):
        """Property: both patterns recover the exact parts they were built from."""
        date = " ".join(date_words)
        name = " ".join(name_words)
        assert split_created_line(f"Created {date} by {name}") == (date, name)


class TestExtractStatuses:
    """Test extract_statuses()."""

    def test_reads_filters_in_page_order(self):
        html = listing_html(
            [],
            statuses=[
                ("Planned", "planned", "/?status=planned"),
                ("In progress", "in-progress", "https://wishlist.example.com/?status=in-progress"),
            ],
        )
        statuses = extract_statuses(_page(html))

        assert [s.name for s in statuses] == ["Planned", "In progress"]
        assert [s.id for s in statuses] == ["planned", "in-progress"]
        assert statuses[0].listing_url == "https://wishlist.example.com/?status=planned"
        assert statuses[1].listing_url == "https://wishlist.example.com/?status=in-progress"

    def test_no_filters_returns_empty_list(self):
        """A page without the filter navigation is not an error."""
        assert extract_statuses(_page(listing_html([]))) == []


class TestExtractIdeaSummaries:
    """Test extract_idea_summaries() and extract_next_page_url()."""

    def test_single_page_yields_every_card_and_no_next(self):
        """N cards and no next link: exactly N summaries and a None next URL."""
        cards = [idea_card_html(f"idea-{i}") for i in range(4)]
        page = _page(listing_html(cards))

        summaries = extract_idea_summaries(page)

        assert len(summaries) == 4
        assert extract_next_page_url(page) is None
        assert [s.detail_url for s in summaries] == [
            f"https://wishlist.example.com/ideas/idea-{i}" for i in range(4)
        ]

    def test_card_fields(self):
        card = idea_card_html(
            "dark-mode",
            name="Dark mode for the Designer",
            preview="Please add dark mode",
            author="Jane Doe",
            date="Jan 5, 2024",
            category="Designer",
            votes="1.2k",
            comments="045",
            status="Planned",
        )
        summary = extract_idea_summaries(_page(listing_html([card])))[0]

        assert summary.name == "Dark mode for the Designer"
        assert summary.preview_text == "Please add dark mode"
        assert summary.author_image == "https://cdn.example.com/avatars/dark-mode.png"
        assert summary.author_name == "Jane Doe"
        assert summary.created_date == "Jan 5, 2024"
        assert summary.category == "Designer"
        assert summary.status == "Planned"
        assert summary.detail_url == "https://wishlist.example.com/ideas/dark-mode"

    def test_counts_are_kept_verbatim(self):
        """Vote and comment counts stay display strings."""
        card = idea_card_html("x", votes="1.2k", comments="045")
        summary = extract_idea_summaries(_page(listing_html([card])))[0]

        assert summary.vote_count == "1.2k"
        assert summary.comment_count == "045"

    def test_missing_status_pill_is_none(self):
        card = idea_card_html("no-status", status=None)
        summary = extract_idea_summaries(_page(listing_html([card])))[0]

        assert summary.status is None

    def test_missing_title_fails_whole_page(self):
        """A malformed card aborts extraction instead of being skipped."""
        cards = [
            idea_card_html("good-one"),
            idea_card_html("broken", include_title=False),
            idea_card_html("good-two"),
        ]
        with pytest.raises(ExtractionError, match="#2 has no title"):
            extract_idea_summaries(_page(listing_html(cards)))

    def test_missing_author_image_src_fails(self):
        card = idea_card_html("img").replace(
            'src="https://cdn.example.com/avatars/img.png"', ""
        )
        with pytest.raises(ExtractionError, match="author image"):
            extract_idea_summaries(_page(listing_html([card])))

    def test_bad_created_line_fails(self):
        card = idea_card_html("weird").replace("Created", "Opened")
        with pytest.raises(ExtractionError, match="Idea card #1"):
            extract_idea_summaries(_page(listing_html([card])))

    def test_empty_listing(self):
        assert extract_idea_summaries(_page(listing_html([]))) == []

    def test_next_page_url_is_absolute(self):
        page = _page(listing_html([], next_href="/?page=2"), url="https://wishlist.example.com/?page=1")

        assert extract_next_page_url(page) == "https://wishlist.example.com/?page=2"

    def test_cards_outside_portal_content_are_ignored(self):
        html = listing_html([idea_card_html("inside")]).replace(
            "<nav>", f"<nav><ul class='list-ideas'>{idea_card_html('outside')}</ul>"
        )
        summaries = extract_idea_summaries(_page(html))

        assert [s.detail_url.rsplit("/", 1)[-1] for s in summaries] == ["inside"]


class TestExtractIdeaContent:
    """Test extract_idea_content()."""

    def test_reads_text_and_html(self):
        page = _page(detail_html("Our hosting plan needs SSO"), url=PORTAL_URL + "ideas/sso")
        content = extract_idea_content(page)

        assert content.text == "Our hosting plan needs SSO"
        assert content.html == "<p>Our hosting plan needs SSO</p>"

    def test_missing_description_raises(self):
        page = _page("<html><body><h1>Gone</h1></body></html>", url=PORTAL_URL + "ideas/gone")

        with pytest.raises(ExtractionError, match="no description node") as exc_info:
            extract_idea_content(page)
        assert exc_info.value.url == PORTAL_URL + "ideas/gone"
