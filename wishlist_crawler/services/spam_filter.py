"""Keyword-based removal of off-topic ideas."""

import re

import logfire

from wishlist_crawler.models.idea_models import EnrichedIdea


class SpamFilter:
    """Keep ideas whose content mentions at least one portal keyword.

    Matching is case-sensitive and substring-based: "webflows" matches
    "webflow". Ideas without detail content are matched on their preview.
    """

    def __init__(self, keywords: list[str]):
        keywords = [keyword for keyword in keywords if keyword]
        if not keywords:
            raise ValueError("SpamFilter needs at least one keyword")
        self.keywords = keywords
        self._pattern = re.compile("|".join(re.escape(k) for k in keywords))

    def is_relevant(self, idea: EnrichedIdea) -> bool:
        text = idea.content_text if idea.content_text is not None else idea.preview_text
        return self._pattern.search(text) is not None

    def filter(self, ideas: list[EnrichedIdea], context: str = "") -> list[EnrichedIdea]:
        kept = [idea for idea in ideas if self.is_relevant(idea)]
        logfire.info(
            "Spam filter applied",
            context=context,
            kept=len(kept),
            dropped=len(ideas) - len(kept),
        )
        return kept
