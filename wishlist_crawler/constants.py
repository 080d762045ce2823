"""Application-wide constants.

This module centralizes the crawler's magic numbers, portal URLs and CSS
selectors so every stage reads them from a single place.
"""

# =============================================================================
# Portal Configuration
# =============================================================================

# Public wishlist portal crawled on every run
DEFAULT_PORTAL_URL = "https://wishlist.webflow.com/"

# Query string that switches the listing to the recency-sorted view
RECENT_SORT_QUERY = "?sort=recent"

# =============================================================================
# Pacing and Timeouts
# =============================================================================

# Minimum delay between two requests to the portal (seconds)
MIN_REQUEST_DELAY_SECONDS = 1.5

# Default delay between two requests to the portal (seconds)
REQUEST_DELAY_SECONDS = 1.5

# Upper bound for a single browser navigation (seconds)
NAVIGATION_TIMEOUT_SECONDS = 15.0

# Allowed range for the configurable navigation timeout (seconds)
MIN_NAVIGATION_TIMEOUT_SECONDS = 1.0
MAX_NAVIGATION_TIMEOUT_SECONDS = 60.0

# Timeout for the final webhook POST (seconds)
PUBLISH_TIMEOUT_SECONDS = 30.0

# Hard cap on pages followed in one listing context (pagination loop guard)
MAX_LISTING_PAGES = 500

# =============================================================================
# Browser Session
# =============================================================================

BROWSER_WINDOW_WIDTH = 1920
BROWSER_WINDOW_HEIGHT = 1080

# Extra headers sent with every browser request
BROWSER_EXTRA_HEADERS = {"DNT": "1"}

# =============================================================================
# Portal Markup (CSS selectors)
# =============================================================================

STATUS_FILTER_LINK_SELECTOR = "ul.statuses.filters a"
STATUS_FILTER_ID_ATTRIBUTE = "data-url-param-toggle-value"

IDEA_CARD_SELECTOR = ".portal-content ul.list-ideas > li.idea"
IDEA_TITLE_SELECTOR = "h3"
IDEA_PREVIEW_SELECTOR = ".description"
IDEA_AUTHOR_IMAGE_SELECTOR = ".avatar img"
IDEA_CREATED_LINE_SELECTOR = ".idea-meta-created .idea-meta-secondary:first-child"
IDEA_CATEGORY_SELECTOR = ".idea-meta-created .idea-meta-secondary:last-child"
IDEA_VOTE_COUNT_SELECTOR = ".vote-count"
IDEA_COMMENT_COUNT_SELECTOR = ".comment-count"
IDEA_STATUS_SELECTOR = ".status-pill"
IDEA_LINK_SELECTOR = ".idea-link"

NEXT_PAGE_LINK_SELECTOR = '.portal-content .pagination a[rel="next"]'

IDEA_CONTENT_SELECTOR = ".portal-content .idea-content .description"

# =============================================================================
# Spam Filtering
# =============================================================================

# Webflow product vocabulary; an idea is kept when its content contains any of
# these (case-sensitive substring match)
DEFAULT_SPAM_KEYWORDS = [
    "Webflow",
    "webflow",
    "Designer",
    "Editor",
    "CMS",
    "Collection",
    "hosting",
    "Hosting",
    "Ecommerce",
    "Interactions",
    "Lottie",
    "Symbol",
    "breakpoint",
    "Breakpoint",
    "Navigator",
    "Memberships",
    "Localization",
    "Workspace",
]
