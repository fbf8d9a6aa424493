"""
Regular expressions and tag sets shared by the extraction passes.
"""

from __future__ import annotations

import re

# --- Candidate filtering ---

UNLIKELY_CANDIDATES = (
    re.compile(
        r"ad-|ai2html|banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|extra|footer|gdpr|header|legends",
        re.IGNORECASE,
    ),
    re.compile(
        r"menu|related|remark|replies|rss|shoutbox|sidebar|skyscraper|social|sponsor|supplemental",
        re.IGNORECASE,
    ),
    re.compile(r"agegate|pagination|pager|popup|yom-remote|ad-break", re.IGNORECASE),
)
OK_MAYBE_CANDIDATE = re.compile(r"and|article|body|column|content|main|shadow", re.IGNORECASE)

UNLIKELY_ROLES = frozenset({"menu", "menubar", "complementary", "navigation", "alert", "alertdialog", "dialog"})

# --- Class weighting ---

POSITIVE = re.compile(
    r"article|body|content|entry|hentry|h-entry|main|page|pagination|post|text|blog|story",
    re.IGNORECASE,
)
NEGATIVE = (
    re.compile(
        r"-ad-|hidden|^hid$| hid$| hid |^hid |banner|combx|comment|com-|contact|"
        r"foot|footer|footnote|gdpr|masthead|media|meta",
        re.IGNORECASE,
    ),
    re.compile(
        r"outbrain|promo|related|scroll|share|shoutbox|sidebar|skyscraper|sponsor|shopping|tags|tool|widget",
        re.IGNORECASE,
    ),
)

BYLINE = re.compile(r"byline|author|dateline|writtenby|p-author", re.IGNORECASE)
SHARE_ELEMENTS = re.compile(r"(\b|_)(share|sharedaddy)(\b|_)", re.IGNORECASE)
VIDEOS = re.compile(
    r"//(www\.)?((dailymotion|youtube|youtube-nocookie|player\.vimeo|v\.qq)\.com"
    r"|(archive|upload\.wikimedia)\.org|player\.twitch\.tv)",
    re.IGNORECASE,
)

# --- Text ---

NORMALIZE = re.compile(r"\s{2,}")
TOKENIZE = re.compile(r"\W+")
HAS_CONTENT = re.compile(r"\S\Z")
HASH_URL = re.compile(r"#.+")
SENTENCE_END = re.compile(r"\.( |\Z)")
DISPLAY_NONE = re.compile(r"(?:^|;)\s*display\s*:\s*none\b", re.IGNORECASE)

# --- Images ---

IMAGE_EXTENSION = re.compile(r"\.(jpg|jpeg|png|webp)", re.IGNORECASE)
LAZY_SRCSET = re.compile(r"\.(jpg|jpeg|png|webp)\s+\d")
LAZY_SRC = re.compile(r"^\s*\S+\.(jpg|jpeg|png|webp)\S*\s*$")
B64_DATA_URL = re.compile(r"^data:\s*([^\s;,]+)\s*;\s*base64\s*,", re.IGNORECASE)
B64_MARKER = re.compile(r"base64\s*", re.IGNORECASE)
SRCSET_URL = re.compile(r"(\S+)(\s+[\d.]+[xw])?(\s*(?:,|$))")

# --- JSON-LD ---

SCHEMA_ORG_CONTEXT = re.compile(r"^https?://schema\.org$")
JSON_LD_ARTICLE_TYPES = re.compile(
    r"^(Article|AdvertiserContentArticle|NewsArticle|AnalysisNewsArticle|AskPublicNewsArticle"
    r"|BackgroundNewsArticle|OpinionNewsArticle|ReportageNewsArticle|ReviewNewsArticle|Report"
    r"|SatiricalArticle|ScholarlyArticle|MedicalScholarlyArticle|SocialMediaPosting|BlogPosting"
    r"|LiveBlogPosting|DiscussionForumPosting|TechArticle|APIReference)$"
)
CDATA_MARKERS = re.compile(r"^\s*<!\[CDATA\[|\]\]>\s*$")

# --- Tag sets ---

TAGS_TO_SCORE = frozenset({"section", "h2", "h3", "h4", "h5", "h6", "p", "td", "pre"})
EMPTY_CONTAINER_TAGS = frozenset({"div", "section", "header", "h1", "h2", "h3", "h4", "h5", "h6"})
DIV_TO_P_ELEMS = frozenset({"blockquote", "dl", "div", "img", "ol", "p", "pre", "table", "ul"})
ALTER_TO_DIV_EXCEPTIONS = frozenset({"div", "article", "section", "p"})
PRESENTATIONAL_ATTRIBUTES = (
    "align",
    "background",
    "bgcolor",
    "border",
    "cellpadding",
    "cellspacing",
    "frame",
    "hspace",
    "rules",
    "style",
    "valign",
    "vspace",
)
DEPRECATED_SIZE_ATTRIBUTE_ELEMS = frozenset({"table", "th", "td", "hr", "pre"})
PHRASING_ELEMS = frozenset(
    {
        "abbr",
        "audio",
        "b",
        "bdo",
        "br",
        "button",
        "cite",
        "code",
        "data",
        "datalist",
        "dfn",
        "em",
        "embed",
        "i",
        "img",
        "input",
        "kbd",
        "label",
        "mark",
        "math",
        "meter",
        "noscript",
        "object",
        "output",
        "progress",
        "q",
        "ruby",
        "samp",
        "script",
        "select",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "textarea",
        "time",
        "var",
        "wbr",
    }
)
HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
EMBED_TAGS = frozenset({"object", "embed", "iframe"})
DATA_TABLE_DESCENDANTS = ("col", "colgroup", "tfoot", "thead", "th")

CLASSES_TO_PRESERVE = ("page",)

DEFAULT_CHAR_THRESHOLD = 500
DEFAULT_N_TOP_CANDIDATES = 5
