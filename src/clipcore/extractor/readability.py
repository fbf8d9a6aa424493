"""
Readability article extraction engine.

Orchestrates one extraction run over a parsed document:

1. element-count ceiling check
2. noscript image recovery, JSON-LD, script removal and document preparation
3. metadata collection
4. candidate filtering, scoring, resolution, sibling aggregation and cleaning,
   retried with relaxed heuristics until the article is long enough
5. post-processing and assembly of the ``Article`` record
"""

from __future__ import annotations

import copy
import time
from typing import Callable, List, Optional, Union
from urllib.parse import urljoin

import structlog
from bs4 import BeautifulSoup, Tag

from .. import observability
from ..config import ExtractionOptions
from ..metadata import ArticleMetadata, MetadataExtractor
from . import dom
from .cleaner import ContentCleaner
from .errors import AbortedTooLargeError, ExtractionError, NoArticleFoundError, NoBodyError
from .filtering import CandidateFilter
from .models import FLAG_RELAXATION_ORDER, Article, Attempt, Flag
from .postprocess import PostProcessor
from .preprocess import Preprocessor
from .protocols import inner_html
from .resolver import CandidateResolver
from .scoring import ContentScorer, ScoreTable
from .siblings import gather_siblings

logger = structlog.get_logger(__name__)

PAGE_ID = "readability-page-1"
PAGE_CLASS = "page"


class Readability:
    """
    Extracts the main article from one HTML document.

    An instance holds the state of a single run and mutates the document it
    is given; create a new one per document.
    """

    def __init__(
        self,
        document: Union[str, BeautifulSoup],
        url: Optional[str] = None,
        options: Optional[ExtractionOptions] = None,
        serializer: Optional[Callable[[Tag], str]] = None,
        record_metrics: bool = True,
    ) -> None:
        self.options = options or ExtractionOptions()
        if isinstance(document, BeautifulSoup):
            self.soup = document
        else:
            self.soup = BeautifulSoup(document, self.options.parser, multi_valued_attributes=None)

        self.document_uri = url
        self.base_uri = self._find_base_uri(url)
        self.serializer = serializer or inner_html
        self.record_metrics = record_metrics

        self.flags = Flag.ALL
        self.attempts: List[Attempt] = []
        self.passes = 0
        self.article_title = ""
        self.article_byline: Optional[str] = None
        self.article_dir: Optional[str] = None
        self.article_lang: Optional[str] = None
        self._debug = self.options.debug_logging
        self._parsed = False

        self.logger = logger.bind(component="Readability", url=url)

    def _find_base_uri(self, url: Optional[str]) -> Optional[str]:
        base = self.soup.find("base", href=True)
        if base is None:
            return url
        href = dom.attr(base, "href")
        return urljoin(url, href) if url else href

    def parse(self) -> Article:
        """
        Run the extraction.

        Raises:
            AbortedTooLargeError: the document exceeds ``max_elements_to_parse``
            NoBodyError: the document has no <body>
            NoArticleFoundError: every attempt produced an empty article
        """
        if self._parsed:
            raise RuntimeError("Readability.parse() can only be called once per instance")
        self._parsed = True

        start = time.perf_counter()
        try:
            article = self._parse()
        except ExtractionError as e:
            self._record("extractions", labels={"outcome": type(e).__name__})
            raise

        self._record("extractions", labels={"outcome": "success"})
        self._observe("extraction_attempts", self.passes)
        self._observe("extraction_duration_seconds", time.perf_counter() - start)
        self.logger.info("Extracted article", title=article.title, length=article.length)
        return article

    def _parse(self) -> Article:
        limit = self.options.max_elements_to_parse
        if limit > 0:
            element_count = len(self.soup.find_all(True))
            if element_count > limit:
                raise AbortedTooLargeError(element_count, limit)

        preprocessor = Preprocessor(self.soup)
        preprocessor.unwrap_noscript_images()

        metadata_extractor = MetadataExtractor(self.soup, disable_json_ld=self.options.disable_json_ld)
        json_ld = metadata_extractor.read_json_ld()

        preprocessor.remove_scripts()
        preprocessor.prep_document()

        metadata = metadata_extractor.extract(json_ld)
        self.article_title = metadata.title

        article_content = self.grab_article()

        PostProcessor(
            self.soup,
            base_uri=self.base_uri,
            document_uri=self.document_uri,
            keep_classes=self.options.keep_classes,
            preserved_classes=self.options.preserved_classes,
        ).process(article_content)

        return self._build_article(article_content, metadata)

    def grab_article(self) -> Tag:
        """
        Extract the article container, relaxing heuristics until it is long enough.

        The body is snapshotted before the first attempt and restored from
        that snapshot before every retry.
        """
        page = self.soup.body
        if page is None:
            raise NoBodyError()

        pristine = copy.copy(page)

        while True:
            attempt = self._run_attempt(page)
            if attempt.text_length >= self.options.char_threshold:
                self.article_dir = attempt.direction
                return attempt.article_content

            self._restore(page, pristine)
            self.attempts.append(attempt)
            self.logger.debug(
                "Article too short, relaxing heuristics",
                length=attempt.text_length,
                flags=str(self.flags),
            )

            relaxed = next((flag for flag in FLAG_RELAXATION_ORDER if self.flags & flag), None)
            if relaxed is not None:
                self.flags &= ~relaxed
                continue

            # Stable sort: the earliest attempt wins a tie.
            best = sorted(self.attempts, key=lambda a: a.text_length, reverse=True)[0]
            if not best.text_length:
                raise NoArticleFoundError(len(self.attempts))
            self.article_dir = best.direction
            return best.article_content

    def _run_attempt(self, page: Tag) -> Attempt:
        self.passes += 1
        candidate_filter = CandidateFilter(
            self.soup,
            self.flags,
            article_title=self.article_title,
            byline=self.article_byline,
            debug=self._debug,
        )
        elements_to_score = candidate_filter.run()
        self.article_byline = candidate_filter.byline
        self.article_lang = candidate_filter.language

        scores = ScoreTable()
        scorer = ContentScorer(scores, self.flags, self.options.candidate_count, debug=self._debug)
        candidates = scorer.score_elements(elements_to_score)
        top = scorer.rank_candidates(candidates)

        resolution = CandidateResolver(self.soup, page, scorer, debug=self._debug).resolve(top)
        top_candidate = resolution.top_candidate
        parent = top_candidate.parent

        article_content = gather_siblings(self.soup, top_candidate, scores, debug=self._debug)
        direction = self._find_direction(parent, top_candidate)

        if self._debug:
            self.logger.debug("Article content pre-prep", html=article_content.decode_contents())
        ContentCleaner(self.soup, self.flags, debug=self._debug).prep_article(article_content)

        if resolution.synthesized:
            top_candidate["id"] = PAGE_ID
            top_candidate["class"] = PAGE_CLASS
        else:
            wrapper = self.soup.new_tag("div")
            wrapper["id"] = PAGE_ID
            wrapper["class"] = PAGE_CLASS
            for child in list(article_content.contents):
                wrapper.append(child.extract())
            article_content.append(wrapper)

        text_length = len(dom.inner_text(article_content))
        return Attempt(article_content=article_content, text_length=text_length, direction=direction)

    @staticmethod
    def _find_direction(parent: Optional[Tag], top_candidate: Tag) -> Optional[str]:
        """``dir`` of the candidate's parent, the candidate, or the parent's ancestors, whichever comes first."""
        chain: List[Tag] = []
        if parent is not None:
            chain.append(parent)
        chain.append(top_candidate)
        if parent is not None:
            chain.extend(dom.node_ancestors(parent))

        for node in chain:
            if not dom.is_element(node):
                continue
            direction = dom.attr(node, "dir")
            if direction:
                return direction
        return None

    @staticmethod
    def _restore(page: Tag, pristine: Tag) -> None:
        page.clear()
        for child in list(copy.copy(pristine).contents):
            page.append(child.extract())

    def _build_article(self, article_content: Tag, metadata: ArticleMetadata) -> Article:
        excerpt = metadata.excerpt
        if not excerpt:
            first_paragraph = article_content.find("p")
            if first_paragraph is not None:
                excerpt = dom.text_content(first_paragraph).strip()

        text_content = dom.text_content(article_content)
        return Article(
            title=self.article_title,
            byline=metadata.byline or self.article_byline,
            direction=self.article_dir,
            language=self.article_lang,
            content=self.serializer(article_content),
            text_content=text_content,
            length=len(text_content),
            excerpt=excerpt,
            site_name=metadata.site_name,
        )

    def _record(self, name: str, labels: Optional[dict] = None) -> None:
        if self.record_metrics:
            observability.increment(name, labels=labels)

    def _observe(self, name: str, value: float) -> None:
        if self.record_metrics:
            observability.histogram(name, value)


def parse_article(
    html: Union[str, BeautifulSoup],
    url: Optional[str] = None,
    options: Optional[ExtractionOptions] = None,
    serializer: Optional[Callable[[Tag], str]] = None,
) -> Article:
    """Extract the main article from ``html``; see ``Readability.parse`` for the errors raised."""
    return Readability(html, url=url, options=options, serializer=serializer).parse()
