"""
Unit tests for the density candidate search.
"""

import pytest

from mainstay.extractor.candidates import CandidateSearch
from mainstay.extractor.dom import parse_document
from mainstay.extractor.models import CandidatePriority, StrategyName

SENTENCE = "Engineers inspected every cable and anchor point during the long night shift. "


@pytest.mark.unit
class TestCandidateSearch:
    """Test cases for CandidateSearch."""

    @pytest.fixture
    def search(self):
        return CandidateSearch()

    def test_semantic_containers_come_first(self, search):
        html = f"""
        <div id="wrapper"><p>{SENTENCE * 4}</p><p>{SENTENCE * 4}</p></div>
        <main><p>{SENTENCE * 2}</p><p>{SENTENCE * 2}</p></main>
        """
        candidates = search.find_candidates(parse_document(html))

        assert candidates[0].node.name == "main"
        assert candidates[0].priority is CandidatePriority.SEMANTIC
        assert all(candidate.strategy is StrategyName.DENSITY for candidate in candidates)

    def test_rejects_unwanted_and_link_heavy(self, search):
        links = "".join(f'<a href="/{i}">Link number {i} to elsewhere</a>' for i in range(20))
        html = f"""
        <div class="comments-list"><p>{SENTENCE * 5}</p></div>
        <div id="links">{links}</div>
        """
        candidates = search.find_candidates(parse_document(html))
        tags = {(candidate.node.name, candidate.node.get("id")) for candidate in candidates}

        assert ("div", "links") not in tags
        assert all("comments-list" not in (candidate.node.get("class") or []) for candidate in candidates)

    def test_short_containers_are_skipped(self, search):
        candidates = search.find_candidates(parse_document("<div><p>Too short.</p></div>"))
        assert candidates == []

    def test_best_prefers_highest_score(self, search):
        html = f"""
        <div id="small"><p>{SENTENCE * 2}</p></div>
        <div id="large"><p>{SENTENCE * 3}</p><p>{SENTENCE * 3}</p><p>{SENTENCE * 3}</p></div>
        """
        best = search.best(search.find_candidates(parse_document(html)))
        # body contains both divs and outscores them
        assert best is not None
        assert best.node.name in ("body", "div")
        assert best.score == max(candidate.score for candidate in search.find_candidates(parse_document(html)))

    def test_best_tie_goes_to_earlier_entry(self, search):
        html = f"<section><p>{SENTENCE * 3}</p></section><section><p>{SENTENCE * 3}</p></section>"
        document = parse_document(html)
        first_section = document.find("section")
        candidates = [c for c in search.find_candidates(document) if c.node.name == "section"]

        assert candidates[0].score == candidates[1].score
        assert search.best(candidates).node is first_section

    def test_best_of_nothing(self, search):
        assert search.best([]) is None

    def test_extract_returns_text(self, make_context):
        context = make_context(f"<main><p>{SENTENCE * 4}</p><p>{SENTENCE * 4}</p></main>")
        text = CandidateSearch().extract(context)

        assert text is not None
        assert "Engineers inspected every cable" in text
