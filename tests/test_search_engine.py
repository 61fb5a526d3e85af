from pathlib import Path

import pytest

from src.search.engine import SearchEngine, SearchEngineConfig
from src.search.index import IndexHolder


def _write(root: Path, relative: str, text: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _scenario(root: Path) -> None:
    _write(root, "a.md", "# Alpha\n\nFirst para.\n")
    _write(root, "guide/b.md", "---\ntitle: Beta\norder: 1\n---\nSecond para.\n")
    _write(root, "guide/c.md", "---\ntitle: Gamma\norder: 2\n---\nThird para.\n")


def _engine(root: Path, config: SearchEngineConfig | None = None) -> SearchEngine:
    holder = IndexHolder(root)
    holder.rebuild()
    return SearchEngine(holder, config)


def test_search_scenario_highlights_title(tmp_path):
    _scenario(tmp_path)

    results = _engine(tmp_path).search("beta")

    assert len(results) == 1
    result = results[0]
    assert result.ref == "guide/b"
    assert result.title == "Beta"
    assert result.category == "guide"
    assert result.score > 0
    assert "<mark>Beta</mark>" in result.highlights.title
    assert result.highlights.content is None
    assert result.excerpt == "Second para."


def test_title_match_ranks_above_body_match(tmp_path):
    _write(tmp_path, "x.md", "---\ntitle: Deploy\n---\nIntro text for this page.\n")
    _write(tmp_path, "y.md", "---\ntitle: Other\n---\nYou can deploy once you are ready.\n")
    _write(tmp_path, "z.md", "---\ntitle: Unrelated\n---\nNothing to see.\n")

    results = _engine(tmp_path).search("deploy")

    assert [result.ref for result in results] == ["x", "y"]
    assert results[0].score > results[1].score


def test_content_snippet_is_windowed_around_first_match(tmp_path):
    before = "lorem ipsum " * 20
    after = " dolor sit amet" * 20
    _write(tmp_path, "long.md", f"---\ntitle: Long Page\n---\n{before}the needle is here{after}\n")

    result = _engine(tmp_path).search("needle")[0]

    snippet = result.highlights.content
    assert snippet is not None
    assert snippet.startswith("...") and snippet.endswith("...")
    assert "<mark>needle</mark>" in snippet
    assert "lorem" in snippet and "dolor" in snippet
    assert len(snippet) <= 3 + 80 + len("needle") + 80 + 3 + len("<mark></mark>")
    assert result.excerpt == snippet
    assert result.highlights.title is None


def test_snippet_uses_earliest_matching_term(tmp_path):
    _write(tmp_path, "page.md", "---\ntitle: Page\n---\nalpha comes first, then omega later.\n")

    result = _engine(tmp_path).search("omega alpha")[0]

    assert result.highlights.content.startswith("...<mark>alpha</mark> comes first")
    assert "<mark>omega</mark>" in result.highlights.content


def test_highlighting_is_case_insensitive_and_escapes_terms(tmp_path):
    _write(tmp_path, "page.md", "---\ntitle: C++ and BETA notes\n---\nBody mentions beta.\n")

    result = _engine(tmp_path).search("Beta C++")[0]

    assert result.highlights.title == "<mark>C++</mark> and <mark>BETA</mark> notes"
    assert "<mark>beta</mark>" in result.highlights.content


def test_custom_highlight_marker(tmp_path):
    _scenario(tmp_path)

    config = SearchEngineConfig(mark_open="[[", mark_close="]]")
    result = _engine(tmp_path, config).search("gamma")[0]

    assert result.highlights.title == "[[Gamma]]"


def test_search_is_idempotent(tmp_path):
    _scenario(tmp_path)
    _write(tmp_path, "guide/d.md", "---\ntitle: Delta\n---\nBeta and gamma are mentioned here.\n")

    engine = _engine(tmp_path)
    first = [result.to_dict() for result in engine.search("beta gamma")]
    second = [result.to_dict() for result in engine.search("beta gamma")]

    assert first == second
    assert {item["ref"] for item in first} == {"guide/b", "guide/c", "guide/d"}


def test_limit_caps_results(tmp_path):
    _scenario(tmp_path)

    engine = _engine(tmp_path)

    assert len(engine.search("para", limit=2)) == 2
    assert engine.search("para", limit=0) == []


def test_zero_matches_returns_empty_list(tmp_path):
    _scenario(tmp_path)

    assert _engine(tmp_path).search("nonexistentterm") == []


@pytest.mark.parametrize(
    "query",
    ["", "   ", "title:", "unknown:beta", "+", "***", '"', "beta:", "beta\ud800", "-beta\udfff"],
)
def test_invalid_queries_return_empty_list(tmp_path, query):
    _scenario(tmp_path)

    assert _engine(tmp_path).search(query) == []


def test_operators_and_field_scoping(tmp_path):
    _scenario(tmp_path)
    _write(tmp_path, "guide/d.md", "---\ntitle: Beta Gamma\n---\nCombined.\n")

    engine = _engine(tmp_path)

    assert [result.ref for result in engine.search("beta -gamma")] == ["guide/b"]
    assert {result.ref for result in engine.search("+beta +gamma")} == {"guide/d"}
    assert {result.ref for result in engine.search("category:guide")} == {"guide/b", "guide/c", "guide/d"}
    assert [result.ref for result in engine.search("title:alpha")] == ["a"]


def test_search_before_build_returns_empty_list(tmp_path):
    _scenario(tmp_path)

    assert SearchEngine(IndexHolder(tmp_path)).search("beta") == []


def test_result_serialization_omits_missing_highlights(tmp_path):
    _scenario(tmp_path)

    payload = _engine(tmp_path).search("beta")[0].to_dict()

    assert payload["ref"] == "guide/b"
    assert set(payload["highlights"]) == {"title"}


def test_exclusion_only_query_returns_every_other_document(tmp_path):
    _scenario(tmp_path)

    results = _engine(tmp_path).search("-beta")

    assert [result.ref for result in results] == ["a", "guide/c"]
    assert all(result.score == 0.0 for result in results)
    assert results[0].highlights.title is None
    assert results[0].excerpt == "First para."


def test_optional_terms_rank_documents_matching_required_terms(tmp_path):
    _scenario(tmp_path)
    _write(tmp_path, "guide/d.md", "---\ntitle: Beta Gamma\n---\nCombined.\n")

    engine = _engine(tmp_path)
    required_only = {result.ref: result.score for result in engine.search("+beta")}
    boosted = {result.ref: result.score for result in engine.search("+beta gamma")}

    assert set(boosted) == {"guide/b", "guide/d"}
    assert boosted["guide/d"] > required_only["guide/d"]
