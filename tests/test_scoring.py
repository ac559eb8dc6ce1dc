"""Tests for scoring.py — keyword chunk scoring, dedup and ranking."""
from __future__ import annotations

from knowledge_bot.schema import Document, ScoredChunk
from knowledge_bot.scoring import score_chunk, score_chunks


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_doc(name: str, chunks: list[str]) -> Document:
    return Document(doc_id=f"D-{name}", name=name, content="".join(chunks), chunks=chunks)


# ---------------------------------------------------------------------------
# score_chunk
# ---------------------------------------------------------------------------

class TestScoreChunk:
    def test_exact_word_weighs_three(self):
        assert score_chunk(["kaciga"], "kaciga je obavezna") == 3

    def test_partial_match_weighs_one(self):
        assert score_chunk(["bezbed"], "bezbednost na radu") == 1

    def test_exact_beats_partial(self):
        exact = score_chunk(["bezbed"], "bezbed na radu")
        partial = score_chunk(["bezbed"], "bezbednost na radu")
        assert exact > partial

    def test_mixed_exact_and_partial(self):
        # "rad" once as a word (3) and once inside "radnik" (1)
        assert score_chunk(["rad"], "rad i radnik") == 4

    def test_no_match_is_zero(self):
        assert score_chunk(["požar"], "kaciga je obavezna") == 0

    def test_repeated_query_words_add_up(self):
        single = score_chunk(["kaciga"], "kaciga je obavezna")
        double = score_chunk(["kaciga", "kaciga"], "kaciga je obavezna")
        assert double == 2 * single

    def test_regex_characters_are_literal(self):
        # "." must not match the "x" in "axb"
        assert score_chunk(["a.b"], "axb a.b") == 3

    def test_diacritics_count_as_word_characters(self):
        # "zaštit" must not be a whole-word hit inside "zaštitna"
        assert score_chunk(["zaštit"], "zaštitna oprema") == 1


# ---------------------------------------------------------------------------
# score_chunks
# ---------------------------------------------------------------------------

class TestScoreChunks:
    def test_returns_scored_chunks(self, sample_documents):
        results = score_chunks(["kaciga"], sample_documents)
        assert results
        assert all(isinstance(r, ScoredChunk) for r in results)

    def test_scores_always_positive(self, sample_documents):
        results = score_chunks(["kaciga", "evakuaciju", "nepostojeće"], sample_documents)
        assert all(r.score > 0 for r in results)

    def test_tags_document_name(self, sample_documents):
        results = score_chunks(["požara"], sample_documents)
        assert [r.document_name for r in results] == ["pozar.txt"]

    def test_deduplicates_trimmed_chunks_within_document(self):
        doc = _make_doc("a.txt", ["kaciga obavezna", "  kaciga obavezna  ", "kaciga obavezna"])
        results = score_chunks(["kaciga"], [doc])
        assert len(results) == 1
        assert results[0].text == "kaciga obavezna"

    def test_same_text_in_different_documents_is_kept(self):
        docs = [_make_doc("a.txt", ["kaciga obavezna"]), _make_doc("b.txt", ["kaciga obavezna"])]
        results = score_chunks(["kaciga"], docs)
        assert [r.document_name for r in results] == ["a.txt", "b.txt"]

    def test_no_duplicate_texts_per_document(self, sample_documents):
        results = score_chunks(["kaciga", "oprema", "radnike"], sample_documents)
        pairs = [(r.document_name, r.text) for r in results]
        assert len(pairs) == len(set(pairs))

    def test_skips_empty_chunks(self):
        doc = _make_doc("a.txt", ["", "   ", "\n"])
        assert score_chunks(["kaciga"], [doc]) == []

    def test_sorted_descending(self, sample_documents):
        results = score_chunks(["kaciga", "gradilištu", "zaposleni"], sample_documents)
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_encounter_order(self):
        docs = [
            _make_doc("first.txt", ["kaciga jedan", "kaciga dva"]),
            _make_doc("second.txt", ["kaciga tri"]),
        ]
        results = score_chunks(["kaciga"], docs)
        assert [r.text for r in results] == ["kaciga jedan", "kaciga dva", "kaciga tri"]

    def test_deterministic(self, sample_documents):
        words = ["kaciga", "procedura", "evakuaciju", "radnom"]
        assert score_chunks(words, sample_documents) == score_chunks(words, sample_documents)

    def test_default_cap_is_ten(self):
        doc = _make_doc("big.txt", [f"kaciga broj {idx}" for idx in range(15)])
        assert len(score_chunks(["kaciga"], [doc])) == 10

    def test_top_k_limits_results(self, sample_documents):
        assert len(score_chunks(["kaciga", "procedura", "zaposleni"], sample_documents, top_k=1)) == 1

    def test_empty_query_returns_empty(self, sample_documents):
        assert score_chunks([], sample_documents) == []

    def test_empty_corpus_returns_empty(self):
        assert score_chunks(["kaciga"], []) == []

    def test_whole_word_chunk_ranks_above_substring_chunk(self):
        doc = _make_doc("a.txt", ["bezbednost je važna", "bezbed je skraćenica"])
        results = score_chunks(["bezbed"], [doc])
        assert results[0].text == "bezbed je skraćenica"
        assert results[0].score == 3
        assert results[1].score == 1
