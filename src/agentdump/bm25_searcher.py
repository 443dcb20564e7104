"""BM25 ranking over class documents.

This module wraps the rank-bm25 library and integrates it with
agentdump's identifier-aware tokenization.
"""

from rank_bm25 import BM25Plus

from agentdump.tokenizer import tokenize


class BM25Searcher:
    """BM25 search engine for document ranking.

    Uses BM25Plus, which keeps a positive lower bound for any document that
    contains a query term, so short class documents are not drowned out by
    large ones.

    Attributes:
        bm25: BM25Plus instance, or None for an empty corpus.
        k1: Term frequency saturation parameter used to build the index.
        b: Length normalization parameter used to build the index.
    """

    def __init__(self, documents: list[str], k1: float = 1.5, b: float = 0.75):
        """Initialize BM25 searcher with document corpus.

        Args:
            documents: List of document strings to index.
            k1: Term frequency saturation parameter. Range: [1.2, 2.0].
            b: Document length normalization parameter. Range: [0.5, 0.75].
        """
        self.k1 = k1
        self.b = b
        self.tokenized_corpus = [tokenize(doc) for doc in documents]
        # BM25Plus can't handle empty corpus
        self.bm25 = BM25Plus(self.tokenized_corpus, k1=k1, b=b) if documents else None

    def search(self, query: str, k: int = 10) -> list[tuple[int, float]]:
        """Search documents for query and return top-k ranked results.

        Args:
            query: Search query string (natural language or identifiers).
            k: Number of top results to return.

        Returns:
            List of (document_index, score) tuples sorted by score descending.
            Documents sharing no token with the query are left out.
        """
        if not query or self.bm25 is None:
            return []

        tokenized_query = tokenize(query)
        if not tokenized_query:
            return []

        scores = self.bm25.get_scores(tokenized_query)
        query_terms = set(tokenized_query)

        # BM25Plus gives every document a floor score, so require a shared term
        indexed_scores = [
            (idx, float(score))
            for idx, score in enumerate(scores)
            if query_terms.intersection(self.tokenized_corpus[idx])
        ]
        indexed_scores.sort(key=lambda x: x[1], reverse=True)

        return indexed_scores[:k] if k > 0 else []
