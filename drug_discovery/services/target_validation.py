"""
Target validation service.

Scores a free-text target hypothesis and proposes related targets. Scores are
derived from a hash of the analysis text, so the same query always validates
the same way.
"""
import re
from typing import Dict, Any, List, Optional

from loguru import logger

from .hashing import hash_string, round_half_up

# Gene symbols: upper-case letters and digits, at least one letter
_GENE_SYMBOL = re.compile(r"\b(?=[A-Z0-9]*[A-Z])[A-Z0-9]{2,10}\b")


class TargetValidator:
    """Literature-style confidence scoring for candidate drug targets"""

    def __init__(self, max_suggestions: int = 3):
        self.max_suggestions = max_suggestions
        logger.info("Target validation service initialised")

    async def validate(
        self,
        query: str,
        gene_name: Optional[str] = None,
        disease: Optional[str] = None,
        candidates: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """
        Validate a target hypothesis.

        Args:
            query: Free-text description of the hypothesis
            gene_name: Gene symbol; extracted from the query when omitted
            disease: Disease context
            candidates: Known target names to rank as suggestions

        Returns:
            Dict with confidence (70-99), relevantPublications and
            suggestedTargets
        """
        gene = gene_name or self.extract_gene_symbol(query)
        try:
            text = f"{gene} is a potential target for {disease or 'disease'}. {query}"
            seed = hash_string(text)

            if candidates:
                suggestions = self._rank_candidates(text, candidates)
            else:
                suggestions = self._gene_templates(gene)

            result = {
                "confidence": 70 + seed % 30,
                "relevantPublications": 50 + seed % 200,
                "suggestedTargets": suggestions,
            }
            logger.debug(f"Validated target '{gene}': confidence {result['confidence']}")
            return result
        except Exception as e:
            logger.error(f"Error in target validation: {e}")
            return {
                "confidence": 50,
                "relevantPublications": 5,
                "suggestedTargets": self._gene_templates(gene),
            }

    @staticmethod
    def extract_gene_symbol(query: str) -> str:
        """First gene-symbol-like token, else the first word of the query"""
        match = _GENE_SYMBOL.search(query)
        if match:
            return match.group(0)
        words = query.split()
        return words[0] if words else "target"

    def _rank_candidates(self, text: str, candidates: List[str]) -> List[Dict[str, Any]]:
        scored = [
            {"name": name, "score": round_half_up(0.5 + (hash_string(text + name) % 50) / 100)}
            for name in candidates
        ]
        # sorted() is stable, so equal scores keep catalogue order
        scored = sorted(scored, key=lambda s: s["score"], reverse=True)
        return scored[:self.max_suggestions]

    @staticmethod
    def _gene_templates(gene: str) -> List[Dict[str, Any]]:
        return [
            {"name": f"{gene}-related protein", "score": 0.78},
            {"name": f"Alternative {gene} isoform", "score": 0.65},
            {"name": f"{gene} receptor", "score": 0.59},
        ]
