"""
Drug candidate generation service.

Assembles candidate SMILES from a fragment table (or perturbs a reference
SMILES) and scores them, all driven by a seed built from the target id and
the reference compound.
"""
from typing import Dict, Any, List, Optional

from loguru import logger

from .hashing import hash_string, is_prime, round_half_up


# Common fragments of drug-like molecules
FRAGMENTS = [
    "C1=CC=CC=C1",                 # Benzene
    "C1=CN=CC=C1",                 # Pyridine
    "C1=CC=CN=C1",                 # Pyridine isomer
    "C1=CC=C(C=C1)O",              # Phenol
    "C1=CC=C(C=C1)N",              # Aniline
    "C1=CC=C(C=C1)F",              # Fluorobenzene
    "C1=CC=C(C=C1)Cl",             # Chlorobenzene
    "C1=CC=CC=C1C(=O)O",           # Benzoic acid
    "C(C(=O)O)N",                  # Glycine
    "CC(=O)O",                     # Acetic acid
    "CC(=O)N",                     # Acetamide
    "CC(C)CC(C(=O)O)N",            # Leucine
    "NC(=O)C1=CC=CC=C1",           # Benzamide
    "OC(=O)CCCCC(=O)O",            # Adipic acid
    "CC(=O)NC1=CC=CC=C1",          # Acetanilide
    "N1C=CC=C1",                   # Pyrrole
    "N1C=CN=C1",                   # Imidazole
    "C1=CN=CN1",                   # Pyrazole
    "C1=COC=C1",                   # Furan
    "C1=CSC=C1",                   # Thiophene
    "N1C=CC=N1",                   # Pyrazine
    "N1C=CC=CC1=O",                # 2-Pyridone
    "CC1=CC=C(C=C1)NC(=O)N",       # Methylphenyl urea
    "O=C1NC=CC(=O)N1",             # Uracil
    "O=C1NC=NC2=C1NC=N2",          # Guanine
    "OC1=C(Cl)C=C(Cl)C=C1",        # Dichlorophenol
    "NS(=O)(=O)C1=CC=C(C=C1)N",    # Sulfanilamide
    "FC(F)(F)C1=CC=CC=C1",         # Trifluoromethylbenzene
    "OC1=CC=C(C=C1)C(=O)O",        # Salicylic acid
    "CC(=O)OC1=CC=CC=C1C(=O)O",    # Aspirin
]

CONNECTORS = ["C", "N", "O", "S", "C(=O)", "C(=O)N", "C(=O)O", "S(=O)(=O)"]

NAME_PREFIXES = ["zu", "zo", "xa", "ze", "zi", "va", "ve"]
NAME_MIDDLES = ["ma", "li", "ti", "ni", "vi", "ri", "pi", "di"]
NAME_SUFFIXES = ["nib", "mab", "zumab", "tinib", "ciclib", "parib", "toclax"]

FALLBACK_CANDIDATES = [
    {"name": "Zevatinib", "smiles": "CC1=C(C=C(C=C1)NC(=O)NC1=CC=CC(=C1)Cl)NC1=NC=CC(=N1)C(=O)N", "score": 0.87},
    {"name": "Lizumab", "smiles": "CC(C)CC(C(=O)NC(CCC(=O)N)C(=O)NC(CC1=CC=CC=C1)C(=O)NCC(=O)N)NC(=O)C(CC(=O)N)NC(=O)C", "score": 0.83},
    {"name": "Vamadine", "smiles": "C1=CC=C2C(=C1)C(=CN2)CCNC(=O)C3=CNN=C3", "score": 0.76},
    {"name": "Ridiprazole", "smiles": "CCC1=NC(=C(S1)C2=CC=CC=C2)C3=CC(=CN=C3)OC", "score": 0.72},
    {"name": "Tafinib", "smiles": "CS(=O)(=O)N1CCC(CC1)NC(=O)C1=C(C=CC=C1F)NC1=NC=CC(=N1)C1=CN=CC=C1", "score": 0.65},
]


class DrugGenerator:
    """Service for generating novel drug candidates for a target"""

    def __init__(self):
        logger.info("Drug generation service initialised")

    async def generate(
        self,
        target_id: int,
        similar_to: Optional[str] = None,
        constraints: Optional[Dict[str, Any]] = None,
        count: int = 5,
    ) -> List[Dict[str, Any]]:
        """
        Generate drug candidates, best score first.

        Args:
            target_id: Target the candidates are designed for
            similar_to: Optional reference SMILES to derive analogues from
            constraints: Optional maxWeight / minLogP / maxLogP penalties
            count: Number of candidates

        Returns:
            List of {name, smiles, score} dicts
        """
        try:
            seed = target_id + (hash_string(similar_to) if similar_to else 0)
            constraints = constraints or {}
            candidates = []

            for i in range(count):
                smiles = self.deterministic_smiles(seed + i, similar_to)
                name = self.drug_name(seed + i)
                score = self._score(seed, i, target_id, smiles, similar_to, constraints)
                candidates.append({"name": name, "smiles": smiles, "score": score})

            candidates.sort(key=lambda c: c["score"], reverse=True)
            logger.info(f"Generated {len(candidates)} candidates for target {target_id}")
            return candidates
        except Exception as e:
            logger.error(f"Error in drug candidate generation: {e}")
            return [dict(c) for c in FALLBACK_CANDIDATES]

    @staticmethod
    def _score(
        seed: int,
        index: int,
        target_id: int,
        smiles: str,
        similar_to: Optional[str],
        constraints: Dict[str, Any],
    ) -> float:
        score = 0.5 + ((seed * (index + 1)) % 100) / 200

        # Prime targets get better candidates
        if is_prime(target_id):
            score += 0.1

        if similar_to:
            score += 0.05

        max_weight = constraints.get("maxWeight")
        if max_weight is not None and len(smiles) > max_weight / 10:
            score -= 0.1

        min_log_p = constraints.get("minLogP")
        max_log_p = constraints.get("maxLogP")
        if min_log_p is not None and max_log_p is not None:
            pseudo_log_p = (seed % 7) - 2
            if pseudo_log_p < min_log_p or pseudo_log_p > max_log_p:
                score -= 0.15

        score = min(0.98, max(0.5, score))
        return round_half_up(score)

    @staticmethod
    def deterministic_smiles(seed: int, similar_to: Optional[str] = None) -> str:
        """Perturb the reference SMILES, or join fragments from the table"""
        if similar_to:
            modified = similar_to
            if seed % 3 == 0:
                modified = modified.replace("Cl", "F")
            elif seed % 3 == 1:
                modified = modified.replace("O", "S")

            if seed % 5 == 0:
                modified = modified.replace("CC", "CCC")
            elif seed % 5 == 1:
                modified = modified.replace("CN", "CCN")
            return modified

        num_fragments = 2 + seed % 3
        parts = []
        for i in range(num_fragments):
            parts.append(FRAGMENTS[(seed * (i + 1)) % len(FRAGMENTS)])
            if i < num_fragments - 1:
                parts.append(CONNECTORS[(seed * (i + 7)) % len(CONNECTORS)])
        return "".join(parts)

    @staticmethod
    def drug_name(seed: int) -> str:
        prefix = NAME_PREFIXES[seed % len(NAME_PREFIXES)]
        middle = NAME_MIDDLES[(seed * 3) % len(NAME_MIDDLES)]
        suffix = NAME_SUFFIXES[(seed * 7) % len(NAME_SUFFIXES)]
        return prefix.capitalize() + middle + suffix
