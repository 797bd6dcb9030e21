"""
Deterministic seeding helpers shared by the prediction services.
"""
import math
import re
from typing import List

import numpy as np

# Single-character atomic weights used by the SMILES weight approximation.
# Two-letter symbols (Cl, Br) are not matched; their first
# letter is counted on its own.
_ATOM_WEIGHTS = {
    "C": 12.0,
    "H": 1.0,
    "O": 16.0,
    "N": 14.0,
    "P": 31.0,
    "S": 32.0,
    "F": 19.0,
    "I": 127.0,
}


def hash_string(text: str) -> int:
    """
    31-multiplier rolling hash over UTF-16 code units.

    The accumulator wraps to a signed 32-bit integer after every step and
    the absolute value is returned, so the result is in [0, 2**31].
    """
    data = text.encode("utf-16-le")
    value = 0
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        value = ((value << 5) - value + code_unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)


def round_half_up(value: float, places: int = 2) -> float:
    """Round half away from zero (Python's round() is banker's rounding)"""
    factor = 10 ** places
    return math.floor(abs(value) * factor + 0.5) / factor * (1 if value >= 0 else -1)


def is_prime(num: int) -> bool:
    if num <= 1:
        return False
    if num <= 3:
        return True
    if num % 2 == 0 or num % 3 == 0:
        return False
    i = 5
    while i * i <= num:
        if num % i == 0 or num % (i + 2) == 0:
            return False
        i += 6
    return True


def char_histogram(text: str, bins: int = 128) -> np.ndarray:
    """Character-code histogram normalised to sum 1 (all zeros for empty text)"""
    features = np.zeros(bins)
    for char in text:
        features[ord(char) % bins] += 1
    total = features.sum()
    if total == 0:
        return features
    return features / total


def approximate_weight(smiles: str) -> float:
    return sum(_ATOM_WEIGHTS.get(c, 0.0) for c in smiles)


def smiles_descriptors(smiles: str, size: int) -> List[float]:
    """
    Pattern-count descriptors followed by hash-derived filler.

    Slots 0-4 count carbonyl, hydroxyl, amine, halogen and aromatic ring
    patterns; slot 5 is the approximate weight / 500; the rest are
    hash fractions in [0, 1).
    """
    descriptors = [0.0] * size
    descriptors[0] = len(re.findall(r"C=O", smiles))
    descriptors[1] = len(re.findall(r"OH", smiles))
    descriptors[2] = len(re.findall(r"NH2", smiles))
    descriptors[3] = len(re.findall(r"Cl|Br|I|F", smiles))
    descriptors[4] = len(re.findall(r"c1.*c1", smiles))
    descriptors[5] = approximate_weight(smiles) / 500

    seed = hash_string(smiles)
    for i in range(6, size):
        descriptors[i] = (seed * (i + 1)) % 100 / 100
    return descriptors
