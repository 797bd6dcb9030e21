"""
Services package.
"""
from .target_validation import TargetValidator
from .drug_generator import DrugGenerator
from .interaction_predictor import InteractionPredictor
from .admet_predictor import ADMETPredictor
from .virtual_screening import VirtualScreening
from .clinical_trial_analyzer import ClinicalTrialAnalyzer

__all__ = [
    "TargetValidator",
    "DrugGenerator",
    "InteractionPredictor",
    "ADMETPredictor",
    "VirtualScreening",
    "ClinicalTrialAnalyzer",
]
