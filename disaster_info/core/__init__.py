"""Core module."""
from disaster_info.core.errors import DisasterInfoError, ExternalApiError, InternalError, InvalidInputError
from disaster_info.core.classifier import HazardClassifier, classify, hazard_classifier
from disaster_info.core.shelters import ShelterSynthesizer, synthesize_shelters, shelter_synthesizer
from disaster_info.core.history import HistorySynthesizer, synthesize_history, history_synthesizer
from disaster_info.core.parser import CoordinateParser, coordinate_parser, normalize_address
from disaster_info.core.formatter import format_output
