# octave_poet/refinement/base_refiner.py

from abc import ABC, abstractmethod
from octave_poet.models.poem import Poem
from octave_poet.models.validation import ValidationResult


class BaseRefiner(ABC):
    """Simple base class for all refiners"""

    @abstractmethod
    def refine(self, poem: Poem, validation: ValidationResult) -> Poem:
        """Return a revised poem addressing the failed checks"""
        pass

    @abstractmethod
    def should_refine(self, validation: ValidationResult) -> bool:
        """Decide if refinement is needed based on validation"""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Refiner name for logging"""
        pass
