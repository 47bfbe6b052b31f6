from .correct_response import CorrectResponse
from .formulation_and_controls import FormulationAndControls
from .num_parts_correct import NumPartsCorrect
from .renderer import OrderingRenderer
from .specific_grade_detail_feedback import SpecificGradeDetailFeedback

__all__ = [
    "CorrectResponse",
    "FormulationAndControls",
    "NumPartsCorrect",
    "OrderingRenderer",
    "SpecificGradeDetailFeedback",
]
