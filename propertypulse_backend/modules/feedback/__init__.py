"""User feedback for PropertyPulse."""

from .models import Feedback
from .schemas import FeedbackCreate, FeedbackResponse, FeedbackUpdate

__all__ = ["Feedback", "FeedbackCreate", "FeedbackResponse", "FeedbackUpdate"]
