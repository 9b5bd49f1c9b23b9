from skillshare.services.feedback.store import FeedbackStore

__all__ = ["FeedbackStore"]
