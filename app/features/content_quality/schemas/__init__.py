from app.features.content_quality.schemas.content import ContentScoringSummary

__all__ = ["ContentScoringSummary"]
