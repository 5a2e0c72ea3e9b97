from app.features.scoring.services.engine import ScoreWeights, letter_grade, overall_score, score_page

__all__ = ["ScoreWeights", "letter_grade", "overall_score", "score_page"]
