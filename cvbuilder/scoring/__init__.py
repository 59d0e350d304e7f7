from .ats import ATSBreakdown, ATSScoreResult, overall_message, score_cv

__all__ = ["ATSBreakdown", "ATSScoreResult", "overall_message", "score_cv"]
