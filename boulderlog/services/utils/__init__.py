from boulderlog.services.utils.grade_service import GradeService, round_half_up

__all__ = ["GradeService", "round_half_up"]
