import csv
import sys

from sqlalchemy.orm import Session

from database.db import SessionLocal, init_db
from schemas.point_rules import PointRuleCreate, PointRuleParameters
from services import point_service

CSV_PATH = "data/point_rules.csv"  # ✅ 파일 경로

# CSV 컬럼: name, description, condition, point_value, trigger, is_active, created_by,
#           min_score, days_early, improvement_threshold, subject_id, grade_level_restriction
PARAMETER_COLUMNS = ("min_score", "days_early", "improvement_threshold", "subject_id", "grade_level_restriction")


def _row_to_rule(row: dict) -> PointRuleCreate:
    parameters = {col: row[col] for col in PARAMETER_COLUMNS if row.get(col)}
    return PointRuleCreate(
        name=row["name"],                                        # 규칙 이름
        description=row["description"],                          # 설명
        condition=row["condition"],                              # 조건 (6가지 중 하나)
        point_value=int(row["point_value"]),                     # 지급 포인트
        trigger=row.get("trigger") or "teacher_suggestion",      # automatic / teacher_suggestion
        is_active=(row.get("is_active") or "true").lower() in ("true", "1", "yes"),
        created_by=row.get("created_by") or "import",
        parameters=PointRuleParameters(**parameters),
    )


def import_point_rules(csv_path: str = CSV_PATH) -> int:
    init_db()
    db: Session = SessionLocal()
    count = 0
    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                point_service.create_rule(db, _row_to_rule(row))
                count += 1
    finally:
        db.close()
    print(f"✅ 포인트 규칙 CSV → DB 가져오기 완료 ({count}건)")
    return count


if __name__ == "__main__":
    import_point_rules(sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
