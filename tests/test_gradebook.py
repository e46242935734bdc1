from schemas.grades import GradeRecord, GradeRecordCreate
from schemas.grading import DivisionLevel, GradeLevel
from schemas.students import Student
from services import gradebook


def _record(student_id, subject, score, grade=None, term=1):
    return GradeRecord(
        id=f"{student_id}-{subject}-{term}",
        student_id=student_id,
        class_id="c1",
        assignment_name=subject,
        score=score,
        liberian_grade=grade,
        term=term,
    )


# ==========================================================
# 성적 입력 시 등급 부여
# ==========================================================

def test_apply_liberian_grade_from_ca_and_exam():
    data = GradeRecordCreate(
        student_id="s1", class_id="c1", assignment_name="Mathematics",
        score="12", continuous_assessment=100, external_examination=0,
    )
    fields = gradebook.apply_liberian_grade(data)
    assert fields["score"] == "30"
    assert fields["liberian_grade"] == "F9"
    assert "id" not in fields


def test_apply_liberian_grade_from_numeric_score():
    data = GradeRecordCreate(student_id="s1", class_id="c1", assignment_name="Biology", score="72")
    fields = gradebook.apply_liberian_grade(data)
    assert fields["score"] == "72"
    assert fields["liberian_grade"] == "A3"


def test_letter_score_gets_no_liberian_grade():
    for score in ("B+", "85/100", None):
        data = GradeRecordCreate(student_id="s1", class_id="c1", assignment_name="Essay", score=score)
        fields = gradebook.apply_liberian_grade(data)
        assert fields["liberian_grade"] is None
        assert fields["score"] == (score or "")


# ==========================================================
# 마스터 성적표
# ==========================================================

def _class_fixture():
    students = [
        Student(id="s1", name="Musu Kollie", grade=12),
        Student(id="s2", name="Jallah Sumo", grade=12),
    ]
    grades = [
        _record("s1", "English Language", "62", GradeLevel.B3),
        _record("s1", "Mathematics", "46", GradeLevel.C6),
        _record("s1", "Biology", "85", GradeLevel.A1),
        _record("s1", "Chemistry", "52", GradeLevel.C5, term=2),
        _record("s1", "Geography", "57", GradeLevel.C4, term=2),
        _record("s1", "French", "20", GradeLevel.F9, term=3),
        _record("s1", "Homework", "A-", term=3),
        _record("s2", "English Language", "30", GradeLevel.F9),
        _record("s3", "Mathematics", "99", GradeLevel.A1),
    ]
    return students, grades


def test_student_performance():
    students, grades = _class_fixture()
    performance = gradebook.student_performance(students[0], grades)

    assert performance.term_averages == {1: (62 + 46 + 85) / 3, 2: (52 + 57) / 2, 3: 20.0}
    assert performance.overall_average == (62 + 46 + 85 + 52 + 57 + 20) / 6
    assert performance.credit_passes == 5
    assert performance.university_eligible is True
    assert performance.aggregate_score == 38
    assert performance.division == DivisionLevel.DIVISION_III


def test_student_without_grades():
    performance = gradebook.student_performance(Student(id="s9", name="New", grade=10), [])
    assert performance.overall_average == 0.0
    assert performance.term_averages == {1: 0.0, 2: 0.0, 3: 0.0}
    assert performance.aggregate_score == 0
    assert performance.division == DivisionLevel.NO_DIVISION


def test_class_summary_only_counts_class_students():
    students, grades = _class_fixture()
    summary = gradebook.class_summary(students, grades)

    assert summary.total_students == 2
    assert summary.total_grades == 8
    assert summary.average_score == (62 + 46 + 85 + 52 + 57 + 20 + 30) / 7
    # 8건 중 크레딧 5건
    assert summary.credit_pass_rate == 5 / 8 * 100
    assert summary.university_eligible == 1
    assert set(summary.grade_distribution) == set(GradeLevel)
    assert summary.grade_distribution[GradeLevel.F9] == 2
    assert summary.grade_distribution[GradeLevel.A2] == 0


def test_empty_class_summary():
    summary = gradebook.class_summary([], [])
    assert summary.total_grades == 0
    assert summary.average_score == 0.0
    assert summary.credit_pass_rate == 0.0


def test_non_finite_scores_are_not_numeric():
    for score in ("nan", "inf", "-Infinity", "1e400"):
        data = GradeRecordCreate(student_id="s1", class_id="c1", assignment_name="Biology", score=score)
        assert gradebook.apply_liberian_grade(data)["liberian_grade"] is None

    students = [Student(id="s1", name="Musu Kollie", grade=12)]
    grades = [_record("s1", "Biology", "nan"), _record("s1", "Chemistry", "inf"), _record("s1", "Physics", "64")]
    assert gradebook.student_performance(students[0], grades).overall_average == 64
    assert gradebook.class_summary(students, grades).average_score == 64
