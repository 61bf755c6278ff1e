def _num(value):
    return None if value is None else f"{value:.2f}"


def _dt(value):
    return None if value is None else value.isoformat()


def course(c):
    return {
        "id": c.id, "code": c.code, "name": c.name, "credits": _num(c.credits),
        "description": c.description, "program_id": c.program_id, "semester_id": c.semester_id,
        "lecturer": c.lecturer.full_name if c.lecturer else None,
    }


def enrollment(e):
    return {
        "id": e.id, "student_id": e.student_id, "course_id": e.course_id,
        "semester_id": e.semester_id, "enrollment_date": _dt(e.enrollment_date),
    }


def grade(g):
    return {
        "id": g.id, "enrollment_id": g.enrollment_id,
        "cat_score": _num(g.cat_score), "exam_score": _num(g.exam_score),
        "total_score": _num(g.total_score), "letter_grade": g.letter_grade, "gpa": _num(g.gpa),
    }


def graded_course(row):
    data = grade(row["grade"])
    data["course"] = course(row["course"])
    if "student" in row:
        data["student"] = {"id": row["student"].id, "name": row["student"].full_name}
    return data


def enrolled_course(row):
    data = course(row["course"])
    data.update(materials_count=row["materials_count"],
                assignments_count=row["assignments_count"],
                quizzes_count=row["quizzes_count"])
    return data


def course_material(m):
    return {"id": m.id, "course_id": m.course_id, "title": m.title, "type": m.type,
            "file_url": m.file_url, "uploaded_at": _dt(m.uploaded_at)}


def material(row):
    data = course_material(row["material"])
    data["viewed"] = row["viewed"]
    return data


def material_stat(row):
    m = row["material"]
    return {"material_id": m.id, "title": m.title, "course": row["course"].code,
            "views": row["views"]}


def assignment_submission(s):
    return {"id": s.id, "assignment_id": s.assignment_id, "student_id": s.student_id,
            "file_url": s.file_url, "submitted_at": _dt(s.submitted_at),
            "grade": _num(s.grade), "remarks": s.remarks}


def quiz_submission(s):
    return {"id": s.id, "quiz_id": s.quiz_id, "student_id": s.student_id,
            "file_url": s.file_url, "submitted_at": _dt(s.submitted_at),
            "score": _num(s.score), "feedback": s.feedback}


def assignment(a):
    return {"id": a.id, "course_id": a.course_id, "title": a.title,
            "description": a.description, "file_url": a.file_url,
            "due_date": _dt(a.due_date), "assigned_date": _dt(a.assigned_date)}


def quiz(q):
    return {"id": q.id, "course_id": q.course_id, "title": q.title,
            "instructions": q.instructions, "file_url": q.file_url,
            "total_marks": q.total_marks, "quiz_date": _dt(q.quiz_date)}


def assignment_status(row):
    sub = row["submission"]
    data = assignment(row["item"])
    data.update(submitted=row["submitted"],
                submission=assignment_submission(sub) if sub else None)
    return data


def quiz_status(row):
    sub = row["submission"]
    data = quiz(row["item"])
    data.update(submitted=row["submitted"],
                submission=quiz_submission(sub) if sub else None)
    return data


def transcript(t):
    return {"id": t.id, "student_id": t.student_id, "semester_id": t.semester_id,
            "gpa": _num(t.gpa), "cgpa": _num(t.cgpa),
            "generated_date": _dt(t.generated_date), "file_url": t.file_url}


def user_log(log):
    return {"id": log.id, "user_id": log.user_id, "action": log.action,
            "target_table": log.target_table, "target_id": log.target_id,
            "timestamp": _dt(log.timestamp), "description": log.description}


def fee_structure(f):
    return {"id": f.id, "program_id": f.program_id, "semester_id": f.semester_id,
            "program": f.program.code, "semester": f.semester.name,
            "total_amount": _num(f.total_amount), "description": f.description}


def staff_salary(s):
    return {"id": s.id, "staff_id": s.staff_id, "staff": s.staff.full_name,
            "amount": _num(s.amount), "payment_date": _dt(s.payment_date),
            "status": s.status, "description": s.description}
