import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Staging = "staging"
    Development = "development"
    Test = "test"
    Local = "local"


class Role(enum.Enum):
    Student = "student"
    Teacher = "teacher"
    Guardian = "guardian"
    Admin = "admin"
    Staff = "staff"

    @classmethod
    def _missing_(cls, value: object) -> "Role | None":
        # guardians are called "responsable" by the legacy portals
        if isinstance(value, str) and value.lower() == "responsable":
            return cls.Guardian
        return None


class GradeType(enum.Enum):
    # stored values are the French labels used on report cards
    Test = "controle"
    Homework = "devoir"
    Participation = "participation"
    Exam = "examen"


class AttendanceStatus(enum.Enum):
    Present = "present"
    Absent = "absent"
    Late = "late"
    Excused = "excused"
