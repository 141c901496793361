from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user_schemas import UserResponse


class UserStats(BaseModel):
    admin: int = 0
    faculty: int = 0
    student: int = 0


class NoticeStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int = 0
    all: int = 0
    faculty: int = 0
    class_: int = Field(0, alias="class")
    section: int = 0


class AdminDashboard(BaseModel):
    users: UserStats
    notices: NoticeStats
    total_classes: int
    total_sections: int


class FacultyDashboard(BaseModel):
    my_notices: int
    my_classes: int
    total_students: int


class StudentDashboard(BaseModel):
    available_notices: int
    user_info: UserResponse
