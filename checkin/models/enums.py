from enum import Enum


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class UserRole(Enum):
    USER = "user"
    ADMIN = "admin"
