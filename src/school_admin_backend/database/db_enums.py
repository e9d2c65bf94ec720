'''
Closed enumerations of the school domain.
The database stores these as plain text; they are enforced by the pydantic layer.
'''
import enum


class ListableEnum(str, enum.Enum):
    """A custom Enum base class that can list all member values."""
    @classmethod
    def get_all_names(cls) -> list[str]:
        return [member.value for member in cls]


class UserRole(ListableEnum):
    ADMIN = "admin"
    PARENT = "parent"


class SchoolYearStatusEnum(ListableEnum):
    ONGOING = "en cours"
    FINISHED = "terminé"


class StudentStatusEnum(ListableEnum):
    ONGOING = "en cours"
    FINISHED = "terminé"
    SUSPENDED = "suspendu"
    EXPELLED = "renvoyé"


class PaymentStatusEnum(ListableEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"
