from .common import ErrorResponse, OkResponse
from .equipment import EquipmentListItem, EquipmentOut, StatusChangeOut, StatusEventOut
from .process import ProcessOut
from .user import UserOut
from .workshop import WorkshopOut

__all__ = [
    "ErrorResponse",
    "OkResponse",
    "EquipmentOut",
    "EquipmentListItem",
    "StatusChangeOut",
    "StatusEventOut",
    "ProcessOut",
    "UserOut",
    "WorkshopOut",
]
