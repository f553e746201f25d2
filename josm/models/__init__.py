from .user import User
from .material import Material, MaterialTransaction
from .material_request import MaterialRequest
from .tool import Tool, ToolTransaction
from .board import Board, BoardTransaction
from .job_card import JobCard
from .customer_goods import CustomerGoods

__all__ = [
    "User", "Material", "MaterialTransaction", "MaterialRequest",
    "Tool", "ToolTransaction", "Board", "BoardTransaction",
    "JobCard", "CustomerGoods",
]
