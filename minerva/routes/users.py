from minerva.models.user import USERS_ACCESS
from minerva.routes.controller import ResourceController

users = ResourceController("users", USERS_ACCESS, filterable=("role",))
router = users.router
