from minerva.models.page import PAGES_ACCESS
from minerva.routes.controller import ResourceController

pages = ResourceController("pages", PAGES_ACCESS)
router = pages.router
