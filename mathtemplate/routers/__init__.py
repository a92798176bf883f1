from mathtemplate.routers.analysis import router as analysis_router
from mathtemplate.routers.generation import router as generation_router
from mathtemplate.routers.problems import router as problems_router

__all__ = ["analysis_router", "generation_router", "problems_router"]
