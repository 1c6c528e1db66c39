from .experiences import router as experiences_router
from .skills import router as skills_router
from .resume import router as resume_router
from .dashboard import router as dashboard_router

__all__ = [
    "experiences_router", "skills_router", "resume_router", "dashboard_router"
]
