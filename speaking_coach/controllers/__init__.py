"""FastAPI routers acting as controllers in the MVC architecture."""

from . import analyze, prompts

__all__ = ["analyze", "prompts"]
