from .prompts import PromptBuilder
from .rewriter import ReportRewriter

__all__ = ["PromptBuilder", "ReportRewriter"]
