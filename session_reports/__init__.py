from __future__ import annotations  # Session report package exports

from .models import PerformanceReport
from .pdf import generate_performance_report_pdf

__all__ = ["PerformanceReport", "generate_performance_report_pdf"]
