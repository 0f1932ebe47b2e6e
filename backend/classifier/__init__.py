"""Design-job classifier"""

from .design_jobs import is_design_job

__all__ = ['is_design_job']
