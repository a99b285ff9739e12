"""Diagnostics Use Cases"""
from .diagnose import DiagnoseOutput, DiagnoseUseCase

__all__ = ["DiagnoseOutput", "DiagnoseUseCase"]
