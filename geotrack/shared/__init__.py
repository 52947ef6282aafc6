"""
Общие модели и DTO.
"""
