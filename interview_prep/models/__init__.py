"""
Data models for the Interview Prep platform.
"""
