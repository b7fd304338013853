"""
Advocate AI

AI-assisted legal drafting, question answering and structured extraction for a legal practice.
"""

__version__ = "1.0.0"
__author__ = "Advocate AI Team"
__description__ = "AI-assisted legal document generation and extraction service"
