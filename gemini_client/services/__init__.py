"""
Gemini REST services: request building and stream processing.
"""
