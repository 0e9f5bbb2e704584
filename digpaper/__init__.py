"""
DigPaper - Sistema de gestão documental para obras
"""
__version__ = "1.0.0"
