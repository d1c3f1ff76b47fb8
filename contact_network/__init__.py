"""
Contact Network Analysis

Social-graph analysis for contact relationship data.
"""

__version__ = "0.1.0"
