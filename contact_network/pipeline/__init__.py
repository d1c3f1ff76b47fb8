"""
Data Processing Pipeline

Components for loading network snapshots and writing analysis reports.
"""

from contact_network.pipeline.ingest import load_network_snapshot
from contact_network.pipeline.outputs import generate_outputs, OutputGenerator

__all__ = [
    "load_network_snapshot",
    "generate_outputs",
    "OutputGenerator",
]
