"""ScanGate — scan orchestration and risk gating for web application scanners."""

__version__ = "0.1.0"
