from .anomaly_detector import AnomalyDetector
from .security_analyzer import SecurityAnalyzer

__all__ = ["AnomalyDetector", "SecurityAnalyzer"]
