from complyscan.analysis.analyzer import ComplianceAnalyzer
from complyscan.analysis.base import BaseAnalyzer
from complyscan.analysis.factory import AnalyzerFactory

__all__ = ["AnalyzerFactory", "BaseAnalyzer", "ComplianceAnalyzer"]
