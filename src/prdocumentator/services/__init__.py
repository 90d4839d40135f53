"""
Services: the analysis facade, the session store and the session-based
web analysis flow.
"""

from prdocumentator.services.analyzer import AnalyzerService
from prdocumentator.services.sessions import SessionStore
from prdocumentator.services.web_analysis import AuthResponse, WebAnalysisService

__all__ = [
    "AnalyzerService",
    "AuthResponse",
    "SessionStore",
    "WebAnalysisService",
]
